"""
Beta-function kernels
=====================

Log-beta and the regularized incomplete beta function ``I_x(a, b)`` with its
complement ``1 - I_x(a, b) = I_{1-x}(b, a)``.

The continued fraction is evaluated directly below ``x = (a + 1)/(a + b + 2)``
and through the symmetry relation above it, where it converges fastest.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

from mpmath import mp, mpf

from pysatl_hiprec.errors import DomainError
from pysatl_hiprec.precision import (
    default_tolerance,
    guard_digits,
    numeric_config,
    to_scalar,
    warn_precision,
)
from pysatl_hiprec.types import Interval

if TYPE_CHECKING:
    from pysatl_hiprec.types import RealLike, Scalar

_GUARD_DIGITS = 10


def _check_shapes(a: Scalar, b: Scalar) -> None:
    for name, value in (("a", a), ("b", b)):
        if not (mp.isfinite(value) and value > 0):
            raise DomainError(f"Shape {name} must be positive and finite, got {mp.nstr(value, 10)}")


def log_beta(a: RealLike, b: RealLike) -> Scalar:
    """
    Natural logarithm of the beta function ``B(a, b)``.

    Raises
    ------
    DomainError
        If a shape is not positive and finite.
    """
    a, b = to_scalar(a), to_scalar(b)
    if mp.isnan(a) or mp.isnan(b):
        return mp.nan
    _check_shapes(a, b)
    return mp.loggamma(a) + mp.loggamma(b) - mp.loggamma(a + b)


def _front(a: Scalar, b: Scalar, x: Scalar, y: Scalar) -> Scalar:
    """``x**a * y**b / (a * B(a, b))``."""
    return mp.exp(a * mp.log(x) + b * mp.log(y) - log_beta(a, b)) / a


def _continued_fraction(a: Scalar, b: Scalar, x: Scalar, eps: Scalar) -> Scalar:
    tiny = mpf(2) ** (-4 * mp.prec)
    qab, qap, qam = a + b, a + 1, a - 1
    c = mpf(1)
    d = 1 - qab * x / qap
    if abs(d) < tiny:
        d = tiny
    d = 1 / d
    h = d
    for m in range(1, numeric_config().series_max_iter + 1):
        m2 = 2 * m
        aa = m * (b - m) * x / ((qam + m2) * (a + m2))
        d = 1 + aa * d
        if abs(d) < tiny:
            d = tiny
        c = 1 + aa / c
        if abs(c) < tiny:
            c = tiny
        d = 1 / d
        h *= d * c
        aa = -(a + m) * (qab + m) * x / ((a + m2) * (qap + m2))
        d = 1 + aa * d
        if abs(d) < tiny:
            d = tiny
        c = 1 + aa / c
        if abs(c) < tiny:
            c = tiny
        d = 1 / d
        delta = d * c
        h *= delta
        if abs(delta - 1) <= eps:
            break
    else:
        warn_precision(
            f"Incomplete beta continued fraction did not converge "
            f"for a={mp.nstr(a, 8)}, b={mp.nstr(b, 8)}"
        )
    return h


def incomplete_beta(
    x: RealLike,
    a: RealLike,
    b: RealLike,
    interval: Interval = Interval.LOWER,
    eps: RealLike | None = None,
) -> Scalar:
    """
    Regularized incomplete beta function.

    Parameters
    ----------
    x : RealLike
        Argument in ``[0, 1]``.
    a, b : RealLike
        Positive finite shapes.
    interval : Interval, default=Interval.LOWER
        ``LOWER`` for ``I_x(a, b)``, ``UPPER`` for ``1 - I_x(a, b)``.
    eps : RealLike, optional
        Relative tolerance of the continued fraction, ``mp.eps`` by default.

    Returns
    -------
    mpf
        The requested tail; NaN if an argument is NaN.

    Raises
    ------
    DomainError
        If a shape is invalid or ``x`` is outside ``[0, 1]``.
    """
    x, a, b = to_scalar(x), to_scalar(a), to_scalar(b)
    if mp.isnan(x) or mp.isnan(a) or mp.isnan(b):
        return mp.nan
    _check_shapes(a, b)
    if x < 0 or x > 1:
        raise DomainError(f"Incomplete beta is defined for x in [0, 1], got {mp.nstr(x, 10)}")
    interval = Interval(interval)
    lower = interval is Interval.LOWER

    if x == 0:
        return mpf(0) if lower else mpf(1)
    if x == 1:
        return mpf(1) if lower else mpf(0)

    eps = default_tolerance(eps)
    tight_eps = eps * mpf(10) ** (-_GUARD_DIGITS)
    with guard_digits(_GUARD_DIGITS):
        y = 1 - x
        if x < (a + 1) / (a + b + 2):
            direct = _front(a, b, x, y) * _continued_fraction(
                a, b, x, eps if lower else tight_eps
            )
            result = direct if lower else 1 - direct
        else:
            swapped = _front(b, a, y, x) * _continued_fraction(
                b, a, y, tight_eps if lower else eps
            )
            result = 1 - swapped if lower else swapped
    return +result


def beta_density(x: Scalar, a: Scalar, b: Scalar) -> Scalar:
    """Density of the Beta(a, b) distribution, including its limits at 0 and 1."""
    if x < 0 or x > 1:
        return mpf(0)
    if x == 0:
        if a < 1:
            return mp.inf
        return 1 / mp.beta(a, b) if a == 1 else mpf(0)
    if x == 1:
        if b < 1:
            return mp.inf
        return 1 / mp.beta(a, b) if b == 1 else mpf(0)
    return mp.exp((a - 1) * mp.log(x) + (b - 1) * mp.log1p(-x) - log_beta(a, b))


__all__ = [
    "log_beta",
    "incomplete_beta",
    "beta_density",
]
