"""
Gamma-function kernels
======================

Log-gamma and the regularized incomplete gamma functions

    P(a, x) = gamma(a, x) / Gamma(a),    Q(a, x) = 1 - P(a, x),

together with their inverse in ``x``.

For ``x < a + 1`` the power series of ``P`` converges quickly and without
cancellation; otherwise the Legendre continued fraction of ``Q`` is evaluated
with the modified Lentz algorithm. The complementary function is obtained by
subtraction only on the side where it is not small, inside guard digits.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

from mpmath import mp, mpf

from pysatl_hiprec.errors import DomainError
from pysatl_hiprec.precision import (
    check_probability,
    default_tolerance,
    guard_digits,
    numeric_config,
    to_scalar,
    warn_precision,
)
from pysatl_hiprec.stats.roots import find_quantile
from pysatl_hiprec.types import Interval

if TYPE_CHECKING:
    from pysatl_hiprec.types import RealLike, Scalar

_MAX_GUARD_DIGITS = 40


def log_gamma(x: RealLike) -> Scalar:
    """
    Natural logarithm of the gamma function for ``x > 0``.

    Raises
    ------
    DomainError
        If ``x <= 0``.
    """
    x = to_scalar(x)
    if mp.isnan(x):
        return mp.nan
    if x <= 0:
        raise DomainError(f"log_gamma is defined for x > 0, got {mp.nstr(x, 10)}")
    return mp.loggamma(x)


def _check_shape(a: Scalar) -> None:
    if not (mp.isfinite(a) and a > 0):
        raise DomainError(f"Shape parameter must be positive and finite, got {mp.nstr(a, 10)}")


def _log_prefactor(a: Scalar, x: Scalar) -> Scalar:
    """``log(x**a * exp(-x) / Gamma(a))``."""
    return a * mp.log(x) - x - mp.loggamma(a)


def _guard(a: Scalar, x: Scalar) -> int:
    # Exponent cancellation grows with log10(x); 1 - P cancels like a for small a.
    digits = 10 + int(mp.log10(1 + max(x, a)))
    if a < 1:
        digits += int(-mp.log10(a))
    return min(digits, _MAX_GUARD_DIGITS)


def _lower_series(a: Scalar, x: Scalar, eps: Scalar) -> Scalar:
    term = 1 / a
    total = term
    for n in range(1, numeric_config().series_max_iter + 1):
        term *= x / (a + n)
        total += term
        if term <= total * eps:
            break
    else:
        warn_precision(f"Incomplete gamma series did not converge for a={mp.nstr(a, 8)}")
    return total * mp.exp(_log_prefactor(a, x))


def _upper_continued_fraction(a: Scalar, x: Scalar, eps: Scalar) -> Scalar:
    tiny = mpf(2) ** (-4 * mp.prec)
    b = x + 1 - a
    c = 1 / tiny
    d = 1 / b
    h = d
    for i in range(1, numeric_config().series_max_iter + 1):
        an = -i * (i - a)
        b += 2
        d = an * d + b
        if abs(d) < tiny:
            d = tiny
        c = b + an / c
        if abs(c) < tiny:
            c = tiny
        d = 1 / d
        delta = d * c
        h *= delta
        if abs(delta - 1) <= eps:
            break
    else:
        warn_precision(
            f"Incomplete gamma continued fraction did not converge for a={mp.nstr(a, 8)}"
        )
    return h * mp.exp(_log_prefactor(a, x))


def incomplete_gamma(
    a: RealLike,
    x: RealLike,
    interval: Interval = Interval.LOWER,
    eps: RealLike | None = None,
) -> Scalar:
    """
    Regularized incomplete gamma function.

    Parameters
    ----------
    a : RealLike
        Shape, ``a > 0``.
    x : RealLike
        Argument, ``x >= 0``.
    interval : Interval, default=Interval.LOWER
        ``LOWER`` for ``P(a, x)``, ``UPPER`` for ``Q(a, x)``.
    eps : RealLike, optional
        Relative tolerance of the series, ``mp.eps`` by default.

    Returns
    -------
    mpf
        The requested tail; NaN if an argument is NaN.

    Raises
    ------
    DomainError
        If ``a`` is not positive and finite or ``x < 0``.
    """
    a, x = to_scalar(a), to_scalar(x)
    if mp.isnan(a) or mp.isnan(x):
        return mp.nan
    _check_shape(a)
    if x < 0:
        raise DomainError(f"Incomplete gamma is defined for x >= 0, got {mp.nstr(x, 10)}")
    interval = Interval(interval)
    lower = interval is Interval.LOWER

    if x == 0:
        return mpf(0) if lower else mpf(1)
    if mp.isinf(x):
        return mpf(1) if lower else mpf(0)

    eps = default_tolerance(eps)
    digits = _guard(a, x)
    with guard_digits(digits):
        if x < a + 1:
            # Q = 1 - P needs P to more digits than Q has
            p = _lower_series(a, x, eps if lower else eps * mpf(10) ** (-digits))
            result = p if lower else 1 - p
        else:
            q = _upper_continued_fraction(a, x, eps)
            result = 1 - q if lower else q
    return +result


def lower_incomplete_gamma(a: RealLike, x: RealLike, eps: RealLike | None = None) -> Scalar:
    """Regularized lower incomplete gamma function ``P(a, x)``."""
    return incomplete_gamma(a, x, Interval.LOWER, eps)


def upper_incomplete_gamma(a: RealLike, x: RealLike, eps: RealLike | None = None) -> Scalar:
    """Regularized upper incomplete gamma function ``Q(a, x)``."""
    return incomplete_gamma(a, x, Interval.UPPER, eps)


def gamma_density(a: Scalar, x: Scalar) -> Scalar:
    """Density of the standard gamma distribution, ``dP(a, x)/dx``."""
    if x <= 0:
        if a < 1:
            return mp.inf
        return mpf(1) if a == 1 else mpf(0)
    return mp.exp((a - 1) * mp.log(x) - x - mp.loggamma(a))


def _normal_tail_quantile(q: Scalar) -> Scalar:
    """Approximate ``z > 0`` with ``P(Z > z) = q`` for ``0 < q <= 1/2``."""
    if q > mpf("1e-10"):
        return mp.sqrt(2) * mp.erfinv(1 - 2 * q)
    t = -2 * mp.log(q)
    return mp.sqrt(t - mp.log(t) - mp.log(2 * mp.pi))


def _initial_guess(a: Scalar, p: Scalar, interval: Interval) -> Scalar:
    """Wilson-Hilferty starting point, with a power-law guess for tiny lower tails."""
    with mp.workdps(15):
        lower_mass = p if interval is Interval.LOWER else 1 - p
        upper_mass = 1 - p if interval is Interval.LOWER else p
        if lower_mass <= upper_mass:
            z = -_normal_tail_quantile(lower_mass) if lower_mass > 0 else mp.ninf
        else:
            z = _normal_tail_quantile(upper_mass) if upper_mass > 0 else mp.inf
        guess = mp.nan
        if mp.isfinite(z):
            guess = a * (1 - 1 / (9 * a) + z / (3 * mp.sqrt(a))) ** 3
        if not (mp.isfinite(guess) and guess > 0) and lower_mass > 0:
            guess = mp.exp((mp.log(lower_mass) + mp.loggamma(a + 1)) / a)
        if not (mp.isfinite(guess) and guess > 0):
            guess = a
    return mpf(guess)


def inverse_incomplete_gamma(
    a: RealLike,
    p: RealLike,
    interval: Interval = Interval.LOWER,
) -> Scalar:
    """
    Inverse of the regularized incomplete gamma function in ``x``.

    Parameters
    ----------
    a : RealLike
        Shape, ``a > 0``.
    p : RealLike
        Probability in ``[0, 1]``.
    interval : Interval, default=Interval.LOWER
        Solve ``P(a, x) = p`` (``LOWER``) or ``Q(a, x) = p`` (``UPPER``).

    Returns
    -------
    mpf
        ``x >= 0``; ``0`` or ``inf`` at the ends of the probability range.

    Raises
    ------
    DomainError
        If ``a`` is invalid or ``p`` is outside ``[0, 1]``.
    """
    a, p = to_scalar(a), to_scalar(p)
    if mp.isnan(a) or mp.isnan(p):
        return mp.nan
    _check_shape(a)
    check_probability(p)
    interval = Interval(interval)

    def cdf(x: Scalar, tail: Interval) -> Scalar:
        return incomplete_gamma(a, x, tail)

    def density(x: Scalar) -> Scalar:
        return gamma_density(a, x)

    return find_quantile(
        cdf,
        p,
        interval,
        left=mpf(0),
        right=mp.inf,
        pdf=density,
        x0=_initial_guess(a, p, interval),
    )


__all__ = [
    "log_gamma",
    "incomplete_gamma",
    "lower_incomplete_gamma",
    "upper_incomplete_gamma",
    "inverse_incomplete_gamma",
    "gamma_density",
]
