"""
Noncentral beta kernels
=======================

The noncentral beta distribution with shapes ``a``, ``b`` and noncentrality
``lam`` is the Poisson(``lam/2``) mixture of central Beta(``a + k``, ``b``)
distributions. Its density, both tails and its raw moments are therefore
Poisson-weighted sums

    S = sum_k w_k * t_k,    w_k = exp(-lam/2) (lam/2)**k / k!,

whose terms ``t_k`` follow simple recurrences in ``k``:

- density: ``f_{k+1} = f_k * x (a + b + k) / (a + k)``;
- lower tail: ``I_x(a+k+1, b) = I_x(a+k, b) - T_k``;
- upper tail: ``1 - I_x(a+k+1, b) = 1 - I_x(a+k, b) + T_k``;
- with ``T_{k+1} = T_k * x (a + b + k) / (a + k + 1)``.

The upper tail only adds terms and is stable. The lower tail subtracts; it
runs in guard digits and is re-seeded from a direct incomplete-beta
evaluation whenever the recurrence has lost too many digits.

Summation stops once a bound on the remaining tail falls below ``eps`` times
the accumulated total. Past the Poisson mode the weights decrease at least
geometrically with ratio ``rho = (lam/2)/(k+1)``, so the remaining weight is
bounded by ``w_k * rho / (1 - rho)``.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
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
from pysatl_hiprec.special.beta import beta_density, incomplete_beta, log_beta
from pysatl_hiprec.types import Interval

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pysatl_hiprec.types import RealLike, Scalar

logger = logging.getLogger(__name__)

_GUARD_DIGITS = 10
_LOWER_TAIL_GUARD_DIGITS = 30
_RESEED_DIGITS = 20


def _check_parameters(a: Scalar, b: Scalar, lam: Scalar) -> None:
    for name, value in (("a", a), ("b", b)):
        if not (mp.isfinite(value) and value > 0):
            raise DomainError(f"Shape {name} must be positive and finite, got {mp.nstr(value, 10)}")
    if not (mp.isfinite(lam) and lam >= 0):
        raise DomainError(
            f"Noncentrality must be non-negative and finite, got {mp.nstr(lam, 10)}"
        )


def _poisson_weights(mean: Scalar) -> Iterator[tuple[int, Scalar, Scalar]]:
    """
    Yield ``(k, w_k, bound)`` for the Poisson(``mean``) weights.

    ``bound`` is an upper bound of ``sum_{j > k} w_j``, infinite while ``k``
    is below the Poisson mode. The generator stops at the series cap.
    """
    weight = mp.exp(-mean)
    for k in range(numeric_config().series_max_iter):
        rho = mean / (k + 1)
        bound = weight * rho / (1 - rho) if rho < 1 else mp.inf
        yield k, weight, bound
        weight *= rho


def _unpack(x: RealLike, a: RealLike, b: RealLike, lam: RealLike) -> tuple[Scalar, ...]:
    return to_scalar(x), to_scalar(a), to_scalar(b), to_scalar(lam)


def noncentral_beta_pdf(
    x: RealLike,
    a: RealLike,
    b: RealLike,
    lam: RealLike,
    eps: RealLike | None = None,
) -> Scalar:
    """
    Density of the noncentral beta distribution.

    Parameters
    ----------
    x : RealLike
        Point; the density is 0 outside ``[0, 1]``.
    a, b : RealLike
        Positive finite shapes.
    lam : RealLike
        Non-negative finite noncentrality.
    eps : RealLike, optional
        Relative truncation tolerance, ``mp.eps`` by default.

    Returns
    -------
    mpf
        Density value; the exact limit (possibly infinite) at ``x = 0`` and
        ``x = 1``.
    """
    x, a, b, lam = _unpack(x, a, b, lam)
    if any(mp.isnan(value) for value in (x, a, b, lam)):
        return mp.nan
    _check_parameters(a, b, lam)
    half = lam / 2
    if x < 0 or x > 1:
        return mpf(0)
    if x == 0:
        return mp.exp(-half) * beta_density(x, a, b)
    if x == 1:
        # Every mixture component shares the behaviour in b at x = 1.
        if b < 1:
            return mp.inf
        return a + half if b == 1 else mpf(0)
    if half == 0:
        return beta_density(x, a, b)

    eps = default_tolerance(eps)
    with guard_digits(_GUARD_DIGITS):
        term = beta_density(x, a, b)
        total = mpf(0)
        for k, weight, _ in _poisson_weights(half):
            contribution = weight * term
            total += contribution
            rho = half * x * (a + b + k) / ((k + 1) * (a + k))
            if rho < 1 and contribution * rho / (1 - rho) <= eps * total:
                break
            term *= x * (a + b + k) / (a + k)
        else:
            warn_precision("Noncentral beta density series hit the iteration cap")
    return +total


def _lower_tail(x: Scalar, a: Scalar, b: Scalar, half: Scalar, eps: Scalar) -> Scalar:
    with guard_digits(_LOWER_TAIL_GUARD_DIGITS):
        y = 1 - x
        current = incomplete_beta(x, a, b, Interval.LOWER, eps)
        seed = current
        step = mp.exp(a * mp.log(x) + b * mp.log(y) - log_beta(a, b)) / a
        reseed_level = mpf(10) ** (-_RESEED_DIGITS)
        total = mpf(0)
        for k, weight, bound in _poisson_weights(half):
            total += weight * current
            if bound * current <= eps * total:
                break
            following = current - step
            if following <= seed * reseed_level:
                following = incomplete_beta(x, a + k + 1, b, Interval.LOWER, eps)
                seed = following
                logger.debug("Lower tail recurrence re-seeded at k=%d", k + 1)
            step *= x * (a + b + k) / (a + k + 1)
            current = following
        else:
            warn_precision("Noncentral beta lower tail series hit the iteration cap")
    return total


def _upper_tail(x: Scalar, a: Scalar, b: Scalar, half: Scalar, eps: Scalar) -> Scalar:
    with guard_digits(_GUARD_DIGITS):
        y = 1 - x
        current = incomplete_beta(x, a, b, Interval.UPPER, eps)
        step = mp.exp(a * mp.log(x) + b * mp.log(y) - log_beta(a, b)) / a
        total = mpf(0)
        for k, weight, bound in _poisson_weights(half):
            total += weight * current
            # Later terms never exceed 1.
            if bound <= eps * total:
                break
            current += step
            step *= x * (a + b + k) / (a + k + 1)
        else:
            warn_precision("Noncentral beta upper tail series hit the iteration cap")
    return total


def noncentral_beta_cdf(
    x: RealLike,
    a: RealLike,
    b: RealLike,
    lam: RealLike,
    interval: Interval = Interval.LOWER,
    eps: RealLike | None = None,
) -> Scalar:
    """
    Cumulative distribution function of the noncentral beta distribution.

    Parameters
    ----------
    x : RealLike
        Point in ``[0, 1]``.
    a, b : RealLike
        Positive finite shapes.
    lam : RealLike
        Non-negative finite noncentrality.
    interval : Interval, default=Interval.LOWER
        ``LOWER`` for ``P(X <= x)``, ``UPPER`` for ``P(X > x)``.
    eps : RealLike, optional
        Relative truncation tolerance, ``mp.eps`` by default.

    Raises
    ------
    DomainError
        If a parameter is invalid or ``x`` is outside ``[0, 1]``.
    """
    x, a, b, lam = _unpack(x, a, b, lam)
    if any(mp.isnan(value) for value in (x, a, b, lam)):
        return mp.nan
    _check_parameters(a, b, lam)
    if x < 0 or x > 1:
        raise DomainError(f"Noncentral beta is supported on [0, 1], got {mp.nstr(x, 10)}")
    interval = Interval(interval)
    lower = interval is Interval.LOWER
    if x == 0:
        return mpf(0) if lower else mpf(1)
    if x == 1:
        return mpf(1) if lower else mpf(0)
    half = lam / 2
    if half == 0:
        return incomplete_beta(x, a, b, interval, eps)

    eps = default_tolerance(eps)
    result = _lower_tail(x, a, b, half, eps) if lower else _upper_tail(x, a, b, half, eps)
    return +result


def noncentral_beta_raw_moment(
    n: int,
    a: RealLike,
    b: RealLike,
    lam: RealLike,
    eps: RealLike | None = None,
) -> Scalar:
    """
    Raw moment ``E[X**n]`` of the noncentral beta distribution.

    Each mixture component contributes
    ``prod_{j<n} (a + k + j) / (a + b + k + j)``, which lies in ``(0, 1]``.
    """
    if n < 0:
        raise DomainError(f"Moment order must be non-negative, got {n}")
    a, b, lam = to_scalar(a), to_scalar(b), to_scalar(lam)
    if any(mp.isnan(value) for value in (a, b, lam)):
        return mp.nan
    _check_parameters(a, b, lam)
    if n == 0:
        return mpf(1)

    def component(k: int) -> Scalar:
        value = mpf(1)
        for j in range(n):
            value *= (a + k + j) / (a + b + k + j)
        return value

    half = lam / 2
    if half == 0:
        return component(0)

    eps = default_tolerance(eps)
    with guard_digits(_GUARD_DIGITS):
        total = mpf(0)
        for k, weight, bound in _poisson_weights(half):
            total += weight * component(k)
            if bound <= eps * total:
                break
        else:
            warn_precision("Noncentral beta moment series hit the iteration cap")
    return +total


__all__ = [
    "noncentral_beta_pdf",
    "noncentral_beta_cdf",
    "noncentral_beta_raw_moment",
]
