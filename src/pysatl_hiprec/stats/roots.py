"""
Quantile root-finder
====================

A single bracket-and-refine routine that inverts a tail-aware cumulative
distribution function. It is shared by every kernel that has no closed-form
quantile.

The search always targets the smaller tail mass (``p > 1/2`` is solved as
``1 - p`` in the opposite direction) and measures the residual in log space,
``log CDF(x, interval) - log p``, which keeps full relative precision for
probabilities far below the native floating-point epsilon.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from typing import TYPE_CHECKING

from mpmath import mp, mpf

from pysatl_hiprec.precision import check_probability, numeric_config, to_scalar, warn_precision
from pysatl_hiprec.types import Interval

if TYPE_CHECKING:
    from pysatl_hiprec.types import RealLike, Scalar, ScalarFunc, TailFunc

logger = logging.getLogger(__name__)

_MAX_EXPANSIONS = 64
_GEOMETRIC_SPLIT_RATIO = 64
# Residuals this many tolerances away signal lost precision.
_RESIDUAL_SLACK = 256


def _initial_guess(left: Scalar, right: Scalar) -> Scalar:
    left_finite, right_finite = mp.isfinite(left), mp.isfinite(right)
    if left_finite and right_finite:
        return (left + right) / 2
    if left_finite:
        return left + 1
    if right_finite:
        return right - 1
    return mpf(0)


def _step_toward(x: Scalar, bound: Scalar, growth: Scalar, upward: bool) -> Scalar:
    """Move from ``x`` toward ``bound``, accelerating with ``growth``."""
    if mp.isinf(bound):
        step = max(abs(x), mpf(1)) * (growth - 1)
        return x + step if upward else x - step
    return bound + (x - bound) / growth


def _warn_if_unresolved(g: Scalar, tol: Scalar, p: Scalar, interval: Interval) -> None:
    """Warn when the search stops on neighbouring representable points short of ``tol``."""
    if not abs(g) <= _RESIDUAL_SLACK * tol:
        warn_precision(
            f"Quantile bracket for p={mp.nstr(p, 8)} ({interval}) collapsed with "
            f"log residual {mp.nstr(g, 5)}; raise the working precision",
            stacklevel=4,
        )


def _split(lo: Scalar, hi: Scalar, left: Scalar, right: Scalar) -> Scalar:
    """
    Bisection point of ``[lo, hi]``.

    When the bracket spans many orders of magnitude relative to a finite
    support boundary (or to zero), the geometric mean of the distances is used
    so that tails are narrowed in a bounded number of steps.
    """
    if mp.isfinite(left):
        near, far = lo - left, hi - left
        if near > 0 and far > _GEOMETRIC_SPLIT_RATIO * near:
            return left + mp.sqrt(near * far)
    if mp.isfinite(right):
        near, far = right - hi, right - lo
        if near > 0 and far > _GEOMETRIC_SPLIT_RATIO * near:
            return right - mp.sqrt(near * far)
    if lo > 0 and hi > _GEOMETRIC_SPLIT_RATIO * lo:
        return mp.sqrt(lo * hi)
    if hi < 0 and lo < _GEOMETRIC_SPLIT_RATIO * hi:
        return -mp.sqrt(lo * hi)
    return (lo + hi) / 2


def find_quantile(
    cdf: TailFunc,
    p: RealLike,
    interval: Interval = Interval.LOWER,
    *,
    left: Scalar = mp.ninf,
    right: Scalar = mp.inf,
    pdf: ScalarFunc | None = None,
    x0: RealLike | None = None,
    tol: RealLike | None = None,
    max_iter: int | None = None,
) -> Scalar:
    """
    Solve ``cdf(x, interval) = p`` for ``x`` inside ``[left, right]``.

    Parameters
    ----------
    cdf : Callable[[mpf, Interval], mpf]
        Tail-aware cumulative distribution function, monotone in ``x``.
    p : RealLike
        Target probability in ``[0, 1]``.
    interval : Interval, default=Interval.LOWER
        Which tail ``p`` refers to.
    left, right : mpf
        Support boundaries (possibly infinite).
    pdf : Callable[[mpf], mpf], optional
        Density used as the local slope for Newton steps. Without it the
        refinement uses regula falsi.
    x0 : RealLike, optional
        Starting point, typically the mean, median or mode.
    tol : RealLike, optional
        Relative tolerance on the residual and on the bracket width,
        ``2**(16 - mp.prec)`` by default.
    max_iter : int, optional
        Cap on refinement steps, ``NumericConfig.root_max_iter`` by default.

    Returns
    -------
    mpf
        The quantile. ``p = 0`` and ``p = 1`` map to the support boundaries
        without a search; NaN maps to NaN.

    Raises
    ------
    DomainError
        If ``p`` is outside ``[0, 1]``.

    Warns
    -----
    PrecisionWarning
        If the bracket cannot be established or the iteration cap is reached.
        The best iterate found is returned.
    """
    p = to_scalar(p)
    if mp.isnan(p):
        return mp.nan
    check_probability(p)
    interval = Interval(interval)
    left, right = to_scalar(left), to_scalar(right)

    if p == 0:
        return left if interval is Interval.LOWER else right
    if p == 1:
        return right if interval is Interval.LOWER else left
    if p > 0.5:
        p, interval = 1 - p, interval.other

    sign = 1 if interval is Interval.LOWER else -1
    log_p = mp.log(p)
    tol = mpf(2) ** (16 - mp.prec) if tol is None else to_scalar(tol)
    max_iter = numeric_config().root_max_iter if max_iter is None else max_iter

    def residual(x: Scalar) -> tuple[Scalar, Scalar]:
        # Increasing in x for both tails; -inf/+inf where the mass vanishes.
        mass = cdf(x, interval)
        if mp.isnan(mass):
            return mp.nan, mass
        if mass <= 0:
            return sign * mp.ninf, mass
        return sign * (mp.log(mass) - log_p), mass

    x = mp.nan if x0 is None else to_scalar(x0)
    if not left < x < right:
        x = _initial_guess(left, right)

    g, mass = residual(x)
    if mp.isnan(g):
        return mp.nan
    if g == 0:
        return x

    lo: Scalar | None = x if g < 0 else None
    hi: Scalar | None = x if g > 0 else None
    g_lo, g_hi = (g, mp.nan) if g < 0 else (mp.nan, g)

    growth = mpf(2)
    for _ in range(_MAX_EXPANSIONS):
        if lo is not None and hi is not None:
            break
        upward = hi is None
        bound = right if upward else left
        candidate = _step_toward(x, bound, growth, upward)
        if candidate == x or candidate == bound:
            logger.debug("Quantile bracket collapsed on boundary %s", bound)
            _warn_if_unresolved(g, tol, p, interval)
            return x
        growth *= 2
        x = candidate
        g, mass = residual(x)
        if mp.isnan(g):
            return mp.nan
        if g == 0:
            return x
        if g < 0:
            lo, g_lo = x, g
        else:
            hi, g_hi = x, g
    else:
        if lo is None or hi is None:
            warn_precision(f"Could not bracket quantile for p={mp.nstr(p, 8)} ({interval})")
            return x

    assert lo is not None and hi is not None
    best_x, best_g = (lo, g_lo) if abs(g_lo) <= abs(g_hi) else (hi, g_hi)
    previous_g: Scalar | None = None

    for iteration in range(max_iter):
        candidate = None
        newton = False
        if pdf is not None:
            if mass > 0 and mp.isfinite(g):
                slope = pdf(x) / mass
                if slope > 0 and mp.isfinite(slope):
                    candidate = x - g / slope
                    newton = True
        elif mp.isfinite(g_lo) and mp.isfinite(g_hi):
            candidate = lo - g_lo * (hi - lo) / (g_hi - g_lo)

        stalled = previous_g is not None and abs(g) > abs(previous_g) / 2
        if candidate is None or not lo < candidate < hi or stalled:
            candidate = _split(lo, hi, left, right)
            newton = False
            if not lo < candidate < hi:
                _warn_if_unresolved(best_g, tol, p, interval)
                return best_x

        previous_g = g
        step = abs(candidate - x)
        x = candidate
        g, mass = residual(x)
        if mp.isnan(g):
            return mp.nan
        if g == 0:
            return x
        if g < 0:
            lo, g_lo = x, g
        else:
            hi, g_hi = x, g
        if abs(g) < abs(best_g):
            best_x, best_g = x, g

        if (
            abs(g) <= tol
            or hi - lo <= tol * max(abs(lo), abs(hi))
            or (newton and step <= tol * abs(x))
        ):
            logger.debug("Quantile converged after %d steps", iteration + 1)
            return best_x

    warn_precision(
        f"Quantile search for p={mp.nstr(p, 8)} ({interval}) stopped after {max_iter} steps"
    )
    return best_x


__all__ = [
    "find_quantile",
]
