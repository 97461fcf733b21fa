"""
Adaptive quadrature
===================

Globally adaptive Gauss-Legendre integration in extended precision.

Each sub-interval is integrated with the 16- and 32-point Gauss-Legendre
rules; their difference is the error estimate. Sub-intervals are refined
largest-error first until every estimate is below its local tolerance, which
halves with every split, or until the evaluation budget is spent. Running out
of budget is not an error: the best estimate is returned together with the
accumulated error estimate.

Unbounded ranges are mapped onto ``(0, 1]`` with ``x = a + (1 - t) / t``
(and its mirrored and folded variants), so tails are integrated without
truncation.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import heapq
import itertools
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from mpmath import mp, mpf

from pysatl_hiprec.precision import numeric_config, to_scalar

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pysatl_hiprec.types import RealLike, Scalar, ScalarFunc

logger = logging.getLogger(__name__)

_LOW_ORDER = 16
_HIGH_ORDER = 32
_EVALUATIONS_PER_ESTIMATE = _LOW_ORDER + _HIGH_ORDER


@dataclass(frozen=True, slots=True)
class QuadratureResult:
    """
    Outcome of an adaptive integration.

    Parameters
    ----------
    value : mpf
        Integral estimate.
    error : mpf
        Sum of the local error estimates of the accepted sub-intervals.
    evaluations : int
        Number of integrand evaluations spent.
    """

    value: Scalar
    error: Scalar
    evaluations: int


@lru_cache(maxsize=32)
def gauss_legendre_rule(n: int, prec: int) -> tuple[tuple[Scalar, Scalar], ...]:
    """
    Nodes and weights of the ``n``-point Gauss-Legendre rule on ``[-1, 1]``.

    Nodes are the roots of the Legendre polynomial ``P_n`` found by Newton
    iteration at ``prec + 20`` bits, so the rule is exact to the requested
    binary precision.

    Parameters
    ----------
    n : int
        Number of nodes (even).
    prec : int
        Binary precision the rule is computed for.

    Returns
    -------
    tuple[tuple[mpf, mpf], ...]
        ``(node, weight)`` pairs.
    """
    rule: list[tuple[Scalar, Scalar]] = []
    with mp.workprec(prec + 20):
        threshold = mp.eps * 4
        for i in range(1, n // 2 + 1):
            x = mp.cos(mp.pi * (i - mpf(1) / 4) / (n + mpf(1) / 2))
            for _ in range(100):
                p_prev, p_curr = mpf(1), x
                for k in range(2, n + 1):
                    p_prev, p_curr = p_curr, ((2 * k - 1) * x * p_curr - (k - 1) * p_prev) / k
                derivative = n * (x * p_curr - p_prev) / (x * x - 1)
                delta = p_curr / derivative
                x -= delta
                if abs(delta) <= threshold:
                    break
            p_prev, p_curr = mpf(1), x
            for k in range(2, n + 1):
                p_prev, p_curr = p_curr, ((2 * k - 1) * x * p_curr - (k - 1) * p_prev) / k
            derivative = n * (x * p_curr - p_prev) / (x * x - 1)
            weight = 2 / ((1 - x * x) * derivative * derivative)
            rule.append((x, weight))
            rule.append((-x, weight))
    return tuple(rule)


def _apply_rule(f: ScalarFunc, a: Scalar, b: Scalar, n: int) -> Scalar:
    center = (a + b) / 2
    half = (b - a) / 2
    total = mpf(0)
    for node, weight in gauss_legendre_rule(n, mp.prec):
        total += weight * f(center + half * node)
    return total * half


def _estimate(f: ScalarFunc, a: Scalar, b: Scalar) -> tuple[Scalar, Scalar]:
    high = _apply_rule(f, a, b, _HIGH_ORDER)
    low = _apply_rule(f, a, b, _LOW_ORDER)
    return high, abs(high - low)


def _right_tail(f: ScalarFunc, a: Scalar) -> ScalarFunc:
    def mapped(t: Scalar) -> Scalar:
        return f(a + (1 - t) / t) / (t * t)

    return mapped


def _left_tail(f: ScalarFunc, b: Scalar) -> ScalarFunc:
    def mapped(t: Scalar) -> Scalar:
        return f(b - (1 - t) / t) / (t * t)

    return mapped


def _both_tails(f: ScalarFunc) -> ScalarFunc:
    def mapped(t: Scalar) -> Scalar:
        u = (1 - t) / t
        return (f(u) + f(-u)) / (t * t)

    return mapped


def _pieces(
    f: ScalarFunc, a: Scalar, b: Scalar, points: Iterable[RealLike]
) -> list[tuple[ScalarFunc, Scalar, Scalar]]:
    """Split ``[a, b]`` at ``points`` and map unbounded pieces onto ``(0, 1]``."""
    cuts = sorted(
        {
            value
            for value in (to_scalar(point) for point in points)
            if mp.isfinite(value) and a < value < b
        }
    )
    edges = [a, *cuts, b]
    pieces: list[tuple[ScalarFunc, Scalar, Scalar]] = []
    for lo, hi in itertools.pairwise(edges):
        if mp.isinf(lo) and mp.isinf(hi):
            pieces.append((_both_tails(f), mpf(0), mpf(1)))
        elif mp.isinf(hi):
            pieces.append((_right_tail(f, lo), mpf(0), mpf(1)))
        elif mp.isinf(lo):
            pieces.append((_left_tail(f, hi), mpf(0), mpf(1)))
        else:
            pieces.append((f, lo, hi))
    return pieces


def adaptive_integrate(
    f: ScalarFunc,
    a: RealLike,
    b: RealLike,
    *,
    eps: RealLike | None = None,
    max_points: int | None = None,
    points: Iterable[RealLike] = (),
) -> QuadratureResult:
    """
    Integrate ``f`` over ``[a, b]``, either endpoint possibly infinite.

    Parameters
    ----------
    f : Callable[[mpf], mpf]
        Integrand. It is never evaluated at an endpoint.
    a, b : RealLike
        Integration limits.
    eps : RealLike, optional
        Absolute error target, ``2**(20 - mp.prec)`` by default.
    max_points : int, optional
        Budget of integrand evaluations,
        ``NumericConfig.integration_max_points`` by default.
    points : Iterable[RealLike], default=()
        Points inside ``(a, b)`` where the integrand is not smooth; the range
        is split there before refinement starts.

    Returns
    -------
    QuadratureResult
        Best estimate within the budget.
    """
    a, b = to_scalar(a), to_scalar(b)
    eps = mpf(2) ** (20 - mp.prec) if eps is None else to_scalar(eps)
    max_points = numeric_config().integration_max_points if max_points is None else max_points

    if a == b:
        return QuadratureResult(mpf(0), mpf(0), 0)
    if a > b:
        flipped = adaptive_integrate(f, b, a, eps=eps, max_points=max_points, points=points)
        return QuadratureResult(-flipped.value, flipped.error, flipped.evaluations)

    pieces = _pieces(f, a, b, points)
    local_eps = eps / len(pieces)
    counter = itertools.count()
    heap: list[tuple[Scalar, int, ScalarFunc, Scalar, Scalar, Scalar, Scalar, Scalar]] = []
    evaluations = 0

    for integrand, lo, hi in pieces:
        value, error = _estimate(integrand, lo, hi)
        evaluations += _EVALUATIONS_PER_ESTIMATE
        heapq.heappush(heap, (-error, next(counter), integrand, lo, hi, value, error, local_eps))

    total, total_error = mpf(0), mpf(0)
    while heap:
        _, _, integrand, lo, hi, value, error, tolerance = heapq.heappop(heap)
        mid = (lo + hi) / 2
        if error <= tolerance or evaluations >= max_points or not lo < mid < hi:
            total += value
            total_error += error
            continue
        for sub_lo, sub_hi in ((lo, mid), (mid, hi)):
            sub_value, sub_error = _estimate(integrand, sub_lo, sub_hi)
            evaluations += _EVALUATIONS_PER_ESTIMATE
            heapq.heappush(
                heap,
                (
                    -sub_error,
                    next(counter),
                    integrand,
                    sub_lo,
                    sub_hi,
                    sub_value,
                    sub_error,
                    tolerance / 2,
                ),
            )

    if evaluations >= max_points:
        logger.debug(
            "Integration budget of %d points exhausted, error estimate %s",
            max_points,
            mp.nstr(total_error, 5),
        )
    return QuadratureResult(total, total_error, evaluations)


__all__ = [
    "QuadratureResult",
    "adaptive_integrate",
    "gauss_legendre_rule",
]
