"""
Scalar optimization in extended precision.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

from mpmath import mp, mpf

from pysatl_hiprec.precision import to_scalar

if TYPE_CHECKING:
    from pysatl_hiprec.types import RealLike, Scalar, ScalarFunc


def golden_section_maximize(
    f: ScalarFunc,
    lo: RealLike,
    hi: RealLike,
    *,
    tol: RealLike | None = None,
    max_iter: int = 400,
) -> Scalar:
    """
    Locate the maximum of a unimodal function on ``[lo, hi]``.

    Parameters
    ----------
    f : Callable[[mpf], mpf]
        Function to maximize.
    lo, hi : RealLike
        Finite search bounds.
    tol : RealLike, optional
        Relative width of the final bracket, ``sqrt(mp.eps)`` scaled by 16
        by default (the maximum cannot be located more sharply than that
        from function values alone).
    max_iter : int, default=400
        Cap on iterations.

    Returns
    -------
    mpf
        Abscissa of the best point found; a bound if the maximum sits there.
    """
    lo, hi = to_scalar(lo), to_scalar(hi)
    tol = 16 * mp.sqrt(mp.eps) if tol is None else to_scalar(tol)
    ratio = (mp.sqrt(5) - 1) / 2

    x1 = hi - ratio * (hi - lo)
    x2 = lo + ratio * (hi - lo)
    f1, f2 = f(x1), f(x2)
    for _ in range(max_iter):
        if hi - lo <= tol * max(abs(lo), abs(hi), mpf(1)):
            break
        if f1 >= f2:
            hi, x2, f2 = x2, x1, f1
            x1 = hi - ratio * (hi - lo)
            f1 = f(x1)
        else:
            lo, x1, f1 = x1, x2, f2
            x2 = lo + ratio * (hi - lo)
            f2 = f(x2)

    candidates = [(f1, x1), (f2, x2), (f(lo), lo), (f(hi), hi)]
    return max(candidates, key=lambda item: item[0])[1]


__all__ = [
    "golden_section_maximize",
]
