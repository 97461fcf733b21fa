"""
Moments from raw moments
========================

Central and standardized moments obtained from the raw moments
``E[X**i]``, for families whose raw moments have closed forms or fast
series. The binomial re-centering cancels heavily when the mean is large
relative to the spread, so callers evaluate the raw moments with guard
digits.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, NamedTuple

from mpmath import mp, mpf

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pysatl_hiprec.types import Scalar


class ShapeMoments(NamedTuple):
    """Mean, variance, skewness and excess kurtosis."""

    mean: Scalar
    variance: Scalar
    skewness: Scalar
    kurtosis: Scalar


def transform_center(order: int, raw_moments: Sequence[Scalar], center: Scalar) -> Scalar:
    """
    Moment of ``order`` about ``center`` from the raw moments.

    ``raw_moments[i]`` must hold ``E[X**i]`` for ``i = 0..order``.
    """
    total = mpf(0)
    for i in range(order + 1):
        total += mp.binomial(order, i) * raw_moments[i] * (-center) ** (order - i)
    return total


def shape_from_raw_moments(raw_moments: Sequence[Scalar]) -> ShapeMoments:
    """
    Shape characteristics from ``E[X**0]`` through ``E[X**4]``.

    Returns
    -------
    ShapeMoments
        Mean, variance, skewness ``mu_3 / mu_2**1.5`` and excess kurtosis
        ``mu_4 / mu_2**2 - 3``. NaN where the variance is not positive.
    """
    mean = raw_moments[1]
    variance = transform_center(2, raw_moments, mean)
    if not variance > 0:
        return ShapeMoments(mean, variance, mp.nan, mp.nan)
    third = transform_center(3, raw_moments, mean)
    fourth = transform_center(4, raw_moments, mean)
    return ShapeMoments(
        mean=mean,
        variance=variance,
        skewness=third / variance ** mpf(1.5),
        kurtosis=fourth / (variance * variance) - 3,
    )


__all__ = [
    "ShapeMoments",
    "shape_from_raw_moments",
    "transform_center",
]
