"""
Distribution Interface
======================

This module defines the public :class:`Distribution` protocol: the capability
set every continuous distribution kernel offers, independent of how its
family computes it.

Notes
-----
- Undefined characteristics are NaN, never exceptions.
- ``cdf`` and ``ppf`` take an :class:`~pysatl_hiprec.types.Interval`
  selecting the lower (``P(X <= x)``) or upper (``P(X > x)``) tail.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import numpy as np

    from pysatl_hiprec.distributions.sampling import Sample
    from pysatl_hiprec.distributions.support import ContinuousSupport
    from pysatl_hiprec.types import Interval, RealLike, Scalar


@runtime_checkable
class Distribution(Protocol):
    """Public distribution interface used by strategies, fitters and integrators."""

    @property
    def support(self) -> ContinuousSupport: ...

    def pdf(self, x: RealLike) -> Scalar: ...
    def cdf(self, x: RealLike, interval: Interval = ...) -> Scalar: ...
    def ppf(self, p: RealLike, interval: Interval = ...) -> Scalar: ...

    @property
    def mean(self) -> Scalar: ...
    @property
    def median(self) -> Scalar: ...
    @property
    def mode(self) -> Scalar: ...
    @property
    def variance(self) -> Scalar: ...
    @property
    def skewness(self) -> Scalar: ...
    @property
    def kurtosis(self) -> Scalar: ...
    @property
    def entropy(self) -> Scalar: ...

    def sample(self, n: int, rng: np.random.Generator | int | None = None) -> Sample: ...
