"""
Core Type Definitions
=====================

Fundamental types and data structures used throughout PySATL hiprec.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias

import numpy as np
from mpmath import mp, mpf

NumPyNumber = np.floating[Any] | np.integer[Any]
"""Type alias for NumPy numeric types."""

Number = NumPyNumber | int | float
"""Type alias for native numeric types."""

Scalar: TypeAlias = mpf
"""Extended-precision scalar used by every kernel."""

RealLike: TypeAlias = mpf | Number | str
"""Anything convertible to :data:`Scalar`."""


class Interval(StrEnum):
    """
    Tail selector for cumulative probabilities and quantiles.

    Attributes
    ----------
    LOWER : str
        Mass at or below the point, ``P(X <= x)``.
    UPPER : str
        Mass strictly above the point, ``P(X > x)``.
    """

    LOWER = "lower"
    UPPER = "upper"

    @property
    def other(self) -> "Interval":
        """The complementary tail."""
        return Interval.UPPER if self is Interval.LOWER else Interval.LOWER


@dataclass(frozen=True, slots=True)
class Interval1D:
    """
    Real interval with ``mpf`` endpoints.

    Parameters
    ----------
    left, right : RealLike
        Endpoints, converted to ``mpf``; infinite ones are allowed.
    left_closed, right_closed : bool, default=True
        Whether the endpoint belongs to the interval. An infinite endpoint is
        always open.
    """

    left: Scalar = mp.ninf
    right: Scalar = mp.inf
    left_closed: bool = True
    right_closed: bool = True

    def __post_init__(self) -> None:
        """Normalize endpoints to ``mpf`` and adjust closure for infinite ones."""
        object.__setattr__(self, "left", mpf(self.left))
        object.__setattr__(self, "right", mpf(self.right))
        if mp.isinf(self.left) and self.left_closed:
            object.__setattr__(self, "left_closed", False)
        if mp.isinf(self.right) and self.right_closed:
            object.__setattr__(self, "right_closed", False)

    def contains(self, x: RealLike) -> bool:
        """Membership of a finite point; NaN and infinities are never contained."""
        value = mpf(x.item() if isinstance(x, np.generic) else x)
        if mp.isnan(value):
            return False
        left_ok = value > self.left or (self.left_closed and value == self.left)
        right_ok = value < self.right or (self.right_closed and value == self.right)
        return bool(left_ok and right_ok)

    def __contains__(self, x: object) -> bool:
        """Same as :meth:`contains`."""
        return self.contains(x)  # type: ignore[arg-type]

    @property
    def is_bounded(self) -> bool:
        """Whether both endpoints are finite."""
        return bool(mp.isfinite(self.left) and mp.isfinite(self.right))


GenericCharacteristicName: TypeAlias = str
"""Type alias for characteristic names (e.g., 'pdf', 'cdf')."""

ParametrizationName: TypeAlias = str
"""Type alias for parametrization names."""

ScalarFunc = Callable[[Scalar], Scalar]
"""Type alias for scalar functions (mpf -> mpf)."""

TailFunc = Callable[[Scalar, Interval], Scalar]
"""Type alias for tail-aware functions such as ``cdf(x, interval)``."""


class CharacteristicName(StrEnum):
    """
    Enumeration of statistical distribution characteristics.

    A family registers a callable under each name it can evaluate in closed
    form; characteristics a family does not register are reported as NaN.
    """

    PDF = "pdf"
    CDF = "cdf"
    PPF = "ppf"
    MEAN = "mean"
    MEDIAN = "median"
    MODE = "mode"
    VAR = "var"
    SKEW = "skewness"
    KURT = "kurtosis"
    ENTROPY = "entropy"


class FamilyName(StrEnum):
    ARGUS = "Argus"
    BENKTANDER = "Benktander"
    CHI_SQUARE = "ChiSquare"
    NONCENTRAL_BETA = "NoncentralBeta"


__all__ = [
    "GenericCharacteristicName",
    "ParametrizationName",
    "ScalarFunc",
    "TailFunc",
    "Scalar",
    "RealLike",
    "Interval",
    "Interval1D",
    "NumPyNumber",
    "Number",
    "CharacteristicName",
    "FamilyName",
]
