from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pysatl_hiprec.types import Interval1D

if TYPE_CHECKING:
    from pysatl_hiprec.types import RealLike, Scalar


@runtime_checkable
class Support(Protocol):
    def contains(self, x: RealLike) -> bool: ...


class ContinuousSupport(Interval1D, Support):
    """Interval support of a continuous univariate distribution."""

    __slots__ = ()

    @property
    def infimum(self) -> Scalar:
        """Greatest lower bound (possibly ``-inf``)."""
        return self.left

    @property
    def supremum(self) -> Scalar:
        """Least upper bound (possibly ``inf``)."""
        return self.right


__all__ = [
    "Support",
    "ContinuousSupport",
]
