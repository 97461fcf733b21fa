"""
Sampling Interfaces
===================

This module defines the sample protocol and the lazy inverse-transform sample
produced by the default sampling strategy.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol

import numpy as np
from mpmath import mp

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from typing import Any

    import numpy.typing as npt

    from pysatl_hiprec.types import RealLike, Scalar


class Sample(Protocol):
    """
    Protocol for sample containers.

    A sample has a fixed length and yields native floats.
    """

    def __len__(self) -> int: ...
    def __iter__(self) -> Iterator[float]: ...


class InverseTransformSample:
    """
    Lazy, finite, single-pass sample drawn by inverse transform.

    Every element consumes exactly one ``rng.random()`` draw, a uniform on
    ``[0, 1)``, and maps it through ``ppf`` at ``dps`` decimal digits.
    Iterating again continues from where the previous iteration stopped;
    exhausted samples stay exhausted.

    Parameters
    ----------
    ppf : Callable[[RealLike], mpf]
        Lower-tail quantile function.
    n : int
        Number of elements.
    rng : numpy.random.Generator
        Uniform source.
    dps : int
        Working precision of the quantile evaluations.
    """

    __slots__ = ("_ppf", "_n", "_rng", "_dps", "_drawn")

    def __init__(
        self,
        ppf: Callable[[RealLike], Scalar],
        n: int,
        rng: np.random.Generator,
        dps: int,
    ) -> None:
        if n < 0:
            raise ValueError(f"Sample size must be non-negative, got {n}")
        self._ppf = ppf
        self._n = n
        self._rng = rng
        self._dps = dps
        self._drawn = 0

    def __len__(self) -> int:
        """Return the total number of elements (drawn or not)."""
        return self._n

    def __iter__(self) -> InverseTransformSample:
        return self

    def __next__(self) -> float:
        if self._drawn >= self._n:
            raise StopIteration
        u = self._rng.random()
        self._drawn += 1
        with mp.workdps(self._dps):
            return float(self._ppf(u))

    @property
    def remaining(self) -> int:
        """Number of elements not yet drawn."""
        return self._n - self._drawn

    def to_array(self) -> npt.NDArray[np.floating[Any]]:
        """Draw all remaining elements into a 1D float array."""
        return np.fromiter(self, dtype=np.float64, count=self.remaining)


__all__ = [
    "Sample",
    "InverseTransformSample",
]
