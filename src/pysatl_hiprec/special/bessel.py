"""
Modified Bessel function kernels.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

from mpmath import mp

from pysatl_hiprec.errors import DomainError
from pysatl_hiprec.precision import to_scalar

if TYPE_CHECKING:
    from pysatl_hiprec.types import RealLike, Scalar


def scaled_bessel_i(nu: RealLike, x: RealLike) -> Scalar:
    """
    Exponentially scaled modified Bessel function ``exp(-x) * I_nu(x)``.

    The scaled form stays of order ``x**-1/2`` where ``I_nu`` itself grows
    like ``exp(x)``.

    Raises
    ------
    DomainError
        If ``x < 0``.
    """
    nu, x = to_scalar(nu), to_scalar(x)
    if mp.isnan(nu) or mp.isnan(x):
        return mp.nan
    if x < 0:
        raise DomainError(f"scaled_bessel_i is defined for x >= 0, got {mp.nstr(x, 10)}")
    return mp.exp(-x) * mp.besseli(nu, x)


__all__ = [
    "scaled_bessel_i",
]
