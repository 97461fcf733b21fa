"""
Computation Primitives
======================

This module defines the callable wrapper a parametric family uses to expose a
characteristic of a concrete distribution:

- :class:`Computation`: protocol of a callable for a single characteristic.
- :class:`AnalyticalComputation`: an analytical callable provided by a
  family directly, with its parameters already bound.

Notes
-----
- All callables are **scalar** (``mpf -> mpf``). Tail-aware characteristics
  (``cdf``, ``ppf``) receive the :class:`~pysatl_hiprec.types.Interval` as the
  ``interval`` option.
- Characteristics without an argument (moments) are called with ``None``.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from mypy_extensions import KwArg

from pysatl_hiprec.types import (
    GenericCharacteristicName,
)

In = TypeVar("In")
Out = TypeVar("Out")


@runtime_checkable
class Computation(Protocol[In, Out]):
    """Callable for a single characteristic.

    Attributes
    ----------
    target : str
        The characteristic name this computation represents.

    Methods
    -------
    __call__(data, **options)
        Evaluate the characteristic at ``data``.
    """

    @property
    def target(self) -> GenericCharacteristicName: ...
    def __call__(self, data: In, **options: Any) -> Out: ...


@dataclass(frozen=True, slots=True)
class AnalyticalComputation(Generic[In, Out]):
    """Analytical computation provided directly by the family.

    Parameters
    ----------
    target : str
        Characteristic name (e.g., ``"pdf"``).
    func : Callable[[In, KwArg(Any)], Out]
        Analytical callable with the distribution parameters bound.
    """

    target: GenericCharacteristicName
    func: Callable[[In, KwArg(Any)], Out]

    def __call__(self, data: In, **options: Any) -> Out:
        """Evaluate the analytical function."""
        return self.func(data, **options)
