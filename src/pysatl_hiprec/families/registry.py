"""
Global registry for parametric distribution families using singleton pattern.

The register maps family names (see :class:`~pysatl_hiprec.types.FamilyName`)
to configured :class:`ParametricFamily` objects. Built-in families are added
by :func:`~pysatl_hiprec.families.configuration.configure_families_register`.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import ClassVar

    from pysatl_hiprec.families.parametric_family import ParametricFamily


class ParametricFamilyRegister:
    """
    Process-wide register of parametric families, keyed by family name.

    Every instantiation returns the same object; the classmethods operate on
    that instance.
    """

    _instance: ClassVar[ParametricFamilyRegister | None] = None
    _registered_families: dict[str, ParametricFamily]

    def __new__(cls) -> ParametricFamilyRegister:
        """Create or return the singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._registered_families = {}
        return cls._instance

    @classmethod
    def get(cls, name: str) -> ParametricFamily:
        """
        Look up a family by name.

        Raises
        ------
        ValueError
            If no family is registered under ``name``.
        """
        self = cls()
        if name not in self._registered_families:
            raise ValueError(f"No family {name} found in register")
        return self._registered_families[name]

    @classmethod
    def register(cls, family: ParametricFamily) -> None:
        """
        Add ``family`` under its name.

        Raises
        ------
        ValueError
            If the name is taken.
        """
        self = cls()
        if family.name in self._registered_families:
            raise ValueError(f"Family {family.name} already found in register")
        self._registered_families[family.name] = family

    @classmethod
    def contains(cls, name: str) -> bool:
        """Check whether a family with the given name is registered."""
        return name in cls()._registered_families

    @classmethod
    def names(cls) -> Iterator[str]:
        """Iterate over the registered family names."""
        return iter(tuple(cls()._registered_families))

    @classmethod
    def _reset(cls) -> None:
        """Drop every registered family."""
        cls._instance = None
