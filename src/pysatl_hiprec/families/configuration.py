"""
Distribution Families Configuration
====================================

This module defines and configures parametric distribution families for the PySATL hiprec library:

- :class:`Argus Family`: ARGUS background shape on the unit interval.
- :class:`Benktander Family`: Benktander type II loss distribution.
- :class:`ChiSquare Family`: chi-square distribution with real degrees of freedom.
- :class:`NoncentralBeta Family`: Poisson mixture of beta distributions.

Notes
-----
- All families are registered in the global ParametricFamilyRegister.
- Every characteristic is evaluated in extended precision; characteristics a
  family does not define are reported as NaN.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from functools import lru_cache

from pysatl_hiprec.families.builtins import (
    configure_argus_family,
    configure_benktander_family,
    configure_chi_square_family,
    configure_noncentral_beta_family,
)
from pysatl_hiprec.families.registry import ParametricFamilyRegister


@lru_cache(maxsize=1)
def configure_families_register() -> ParametricFamilyRegister:
    """
    Configure and register all distribution families in the global registry.

    This function initializes all parametric families with their respective
    parameterizations, characteristics, fitters and sampling strategies. It
    should be called during application startup to make distributions
    available.

    Returns
    -------
    ParametricFamilyRegister
        The global registry of parametric families.
    """
    configure_argus_family()
    configure_benktander_family()
    configure_chi_square_family()
    configure_noncentral_beta_family()
    return ParametricFamilyRegister()


def reset_families_register() -> None:
    """
    Reset the cached families registry.
    """
    configure_families_register.cache_clear()
    ParametricFamilyRegister._reset()
