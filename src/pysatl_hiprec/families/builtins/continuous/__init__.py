"""
Built-in continuous distribution families.

This module contains implementations of continuous parametric families.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from pysatl_hiprec.families.builtins.continuous.argus import configure_argus_family
from pysatl_hiprec.families.builtins.continuous.benktander import configure_benktander_family
from pysatl_hiprec.families.builtins.continuous.chi_square import configure_chi_square_family
from pysatl_hiprec.families.builtins.continuous.noncentral_beta import (
    configure_noncentral_beta_family,
)

__all__ = [
    "configure_argus_family",
    "configure_benktander_family",
    "configure_chi_square_family",
    "configure_noncentral_beta_family",
]
