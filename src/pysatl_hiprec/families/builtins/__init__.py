"""
Built-in distribution families for PySATL hiprec.

This package contains the extended-precision distribution families that are
available by default.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from pysatl_hiprec.families.builtins.continuous import (
    configure_argus_family,
    configure_benktander_family,
    configure_chi_square_family,
    configure_noncentral_beta_family,
)

__all__ = [
    "configure_argus_family",
    "configure_benktander_family",
    "configure_chi_square_family",
    "configure_noncentral_beta_family",
]
