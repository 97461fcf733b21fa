"""
Special-function kernels evaluated in extended precision.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .bessel import scaled_bessel_i
from .beta import beta_density, incomplete_beta, log_beta
from .gamma import (
    gamma_density,
    incomplete_gamma,
    inverse_incomplete_gamma,
    log_gamma,
    lower_incomplete_gamma,
    upper_incomplete_gamma,
)
from .noncentral import (
    noncentral_beta_cdf,
    noncentral_beta_pdf,
    noncentral_beta_raw_moment,
)

__all__ = [
    "beta_density",
    "gamma_density",
    "incomplete_beta",
    "incomplete_gamma",
    "inverse_incomplete_gamma",
    "log_beta",
    "log_gamma",
    "lower_incomplete_gamma",
    "noncentral_beta_cdf",
    "noncentral_beta_pdf",
    "noncentral_beta_raw_moment",
    "scaled_bessel_i",
    "upper_incomplete_gamma",
]
