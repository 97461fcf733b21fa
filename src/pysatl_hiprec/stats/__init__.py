"""
Numerical engines shared by the distribution kernels: quantile root-finding,
adaptive quadrature, scalar optimization and moment re-centering.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .moments import ShapeMoments, shape_from_raw_moments, transform_center
from .optimize import golden_section_maximize
from .quadrature import QuadratureResult, adaptive_integrate, gauss_legendre_rule
from .roots import find_quantile

__all__ = [
    "QuadratureResult",
    "ShapeMoments",
    "adaptive_integrate",
    "find_quantile",
    "gauss_legendre_rule",
    "golden_section_maximize",
    "shape_from_raw_moments",
    "transform_center",
]
