"""
PySATL hiprec
=============

Continuous probability distributions evaluated in extended precision:
densities, tail probabilities, quantiles, moments, inverse-transform sampling
and quantile-matching fits, built on ``mpmath`` special-function kernels.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from importlib.metadata import version

from .distributions import *
from .distributions import __all__ as _distr_all
from .errors import *
from .errors import __all__ as _errors_all
from .families import *
from .families import __all__ as _family_all
from .precision import (
    MAX_VALUE,
    MIN_VALUE,
    NumericConfig,
    configure_numerics,
    numeric_config,
    reset_numerics,
)
from .types import *
from .types import __all__ as _types_all

configure_numerics()

__version__ = version("pysatl-hiprec")
__all__ = [
    "__version__",
    "MAX_VALUE",
    "MIN_VALUE",
    "NumericConfig",
    "configure_numerics",
    "numeric_config",
    "reset_numerics",
    *_distr_all,
    *_errors_all,
    *_family_all,
    *_types_all,
]

del _distr_all
del _errors_all
del _family_all
del _types_all
