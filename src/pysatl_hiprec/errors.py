"""
Error taxonomy
==============

Exceptions and warnings raised by the distribution kernels.

Undefined characteristics (a moment that does not exist for the given
parameters, a mode at an unbounded boundary) are not errors: they are
reported as NaN and propagate through arithmetic.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


class ParameterError(ValueError):
    """Shape parameters violate a constraint of their parametrization."""


class DomainError(ValueError):
    """An argument lies outside the domain of the called function."""


class PrecisionWarning(RuntimeWarning):
    """
    An iterative kernel stopped at its iteration cap before reaching the
    requested tolerance. The returned value is the best estimate found.
    """


__all__ = [
    "ParameterError",
    "DomainError",
    "PrecisionWarning",
]
