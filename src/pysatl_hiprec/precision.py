"""
Numeric configuration
=====================

Working precision, iteration caps and scalar conversion helpers.

The extended-precision scalar is :class:`mpmath.mpf`; its precision is held by
the global :data:`mpmath.mp` context. :func:`configure_numerics` installs a
:class:`NumericConfig` and sets ``mp.dps`` accordingly. Kernels that need
temporary extra precision use :func:`guard_digits`.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
import sys
import warnings
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

import numpy as np
from mpmath import mp, mpf

from pysatl_hiprec.errors import DomainError, PrecisionWarning

if TYPE_CHECKING:
    from typing import Any

    from pysatl_hiprec.types import RealLike, Scalar

logger = logging.getLogger(__name__)

DEFAULT_DPS = 40

MAX_VALUE = mpf(sys.float_info.max)
"""Largest finite native double, as an extended-precision scalar."""

MIN_VALUE = mpf(sys.float_info.min)
"""Smallest positive normal native double, as an extended-precision scalar."""


@dataclass(frozen=True, slots=True)
class NumericConfig:
    """
    Precision and iteration budget of the numerical kernels.

    Parameters
    ----------
    dps : int, default=40
        Decimal digits of the working precision.
    sampling_dps : int, default=20
        Decimal digits used when mapping uniforms through the quantile.
    fitting_dps : int, default=20
        Decimal digits used while evaluating fitting objectives.
    series_max_iter : int, default=8192
        Cap on terms of series and continued fractions.
    root_max_iter : int, default=200
        Cap on refinement steps of the quantile root-finder.
    integration_max_points : int, default=65536
        Default cap on integrand evaluations of the adaptive quadrature.
    """

    dps: int = DEFAULT_DPS
    sampling_dps: int = 20
    fitting_dps: int = 20
    series_max_iter: int = 8192
    root_max_iter: int = 200
    integration_max_points: int = 65536

    def __post_init__(self) -> None:
        for name in ("dps", "sampling_dps", "fitting_dps"):
            if getattr(self, name) < 15:
                raise ValueError(f"{name} must be at least 15, got {getattr(self, name)}")
        for name in ("series_max_iter", "root_max_iter", "integration_max_points"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")


_config = NumericConfig()


def numeric_config() -> NumericConfig:
    """Return the active numeric configuration."""
    return _config


def configure_numerics(**overrides: Any) -> NumericConfig:
    """
    Install a numeric configuration and set the working precision.

    Parameters
    ----------
    **overrides
        Field values replacing those of the active configuration.

    Returns
    -------
    NumericConfig
        The configuration now in effect.
    """
    global _config
    _config = replace(_config, **overrides)
    mp.dps = _config.dps
    logger.debug("Numeric configuration set to %s", _config)
    return _config


def reset_numerics() -> NumericConfig:
    """Restore the default configuration and precision."""
    global _config
    _config = NumericConfig()
    mp.dps = _config.dps
    return _config


def guard_digits(digits: int = 10) -> Any:
    """
    Context manager raising the working precision by ``digits``.

    Values computed inside keep their extra bits; round them with ``+x``
    after leaving the block if the caller needs working-precision results.
    """
    return mp.workdps(mp.dps + digits)


def to_scalar(value: RealLike) -> Scalar:
    """
    Convert a native, NumPy or string number to an extended-precision scalar.

    Raises
    ------
    TypeError
        If the value cannot be interpreted as a real number.
    """
    if isinstance(value, mpf):
        return value
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, bool):
        raise TypeError("Boolean is not a real number")
    try:
        return mpf(value)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"Cannot convert {value!r} to an extended-precision scalar") from exc


def check_probability(p: Scalar) -> None:
    """
    Validate a probability argument.

    Raises
    ------
    DomainError
        If ``p`` is a real number outside ``[0, 1]``.
    """
    if p < 0 or p > 1:
        raise DomainError(f"Probability must be in [0, 1], got {mp.nstr(p, 10)}")


def default_tolerance(eps: RealLike | None) -> Scalar:
    """Relative tolerance ``eps`` or the machine epsilon of the working precision."""
    return mp.eps if eps is None else to_scalar(eps)


def warn_precision(message: str, stacklevel: int = 3) -> None:
    """Emit a :class:`PrecisionWarning`."""
    logger.debug(message)
    warnings.warn(message, PrecisionWarning, stacklevel=stacklevel)


__all__ = [
    "DEFAULT_DPS",
    "MAX_VALUE",
    "MIN_VALUE",
    "NumericConfig",
    "numeric_config",
    "configure_numerics",
    "reset_numerics",
    "guard_digits",
    "to_scalar",
    "check_probability",
    "default_tolerance",
    "warn_precision",
]
