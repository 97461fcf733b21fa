"""
Quantile-matching fitters
=========================

Fit a parametric family to an empirical sample by matching quantiles over a
probability window.

The empirical quantiles are taken with :func:`numpy.quantile` (linear
interpolation) on a uniform probability grid; the candidate's quantiles come
from its extended-precision ``ppf``. The mismatch is their mean squared
difference, minimized over a scalar search variable with SciPy's bounded
Brent method.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from math import isfinite
from typing import TYPE_CHECKING, Any, NamedTuple

import numpy as np
from mpmath import mp, mpf
from scipy import optimize as _sp_optimize

from pysatl_hiprec.errors import DomainError, ParameterError
from pysatl_hiprec.precision import numeric_config

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from typing import TypeAlias

    import numpy.typing as npt

    from pysatl_hiprec.distributions.distribution import Distribution
    from pysatl_hiprec.families.distribution import ParametricFamilyDistribution
    from pysatl_hiprec.families.parametric_family import ParametricFamily
    from pysatl_hiprec.types import RealLike, Scalar

    ParameterMap: TypeAlias = Callable[[float], Mapping[str, RealLike]]

logger = logging.getLogger(__name__)


class FitResult(NamedTuple):
    """
    Outcome of a fit.

    Attributes
    ----------
    distribution : ParametricFamilyDistribution or None
        Best distribution found, ``None`` if the search failed.
    error : mpf
        Mean squared quantile mismatch of ``distribution``; NaN on failure.
    """

    distribution: ParametricFamilyDistribution | None
    error: Scalar


def prepare_data(data: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """
    Flatten ``data`` to a float array without NaNs.

    Raises
    ------
    ValueError
        If the sample is empty once NaNs are dropped.
    """
    values = np.asarray(data, dtype=np.float64).ravel()
    values = values[~np.isnan(values)]
    if values.size == 0:
        raise ValueError("Cannot fit a distribution to an empty sample")
    return values


def probability_grid(window: tuple[float, float], partitions: int) -> npt.NDArray[np.float64]:
    """
    Uniform grid of ``partitions + 1`` probabilities spanning ``window``.

    Raises
    ------
    DomainError
        If ``window`` is not ``0 <= lo < hi <= 1``.
    ValueError
        If ``partitions`` is not positive.
    """
    lo, hi = window
    if not 0 <= lo < hi <= 1:
        raise DomainError(f"Probability window must satisfy 0 <= lo < hi <= 1, got {window}")
    if partitions <= 0:
        raise ValueError(f"partitions must be positive, got {partitions}")
    return np.linspace(lo, hi, partitions + 1)


def quantile_mismatch(
    distribution: Distribution,
    probabilities: npt.ArrayLike,
    targets: npt.ArrayLike,
) -> Scalar:
    """Mean squared difference between ``distribution.ppf`` and ``targets``."""
    probabilities = np.asarray(probabilities, dtype=np.float64)
    targets = np.asarray(targets, dtype=np.float64)
    total = mpf(0)
    for p, target in zip(probabilities, targets, strict=True):
        delta = distribution.ppf(float(p)) - float(target)
        total += delta * delta
    return total / len(probabilities)


def fit_by_quantiles(
    family: ParametricFamily,
    data: npt.ArrayLike,
    window: tuple[float, float] = (0.05, 0.95),
    *,
    parameters_from: ParameterMap,
    bounds: tuple[float, float],
    partitions: int = 100,
    maxiter: int = 64,
    xatol: float = 1e-8,
) -> FitResult:
    """
    Fit ``family`` to ``data`` by a one-dimensional quantile-matching search.

    Parameters
    ----------
    family : ParametricFamily
        Family to fit.
    data : ArrayLike
        Observations; NaNs are ignored.
    window : tuple[float, float], default=(0.05, 0.95)
        Probability window of the matched quantiles.
    parameters_from : Callable[[float], Mapping[str, RealLike]]
        Maps the search variable to keyword parameters of the family.
    bounds : tuple[float, float]
        Search interval of the search variable.
    partitions : int, default=100
        Number of grid intervals in ``window``.
    maxiter : int, default=64
        Iteration budget of the search.
    xatol : float, default=1e-8
        Absolute tolerance of the search variable.

    Returns
    -------
    FitResult
        Best distribution and its mismatch, or ``(None, nan)`` if the search
        did not converge.
    """
    values = prepare_data(data)
    probabilities = probability_grid(window, partitions)
    targets = np.quantile(values, probabilities)
    dps = numeric_config().fitting_dps

    def objective(t: float) -> float:
        try:
            candidate = family(**parameters_from(float(t)))
        except ParameterError:
            return float("inf")
        with mp.workdps(dps):
            error = float(quantile_mismatch(candidate, probabilities, targets))
        return error if isfinite(error) else float("inf")

    options: dict[str, Any] = {"xatol": xatol, "maxiter": maxiter}
    result = _sp_optimize.minimize_scalar(
        objective, bounds=bounds, method="bounded", options=options
    )
    logger.debug(
        "Fit of %s: success=%s t=%s error=%s evaluations=%s",
        family.name,
        result.success,
        result.x,
        result.fun,
        result.nfev,
    )
    if not result.success or not isfinite(result.fun):
        return FitResult(None, mp.nan)
    return FitResult(family(**parameters_from(float(result.x))), mpf(result.fun))


__all__ = [
    "FitResult",
    "fit_by_quantiles",
    "prepare_data",
    "probability_grid",
    "quantile_mismatch",
]
