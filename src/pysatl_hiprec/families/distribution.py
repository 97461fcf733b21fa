"""
Concrete distribution instances with specific parameter values.

This module provides the implementation for individual distribution instances
created from parametric families. The handling shared by every family lives
here: NaN propagation, out-of-support arguments, probability validation and
the boundary cases of the quantile. Family functions are only called for
points strictly inside the support and probabilities strictly inside
``(0, 1)``.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mpmath import mp, mpf

from pysatl_hiprec.distributions.distribution import Distribution
from pysatl_hiprec.families.registry import ParametricFamilyRegister
from pysatl_hiprec.precision import check_probability, to_scalar
from pysatl_hiprec.types import CharacteristicName, Interval

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

    import numpy as np

    from pysatl_hiprec.distributions.computation import AnalyticalComputation
    from pysatl_hiprec.distributions.sampling import Sample
    from pysatl_hiprec.distributions.strategies import SamplingStrategy
    from pysatl_hiprec.distributions.support import ContinuousSupport
    from pysatl_hiprec.families.parametric_family import ParametricFamily
    from pysatl_hiprec.families.parametrizations import Parametrization
    from pysatl_hiprec.types import GenericCharacteristicName, RealLike, Scalar


@dataclass(frozen=True, slots=True)
class ParametricFamilyDistribution(Distribution):
    """
    A specific distribution instance from a parametric family.

    Represents a concrete distribution with specific parameter values,
    providing methods for computation and sampling. Instances are immutable.

    Parameters
    ----------
    family_name : str
        Name of the distribution family.
    parameters : Parametrization
        Validated parameter values for this distribution.
    _support : ContinuousSupport
        Support of this distribution.
    """

    family_name: str
    parameters: Parametrization
    _support: ContinuousSupport
    _analytical_cache: dict[GenericCharacteristicName, AnalyticalComputation[Any, Any]] | None = (
        field(default=None, init=False, repr=False, compare=False)
    )

    @property
    def family(self) -> ParametricFamily:
        """
        Get the parametric family this distribution belongs to.

        Returns
        -------
        ParametricFamily
            The parametric family of this distribution.
        """
        return ParametricFamilyRegister.get(self.family_name)

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]:
        """
        Get analytical computations for this distribution.

        Lazily computed and cached per instance.
        """
        if self._analytical_cache is None:
            computations = self.family._build_analytical_computations(self.parameters)
            object.__setattr__(self, "_analytical_cache", computations)
            return computations
        return self._analytical_cache

    @property
    def sampling_strategy(self) -> SamplingStrategy:
        """Get the sampling strategy for this distribution."""
        return self.family.sampling_strategy

    @property
    def support(self) -> ContinuousSupport:
        """Get the support of this distribution."""
        return self._support

    def _evaluate(self, characteristic: CharacteristicName, data: Any, **options: Any) -> Scalar:
        computation = self.analytical_computations.get(characteristic)
        if computation is None:
            raise RuntimeError(f"Family {self.family_name} provides no {characteristic}")
        return computation(data, **options)

    def _characteristic(self, characteristic: CharacteristicName) -> Scalar:
        computation = self.analytical_computations.get(characteristic)
        if computation is None:
            return mp.nan
        return computation(None)

    def pdf(self, x: RealLike) -> Scalar:
        """
        Probability density at ``x``.

        NaN maps to NaN and points outside the support (including the
        infinities) to exactly 0.
        """
        x = to_scalar(x)
        if mp.isnan(x):
            return mp.nan
        support = self.support
        if mp.isinf(x) or x < support.left or x > support.right:
            return mpf(0)
        return self._evaluate(CharacteristicName.PDF, x)

    def cdf(self, x: RealLike, interval: Interval = Interval.LOWER) -> Scalar:
        """
        Cumulative probability ``P(X <= x)`` (``LOWER``) or ``P(X > x)`` (``UPPER``).

        NaN maps to NaN; at or beyond the support boundaries the result is
        exactly 0 or 1.
        """
        x = to_scalar(x)
        interval = Interval(interval)
        if mp.isnan(x):
            return mp.nan
        lower = interval is Interval.LOWER
        support = self.support
        if x <= support.left:
            return mpf(0) if lower else mpf(1)
        if x >= support.right:
            return mpf(1) if lower else mpf(0)
        return self._evaluate(CharacteristicName.CDF, x, interval=interval)

    def ppf(self, p: RealLike, interval: Interval = Interval.LOWER) -> Scalar:
        """
        Quantile: the point where ``cdf(x, interval)`` equals ``p``.

        Raises
        ------
        DomainError
            If ``p`` is outside ``[0, 1]``.
        """
        p = to_scalar(p)
        interval = Interval(interval)
        if mp.isnan(p):
            return mp.nan
        check_probability(p)
        lower = interval is Interval.LOWER
        support = self.support
        if p == 0:
            return support.left if lower else support.right
        if p == 1:
            return support.right if lower else support.left
        return self._evaluate(CharacteristicName.PPF, p, interval=interval)

    quantile = ppf

    @property
    def mean(self) -> Scalar:
        return self._characteristic(CharacteristicName.MEAN)

    @property
    def median(self) -> Scalar:
        if CharacteristicName.MEDIAN in self.analytical_computations:
            return self._characteristic(CharacteristicName.MEDIAN)
        return self.ppf(mpf(0.5))

    @property
    def mode(self) -> Scalar:
        return self._characteristic(CharacteristicName.MODE)

    @property
    def variance(self) -> Scalar:
        return self._characteristic(CharacteristicName.VAR)

    @property
    def skewness(self) -> Scalar:
        return self._characteristic(CharacteristicName.SKEW)

    @property
    def kurtosis(self) -> Scalar:
        """Excess kurtosis."""
        return self._characteristic(CharacteristicName.KURT)

    @property
    def entropy(self) -> Scalar:
        """Differential entropy in nats."""
        return self._characteristic(CharacteristicName.ENTROPY)

    def sample(self, n: int, rng: np.random.Generator | int | None = None) -> Sample:
        """
        Generate samples from this distribution.

        Parameters
        ----------
        n : int
            Number of samples to generate.
        rng : numpy.random.Generator or int, optional
            Uniform source or seed.

        Returns
        -------
        Sample
            Lazy sample of length ``n``.
        """
        return self.sampling_strategy.sample(n, distr=self, rng=rng)

    def __str__(self) -> str:
        values = ",".join(
            f"{key}={mp.nstr(value, 15)}" for key, value in self.parameters.parameters.items()
        )
        return f"{self.family_name}[{values}]"
