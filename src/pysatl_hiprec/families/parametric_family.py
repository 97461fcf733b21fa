"""
Parametric families
===================

A :class:`ParametricFamily` ties together the parametrizations of a family,
the functions evaluating its characteristics in extended precision, its
support and, optionally, a quantile-matching fitter. Calling the family
validates the parameters and returns a :class:`ParametricFamilyDistribution`.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov, Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from functools import partial
from typing import TYPE_CHECKING, dataclass_transform

from pysatl_hiprec.distributions.computation import AnalyticalComputation
from pysatl_hiprec.distributions.strategies import DefaultSamplingUnivariateStrategy
from pysatl_hiprec.distributions.support import ContinuousSupport
from pysatl_hiprec.families.distribution import ParametricFamilyDistribution

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from typing import Any, TypeAlias

    import numpy.typing as npt

    from pysatl_hiprec.distributions.fitters import FitResult
    from pysatl_hiprec.distributions.strategies import SamplingStrategy
    from pysatl_hiprec.families.parametrizations import Parametrization
    from pysatl_hiprec.types import GenericCharacteristicName, ParametrizationName

    Characteristic: TypeAlias = Callable[..., Any]
    CharacteristicForms: TypeAlias = Mapping[ParametrizationName, Characteristic] | Characteristic
    SupportResolver: TypeAlias = Callable[[Parametrization], ContinuousSupport | None]
    Fitter: TypeAlias = Callable[[ParametricFamily, npt.ArrayLike, tuple[float, float], int], FitResult]


class ParametricFamily:
    """
    A family of continuous distributions indexed by shape parameters.

    Parameters
    ----------
    name : str
        Family name, the key of the family in the register.
    distr_parametrizations : list[ParametrizationName]
        Names of the parametrizations; the first one is the base.
    distr_characteristics : Mapping[str, Callable or Mapping[str, Callable]]
        Characteristic functions, each called as
        ``func(parameters, argument, **options)``. A bare function belongs to
        the base parametrization; a mapping gives forms for specific
        parametrizations. Parameters of a parametrization without its own
        form are converted to the base one first.
    sampling_strategy : SamplingStrategy, optional
        Defaults to inverse-transform sampling.
    support_by_parametrization : Callable, optional
        Support of the distribution with the given parameters; the whole
        real line when omitted or when it returns ``None``.
    fitter : Callable, optional
        Quantile-matching fitter, called as
        ``fitter(family, data, window, partitions)``.
    """

    def __init__(
        self,
        name: str,
        distr_parametrizations: list[ParametrizationName],
        distr_characteristics: Mapping[GenericCharacteristicName, CharacteristicForms],
        sampling_strategy: SamplingStrategy | None = None,
        support_by_parametrization: SupportResolver | None = None,
        fitter: Fitter | None = None,
    ):
        self._name = name
        self._fitter = fitter
        self._support = support_by_parametrization
        self._parametrizations: dict[ParametrizationName, type[Parametrization]] = {}

        self.parametrization_names: list[ParametrizationName] = list(distr_parametrizations)
        self.base_parametrization_name: ParametrizationName = self.parametrization_names[0]
        self.sampling_strategy: SamplingStrategy = (
            DefaultSamplingUnivariateStrategy() if sampling_strategy is None else sampling_strategy
        )
        self.distr_characteristics: dict[
            GenericCharacteristicName, dict[ParametrizationName, Characteristic]
        ] = {
            characteristic: (
                dict(forms) if isinstance(forms, dict) else {self.base_parametrization_name: forms}
            )
            for characteristic, forms in distr_characteristics.items()
        }

    @property
    def name(self) -> str:
        return self._name

    @property
    def parametrizations(self) -> dict[ParametrizationName, type[Parametrization]]:
        """Registered parametrization classes by name."""
        return self._parametrizations

    @property
    def base(self) -> type[Parametrization]:
        """
        The base parametrization class.

        Raises
        ------
        ValueError
            If the base parametrization has not been registered yet.
        """
        if self.base_parametrization_name not in self._parametrizations:
            raise ValueError(
                f"Base parametrization '{self.base_parametrization_name}' is not registered."
            )
        return self._parametrizations[self.base_parametrization_name]

    @property
    def fittable(self) -> bool:
        return self._fitter is not None

    def register_parametrization(
        self, name: ParametrizationName, parametrization_class: type[Parametrization]
    ) -> None:
        """Register ``parametrization_class`` under ``name``; names are unique."""
        if name in self._parametrizations:
            raise ValueError(f"Parametrization '{name}' is already registered.")
        self._parametrizations[name] = parametrization_class

    def to_base(self, parameters: Parametrization) -> Parametrization:
        """Express ``parameters`` in the base parametrization."""
        if parameters.name == self.base_parametrization_name:
            return parameters
        return parameters.transform_to_base_parametrization()

    def support_of(self, parameters: Parametrization) -> ContinuousSupport:
        """Support of the distribution with ``parameters``."""
        support = None if self._support is None else self._support(parameters)
        return ContinuousSupport() if support is None else support

    def _build_analytical_computations(
        self, parameters: Parametrization
    ) -> dict[GenericCharacteristicName, AnalyticalComputation[Any, Any]]:
        """Bind every characteristic to ``parameters`` or, lacking a form, their base."""
        computations: dict[GenericCharacteristicName, AnalyticalComputation[Any, Any]] = {}
        base_parameters: Parametrization | None = None
        for characteristic, forms in self.distr_characteristics.items():
            if parameters.name in forms:
                bound, func = parameters, forms[parameters.name]
            elif self.base_parametrization_name in forms:
                if base_parameters is None:
                    base_parameters = self.to_base(parameters)
                bound, func = base_parameters, forms[self.base_parametrization_name]
            else:
                continue
            computations[characteristic] = AnalyticalComputation(
                target=characteristic, func=partial(func, bound)
            )
        return computations

    def distribution(
        self,
        parametrization_name: str | None = None,
        **parameters_values: Any,
    ) -> ParametricFamilyDistribution:
        """
        Create a distribution with validated parameters.

        Parameters
        ----------
        parametrization_name : str, optional
            Parametrization of ``parameters_values``; the base by default.
        **parameters_values
            Parameter values, anything convertible to an extended-precision
            scalar.

        Returns
        -------
        ParametricFamilyDistribution

        Raises
        ------
        KeyError
            If the parametrization is unknown.
        ParameterError
            If a value is not a finite real number or a constraint fails.
        """
        parametrization_class = (
            self.base
            if parametrization_name is None
            else self._parametrizations[parametrization_name]
        )
        parameters = parametrization_class(**parameters_values)
        parameters.validate()
        return ParametricFamilyDistribution(self.name, parameters, self.support_of(parameters))

    __call__ = distribution

    def fit(
        self,
        data: npt.ArrayLike,
        window: tuple[float, float] = (0.05, 0.95),
        partitions: int = 100,
    ) -> FitResult:
        """
        Fit the family to a sample by matching quantiles.

        Parameters
        ----------
        data : ArrayLike
            Observations; NaNs are ignored.
        window : tuple[float, float], default=(0.05, 0.95)
            Probability window of the matched quantiles.
        partitions : int, default=100
            Number of grid intervals in ``window``.

        Returns
        -------
        FitResult
            Best distribution and its mean squared quantile mismatch.

        Raises
        ------
        NotImplementedError
            If the family has no fitter.
        """
        if self._fitter is None:
            raise NotImplementedError(f"Family {self.name} does not support fitting")
        return self._fitter(self, data, window, partitions)

    @dataclass_transform()
    def parametrization(
        self, *, name: str
    ) -> Callable[[type[Parametrization]], type[Parametrization]]:
        """
        Class decorator registering a parametrization of this family.

        Mypy does not apply ``dataclass_transform`` to methods, so decorated
        classes may still need ``# type: ignore[call-arg]`` at call sites.
        """
        from pysatl_hiprec.families.parametrizations import parametrization as _param_deco

        return _param_deco(family=self, name=name)
