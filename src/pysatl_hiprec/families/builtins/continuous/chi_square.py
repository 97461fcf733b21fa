"""
Chi-square distribution family implementation.

Contains the ChiSquare family with the degrees-of-freedom parametrization.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, cast

from mpmath import mp, mpf

from pysatl_hiprec.distributions.fitters import fit_by_quantiles
from pysatl_hiprec.distributions.support import ContinuousSupport
from pysatl_hiprec.families.parametric_family import ParametricFamily
from pysatl_hiprec.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_hiprec.families.registry import ParametricFamilyRegister
from pysatl_hiprec.special.gamma import gamma_density, incomplete_gamma, inverse_incomplete_gamma
from pysatl_hiprec.types import CharacteristicName, FamilyName, Interval

if TYPE_CHECKING:
    from typing import Any

    import numpy.typing as npt

    from pysatl_hiprec.distributions.fitters import FitResult
    from pysatl_hiprec.types import Scalar


def _fit(
    family: ParametricFamily,
    data: npt.ArrayLike,
    window: tuple[float, float],
    partitions: int,
) -> FitResult:
    """Search ``nu = t / (1 - t)`` over ``t`` in ``(1e-10, 1000/1001)``."""
    return fit_by_quantiles(
        family,
        data,
        window,
        parameters_from=lambda t: {"nu": t / (1 - t)},
        bounds=(1e-10, 1000 / 1001),
        partitions=partitions,
    )


def configure_chi_square_family() -> None:
    """
    Configure and register the ChiSquare distribution family.
    """

    if ParametricFamilyRegister.contains(FamilyName.CHI_SQUARE):
        return

    CHI_SQUARE_DOC = """
    Chi-square distribution.

    The distribution of a sum of squares of ``nu`` independent standard
    normal variables, extended to real ``nu > 0``. It is the gamma
    distribution with shape ``nu/2`` and scale 2.

    Probability density function:
        f(x) = x^(nu/2 - 1) * exp(-x/2) / (2^(nu/2) * Gamma(nu/2)) for x ≥ 0

    At the origin the density is +inf for nu < 2, 1/2 for nu = 2 and 0
    for nu > 2.
    """

    def pdf(parameters: Parametrization, x: Scalar) -> Scalar:
        """
        Probability density function for chi-square distribution.

        Parameters
        ----------
        parameters : Parametrization
            Distribution parameters object with fields:
            - nu: mpf (degrees of freedom)
        x : mpf
            Point of the support ``[0, inf)``.

        Returns
        -------
        mpf
            Probability density at ``x``.
        """
        parameters = cast(_DegreesOfFreedom, parameters)
        return gamma_density(parameters.nu / 2, x / 2) / 2

    def cdf(parameters: Parametrization, x: Scalar, interval: Interval = Interval.LOWER) -> Scalar:
        """
        Cumulative distribution function for chi-square distribution.

        Parameters
        ----------
        parameters : Parametrization
            Distribution parameters object with fields:
            - nu: mpf (degrees of freedom)
        x : mpf
            Point inside the support.
        interval : Interval, default=Interval.LOWER
            ``LOWER`` for ``P(nu/2, x/2)``, ``UPPER`` for ``Q(nu/2, x/2)``.

        Returns
        -------
        mpf
            Tail probability at ``x``.
        """
        parameters = cast(_DegreesOfFreedom, parameters)
        return incomplete_gamma(parameters.nu / 2, x / 2, interval)

    def ppf(parameters: Parametrization, p: Scalar, interval: Interval = Interval.LOWER) -> Scalar:
        """
        Percent point function (inverse CDF) for chi-square distribution.

        Parameters
        ----------
        parameters : Parametrization
            Distribution parameters object with fields:
            - nu: mpf (degrees of freedom)
        p : mpf
            Probability from (0, 1).
        interval : Interval, default=Interval.LOWER
            Tail ``p`` refers to.

        Returns
        -------
        mpf
            ``2 * x`` where ``x`` inverts the regularized incomplete gamma
            function of shape ``nu/2``.
        """
        parameters = cast(_DegreesOfFreedom, parameters)
        return 2 * inverse_incomplete_gamma(parameters.nu / 2, p, interval)

    def mean_func(parameters: Parametrization, _: Any) -> Scalar:
        """Mean of chi-square distribution."""
        parameters = cast(_DegreesOfFreedom, parameters)
        return +parameters.nu

    def mode_func(parameters: Parametrization, _: Any) -> Scalar:
        """Mode ``nu - 2``, NaN for nu <= 2 where the density peaks at the origin."""
        parameters = cast(_DegreesOfFreedom, parameters)
        return parameters.nu - 2 if parameters.nu > 2 else mp.nan

    def var_func(parameters: Parametrization, _: Any) -> Scalar:
        """Variance of chi-square distribution."""
        parameters = cast(_DegreesOfFreedom, parameters)
        return 2 * parameters.nu

    def skew_func(parameters: Parametrization, _: Any) -> Scalar:
        parameters = cast(_DegreesOfFreedom, parameters)
        return mp.sqrt(8 / parameters.nu)

    def kurt_func(parameters: Parametrization, _: Any) -> Scalar:
        """Excess kurtosis of chi-square distribution."""
        parameters = cast(_DegreesOfFreedom, parameters)
        return 12 / parameters.nu

    def entropy_func(parameters: Parametrization, _: Any) -> Scalar:
        """Differential entropy ``k + log(2 Gamma(k)) + (1 - k) digamma(k)``, ``k = nu/2``."""
        parameters = cast(_DegreesOfFreedom, parameters)
        k = parameters.nu / 2
        return k + mp.log(2) + mp.loggamma(k) + (1 - k) * mp.digamma(k)

    def _support(_: Parametrization) -> ContinuousSupport:
        """Support of chi-square distribution"""
        return ContinuousSupport(left=mpf(0))

    ChiSquare = ParametricFamily(
        name=FamilyName.CHI_SQUARE,
        distr_parametrizations=["dof"],
        distr_characteristics={
            CharacteristicName.PDF: pdf,
            CharacteristicName.CDF: cdf,
            CharacteristicName.PPF: ppf,
            CharacteristicName.MEAN: mean_func,
            CharacteristicName.MODE: mode_func,
            CharacteristicName.VAR: var_func,
            CharacteristicName.SKEW: skew_func,
            CharacteristicName.KURT: kurt_func,
            CharacteristicName.ENTROPY: entropy_func,
        },
        support_by_parametrization=_support,
        fitter=_fit,
    )
    ChiSquare.__doc__ = CHI_SQUARE_DOC

    @parametrization(family=ChiSquare, name="dof")
    class _DegreesOfFreedom(Parametrization):
        """
        Degrees-of-freedom parametrization of chi-square distribution.

        Parameters
        ----------
        nu : mpf
            Degrees of freedom, real and positive
        """

        nu: Scalar

        @constraint(description="nu > 0")
        def check_nu_positive(self) -> bool:
            """Check that degrees of freedom are positive."""
            return bool(self.nu > 0)

    ParametricFamilyRegister.register(ChiSquare)
