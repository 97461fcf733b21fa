"""
Noncentral beta distribution family implementation.

Contains the NoncentralBeta family: the Poisson(lambda/2) mixture of
Beta(alpha + k, beta) laws, k = 0, 1, ...
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from functools import lru_cache
from typing import TYPE_CHECKING, cast

from mpmath import mp, mpf

from pysatl_hiprec.distributions.support import ContinuousSupport
from pysatl_hiprec.families.parametric_family import ParametricFamily
from pysatl_hiprec.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_hiprec.families.registry import ParametricFamilyRegister
from pysatl_hiprec.precision import guard_digits
from pysatl_hiprec.special.noncentral import (
    noncentral_beta_cdf,
    noncentral_beta_pdf,
    noncentral_beta_raw_moment,
)
from pysatl_hiprec.stats.moments import ShapeMoments, shape_from_raw_moments
from pysatl_hiprec.stats.optimize import golden_section_maximize
from pysatl_hiprec.stats.roots import find_quantile
from pysatl_hiprec.types import CharacteristicName, FamilyName, Interval

if TYPE_CHECKING:
    from typing import Any

    from pysatl_hiprec.types import Scalar


@lru_cache(maxsize=256)
def _shape_moments(alpha: Scalar, beta: Scalar, lam: Scalar, prec: int) -> ShapeMoments:
    with guard_digits(20):
        raw = [noncentral_beta_raw_moment(n, alpha, beta, lam) for n in range(5)]
        moments = shape_from_raw_moments(raw)
    return ShapeMoments(*(+value for value in moments))


def configure_noncentral_beta_family() -> None:
    """
    Configure and register the NoncentralBeta distribution family.
    """

    if ParametricFamilyRegister.contains(FamilyName.NONCENTRAL_BETA):
        return

    NONCENTRAL_BETA_DOC = """
    Noncentral beta distribution (type I).

    The law of X / (X + Y) for independent noncentral chi-square X with
    2 alpha degrees of freedom and noncentrality lambda and central
    chi-square Y with 2 beta degrees of freedom.

    Probability density function:
        f(x) = sum_k Pois(k; lambda/2) * x^(alpha+k-1) (1-x)^(beta-1) / B(alpha+k, beta)

    With lambda = 0 it reduces to the beta distribution.
    """

    def pdf(parameters: Parametrization, x: Scalar) -> Scalar:
        """
        Probability density function for noncentral beta distribution.

        Parameters
        ----------
        parameters : Parametrization
            Distribution parameters object with fields:
            - alpha: mpf
            - beta: mpf
            - lambda_: mpf (noncentrality)
        x : mpf
            Point of ``[0, 1]``; the endpoints give the exact limits.

        Returns
        -------
        mpf
            Probability density at ``x``.
        """
        parameters = cast(_Standard, parameters)
        return noncentral_beta_pdf(x, parameters.alpha, parameters.beta, parameters.lambda_)

    def cdf(parameters: Parametrization, x: Scalar, interval: Interval = Interval.LOWER) -> Scalar:
        """Cumulative distribution function for noncentral beta distribution."""
        parameters = cast(_Standard, parameters)
        return noncentral_beta_cdf(
            x, parameters.alpha, parameters.beta, parameters.lambda_, interval
        )

    def ppf(parameters: Parametrization, p: Scalar, interval: Interval = Interval.LOWER) -> Scalar:
        """Quantile by the shared root-finder started at the mean."""
        return find_quantile(
            lambda x, tail: cdf(parameters, x, tail),
            p,
            interval,
            left=mpf(0),
            right=mpf(1),
            pdf=lambda x: pdf(parameters, x),
            x0=mean_func(parameters, None),
        )

    def _moments(parameters: Parametrization) -> ShapeMoments:
        parameters = cast(_Standard, parameters)
        return _shape_moments(parameters.alpha, parameters.beta, parameters.lambda_, mp.prec)

    def mean_func(parameters: Parametrization, _: Any) -> Scalar:
        """Mean of noncentral beta distribution."""
        parameters = cast(_Standard, parameters)
        return noncentral_beta_raw_moment(1, parameters.alpha, parameters.beta, parameters.lambda_)

    def mode_func(parameters: Parametrization, _: Any) -> Scalar:
        """
        Mode by golden-section search; NaN unless alpha >= 1 and beta >= 1,
        where the density is bounded and unimodal. The uniform case
        alpha = beta = 1, lambda = 0 has no mode either.
        """
        parameters = cast(_Standard, parameters)
        if parameters.alpha < 1 or parameters.beta < 1:
            return mp.nan
        if parameters.alpha == parameters.beta == 1 and parameters.lambda_ == 0:
            return mp.nan
        return golden_section_maximize(lambda x: pdf(parameters, x), mpf(0), mpf(1))

    def var_func(parameters: Parametrization, _: Any) -> Scalar:
        return _moments(parameters).variance

    def skew_func(parameters: Parametrization, _: Any) -> Scalar:
        return _moments(parameters).skewness

    def kurt_func(parameters: Parametrization, _: Any) -> Scalar:
        """Excess kurtosis from the raw-moment series."""
        return _moments(parameters).kurtosis

    def _support(_: Parametrization) -> ContinuousSupport:
        """Support of noncentral beta distribution"""
        return ContinuousSupport(left=mpf(0), right=mpf(1))

    NoncentralBeta = ParametricFamily(
        name=FamilyName.NONCENTRAL_BETA,
        distr_parametrizations=["standard"],
        distr_characteristics={
            CharacteristicName.PDF: pdf,
            CharacteristicName.CDF: cdf,
            CharacteristicName.PPF: ppf,
            CharacteristicName.MEAN: mean_func,
            CharacteristicName.MODE: mode_func,
            CharacteristicName.VAR: var_func,
            CharacteristicName.SKEW: skew_func,
            CharacteristicName.KURT: kurt_func,
        },
        support_by_parametrization=_support,
    )
    NoncentralBeta.__doc__ = NONCENTRAL_BETA_DOC

    @parametrization(family=NoncentralBeta, name="standard")
    class _Standard(Parametrization):
        """
        Standard parametrization of noncentral beta distribution.

        Parameters
        ----------
        alpha : mpf
            First shape
        beta : mpf
            Second shape
        lambda_ : mpf
            Noncentrality
        """

        alpha: Scalar
        beta: Scalar
        lambda_: Scalar

        @constraint(description="alpha > 0")
        def check_alpha_positive(self) -> bool:
            return bool(self.alpha > 0)

        @constraint(description="beta > 0")
        def check_beta_positive(self) -> bool:
            return bool(self.beta > 0)

        @constraint(description="lambda_ >= 0")
        def check_lambda_non_negative(self) -> bool:
            return bool(self.lambda_ >= 0)

    ParametricFamilyRegister.register(NoncentralBeta)
