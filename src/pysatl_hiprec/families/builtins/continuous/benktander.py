"""
Benktander type II distribution family implementation.

Contains the Benktander family with the shape parametrization. Written in
``L = log x``, the survival function is

    P(X > x) = exp(-L (alpha + 1 + beta L)) (1 + 2 beta L / alpha),   x >= 1,

a lognormal-like tail with a Pareto correction.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from functools import lru_cache
from typing import TYPE_CHECKING, cast

import numpy as np
from mpmath import mp, mpf

from pysatl_hiprec.distributions.fitters import fit_by_quantiles, prepare_data
from pysatl_hiprec.distributions.support import ContinuousSupport
from pysatl_hiprec.families.parametric_family import ParametricFamily
from pysatl_hiprec.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_hiprec.families.registry import ParametricFamilyRegister
from pysatl_hiprec.precision import guard_digits
from pysatl_hiprec.stats.moments import ShapeMoments, shape_from_raw_moments
from pysatl_hiprec.stats.roots import find_quantile
from pysatl_hiprec.types import CharacteristicName, FamilyName, Interval

if TYPE_CHECKING:
    from typing import Any

    import numpy.typing as npt

    from pysatl_hiprec.distributions.fitters import FitResult
    from pysatl_hiprec.types import Scalar


def _raw_moment(alpha: Scalar, beta: Scalar, n: int) -> Scalar:
    """
    ``E[X**n] = 1 + n (I0 + 2 c I1)`` with ``c = beta/alpha``, ``k = alpha + 1 - n`` and

    I0 = int_0^inf exp(-k L - beta L^2) dL
       = sqrt(pi / (4 beta)) exp(k^2 / (4 beta)) erfc(k / (2 sqrt(beta))),
    I1 = int_0^inf L exp(-k L - beta L^2) dL = (1 - k I0) / (2 beta).
    """
    k = alpha + 1 - n
    with guard_digits(20 + int(mp.ceil(mp.log10(1 + k * k / beta)))):
        i0 = (
            mp.sqrt(mp.pi / (4 * beta))
            * mp.exp(k * k / (4 * beta))
            * mp.erfc(k / (2 * mp.sqrt(beta)))
        )
        i1 = (1 - k * i0) / (2 * beta)
        moment = 1 + n * (i0 + 2 * beta / alpha * i1)
    return moment


@lru_cache(maxsize=256)
def _shape_moments(alpha: Scalar, beta: Scalar, prec: int) -> ShapeMoments:
    with guard_digits(10):
        raw = [mpf(1)] + [_raw_moment(alpha, beta, n) for n in range(1, 5)]
        moments = shape_from_raw_moments(raw)
    return ShapeMoments(*(+value for value in moments))


def _fit(
    family: ParametricFamily,
    data: npt.ArrayLike,
    window: tuple[float, float],
    partitions: int,
) -> FitResult:
    """
    Fix ``alpha = max(1e-2, 1 / (mean - 1))`` from the sample mean and search
    ``beta`` over ``(1e-4, 0.9999)`` times its upper bound ``alpha (alpha + 1) / 2``.
    """
    values = prepare_data(data)
    mean = float(np.mean(values))
    alpha = max(1e-2, 1 / (mean - 1)) if mean > 1 else 1e-2
    beta_max = alpha * (alpha + 1) / 2
    return fit_by_quantiles(
        family,
        values,
        window,
        parameters_from=lambda t: {"alpha": alpha, "beta": t},
        bounds=(1e-4 * beta_max, 0.9999 * beta_max),
        partitions=partitions,
    )


def configure_benktander_family() -> None:
    """
    Configure and register the Benktander distribution family.
    """

    if ParametricFamilyRegister.contains(FamilyName.BENKTANDER):
        return

    BENKTANDER_DOC = """
    Benktander type II distribution.

    A heavy-tailed loss distribution on [1, inf) used in actuarial science,
    between the Pareto and the lognormal. Shape parameters alpha > 0 and
    0 < beta <= alpha * (alpha + 1) / 2; the upper bound keeps the density
    non-negative.

    Probability density function, L = log x, c = beta / alpha:
        f(x) = exp(-L (alpha + 2 + beta L)) ((alpha + 2 beta L + 1)(2 c L + 1) - 2 c)

    The mean is 1 + 1/alpha for every admissible beta.
    """

    def pdf(parameters: Parametrization, x: Scalar) -> Scalar:
        """
        Probability density function for Benktander distribution.

        Parameters
        ----------
        parameters : Parametrization
            Distribution parameters object with fields:
            - alpha: mpf
            - beta: mpf
        x : mpf
            Point of the support ``[1, inf)``.

        Returns
        -------
        mpf
            Probability density at ``x``, floored at 0.
        """
        parameters = cast(_Shape, parameters)
        alpha, beta = parameters.alpha, parameters.beta
        c = beta / alpha
        log_x = mp.log(x)
        value = mp.exp(-log_x * (alpha + 2 + beta * log_x)) * (
            (alpha + 2 * beta * log_x + 1) * (2 * c * log_x + 1) - 2 * c
        )
        return max(mpf(0), value)

    def cdf(parameters: Parametrization, x: Scalar, interval: Interval = Interval.LOWER) -> Scalar:
        """
        Cumulative distribution function for Benktander distribution.

        The lower tail is ``-expm1(-s) - 2 c L exp(-s)`` with
        ``s = L (alpha + 1 + beta L)``; near ``x = 1`` both terms are of order
        ``L`` and are combined with guard digits.
        """
        parameters = cast(_Shape, parameters)
        alpha, beta = parameters.alpha, parameters.beta
        if interval is Interval.UPPER:
            log_x = mp.log(x)
            value = mp.exp(-log_x * (alpha + 1 + beta * log_x)) * (1 + 2 * beta / alpha * log_x)
            return min(mpf(1), max(mpf(0), value))

        log_x = mp.log(x)
        guard = 10 + (int(mp.ceil(-mp.log10(log_x))) if log_x < 1 else 0)
        with guard_digits(guard):
            log_x = mp.log(x)
            s = log_x * (alpha + 1 + beta * log_x)
            value = -mp.expm1(-s) - 2 * beta / alpha * log_x * mp.exp(-s)
        return min(mpf(1), max(mpf(0), +value))

    def ppf(parameters: Parametrization, p: Scalar, interval: Interval = Interval.LOWER) -> Scalar:
        """Quantile by the shared root-finder started at the mean."""
        return find_quantile(
            lambda x, tail: cdf(parameters, x, tail),
            p,
            interval,
            left=mpf(1),
            right=mp.inf,
            pdf=lambda x: pdf(parameters, x),
            x0=mean_func(parameters, None),
        )

    def mean_func(parameters: Parametrization, _: Any) -> Scalar:
        """Mean of Benktander distribution."""
        parameters = cast(_Shape, parameters)
        return 1 + 1 / parameters.alpha

    def mode_func(parameters: Parametrization, _: Any) -> Scalar:
        """Mode ``max(1, exp((-alpha - 1 + sqrt(6 beta + 1)) / (2 beta)))``."""
        parameters = cast(_Shape, parameters)
        alpha, beta = parameters.alpha, parameters.beta
        return max(mpf(1), mp.exp((-alpha - 1 + mp.sqrt(6 * beta + 1)) / (2 * beta)))

    def var_func(parameters: Parametrization, _: Any) -> Scalar:
        parameters = cast(_Shape, parameters)
        return _shape_moments(parameters.alpha, parameters.beta, mp.prec).variance

    def skew_func(parameters: Parametrization, _: Any) -> Scalar:
        parameters = cast(_Shape, parameters)
        return _shape_moments(parameters.alpha, parameters.beta, mp.prec).skewness

    def kurt_func(parameters: Parametrization, _: Any) -> Scalar:
        parameters = cast(_Shape, parameters)
        return _shape_moments(parameters.alpha, parameters.beta, mp.prec).kurtosis

    def _support(_: Parametrization) -> ContinuousSupport:
        """Support of Benktander distribution"""
        return ContinuousSupport(left=mpf(1))

    Benktander = ParametricFamily(
        name=FamilyName.BENKTANDER,
        distr_parametrizations=["shape"],
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
        fitter=_fit,
    )
    Benktander.__doc__ = BENKTANDER_DOC

    @parametrization(family=Benktander, name="shape")
    class _Shape(Parametrization):
        """
        Shape parametrization of Benktander distribution.

        Parameters
        ----------
        alpha : mpf
            Pareto-like shape
        beta : mpf
            Lognormal-like shape
        """

        alpha: Scalar
        beta: Scalar

        @constraint(description="alpha > 0")
        def check_alpha_positive(self) -> bool:
            return bool(self.alpha > 0)

        @constraint(description="beta > 0")
        def check_beta_positive(self) -> bool:
            return bool(self.beta > 0)

        @constraint(description="beta <= alpha * (alpha + 1) / 2")
        def check_beta_bounded(self) -> bool:
            """Check that the density stays non-negative at x = 1."""
            return bool(self.beta <= self.alpha * (self.alpha + 1) / 2)

    ParametricFamilyRegister.register(Benktander)
