"""
ARGUS distribution family implementation.

Contains the Argus family with the curvature parametrization. The family is
supported on ``(0, 1)`` (the endpoint rescaled to 1) and is written in terms of

    Psi(z) = P(3/2, z^2 / 2) / 2,

with ``P`` the regularized lower incomplete gamma function.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from functools import lru_cache
from typing import TYPE_CHECKING, NamedTuple, cast

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
from pysatl_hiprec.precision import guard_digits, warn_precision
from pysatl_hiprec.special.bessel import scaled_bessel_i
from pysatl_hiprec.special.gamma import (
    inverse_incomplete_gamma,
    lower_incomplete_gamma,
    upper_incomplete_gamma,
)
from pysatl_hiprec.stats.moments import ShapeMoments, shape_from_raw_moments
from pysatl_hiprec.types import CharacteristicName, FamilyName, Interval

if TYPE_CHECKING:
    from typing import Any

    import numpy.typing as npt

    from pysatl_hiprec.distributions.fitters import FitResult
    from pysatl_hiprec.types import Scalar

_SHAPE = mpf(1.5)
_LOWER_TAIL_ATTEMPTS = 4


class _ArgusConstants(NamedTuple):
    psi: Scalar
    norm: Scalar


@lru_cache(maxsize=256)
def _constants(alpha: Scalar, prec: int) -> _ArgusConstants:
    """``Psi(alpha)`` and the density normalization at precision ``prec``."""
    psi = lower_incomplete_gamma(_SHAPE, alpha * alpha / 2) / 2
    return _ArgusConstants(psi=psi, norm=alpha**3 / (mp.sqrt(2 * mp.pi) * psi))


def _lower_cdf(alpha: Scalar, x: Scalar) -> Scalar:
    """
    ``P(X <= x)`` as ``(Q(3/2, z) - Q(3/2, z0)) / P(3/2, z0)``.

    The difference cancels as ``x`` approaches 0; the number of digits lost
    is measured on each attempt and the evaluation is repeated with enough
    guard digits to absorb it.
    """
    x2 = x * x
    if x2 < mp.eps:
        constants = _constants(alpha, mp.prec)
        return constants.norm * mp.exp(-alpha * alpha / 2) * x2 / 2

    guard = 10
    value = mpf(0)
    for _ in range(_LOWER_TAIL_ATTEMPTS):
        with guard_digits(guard):
            z0 = alpha * alpha / 2
            tail = upper_incomplete_gamma(_SHAPE, z0 * (1 - x) * (1 + x))
            diff = tail - upper_incomplete_gamma(_SHAPE, z0)
            if diff > 0:
                lost = int(mp.ceil(mp.log10(tail / diff)))
                value = diff / lower_incomplete_gamma(_SHAPE, z0)
                if lost + 5 <= guard:
                    break
            else:
                lost = guard
        guard = max(2 * guard, lost + 15)
    else:
        warn_precision("Argus lower tail lost more digits than the guard allows")
    return +value


def _quantile(alpha: Scalar, p: Scalar, interval: Interval) -> Scalar:
    """
    Closed-form quantile ``x = sqrt(1 - z / z0)`` with ``z0 = alpha^2 / 2``.

    ``z`` solves ``P(3/2, z) = s P(3/2, z0)`` or, equivalently,
    ``Q(3/2, z) = Q(3/2, z0) + (1 - s) P(3/2, z0)``, where ``s`` is the
    upper tail mass; the smaller of the two targets is inverted. Forming
    ``1 - z / z0`` cancels as ``x`` approaches 0, so the guard digits are
    raised until they cover the digits lost.
    """
    z0 = alpha * alpha / 2
    if interval is Interval.LOWER:
        # Inverse of the leading-order lower tail used by _lower_cdf.
        scale = _constants(alpha, mp.prec).norm * mp.exp(-z0) / 2
        if p < scale * mp.eps:
            return mp.sqrt(p / scale)

    guard = 15
    x = mpf(0)
    for _ in range(_LOWER_TAIL_ATTEMPTS):
        with guard_digits(guard):
            mass = lower_incomplete_gamma(_SHAPE, z0)
            upper, lower = (p, 1 - p) if interval is Interval.UPPER else (1 - p, p)
            below = upper * mass
            above = upper_incomplete_gamma(_SHAPE, z0) + lower * mass
            if below <= above:
                z = inverse_incomplete_gamma(_SHAPE, below)
            else:
                z = inverse_incomplete_gamma(_SHAPE, above, Interval.UPPER)
            w = 1 - z / z0
            if w > 0:
                x = mp.sqrt(w)
                lost = max(0, int(mp.ceil(-mp.log10(w))))
                if lost + 10 <= guard:
                    break
            else:
                lost = guard
        guard = max(2 * guard, lost + 15)
    else:
        warn_precision("Argus quantile lost more digits than the guard allows")

    x = +x
    if 1 - x < mp.sqrt(mp.eps):
        warn_precision(
            f"Argus quantile for p={mp.nstr(p, 8)} ({interval}) lies within sqrt(eps) of 1; "
            "raise the working precision"
        )
    return x


def _moment_guard(alpha: Scalar) -> int:
    """Guard digits absorbing the cancellation of the closed-form variance."""
    loss = mp.log10(1 + 60 / (alpha * alpha)) + 4 * mp.log10(1 + alpha)
    return 15 + int(mp.ceil(loss))


def _raw_moment(alpha: Scalar, n: int) -> Scalar:
    """
    ``E[X**n] = (c/2) exp(-alpha^2/2) B(n/2+1, 3/2) M(n/2+1, n/2+5/2, alpha^2/2)``.
    """
    constants = _constants(alpha, mp.prec)
    z0 = alpha * alpha / 2
    h = mpf(n) / 2 + 1
    return (
        constants.norm
        / 2
        * mp.exp(-z0)
        * mp.beta(h, _SHAPE)
        * mp.hyp1f1(h, h + _SHAPE, z0)
    )


@lru_cache(maxsize=256)
def _shape_moments(alpha: Scalar, prec: int) -> ShapeMoments:
    with guard_digits(_moment_guard(alpha)):
        raw = [mpf(1)] + [_raw_moment(alpha, n) for n in range(1, 5)]
        moments = shape_from_raw_moments(raw)
    return ShapeMoments(*(+value for value in moments))


def _fit(
    family: ParametricFamily,
    data: npt.ArrayLike,
    window: tuple[float, float],
    partitions: int,
) -> FitResult:
    """Search ``alpha = t / (1 - t)`` over ``t`` in ``(1e-10, 100/101)``."""
    return fit_by_quantiles(
        family,
        data,
        window,
        parameters_from=lambda t: {"alpha": t / (1 - t)},
        bounds=(1e-10, 100 / 101),
        partitions=partitions,
    )


def configure_argus_family() -> None:
    """
    Configure and register the Argus distribution family.
    """

    if ParametricFamilyRegister.contains(FamilyName.ARGUS):
        return

    ARGUS_DOC = """
    ARGUS distribution.

    Models the invariant mass of particle candidates near a kinematic
    endpoint (the ARGUS background shape), rescaled to the unit interval.
    It has a single curvature parameter alpha > 0.

    Probability density function:
        f(x) = c * x * sqrt(1 - x^2) * exp(-alpha^2 * (1 - x^2) / 2) for 0 < x < 1
        c = alpha^3 / (sqrt(2 pi) * Psi(alpha))

    Upper tail:
        P(X > x) = Psi(alpha * sqrt(1 - x^2)) / Psi(alpha)
    """

    def pdf(parameters: Parametrization, x: Scalar) -> Scalar:
        """
        Probability density function for Argus distribution.

        Parameters
        ----------
        parameters : Parametrization
            Distribution parameters object with fields:
            - alpha: mpf (curvature)
        x : mpf
            Point of ``[0, 1]``.

        Returns
        -------
        mpf
            Probability density at ``x``; 0 at both endpoints.
        """
        parameters = cast(_Curvature, parameters)
        alpha = parameters.alpha
        u = (1 - x) * (1 + x)
        constants = _constants(alpha, mp.prec)
        return constants.norm * x * mp.sqrt(u) * mp.exp(-alpha * alpha * u / 2)

    def cdf(parameters: Parametrization, x: Scalar, interval: Interval = Interval.LOWER) -> Scalar:
        """
        Cumulative distribution function for Argus distribution.

        The upper tail is a ratio of lower incomplete gamma functions and
        keeps full relative precision; the lower tail is evaluated by
        :func:`_lower_cdf`.
        """
        parameters = cast(_Curvature, parameters)
        alpha = parameters.alpha
        if interval is Interval.LOWER:
            return _lower_cdf(alpha, x)
        z = alpha * alpha * (1 - x) * (1 + x) / 2
        return lower_incomplete_gamma(_SHAPE, z) / (2 * _constants(alpha, mp.prec).psi)

    def ppf(parameters: Parametrization, p: Scalar, interval: Interval = Interval.LOWER) -> Scalar:
        """Quantile in closed form through the inverse incomplete gamma function."""
        parameters = cast(_Curvature, parameters)
        return _quantile(parameters.alpha, p, Interval(interval))

    def mean_func(parameters: Parametrization, _: Any) -> Scalar:
        """Mean ``sqrt(pi/8) alpha exp(-alpha^2/4) I_1(alpha^2/4) / Psi(alpha)``."""
        parameters = cast(_Curvature, parameters)
        alpha = parameters.alpha
        psi = _constants(alpha, mp.prec).psi
        return mp.sqrt(mp.pi / 8) * alpha * scaled_bessel_i(1, alpha * alpha / 4) / psi

    def mode_func(parameters: Parametrization, _: Any) -> Scalar:
        parameters = cast(_Curvature, parameters)
        a2 = parameters.alpha**2
        return mp.sqrt(a2 - 2 + mp.sqrt(a2 * a2 + 4)) / (mp.sqrt(2) * parameters.alpha)

    def var_func(parameters: Parametrization, _: Any) -> Scalar:
        """Variance ``1 - 3/alpha^2 + alpha phi(alpha) / Psi(alpha) - mean^2``."""
        parameters = cast(_Curvature, parameters)
        alpha = parameters.alpha
        with guard_digits(_moment_guard(alpha)):
            psi = _constants(alpha, mp.prec).psi
            density = mp.exp(-alpha * alpha / 2) / mp.sqrt(2 * mp.pi)
            mean = mean_func(parameters, None)
            variance = 1 - 3 / (alpha * alpha) + alpha * density / psi - mean * mean
        return +variance

    def skew_func(parameters: Parametrization, _: Any) -> Scalar:
        parameters = cast(_Curvature, parameters)
        return _shape_moments(parameters.alpha, mp.prec).skewness

    def kurt_func(parameters: Parametrization, _: Any) -> Scalar:
        """Excess kurtosis from the raw moments."""
        parameters = cast(_Curvature, parameters)
        return _shape_moments(parameters.alpha, mp.prec).kurtosis

    def _support(_: Parametrization) -> ContinuousSupport:
        """Support of Argus distribution"""
        return ContinuousSupport(left=mpf(0), right=mpf(1), left_closed=False, right_closed=False)

    Argus = ParametricFamily(
        name=FamilyName.ARGUS,
        distr_parametrizations=["curvature"],
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
    Argus.__doc__ = ARGUS_DOC

    @parametrization(family=Argus, name="curvature")
    class _Curvature(Parametrization):
        """
        Curvature parametrization of Argus distribution.

        Parameters
        ----------
        alpha : mpf
            Curvature (chi) of the distribution
        """

        alpha: Scalar

        @constraint(description="alpha > 0")
        def check_alpha_positive(self) -> bool:
            """Check that curvature is positive."""
            return bool(self.alpha > 0)

    ParametricFamilyRegister.register(Argus)
