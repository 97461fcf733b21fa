"""
Moment Integration
==================

Numerical moments of a distribution computed purely from its density and
support by adaptive quadrature.

These functionals never call a family's own moment formulas: the mean is
integrated first and every central moment is taken about that integrated
mean. They exist to cross-check closed-form moments, not to replace them.

Each functional accepts

- ``eps``: absolute error target of every integral,
- ``max_points``: evaluation budget of every integral (exhausting it is not
  an error; the best estimate is returned),
- ``points``: abscissas where the density is not smooth (modes with cusps,
  interior kinks) so the range is split there up front.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mpmath import mp, mpf

from pysatl_hiprec.stats.quadrature import adaptive_integrate

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pysatl_hiprec.distributions.distribution import Distribution
    from pysatl_hiprec.types import RealLike, Scalar, ScalarFunc

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MomentSet:
    """
    Integrated moments of a distribution.

    Parameters
    ----------
    mean : mpf
    variance : mpf
    skewness : mpf
    kurtosis : mpf
        Excess kurtosis.
    entropy : mpf
        Differential entropy in nats.
    """

    mean: Scalar
    variance: Scalar
    skewness: Scalar
    kurtosis: Scalar
    entropy: Scalar


def _integrate(
    distr: Distribution,
    integrand: ScalarFunc,
    label: str,
    eps: RealLike | None,
    max_points: int | None,
    points: Iterable[RealLike],
) -> Scalar:
    support = distr.support
    result = adaptive_integrate(
        integrand,
        support.left,
        support.right,
        eps=eps,
        max_points=max_points,
        points=points,
    )
    logger.debug(
        "%s integrated: value=%s error=%s evaluations=%d",
        label,
        mp.nstr(result.value, 15),
        mp.nstr(result.error, 3),
        result.evaluations,
    )
    return result.value


def integrate_mean(
    distr: Distribution,
    eps: RealLike | None = None,
    max_points: int | None = None,
    points: Iterable[RealLike] = (),
) -> Scalar:
    """Mean ``E[X]`` by quadrature of ``x * pdf(x)``."""
    return _integrate(distr, lambda x: x * distr.pdf(x), "mean", eps, max_points, tuple(points))


def integrate_central_moment(
    distr: Distribution,
    order: int,
    center: RealLike | None = None,
    eps: RealLike | None = None,
    max_points: int | None = None,
    points: Iterable[RealLike] = (),
) -> Scalar:
    """
    Central moment ``E[(X - c)**order]``.

    ``center`` defaults to the integrated mean.
    """
    points = tuple(points)
    if center is None:
        center = integrate_mean(distr, eps, max_points, points)
    c = mpf(center)
    return _integrate(
        distr,
        lambda x: (x - c) ** order * distr.pdf(x),
        f"central moment {order}",
        eps,
        max_points,
        points,
    )


def integrate_variance(
    distr: Distribution,
    eps: RealLike | None = None,
    max_points: int | None = None,
    points: Iterable[RealLike] = (),
) -> Scalar:
    """Variance about the integrated mean."""
    return integrate_central_moment(distr, 2, None, eps, max_points, points)


def integrate_skewness(
    distr: Distribution,
    eps: RealLike | None = None,
    max_points: int | None = None,
    points: Iterable[RealLike] = (),
) -> Scalar:
    """Skewness ``mu_3 / mu_2**1.5`` about the integrated mean."""
    points = tuple(points)
    mean = integrate_mean(distr, eps, max_points, points)
    variance = integrate_central_moment(distr, 2, mean, eps, max_points, points)
    third = integrate_central_moment(distr, 3, mean, eps, max_points, points)
    return third / variance ** mpf(1.5)


def integrate_kurtosis(
    distr: Distribution,
    eps: RealLike | None = None,
    max_points: int | None = None,
    points: Iterable[RealLike] = (),
) -> Scalar:
    """Excess kurtosis ``mu_4 / mu_2**2 - 3`` about the integrated mean."""
    points = tuple(points)
    mean = integrate_mean(distr, eps, max_points, points)
    variance = integrate_central_moment(distr, 2, mean, eps, max_points, points)
    fourth = integrate_central_moment(distr, 4, mean, eps, max_points, points)
    return fourth / (variance * variance) - 3


def integrate_entropy(
    distr: Distribution,
    eps: RealLike | None = None,
    max_points: int | None = None,
    points: Iterable[RealLike] = (),
) -> Scalar:
    """Differential entropy ``-E[log pdf(X)]``, with ``0 * log 0 = 0``."""

    def integrand(x: Scalar) -> Scalar:
        density = distr.pdf(x)
        if density <= 0:
            return mpf(0)
        return -density * mp.log(density)

    return _integrate(distr, integrand, "entropy", eps, max_points, tuple(points))


def integrate_moments(
    distr: Distribution,
    eps: RealLike | None = None,
    max_points: int | None = None,
    points: Iterable[RealLike] = (),
) -> MomentSet:
    """Integrate mean, variance, skewness, excess kurtosis and entropy at once."""
    points = tuple(points)
    mean = integrate_mean(distr, eps, max_points, points)
    variance = integrate_central_moment(distr, 2, mean, eps, max_points, points)
    third = integrate_central_moment(distr, 3, mean, eps, max_points, points)
    fourth = integrate_central_moment(distr, 4, mean, eps, max_points, points)
    return MomentSet(
        mean=mean,
        variance=variance,
        skewness=third / variance ** mpf(1.5),
        kurtosis=fourth / (variance * variance) - 3,
        entropy=integrate_entropy(distr, eps, max_points, points),
    )


__all__ = [
    "MomentSet",
    "integrate_mean",
    "integrate_central_moment",
    "integrate_variance",
    "integrate_skewness",
    "integrate_kurtosis",
    "integrate_entropy",
    "integrate_moments",
]
