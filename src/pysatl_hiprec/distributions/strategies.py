"""
Sampling Strategies
===================

This module defines the pluggable sampling interface and its default
implementation:

- :class:`SamplingStrategy`: draws samples from a distribution.
- :class:`DefaultSamplingUnivariateStrategy`: lazy inverse transform sampling
  through the distribution's ``ppf``.

Notes
-----
- Strategies are stateless; the random source is passed per call.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol

import numpy as np

from pysatl_hiprec.precision import numeric_config

from .sampling import InverseTransformSample, Sample

if TYPE_CHECKING:
    from .distribution import Distribution


class SamplingStrategy(Protocol):
    """Protocol for sampling strategies (return a :class:`Sample`)."""

    def sample(
        self,
        n: int,
        distr: Distribution,
        rng: np.random.Generator | int | None = None,
    ) -> Sample: ...


class DefaultSamplingUnivariateStrategy(SamplingStrategy):
    """
    Default univariate sampler using inverse transform sampling.

    The strategy applies the distribution's lower-tail ``ppf`` to i.i.d.
    uniforms ``U ~ U[0, 1)``.

    Parameters
    ----------
    dps : int, optional
        Working precision of the quantile evaluations,
        ``NumericConfig.sampling_dps`` by default.
    """

    def __init__(self, dps: int | None = None) -> None:
        self.dps = dps

    def sample(
        self,
        n: int,
        distr: Distribution,
        rng: np.random.Generator | int | None = None,
    ) -> InverseTransformSample:
        """
        Draw a lazy sample.

        Parameters
        ----------
        n : int
            Number of elements.
        distr : Distribution
            Distribution providing ``ppf``.
        rng : numpy.random.Generator or int, optional
            Uniform source or seed; a fresh generator by default.

        Returns
        -------
        InverseTransformSample
            Lazy sample of length ``n``.
        """
        dps = numeric_config().sampling_dps if self.dps is None else self.dps
        return InverseTransformSample(distr.ppf, n, np.random.default_rng(rng), dps)
