"""
Distributions subpackage

Interfaces and default implementations for probability distributions used by
PySATL hiprec:

- distribution protocol (:mod:`.distribution`);
- support intervals (:mod:`.support`);
- lazy inverse-transform samples (:mod:`.sampling`);
- pluggable sampling strategies (:mod:`.strategies`);
- moment integration (:mod:`.integration`);
- quantile-matching fitters (:mod:`.fitters`).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"
from .computation import AnalyticalComputation, Computation
from .distribution import Distribution
from .fitters import FitResult, fit_by_quantiles
from .integration import (
    MomentSet,
    integrate_entropy,
    integrate_kurtosis,
    integrate_mean,
    integrate_moments,
    integrate_skewness,
    integrate_variance,
)
from .sampling import InverseTransformSample, Sample
from .strategies import DefaultSamplingUnivariateStrategy, SamplingStrategy
from .support import ContinuousSupport, Support

__all__ = [
    # computation primitives
    "AnalyticalComputation",
    "Computation",
    # distribution
    "Distribution",
    "ContinuousSupport",
    "Support",
    # sampling
    "Sample",
    "InverseTransformSample",
    # strategies
    "SamplingStrategy",
    "DefaultSamplingUnivariateStrategy",
    # moments
    "MomentSet",
    "integrate_mean",
    "integrate_variance",
    "integrate_skewness",
    "integrate_kurtosis",
    "integrate_entropy",
    "integrate_moments",
    # fitting
    "FitResult",
    "fit_by_quantiles",
]
