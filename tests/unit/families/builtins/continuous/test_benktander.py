"""
Tests for Benktander Distribution Family

This module tests the functionality of the Benktander type II distribution
family, including the tails, the raw-moment shape characteristics, fitting
and sampling.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


import pytest
from mpmath import mp, mpf

from pysatl_hiprec.distributions import integrate_moments
from pysatl_hiprec.errors import ParameterError
from pysatl_hiprec.families.configuration import configure_families_register
from pysatl_hiprec.stats.optimize import golden_section_maximize
from pysatl_hiprec.stats.quadrature import adaptive_integrate
from pysatl_hiprec.types import FamilyName, Interval
from tests.utils.precision import assert_mp_close

from .base import BaseDistributionTest

PARAMETERS = [(1, 1), (2, 1), (2, 2), (3, 4), (0.5, 0.375)]


def closed_form_variance(alpha, beta):
    """Variance through the complementary error function."""
    with mp.workdps(80):
        alpha, beta = mpf(alpha), mpf(beta)
        variance = (
            mp.sqrt(mp.pi)
            * mp.exp((alpha - 1) ** 2 / (4 * beta))
            * mp.erfc((alpha - 1) / (2 * mp.sqrt(beta)))
            / (alpha * mp.sqrt(beta))
            - 1 / alpha**2
        )
    return +variance


def reference_survival(alpha, beta, x, dps=100):
    with mp.workdps(dps):
        alpha, beta, log_x = mpf(alpha), mpf(beta), mp.log(x)
        return mp.exp(-log_x * (alpha + 1 + beta * log_x)) * (1 + 2 * beta / alpha * log_x)


class TestBenktanderFamily(BaseDistributionTest):
    """Test suite for Benktander distribution family."""

    def setup_method(self):
        """Setup before each test method."""
        registry = configure_families_register()
        self.benktander_family = registry.get(FamilyName.BENKTANDER)
        self.benktander_dist_example = self.benktander_family(alpha=2, beta=1)

    def test_family_properties(self):
        """Test basic properties of Benktander family."""
        assert self.benktander_family.name == FamilyName.BENKTANDER
        assert set(self.benktander_family.parametrization_names) == {"shape"}
        assert self.benktander_family.fittable

    def test_parametrization_creation(self):
        """Test creation of distribution with the shape parametrization."""
        dist = self.benktander_dist_example
        assert dist.parameters.parameters == {"alpha": mpf(2), "beta": mpf(1)}
        assert str(dist) == "Benktander[alpha=2.0,beta=1.0]"

    @pytest.mark.parametrize(
        "alpha, beta, message",
        [
            (0, 1, "alpha > 0"),
            (1, 0, "beta > 0"),
            (1, 1.5, "beta <= alpha"),
        ],
    )
    def test_parametrization_constraints(self, alpha, beta, message):
        """Test parameter validation for Benktander distribution."""
        with pytest.raises(ParameterError, match=message):
            self.benktander_family(alpha=alpha, beta=beta)

    def test_upper_bound_of_beta_is_admissible(self):
        """Test that beta = alpha (alpha + 1) / 2 is accepted with zero density at 1."""
        dist = self.benktander_family(alpha=0.5, beta=0.375)
        assert dist.pdf(1) == 0

    def test_support(self):
        """Test the support bounds."""
        support = self.benktander_dist_example.support
        assert support.left == 1
        assert support.right == mp.inf
        assert support.contains(1)

    def test_survival_function(self):
        """Test the survival function at x = e."""
        dist = self.benktander_dist_example
        expected = mp.exp(-4) * 2
        assert_mp_close(dist.cdf(mp.e, Interval.UPPER), expected, rel="1e-35")
        assert_mp_close(dist.cdf(mp.e), 1 - expected, rel="1e-35")

    def test_far_upper_tail(self):
        """Test the upper tail far beyond double-precision underflow of the lower tail."""
        dist = self.benktander_dist_example
        value = dist.cdf(mpf("1e30"), Interval.UPPER)
        assert value < mpf("1e-300")
        assert_mp_close(value, reference_survival(2, 1, mpf("1e30")), rel="1e-30")

    def test_lower_tail_near_one(self):
        """Test that the lower tail keeps full relative precision close to 1."""
        dist = self.benktander_dist_example
        x = 1 + mpf(2) ** -70
        with mp.workdps(100):
            expected = 1 - reference_survival(2, 1, x, dps=100)
        value = dist.cdf(x)
        assert value < mpf("1e-20")
        assert_mp_close(value, expected, rel="1e-28")

    @pytest.mark.parametrize("alpha, beta", PARAMETERS)
    def test_density_is_derivative_of_cdf(self, alpha, beta):
        """Test pdf against numerical differentiation of cdf."""
        dist = self.benktander_family(alpha=alpha, beta=beta)
        for x in ("1.5", "3", "10"):
            derivative = mp.diff(dist.cdf, mpf(x))
            assert_mp_close(dist.pdf(mpf(x)), derivative, rel="1e-20")

    def test_density_integrates_to_one(self):
        """Test the normalization of the density."""
        dist = self.benktander_family(alpha=3, beta=4)
        result = adaptive_integrate(dist.pdf, 1, mp.inf, eps=mpf("1e-30"))
        assert_mp_close(result.value, 1, rel="1e-25")

    @pytest.mark.parametrize("alpha, beta", PARAMETERS)
    def test_mean(self, alpha, beta):
        """Test the mean 1 + 1/alpha."""
        dist = self.benktander_family(alpha=alpha, beta=beta)
        assert_mp_close(dist.mean, 1 + 1 / mpf(alpha), rel="1e-38")

    @pytest.mark.parametrize("alpha, beta", PARAMETERS)
    def test_variance_matches_closed_form(self, alpha, beta):
        """Test raw-moment variance against the complementary error function form."""
        dist = self.benktander_family(alpha=alpha, beta=beta)
        assert_mp_close(dist.variance, closed_form_variance(alpha, beta), rel="1e-30")

    def test_variance_known_value(self):
        """Test Var = sqrt(pi) - 1 for alpha = beta = 1."""
        assert_mp_close(
            self.benktander_family(alpha=1, beta=1).variance, mp.sqrt(mp.pi) - 1, rel="1e-35"
        )

    @pytest.mark.parametrize("alpha, beta", [(2, 1), (3, 4)])
    def test_moments_match_integration(self, alpha, beta):
        """Test variance, skewness and kurtosis against quadrature of the density."""
        dist = self.benktander_family(alpha=alpha, beta=beta)
        integrated = integrate_moments(dist, eps=mpf("1e-25"), points=[dist.mode])

        assert_mp_close(integrated.mean, dist.mean, rel="1e-20")
        assert_mp_close(integrated.variance, dist.variance, rel="1e-18")
        assert_mp_close(integrated.skewness, dist.skewness, rel="1e-15")
        assert_mp_close(integrated.kurtosis, dist.kurtosis, rel="1e-15")

    @pytest.mark.parametrize("alpha, beta", PARAMETERS)
    def test_mode_maximizes_density(self, alpha, beta):
        """Test the closed-form mode against a direct maximization."""
        dist = self.benktander_family(alpha=alpha, beta=beta)
        located = golden_section_maximize(dist.pdf, 1, 6)
        assert abs(dist.mode - located) < mpf("1e-15")

    def test_mode_at_left_boundary(self):
        """Test that a density decreasing from x = 1 has its mode at 1."""
        assert self.benktander_dist_example.mode == 1

    @pytest.mark.parametrize("alpha, beta", [(2, 2), (3, 4)])
    def test_quantile_inverts_cdf(self, alpha, beta):
        """Test cdf(ppf(p)) == p in both tails."""
        dist = self.benktander_family(alpha=alpha, beta=beta)
        probabilities = ["1e-30", "1e-3", "0.5", "0.99"]
        self.assert_quantile_inverts_cdf(dist, probabilities)
        self.assert_quantile_inverts_cdf(dist, [*probabilities, "1e-200"], Interval.UPPER)

    def test_boundary_values(self):
        """Test exact values at and beyond the support boundaries."""
        dist = self.benktander_dist_example
        assert_mp_close(dist.pdf(1), 2, rel="1e-38")
        assert dist.pdf(mpf("0.5")) == 0
        assert dist.pdf(mp.inf) == 0
        assert dist.cdf(1) == 0
        assert dist.cdf(1, Interval.UPPER) == 1
        assert dist.cdf(mp.inf) == 1
        assert dist.ppf(0) == 1
        assert dist.ppf(1) == mp.inf
        assert mp.isnan(dist.ppf(mp.nan))

    def test_fit(self):
        """Test quantile-matching fit on a sample drawn from the family."""
        data = self.benktander_dist_example.sample(4000, rng=11).to_array()

        result = self.benktander_family.fit(data, partitions=20)

        assert result.distribution is not None
        fitted = result.distribution.parameters
        assert float(fitted.alpha) == pytest.approx(2.0, abs=0.2)
        assert float(fitted.beta) == pytest.approx(1.0, abs=0.5)
        assert result.error < 1e-2

    def test_irregular_inputs(self):
        """Test extreme finite, infinite and NaN inputs."""
        self.assert_irregular_inputs_handled(self.benktander_dist_example)

    def test_sampling(self):
        """Test inverse-transform sampling against the quantile function."""
        self.assert_sample_matches_quantiles(self.benktander_dist_example, n=1000, seed=2)
