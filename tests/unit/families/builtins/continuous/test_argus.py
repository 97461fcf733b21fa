"""
Tests for Argus Distribution Family

This module tests the functionality of the ARGUS distribution family,
including both tails near the endpoints, moments, fitting and sampling.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


import numpy as np
import pytest
from mpmath import mp, mpf
from scipy.stats import argus

from pysatl_hiprec.distributions import integrate_moments
from pysatl_hiprec.errors import ParameterError, PrecisionWarning
from pysatl_hiprec.families.configuration import configure_families_register
from pysatl_hiprec.precision import configure_numerics
from pysatl_hiprec.stats.optimize import golden_section_maximize
from pysatl_hiprec.types import CharacteristicName, FamilyName, Interval
from tests.utils.precision import assert_mp_close

from .base import BaseDistributionTest

# Reference values for alpha = 1 on the grid x = i / 32
PDF_EXPECTED_ALPHA_1 = {
    5: 0.3804032313652878,
    10: 0.758982519442446,
    16: 1.194751007931254,
    25: 1.611211737436153,
}
CDF_EXPECTED_ALPHA_1 = {
    1: 0.001188940093146074,
    10: 0.1187947029367229,
    16: 0.3025595752580474,
    31: 0.9799518108582926,
}


def reference_lower_cdf(alpha, x, dps=200):
    """``P(X <= x)`` from a brute-force difference at very high precision."""
    with mp.workdps(dps):
        z0 = mpf(alpha) ** 2 / 2
        z = z0 * (1 - mpf(x)) * (1 + mpf(x))
        return mp.gammainc(1.5, z, z0) / mp.gammainc(1.5, 0, z0)


def reference_upper_cdf(alpha, x, dps=100):
    with mp.workdps(dps):
        z0 = mpf(alpha) ** 2 / 2
        z = z0 * (1 - mpf(x)) * (1 + mpf(x))
        return mp.gammainc(1.5, 0, z) / mp.gammainc(1.5, 0, z0)


class TestArgusFamily(BaseDistributionTest):
    """Test suite for Argus distribution family."""

    def setup_method(self):
        """Setup before each test method."""
        registry = configure_families_register()
        self.argus_family = registry.get(FamilyName.ARGUS)
        self.argus_dist_example = self.argus_family(alpha=1)

    def test_family_properties(self):
        """Test basic properties of Argus family."""
        assert self.argus_family.name == FamilyName.ARGUS
        assert set(self.argus_family.parametrization_names) == {"curvature"}
        assert self.argus_family.base_parametrization_name == "curvature"

    def test_parametrization_creation(self):
        """Test creation of distribution with the curvature parametrization."""
        dist = self.argus_family(alpha=2)
        assert dist.parameters.parameters == {"alpha": mpf(2)}
        assert str(dist) == "Argus[alpha=2.0]"

    @pytest.mark.parametrize("alpha", [0, -0.5, float("inf")])
    def test_parametrization_constraints(self, alpha):
        """Test parameter validation for Argus distribution."""
        with pytest.raises(ParameterError):
            self.argus_family(alpha=alpha)

    def test_support_is_open_unit_interval(self):
        """Test the support bounds and closure."""
        support = self.argus_dist_example.support
        assert (support.left, support.right) == (0, 1)
        assert not support.contains(0)
        assert not support.contains(1)
        assert support.contains(0.5)

    def test_analytical_computations_availability(self):
        """Test that Argus provides no closed-form entropy."""
        computations = self.argus_dist_example.analytical_computations
        assert CharacteristicName.KURT in computations
        assert CharacteristicName.ENTROPY not in computations
        assert mp.isnan(self.argus_dist_example.entropy)

    def test_reference_values(self):
        """Test density and distribution function against reference values."""
        dist = self.argus_dist_example
        for i, expected in PDF_EXPECTED_ALPHA_1.items():
            assert float(dist.pdf(mpf(i) / 32)) == pytest.approx(expected, rel=1e-14)
        for i, expected in CDF_EXPECTED_ALPHA_1.items():
            assert float(dist.cdf(mpf(i) / 32)) == pytest.approx(expected, rel=1e-14)

    @pytest.mark.parametrize("alpha", [0.5, 1.0, 3.0, 8.0])
    def test_against_scipy(self, alpha):
        """Test pdf, both tails and quantiles against scipy.stats.argus."""
        dist = self.argus_family(alpha=alpha)
        x = np.array([0.2, 0.45, 0.7, 0.9, 0.99])
        p = np.array([0.1, 0.5, 0.9])

        np.testing.assert_allclose(self.evaluate(dist.pdf, x), argus.pdf(x, alpha), rtol=1e-9)
        # scipy evaluates the lower tail as 1 - sf
        np.testing.assert_allclose(
            self.evaluate(dist.cdf, x), argus.cdf(x, alpha), rtol=1e-9, atol=1e-14
        )
        np.testing.assert_allclose(
            self.evaluate(lambda t: dist.cdf(t, Interval.UPPER), x), argus.sf(x, alpha), rtol=1e-9
        )
        np.testing.assert_allclose(self.evaluate(dist.ppf, p), argus.ppf(p, alpha), rtol=1e-8)

    @pytest.mark.parametrize("alpha", [1.0, 3.0])
    def test_mean_and_variance_against_scipy(self, alpha):
        """Test the closed-form mean and variance against scipy."""
        dist = self.argus_family(alpha=alpha)
        mean, var = argus.stats(alpha, moments="mv")
        assert float(dist.mean) == pytest.approx(float(mean), rel=1e-10)
        assert float(dist.variance) == pytest.approx(float(var), rel=1e-8)

    @pytest.mark.parametrize("x", [1e-3, 1e-5, 1e-12])
    def test_lower_tail_near_zero(self, x):
        """Test that the cancelling lower tail keeps full relative precision."""
        dist = self.argus_family(alpha=3)
        assert_mp_close(dist.cdf(x), reference_lower_cdf(3, x), rel="1e-30")

    def test_lower_tail_leading_order(self):
        """Test the lower tail below the square root of the working epsilon."""
        dist = self.argus_family(alpha=2)
        assert_mp_close(dist.cdf(1e-25), reference_lower_cdf(2, 1e-25, dps=250), rel="1e-30")

    def test_upper_tail_near_one(self):
        """Test that the upper tail keeps full relative precision near the endpoint."""
        dist = self.argus_family(alpha=2)
        x = 1 - mpf(2) ** -80
        value = dist.cdf(x, Interval.UPPER)
        assert value < mpf("1e-30")
        assert_mp_close(value, reference_upper_cdf(2, x), rel="1e-30")

    @pytest.mark.parametrize("alpha", [0.1, 1.0, 3.0, 10.0])
    def test_tails_are_complementary(self, alpha):
        """Test cdf + ccdf == 1 across the support."""
        dist = self.argus_family(alpha=alpha)
        for x in ("0.05", "0.5", "0.95"):
            total = dist.cdf(mpf(x)) + dist.cdf(mpf(x), Interval.UPPER)
            assert_mp_close(total, 1, rel="1e-35")

    @pytest.mark.parametrize("alpha", [0.5, 2.0, 6.0])
    def test_quantile_inverts_cdf(self, alpha):
        """Test cdf(ppf(p)) == p in both tails."""
        dist = self.argus_family(alpha=alpha)
        self.assert_quantile_inverts_cdf(dist, ["1e-300", "1e-40", "1e-4", "0.3", "0.5", "0.95"])
        # Upper-tail quantiles approach 1 as p^(2/3) and run out of representable points.
        self.assert_quantile_inverts_cdf(
            dist, ["1e-12", "1e-4", "0.3", "0.5", "0.95"], Interval.UPPER
        )

    @pytest.mark.parametrize("alpha, p", [(2.0, "0.3"), (0.5, "0.9"), (6.0, "1e-6")])
    def test_quantile_matches_reference_root(self, alpha, p):
        """Test the closed-form quantile against a root of the reference tail."""
        dist = self.argus_family(alpha=alpha)
        actual = dist.ppf(mpf(p))
        with mp.workdps(80):
            z0 = mpf(alpha) ** 2 / 2
            total = mp.gammainc(1.5, 0, z0, regularized=True)

            def reference_lower(x):
                return 1 - mp.gammainc(1.5, 0, z0 * (1 - x * x), regularized=True) / total

            expected = mp.findroot(lambda x: reference_lower(x) - mpf(p), float(actual))
        assert_mp_close(actual, expected, rel="1e-35")

    def test_upper_quantile_next_to_endpoint_warns(self):
        """Test that an upper quantile closer to 1 than sqrt(eps) reports the lost digits."""
        with pytest.warns(PrecisionWarning, match=r"within sqrt\(eps\) of 1"):
            x = self.argus_dist_example.ppf(mpf("1e-60"), Interval.UPPER)
        assert 0 < x <= 1

    @pytest.mark.parametrize("alpha", [0.5, 1.0, 3.0])
    def test_mode_maximizes_density(self, alpha):
        """Test the closed-form mode against a direct maximization."""
        dist = self.argus_family(alpha=alpha)
        located = golden_section_maximize(dist.pdf, mpf("1e-6"), 1 - mpf("1e-6"))
        assert abs(dist.mode - located) < mpf("1e-15")

    @pytest.mark.parametrize("alpha", [0.5, 2.0])
    def test_moments_match_integration(self, alpha):
        """Test closed-form and series moments against quadrature of the density."""
        dist = self.argus_family(alpha=alpha)
        integrated = integrate_moments(dist, eps=mpf("1e-25"), points=[dist.mode])

        assert_mp_close(integrated.mean, dist.mean, rel="1e-20")
        assert_mp_close(integrated.variance, dist.variance, rel="1e-18")
        assert_mp_close(integrated.skewness, dist.skewness, rel="1e-15")
        assert_mp_close(integrated.kurtosis, dist.kurtosis, rel="1e-15")

    def test_small_curvature_variance(self):
        """Test the variance where the closed form cancels heavily."""
        dist = self.argus_family(alpha=mpf("1e-3"))
        integrated = integrate_moments(dist, eps=mpf("1e-25"))
        assert_mp_close(dist.variance, integrated.variance, rel="1e-18")

    def test_boundary_values(self):
        """Test exact values at and beyond the support boundaries."""
        dist = self.argus_dist_example
        assert dist.pdf(0) == 0
        assert dist.pdf(1) == 0
        assert dist.pdf(-1) == 0
        assert dist.cdf(0) == 0
        assert dist.cdf(1) == 1
        assert dist.cdf(1, Interval.UPPER) == 0
        assert dist.ppf(0) == 0
        assert dist.ppf(1) == 1
        assert mp.isnan(dist.pdf(mp.nan))

    def test_precision_follows_configuration(self):
        """Test that cached normalization constants follow the working precision."""
        x = mpf(1) / 3
        low = self.argus_dist_example.pdf(x)
        configure_numerics(dps=70)
        high = self.argus_dist_example.pdf(x)
        assert_mp_close(high, low, rel="1e-38")
        with mp.workdps(120):
            psi = mp.gammainc(1.5, 0, mpf("0.5"), regularized=True) / 2
            u = 1 - x * x
            expected = x * mp.sqrt(u) * mp.exp(-u / 2) / (mp.sqrt(2 * mp.pi) * psi)
        assert_mp_close(high, expected, rel="1e-65")

    def test_fit(self):
        """Test quantile-matching fit on a sample drawn by scipy."""
        data = argus.rvs(2.0, size=20_000, random_state=np.random.default_rng(7))

        result = self.argus_family.fit(data, partitions=20)

        assert result.distribution is not None
        assert float(result.distribution.parameters.alpha) == pytest.approx(2.0, abs=0.25)
        assert result.error < 1e-3

    def test_irregular_inputs(self):
        """Test extreme finite, infinite and NaN inputs."""
        self.assert_irregular_inputs_handled(self.argus_dist_example)

    def test_sampling(self):
        """Test inverse-transform sampling against the quantile function."""
        self.assert_sample_matches_quantiles(self.argus_family(alpha=2), n=500, seed=1)
