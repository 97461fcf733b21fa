from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import pytest
from mpmath import mp, mpf

from pysatl_hiprec.distributions import Distribution
from pysatl_hiprec.errors import DomainError, ParameterError
from pysatl_hiprec.families import ParametricFamilyDistribution, ParametricFamilyRegister
from pysatl_hiprec.types import Interval
from tests.unit.families.test_basic import TestBaseFamily


class TestFamilyRegistrationAndSampling(TestBaseFamily):
    def setup_method(self) -> None:
        self.family = self.make_default_family()
        ParametricFamilyRegister.register(self.family)

    def test_family_registration_and_distribution_sampling(self) -> None:
        distr = self.family.distribution("base", value=2.0)

        n = 128
        sample = distr.sample(n, rng=7)
        assert len(sample) == n
        arr = sample.to_array()
        assert arr.shape == (n,)
        assert (arr >= 0.0).all() and (arr <= 2.0).all()

        computations = distr.analytical_computations
        assert set(computations) == {self.PDF, self.CDF, self.PPF, self.MEAN}
        assert computations[self.CDF](mpf("0.5")) == pytest.approx(0.25)
        assert computations[self.PPF](mpf("0.75")) == pytest.approx(1.5)

    def test_registry_rejects_duplicates(self) -> None:
        with pytest.raises(ValueError, match="already found in register"):
            ParametricFamilyRegister.register(self.make_default_family())

    def test_registry_lookup(self) -> None:
        assert ParametricFamilyRegister.contains("Default")
        assert not ParametricFamilyRegister.contains("Missing")
        assert ParametricFamilyRegister.get("Default") is self.family
        assert list(ParametricFamilyRegister.names()) == ["Default"]
        with pytest.raises(ValueError, match="No family Missing found"):
            ParametricFamilyRegister.get("Missing")

    def test_distribution_is_immutable_value(self) -> None:
        distr = self.family(value=2.0)
        assert isinstance(distr, ParametricFamilyDistribution)
        assert isinstance(distr, Distribution)
        assert distr == self.family(value="2")
        assert hash(distr) == hash(self.family(value=2))
        with pytest.raises(AttributeError):
            distr.family_name = "Other"  # type: ignore[misc]

    def test_construction_validates(self) -> None:
        with pytest.raises(ParameterError, match='Constraint "value > 0" does not hold'):
            self.family(value=0.0)
        with pytest.raises(ParameterError, match='Constraint "half > 0" does not hold'):
            self.family("alt", half=-1.0)
        with pytest.raises(ParameterError, match="is finite"):
            self.family(value=float("inf"))

    def test_alternative_parametrization_uses_own_and_base_characteristics(self) -> None:
        distr = self.family("alt", half=1.5)
        assert distr.support.right == 3
        assert distr.mean == pytest.approx(1.5)
        assert distr.cdf(1.5) == pytest.approx(0.5)

    def test_missing_characteristics_are_nan(self) -> None:
        distr = self.family(value=2.0)
        for value in (distr.mode, distr.variance, distr.skewness, distr.kurtosis, distr.entropy):
            assert mp.isnan(value)

    def test_median_falls_back_to_quantile(self) -> None:
        assert self.family(value=4.0).median == pytest.approx(2.0)

    def test_str(self) -> None:
        assert str(self.family(value=2.5)) == "Default[value=2.5]"


class TestCommonBoundaryHandling(TestBaseFamily):
    def setup_method(self) -> None:
        family = self.make_default_family()
        ParametricFamilyRegister.register(family)
        self.distr = family(value=2.0)

    @pytest.mark.parametrize(
        "x, expected",
        [(-1, 0), (3, 0), ("inf", 0), ("-inf", 0), (1, 0.5)],
        ids=["below", "above", "+inf", "-inf", "inside"],
    )
    def test_pdf(self, x, expected) -> None:
        assert self.distr.pdf(x) == expected

    def test_nan_propagates(self) -> None:
        assert mp.isnan(self.distr.pdf(mp.nan))
        assert mp.isnan(self.distr.cdf(float("nan")))
        assert mp.isnan(self.distr.cdf(mp.nan, Interval.UPPER))
        assert mp.isnan(self.distr.ppf(mp.nan))

    @pytest.mark.parametrize(
        "x, lower, upper",
        [("-inf", 0, 1), (0, 0, 1), (2, 1, 0), ("inf", 1, 0)],
        ids=["-inf", "left", "right", "+inf"],
    )
    def test_cdf_at_and_beyond_boundaries_is_exact(self, x, lower, upper) -> None:
        assert self.distr.cdf(x) == lower
        assert self.distr.cdf(x, Interval.UPPER) == upper
        assert self.distr.cdf(x, "upper") == upper

    def test_quantile_boundaries(self) -> None:
        assert self.distr.ppf(0) == 0
        assert self.distr.ppf(1) == 2
        assert self.distr.ppf(0, Interval.UPPER) == 2
        assert self.distr.ppf(1, Interval.UPPER) == 0
        assert self.distr.quantile(0.25) == pytest.approx(0.5)

    @pytest.mark.parametrize("p", [-0.1, 1.1, "-inf", "inf"])
    def test_quantile_outside_unit_interval_raises(self, p) -> None:
        with pytest.raises(DomainError, match="Probability must be in"):
            self.distr.ppf(p)

    def test_family_without_fitter(self) -> None:
        assert not self.distr.family.fittable
        with pytest.raises(NotImplementedError, match="does not support fitting"):
            self.distr.family.fit([0.1, 0.2, 0.3])
