from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import pytest
from mpmath import mp, mpf

from pysatl_hiprec.errors import DomainError, PrecisionWarning
from pysatl_hiprec.stats.roots import find_quantile
from pysatl_hiprec.types import Interval
from tests.utils.precision import assert_mp_close


def normal_cdf(x: mpf, interval: Interval) -> mpf:
    return mp.ncdf(x) if interval is Interval.LOWER else mp.ncdf(-x)


def normal_pdf(x: mpf) -> mpf:
    return mp.npdf(x)


def uniform_cdf(x: mpf, interval: Interval) -> mpf:
    return x if interval is Interval.LOWER else 1 - x


def exponential_cdf(x: mpf, interval: Interval) -> mpf:
    return -mp.expm1(-x) if interval is Interval.LOWER else mp.exp(-x)


class TestFindQuantile:
    @pytest.mark.parametrize("p", ["0.5", "0.975", "0.025", "0.3"])
    def test_normal_quantile(self, p: str) -> None:
        q = mpf(p)
        expected = mp.sqrt(2) * mp.erfinv(2 * q - 1)
        x = find_quantile(normal_cdf, q, pdf=normal_pdf)
        assert_mp_close(x, expected, rel="1e-30", abs_="1e-35")

    @pytest.mark.parametrize("p", ["1e-100", "1e-300"])
    def test_extreme_upper_tail(self, p: str) -> None:
        q = mpf(p)
        x = find_quantile(normal_cdf, q, Interval.UPPER, pdf=normal_pdf)
        assert x > 20
        assert_mp_close(mp.ncdf(-x), q, rel="1e-28")

    def test_extreme_lower_tail_near_finite_boundary(self) -> None:
        q = mpf("1e-60")
        x = find_quantile(exponential_cdf, q, left=mpf(0), pdf=lambda t: mp.exp(-t))
        assert_mp_close(x, -mp.log1p(-q), rel="1e-28")

    def test_regula_falsi_without_density(self) -> None:
        x = find_quantile(normal_cdf, mpf("0.8"))
        assert_mp_close(mp.ncdf(x), mpf("0.8"), rel="1e-28")

    def test_bounded_support(self) -> None:
        x = find_quantile(uniform_cdf, mpf("0.3"), left=mpf(0), right=mpf(1))
        assert_mp_close(x, mpf("0.3"), rel="1e-30")
        x = find_quantile(
            uniform_cdf, mpf("0.3"), Interval.UPPER, left=mpf(0), right=mpf(1), x0=mpf("0.9")
        )
        assert_mp_close(x, mpf("0.7"), rel="1e-30")

    def test_probability_boundaries_map_to_support(self) -> None:
        left, right = mpf(0), mpf(1)
        assert find_quantile(uniform_cdf, 0, left=left, right=right) == left
        assert find_quantile(uniform_cdf, 1, left=left, right=right) == right
        assert find_quantile(uniform_cdf, 0, Interval.UPPER, left=left, right=right) == right
        assert find_quantile(uniform_cdf, 1, Interval.UPPER, left=left, right=right) == left
        assert find_quantile(normal_cdf, 1) == mp.inf

    def test_nan_probability(self) -> None:
        assert mp.isnan(find_quantile(normal_cdf, mp.nan))

    def test_nan_cdf(self) -> None:
        assert mp.isnan(find_quantile(lambda x, tail: mp.nan, mpf("0.3")))

    @pytest.mark.parametrize("p", [-0.1, 1.1])
    def test_probability_out_of_range_raises(self, p: float) -> None:
        with pytest.raises(DomainError, match="Probability must be in"):
            find_quantile(normal_cdf, p)

    def test_iteration_cap_warns(self) -> None:
        with pytest.warns(PrecisionWarning, match="stopped after 1 steps"):
            x = find_quantile(normal_cdf, mpf("0.3"), max_iter=1)
        assert mp.isfinite(x)

    def test_flat_cdf_cannot_be_bracketed(self) -> None:
        with pytest.warns(PrecisionWarning, match="Could not bracket quantile"):
            x = find_quantile(lambda x, tail: mpf("0.5"), mpf("0.25"))
        assert mp.isfinite(x)
        assert x < 0

    def test_unrepresentable_tail_quantile_warns(self) -> None:
        # No point of [1, 2) below 2 carries an upper tail as small as 1e-60.
        def shifted_uniform_cdf(x: mpf, interval: Interval) -> mpf:
            return x - 1 if interval is Interval.LOWER else 2 - x

        with pytest.warns(PrecisionWarning, match="collapsed with log residual"):
            x = find_quantile(
                shifted_uniform_cdf,
                mpf("1e-60"),
                Interval.UPPER,
                left=mpf(1),
                right=mpf(2),
                x0=mpf("1.5"),
            )
        assert 1 < x < 2
