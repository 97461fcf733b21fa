from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from mpmath import mp, mpf

from pysatl_hiprec.stats.optimize import golden_section_maximize


class TestGoldenSectionMaximize:
    def test_interior_maximum(self) -> None:
        x = golden_section_maximize(lambda t: -((t - mpf("0.3")) ** 2), 0, 1)
        assert abs(x - mpf("0.3")) < mpf("1e-15")

    def test_maximum_at_bound(self) -> None:
        assert golden_section_maximize(lambda t: t, 0, 1) == 1
        assert golden_section_maximize(lambda t: -t, 0, 1) == 0

    def test_smooth_density_mode(self) -> None:
        # Gamma(3, 1) density peaks at 2
        x = golden_section_maximize(lambda t: t * t * mp.exp(-t), 0, 10)
        assert abs(x - 2) < mpf("1e-15")

    def test_custom_tolerance(self) -> None:
        x = golden_section_maximize(lambda t: -abs(t - mpf("0.25")), 0, 1, tol=mpf("1e-4"))
        assert abs(x - mpf("0.25")) < mpf("1e-3")
