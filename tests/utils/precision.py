from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from mpmath import mp, mpf


def assert_mp_close(actual, expected, rel: float | str = "1e-30", abs_: float | str = 0) -> None:
    """Assert ``actual`` matches ``expected`` to a relative (or absolute) tolerance."""
    actual, expected = mpf(actual), mpf(expected)
    assert mp.isfinite(actual), f"{actual} is not finite"
    diff = abs(actual - expected)
    bound = max(mpf(rel) * abs(expected), mpf(abs_))
    assert diff <= bound, (
        f"{mp.nstr(actual, 40)} != {mp.nstr(expected, 40)} "
        f"(difference {mp.nstr(diff, 5)}, allowed {mp.nstr(bound, 5)})"
    )
