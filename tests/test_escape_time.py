import pytest

from mandelgray import escape_time


@pytest.mark.parametrize("z0", [3 + 0j, 2.5j, -2.1 + 0j, 1.5 + 1.5j])
def test_points_outside_bound_escape_immediately(z0):
    assert escape_time(z0, 2.0, 255) == 0


@pytest.mark.parametrize("max_iterations", [1, 7, 255, 1000])
def test_origin_never_escapes(max_iterations):
    assert escape_time(0j, 2.0, max_iterations) == max_iterations


def test_zero_budget_returns_zero():
    assert escape_time(0j, 2.0, 0) == 0
    assert escape_time(5 + 5j, 2.0, 0) == 0


@pytest.mark.parametrize(
    "z0, expected",
    [
        (-1.5 - 1j, 1),
        (2 + 0j, 1),
        (-1 - 1j, 2),
        (-1.5 - 0.5j, 2),
        (-1 - 0.5j, 4),
    ],
)
def test_known_escape_counts(z0, expected):
    assert escape_time(z0, 2.0, 255) == expected


@pytest.mark.parametrize("z0", [-1 + 0j, 1j, -1j, -0.5 + 0j, 0.25 + 0j])
def test_bounded_orbits_report_budget(z0):
    assert escape_time(z0, 2.0, 255) == 255


@pytest.mark.parametrize("max_iterations", [0, 1, 3, 50])
@pytest.mark.parametrize("z0", [0j, -1.5 - 1j, 0.3 + 0.5j, -0.75 + 0.1j, 4j])
def test_result_within_budget(z0, max_iterations):
    assert 0 <= escape_time(z0, 2.0, max_iterations) <= max_iterations


def test_bound_is_strict_inequality():
    # Orbit of 2 is 2 -> 6 -> 38; a magnitude equal to the bound has not escaped.
    assert escape_time(2 + 0j, 2.0, 10) == 1
    assert escape_time(2 + 0j, 5.9, 10) == 1
    assert escape_time(2 + 0j, 6.0, 10) == 2


@pytest.mark.parametrize("z0", [complex(1.5e308, 1.5e308), complex(-1.7e308, 1e308)])
def test_modulus_overflow_counts_as_escaped(z0):
    assert escape_time(z0, 2.0, 10) == 0


def test_orbit_overflowing_mid_run_escapes():
    # 1e200 squared overflows to inf on the first step, which must escape cleanly.
    assert escape_time(complex(1e200, 0.0), 1e300, 10) == 1
