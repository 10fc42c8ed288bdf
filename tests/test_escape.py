import pytest

from mandelbrot_tiles import escape_time


@pytest.mark.parametrize("max_iter", [1, 2, 10, 1000])
def test_origin_never_escapes(max_iter):
    magnitude, iterations = escape_time(0.0, 0.0, max_iter)
    assert iterations == max_iter
    assert magnitude == 0.0


@pytest.mark.parametrize("a, b", [(3.0, 0.0), (1.5, 1.5), (-2.5, 0.1), (0.0, -2.01)])
def test_points_outside_radius_escape_immediately(a, b):
    assert escape_time(a, b, 50) == (a * a + b * b, 0)


def test_escape_counts_iterations_after_the_first():
    # 1 -> 2 -> 5
    assert escape_time(1.0, 0.0, 100) == (25.0, 2)
    # 2i -> -4 + 2i
    assert escape_time(0.0, 2.0, 100) == (20.0, 1)


def test_bounded_orbit_returns_last_magnitude():
    # -1 cycles between -1 and 0
    assert escape_time(-1.0, 0.0, 3) == (1.0, 3)
    assert escape_time(-1.0, 0.0, 10) == (0.0, 10)


def test_escape_is_deterministic():
    assert escape_time(-0.7453, 0.1127, 500) == escape_time(-0.7453, 0.1127, 500)
