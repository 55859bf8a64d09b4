"""Tests for the escape-time kernels."""

import numpy as np
import pytest

from mandelzoom.compute import (
    compute_iterations,
    compute_iterations_serial,
    converge,
    pixel_to_plane,
)

MAX_ITER = 256
WINDOW = (0.7, 1.0, -1.5, -1.0)  # max_r, max_i, min_r, min_i


def test_origin_never_escapes():
    assert converge(0j, MAX_ITER) == MAX_ITER
    assert converge(0j, 5000) == 5000


@pytest.mark.parametrize("c", [2.5 + 0j, -3 + 0j, 0 + 2.1j, 5 + 5j, -1.9 - 1.9j])
def test_far_points_escape_immediately(c):
    assert converge(c, MAX_ITER) in (0, 1)


@pytest.mark.parametrize("c", [-1 + 0j, -0.1 + 0.1j, 0.25 + 0j, -1.75 + 0j])
def test_points_in_set_use_full_budget(c):
    assert converge(c, MAX_ITER) == MAX_ITER


def test_zero_budget():
    assert converge(0.3 + 0.3j, 0) == 0


def test_known_escape_count():
    # z1 = c, z2 = c² + c = -0.25 + 2i, |z2| > 2
    assert converge(-1.5 - 1.0j, MAX_ITER) == 2


def test_matches_python_reference():
    rng = np.random.default_rng(1234)
    points = rng.uniform(-2, 2, 200) + 1j * rng.uniform(-2, 2, 200)
    for c in points:
        assert converge(c, 64) == converge.py_func(complex(c), 64)


def test_bounded_by_budget():
    rng = np.random.default_rng(7)
    for c in rng.uniform(-2, 1, 100) + 1j * rng.uniform(-1.5, 1.5, 100):
        assert 0 <= converge(c, 50) <= 50


def test_custom_escape_radius():
    # |c| = 2.5 only escapes a radius-2 test
    assert converge(2.5 + 0j, MAX_ITER, 2.0) == 1
    assert converge(2.5 + 0j, MAX_ITER, 4.0) == 2


def test_pixel_to_plane_corners():
    max_r, max_i, min_r, min_i = WINDOW
    assert pixel_to_plane(max_r, max_i, min_r, min_i, 0, 0, 800, 800) == (min_r, min_i)
    cr, ci = pixel_to_plane(max_r, max_i, min_r, min_i, 799, 799, 800, 800)
    assert cr == pytest.approx(max_r)
    assert ci == pytest.approx(max_i)


def test_grid_cells_use_pixel_mapping():
    out = np.empty((12, 16), dtype=np.int32)
    compute_iterations_serial(*WINDOW, MAX_ITER, 2.0, out)
    for row, col in [(0, 0), (5, 9), (11, 15), (6, 0)]:
        cr, ci = pixel_to_plane(*WINDOW, col, row, 16, 12)
        assert out[row, col] == converge(complex(cr, ci), MAX_ITER)


def test_parallel_matches_serial():
    serial = np.empty((40, 56), dtype=np.int32)
    parallel = np.empty((40, 56), dtype=np.int32)
    compute_iterations_serial(*WINDOW, MAX_ITER, 2.0, serial)
    compute_iterations(*WINDOW, MAX_ITER, 2.0, parallel)
    np.testing.assert_array_equal(parallel, serial)


def test_counts_in_range():
    out = np.empty((30, 30), dtype=np.int32)
    compute_iterations(*WINDOW, MAX_ITER, 2.0, out)
    assert out.min() >= 0
    assert out.max() <= MAX_ITER
    # The default view contains both the set and its exterior
    assert out.max() == MAX_ITER
    assert out.min() < 10
