"""
Escape-time computation functions using Numba JIT compilation.

This module holds the performance-critical kernels:
- converge: bounded orbit test z -> z² + c for a single point
- pixel_to_plane: linear pixel -> complex-plane mapping
- compute_iterations: parallel fill of an iteration-count grid
- compute_iterations_serial: single-threaded reference fill

The parallel kernel walks the width*height pixels as one flat index space
so numba can hand out chunks of pixels to idle threads. Per-pixel cost
varies by orders of magnitude (points inside the set run the full budget,
exterior points escape after a few steps), so dynamic chunking matters;
see set_parallel_chunksize in field.FractalField.

Kernels are compiled without fastmath; serial and parallel fills are
bit-identical.
"""

import numpy as np
from numba import jit, prange


ESCAPE_RADIUS = 2.0


@jit(nopython=True, cache=True)
def converge(c, max_iter, escape_radius=ESCAPE_RADIUS):
    """
    Count iterations of z -> z² + c from z = 0 until |z| reaches the radius.

    Args:
        c: Point in the complex plane
        max_iter: Iteration budget (upper bound of the result)
        escape_radius: Escape threshold (default 2.0)

    Returns:
        Iteration count in [0, max_iter]; max_iter means "did not escape".
    """
    z = 0j
    iteration = 0
    while iteration < max_iter and abs(z) < escape_radius:
        z = z * z + c
        iteration += 1
    return iteration


@jit(nopython=True, cache=True)
def pixel_to_plane(max_r, max_i, min_r, min_i, col, row, width, height):
    """Map pixel (col, row) to (re, im); column 0 / row 0 land on min."""
    cr = min_r + col * (max_r - min_r) / (width - 1)
    ci = min_i + row * (max_i - min_i) / (height - 1)
    return cr, ci


@jit(nopython=True, parallel=True, cache=True)
def compute_iterations(max_r, max_i, min_r, min_i, max_iter, escape_radius, out):
    """
    Fill `out` (height, width) with escape-time counts, in parallel.

    Both spatial axes are collapsed into one index space so chunks can
    be scheduled independently of row boundaries. Every cell depends only
    on its own coordinate, so no synchronization is needed.
    """
    height, width = out.shape
    for k in prange(width * height):
        index = np.int64(k)  # prange may hand out unsigned indices
        row = index // width
        col = index - row * width
        cr, ci = pixel_to_plane(max_r, max_i, min_r, min_i, col, row, width, height)
        out[row, col] = converge(complex(cr, ci), max_iter, escape_radius)


@jit(nopython=True, cache=True)
def compute_iterations_serial(max_r, max_i, min_r, min_i, max_iter, escape_radius, out):
    """Single-threaded, row-major version of compute_iterations."""
    height, width = out.shape
    for row in range(height):
        for col in range(width):
            cr, ci = pixel_to_plane(max_r, max_i, min_r, min_i, col, row, width, height)
            out[row, col] = converge(complex(cr, ci), max_iter, escape_radius)


def warmup_jit(colormap):
    """
    Warm up JIT compilation with small dummy arrays.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first real recompute.

    Args:
        colormap: A ColorMap to use for warming up its array path
    """
    counts = np.zeros((4, 4), dtype=np.int32)
    compute_iterations(0.7, 1.0, -1.5, -1.0, 8, ESCAPE_RADIUS, counts)
    compute_iterations_serial(0.7, 1.0, -1.5, -1.0, 8, ESCAPE_RADIUS, counts)
    colormap.apply(np.clip(counts, colormap.min, colormap.max))
