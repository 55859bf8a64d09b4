"""
Fractal field: the pixel grid and the recompute loop that fills it.

The FractalField class handles:
- Validating the window and grid configuration
- Running the escape-time kernel (parallel or serial) into a fresh buffer
- Coloring the counts with the hue-cycle ColorMap
- Publishing the finished grid atomically (double buffering under a lock)

Consumers only ever see a complete grid: a recompute that fails leaves
the previously published grid, counts and window in place.
"""

import logging
import threading
import time

import numpy as np
import numba

from .colormap import ColorMap
from .compute import (
    ESCAPE_RADIUS,
    converge,
    compute_iterations,
    compute_iterations_serial,
)
from .zoom import DegenerateWindowError


logger = logging.getLogger(__name__)


DEFAULT_CHUNK_SIZE = 64  # Pixels handed to a worker at a time in parallel mode
MAX_ITER_LIMIT = int(np.iinfo(np.int32).max)  # Counts are stored as int32


class FractalField:
    """
    Owns the RGB pixel grid for one plane window at a time.

    Usage:
        field = FractalField(800, 800, max_iter=256)
        field.recompute(ComplexWindow(0.7 + 1.0j, -1.5 - 1.0j))
        blit(field.grid)      # (height, width, 3) uint8, read-only

    Attributes:
        width, height: Grid dimensions in pixels (fixed)
        max_iter: Iteration budget (fixed)
        escape_radius: Escape threshold for the orbit test
        parallel: Use the multi-threaded kernel
        num_threads: Worker threads for the parallel kernel (None = numba default)
        chunk_size: Pixels per dynamically scheduled chunk
        colormap: ColorMap over [0, max_iter]
        generation: Number of grids published so far
    """

    def __init__(self, width, height, max_iter, escape_radius=ESCAPE_RADIUS,
                 parallel=True, num_threads=None, chunk_size=DEFAULT_CHUNK_SIZE):
        """
        Initialize the field.

        Args:
            width, height: Grid dimensions in pixels (at least 2 each)
            max_iter: Iteration budget, a positive int32-sized integer
            escape_radius: Escape threshold (default 2.0)
            parallel: Whether to use the parallel kernel (default True)
            num_threads: Thread count for the parallel kernel (None = all)
            chunk_size: Dynamic scheduling chunk in pixels (default 64)
        """
        if int(width) < 2 or int(height) < 2:
            raise ValueError(f"grid must be at least 2x2 pixels, got {width}x{height}")
        if not 1 <= int(max_iter) <= MAX_ITER_LIMIT:
            raise ValueError(f"max_iter must be in [1, {MAX_ITER_LIMIT}], got {max_iter}")
        if not escape_radius > 0:
            raise ValueError(f"escape_radius must be positive, got {escape_radius}")
        if int(chunk_size) < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if num_threads is not None and not 1 <= num_threads <= numba.config.NUMBA_NUM_THREADS:
            raise ValueError(
                f"num_threads must be in [1, {numba.config.NUMBA_NUM_THREADS}], got {num_threads}"
            )

        self.width = int(width)
        self.height = int(height)
        self.max_iter = int(max_iter)
        self.escape_radius = float(escape_radius)
        self.parallel = parallel
        self.num_threads = num_threads
        self.chunk_size = int(chunk_size)
        self.colormap = ColorMap(self.max_iter, 0)

        # Published state; replaced wholesale, never written in place
        self._grid = self._freeze(np.zeros((self.height, self.width, 3), dtype=np.uint8))
        self._iterations = self._freeze(np.zeros((self.height, self.width), dtype=np.int32))
        self._window = None
        self.generation = 0
        self.lock = threading.Lock()

        # Serializes recompute calls
        self._recompute_lock = threading.Lock()

    @staticmethod
    def _freeze(array):
        array.flags.writeable = False
        return array

    def converge(self, c):
        """Escape-time count for a single point under this field's budget."""
        return converge(complex(c), self.max_iter, self.escape_radius)

    def recompute(self, window):
        """
        Recompute the whole grid for `window`.

        Blocks until the new grid is published. Calls from several threads
        are serialized.

        Raises:
            DegenerateWindowError if the window has zero or negative area
            OutOfRangeError if a count falls outside the color map range;
            the previous grid stays published
        """
        if window.is_degenerate():
            raise DegenerateWindowError(f"cannot render zero-area window {window}")

        with self._recompute_lock:
            start = time.perf_counter()
            iterations = np.empty((self.height, self.width), dtype=np.int32)
            self._fill(window, iterations)
            grid = self.colormap.apply(iterations)

            with self.lock:
                self._grid = self._freeze(grid)
                self._iterations = self._freeze(iterations)
                self._window = window
                self.generation += 1

            logger.info("Computed %dx%d grid for %s in %.3fs",
                        self.width, self.height, window, time.perf_counter() - start)
        return grid

    def _fill(self, window, out):
        args = (window.max.real, window.max.imag, window.min.real, window.min.imag,
                self.max_iter, self.escape_radius, out)
        if not self.parallel:
            logger.debug("Serial recompute")
            compute_iterations_serial(*args)
            return

        old_threads = numba.get_num_threads()
        old_chunk = numba.set_parallel_chunksize(self.chunk_size)
        try:
            if self.num_threads is not None:
                numba.set_num_threads(self.num_threads)
            logger.debug("Parallel recompute: %d threads, chunk size %d",
                         numba.get_num_threads(), self.chunk_size)
            compute_iterations(*args)
        finally:
            numba.set_parallel_chunksize(old_chunk)
            numba.set_num_threads(old_threads)

    @property
    def grid(self):
        """Read-only (height, width, 3) uint8 view of the published grid."""
        with self.lock:
            return self._grid

    @property
    def pixels(self):
        """Read-only row-major sequence of RGB triples, length width*height."""
        return self.grid.reshape(-1, 3)

    @property
    def iterations(self):
        """Read-only (height, width) escape-time counts behind the grid."""
        with self.lock:
            return self._iterations

    @property
    def window(self):
        """Window of the published grid, or None before the first recompute."""
        with self.lock:
            return self._window

    def snapshot(self):
        """
        Get a consistent view of the published state.

        Returns:
            Tuple of (grid, iterations, window, generation)
        """
        with self.lock:
            return self._grid, self._iterations, self._window, self.generation
