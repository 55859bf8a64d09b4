"""
Hue-cycle color map for escape-time values.

Iteration counts in [min, max] are normalized onto a 32-unit cycle and
looked up on a fixed piecewise-linear ramp:

    x in [0, 4]    dark blue -> blue
    x in (4, 12]   blue -> cyan
    x in (12, 20]  cyan -> yellow-green
    x in (20, 28]  yellow -> red
    x in (28, 32]  red -> dark red

The ramp itself is JIT-compiled so the scalar lookup (get_color) and the
array path (ColorMap.apply) produce identical channels for the same value.
"""

import numpy as np
from numba import jit, prange


CYCLE_LENGTH = 32.0   # Width of the hue cycle in normalized units
SLOPE = 1.0 / 12.0    # Channel change per unit of x
BLUE_BASE = 2.0 / 3.0  # Blue level at x = 0


class OutOfRangeError(ValueError):
    """Raised when a value falls outside the color map's [min, max] range."""

    def __init__(self, value, min_value, max_value):
        self.value = value
        self.min = min_value
        self.max = max_value
        super().__init__(
            f"value {value!r} out of color map range [{min_value}, {max_value}]"
        )


@jit(nopython=True, cache=True)
def _channel(level):
    """Scale a [0, 1] level to a rounded 8-bit channel."""
    v = int(np.floor(255.0 * level + 0.5))
    if v < 0:
        return 0
    if v > 255:
        return 255
    return v


@jit(nopython=True, cache=True)
def hue_cycle(x):
    """
    Look up the ramp color at cycle position x.

    x must already lie in [0, 32]; callers are responsible for the range
    check (see ColorMap.get_color).

    Returns:
        (r, g, b) tuple of ints in [0, 255]
    """
    if x <= 4.0:
        return 0, 0, _channel(SLOPE * x + BLUE_BASE)
    elif x <= 12.0:
        return 0, _channel(SLOPE * (x - 4.0)), 255
    elif x <= 20.0:
        return _channel(SLOPE * (x - 12.0)), 255, _channel(1.0 - SLOPE * (x - 12.0))
    elif x <= 28.0:
        return 255, _channel(1.0 - SLOPE * (x - 20.0)), 0
    return _channel(1.0 - SLOPE * (x - 28.0)), 0, 0


@jit(nopython=True, parallel=True, cache=True)
def apply_hue_cycle(values, min_value, max_value, out):
    """
    Color a flat array of values into an (N, 3) uint8 array in place.

    Values are assumed to be validated against [min_value, max_value].
    """
    span = max_value - min_value
    for i in prange(values.shape[0]):
        x = CYCLE_LENGTH * (values[i] - min_value) / span
        r, g, b = hue_cycle(x)
        out[i, 0] = r
        out[i, 1] = g
        out[i, 2] = b


class ColorMap:
    """
    Maps a bounded scalar to an RGB triple on the fixed hue cycle.

    Usage:
        cmap = ColorMap(256, 0)
        cmap.get_color(12)          # -> (0, 0, 202)
        rgb = cmap.apply(counts)    # (..., 3) uint8 image
    """

    def __init__(self, max_value=255, min_value=0):
        self.set_range(max_value, min_value)

    def set_range(self, max_value, min_value):
        """Set the [min, max] range used to normalize values."""
        if not max_value > min_value:
            raise ValueError(
                f"color map range needs max > min, got max={max_value}, min={min_value}"
            )
        self.max = float(max_value)
        self.min = float(min_value)

    def normalize(self, value):
        """Position of value on the 32-unit hue cycle."""
        return CYCLE_LENGTH * (float(value) - self.min) / (self.max - self.min)

    def get_color(self, value):
        """
        Get the color for a single value.

        Raises:
            OutOfRangeError if value maps outside the cycle, i.e. lies
            outside [min, max]
        """
        x = self.normalize(value)
        if not 0.0 <= x <= CYCLE_LENGTH:
            raise OutOfRangeError(value, self.min, self.max)
        return hue_cycle(x)

    def apply(self, values, out=None):
        """
        Color an array of values.

        The whole array is checked before anything is written, so a bad
        value leaves `out` untouched.

        Args:
            values: Array of any shape
            out: Optional C-contiguous uint8 array of shape values.shape + (3,)

        Returns:
            The colored array (out if given)
        """
        values = np.ascontiguousarray(values, dtype=np.float64)
        if out is None:
            out = np.empty(values.shape + (3,), dtype=np.uint8)
        elif out.shape != values.shape + (3,):
            raise ValueError(f"output shape {out.shape} does not match {values.shape + (3,)}")
        elif out.dtype != np.uint8 or not out.flags.c_contiguous:
            raise ValueError(f"output must be a C-contiguous uint8 array, got {out.dtype}")

        if values.size:
            for bound in (values.min(), values.max()):
                x = self.normalize(bound)
                if not 0.0 <= x <= CYCLE_LENGTH:
                    raise OutOfRangeError(bound, self.min, self.max)
            apply_hue_cycle(values.reshape(-1), self.min, self.max, out.reshape(-1, 3))
        return out
