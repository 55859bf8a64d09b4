"""
Plane windows and drag-box zooming.

A ComplexWindow is the rectangle of the complex plane mapped onto the
pixel grid. derive_zoom_window turns a pixel-space drag rectangle into
the next window, and ZoomNavigator keeps the current window, a short
history for stepping back out, and triggers recomputes on the field.
"""

import logging
from dataclasses import dataclass

from .compute import pixel_to_plane


logger = logging.getLogger(__name__)


class DegenerateWindowError(ValueError):
    """Raised when a window (or the drag that produced it) has zero area."""

    def __init__(self, message, start=None, end=None):
        self.start = start
        self.end = end
        super().__init__(message)


@dataclass(frozen=True)
class ComplexWindow:
    """Rectangle of the complex plane given by its max and min corners."""

    max: complex
    min: complex

    @classmethod
    def from_bounds(cls, x_min, x_max, y_min, y_max):
        """Build a window from (x_min, x_max, y_min, y_max) axis bounds."""
        return cls(complex(x_max, y_max), complex(x_min, y_min))

    @property
    def bounds(self):
        """Axis bounds as (x_min, x_max, y_min, y_max)."""
        return self.min.real, self.max.real, self.min.imag, self.max.imag

    def is_degenerate(self):
        return not (self.max.real > self.min.real and self.max.imag > self.min.imag)

    def pixel_to_plane(self, col, row, width, height):
        """Plane coordinate of pixel (col, row) on a width x height grid."""
        cr, ci = pixel_to_plane(
            self.max.real, self.max.imag, self.min.real, self.min.imag,
            float(col), float(row), width, height
        )
        return complex(cr, ci)

    def __str__(self):
        return f"max={self.max}, min={self.min}"


def derive_zoom_window(window, start, end, width, height):
    """
    Compute the window selected by a drag from `start` to `end`.

    Both corners are mapped to the plane with the same interpolation the
    kernel uses, then the real and imaginary extents are ordered
    independently, so any drag direction yields a valid box.

    Args:
        window: Current ComplexWindow
        start, end: (x, y) pixel positions of the drag
        width, height: Grid dimensions in pixels

    Returns:
        The new ComplexWindow

    Raises:
        DegenerateWindowError if the drag has zero width or height, or the
        derived window collapses in floating point
    """
    (x0, y0), (x1, y1) = start, end
    if x0 == x1 or y0 == y1:
        raise DegenerateWindowError(
            f"zero-area drag from {start} to {end}", start=start, end=end
        )

    a = window.pixel_to_plane(x0, y0, width, height)
    b = window.pixel_to_plane(x1, y1, width, height)
    new_window = ComplexWindow(
        complex(max(a.real, b.real), max(a.imag, b.imag)),
        complex(min(a.real, b.real), min(a.imag, b.imag)),
    )
    if new_window.is_degenerate():
        raise DegenerateWindowError(
            f"drag from {start} to {end} collapses to {new_window}", start=start, end=end
        )
    return new_window


class ZoomNavigator:
    """
    Interaction-layer state for drag-to-zoom exploration.

    Owns the current window and asks the field to recompute whenever it
    changes. A zoom only takes effect once the recompute succeeds, so a
    failed recompute leaves both the window and the published grid as
    they were.

    Usage:
        navigator = ZoomNavigator(field, ComplexWindow(0.7 + 1j, -1.5 - 1j))
        navigator.render()
        navigator.zoom((100, 100), (50, 50))
        navigator.back()
    """

    MAX_HISTORY = 32  # Number of previous windows kept for back()

    def __init__(self, field, initial_window):
        if initial_window.is_degenerate():
            raise DegenerateWindowError(f"initial window {initial_window} has zero area")
        self.field = field
        self.initial_window = initial_window
        self.window = initial_window
        self.history = []

    def render(self):
        """Recompute the field for the current window."""
        self.field.recompute(self.window)

    def zoom(self, start, end):
        """
        Zoom into the box dragged from `start` to `end`.

        Returns:
            True if the window changed, False if the drag was discarded
        """
        try:
            new_window = derive_zoom_window(
                self.window, start, end, self.field.width, self.field.height
            )
        except DegenerateWindowError as e:
            logger.warning("Discarding zoom: %s", e)
            return False
        self.field.recompute(new_window)
        self.history.append(self.window)
        if len(self.history) > self.MAX_HISTORY:
            self.history.pop(0)
        self.window = new_window
        logger.info("New range: %s", new_window)
        return True

    def back(self):
        """Return to the previous window. Returns False if there is none."""
        if not self.history:
            return False
        self.field.recompute(self.history[-1])
        self.window = self.history.pop()
        logger.info("Back to range: %s", self.window)
        return True

    def reset(self):
        """Return to the initial window and clear history."""
        self.field.recompute(self.initial_window)
        self.window = self.initial_window
        self.history.clear()
        logger.info("Reset to range: %s", self.window)