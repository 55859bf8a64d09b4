"""
Mandelbrot Set Explorer Package

An interactive drag-to-zoom Mandelbrot explorer using Pygame for display
and Numba for parallel JIT-compiled escape-time computation.

Quick Start:
    from mandelzoom import run
    run()

Or from command line:
    python -m mandelzoom

Headless use:
    from mandelzoom import FractalField, ComplexWindow
    field = FractalField(800, 800, max_iter=256)
    field.recompute(ComplexWindow(0.7 + 1.0j, -1.5 - 1.0j))
    field.grid   # (800, 800, 3) uint8

Package Structure:
    - colormap.py: Hue-cycle color map and OutOfRangeError
    - compute.py: JIT-compiled escape-time kernels (parallel and serial)
    - field.py: FractalField, the double-buffered pixel grid
    - zoom.py: ComplexWindow, drag-box zoom and the ZoomNavigator
    - config.py: JSON settings loading
    - app.py: Pygame window and event loop

Controls:
    - Drag: Zoom into the selected box
    - Backspace: Back to the previous view
    - R: Reset to default view
    - ESC: Quit
"""

from .app import run, MandelbrotApp
from .colormap import ColorMap, OutOfRangeError
from .field import FractalField
from .zoom import ComplexWindow, DegenerateWindowError, ZoomNavigator, derive_zoom_window

__version__ = "1.0.0"
__all__ = [
    "run",
    "MandelbrotApp",
    "ColorMap",
    "OutOfRangeError",
    "FractalField",
    "ComplexWindow",
    "DegenerateWindowError",
    "ZoomNavigator",
    "derive_zoom_window",
]
