"""
Settings for the Mandelbrot explorer.

Settings are read from a JSON file (settings.json next to this module by
default) and merged over DEFAULT_SETTINGS. A missing or unreadable file
falls back to the defaults with a warning; values that are present but
invalid raise ValueError.

Example settings.json:
    {
        "width": 800,
        "height": 800,
        "max_iter": 256,
        "initial_window": {"max": [0.7, 1.0], "min": [-1.5, -1.0]},
        "num_threads": null,
        "chunk_size": 64
    }
"""

import json
import logging
import os

from .zoom import ComplexWindow


logger = logging.getLogger(__name__)


SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')

DEFAULT_SETTINGS = {
    'width': 800,
    'height': 800,
    'max_iter': 256,
    'escape_radius': 2.0,
    'initial_window': {'max': [0.7, 1.0], 'min': [-1.5, -1.0]},
    'parallel': True,
    'num_threads': None,
    'chunk_size': 64,
}


def load_settings(path=None):
    """
    Load settings from a JSON file, merged over the defaults.

    Args:
        path: Settings file (default: settings.json in the package)

    Returns:
        dict with every key of DEFAULT_SETTINGS

    Raises:
        ValueError if a setting has an invalid value
    """
    settings_path = path or SETTINGS_PATH
    settings = dict(DEFAULT_SETTINGS)
    try:
        with open(settings_path, 'r') as f:
            loaded = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s, using defaults: %s", settings_path, e)
        return settings

    if not isinstance(loaded, dict):
        logger.warning("Ignoring %s: expected a JSON object", settings_path)
        return settings

    for key in DEFAULT_SETTINGS:
        if key in loaded:
            settings[key] = loaded[key]
    validate_settings(settings)
    return settings


def validate_settings(settings):
    """Check setting values, raising ValueError on the first bad one."""
    for key in ('width', 'height'):
        if not _is_int(settings[key]) or settings[key] < 2:
            raise ValueError(f"{key} must be an integer >= 2, got {settings[key]!r}")
    for key in ('max_iter', 'chunk_size'):
        if not _is_int(settings[key]) or settings[key] < 1:
            raise ValueError(f"{key} must be a positive integer, got {settings[key]!r}")
    threads = settings['num_threads']
    if threads is not None and (not _is_int(threads) or threads < 1):
        raise ValueError(f"num_threads must be null or a positive integer, got {threads!r}")
    radius = settings['escape_radius']
    if isinstance(radius, bool) or not isinstance(radius, (int, float)) or radius <= 0:
        raise ValueError(f"escape_radius must be a positive number, got {radius!r}")
    if not isinstance(settings['parallel'], bool):
        raise ValueError(f"parallel must be true or false, got {settings['parallel']!r}")
    window_from_settings(settings)


def window_from_settings(settings):
    """
    Build the initial ComplexWindow from settings.

    Raises:
        ValueError if the window is malformed or has zero area
    """
    spec = settings['initial_window']
    try:
        max_corner = complex(*spec['max'])
        min_corner = complex(*spec['min'])
    except (KeyError, TypeError) as e:
        raise ValueError(f"initial_window must look like "
                         f"{{'max': [re, im], 'min': [re, im]}}, got {spec!r}") from e
    window = ComplexWindow(max_corner, min_corner)
    if window.is_degenerate():
        raise ValueError(f"initial_window must have max > min on both axes, got {window}")
    return window


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)
