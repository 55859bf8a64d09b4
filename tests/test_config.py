"""Tests for settings loading."""

import json
import logging

import pytest

from mandelzoom.config import DEFAULT_SETTINGS, SETTINGS_PATH, load_settings, window_from_settings
from mandelzoom.zoom import ComplexWindow


def _write(tmp_path, data):
    path = tmp_path / "settings.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return str(path)


def test_packaged_settings_load():
    settings = load_settings(SETTINGS_PATH)
    assert settings['width'] == 800
    assert settings['height'] == 800
    assert settings['max_iter'] == 256
    assert window_from_settings(settings) == ComplexWindow(0.7 + 1.0j, -1.5 - 1.0j)


def test_missing_file_falls_back_to_defaults(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="mandelzoom.config"):
        settings = load_settings(str(tmp_path / "nope.json"))
    assert settings == DEFAULT_SETTINGS
    assert "using defaults" in caplog.text


def test_invalid_json_falls_back_to_defaults(tmp_path):
    assert load_settings(_write(tmp_path, "{not json")) == DEFAULT_SETTINGS


def test_non_object_is_ignored(tmp_path):
    assert load_settings(_write(tmp_path, [1, 2, 3])) == DEFAULT_SETTINGS


def test_partial_override(tmp_path):
    settings = load_settings(_write(tmp_path, {"max_iter": 500, "num_threads": 2, "extra": 1}))
    assert settings['max_iter'] == 500
    assert settings['num_threads'] == 2
    assert settings['width'] == DEFAULT_SETTINGS['width']
    assert 'extra' not in settings


def test_defaults_not_mutated(tmp_path):
    load_settings(_write(tmp_path, {"width": 320}))
    assert DEFAULT_SETTINGS['width'] == 800


@pytest.mark.parametrize("override", [
    {"width": 1},
    {"height": "800"},
    {"max_iter": 0},
    {"max_iter": True},
    {"chunk_size": -4},
    {"num_threads": 0},
    {"escape_radius": 0},
    {"parallel": "yes"},
    {"initial_window": {"max": [0.7, 1.0]}},
    {"initial_window": {"max": [-1.5, 1.0], "min": [0.7, -1.0]}},
    {"initial_window": "everywhere"},
])
def test_invalid_values_raise(tmp_path, override):
    with pytest.raises(ValueError):
        load_settings(_write(tmp_path, override))
