"""Tests for scan settings."""

import pytest

from tfmodules.settings import ScanSettings
from tfmodules.settings import SettingsError
from tfmodules.settings import load_settings


def test_defaults_without_file(tmp_path):
    """Without a settings file every option has its default."""
    settings = load_settings(tmp_path)

    assert settings == ScanSettings()
    assert settings.stop_on_parse_error is False
    assert settings.use_module_metadata is True
    assert settings.max_depth == 10


def test_yaml_file_overrides_defaults(tmp_path, write_tree):
    write_tree({".tfmodules.yaml": "stop_on_parse_error: true\nmax_depth: 2\n"})

    settings = load_settings(tmp_path)

    assert settings.stop_on_parse_error is True
    assert settings.max_depth == 2


def test_empty_yaml_file_is_defaults(tmp_path, write_tree):
    """An empty file behaves like no file."""
    write_tree({".tfmodules.yaml": ""})

    assert load_settings(tmp_path) == ScanSettings()


@pytest.mark.parametrize("content", ["max_depth: -1\n", "- a list\n", "key: [unclosed\n"])
def test_invalid_file_raises(tmp_path, write_tree, content):
    """Bad values, non-mapping documents and broken YAML raise SettingsError."""
    write_tree({".tfmodules.yaml": content})

    with pytest.raises(SettingsError):
        load_settings(tmp_path)


def test_with_overrides_skips_none():
    """Unset CLI flags (None) leave file values alone."""
    settings = ScanSettings(max_depth=4).with_overrides(max_depth=None, stop_on_parse_error=True)

    assert settings.max_depth == 4
    assert settings.stop_on_parse_error is True
