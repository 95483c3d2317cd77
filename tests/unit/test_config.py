"""Tests for configuration directory and settings resolution."""

import json
from pathlib import Path

from liqcalc.sdk.config import (
    clear_setting,
    get_config_dir,
    get_parameters_dir,
    get_setting,
    get_settings_path,
    load_settings,
    set_setting,
    update_settings,
)


class TestConfigDir:

    def test_env_var_wins(self, tmp_path, monkeypatch):
        """LIQ_CALC_CONFIG_PATH is used as-is."""
        monkeypatch.setenv("LIQ_CALC_CONFIG_PATH", str(tmp_path / "cfg"))
        assert get_config_dir() == tmp_path / "cfg"

    def test_xdg_fallback(self, tmp_path, monkeypatch):
        """Without the env var, settings live under XDG_CONFIG_HOME."""
        monkeypatch.delenv("LIQ_CALC_CONFIG_PATH", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / "liq-calc"


class TestSettings:

    def test_missing_file_is_empty(self, isolated_config):
        """No settings.json reads as no settings."""
        assert load_settings() == {}
        assert get_setting("parameters_dir", "fallback") == "fallback"

    def test_set_setting_persists(self, isolated_config):
        """Settings are written as JSON and read back."""
        path = set_setting("parameters_dir", "/srv/params")
        assert json.loads(path.read_text()) == {"parameters_dir": "/srv/params"}
        assert get_setting("parameters_dir") == "/srv/params"

    def test_save_creates_config_dir(self, tmp_path, monkeypatch):
        """The config directory is created on first write."""
        monkeypatch.setenv("LIQ_CALC_CONFIG_PATH", str(tmp_path / "new" / "cfg"))
        path = set_setting("default_output_format", "json")
        assert path == tmp_path / "new" / "cfg" / "settings.json"
        assert path.exists()

    def test_update_keeps_other_keys(self, isolated_config):
        """Several keys change in one write and untouched keys survive."""
        set_setting("parameters_dir", "/srv/params")
        update_settings(default_output_format="json", parameters_dir="/srv/other")
        assert load_settings() == {
            "parameters_dir": "/srv/other",
            "default_output_format": "json",
        }

    def test_update_with_none_removes_key(self, isolated_config):
        update_settings(parameters_dir="/srv/params", default_output_format="json")
        update_settings(parameters_dir=None)
        assert load_settings() == {"default_output_format": "json"}

    def test_clear_setting(self, isolated_config):
        """Clearing reports whether the key was there."""
        set_setting("parameters_dir", "/srv/params")
        assert clear_setting("parameters_dir") is True
        assert get_setting("parameters_dir") is None
        assert clear_setting("parameters_dir") is False

    def test_clear_missing_key_does_not_create_file(self, isolated_config):
        """Clearing an absent key leaves the config untouched."""
        assert clear_setting("parameters_dir") is False
        assert not get_settings_path().exists()


class TestParametersDir:

    def test_none_by_default(self, isolated_config):
        """Only bundled files are used unless a directory is configured."""
        assert get_parameters_dir() is None

    def test_from_settings(self, isolated_config):
        set_setting("parameters_dir", "/srv/params")
        assert get_parameters_dir() == Path("/srv/params")

    def test_env_var_overrides_settings(self, isolated_config, monkeypatch, tmp_path):
        """LIQ_CALC_PARAMETERS_PATH beats settings.json."""
        set_setting("parameters_dir", "/srv/params")
        monkeypatch.setenv("LIQ_CALC_PARAMETERS_PATH", str(tmp_path))
        assert get_parameters_dir() == tmp_path
