"""Configuration management for liq-calc.

Configuration lives in settings.json - machine-specific settings:
   - parameters_dir: directory with custom legal parameter files
   - default_output_format: tool behavior preferences

Config directory resolution:
1. LIQ_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/liq-calc/ (XDG_CONFIG_HOME fallback)

Legal parameter directory resolution:
1. LIQ_CALC_PARAMETERS_PATH environment variable (if set)
2. settings.json "parameters_dir" key
3. None - only the bundled parameter files are used
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional


APP_NAME = "liq-calc"
SETTINGS_FILENAME = "settings.json"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. LIQ_CALC_CONFIG_PATH environment variable
    2. ~/.config/liq-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("LIQ_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Path to settings.json (the file may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> Dict[str, Any]:
    """Read settings.json; a missing file means no settings."""
    path = get_settings_path()
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return json.load(f)


def save_settings(settings: Dict[str, Any]) -> Path:
    """Write settings.json, creating the config directory if needed."""
    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(settings, f, indent=2)
    return path


def update_settings(**changes: Any) -> Path:
    """Apply changes to settings.json in one read-modify-write.

    A value of None removes the key.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    for key, value in changes.items():
        if value is None:
            settings.pop(key, None)
        else:
            settings[key] = value
    return save_settings(settings)


def get_setting(key: str, default: Any = None) -> Any:
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    return update_settings(**{key: value})


def clear_setting(key: str) -> bool:
    """Remove a key from settings.json.

    Returns:
        True if the key was set and has been removed
    """
    if key not in load_settings():
        return False
    update_settings(**{key: None})
    return True


def get_parameters_dir() -> Optional[Path]:
    """Get the custom legal parameter directory, if one is configured.

    Files found there take precedence over the bundled ones, year by year.

    Returns:
        Path to the custom directory, or None to use bundled files only
    """
    env_path = os.environ.get("LIQ_CALC_PARAMETERS_PATH")
    if env_path:
        return Path(env_path).expanduser()

    configured = get_setting("parameters_dir")
    if configured:
        return Path(configured).expanduser()

    return None
