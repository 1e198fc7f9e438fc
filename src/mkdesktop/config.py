"""Configuration loading for mkdesktop.

Supports three tiers:
1. No config file - platform defaults
2. Simple config via .toml or .json
3. Python config via .py - adds hooks around entry writes and deletes
"""

from __future__ import annotations

import importlib.util
import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

# Python 3.11+ has tomllib in stdlib; fall back to tomli for older versions
try:
    import tomllib  # Python 3.11+
except ImportError:
    try:
        import tomli as tomllib  # Python <3.11
    except ImportError:  # pragma: no cover
        tomllib = None

APP_NAME = "mkdesktop"

HOOK_NAMES = ("pre_write", "post_write", "post_delete")


def user_data_dir() -> Path:
    """Per-user data directory following platform conventions."""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    return Path.home() / ".local" / "share"


def user_config_dir() -> Path:
    """Per-user directory searched for mkdesktop configuration.

    Kept apart from the default entries directory, where every file is read
    as an entry.
    """
    if sys.platform == "win32":
        local = os.environ.get("LOCALAPPDATA")
        if local:
            return Path(local) / APP_NAME
        return Path.home() / "AppData" / "Local" / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Preferences" / APP_NAME
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


@dataclass
class LauncherConfig:
    """Configuration for where entries live and how they are registered."""

    # Storage location: <data_home>/<entries_dir>
    data_home: Path = field(default_factory=user_data_dir)
    entries_dir: str = APP_NAME

    # Host menu integration
    menu_command: str = "xdg-desktop-menu"
    register_with_menu: bool = True
    registration_timeout: float = 30.0

    # Emit a "Delete Shortcut" desktop action in written entries
    delete_action: bool = False

    log_level: str = "WARNING"

    # Hooks (populated from Python config)
    hooks: dict[str, Callable] = field(default_factory=dict)

    def get_entries_path(self) -> Path:
        return self.data_home / self.entries_dir


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from TOML file."""
    if tomllib is None:
        raise ImportError("tomli required for TOML config: pip install tomli")
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_python_config(path: Path) -> tuple[dict[str, Any], dict[str, Callable]]:
    """Load configuration from Python file.

    Returns:
        Tuple of (config_dict, hooks_dict)

    Convention:
        - CONFIG dict or config dict for static configuration
        - Functions named hook_<name> become hooks, for <name> in HOOK_NAMES
    """
    spec = importlib.util.spec_from_file_location("mkdesktop_config", path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load Python config from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules["mkdesktop_config"] = module
    spec.loader.exec_module(module)

    config_dict = {}
    if hasattr(module, "CONFIG"):
        config_dict = module.CONFIG
    elif hasattr(module, "config"):
        config_dict = module.config

    hooks = {}
    for name in HOOK_NAMES:
        hook = getattr(module, f"hook_{name}", None)
        if callable(hook):
            hooks[name] = hook

    return config_dict, hooks


def dict_to_config(data: dict[str, Any]) -> LauncherConfig:
    """Convert dictionary to LauncherConfig."""
    config = LauncherConfig()

    if "storage" in data:
        storage = data["storage"]
        if "data_home" in storage:
            config.data_home = Path(storage["data_home"]).expanduser()
        if "entries_dir" in storage:
            config.entries_dir = storage["entries_dir"]

    if "menu" in data:
        menu = data["menu"]
        if "command" in menu:
            config.menu_command = menu["command"]
        if "register" in menu:
            config.register_with_menu = bool(menu["register"])
        if "timeout" in menu:
            config.registration_timeout = float(menu["timeout"])

    if "entries" in data:
        entries = data["entries"]
        if "delete_action" in entries:
            config.delete_action = bool(entries["delete_action"])

    if "logging" in data:
        if "level" in data["logging"]:
            config.log_level = str(data["logging"]["level"]).upper()

    return config


def find_config_file(config_dir: Path) -> Optional[Path]:
    """Find configuration file in a directory.

    Search order:
    1. mkdesktop_config.py (most flexible)
    2. mkdesktop.toml
    3. mkdesktop.json
    """
    candidates = [
        "mkdesktop_config.py",
        "mkdesktop.toml",
        "mkdesktop.json",
    ]

    for name in candidates:
        path = config_dir / name
        if path.exists():
            return path

    return None


def load_config(config_dir: Optional[Path] = None, config_path: Optional[Path] = None) -> LauncherConfig:
    """Load mkdesktop configuration.

    Args:
        config_dir: Directory to search (default: user config directory)
        config_path: Optional explicit path to config file

    Returns:
        LauncherConfig instance
    """
    if config_path is None:
        config_path = find_config_file(config_dir or user_config_dir())

    if config_path is None:
        return LauncherConfig()

    suffix = config_path.suffix.lower()

    if suffix == ".py":
        config_dict, hooks = load_python_config(config_path)
        config = dict_to_config(config_dict)
        config.hooks = hooks
        return config

    elif suffix == ".toml":
        return dict_to_config(load_toml_config(config_path))

    elif suffix == ".json":
        return dict_to_config(load_json_config(config_path))

    else:
        raise ValueError(f"Unsupported config file type: {suffix}")
