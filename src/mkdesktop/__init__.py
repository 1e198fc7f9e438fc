"""mkdesktop - manage .desktop launcher entries for your own programs."""

from .config import LauncherConfig, load_config
from .engine import DesktopEngine, select_entry
from .models import DesktopEntry, name_to_filename, parse_desktop_entry

__version__ = "0.3.0"

__all__ = [
    "DesktopEngine",
    "DesktopEntry",
    "LauncherConfig",
    "load_config",
    "name_to_filename",
    "parse_desktop_entry",
    "select_entry",
]
