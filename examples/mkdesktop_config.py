"""mkdesktop Configuration - Python Example

Copy to ~/.config/mkdesktop/mkdesktop_config.py for hooks around entry writes.

Convention:
- CONFIG dict for static configuration (same structure as TOML)
- Functions named hook_* become lifecycle hooks
"""

import subprocess

# =============================================================================
# Static Configuration (same structure as TOML)
# =============================================================================

CONFIG = {
    "storage": {
        "entries_dir": "mkdesktop",
    },
    "menu": {
        "command": "xdg-desktop-menu",
        "register": True,
        "timeout": 15,
    },
    "entries": {
        "delete_action": True,
    },
    "logging": {
        "level": "info",
    },
}


# =============================================================================
# Hooks - Called during engine operations
# =============================================================================

def hook_pre_write(entry):
    """Called before an entry file is written.

    Return a modified entry, or None to keep it unchanged.
    """
    if not entry.categories:
        entry.categories = "Utility;"
    return entry


def hook_post_write(entry):
    """Called after an entry is written and registered."""
    # Refresh the desktop database so launchers pick the entry up right away
    try:
        subprocess.run(["update-desktop-database", "-q"], timeout=10)
    except (OSError, subprocess.SubprocessError):
        pass


def hook_post_delete(entry):
    """Called after an entry file is removed."""
    print(f"Removed launcher for {entry.name}")
