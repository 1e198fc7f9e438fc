"""Host menu integration for written entries."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from .config import LauncherConfig
from .errors import RegistrationError
from .models import DesktopEntry

logger = logging.getLogger(__name__)


class MenuRegistrar(Protocol):
    """Installs entries into, and removes them from, the host launcher menu."""

    def register(self, entry: DesktopEntry) -> None: ...

    def deregister(self, entry: DesktopEntry) -> None: ...


class NullRegistrar:
    """Registrar that leaves the host menu alone."""

    def register(self, entry: DesktopEntry) -> None:
        logger.debug("Menu registration disabled, not installing %s", entry.filename)

    def deregister(self, entry: DesktopEntry) -> None:
        logger.debug("Menu registration disabled, not uninstalling %s", entry.filename)


class XdgMenuRegistrar:
    """Registrar backed by ``xdg-desktop-menu`` (or a compatible command)."""

    def __init__(self, entries_dir: Path, command: str = "xdg-desktop-menu", timeout: float = 30.0):
        self.entries_dir = entries_dir
        self.command = command
        self.timeout = timeout

    def register(self, entry: DesktopEntry) -> None:
        self._run("install", str(self.entries_dir / entry.filename), entry)

    def deregister(self, entry: DesktopEntry) -> None:
        self._run("uninstall", entry.filename, entry)

    def _run(self, action: str, target: str, entry: DesktopEntry) -> None:
        args = [self.command, action, target]
        logger.debug("Running %s", " ".join(args))

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise RegistrationError(f"{self.command} not found: {e}", entry) from e
        except subprocess.TimeoutExpired as e:
            raise RegistrationError(
                f"{self.command} {action} timed out after {self.timeout}s", entry
            ) from e
        except OSError as e:
            raise RegistrationError(f"Couldn't run {self.command}: {e}", entry) from e

        if result.returncode != 0:
            output = result.stderr.strip() or result.stdout.strip()
            raise RegistrationError(
                f"{self.command} {action} {target} failed with exit code "
                f"{result.returncode}: {output}",
                entry,
            )


def make_registrar(config: LauncherConfig) -> MenuRegistrar:
    """Build the registrar selected by configuration."""
    if not config.register_with_menu:
        return NullRegistrar()
    return XdgMenuRegistrar(
        config.get_entries_path(),
        command=config.menu_command,
        timeout=config.registration_timeout,
    )
