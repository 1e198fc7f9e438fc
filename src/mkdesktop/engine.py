"""Core engine - storage, selection and lifecycle of desktop entries."""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from .config import LauncherConfig
from .errors import (
    DesktopError,
    EntryNotFoundError,
    RegistrationError,
    StaleEntryError,
    StorageIoError,
    ValidationError,
)
from .fileio import TEMP_SUFFIX, atomic_write
from .models import DesktopEntry, parse_desktop_entry
from .registration import MenuRegistrar, make_registrar

__all__ = [
    "DesktopEngine",
    "DesktopError",
    "EntryNotFoundError",
    "RegistrationError",
    "StaleEntryError",
    "StorageIoError",
    "ValidationError",
    "select_entry",
]

logger = logging.getLogger(__name__)

_INDEX_SELECTOR = re.compile(r"^[(){}\[\]\s]*(\d+)[(){}\[\]\s]*$", re.ASCII)


def select_entry(token: str, entries: Sequence[DesktopEntry]) -> DesktopEntry:
    """Resolve a selector token to one entry.

    An index (optionally wrapped in brackets or whitespace) is tried first,
    then an exact match on filename or on the trimmed name.

    Raises:
        EntryNotFoundError: If nothing matches.
    """
    match = _INDEX_SELECTOR.match(token)
    if match:
        index = int(match.group(1))
        if index < len(entries):
            return entries[index]

    trimmed = token.strip()
    for entry in entries:
        if entry.filename == token or entry.name == trimmed:
            return entry

    raise EntryNotFoundError(token)


class DesktopEngine:
    """Manages the directory of entry files and their menu registration."""

    def __init__(self, config: LauncherConfig, registrar: Optional[MenuRegistrar] = None):
        self.config = config
        self.registrar = registrar if registrar is not None else make_registrar(config)

    # ========== Storage ==========

    def storage_directory(self) -> Path:
        """Return the entries directory, creating it if needed.

        Raises:
            StorageIoError: If the directory can't be created.
        """
        directory = self.config.get_entries_path()
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIoError(
                f"Couldn't create directory to put desktop files in: {directory} ({e})",
                directory,
            ) from e
        return directory

    def entry_path(self, entry: DesktopEntry) -> Path:
        """Path of the file that stores ``entry``."""
        return self.storage_directory() / entry.filename

    def read_entry_file(self, path: Path) -> DesktopEntry:
        """Parse a single entry file.

        Raises:
            StorageIoError: If the file can't be opened or decoded.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                return parse_desktop_entry(f)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIoError(f"Couldn't read {path} - {e}", path) from e

    def list_entries(self) -> list[DesktopEntry]:
        """Load every entry in the storage directory, ordered by filename.

        Unreadable files are logged and skipped.

        Raises:
            StorageIoError: If the directory itself can't be listed.
        """
        directory = self.storage_directory()
        try:
            paths = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise StorageIoError(f"Failed to read desktop files: {e}", directory) from e

        entries = []
        for path in paths:
            if path.name.endswith(TEMP_SUFFIX):
                continue
            try:
                entries.append(self.read_entry_file(path))
            except StorageIoError as e:
                logger.warning("Skipping entry file: %s", e)
        return entries

    def select(self, token: str) -> DesktopEntry:
        """Resolve a selector token against the stored entries.

        Raises:
            EntryNotFoundError: If nothing matches.
        """
        return select_entry(token, self.list_entries())

    # ========== Lifecycle ==========

    def create_or_update(
        self,
        new_entry: DesktopEntry,
        previous: Optional[DesktopEntry] = None,
    ) -> DesktopEntry:
        """Write an entry and register it with the host menu.

        When ``previous`` is given and its filename differs (the entry was
        renamed), the previous entry is deleted afterwards.

        Returns:
            The entry as written.

        Raises:
            ValidationError: If the name is empty once trimmed (checked after
                the pre_write hook).
            StorageIoError: If the file can't be written.
            RegistrationError: If menu registration fails (the file stays).
            StaleEntryError: If the entry was saved but the previous one
                couldn't be removed.
        """
        if "pre_write" in self.config.hooks:
            new_entry = self.config.hooks["pre_write"](new_entry) or new_entry

        # The parser trims values, so the filename must come from the trimmed name
        new_entry = replace(new_entry, name=new_entry.name.strip())
        if not new_entry.name:
            raise ValidationError("A name is required")

        path = self.entry_path(new_entry)
        try:
            with atomic_write(path) as f:
                new_entry.write(f, delete_action=self.config.delete_action)
        except OSError as e:
            raise StorageIoError(f"Couldn't write {path} - {e}", path) from e
        logger.debug("Wrote %s", path)

        self.registrar.register(new_entry)

        if previous is not None and previous.filename != new_entry.filename:
            try:
                self.delete(previous)
            except DesktopError as e:
                raise StaleEntryError(new_entry, previous, e) from e

        if "post_write" in self.config.hooks:
            self.config.hooks["post_write"](new_entry)

        return new_entry

    def delete(self, entry: DesktopEntry) -> None:
        """Uninstall an entry from the host menu, then remove its file.

        Raises:
            RegistrationError: If uninstalling fails (the file is left alone).
            StorageIoError: If the file can't be removed.
        """
        self.registrar.deregister(entry)

        path = self.entry_path(entry)
        try:
            path.unlink()
        except OSError as e:
            raise StorageIoError(f"Couldn't delete {path} - {e}", path) from e
        logger.debug("Deleted %s", path)

        if "post_delete" in self.config.hooks:
            self.config.hooks["post_delete"](entry)
