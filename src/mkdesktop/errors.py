"""Exceptions raised by mkdesktop operations."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import DesktopEntry


class DesktopError(Exception):
    """Base exception for desktop entry operations."""
    pass


class ValidationError(DesktopError):
    """Raised when an entry is missing a required field."""
    pass


class EntryNotFoundError(DesktopError):
    """Raised when a selector token matches no stored entry."""

    def __init__(self, token: str, message: Optional[str] = None):
        self.token = token
        super().__init__(message or f'Couldn\'t find entry matching "{token}"')


class StorageIoError(DesktopError):
    """Raised when the storage directory or an entry file can't be accessed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class RegistrationError(DesktopError):
    """Raised when the host menu integration fails."""

    def __init__(self, message: str, entry: Optional["DesktopEntry"] = None):
        self.entry = entry
        super().__init__(message)


class StaleEntryError(DesktopError):
    """Raised when a renamed entry was saved but its old file couldn't be removed.

    The new entry is in place; the previous one is probably still installed
    as a duplicate and needs manual cleanup.
    """

    def __init__(self, entry: "DesktopEntry", previous: "DesktopEntry", cause: DesktopError):
        self.entry = entry
        self.previous = previous
        super().__init__(
            f"Saved {entry.filename} but failed to delete old entry "
            f"{previous.filename} ({cause}); you probably have a duplicate now"
        )
