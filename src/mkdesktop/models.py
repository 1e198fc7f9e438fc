"""Desktop entry model, the .desktop text codec and filename derivation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import IO, Iterable

FILENAME_PREFIX = "mkdesktop"
FILENAME_EXTENSION = "desktop"
DESKTOP_SECTION = "Desktop Entry"
DEFAULT_ENTRY_TYPE = "Application"
SPEC_VERSION = "1.0"
DELETE_ACTION = "delete-shortcut"

_SECTION_RE = re.compile(r"^\[([^\]]+)\]")
_ATTR_RE = re.compile(r"^([^\[#=]+)=([^#]*)(#.*)?$")
_TRUE_RE = re.compile(r"true", re.IGNORECASE)
_INVALID_FILENAME_CHARS = re.compile(r"[^\w\-+_]+", re.ASCII)

# .desktop key -> DesktopEntry attribute ("Terminal" is parsed separately)
_FIELD_KEYS = {
    "Type": "entry_type",
    "Name": "name",
    "Comment": "comment",
    "Path": "path",
    "Exec": "exec",
    "Icon": "icon",
    "Categories": "categories",
}


def name_to_filename(name: str) -> str:
    """Derive the on-disk filename for an entry name.

    Runs of characters other than ASCII word characters, ``-`` and ``+``
    collapse into a single ``-``. Distinct names can map to the same file
    (``"My App"`` and ``"My.App"``); the later write replaces the earlier.
    """
    slug = _INVALID_FILENAME_CHARS.sub("-", name)
    return f"{FILENAME_PREFIX}-{slug}.{FILENAME_EXTENSION}"


@dataclass
class DesktopEntry:
    """A single launcher entry."""
    name: str = ""
    entry_type: str = DEFAULT_ENTRY_TYPE
    comment: str = ""
    path: str = ""          # Working directory
    exec: str = ""          # Absolute command line
    icon: str = ""          # Icon path or theme icon name
    terminal: bool = False
    categories: str = ""    # Semicolon-separated, kept verbatim

    @property
    def filename(self) -> str:
        return name_to_filename(self.name)

    @classmethod
    def read(cls, stream: IO[str]) -> "DesktopEntry":
        """Parse an entry from a text stream."""
        return parse_desktop_entry(stream)

    @classmethod
    def from_desktop(cls, text: str) -> "DesktopEntry":
        """Parse an entry from .desktop text."""
        return parse_desktop_entry(text.splitlines())

    def to_desktop(self, delete_action: bool = False) -> str:
        """Render entry in .desktop format.

        Optional fields are only written when non-empty.
        """
        lines = [
            f"[{DESKTOP_SECTION}]",
            f"Type={DEFAULT_ENTRY_TYPE}",
            f"Version={SPEC_VERSION}",
            f"Name={self.name}",
            f"Exec={self.exec}",
        ]

        if self.comment:
            lines.append(f"Comment={self.comment}")
        if self.path:
            lines.append(f"Path={self.path}")
        if self.icon:
            lines.append(f"Icon={self.icon}")
        if self.categories:
            lines.append(f"Categories={self.categories}")

        lines.append(f"Terminal={'true' if self.terminal else 'false'}")

        if delete_action:
            lines.extend([
                f"Actions={DELETE_ACTION}",
                "",
                f"[Desktop Action {DELETE_ACTION}]",
                "Name=Delete Shortcut",
                f'Exec={FILENAME_PREFIX} --rm "{self.name}"',
            ])

        lines.append("")
        return "\n".join(lines)

    def write(self, output: IO[str], delete_action: bool = False) -> None:
        """Write the rendered entry to a stream in a single call."""
        output.write(self.to_desktop(delete_action=delete_action))
        output.flush()

    def display(self) -> str:
        """Short human-readable summary (not every field)."""
        if self.path:
            return f"{self.name}\n\tcd {self.path}\n\texec {self.exec}"
        return f"{self.name}\n\texec {self.exec}"

    def to_dict(self) -> dict:
        """Convert entry to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "filename": self.filename,
            "type": self.entry_type,
            "comment": self.comment,
            "path": self.path,
            "exec": self.exec,
            "icon": self.icon,
            "terminal": self.terminal,
            "categories": self.categories,
        }


def parse_desktop_entry(lines: Iterable[str]) -> DesktopEntry:
    """Parse .desktop content into an entry.

    Only the ``[Desktop Entry]`` section is read. Unknown keys and lines that
    are neither headers nor ``key=value`` pairs are ignored, so malformed
    input yields missing fields rather than an error.
    """
    entry = DesktopEntry()
    in_desktop_section = False

    for raw_line in lines:
        line = raw_line.rstrip("\r\n")

        section = _SECTION_RE.match(line)
        if section:
            in_desktop_section = section.group(1) == DESKTOP_SECTION
            continue

        if not in_desktop_section:
            continue

        match = _ATTR_RE.match(line)
        if match is None:
            continue

        key = match.group(1).strip()
        value = match.group(2).strip()

        if key == "Terminal":
            entry.terminal = _TRUE_RE.search(value) is not None
        elif key in _FIELD_KEYS:
            setattr(entry, _FIELD_KEYS[key], value)

    return entry
