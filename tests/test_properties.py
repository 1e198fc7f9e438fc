"""Property-based tests for the codec, filename derivation and selector.

Uses hypothesis to verify algorithmic properties hold for many inputs.
"""

import re

import pytest
from hypothesis import given, strategies as st

from mkdesktop.engine import EntryNotFoundError, select_entry
from mkdesktop.models import DesktopEntry, name_to_filename

# Single-line printable values without '#', trimmed like the parser trims them
field_text = st.text(
    alphabet=st.characters(min_codepoint=0x20, max_codepoint=0x7E, blacklist_characters="#"),
    max_size=40,
).map(str.strip)

required_text = field_text.filter(bool)

OPTIONAL_FIELDS = {
    "comment": "Comment",
    "path": "Path",
    "icon": "Icon",
    "categories": "Categories",
}

FILENAME_RE = re.compile(r"^mkdesktop-[A-Za-z0-9_+\-]*\.desktop$")


@st.composite
def desktop_entries(draw):
    return DesktopEntry(
        name=draw(required_text),
        exec=draw(required_text),
        comment=draw(field_text),
        path=draw(field_text),
        icon=draw(field_text),
        terminal=draw(st.booleans()),
        categories=draw(field_text),
    )


class TestCodecProperties:
    """Property-based tests for parse/serialize."""

    @given(entry=desktop_entries())
    def test_round_trip_preserves_fields(self, entry):
        """Every field survives a write and re-read."""
        parsed = DesktopEntry.from_desktop(entry.to_desktop())

        assert parsed.name == entry.name
        assert parsed.exec == entry.exec
        assert parsed.terminal == entry.terminal
        for attr in OPTIONAL_FIELDS:
            assert getattr(parsed, attr) == getattr(entry, attr)

    @given(entry=desktop_entries(), field=st.sampled_from(sorted(OPTIONAL_FIELDS)))
    def test_empty_optional_field_omitted(self, entry, field):
        """An empty optional field has no line and reads back empty."""
        setattr(entry, field, "")
        text = entry.to_desktop()

        key = OPTIONAL_FIELDS[field]
        assert not any(line.startswith(f"{key}=") for line in text.splitlines())
        assert getattr(DesktopEntry.from_desktop(text), field) == ""

    @given(entry=desktop_entries())
    def test_serialize_is_deterministic(self, entry):
        """Rendering twice gives identical text."""
        assert entry.to_desktop() == entry.to_desktop()

    @given(lines=st.lists(st.text(max_size=60), max_size=20))
    def test_parse_never_raises(self, lines):
        """Arbitrary input degrades to missing fields."""
        entry = DesktopEntry.from_desktop("\n".join(lines))
        assert isinstance(entry, DesktopEntry)


class TestFilenameProperties:
    """Property-based tests for name_to_filename."""

    @given(name=st.text(max_size=80))
    def test_filename_charset(self, name):
        """Filenames only ever contain safe characters."""
        filename = name_to_filename(name)

        assert FILENAME_RE.match(filename)
        assert "/" not in filename
        assert "\\" not in filename

    @given(name=st.text(max_size=80))
    def test_filename_is_pure(self, name):
        """Equal names give equal filenames."""
        assert name_to_filename(name) == name_to_filename(str(name))

    @given(name=st.text(max_size=80))
    def test_no_repeated_replacement(self, name):
        """Invalid runs never produce more separators than valid gaps."""
        slug = name_to_filename(name)[len("mkdesktop-"):-len(".desktop")]
        assert len(slug) <= len(name)


def make_entries(count):
    return [DesktopEntry(name=f"entry {i}", exec=f"/bin/e{i}") for i in range(count)]


class TestSelectorProperties:
    """Property-based tests for select_entry."""

    @given(data=st.data(), count=st.integers(min_value=1, max_value=15))
    def test_bracketed_index_equivalent(self, data, count):
        """Brackets and whitespace around an index don't change the result."""
        entries = make_entries(count)
        index = data.draw(st.integers(min_value=0, max_value=count - 1))
        wrapper = data.draw(st.sampled_from(["{}", "({})", "[{}]", "{{{}}}", " {} ", "( {} )"]))

        assert select_entry(wrapper.format(index), entries) is entries[index]
        assert select_entry(str(index), entries) is entries[index]

    @given(count=st.integers(min_value=0, max_value=10), extra=st.integers(min_value=0, max_value=100))
    def test_out_of_range_index_not_found(self, count, extra):
        """An index past the end matches nothing."""
        entries = make_entries(count)
        token = str(count + extra)

        with pytest.raises(EntryNotFoundError) as exc_info:
            select_entry(token, entries)
        assert exc_info.value.token == token

    @given(count=st.integers(min_value=1, max_value=10), data=st.data())
    def test_select_by_name(self, count, data):
        """Every entry can be selected by its own name."""
        entries = make_entries(count)
        index = data.draw(st.integers(min_value=0, max_value=count - 1))

        assert select_entry(entries[index].name, entries) is entries[index]
        assert select_entry(entries[index].filename, entries) is entries[index]
