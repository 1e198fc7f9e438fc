"""Shared pytest fixtures for mkdesktop tests."""

import tempfile
from pathlib import Path

import pytest

from mkdesktop.config import LauncherConfig
from mkdesktop.engine import DesktopEngine, RegistrationError


class FakeRegistrar:
    """Records register/deregister calls and fails on demand."""

    def __init__(self):
        self.calls = []
        self.fail_register = False
        self.fail_deregister = False

    def register(self, entry):
        self.calls.append(("register", entry.name))
        if self.fail_register:
            raise RegistrationError(f"install failed for {entry.filename}", entry)

    def deregister(self, entry):
        self.calls.append(("deregister", entry.name))
        if self.fail_deregister:
            raise RegistrationError(f"uninstall failed for {entry.filename}", entry)


@pytest.fixture
def temp_home():
    """Create a temporary data home directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_home):
    """Create a test configuration."""
    return LauncherConfig(data_home=temp_home)


@pytest.fixture
def registrar():
    """Create a fake menu registrar."""
    return FakeRegistrar()


@pytest.fixture
def engine(config, registrar):
    """Create a test engine backed by the fake registrar."""
    return DesktopEngine(config, registrar=registrar)


@pytest.fixture
def entries_dir(engine):
    """The engine's storage directory."""
    return engine.storage_directory()
