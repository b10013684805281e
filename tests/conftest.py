"""Shared test fixtures and configuration."""

from __future__ import annotations

import contextlib
import io
from dataclasses import dataclass
from pathlib import Path

import pytest
from rich.console import Console

from vimcode.editors.gvim import GVim
from vimcode.editors.macvim import MacVim
from vimcode.preferences import InMemoryBackend, PreferenceStore


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Set default timeout for all tests."""
    for item in items:
        with contextlib.suppress(AttributeError):
            item.add_marker(pytest.mark.timeout(3))


@dataclass
class FakeHost:
    """Host that records regeneration requests."""

    assets_dir: Path = Path("/work/Game/Assets")
    regenerate_calls: int = 0

    def regenerate_project_files(self) -> None:
        self.regenerate_calls += 1


@pytest.fixture
def mock_console() -> Console:
    """Provide a console that writes to a StringIO for testing."""
    return Console(file=io.StringIO(), width=200, force_terminal=False)


@pytest.fixture
def backend() -> InMemoryBackend:
    """Fresh in-memory preference backend."""
    return InMemoryBackend()


@pytest.fixture
def store(backend: InMemoryBackend) -> PreferenceStore:
    """Preference store over the in-memory backend."""
    return PreferenceStore(backend)


@pytest.fixture
def host() -> FakeHost:
    """Host with a fixed assets directory."""
    return FakeHost()


@pytest.fixture
def no_seed_installs(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ignore any Vim installed at well-known paths on the test machine."""
    monkeypatch.setattr(MacVim, "seed_path", None)
    monkeypatch.setattr(GVim, "seed_path", None)
