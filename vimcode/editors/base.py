"""Base types for Vim flavors and discovered installations."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Installation:
    """A usable copy of the editor: a display name and an absolute executable path."""

    name: str
    path: str


class VimFlavor(ABC):
    """Abstract base class for a family of Vim builds."""

    # Display name used for the well-known install location
    name: str

    # Conventional absolute install path, checked before searching PATH
    seed_path: str | None = None

    # URL for installation instructions
    install_url: str = "https://www.vim.org"

    @abstractmethod
    def executable_names(self, platform: str) -> tuple[str, ...]:
        """Return the file names to look for in PATH, most preferred first."""

    def seed(self) -> Installation | None:
        """Return the well-known installation if it exists on disk."""
        if self.seed_path and Path(self.seed_path).is_file():
            return Installation(name=self.name, path=self.seed_path)
        return None

    def __repr__(self) -> str:  # noqa: D105
        return f"<{self.__class__.__name__} {self.name!r}>"


def platform_key(platform: str | None = None) -> str:
    """Collapse ``sys.platform`` values to ``win32``, ``darwin`` or ``linux``."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return "win32"
    if platform == "darwin":
        return "darwin"
    return "linux"
