"""Vim flavors and installation discovery."""

from __future__ import annotations

from .base import Installation, VimFlavor
from .registry import (
    discover,
    executable_names,
    get_all_flavors,
    resolve_installation_for_path,
)

__all__ = [
    "Installation",
    "VimFlavor",
    "discover",
    "executable_names",
    "get_all_flavors",
    "resolve_installation_for_path",
]
