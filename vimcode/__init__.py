"""Open files from an IDE host in Vim, GVim or MacVim via the remote-server protocol."""

from __future__ import annotations

__version__ = "0.3.0"
