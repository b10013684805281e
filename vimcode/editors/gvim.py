"""GVim adapter (Linux, Windows, and GTK builds on macOS)."""

from __future__ import annotations

from .base import VimFlavor, platform_key


class GVim(VimFlavor):
    """GVim - Vim with a GUI, available on every platform."""

    name = "Vim"
    seed_path = "/usr/share/vim/gvim"

    def executable_names(self, platform: str) -> tuple[str, ...]:
        """Prefer a batch wrapper on Windows so a user's custom setup is honored."""
        if platform_key(platform) == "win32":
            # scoop's shim opens a console window in the background; a
            # gvim.bat wrapper avoids that.
            return ("gvim.bat", "gvim.exe")
        return ("gvim",)
