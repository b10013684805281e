"""MacVim adapter."""

from __future__ import annotations

from .base import VimFlavor, platform_key


class MacVim(VimFlavor):
    """MacVim - Vim for macOS."""

    name = "MacVim"
    # Installed with Homebrew
    seed_path = "/usr/local/bin/mvim"
    install_url = "https://macvim.org"

    def executable_names(self, platform: str) -> tuple[str, ...]:
        """Return the mvim launcher on macOS only."""
        if platform_key(platform) == "darwin":
            return ("mvim",)
        return ()
