"""Allow running vimcode as ``python -m vimcode``."""

from vimcode.cli import app

app()
