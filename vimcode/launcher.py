"""Start the external editor process."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import TYPE_CHECKING

from .command import build_arguments, foreground_arguments, split_arguments

if TYPE_CHECKING:
    from pathlib import Path

    from .preferences import Preferences

LOGGER = logging.getLogger(__name__)


class LaunchError(RuntimeError):
    """The editor executable could not be started."""

    def __init__(self, editor_path: str, reason: str) -> None:
        self.editor_path = editor_path
        self.reason = reason
        super().__init__(f"Could not start {editor_path}: {reason}")


def editor_command(
    editor_path: str,
    arguments: str,
    platform: str | None = None,
) -> list[str] | str:
    """Combine the executable and an argument string into a Popen command.

    Windows parses the command line itself, so it gets a single string.
    Elsewhere the arguments are split with shell rules into argv entries.
    """
    if (platform or sys.platform) == "win32":
        return f'"{editor_path}" {arguments}'
    return [editor_path, *split_arguments(arguments)]


def _start(editor_path: str, arguments: str) -> subprocess.Popen:
    try:
        command = editor_command(editor_path, arguments)
    except ValueError as e:
        # Unbalanced quotes in the user's extra commands
        raise LaunchError(editor_path, f"invalid arguments: {e}") from e
    LOGGER.debug("Launching %s %s", editor_path, arguments)
    try:
        # New session so the editor outlives the host process.
        return subprocess.Popen(command, start_new_session=True)  # noqa: S603
    except (OSError, ValueError) as e:
        raise LaunchError(editor_path, str(e)) from e


def launch(
    file_path: str,
    line: int,
    column: int,
    prefs: Preferences,
    *,
    assets_dir: Path | str,
    wait: bool = False,
) -> subprocess.Popen:
    """Open ``file_path`` at ``line``/``column`` in the configured Vim server.

    The process is not waited on: the first launch of a GUI Vim may be the
    editor session itself and only returns once the user quits. ``wait=True``
    restores the older blocking behaviour.

    Raises:
        LaunchError: If the editor executable could not be started.

    """
    arguments = build_arguments(file_path, line, column, prefs, assets_dir=assets_dir)
    process = _start(prefs.editor_path, arguments)
    if wait:
        process.wait()
    return process


def request_foreground(prefs: Preferences) -> bool:
    """Ask the running Vim server to bring its window to the front.

    Best effort: failures are logged and reported as ``False``, never raised.
    SetForegroundWindow and friends don't work from here on Windows, so a
    short-lived helper Vim issues ``remote_foreground()`` instead.
    """
    arguments = foreground_arguments(prefs.server_name)
    LOGGER.debug("Requesting foreground: %s %s", prefs.editor_path, arguments)
    try:
        command = editor_command(prefs.editor_path, arguments)
        result = subprocess.run(command, check=False)  # noqa: S603
    except (OSError, ValueError, subprocess.SubprocessError) as e:
        LOGGER.warning("Could not bring Vim to the foreground: %s", e)
        return False
    if result.returncode != 0:
        LOGGER.warning(
            "Foreground request exited with code %d",
            result.returncode,
        )
        return False
    return True
