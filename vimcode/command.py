"""Build Vim remote-server command lines."""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING

from .constants import SCRIPTS_DIR_NAME
from .preferences import PathMode

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from .preferences import Preferences


def path_fragment(path_mode: PathMode, assets_dir: Path | str) -> str:
    """Return the ``+"set path+=..."`` command for ``path_mode``, or ``""``."""
    assets = str(assets_dir)
    if path_mode == PathMode.PROJECT_PATH:
        return f'+"set path+={assets}/**"'
    if path_mode == PathMode.SCRIPT_PATH:
        return f'+"set path+={assets}/{SCRIPTS_DIR_NAME}/**"'
    return ""


def build_arguments(
    file_path: str,
    line: int,
    column: int,
    prefs: Preferences,
    *,
    assets_dir: Path | str,
) -> str:
    """Return the argument string that opens ``file_path`` in the named Vim server.

    The ``+command`` arguments run in order before the file is opened, so the
    quoted file path is always the last token. Paths containing double quotes
    are not supported.

    Args:
        file_path: File to open
        line: 1-based line; 0 or less lets Vim restore the last position
        column: Column; the host passes -1 when it has none
        prefs: Preference snapshot
        assets_dir: Project asset directory used for the 'path' option

    """
    # Vim aborts cursor() on negative values but keeps the current
    # column on 0.
    column = max(column, 0)
    # Line 0 leaves room for plugins like vim-lastplace to pick the line.
    line = max(line, 0)
    path = path_fragment(prefs.path_mode, assets_dir)
    return (
        f"--servername {prefs.server_name} --remote-silent "
        f'+"call cursor({line},{column})" {prefs.extra_commands} {path} "{file_path}"'
    )


def foreground_arguments(server_name: str) -> str:
    """Return the arguments asking the running server to raise its window.

    ``foreground()`` doesn't work on Windows; ``:help foreground()`` points
    to ``remote_foreground()``. ``--clean`` skips loading the user's vimrc.
    """
    return f"--clean +\"call remote_foreground('{server_name}')\" +quit"


def split_arguments(arguments: str) -> list[str]:
    """Split an argument string into argv entries using POSIX shell rules."""
    return shlex.split(arguments)


def is_eligible(file_path: str, extensions: Sequence[str]) -> bool:
    """Check whether ``file_path`` ends with one of ``extensions``.

    The match is a plain, case-sensitive suffix test. With no configured
    extensions every file is eligible.
    """
    suffixes = [ext for ext in extensions if ext]
    if not suffixes:
        return True
    return any(file_path.endswith(ext) for ext in suffixes)


def has_conflicting_commands(prefs: Preferences) -> bool:
    """Whether 'path' augmentation and extra commands are both configured.

    Some Vim builds only run one ``+command`` sent through ``--remote-silent``,
    so one of the two may be dropped.
    """
    return prefs.path_mode != PathMode.NONE and bool(prefs.extra_commands)
