"""Glue between an IDE host and the Vim launcher."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import editors
from .command import has_conflicting_commands
from .command import is_eligible as _is_eligible
from .launcher import launch, request_foreground

if TYPE_CHECKING:
    from collections.abc import MutableSequence, Sequence
    from pathlib import Path

    from .editors import Installation
    from .preferences import PreferenceStore

LOGGER = logging.getLogger(__name__)

ALL_FILES_WARNING = "All files will be opened in vim."
CONFLICT_WARNING = (
    "Set 'path' and Extra commands may not play well together. "
    "If files aren't opened correctly, try removing extra commands."
)


class Host(Protocol):
    """What the IDE host provides to the editor integration."""

    @property
    def assets_dir(self) -> Path:
        """Top-level asset directory of the open project."""
        ...

    def regenerate_project_files(self) -> None:
        """Regenerate solution/project files for an external IDE."""
        ...


class VimExternalEditor:
    """External code editor implementation backed by a Vim server.

    Installations are discovered once, at construction, and never change
    afterwards. Preferences are read from ``store`` on every call.
    """

    def __init__(
        self,
        store: PreferenceStore,
        host: Host,
        installations: Sequence[Installation] | None = None,
    ) -> None:
        self.store = store
        self.host = host
        if installations is None:
            installations = editors.discover()
        self._installations = tuple(installations)

    @property
    def installations(self) -> tuple[Installation, ...]:
        return self._installations

    def discover(self) -> list[Installation]:
        """Run discovery again without touching the startup snapshot."""
        return editors.discover()

    def set_active_installation(self, path: str) -> None:
        """Called when the user picks one of our installations."""
        LOGGER.debug("Using Vim at %s", path)
        self.store.set_editor_path(path)

    def resolve_installation_for_path(self, path: str) -> Installation | None:
        return editors.resolve_installation_for_path(path, self._installations)

    def is_eligible(self, file_path: str) -> bool:
        return _is_eligible(file_path, self.store.code_extension_list())

    def open(self, file_path: str, line: int, column: int, *, wait: bool = False) -> bool:
        """Open ``file_path`` in Vim.

        Returns ``False`` when the extension filter rejects the file so the
        host can fall back to its default handler.

        Raises:
            LaunchError: If Vim could not be started.

        """
        if not self.is_eligible(file_path):
            LOGGER.debug("Not a code file, not opening in Vim: %s", file_path)
            return False
        prefs = self.store.snapshot()
        launch(file_path, line, column, prefs, assets_dir=self.host.assets_dir, wait=wait)
        if prefs.force_foreground:
            request_foreground(prefs)
        return True

    def resync_all(self) -> bool:
        """Regenerate project files during the host's initial sync."""
        if not self.store.get_generate_aux_project():
            return False
        self.host.regenerate_project_files()
        LOGGER.info("Regenerated project files")
        return True

    def resync_changed(
        self,
        added: Sequence[str],
        deleted: Sequence[str],
        moved: Sequence[str],
        moved_from: Sequence[str],
        imported: Sequence[str],
    ) -> bool:
        """Regenerate project files when the asset tree's structure changed.

        Imports happen constantly (often several times after a compile) and
        only change file contents. Deleted files don't break project files.
        Only additions and moves trigger regeneration.
        """
        LOGGER.debug(
            "Assets changed: added=%d deleted=%d moved=%d moved_from=%d imported=%d",
            len(added),
            len(deleted),
            len(moved),
            len(moved_from),
            len(imported),
        )
        if len(added) + len(moved) == 0 or not self.store.get_generate_aux_project():
            return False
        self.host.regenerate_project_files()
        LOGGER.info(
            "Regenerated project files for %d new files, %d moved files.",
            len(added),
            len(moved),
        )
        return True

    def preferences_ui_render(self, console: Console | None = None) -> list[str]:
        """Print the current preferences and return any warnings shown."""
        console = console or Console()
        prefs = self.store.snapshot()

        table = Table(title="Vim preferences")
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        table.add_column("Description", style="dim")
        table.add_row("editor_path", escape(prefs.editor_path), "Vim executable to launch")
        table.add_row(
            "code_extensions",
            escape(prefs.code_extensions),
            "Comma-separated file extensions to open in Vim",
        )
        table.add_row(
            "generate_aux_project",
            str(prefs.generate_aux_project),
            "Regenerate IDE project files when files are added or moved",
        )
        table.add_row(
            "force_foreground",
            str(prefs.force_foreground),
            "Tell Vim to put itself in the foreground when opening a file",
        )
        table.add_row("server_name", escape(prefs.server_name), "Name passed to --servername")
        table.add_row("path_mode", prefs.path_mode.label, "Extend Vim's 'path' for gf and :find")
        table.add_row(
            "extra_commands",
            escape(prefs.extra_commands),
            'Commands before the file name, like +"runtime unity.vim"',
        )
        console.print(table)

        warnings = []
        if not any(prefs.extension_list):
            warnings.append(ALL_FILES_WARNING)
        if has_conflicting_commands(prefs):
            warnings.append(CONFLICT_WARNING)
        for warning in warnings:
            console.print(f"[yellow]Warning:[/yellow] {warning}")
        return warnings


def register(registry: MutableSequence[VimExternalEditor], editor: VimExternalEditor) -> None:
    """Add ``editor`` to the host's editor registry. Call once at startup."""
    registry.append(editor)
    LOGGER.debug("Registered Vim external editor with %d installation(s)", len(editor.installations))
