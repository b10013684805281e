"""Command-line host for the Vim external editor integration."""

from __future__ import annotations

import json
import logging
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.markup import escape
from rich.table import Table

from . import __version__
from .command import build_arguments
from .config import load_config, setup_logging
from .constants import ASSETS_DIR_NAME
from ._output import console, error, info, success, warn
from .integration import VimExternalEditor, register
from .launcher import LaunchError
from .preferences import PREFS_PATH, JsonFileBackend, PathMode, PreferenceStore

LOGGER = logging.getLogger(__name__)

EXIT_NOT_HANDLED = 2

app = typer.Typer(
    name="vimcode",
    help="""Open project files in Vim, GVim or MacVim through a named Vim server.

**Common workflows:**

- `vimcode installations`: See which Vim executables were found
- `vimcode use /usr/bin/gvim`: Pick the executable to launch
- `vimcode open Assets/Player.cs --line 42`: Open a file at a line
- `vimcode prefs`: Show current preferences
""",
    add_completion=True,
    rich_markup_mode="markdown",
    no_args_is_help=True,
)


@dataclass
class CliHost:
    """Host backed by a project directory and an optional shell command."""

    project_root: Path
    regenerate_command: str | None = None

    @property
    def assets_dir(self) -> Path:
        return self.project_root / ASSETS_DIR_NAME

    def regenerate_project_files(self) -> None:
        """Run the configured project generator in the project root."""
        if not self.regenerate_command:
            LOGGER.warning("No regenerate_command configured, skipping project file generation")
            return
        console.print(f"[dim]→[/dim] Running: [bold cyan]{escape(self.regenerate_command)}[/bold cyan]")
        subprocess.run(  # noqa: S603
            shlex.split(self.regenerate_command),
            cwd=self.project_root,
            check=True,
        )


def set_config_defaults(ctx: typer.Context, config: dict[str, Any]) -> None:
    """Set the default values for the subcommands based on the config file."""
    wildcard_config = {
        k: v for k, v in config.get("defaults", {}).items() if not isinstance(v, dict)
    }
    commands = getattr(ctx.command, "commands", {})
    ctx.default_map = {
        name: {**wildcard_config, **config.get(name.replace("-", "_"), {})} for name in commands
    }


def _editor(ctx: typer.Context) -> VimExternalEditor:
    """Return the editor registered by the callback."""
    return ctx.obj[-1]


def _version_callback(value: bool) -> None:  # noqa: FBT001
    if value:
        console.print(f"vimcode {__version__}")
        raise typer.Exit


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[
        str | None,
        typer.Option("--config", "-c", help="Path to config file"),
    ] = None,
    prefs_file: Annotated[
        Path | None,
        typer.Option("--prefs-file", help=f"Where preferences are stored (default: {PREFS_PATH})"),
    ] = None,
    project: Annotated[
        Path | None,
        typer.Option("--project", "-p", help="Project root containing the Assets folder"),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Set logging level."),
    ] = "warning",
    log_file: Annotated[
        str | None,
        typer.Option("--log-file", help="Path to a file to write logs to."),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only show warnings and errors."),
    ] = False,
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version."),
    ] = False,
) -> None:
    """Open project files in a Vim server."""
    import dotenv  # noqa: PLC0415

    dotenv.load_dotenv()
    setup_logging(log_level, log_file, quiet=quiet)

    config = load_config(config_file)
    set_config_defaults(ctx, config)
    host_config = config.get("host", {})

    store = PreferenceStore(
        JsonFileBackend(prefs_file or Path(host_config.get("prefs_file", PREFS_PATH)).expanduser()),
    )
    host = CliHost(
        project_root=(project or Path(host_config.get("project", "."))).expanduser().resolve(),
        regenerate_command=host_config.get("regenerate_command"),
    )
    register(ctx.ensure_object(list), VimExternalEditor(store, host))


@app.command("installations")
def list_installations(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON with name, path, is_active"),
    ] = False,
) -> None:
    """List Vim installations found at well-known paths and in PATH.

    The installation currently used for opening files is marked.
    """
    editor = _editor(ctx)
    active = editor.store.get_editor_path()

    if json_output:
        data = [
            {"name": install.name, "path": install.path, "is_active": install.path == active}
            for install in editor.installations
        ]
        print(json.dumps({"installations": data}))
        return

    if not editor.installations:
        warn("No Vim installations found")
        return

    table = Table(title="Vim installations")
    table.add_column("Name", style="cyan")
    table.add_column("Path", style="dim")
    table.add_column("Notes")
    for install in editor.installations:
        notes = "[bold yellow]← active[/bold yellow]" if install.path == active else ""
        table.add_row(install.name, install.path, notes)
    console.print(table)


@app.command("use")
def use_installation(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Vim executable to launch")],
) -> None:
    """Choose the Vim executable used to open files."""
    editor = _editor(ctx)
    install = editor.resolve_installation_for_path(path)
    if install is None:
        warn(f"{path} is not one of the discovered installations")
    editor.set_active_installation(path)
    success(f"Using {install.name if install else path}")


@app.command("prefs")
def show_preferences(ctx: typer.Context) -> None:
    """Show the current preferences."""
    _editor(ctx).preferences_ui_render(console)


class PrefField(str, Enum):
    """Preferences that can be changed with `vimcode set`."""

    editor_path = "editor_path"
    server_name = "server_name"
    force_foreground = "force_foreground"
    generate_aux_project = "generate_aux_project"
    path_mode = "path_mode"
    extra_commands = "extra_commands"
    code_extensions = "code_extensions"


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_PATH_MODES = {
    "none": PathMode.NONE,
    "project": PathMode.PROJECT_PATH,
    "script": PathMode.SCRIPT_PATH,
}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    msg = f"expected one of {sorted(_TRUE_VALUES | _FALSE_VALUES)}, got {value!r}"
    raise ValueError(msg)


def _parse_path_mode(value: str) -> PathMode:
    lowered = value.strip().lower()
    if lowered in _PATH_MODES:
        return _PATH_MODES[lowered]
    if lowered.isdigit():
        return PathMode(int(lowered))
    msg = f"expected one of {sorted(_PATH_MODES)}, got {value!r}"
    raise ValueError(msg)


@app.command("set")
def set_preference(
    ctx: typer.Context,
    field: Annotated[PrefField, typer.Argument(help="Preference to change")],
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Change a single preference. It is saved immediately.

    Booleans accept true/false, yes/no, on/off or 1/0. `path_mode` accepts
    none, project or script.
    """
    store = _editor(ctx).store
    try:
        if field in (PrefField.force_foreground, PrefField.generate_aux_project):
            getattr(store, f"set_{field.value}")(_parse_bool(value))
        elif field is PrefField.path_mode:
            store.set_path_mode(_parse_path_mode(value))
        else:
            getattr(store, f"set_{field.value}")(value)
    except ValueError as e:
        error(f"Invalid value for {field.value}: {e}")
    success(f"Set {field.value}")


@app.command("reset-extensions")
def reset_extensions(ctx: typer.Context) -> None:
    """Restore the default list of file extensions opened in Vim."""
    store = _editor(ctx).store
    store.reset_code_extensions()
    success(f"File extensions reset to {store.get_code_extensions()}")


@app.command("args")
def show_arguments(
    ctx: typer.Context,
    file: Annotated[str, typer.Argument(help="File to open")],
    line: Annotated[int, typer.Option("--line", "-l", help="Line number (1-based)")] = 0,
    column: Annotated[int, typer.Option("--column", help="Column number")] = -1,
) -> None:
    """Print the arguments `open` would pass to Vim, without launching it."""
    editor = _editor(ctx)
    arguments = build_arguments(
        file,
        line,
        column,
        editor.store.snapshot(),
        assets_dir=editor.host.assets_dir,
    )
    print(arguments)


@app.command("open")
def open_file(
    ctx: typer.Context,
    file: Annotated[str, typer.Argument(help="File to open")],
    line: Annotated[int, typer.Option("--line", "-l", help="Line number (1-based)")] = 0,
    column: Annotated[int, typer.Option("--column", help="Column number")] = -1,
    wait: Annotated[
        bool,
        typer.Option("--wait", help="Block until Vim exits (legacy behaviour)"),
    ] = False,
) -> None:
    """Open a file in the Vim server at the given position.

    Exits with code 2 when the file's extension is not configured for Vim.
    """
    editor = _editor(ctx)
    try:
        handled = editor.open(file, line, column, wait=wait)
    except LaunchError as e:
        error(f"Could not open file in external editor: {e}")
    if not handled:
        warn(f"Not opening {file}: extension not in code_extensions")
        raise typer.Exit(EXIT_NOT_HANDLED)
    success(f"Opened {file}")


@app.command("sync")
def sync_project(
    ctx: typer.Context,
    added: Annotated[list[str] | None, typer.Option("--added", help="Added asset")] = None,
    deleted: Annotated[list[str] | None, typer.Option("--deleted", help="Deleted asset")] = None,
    moved: Annotated[list[str] | None, typer.Option("--moved", help="Moved asset")] = None,
    moved_from: Annotated[
        list[str] | None,
        typer.Option("--moved-from", help="Previous location of a moved asset"),
    ] = None,
    imported: Annotated[list[str] | None, typer.Option("--imported", help="Reimported asset")] = None,
) -> None:
    """Regenerate IDE project files if enabled.

    Without any change lists, this is a full sync. With change lists, project
    files are only regenerated when assets were added or moved.
    """
    editor = _editor(ctx)
    changes = [added or [], deleted or [], moved or [], moved_from or [], imported or []]
    try:
        if any(changes):
            regenerated = editor.resync_changed(*changes)
        else:
            regenerated = editor.resync_all()
    except (OSError, ValueError, subprocess.CalledProcessError) as e:
        # ValueError: unbalanced quotes in regenerate_command
        error(f"Failed to regenerate project files: {e}")
    if regenerated:
        success("Regenerated project files")
    else:
        info("Project files unchanged")
