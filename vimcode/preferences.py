"""Persisted user preferences and the immutable snapshot handed to the launcher."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from enum import IntEnum
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, field_validator

from . import constants

LOGGER = logging.getLogger(__name__)

PREFS_PATH = Path.home() / ".config" / "vimcode" / "preferences.json"


class PathMode(IntEnum):
    """How to extend Vim's 'path' option so gf and :find resolve project files."""

    NONE = 0
    PROJECT_PATH = 1
    SCRIPT_PATH = 2

    @property
    def label(self) -> str:
        """Human readable description shown in the preferences view."""
        return _PATH_MODE_LABELS[self]


_PATH_MODE_LABELS = {
    PathMode.NONE: "Don't modify path variable",
    PathMode.PROJECT_PATH: "Add project path (Assets/**)",
    PathMode.SCRIPT_PATH: "Add script path (Assets/Scripts/**)",
}

DEFAULT_PATH_MODE = PathMode.PROJECT_PATH


# --- Persistence backends ---


class PreferenceBackend(Protocol):
    """Key/value persistence provided by the host."""

    def get_string(self, key: str, default: str) -> str: ...  # noqa: D102
    def get_bool(self, key: str, default: bool) -> bool: ...  # noqa: D102, FBT001
    def get_int(self, key: str, default: int) -> int: ...  # noqa: D102
    def set_string(self, key: str, value: str) -> None: ...  # noqa: D102
    def set_bool(self, key: str, value: bool) -> None: ...  # noqa: D102, FBT001
    def set_int(self, key: str, value: int) -> None: ...  # noqa: D102
    def delete_key(self, key: str) -> None: ...  # noqa: D102


class _DictBackend(ABC):
    """Typed get/set on top of a plain dictionary."""

    @abstractmethod
    def _load(self) -> dict[str, Any]:
        """Return the stored key/value pairs."""

    @abstractmethod
    def _save(self, data: dict[str, Any]) -> None:
        """Replace the stored key/value pairs with ``data``."""

    def _get(self, key: str, default: Any, kind: type) -> Any:
        value = self._load().get(key, default)
        # bool is a subclass of int; don't let a stored bool pass as an int
        if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
            return default
        return value

    def _set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def get_string(self, key: str, default: str) -> str:
        return self._get(key, default, str)

    def get_bool(self, key: str, default: bool) -> bool:  # noqa: FBT001
        return self._get(key, default, bool)

    def get_int(self, key: str, default: int) -> int:
        return self._get(key, default, int)

    def set_string(self, key: str, value: str) -> None:
        self._set(key, value)

    def set_bool(self, key: str, value: bool) -> None:  # noqa: FBT001
        self._set(key, value)

    def set_int(self, key: str, value: int) -> None:
        self._set(key, value)

    def delete_key(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class InMemoryBackend(_DictBackend):
    """Backend that keeps values for the lifetime of the process."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = dict(initial or {})

    def _load(self) -> dict[str, Any]:
        return self.values

    def _save(self, data: dict[str, Any]) -> None:
        self.values = data


class JsonFileBackend(_DictBackend):
    """Backend that persists every write to a JSON file.

    The file is re-read on each access so edits from another process are
    picked up. A missing or corrupt file reads as empty, so every preference
    falls back to its default.
    """

    def __init__(self, path: Path = PREFS_PATH) -> None:
        self.path = path

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # ValueError covers both bad JSON and bytes that are not UTF-8
            LOGGER.debug("Ignoring unreadable preferences file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            LOGGER.debug("Ignoring preferences file %s: not a JSON object", self.path)
            return {}
        return data

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write to temp file then rename for atomicity
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        tmp.replace(self.path)


# --- Snapshot ---


class Preferences(BaseModel):
    """Immutable view of every preference, read once per request."""

    model_config = ConfigDict(frozen=True)

    editor_path: str = constants.DEFAULT_EDITOR_PATH
    server_name: str = constants.DEFAULT_SERVER_NAME
    force_foreground: bool = constants.DEFAULT_FORCE_FOREGROUND
    generate_aux_project: bool = constants.DEFAULT_GENERATE_AUX_PROJECT
    path_mode: PathMode = DEFAULT_PATH_MODE
    extra_commands: str = constants.DEFAULT_EXTRA_COMMANDS
    code_extensions: str = constants.DEFAULT_CODE_EXTENSIONS

    @field_validator("code_extensions", mode="before")
    @classmethod
    def _strip_extensions(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @property
    def extension_list(self) -> list[str]:
        """The configured extensions; empty when the setting is blank."""
        return split_extensions(self.code_extensions)


def split_extensions(value: str) -> list[str]:
    """Split a comma-separated extension setting into its entries."""
    if not value:
        return []
    return value.split(",")


# --- Store ---


class PreferenceStore:
    """Per-field access to persisted preferences.

    Nothing is cached: each getter reads the backend and each setter writes
    through immediately.
    """

    def __init__(self, backend: PreferenceBackend | None = None) -> None:
        self.backend: PreferenceBackend = backend if backend is not None else InMemoryBackend()

    def get_editor_path(self) -> str:
        return self.backend.get_string(constants.EDITOR_PATH_KEY, constants.DEFAULT_EDITOR_PATH)

    def set_editor_path(self, value: str) -> None:
        self.backend.set_string(constants.EDITOR_PATH_KEY, value)

    def get_server_name(self) -> str:
        return self.backend.get_string(constants.SERVER_NAME_KEY, constants.DEFAULT_SERVER_NAME)

    def set_server_name(self, value: str) -> None:
        self.backend.set_string(constants.SERVER_NAME_KEY, value)

    def get_force_foreground(self) -> bool:
        return self.backend.get_bool(
            constants.FORCE_FOREGROUND_KEY,
            constants.DEFAULT_FORCE_FOREGROUND,
        )

    def set_force_foreground(self, value: bool) -> None:  # noqa: FBT001
        self.backend.set_bool(constants.FORCE_FOREGROUND_KEY, value)

    def get_generate_aux_project(self) -> bool:
        return self.backend.get_bool(
            constants.GENERATE_AUX_PROJECT_KEY,
            constants.DEFAULT_GENERATE_AUX_PROJECT,
        )

    def set_generate_aux_project(self, value: bool) -> None:  # noqa: FBT001
        self.backend.set_bool(constants.GENERATE_AUX_PROJECT_KEY, value)

    def get_path_mode(self) -> PathMode:
        raw = self.backend.get_int(constants.PATH_MODE_KEY, int(DEFAULT_PATH_MODE))
        try:
            return PathMode(raw)
        except ValueError:
            LOGGER.debug("Unknown path mode %r in preferences, using default", raw)
            return DEFAULT_PATH_MODE

    def set_path_mode(self, value: PathMode) -> None:
        self.backend.set_int(constants.PATH_MODE_KEY, int(value))

    def get_extra_commands(self) -> str:
        return self.backend.get_string(
            constants.EXTRA_COMMANDS_KEY,
            constants.DEFAULT_EXTRA_COMMANDS,
        )

    def set_extra_commands(self, value: str) -> None:
        self.backend.set_string(constants.EXTRA_COMMANDS_KEY, value)

    def get_code_extensions(self) -> str:
        return self.backend.get_string(
            constants.CODE_EXTENSIONS_KEY,
            constants.DEFAULT_CODE_EXTENSIONS,
        )

    def set_code_extensions(self, value: str) -> None:
        self.backend.set_string(constants.CODE_EXTENSIONS_KEY, value.strip())

    def reset_code_extensions(self) -> None:
        """Forget the stored extension list so the default applies again."""
        self.backend.delete_key(constants.CODE_EXTENSIONS_KEY)

    def code_extension_list(self) -> list[str]:
        return split_extensions(self.get_code_extensions())

    def snapshot(self) -> Preferences:
        """Read every preference once and freeze the result."""
        return Preferences(
            editor_path=self.get_editor_path(),
            server_name=self.get_server_name(),
            force_foreground=self.get_force_foreground(),
            generate_aux_project=self.get_generate_aux_project(),
            path_mode=self.get_path_mode(),
            extra_commands=self.get_extra_commands(),
            code_extensions=self.get_code_extensions(),
        )
