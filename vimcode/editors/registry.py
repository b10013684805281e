"""Registry of Vim flavors and installation discovery."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from .base import Installation, VimFlavor, platform_key  # noqa: TC001
from .gvim import GVim
from .macvim import MacVim

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

LOGGER = logging.getLogger(__name__)

# All known flavors (seed order, and PATH name order within a directory)
_FLAVORS: list[type[VimFlavor]] = [
    MacVim,
    GVim,
]

# Cache for flavor instances
_flavor_instances: dict[str, VimFlavor] = {}


def get_all_flavors() -> list[VimFlavor]:
    """Get instances of all registered flavors."""
    flavors = []
    for flavor_cls in _FLAVORS:
        name = flavor_cls.name
        if name not in _flavor_instances:
            _flavor_instances[name] = flavor_cls()
        flavors.append(_flavor_instances[name])
    return flavors


def executable_names(platform: str | None = None) -> list[str]:
    """Return the executable names searched in each PATH directory, in order."""
    key = platform_key(platform)
    names = [name for flavor in get_all_flavors() for name in flavor.executable_names(key)]
    return list(dict.fromkeys(names))


def _seed_installations() -> list[Installation]:
    """Return the well-known installs that exist on disk."""
    return [install for flavor in get_all_flavors() if (install := flavor.seed()) is not None]


def _scan_folder(folder: str, names: Sequence[str]) -> Iterator[Installation]:
    """Yield an installation for each of ``names`` present in ``folder``."""
    if not folder:
        return
    for exe in names:
        path = Path(folder) / exe
        if path.is_file():
            yield Installation(name=f"Vim ({path.name})", path=str(path))


def discover(
    env_path: str | None = None,
    platform: str | None = None,
) -> list[Installation]:
    """Find Vim installations at well-known locations and in PATH.

    Well-known locations come first, then hits from each PATH directory in
    PATH order. No de-duplication is done, so the same executable can appear
    more than once.

    Args:
        env_path: Search path to scan (default: the ``PATH`` environment variable)
        platform: Platform whose executable names to look for (default: ``sys.platform``)

    Returns:
        Ordered list of installations, possibly empty

    """
    if env_path is None:
        env_path = os.environ.get("PATH", "")
    names = executable_names(platform)

    installs = _seed_installations()
    # Don't limit the search to folders named vim: scoop and chocolatey
    # install elsewhere.
    for folder in env_path.split(os.pathsep):
        installs.extend(_scan_folder(folder, names))

    LOGGER.debug("Discovered %d Vim installation(s): %s", len(installs), installs)
    return installs


def resolve_installation_for_path(
    path: str,
    installations: Sequence[Installation],
) -> Installation | None:
    """Return the first installation whose path equals ``path``."""
    for install in installations:
        if install.path == path:
            return install
    return None
