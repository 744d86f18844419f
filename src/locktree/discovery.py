"""Workspace, lock file and lock format discovery."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .errors import UnknownLockFormatError
from .parsers.registry import LOCK_NORMALIZERS

logger = logging.getLogger(__name__)

# Preference order when a directory holds more than one lock file.
LOCK_FILE_NAMES = (
    "npm-shrinkwrap.json",
    "package-lock.json",
    "bun.lock",
    "pnpm-lock.yaml",
    "yarn.lock",
)

WORKSPACE_MARKER = "pnpm-workspace.yaml"


def _declares_workspaces(package_json: Path) -> bool:
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.debug("Ignoring unreadable %s: %s", package_json, exc)
        return False
    return isinstance(data, dict) and bool(data.get("workspaces"))


def find_workspace_root(start: Path) -> Path | None:
    """Walk up from ``start`` to the nearest directory that defines a workspace.

    A directory qualifies when it holds ``pnpm-workspace.yaml`` or a
    package.json with a ``workspaces`` field.
    """
    start = start.resolve()
    for directory in (start, *start.parents):
        if (directory / WORKSPACE_MARKER).is_file():
            return directory
        package_json = directory / "package.json"
        if package_json.is_file() and _declares_workspaces(package_json):
            return directory
    return None


def find_lock_file(project_dir: Path) -> Path | None:
    """Return the lock file that governs ``project_dir``.

    Workspace members are installed from the workspace root's lock file, so
    the root is checked before the project directory for each lock file name.
    """
    project_dir = project_dir.resolve()
    workspace_root = find_workspace_root(project_dir)
    search = [project_dir] if workspace_root in (None, project_dir) else [workspace_root, project_dir]

    for name in LOCK_FILE_NAMES:
        for directory in search:
            candidate = directory / name
            if candidate.is_file():
                logger.debug("Using lock file %s", candidate)
                return candidate
    return None


def detect_lock_format(path: Path, content: str | None = None) -> str:
    """Map a lock file to the format tag of the normalizer that reads it.

    npm's nested (``lockfileVersion`` 1) and flat (2 and later) layouts share
    file names, so their ``lockfileVersion`` decides; ``content`` is read
    from ``path`` when not given.
    """
    name = path.name
    formats = [tag for tag, normalizer in LOCK_NORMALIZERS.items() if normalizer.supports(name)]
    if not formats:
        raise UnknownLockFormatError(f"Unsupported lock file: {name}")
    if len(formats) == 1:
        return formats[0]

    if content is None:
        content = path.read_text(encoding="utf-8")
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        # the npm normalizer reports the syntax error
        return "npm-v2"
    version = data.get("lockfileVersion") if isinstance(data, dict) else None
    return "npm-v1" if version == 1 else "npm-v2"
