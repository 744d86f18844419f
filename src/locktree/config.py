"""Settings loader for locktree.

Settings come from a JSON object whose keys mirror the ``Settings`` fields,
for example::

    {"max_depth": 12, "include_dev_dependencies": false}

The same object may instead sit under the ``"locktree"`` key of the
project's package.json. Missing keys keep their defaults; unknown keys are
rejected so that typos do not silently fall back to defaults.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from .errors import LocktreeError

CONFIG_PATH_ENV_VAR = "LOCKTREE_CONFIG"
PROJECT_CONFIG_NAME = ".locktree.json"
PACKAGE_JSON_KEY = "locktree"

logger = logging.getLogger(__name__)


class ConfigError(LocktreeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Analysis settings."""

    max_depth: int = 20
    include_dev_dependencies: bool = True
    version_conflicts_only: bool = True
    full_chains: bool = False

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ConfigError(f"'max_depth' must be at least 1, got {self.max_depth}")

    def with_overrides(self, **overrides: Any) -> Settings:
        """Return a copy with every non-None override applied."""
        applied = {key: value for key, value in overrides.items() if value is not None}
        if not applied:
            return self
        return replace(self, **_validated(applied))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        return cls(**_validated(data))


_FIELD_TYPES: dict[str, type] = {
    "max_depth": int,
    "include_dev_dependencies": bool,
    "version_conflicts_only": bool,
    "full_chains": bool,
}


def _validated(data: dict[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(
            f"Unknown setting(s): {', '.join(unknown)}. Known settings: {', '.join(sorted(known))}"
        )
    for key, value in data.items():
        expected = _FIELD_TYPES[key]
        # bool is an int subclass; reject it where an int is wanted
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigError(f"Setting '{key}' must be of type {expected.__name__}")
    return data


def _resolve_config_path(
    path: Path | str | None = None, project_dir: Path | None = None
) -> tuple[Path | None, bool]:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. LOCKTREE_CONFIG environment variable
    3. The nearest ``.locktree.json`` in the project directory or its parents

    Returns the path (or None when no file applies) and whether the file is
    required to exist.
    """
    if path is not None:
        return Path(path), True

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path), True

    if project_dir is not None:
        project_dir = project_dir.resolve()
        for directory in (project_dir, *project_dir.parents):
            candidate = directory / PROJECT_CONFIG_NAME
            if candidate.is_file():
                return candidate, False

    return None, False


def _read_config_file(config_path: Path) -> dict[str, Any]:
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")
    return data


def _package_json_settings(package_json: Path) -> dict[str, Any] | None:
    """Return the ``locktree`` object of a package.json, or None when it has none."""
    if not package_json.is_file():
        return None
    try:
        document = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        # the manifest reader reports a broken package.json
        logger.debug("Not reading settings from %s: %s", package_json, exc)
        return None

    if not isinstance(document, dict) or PACKAGE_JSON_KEY not in document:
        return None
    data = document[PACKAGE_JSON_KEY]
    if not isinstance(data, dict):
        raise ConfigError(f"'{PACKAGE_JSON_KEY}' in {package_json} must be a JSON object")
    return data


def load_settings(path: Path | str | None = None, project_dir: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Optional path to the config file. If not provided, uses the
            LOCKTREE_CONFIG env var, then the nearest ``.locktree.json`` at or
            above ``project_dir``, then the ``locktree`` key of
            ``project_dir/package.json``, then built-in defaults.
        project_dir: Project directory the search starts from.

    Returns:
        A Settings object.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path, required = _resolve_config_path(path, project_dir)
    if config_path is not None:
        if required and not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")
        logger.debug("Loading settings from %s", config_path)
        return Settings.from_dict(_read_config_file(config_path))

    if project_dir is not None:
        data = _package_json_settings(project_dir / "package.json")
        if data is not None:
            logger.debug("Loading settings from the %r key of package.json", PACKAGE_JSON_KEY)
            return Settings.from_dict(data)

    return Settings()
