"""Pytest configuration and shared fixtures for all tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from locktree.models import LockEntry, NormalizedLockData


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Keep a developer's LOCKTREE_CONFIG and CLI log handlers out of tests."""
    monkeypatch.delenv("LOCKTREE_CONFIG", raising=False)
    yield
    logger = logging.getLogger("locktree")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def write_files(tmp_path) -> Callable[[dict[str, object]], Path]:
    """Write ``{relative path: text or JSON-able object}`` under tmp_path."""

    def _write(files: dict[str, object], base: Path | None = None) -> Path:
        root = base or tmp_path
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            text = content if isinstance(content, str) else json.dumps(content, indent=2)
            path.write_text(text, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def make_data() -> Callable[..., NormalizedLockData]:
    """Build lock data from ``(name, version, deps)`` or ``(name, version, deps, parent_path)`` tuples."""

    def _make(*specs: tuple, format: str = "npm-v2") -> NormalizedLockData:
        entries = []
        for spec in specs:
            name, version, deps = spec[0], spec[1], spec[2]
            parent_path = spec[3] if len(spec) > 3 else ()
            key = "/".join((*(parent_path or ()), name, version))
            entries.append(
                LockEntry(
                    key=key,
                    name=name,
                    version=version,
                    dependencies=deps,
                    parent_path=parent_path,
                )
            )
        return NormalizedLockData.from_entries(format=format, entries=entries)

    return _make


NPM_V2_LOCK = {
    "name": "app",
    "version": "1.0.0",
    "lockfileVersion": 3,
    "requires": True,
    "packages": {
        "": {
            "name": "app",
            "version": "1.0.0",
            "dependencies": {"a": "^1.0.0", "b": "^1.0.0"},
            "devDependencies": {"lodash": "^4.17.0"},
        },
        "node_modules/a": {
            "version": "1.0.0",
            "resolved": "https://registry.npmjs.org/a/-/a-1.0.0.tgz",
            "integrity": "sha512-a",
            "dependencies": {"lodash": "^3.0.0"},
        },
        "node_modules/a/node_modules/lodash": {"version": "3.10.1"},
        "node_modules/b": {"version": "1.2.0", "dependencies": {"lodash": "^4.0.0"}},
        "node_modules/lodash": {
            "version": "4.17.21",
            "resolved": "https://registry.npmjs.org/lodash/-/lodash-4.17.21.tgz",
            "integrity": "sha512-lodash",
            "dev": True,
        },
    },
}

NPM_V2_PACKAGE_JSON = {
    "name": "app",
    "version": "1.0.0",
    "dependencies": {"a": "^1.0.0", "b": "^1.0.0"},
    "devDependencies": {"lodash": "^4.17.0"},
}


@pytest.fixture
def npm_project(write_files) -> Path:
    """A project whose lodash is installed as 3.10.1 under a and 4.17.21 at the top."""
    return write_files(
        {
            "package.json": NPM_V2_PACKAGE_JSON,
            "package-lock.json": NPM_V2_LOCK,
        }
    )


@pytest.fixture
def npm_v2_lock_text() -> str:
    return json.dumps(NPM_V2_LOCK)
