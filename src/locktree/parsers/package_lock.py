"""Normalize npm package-lock.json files.

Two layouts exist:
- lockfileVersion 1 nests installed packages under ``dependencies`` and
  records edges in each entry's ``requires`` map.
- lockfileVersion 2/3 lists every installed folder under ``packages`` keyed
  by its ``node_modules/...`` path; the ``""`` key describes the project.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import Any

from ..errors import LockfileParseError
from ..models import LockEntry, NormalizedLockData, RootManifest
from .base import BaseNormalizer, skip_entry

_NODE_MODULES = "node_modules/"


def load_lock_json(content: str, lock_name: str = "package-lock.json") -> dict[str, Any]:
    """Decode lock file JSON, insisting on an object at the top level."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise LockfileParseError(f"{lock_name} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise LockfileParseError(f"{lock_name} must contain a JSON object")
    return data


class NpmNestedLockNormalizer(BaseNormalizer):
    """lockfileVersion 1: nested ``dependencies`` objects."""

    format = "npm-v1"
    supported_files = ("package-lock.json", "npm-shrinkwrap.json")

    def normalize(self, content: str) -> NormalizedLockData:
        data = load_lock_json(content)
        dependencies = data.get("dependencies") or {}
        if not isinstance(dependencies, Mapping):
            raise LockfileParseError("package-lock.json 'dependencies' must be an object")
        return NormalizedLockData.from_entries(
            format=self.format, entries=self._walk(dependencies, ())
        )

    def _walk(self, dependencies: Mapping[str, Any], ancestors: tuple[str, ...]) -> Iterator[LockEntry]:
        for name, meta in dependencies.items():
            key = "/".join((*ancestors, name))
            if not isinstance(meta, Mapping):
                skip_entry(key, "entry is not an object")
                continue
            version = meta.get("version")
            if not version:
                skip_entry(key, "missing version")
                continue
            yield LockEntry.from_edges(
                key=key,
                name=name,
                version=str(version),
                edges=[meta.get("requires")],
                resolved_url=meta.get("resolved"),
                integrity=meta.get("integrity"),
                parent_path=ancestors,
            )
            nested = meta.get("dependencies")
            if isinstance(nested, Mapping):
                yield from self._walk(nested, (*ancestors, name))


def split_node_modules_path(key: str) -> tuple[str, tuple[str, ...]]:
    """Split ``[prefix/]node_modules/a/node_modules/@s/b`` into the prefix and package names.

    The prefix is the workspace folder the ``node_modules`` tree lives in
    (``""`` for the project root).
    """
    prefix, *segments = key.split(_NODE_MODULES)
    names = tuple(segment.strip("/") for segment in segments if segment.strip("/"))
    return prefix.strip("/"), names


class NpmFlatLockNormalizer(BaseNormalizer):
    """lockfileVersion 2 and 3: flat ``packages`` map of install paths."""

    format = "npm-v2"
    supported_files = ("package-lock.json", "npm-shrinkwrap.json")

    def normalize(self, content: str) -> NormalizedLockData:
        data = load_lock_json(content)
        packages = data.get("packages") or {}
        if not isinstance(packages, Mapping):
            raise LockfileParseError("package-lock.json 'packages' must be an object")

        importers: dict[str, RootManifest] = {}
        entries: list[LockEntry] = []
        for key, meta in packages.items():
            if not isinstance(meta, Mapping):
                skip_entry(key, "entry is not an object")
                continue
            if _NODE_MODULES not in f"{key}/":
                # "" is the project itself; other keys are workspace folders
                importers[key] = RootManifest.from_mapping(meta)
                continue
            entry = self._entry(key, meta, packages)
            if entry is not None:
                entries.append(entry)

        return NormalizedLockData.from_entries(
            format=self.format, entries=entries, importers=importers
        )

    def _entry(
        self, key: str, meta: Mapping[str, Any], packages: Mapping[str, Any]
    ) -> LockEntry | None:
        _, names = split_node_modules_path(key)
        if not names:
            skip_entry(key, "no package name in path")
            return None

        source = meta
        if meta.get("link"):
            target = packages.get(str(meta.get("resolved") or ""))
            if not isinstance(target, Mapping):
                skip_entry(key, f"link target {meta.get('resolved')!r} not found")
                return None
            source = target

        version = source.get("version")
        if not version:
            skip_entry(key, "missing version")
            return None

        return LockEntry.from_edges(
            key=key,
            name=names[-1],
            version=str(version),
            edges=[source.get("dependencies"), source.get("optionalDependencies")],
            resolved_url=meta.get("resolved"),
            integrity=source.get("integrity"),
            parent_path=names[:-1],
        )
