"""Normalize pnpm-lock.yaml files (lockfile v5, v6 and v9)."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from ..errors import LockfileParseError
from ..models import LockEntry, NormalizedLockData, RootManifest
from .base import BaseNormalizer, skip_entry
from .paths import split_name_version
from .semver import strip_peer_suffix

# v5 keys: "/name/1.0.0" or "/@scope/name/1.0.0", optionally with "_peer" suffix
_V5_KEY = re.compile(r"^/?(@[^/]+/[^/]+|[^/@][^/]*)/([^/]+)$")

_IMPORTER_SECTIONS = ("dependencies", "devDependencies", "optionalDependencies")


def clean_version(value: object) -> str:
    """Drop ``(peer)`` and v5 ``_peer`` suffixes from a resolved version."""
    version = strip_peer_suffix(str(value))
    if version[:1].isdigit():
        version = version.split("_", 1)[0]
    return version


def split_package_key(key: str) -> tuple[str, str] | None:
    """Return ``(name, version)`` for a pnpm ``packages``/``snapshots`` key."""
    base = key.split("(", 1)[0]
    match = _V5_KEY.match(base)
    if match:
        return match.group(1), clean_version(match.group(2))
    parsed = split_name_version(base.lstrip("/"))
    if parsed is None:
        return None
    name, version = parsed
    return name, clean_version(version)


def _base_key(key: str) -> str:
    return key.split("(", 1)[0].lstrip("/")


def _importer(data: Mapping[str, Any]) -> RootManifest:
    """Build an importer manifest whose ranges are the resolved versions."""
    sections: dict[str, dict[str, str]] = {}
    for section in _IMPORTER_SECTIONS:
        values = data.get(section)
        if not isinstance(values, Mapping):
            continue
        resolved: dict[str, str] = {}
        for name, value in values.items():
            if isinstance(value, Mapping):
                # v6/v9: {specifier, version}
                value = value.get("version") or value.get("specifier")
            if value:
                resolved[str(name)] = clean_version(value)
        sections[section] = resolved
    return RootManifest.from_mapping(sections)


class PnpmLockNormalizer(BaseNormalizer):
    """pnpm lock files record resolved versions, so edges use exact versions."""

    format = "pnpm"
    supported_files = ("pnpm-lock.yaml", "pnpm-lock.yml")

    def normalize(self, content: str) -> NormalizedLockData:
        import yaml

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise LockfileParseError(f"pnpm-lock.yaml is not valid YAML: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise LockfileParseError("pnpm-lock.yaml must contain a mapping")

        importers = self._importers(data)
        snapshot_edges = self._snapshot_edges(data.get("snapshots"))

        packages = data.get("packages") or {}
        if not isinstance(packages, Mapping):
            raise LockfileParseError("pnpm-lock.yaml 'packages' must be a mapping")

        entries: list[LockEntry] = []
        for key, meta in packages.items():
            key = str(key)
            if not isinstance(meta, Mapping):
                skip_entry(key, "entry is not a mapping")
                continue
            parsed = split_package_key(key)
            name = str(meta.get("name") or (parsed[0] if parsed else ""))
            version = str(meta.get("version") or (parsed[1] if parsed else ""))
            if not name or not version:
                skip_entry(key, "cannot determine name and version")
                continue

            edges = snapshot_edges.get(_base_key(key))
            if edges is None:
                edges = self._clean_edges(
                    meta.get("dependencies"),
                    meta.get("peerDependencies"),
                    meta.get("optionalDependencies"),
                )

            resolution = meta.get("resolution")
            if not isinstance(resolution, Mapping):
                resolution = {}
            entries.append(
                LockEntry.from_edges(
                    key=key,
                    name=name,
                    version=clean_version(version),
                    edges=[edges],
                    resolved_url=resolution.get("tarball"),
                    integrity=resolution.get("integrity"),
                    parent_path=None,
                )
            )

        return NormalizedLockData.from_entries(
            format=self.format, entries=entries, importers=importers
        )

    @staticmethod
    def _importers(data: Mapping[str, Any]) -> dict[str, RootManifest]:
        raw = data.get("importers")
        if isinstance(raw, Mapping):
            return {
                str(path): _importer(importer)
                for path, importer in raw.items()
                if isinstance(importer, Mapping)
            }
        # single-project lock files keep the importer at the top level
        return {"": _importer(data)}

    @staticmethod
    def _clean_edges(*maps: object) -> dict[str, str]:
        edges: dict[str, str] = {}
        for edge_map in maps:
            if not isinstance(edge_map, Mapping):
                continue
            for name, value in edge_map.items():
                edges.setdefault(str(name), clean_version(value))
        return edges

    def _snapshot_edges(self, snapshots: object) -> dict[str, dict[str, str]]:
        """Merge every snapshot of a base package key; earlier snapshots win per name."""
        merged: dict[str, dict[str, str]] = {}
        if not isinstance(snapshots, Mapping):
            return merged
        for key, snapshot in snapshots.items():
            if not isinstance(snapshot, Mapping):
                skip_entry(str(key), "snapshot is not a mapping")
                continue
            edges = merged.setdefault(_base_key(str(key)), {})
            for name, version in self._clean_edges(
                snapshot.get("dependencies"), snapshot.get("optionalDependencies")
            ).items():
                edges.setdefault(name, version)
        return merged
