"""Normalize bun.lock text lock files.

bun.lock is JSON with trailing commas. Each ``packages`` value is a tuple
``[name@version, resolution, metadata, integrity]``; keys are the install
name, with ``parent/name`` for copies nested under another package.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any

from ..errors import LockfileParseError
from ..models import LockEntry, NormalizedLockData, RootManifest
from .base import BaseNormalizer, skip_entry
from .paths import split_name_version, split_package_path

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def sanitize(content: str) -> str:
    """Remove trailing commas before ``}`` or ``]`` so the text decodes as JSON."""
    return _TRAILING_COMMA.sub(r"\1", content)


class BunLockNormalizer(BaseNormalizer):
    """Text ``bun.lock`` files (the binary ``bun.lockb`` is not supported)."""

    format = "bun"
    supported_files = ("bun.lock",)

    def normalize(self, content: str) -> NormalizedLockData:
        try:
            data = json.loads(sanitize(content))
        except json.JSONDecodeError as exc:
            raise LockfileParseError(f"bun.lock is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise LockfileParseError("bun.lock must contain a JSON object")

        workspaces = data.get("workspaces") or {}
        importers = {
            str(path): RootManifest.from_mapping(workspace)
            for path, workspace in workspaces.items()
            if isinstance(workspace, Mapping)
        } if isinstance(workspaces, Mapping) else {}

        packages = data.get("packages") or {}
        if not isinstance(packages, Mapping):
            raise LockfileParseError("bun.lock 'packages' must be an object")

        entries = [
            entry
            for key, value in packages.items()
            if (entry := self._entry(str(key), value)) is not None
        ]
        return NormalizedLockData.from_entries(
            format=self.format, entries=entries, importers=importers
        )

    @staticmethod
    def _entry(key: str, value: Any) -> LockEntry | None:
        if not isinstance(value, Sequence) or isinstance(value, str) or len(value) < 3:
            skip_entry(key, "expected [name@version, resolution, metadata, ...]")
            return None
        parsed = split_name_version(str(value[0]))
        if parsed is None:
            skip_entry(key, f"cannot split {value[0]!r} into name and version")
            return None
        names = split_package_path(key)
        if not names:
            skip_entry(key, "empty package key")
            return None

        metadata = value[2] if isinstance(value[2], Mapping) else {}
        integrity = value[3] if len(value) > 3 and isinstance(value[3], str) else None
        return LockEntry.from_edges(
            key=key,
            # the key holds the install name, which differs from value[0] for aliases
            name=names[-1],
            version=parsed[1],
            edges=[
                metadata.get("dependencies"),
                metadata.get("optionalDependencies"),
                metadata.get("peerDependencies"),
            ],
            resolved_url=str(value[1]) if value[1] else None,
            integrity=integrity,
            parent_path=names[:-1],
        )
