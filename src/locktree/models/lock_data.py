"""Normalized lock data shared by every lock format."""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .lock_entry import LockEntry
from .manifest import RootManifest

LOCK_FORMATS: tuple[str, ...] = ("npm-v1", "npm-v2", "yarn", "pnpm", "bun")

# Formats whose keys say nothing about where a package sits in the graph.
HIERARCHY_UNKNOWN_FORMATS = frozenset({"yarn", "pnpm"})


@dataclass(frozen=True)
class NormalizedLockData:
    """Immutable result of normalizing one lock file.

    ``entries`` maps the format's raw key to the resolved entry. ``importers``
    holds the lock file's own copy of the project's declared dependencies,
    keyed by the importer's path relative to the lock file (``""`` for the
    root), for the formats that record one.
    """

    format: str
    entries: Mapping[str, LockEntry]
    importers: Mapping[str, RootManifest] = field(default_factory=dict)
    _by_name: Mapping[str, tuple[str, ...]] = field(
        default_factory=dict, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.format not in LOCK_FORMATS:
            raise ValueError(f"Unknown lock format: {self.format}")
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))
        object.__setattr__(self, "importers", MappingProxyType(dict(self.importers)))

        by_name: dict[str, list[str]] = {}
        for key, entry in self.entries.items():
            by_name.setdefault(entry.name, []).append(key)
        object.__setattr__(
            self, "_by_name", MappingProxyType({n: tuple(k) for n, k in by_name.items()})
        )

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def hierarchy_known(self) -> bool:
        """False when the format carries no parent/child placement information."""
        return self.format not in HIERARCHY_UNKNOWN_FORMATS

    @property
    def package_names(self) -> list[str]:
        return list(self._by_name)

    def entries_named(self, name: str) -> list[LockEntry]:
        """Return every entry for ``name`` in entry-map iteration order."""
        return [self.entries[key] for key in self._by_name.get(name, ())]

    def root_importer(self) -> RootManifest | None:
        for key in ("", "."):
            if key in self.importers:
                return self.importers[key]
        return next(iter(self.importers.values()), None)

    def importer_for(self, relative_path: str) -> RootManifest | None:
        """Return the importer for a workspace member, falling back to the root."""
        normalized = relative_path.strip("/")
        if normalized in ("", "."):
            return self.root_importer()
        for key in (normalized, f"./{normalized}"):
            if key in self.importers:
                return self.importers[key]
        return self.root_importer()

    def to_dict(self) -> dict[str, object]:
        return {
            "format": self.format,
            "entries": {key: entry.to_dict() for key, entry in self.entries.items()},
            "importers": {key: m.to_dict() for key, m in self.importers.items()},
        }

    @classmethod
    def from_entries(
        cls,
        *,
        format: str,
        entries: Iterable[LockEntry],
        importers: Mapping[str, RootManifest] | None = None,
    ) -> NormalizedLockData:
        """Index entries by their raw key; a repeated key keeps the first entry."""
        indexed: dict[str, LockEntry] = {}
        for entry in entries:
            indexed.setdefault(entry.key, entry)
        return cls(format=format, entries=indexed, importers=importers or {})
