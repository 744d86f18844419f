"""Lock entry model."""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Iterable, Mapping
from types import MappingProxyType


@dataclass(frozen=True)
class LockEntry:
    """One resolved package record from a lock file.

    ``key`` is the format-specific identity the entry was stored under (a
    ``node_modules`` path, a ``name@version`` string, a yarn header or a bare
    name). ``parent_path`` holds the ancestor package names recovered from that
    key: ``()`` for a top-level entry and ``None`` when the format records no
    hierarchy at all.
    """

    key: str
    name: str
    version: str
    resolved_url: str | None = None
    integrity: str | None = None
    dependencies: Mapping[str, str] = field(default_factory=dict)
    parent_path: tuple[str, ...] | None = ()
    specifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Lock entry name must be non-empty")
        if not self.version:
            raise ValueError(f"Lock entry {self.name!r} has no version")
        object.__setattr__(self, "dependencies", MappingProxyType(dict(self.dependencies)))

    @property
    def composite_key(self) -> str:
        return f"{self.name}@{self.version}"

    @property
    def is_top_level(self) -> bool:
        return self.parent_path == ()

    def is_nested_under(self, parent: str) -> bool:
        return bool(self.parent_path) and self.parent_path[-1] == parent

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "key": self.key,
            "name": self.name,
            "version": self.version,
            "dependencies": dict(self.dependencies),
        }
        if self.resolved_url:
            data["resolved"] = self.resolved_url
        if self.integrity:
            data["integrity"] = self.integrity
        if self.parent_path is not None:
            data["parentPath"] = list(self.parent_path)
        return data

    @classmethod
    def from_edges(
        cls,
        *,
        key: str,
        name: str,
        version: str,
        edges: Iterable[Mapping[str, object] | None],
        resolved_url: str | None = None,
        integrity: str | None = None,
        parent_path: tuple[str, ...] | None = (),
        specifiers: Iterable[str] = (),
    ) -> LockEntry:
        """Build an entry, merging several dependency maps (first one wins per name)."""
        dependencies: dict[str, str] = {}
        for edge_map in edges:
            if not isinstance(edge_map, Mapping):
                continue
            for dep_name, dep_range in edge_map.items():
                if isinstance(dep_name, str) and dep_name not in dependencies:
                    dependencies[dep_name] = str(dep_range)
        return cls(
            key=key,
            name=name,
            version=version,
            resolved_url=resolved_url or None,
            integrity=integrity or None,
            dependencies=dependencies,
            parent_path=parent_path,
            specifiers=tuple(specifiers),
        )
