"""Root manifest models."""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

DEPENDENCY_SECTIONS = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)


def _frozen(mapping: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType({str(k): str(v) for k, v in (mapping or {}).items()})


@dataclass(frozen=True)
class RootManifest:
    """Declared dependencies of the project (or of one workspace importer)."""

    name: str = ""
    version: str = ""
    dependencies: Mapping[str, str] = field(default_factory=dict)
    dev_dependencies: Mapping[str, str] = field(default_factory=dict)
    peer_dependencies: Mapping[str, str] = field(default_factory=dict)
    optional_dependencies: Mapping[str, str] = field(default_factory=dict)
    workspaces: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for attr in (
            "dependencies",
            "dev_dependencies",
            "peer_dependencies",
            "optional_dependencies",
        ):
            object.__setattr__(self, attr, _frozen(getattr(self, attr)))

    def section(self, section: str) -> Mapping[str, str]:
        """Return a section by its package.json key (e.g. ``devDependencies``)."""
        return {
            "dependencies": self.dependencies,
            "devDependencies": self.dev_dependencies,
            "peerDependencies": self.peer_dependencies,
            "optionalDependencies": self.optional_dependencies,
        }[section]

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {}
        if self.name:
            data["name"] = self.name
        if self.version:
            data["version"] = self.version
        for section in DEPENDENCY_SECTIONS:
            deps = self.section(section)
            if deps:
                data[section] = dict(deps)
        if self.workspaces:
            data["workspaces"] = list(self.workspaces)
        return data

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RootManifest:
        """Build a manifest from a package.json-shaped mapping.

        Sections that are not objects are treated as empty; callers that need
        strict checking validate the document first.
        """

        def _section(key: str) -> Mapping[str, str]:
            value = data.get(key)
            return value if isinstance(value, Mapping) else {}

        workspaces = data.get("workspaces")
        if isinstance(workspaces, Mapping):
            workspaces = workspaces.get("packages")
        patterns = tuple(str(p) for p in workspaces) if isinstance(workspaces, list) else ()

        return cls(
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            dependencies=_section("dependencies"),
            dev_dependencies=_section("devDependencies"),
            peer_dependencies=_section("peerDependencies"),
            optional_dependencies=_section("optionalDependencies"),
            workspaces=patterns,
        )


@dataclass(frozen=True)
class RootDependencies:
    """Ordered ``name -> declared range`` map that seeds the first tree level."""

    ranges: Mapping[str, str]
    dev_names: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "ranges", _frozen(self.ranges))

    def __contains__(self, name: object) -> bool:
        return name in self.ranges

    def __len__(self) -> int:
        return len(self.ranges)

    def is_dev(self, name: str) -> bool:
        return name in self.dev_names
