"""Duplicate detection result models."""

from __future__ import annotations

from dataclasses import dataclass, field

from .tree import DependencyTreeNode

UNKNOWN_VERSION = "unknown"


@dataclass(frozen=True)
class ChainHop:
    """One ancestor in a reconstructed chain."""

    name: str
    version: str = UNKNOWN_VERSION

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "version": self.version}


@dataclass
class DuplicateGroup:
    """Instances of one package name that qualify as duplicates.

    ``chains[i]`` is the reconstructed ancestor chain of ``instances[i]``.
    """

    name: str
    versions: tuple[str, ...]
    instances: list[DependencyTreeNode]
    chains: list[tuple[ChainHop, ...]] = field(default_factory=list)

    @property
    def has_version_conflict(self) -> bool:
        return len(self.versions) > 1

    def to_dict(self) -> dict[str, object]:
        instances = []
        for index, instance in enumerate(self.instances):
            item = instance.to_dict(recursive=False)
            if index < len(self.chains):
                item["chain"] = [hop.to_dict() for hop in self.chains[index]]
            instances.append(item)
        return {
            "name": self.name,
            "versions": list(self.versions),
            "instances": instances,
        }


@dataclass
class DuplicateSummary:
    """Totals and groups produced by the duplicate detector."""

    total_packages: int
    duplicate_packages: int
    total_duplicate_instances: int
    duplicates: list[DuplicateGroup] = field(default_factory=list)

    @property
    def has_duplicates(self) -> bool:
        return self.duplicate_packages > 0

    def to_dict(self) -> dict[str, object]:
        return {
            "totalPackages": self.total_packages,
            "duplicatePackages": self.duplicate_packages,
            "totalDuplicateInstances": self.total_duplicate_instances,
            "duplicates": [group.to_dict() for group in self.duplicates],
        }

    @classmethod
    def from_groups(cls, *, total_packages: int, groups: list[DuplicateGroup]) -> DuplicateSummary:
        return cls(
            total_packages=total_packages,
            duplicate_packages=len(groups),
            total_duplicate_instances=sum(len(group.instances) for group in groups),
            duplicates=groups,
        )
