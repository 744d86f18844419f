"""Detect packages installed more than once in a dependency tree."""

from __future__ import annotations

import logging

from .models import (
    UNKNOWN_VERSION,
    ChainHop,
    DependencyTree,
    DependencyTreeNode,
    DuplicateGroup,
    DuplicateSummary,
)
from .parsers.paths import PackageSpec

logger = logging.getLogger(__name__)


def _instances_by_name(tree: DependencyTree) -> dict[str, list[DependencyTreeNode]]:
    """Group indexed nodes by bare name, dropping repeated (name, version, path) triples."""
    grouped: dict[str, list[DependencyTreeNode]] = {}
    seen: set[tuple[str, str, tuple[str, ...]]] = set()
    for nodes in tree.all_nodes.values():
        for node in nodes:
            if node.identity in seen:
                continue
            seen.add(node.identity)
            grouped.setdefault(node.name, []).append(node)
    return grouped


def _select_instances(
    instances: list[DependencyTreeNode], version_conflicts_only: bool
) -> list[DependencyTreeNode]:
    by_version: dict[str, list[DependencyTreeNode]] = {}
    for node in instances:
        by_version.setdefault(node.version, []).append(node)

    if len(by_version) > 1:
        return list(instances)
    if version_conflicts_only:
        return []
    # a single version: duplicated only when installed at more than one place
    return [node for nodes in by_version.values() if len(nodes) > 1 for node in nodes]


def _resolve_hop(
    name: str,
    prefix: tuple[str, ...],
    by_name: dict[str, list[DependencyTreeNode]],
) -> ChainHop:
    candidates = by_name.get(name, [])
    for node in candidates:
        if node.path == prefix:
            return ChainHop(name, node.version)
    for node in candidates:
        if node.path[: len(prefix)] == prefix:
            return ChainHop(name, node.version)
    if candidates:
        return ChainHop(name, candidates[0].version)
    return ChainHop(name, UNKNOWN_VERSION)


def reconstruct_chain(
    node: DependencyTreeNode, by_name: dict[str, list[DependencyTreeNode]]
) -> tuple[ChainHop, ...]:
    """Return the versioned ancestors of ``node``, root side first."""
    return tuple(
        _resolve_hop(ancestor, node.path[:index], by_name)
        for index, ancestor in enumerate(node.path)
    )


def detect_duplicates(
    tree: DependencyTree, *, version_conflicts_only: bool = False
) -> DuplicateSummary:
    """Find package names with more than one qualifying instance in ``tree``.

    With ``version_conflicts_only`` a name qualifies only when at least two
    distinct versions are installed; otherwise the same version installed at
    two places also qualifies. Groups are ordered by instance count, largest
    first. The tree is not modified.
    """
    by_name = _instances_by_name(tree)

    groups: list[DuplicateGroup] = []
    for name, instances in by_name.items():
        if len(instances) < 2:
            continue
        selected = _select_instances(instances, version_conflicts_only)
        if len(selected) < 2:
            continue
        versions = tuple(dict.fromkeys(node.version for node in selected))
        groups.append(
            DuplicateGroup(
                name=name,
                versions=versions,
                instances=selected,
                chains=[reconstruct_chain(node, by_name) for node in selected],
            )
        )

    groups.sort(key=lambda group: len(group.instances), reverse=True)
    summary = DuplicateSummary.from_groups(total_packages=len(tree.all_nodes), groups=groups)
    logger.debug(
        "Found %d duplicated packages (%d instances) among %d",
        summary.duplicate_packages,
        summary.total_duplicate_instances,
        summary.total_packages,
    )
    return summary


def filter_duplicates(summary: DuplicateSummary, spec: PackageSpec) -> DuplicateSummary:
    """Keep only the groups for ``spec`` and recompute the duplicate totals.

    A versioned spec keeps a group when one of its instances is exactly that
    version; a bare name keeps every group whose name contains it.
    """
    if spec.version is None:
        groups = [group for group in summary.duplicates if spec.matches_name(group.name)]
    else:
        groups = [
            group
            for group in summary.duplicates
            if any(spec.matches(node.name, node.version) for node in group.instances)
        ]
    logger.debug("Package filter %s kept %d of %d groups", spec, len(groups), len(summary.duplicates))
    return DuplicateSummary.from_groups(total_packages=summary.total_packages, groups=groups)
