"""Build a bounded dependency tree from normalized lock data."""

from __future__ import annotations

import logging

from .errors import NoLockDataError
from .models import DependencyTree, DependencyTreeNode, NormalizedLockData, RootDependencies
from .parsers.base import LookupCache
from .parsers.registry import get_normalizer

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 20


class _TreeBuild:
    """State owned by a single ``build_dependency_tree`` call."""

    def __init__(self, data: NormalizedLockData, max_depth: int) -> None:
        self.data = data
        self.max_depth = max_depth
        self.normalizer = get_normalizer(data.format)
        self.cache: LookupCache = {}
        self.expanded: set[tuple[tuple[str, ...], str]] = set()
        self.all_nodes: dict[str, list[DependencyTreeNode]] = {}

    def node(
        self,
        name: str,
        version_range: str,
        current_path: tuple[str, ...],
        is_dev: bool,
    ) -> DependencyTreeNode | None:
        entry = self.normalizer.find_entry(self.data, name, version_range, current_path, self.cache)
        if entry is None:
            logger.debug(
                "Unresolved dependency %s@%s under %s",
                name,
                version_range,
                " > ".join(current_path) or "<root>",
            )
            return None

        depth = len(current_path) + 1
        node = DependencyTreeNode(
            name=name,
            version=entry.version,
            depth=depth,
            path=current_path,
            is_direct=depth == 1,
            is_dev_dependency=is_dev,
            resolved_url=entry.resolved_url,
            integrity=entry.integrity,
        )
        self.all_nodes.setdefault(node.composite_key, []).append(node)

        child_path = current_path + (name,)
        for child_name, child_range in entry.dependencies.items():
            if child_name == name or child_name in current_path:
                continue
            if depth + 1 > self.max_depth:
                continue
            structural_key = (child_path, child_name)
            if structural_key in self.expanded:
                continue
            self.expanded.add(structural_key)

            child = self.node(child_name, child_range, child_path, is_dev)
            if child is not None:
                node.children.append(child)
        return node


def build_dependency_tree(
    data: NormalizedLockData | None,
    root_deps: RootDependencies,
    max_depth: int = DEFAULT_MAX_DEPTH,
    *,
    root_name: str = "root",
    root_version: str = "0.0.0",
) -> DependencyTree:
    """Expand ``root_deps`` through the lock data into a tree of resolved instances.

    Each branch stops at ``max_depth`` levels below the root, at a package
    already on its own ancestor path, or where the lock data has no entry for
    a dependency. A given (ancestor path, child name) pair is expanded at most
    once per build.

    Raises:
        NoLockDataError: If ``data`` is None.
        ValueError: If ``max_depth`` is less than 1.
    """
    if data is None:
        raise NoLockDataError("Lock data must be normalized before building a dependency tree")
    if max_depth < 1:
        raise ValueError(f"max_depth must be at least 1, got {max_depth}")

    build = _TreeBuild(data, max_depth)
    root = DependencyTreeNode(name=root_name, version=root_version, depth=0)
    for name, version_range in root_deps.ranges.items():
        node = build.node(name, version_range, (), root_deps.is_dev(name))
        if node is not None:
            root.children.append(node)

    tree = DependencyTree(root=root, all_nodes=build.all_nodes)
    logger.debug(
        "Built dependency tree: %d nodes, %d distinct packages",
        tree.node_count,
        len(tree.all_nodes),
    )
    return tree
