"""Dependency tree models."""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Iterator


@dataclass
class DependencyTreeNode:
    """One installed instance of a package at one position in the graph.

    ``path`` lists ancestor package names from the root down to, but not
    including, this node. Non-root nodes satisfy ``depth == len(path) + 1`` and
    never contain their own name in ``path``.
    """

    name: str
    version: str
    depth: int
    path: tuple[str, ...] = ()
    is_direct: bool = False
    is_dev_dependency: bool = False
    resolved_url: str | None = None
    integrity: str | None = None
    children: list[DependencyTreeNode] = field(default_factory=list)

    @property
    def composite_key(self) -> str:
        return f"{self.name}@{self.version}"

    @property
    def identity(self) -> tuple[str, str, tuple[str, ...]]:
        return (self.name, self.version, self.path)

    def iter_nodes(self) -> Iterator[DependencyTreeNode]:
        """Yield this node and every descendant, depth first, in child order."""
        stack: list[DependencyTreeNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self, *, recursive: bool = True) -> dict[str, object]:
        data: dict[str, object] = {
            "name": self.name,
            "version": self.version,
            "depth": self.depth,
            "path": list(self.path),
            "isDirect": self.is_direct,
            "isDevDependency": self.is_dev_dependency,
        }
        if self.resolved_url:
            data["resolved"] = self.resolved_url
        if self.integrity:
            data["integrity"] = self.integrity
        if recursive:
            data["children"] = [child.to_dict() for child in self.children]
        else:
            data["childrenCount"] = len(self.children)
        return data


@dataclass
class DependencyTree:
    """Root node plus a ``name@version`` index of every node under it.

    ``all_nodes`` only references nodes; each node is owned by its parent's
    ``children`` list.
    """

    root: DependencyTreeNode
    all_nodes: dict[str, list[DependencyTreeNode]] = field(default_factory=dict)

    def iter_nodes(self) -> Iterator[DependencyTreeNode]:
        """Yield every node below the synthetic root."""
        nodes = self.root.iter_nodes()
        next(nodes)
        yield from nodes

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    @property
    def direct_names(self) -> set[str]:
        return {child.name for child in self.root.children}

    def instances_of(self, name: str) -> list[DependencyTreeNode]:
        """Return every indexed instance of ``name`` across all versions."""
        return [node for nodes in self.all_nodes.values() for node in nodes if node.name == name]

    def find_node(self, name: str, version: str | None = None) -> DependencyTreeNode | None:
        """Return the first node, depth first, named ``name`` (and at ``version`` if given)."""
        for node in self.iter_nodes():
            if node.name == name and (version is None or node.version == version):
                return node
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "root": self.root.to_dict(),
            "totals": {
                "nodes": self.node_count,
                "packages": len(self.all_nodes),
            },
        }
