"""Human-readable rendering of reports and trees."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Any

from .models import ChainHop, DependencyTree, DependencyTreeNode

MAX_CHAIN_HOPS = 8
CHAIN_EDGE_HOPS = 3
ARROW = " → "


def format_chain(
    hops: Sequence[ChainHop],
    direct_names: Collection[str] = (),
    *,
    full: bool = False,
) -> str:
    """Render a chain of hops (ancestors then the package itself).

    The first hop is marked ``(root)`` when the project declares it. Chains
    longer than eight hops keep their first and last three unless ``full``.
    """
    labels = [str(hop) for hop in hops]
    if labels and hops[0].name in direct_names:
        labels[0] += " (root)"
    if not full and len(labels) > MAX_CHAIN_HOPS:
        hidden = len(labels) - 2 * CHAIN_EDGE_HOPS
        labels = [
            *labels[:CHAIN_EDGE_HOPS],
            f"… ({hidden} more)",
            *labels[-CHAIN_EDGE_HOPS:],
        ]
    return ARROW.join(labels)


def _instance_chain(instance: dict[str, Any]) -> list[ChainHop]:
    hops = [ChainHop(hop["name"], hop["version"]) for hop in instance.get("chain", [])]
    hops.append(ChainHop(instance["name"], instance["version"]))
    return hops


def render_summary(report: dict[str, Any], full_chains: bool = False) -> str:
    """Return a Markdown string with totals, a duplicate table and per-package chains."""
    totals = report.get("totals", {})
    lock_file = report.get("lockFile", {})
    duplicates = report.get("duplicates", [])
    direct_names = set(report.get("project", {}).get("directDependencies", []))

    lines = []
    lines.append("# locktree Summary")
    lines.append("")
    lines.append(
        f"Lock file: `{lock_file.get('path', '(unknown)')}` ({lock_file.get('format', '?')}) | "
        f"Packages: {totals.get('packages', 0)} | "
        f"Duplicated: {totals.get('duplicatePackages', 0)} | "
        f"Instances: {totals.get('duplicateInstances', 0)}"
    )
    if report.get("package"):
        lines.append("")
        lines.append(f"Filtered to package `{report['package']}`")
    lines.append("")
    lines.append("| Package | Versions | Instances |")
    lines.append("| --- | --- | --- |")

    if not duplicates:
        lines.append("| No duplicate packages | n/a | n/a |")
        return "\n".join(lines) + "\n"

    for group in duplicates:
        versions = ", ".join(group.get("versions", []))
        lines.append(f"| {group['name']} | {versions} | {len(group.get('instances', []))} |")

    for group in duplicates:
        lines.append("")
        lines.append(f"## {group['name']}")
        lines.append("")
        for instance in group.get("instances", []):
            chain = format_chain(_instance_chain(instance), direct_names, full=full_chains)
            lines.append(f"- {instance['version']}: {chain}")

    return "\n".join(lines) + "\n"


def _tree_lines(node: DependencyTreeNode, prefix: str, lines: list[str]) -> None:
    for index, child in enumerate(node.children):
        last = index == len(node.children) - 1
        marker = " (dev)" if child.is_dev_dependency and child.is_direct else ""
        lines.append(f"{prefix}{'└── ' if last else '├── '}{child.composite_key}{marker}")
        _tree_lines(child, prefix + ("    " if last else "│   "), lines)


def render_subtree(node: DependencyTreeNode) -> str:
    """Render ``node`` and its descendants as indented text, one node per line."""
    lines = [node.composite_key]
    _tree_lines(node, "", lines)
    return "\n".join(lines) + "\n"


def render_tree(tree: DependencyTree) -> str:
    return render_subtree(tree.root)
