"""Describe where each locked package sits relative to the project."""

from __future__ import annotations

from .models import NormalizedLockData, RootDependencies

ROOT_LABEL = "(root)"
TRANSITIVE_LABEL = "(transitive)"
HOISTED_LABEL = "(hoisted)"


def describe_placements(
    data: NormalizedLockData, root_deps: RootDependencies
) -> dict[str, list[str]]:
    """Return one placement label per lock entry, grouped by package name.

    Formats without hierarchy information only distinguish root-declared
    packages from transitive ones.
    """
    placements: dict[str, list[str]] = {}
    for entry in data.entries.values():
        if entry.name in root_deps:
            label = ROOT_LABEL
        elif not data.hierarchy_known or entry.parent_path is None:
            label = TRANSITIVE_LABEL
        elif entry.parent_path:
            label = "via: " + " → ".join(entry.parent_path)
        else:
            label = HOISTED_LABEL
        placements.setdefault(entry.name, []).append(label)
    return placements
