"""Report aggregation and JSON-friendly output."""

from __future__ import annotations

from typing import Any

from .core import ProjectAnalysis

REPORT_VERSION = "1"


def aggregate(analysis: ProjectAnalysis, include_tree: bool = False) -> dict[str, Any]:
    """Flatten an analysis into a JSON-serializable report.

    ``hasDuplicates`` and ``totals`` sit at the top level so callers can gate
    on them without walking the duplicate groups. The full tree is large and
    only included on request.
    """
    summary = analysis.summary
    report: dict[str, Any] = {
        "version": REPORT_VERSION,
        "hasDuplicates": summary.has_duplicates,
        "project": {
            "name": analysis.project_name,
            "path": str(analysis.project_dir),
            "directDependencies": list(analysis.root_dependencies.ranges),
        },
        "lockFile": {
            "path": str(analysis.lock_path),
            "format": analysis.lock_format,
        },
        "settings": {
            "maxDepth": analysis.settings.max_depth,
            "includeDevDependencies": analysis.settings.include_dev_dependencies,
            "versionConflictsOnly": analysis.settings.version_conflicts_only,
        },
        "totals": {
            "nodes": analysis.tree.node_count,
            "packages": summary.total_packages,
            "duplicatePackages": summary.duplicate_packages,
            "duplicateInstances": summary.total_duplicate_instances,
        },
        "duplicates": [group.to_dict() for group in summary.duplicates],
        "placements": analysis.placements,
    }
    if analysis.package is not None:
        report["package"] = str(analysis.package)
    if include_tree:
        report["tree"] = analysis.tree.to_dict()

    return report
