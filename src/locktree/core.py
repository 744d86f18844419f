"""Core analysis entrypoint.

This module has no command-line concerns so it can back both the CLI and
library callers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import Settings
from .discovery import detect_lock_format, find_lock_file, find_workspace_root
from .duplicates import detect_duplicates, filter_duplicates
from .errors import LockfileNotFoundError, LockfileParseError
from .models import (
    DependencyTree,
    DependencyTreeNode,
    DuplicateSummary,
    NormalizedLockData,
    RootDependencies,
    RootManifest,
)
from .parsers.package_json import merge_manifests, read_manifest, root_dependencies
from .parsers.paths import PackageSpec
from .parsers.registry import normalize_lockfile
from .placement import describe_placements
from .tree_builder import build_dependency_tree

logger = logging.getLogger(__name__)


@dataclass
class ProjectAnalysis:
    """Everything produced by one analysis run."""

    project_dir: Path
    lock_path: Path
    lock_format: str
    manifest: RootManifest
    root_dependencies: RootDependencies
    tree: DependencyTree
    summary: DuplicateSummary
    placements: dict[str, list[str]] = field(default_factory=dict)
    settings: Settings = field(default_factory=Settings)
    package: PackageSpec | None = None

    @property
    def project_name(self) -> str:
        return self.manifest.name or self.project_dir.name

    def package_node(self) -> DependencyTreeNode | None:
        """Return the first tree node matching the requested package, if any."""
        if self.package is None:
            return None
        return self.tree.find_node(self.package.name, self.package.version)


def _project_manifest(project_dir: Path, lock_dir: Path, data: NormalizedLockData) -> RootManifest:
    """Return the declared dependencies for ``project_dir``.

    A package.json wins; a workspace member's package.json is merged with the
    workspace root's. Without one, the lock file's own importer record for the
    project is used.
    """
    package_json = project_dir / "package.json"
    if package_json.is_file():
        manifest = read_manifest(package_json)
        workspace_root = find_workspace_root(project_dir)
        if workspace_root is not None and workspace_root != project_dir:
            root_package_json = workspace_root / "package.json"
            if root_package_json.is_file():
                logger.debug("Merging workspace root manifest %s", root_package_json)
                manifest = merge_manifests(manifest, read_manifest(root_package_json))
        return manifest

    try:
        relative = project_dir.relative_to(lock_dir).as_posix()
    except ValueError:
        relative = ""
    importer = data.importer_for(relative)
    if importer is None:
        logger.warning(
            "No package.json in %s and the lock file records no importer; tree will be empty",
            project_dir,
        )
        return RootManifest()
    logger.info("No package.json in %s, using the lock file's importer record", project_dir)
    return importer


def analyze_project(
    project_dir: Path,
    settings: Settings | None = None,
    package: PackageSpec | None = None,
) -> ProjectAnalysis:
    """Build the dependency tree for a project and find its duplicated packages.

    Params:
        project_dir: directory of the project (or workspace member) to analyze
        settings: analysis settings; defaults when None
        package: restrict the duplicate report to this package; same-version
            duplicates of it are reported too

    Raises:
        LockfileNotFoundError: no supported lock file governs ``project_dir``
        LockfileParseError: the lock file is not valid syntax for its format
        ManifestError: a package.json is unreadable or invalid
    """
    project_dir = project_dir.resolve()
    settings = settings or Settings()
    if package is not None:
        settings = settings.with_overrides(version_conflicts_only=False)

    lock_path = find_lock_file(project_dir)
    if lock_path is None:
        raise LockfileNotFoundError(f"No supported lock file found for {project_dir}")

    try:
        content = lock_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LockfileParseError(f"Cannot read {lock_path}: {exc}") from exc

    lock_format = detect_lock_format(lock_path, content)
    logger.info("Analyzing %s (%s)", lock_path, lock_format)
    data = normalize_lockfile(content, lock_format)

    manifest = _project_manifest(project_dir, lock_path.parent, data)
    root_deps = root_dependencies(manifest, include_dev=settings.include_dev_dependencies)
    tree = build_dependency_tree(
        data,
        root_deps,
        settings.max_depth,
        root_name=manifest.name or project_dir.name,
        root_version=manifest.version or "0.0.0",
    )
    summary = detect_duplicates(tree, version_conflicts_only=settings.version_conflicts_only)
    if package is not None:
        summary = filter_duplicates(summary, package)
    logger.info(
        "%d packages, %d duplicated",
        summary.total_packages,
        summary.duplicate_packages,
    )

    return ProjectAnalysis(
        project_dir=project_dir,
        lock_path=lock_path,
        lock_format=lock_format,
        manifest=manifest,
        root_dependencies=root_deps,
        tree=tree,
        summary=summary,
        placements=describe_placements(data, root_deps),
        settings=settings,
        package=package,
    )
