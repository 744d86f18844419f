"""Read package.json and derive the root dependencies that seed a tree."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..errors import ManifestError
from ..models import RootDependencies, RootManifest
from ..validators.manifest_schema import manifest_errors

logger = logging.getLogger(__name__)


def parse_manifest(text: str, source: str = "package.json") -> RootManifest:
    """Parse and validate package.json text."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"{source} is not valid JSON: {exc}") from exc

    errors = manifest_errors(document)
    if errors:
        raise ManifestError(f"{source} failed validation:\n" + "\n".join(errors))
    return RootManifest.from_mapping(document)


def read_manifest(path: Path) -> RootManifest:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Cannot read {path}: {exc}") from exc
    return parse_manifest(text, source=str(path))


def root_dependencies(manifest: RootManifest, include_dev: bool = True) -> RootDependencies:
    """Merge the manifest sections into one ordered ``name -> range`` map.

    Sections are applied in the order dependencies, devDependencies (only when
    ``include_dev``), peerDependencies, optionalDependencies. A later section
    replaces the range of a name declared earlier; the name keeps its first
    position. A name counts as dev-only when no other section declares it.
    """
    sections = [manifest.dependencies]
    if include_dev:
        sections.append(manifest.dev_dependencies)
    sections.extend([manifest.peer_dependencies, manifest.optional_dependencies])

    ranges: dict[str, str] = {}
    for section in sections:
        ranges.update(section)

    dev_names: frozenset[str] = frozenset()
    if include_dev:
        elsewhere = (
            set(manifest.dependencies)
            | set(manifest.peer_dependencies)
            | set(manifest.optional_dependencies)
        )
        dev_names = frozenset(set(manifest.dev_dependencies) - elsewhere)

    logger.debug("Root declares %d dependencies (%d dev-only)", len(ranges), len(dev_names))
    return RootDependencies(ranges=ranges, dev_names=dev_names)


def merge_manifests(member: RootManifest, root: RootManifest) -> RootManifest:
    """Combine a workspace member with its workspace root; the member wins per name."""
    return RootManifest(
        name=member.name or root.name,
        version=member.version or root.version,
        dependencies={**root.dependencies, **member.dependencies},
        dev_dependencies={**root.dev_dependencies, **member.dev_dependencies},
        peer_dependencies={**root.peer_dependencies, **member.peer_dependencies},
        optional_dependencies={**root.optional_dependencies, **member.optional_dependencies},
        workspaces=member.workspaces,
    )
