"""Helpers for package names in lock file keys and on the command line."""

from __future__ import annotations

from dataclasses import dataclass


def split_package_path(path: str) -> tuple[str, ...]:
    """Split a ``/``-joined chain of package names into names.

    A leading ``@scope`` segment is joined with the segment after it, so
    ``"@babel/core/semver"`` becomes ``("@babel/core", "semver")``.
    """
    parts = [part for part in path.split("/") if part]
    names: list[str] = []
    index = 0
    while index < len(parts):
        part = parts[index]
        if part.startswith("@") and index + 1 < len(parts):
            names.append(f"{part}/{parts[index + 1]}")
            index += 2
        else:
            names.append(part)
            index += 1
    return tuple(names)


def split_name_version(spec: str) -> tuple[str, str] | None:
    """Split ``name@version`` on its last ``@``; scoped names keep their leading ``@``.

    Returns None when there is no version part.
    """
    spec = spec.strip()
    index = spec.rfind("@")
    if index <= 0:
        return None
    name, version = spec[:index], spec[index + 1 :]
    if not name or not version:
        return None
    return name, version


def split_descriptor(descriptor: str) -> tuple[str, str] | None:
    """Split a ``name@range`` descriptor on the first ``@`` after the name.

    Unlike :func:`split_name_version` the range may itself contain ``@``
    (``foo@npm:bar@^1.0.0``).
    """
    descriptor = descriptor.strip().strip('"').strip("'")
    start = 1 if descriptor.startswith("@") else 0
    index = descriptor.find("@", start)
    if index <= 0:
        return None
    return descriptor[:index], descriptor[index + 1 :]


@dataclass(frozen=True)
class PackageSpec:
    """A package named on the command line, optionally pinned to one version."""

    name: str
    version: str | None = None

    def __str__(self) -> str:
        return f"{self.name}@{self.version}" if self.version else self.name

    def matches(self, name: str, version: str) -> bool:
        """Exact name match, and exact version match when a version is given."""
        if name != self.name:
            return False
        return self.version is None or version == self.version

    def matches_name(self, name: str) -> bool:
        """Loose match used to pick duplicate groups: the name contains ``self.name``."""
        return self.name in name


def parse_package_spec(text: str) -> PackageSpec:
    """Parse ``name``, ``name@version`` or ``@scope/name@version``.

    Raises:
        ValueError: If ``text`` is empty.
    """
    text = text.strip()
    if not text:
        raise ValueError("Package specification must be a non-empty string")
    start = 1 if text.startswith("@") else 0
    index = text.find("@", start)
    if index <= 0 or index == len(text) - 1:
        return PackageSpec(text)
    return PackageSpec(text[:index], text[index + 1 :])
