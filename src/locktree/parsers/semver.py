"""Simplified version-range compatibility built atop packaging.version.

This is deliberately not full semver. Supported expressions:
- caret ranges ``^x...`` match any version with the same major component
- tilde ranges ``~x.y...`` match any version with the same major and minor
- anything else matches only on exact string equality

Callers must not rely on it for ``>=``/``<`` comparators, ``x`` wildcards,
``||`` unions or prerelease rules.
"""

from __future__ import annotations

import re

from packaging.version import InvalidVersion, Version


def _components(value: str) -> tuple[str, ...]:
    """Return the release components of ``value`` as strings.

    packaging understands npm-style prereleases (``1.2.3-beta.1``) and a leading
    ``v``; anything it rejects falls back to a plain dotted split.
    """
    cleaned = value.strip().lstrip("=").strip()
    try:
        return tuple(str(part) for part in Version(cleaned).release)
    except InvalidVersion:
        cleaned = cleaned.lstrip("vV")
        core = re.split(r"[-+]", cleaned, maxsplit=1)[0]
        return tuple(core.split("."))


def _same_prefix(installed: str, expr: str, width: int) -> bool:
    wanted = _components(expr)[:width]
    actual = _components(installed)[:width]
    if len(wanted) < width:
        # ~1 behaves like ^1: only the components present are compared
        width = len(wanted)
        actual = actual[:width]
    return bool(wanted) and wanted == actual


def satisfies_range(installed: str, expr: str) -> bool:
    """Return True when ``installed`` is compatible with ``expr`` under the simplified policy."""
    expr = expr.strip()
    installed = installed.strip()
    if not expr or not installed:
        return False

    if expr.startswith("^"):
        return _same_prefix(installed, expr[1:], 1)

    if expr.startswith("~"):
        return _same_prefix(installed, expr[1:].lstrip(">"), 2)

    return installed == expr


def strip_peer_suffix(version: str) -> str:
    """Drop a pnpm peer-resolution suffix, e.g. ``18.2.0(react@18.2.0)`` -> ``18.2.0``."""
    return version.strip().split("(", 1)[0]
