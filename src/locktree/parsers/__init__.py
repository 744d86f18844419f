"""Lock file normalizers and the package.json reader."""

from __future__ import annotations

from .base import BaseNormalizer, LockNormalizer, LookupCache
from .registry import LOCK_NORMALIZERS, get_known_formats, get_normalizer, normalize_lockfile
from .semver import satisfies_range

__all__ = [
    "BaseNormalizer",
    "LOCK_NORMALIZERS",
    "LockNormalizer",
    "LookupCache",
    "get_known_formats",
    "get_normalizer",
    "normalize_lockfile",
    "satisfies_range",
]
