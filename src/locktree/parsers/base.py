"""Shared normalizer contract and context-aware entry lookup."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol, TypeAlias

from ..models import LockEntry, NormalizedLockData
from .semver import satisfies_range

logger = logging.getLogger(__name__)

# (name, version range, last context segment) -> lookup result, scoped to one build.
LookupCache: TypeAlias = dict[tuple[str, str, str | None], LockEntry | None]


class LockNormalizer(Protocol):
    """Structural protocol every lock format normalizer implements.

    Normalizers keep no state between calls: everything a lookup needs is in
    the ``NormalizedLockData`` and the ``context_path`` passed to it.
    """

    format: str
    supported_files: tuple[str, ...]

    def normalize(self, content: str) -> NormalizedLockData: ...

    def supports(self, lock_file_name: str) -> bool: ...

    def find_entry(
        self,
        data: NormalizedLockData,
        name: str,
        version_range: str,
        context_path: Sequence[str] = (),
        cache: LookupCache | None = None,
    ) -> LockEntry | None: ...


class BaseNormalizer:
    """Common lookup behaviour; subclasses provide ``normalize``."""

    format: str = ""
    supported_files: tuple[str, ...] = ()

    def normalize(self, content: str) -> NormalizedLockData:  # pragma: no cover - abstract
        raise NotImplementedError

    def supports(self, lock_file_name: str) -> bool:
        return lock_file_name in self.supported_files

    def find_entry(
        self,
        data: NormalizedLockData,
        name: str,
        version_range: str,
        context_path: Sequence[str] = (),
        cache: LookupCache | None = None,
    ) -> LockEntry | None:
        """Locate the entry a dependency on ``name@version_range`` resolves to.

        Lookup order:
        1. an entry recorded as resolving exactly this range (yarn descriptors)
        2. an entry nested under the last package in ``context_path``
        3. a top-level entry whose version satisfies the range
        4. the first entry, in entry-map order, whose version satisfies the range

        Returns None when nothing matches; the caller prunes that branch.
        """
        parent = context_path[-1] if context_path else None
        cache_key = (name, version_range, parent)
        if cache is not None and cache_key in cache:
            return cache[cache_key]

        entry = self._lookup(data, name, version_range, parent)
        if cache is not None:
            cache[cache_key] = entry
        return entry

    def _lookup(
        self,
        data: NormalizedLockData,
        name: str,
        version_range: str,
        parent: str | None,
    ) -> LockEntry | None:
        candidates = data.entries_named(name)
        if not candidates:
            return None

        for entry in candidates:
            if version_range in entry.specifiers:
                return entry

        if parent is not None:
            for entry in candidates:
                if entry.is_nested_under(parent):
                    return entry

        for entry in candidates:
            if entry.is_top_level and satisfies_range(entry.version, version_range):
                return entry

        matches = [entry for entry in candidates if satisfies_range(entry.version, version_range)]
        if len(matches) > 1:
            logger.debug(
                "Ambiguous resolution for %s@%s: %d candidates, using %s",
                name,
                version_range,
                len(matches),
                matches[0].key,
            )
        return matches[0] if matches else None


def skip_entry(key: str, reason: str) -> None:
    """Log a malformed lock entry that is being skipped."""
    logger.warning("Skipping lock entry %r: %s", key, reason)
