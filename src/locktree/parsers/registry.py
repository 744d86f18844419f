"""Registry of lock format normalizers keyed by format tag."""

from __future__ import annotations

import logging

from ..errors import UnknownLockFormatError
from ..models import NormalizedLockData
from .base import LockNormalizer
from .bun_lock import BunLockNormalizer
from .package_lock import NpmFlatLockNormalizer, NpmNestedLockNormalizer
from .pnpm_lock import PnpmLockNormalizer
from .yarn_lock import YarnLockNormalizer

logger = logging.getLogger(__name__)

LOCK_NORMALIZERS: dict[str, LockNormalizer] = {
    "npm-v1": NpmNestedLockNormalizer(),
    "npm-v2": NpmFlatLockNormalizer(),
    "yarn": YarnLockNormalizer(),
    "pnpm": PnpmLockNormalizer(),
    "bun": BunLockNormalizer(),
}


def get_normalizer(format_tag: str) -> LockNormalizer:
    """Return the normalizer for the given format tag, or raise UnknownLockFormatError."""
    normalizer = LOCK_NORMALIZERS.get(format_tag)
    if normalizer is None:
        known = ", ".join(sorted(LOCK_NORMALIZERS.keys()))
        raise UnknownLockFormatError(f"Unknown lock format '{format_tag}'. Known formats: {known}")
    return normalizer


def normalize_lockfile(content: str, format_tag: str) -> NormalizedLockData:
    """Normalize lock file text with the normalizer registered for ``format_tag``.

    Raises:
        UnknownLockFormatError: If the format tag is not registered.
        LockfileParseError: If the text is not valid syntax for the format.
    """
    normalizer = get_normalizer(format_tag)
    data = normalizer.normalize(content)
    logger.debug(
        "Normalized %s lock data: %d entries, %d importers",
        format_tag,
        len(data.entries),
        len(data.importers),
    )
    return data


def get_known_formats() -> list[str]:
    """Return a sorted list of all registered format tags."""
    return sorted(LOCK_NORMALIZERS.keys())
