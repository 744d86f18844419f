"""Exceptions shared across locktree."""


class LocktreeError(RuntimeError):
    """Base error for locktree failures."""


class LockfileParseError(LocktreeError):
    """Raised when a lock file is not valid syntax for its format."""


class LockfileNotFoundError(LocktreeError):
    """Raised when no supported lock file exists for a project."""


class NoLockDataError(LocktreeError):
    """Raised when a tree is built before any lock data was produced."""


class ManifestError(LocktreeError):
    """Raised when a package.json cannot be read or fails validation."""


class UnknownLockFormatError(ValueError):
    """Raised when a format tag or lock file name has no registered normalizer."""
