"""Data models for lock data, dependency trees and duplicate reports."""

from __future__ import annotations

from .duplicates import UNKNOWN_VERSION, ChainHop, DuplicateGroup, DuplicateSummary
from .lock_data import HIERARCHY_UNKNOWN_FORMATS, LOCK_FORMATS, NormalizedLockData
from .lock_entry import LockEntry
from .manifest import DEPENDENCY_SECTIONS, RootDependencies, RootManifest
from .tree import DependencyTree, DependencyTreeNode

__all__ = [
    "ChainHop",
    "DEPENDENCY_SECTIONS",
    "DependencyTree",
    "DependencyTreeNode",
    "DuplicateGroup",
    "DuplicateSummary",
    "HIERARCHY_UNKNOWN_FORMATS",
    "LOCK_FORMATS",
    "LockEntry",
    "NormalizedLockData",
    "RootDependencies",
    "RootManifest",
    "UNKNOWN_VERSION",
]
