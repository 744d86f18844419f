"""locktree core package.

Builds dependency trees from JavaScript lock files (npm, yarn, pnpm, bun) and
reports packages installed more than once.
"""

from .core import ProjectAnalysis, analyze_project
from .duplicates import detect_duplicates
from .tree_builder import build_dependency_tree

__all__ = [
    "ProjectAnalysis",
    "analyze_project",
    "build_dependency_tree",
    "detect_duplicates",
]
