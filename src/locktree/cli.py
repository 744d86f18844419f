"""Command-line entrypoint.

Usage:
  locktree [package[@version]] --root path/to/project [--format json|markdown|tree] [--fail-on-duplicates]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import load_settings
from .core import analyze_project
from .errors import LocktreeError
from .logging_config import setup_logging
from .parsers.paths import parse_package_spec
from .report import aggregate
from .summary import render_subtree, render_summary, render_tree

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DUPLICATES = 10


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locktree",
        description="Build a dependency tree from a JavaScript lock file and report duplicated packages.",
    )
    parser.add_argument(
        "package",
        nargs="?",
        default=None,
        help="Only report this package (name, name@version or @scope/name@version)",
    )
    parser.add_argument("--root", type=Path, default=Path("."), help="Project directory to analyze")
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON settings file")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum tree depth")
    parser.add_argument(
        "--prod",
        action="store_true",
        help="Exclude devDependencies from the root dependencies",
    )
    parser.add_argument(
        "--all-duplicates",
        action="store_true",
        help="Also report a single version installed at several places",
    )
    parser.add_argument(
        "--format",
        choices=("json", "markdown", "tree"),
        default="json",
        help="Output format",
    )
    parser.add_argument("--full", action="store_true", help="Do not shorten long chains")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level",
    )
    parser.add_argument("--structured-logs", action="store_true", help="Emit logs as JSON")
    parser.add_argument(
        "--fail-on-duplicates",
        action="store_true",
        help=f"Exit with {EXIT_DUPLICATES} when duplicates are found",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, structured=args.structured_logs)

    try:
        settings = load_settings(args.config, project_dir=args.root.resolve()).with_overrides(
            max_depth=args.max_depth,
            include_dev_dependencies=False if args.prod else None,
            version_conflicts_only=False if args.all_duplicates else None,
            full_chains=True if args.full else None,
        )
        package = parse_package_spec(args.package) if args.package is not None else None
        analysis = analyze_project(args.root, settings, package)
    except (LocktreeError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_ERROR

    report = aggregate(analysis)
    if args.format == "markdown":
        sys.stdout.write(render_summary(report, full_chains=settings.full_chains))
    elif args.format == "tree":
        if package is None:
            sys.stdout.write(render_tree(analysis.tree))
        else:
            node = analysis.package_node()
            if node is None:
                print(f"ERROR: Package '{package}' not found in dependency tree", file=sys.stderr)
                return EXIT_ERROR
            sys.stdout.write(render_subtree(node))
    else:
        print(json.dumps(report, indent=2))

    if args.fail_on_duplicates and report["hasDuplicates"]:
        return EXIT_DUPLICATES
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
