"""JSON Schema validation for package.json dependency sections."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

_DEPENDENCY_MAP: dict[str, Any] = {
    "type": "object",
    "additionalProperties": {"type": "string"},
}

MANIFEST_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "package.json dependency sections",
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "version": {"type": "string"},
        "dependencies": _DEPENDENCY_MAP,
        "devDependencies": _DEPENDENCY_MAP,
        "peerDependencies": _DEPENDENCY_MAP,
        "optionalDependencies": _DEPENDENCY_MAP,
        "workspaces": {
            "oneOf": [
                {"type": "array", "items": {"type": "string"}},
                {
                    "type": "object",
                    "properties": {"packages": {"type": "array", "items": {"type": "string"}}},
                },
            ]
        },
    },
}

_VALIDATOR = Draft202012Validator(MANIFEST_SCHEMA)


def format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def manifest_errors(document: object) -> list[str]:
    """Return one formatted line per schema violation, ordered by location."""
    errors = sorted(_VALIDATOR.iter_errors(document), key=lambda e: [str(p) for p in e.path])
    return format_errors(errors).splitlines()


def validate_manifest(document: object) -> None:
    """Raise ValueError listing every violation when ``document`` is not a valid manifest."""
    errors = manifest_errors(document)
    if errors:
        raise ValueError("\n" + "\n".join(errors))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=Path("package.json"),
        help="Path to the package.json to validate",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        validate_manifest(json.loads(args.input.read_text(encoding="utf-8")))
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"ERROR: Failed to read JSON: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"ERROR: Manifest failed validation:{exc}", file=sys.stderr)
        return 1

    print(f"Manifest {args.input} is valid")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
