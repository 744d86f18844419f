"""Normalize yarn.lock files.

Classic (v1) lock files use yarn's own indentation-delimited text format;
berry (v2+) lock files are YAML and carry a ``__metadata`` block. Neither
records where a package sits in ``node_modules``, so every entry is
hierarchy-unknown and lookups rely on the header descriptors instead.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from ..errors import LockfileParseError
from ..models import LockEntry, NormalizedLockData, RootManifest
from .base import BaseNormalizer, skip_entry
from .paths import split_descriptor

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r'"((?:[^"\\]|\\.)*)"|(\S+)')
_BERRY_MARKER = re.compile(r"^__metadata:", re.MULTILINE)
_EDGE_SECTIONS = ("dependencies", "optionalDependencies")


def _tokens(text: str) -> list[str]:
    return [m.group(1) if m.group(1) is not None else m.group(2) for m in _TOKEN.finditer(text)]


def _strip_protocol(value: str) -> str:
    return value[len("npm:") :] if value.startswith("npm:") else value


def parse_classic(content: str) -> dict[str, dict[str, Any]]:
    """Read classic yarn.lock text into ``{header: {field: value | {name: range}}}``."""
    blocks: dict[str, dict[str, Any]] = {}
    block: dict[str, Any] | None = None
    section: dict[str, str] | None = None

    for lineno, raw in enumerate(content.splitlines(), start=1):
        if not raw.strip() or raw.lstrip().startswith("#"):
            continue
        indent = len(raw) - len(raw.lstrip(" "))
        line = raw.strip()

        if indent == 0:
            if not line.endswith(":"):
                raise LockfileParseError(f"yarn.lock line {lineno}: expected a package header")
            block = blocks.setdefault(line[:-1].strip(), {})
            section = None
            continue

        if block is None:
            raise LockfileParseError(f"yarn.lock line {lineno}: property outside of a package block")

        tokens = _tokens(line)
        if indent <= 2:
            if line.endswith(":") and len(tokens) == 1:
                section = block.setdefault(tokens[0][:-1], {})
                continue
            section = None
            if len(tokens) >= 2:
                block[tokens[0].rstrip(":")] = tokens[1]
            continue

        if section is not None and len(tokens) >= 2:
            section[tokens[0].rstrip(":")] = tokens[1]

    return blocks


def _descriptors(header: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for part in header.split(","):
        parsed = split_descriptor(part)
        if parsed is not None:
            pairs.append(parsed)
    return pairs


class YarnLockNormalizer(BaseNormalizer):
    """Classic and berry yarn.lock files."""

    format = "yarn"
    supported_files = ("yarn.lock",)

    def normalize(self, content: str) -> NormalizedLockData:
        if _BERRY_MARKER.search(content):
            return self._normalize_berry(content)
        blocks = parse_classic(content)
        entries = [
            entry
            for header, block in blocks.items()
            if (entry := self._entry(header, block, berry=False)) is not None
        ]
        return NormalizedLockData.from_entries(format=self.format, entries=entries)

    def _normalize_berry(self, content: str) -> NormalizedLockData:
        import yaml

        logger.debug("yarn.lock has a __metadata block, reading it as berry YAML")
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise LockfileParseError(f"yarn.lock is not valid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise LockfileParseError("yarn.lock must contain a mapping")

        entries: list[LockEntry] = []
        importers: dict[str, RootManifest] = {}
        for header, block in data.items():
            if header == "__metadata":
                continue
            if not isinstance(block, Mapping):
                skip_entry(str(header), "entry is not a mapping")
                continue
            workspace = self._workspace_path(str(header))
            if workspace is not None:
                importers[workspace] = RootManifest.from_mapping(
                    {**block, "dependencies": self._edges(block, berry=True)}
                )
                continue
            entry = self._entry(str(header), block, berry=True)
            if entry is not None:
                entries.append(entry)

        return NormalizedLockData.from_entries(
            format=self.format, entries=entries, importers=importers
        )

    @staticmethod
    def _workspace_path(header: str) -> str | None:
        for _, descriptor_range in _descriptors(header):
            if descriptor_range.startswith("workspace:"):
                path = descriptor_range[len("workspace:") :].strip()
                return "" if path in ("", ".") else path.removeprefix("./")
        return None

    @staticmethod
    def _edges(block: Mapping[str, Any], *, berry: bool) -> dict[str, str]:
        edges: dict[str, str] = {}
        for section in _EDGE_SECTIONS:
            values = block.get(section)
            if not isinstance(values, Mapping):
                continue
            for name, value in values.items():
                value = str(value)
                edges.setdefault(str(name), _strip_protocol(value) if berry else value)
        return edges

    def _entry(self, header: str, block: Mapping[str, Any], *, berry: bool) -> LockEntry | None:
        descriptors = _descriptors(header)
        if not descriptors:
            skip_entry(header, "header has no name@range descriptor")
            return None
        version = block.get("version")
        if not version:
            skip_entry(header, "missing version")
            return None

        name = descriptors[0][0]
        specifiers: Iterable[str] = (
            _strip_protocol(rng) if berry else rng for dep_name, rng in descriptors if dep_name == name
        )
        resolved = block.get("resolution") if berry else block.get("resolved")
        integrity = block.get("checksum") if berry else block.get("integrity")
        return LockEntry.from_edges(
            key=header,
            name=name,
            version=str(version),
            edges=[self._edges(block, berry=berry)],
            resolved_url=str(resolved) if resolved else None,
            integrity=str(integrity) if integrity else None,
            parent_path=None,
            specifiers=specifiers,
        )
