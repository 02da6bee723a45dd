"""Discovery and parsing of project browserslist declarations."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"
CONFIG_FILENAMES = (".browserslistrc", "browserslist")
DEFAULT_SECTION = "defaults"

_SECTION_RE = re.compile(r"^\[\s*(.+?)\s*\]$")


def parse_sections(text: str) -> dict[str, list[str]]:
    """Parse a browserslist file into query lists keyed by environment.

    Full-line ``#`` comments and blank lines are dropped; order and duplicates
    are kept. Lines before any ``[section]`` header belong to ``defaults``.
    A header may name several environments separated by spaces.
    """
    sections: dict[str, list[str]] = {}
    current = [DEFAULT_SECTION]

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        header = _SECTION_RE.match(line)
        if header:
            current = header.group(1).split()
            for name in current:
                sections.setdefault(name, [])
            continue
        for name in current:
            sections.setdefault(name, []).append(line)

    return sections


def select_environment(sections: dict[str, list[str]], env: str) -> list[str]:
    """Pick the queries for ``env``, falling back to ``defaults``."""
    if env in sections:
        return sections[env]
    return sections.get(DEFAULT_SECTION, [])


def parse_config(text: str, env: str) -> list[str]:
    return select_environment(parse_sections(text), env)


def parse_manifest_field(value: Any, env: str) -> list[str] | None:
    """Interpret a ``browserslist`` field from package.json.

    Strings and lists are queries; a mapping is keyed by environment.
    Returns None for values of any other shape.
    """
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    if isinstance(value, dict):
        sections: dict[str, list[str]] = {}
        for key, raw in value.items():
            queries = parse_manifest_field(raw, env)
            if queries is not None:
                sections[str(key)] = queries
        return select_environment(sections, env)
    return None


def _read_manifest(path: Path, env: str) -> list[str] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Skipping unreadable manifest %s: %s", path, e)
        return None
    if not isinstance(data, dict) or "browserslist" not in data:
        return None
    return parse_manifest_field(data["browserslist"], env)


def read_directory(directory: Path, env: str) -> tuple[Path, list[str]] | None:
    """Return (declaring file, queries) if ``directory`` declares browsers.

    package.json takes precedence over the dedicated config files, then
    ``.browserslistrc`` over ``browserslist``.
    """
    manifest = directory / MANIFEST_NAME
    if manifest.is_file():
        queries = _read_manifest(manifest, env)
        if queries is not None:
            return manifest, queries

    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            try:
                return candidate, parse_config(candidate.read_text(encoding="utf-8"), env)
            except (OSError, ValueError) as e:
                logger.debug("Skipping unreadable config %s: %s", candidate, e)

    return None
