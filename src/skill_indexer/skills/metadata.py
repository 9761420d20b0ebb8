"""
Best-effort description/version extraction from SKILL.md.

If the file opens with a "---" line, the block up to the next "---" line is
the header. Otherwise (or if the block is never closed) the first
HEADER_SCAN_LINES lines are searched instead. Inside the header, the first
"description:" and the first "version:" line win (keys match in any case).
"""

from __future__ import annotations

import pathlib as _pathlib

import skill_indexer.constants as constants
import skill_indexer.manifest.models as models

_DELIMITER = "---"
_DESCRIPTION_KEY = "description:"
_VERSION_KEY = "version:"


def trim_quoted(value: str) -> str:
    """Strip surrounding whitespace and one matching pair of ' or " quotes."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _header_lines(lines: list[str]) -> list[str]:
    if lines and lines[0].strip() == _DELIMITER:
        for i in range(1, len(lines)):
            if lines[i].strip() == _DELIMITER:
                return lines[1:i]
    return lines[: constants.HEADER_SCAN_LINES]


def parse_marker_header(content: str) -> tuple[str, str]:
    """
    Extract (version, description) from SKILL.md content.

    Missing fields come back as empty strings.
    """
    version = ""
    description = ""

    for line in _header_lines(content.split("\n")):
        trimmed = line.strip()
        if not trimmed:
            continue
        lowered = trimmed.lower()
        if lowered.startswith(_DESCRIPTION_KEY):
            if not description:
                description = trim_quoted(trimmed[len(_DESCRIPTION_KEY) :])
            continue
        if lowered.startswith(_VERSION_KEY) and not version:
            version = trim_quoted(trimmed[len(_VERSION_KEY) :])

    return version, description


def read_marker_header(path: _pathlib.Path) -> tuple[str, str]:
    """
    Read (version, description) from a SKILL.md file.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: On any other read failure.
    """
    content = path.read_text(encoding="utf-8", errors="replace")
    return parse_marker_header(content)


def find_marker(skill_dir: _pathlib.Path) -> _pathlib.Path:
    """
    Locate the marker file in a bundle directory, in any letter case.

    Returns the canonical SKILL.md path when no variant exists, so the
    caller sees FileNotFoundError on read.
    """
    canonical = skill_dir / constants.MARKER_FILENAME
    if canonical.is_file() or not skill_dir.is_dir():
        return canonical
    marker = constants.MARKER_FILENAME.casefold()
    for child in sorted(skill_dir.iterdir()):
        if child.name.casefold() == marker and child.is_file():
            return child
    return canonical


def enrich_meta(skill_dir: _pathlib.Path, meta: models.SkillMeta) -> None:
    """
    Fill meta.version and meta.description from the bundle's SKILL.md.

    A missing SKILL.md leaves both fields unset. Other read errors
    propagate.
    """
    try:
        version, description = read_marker_header(find_marker(skill_dir))
    except FileNotFoundError:
        version, description = "", ""

    meta.version = version or None
    meta.description = description or None
