"""
Skill bundle metadata.

Reads the descriptive header of a bundle's SKILL.md so it can be recorded
in the bundle's sidecar file.
"""

from skill_indexer.skills.metadata import (
    enrich_meta,
    find_marker,
    parse_marker_header,
    read_marker_header,
    trim_quoted,
)

__all__ = [
    "enrich_meta",
    "find_marker",
    "parse_marker_header",
    "read_marker_header",
    "trim_quoted",
]
