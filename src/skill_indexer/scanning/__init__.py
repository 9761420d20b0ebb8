"""
Locating skill bundles inside fetched repositories.
"""

from skill_indexer.scanning.exclusion import build_exclude_set, should_skip_dir
from skill_indexer.scanning.scanner import FoundSkill, scan

__all__ = [
    "FoundSkill",
    "build_exclude_set",
    "scan",
    "should_skip_dir",
]
