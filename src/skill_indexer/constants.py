"""
Shared constants for Skill Indexer.

This module provides a single source of truth for fixed names and
default values used across multiple modules.
"""

# Bundle layout
MARKER_FILENAME = "SKILL.md"
"""File that marks a directory as a skill bundle (matched case-insensitively)."""

SIDECAR_FILENAME = "skill.meta.json"
"""Per-bundle metadata file written next to the mirrored content."""

MIRROR_ROOT = "skill"
"""Folder (relative to the mirror directory) that holds every mirrored bundle."""

# Scanning
DEFAULT_EXCLUDE: tuple[str, ...] = (
    "node_modules",
    "dist",
    "build",
    "out",
    "coverage",
    ".git",
    ".github",
    ".vscode",
    ".idea",
    ".next",
    ".turbo",
    "vendor",
    "target",
    "tmp",
    "temp",
    "bin",
    "obj",
)
"""Directory names never descended into while looking for bundles."""

HEADER_SCAN_LINES = 40
"""Lines of SKILL.md inspected for metadata when it has no front-matter block."""

# Default file locations (relative to the working directory)
DEFAULT_SOURCES_PATH = "sources.skill.json"
"""Declared list of source repositories."""

DEFAULT_INDEX_PATH = "index.skill.json"
"""Generated provenance index."""

DEFAULT_SOURCES_DIR = "sources"
"""Scratch directory that fetched repositories are cloned into."""

DEFAULT_CONFIG_FILE = "skill-indexer.yaml"
"""Optional YAML settings file."""
