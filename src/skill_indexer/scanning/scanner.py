"""
Bundle discovery inside a fetched repository.

A bundle is any directory containing SKILL.md (any letter case). Its name
is the directory's base name and its path is the directory relative to the
repository root, always with forward slashes.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import skill_indexer.constants as constants
import skill_indexer.errors as errors
import skill_indexer.scanning.exclusion as exclusion

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass(frozen=True, order=True)
class FoundSkill:
    """A bundle located during a scan (not persisted)."""

    # Field order is the sort order: path first, then name.
    source_path: str
    """Bundle directory relative to the scanned root ("." for the root)."""

    name: str
    """Bundle name (base name of the bundle directory)."""


def _raise(error: OSError) -> None:
    raise error


def scan(
    root: _pathlib.Path,
    exclude: _typing.AbstractSet[str] | None = None,
) -> list[FoundSkill]:
    """
    Find every bundle under root.

    Directories rejected by should_skip_dir() are pruned with their whole
    subtree; the root itself is always walked.

    Args:
        root: Repository checkout to scan.
        exclude: Directory names to prune (see build_exclude_set()).
            Defaults to the built-in deny-list.

    Returns:
        Bundles sorted by (path, name). Empty if none were found.

    Raises:
        ScanError: On the first I/O error encountered while walking.
    """
    if exclude is None:
        exclude = exclusion.build_exclude_set()

    marker = constants.MARKER_FILENAME.casefold()
    found: list[FoundSkill] = []

    try:
        if not root.is_dir():
            raise NotADirectoryError(f"not a directory: {root}")

        for dirpath, dirnames, filenames in _os.walk(root, onerror=_raise):
            # Prune in place so os.walk never descends into skipped trees.
            dirnames[:] = sorted(
                d for d in dirnames if not exclusion.should_skip_dir(d, exclude)
            )

            if not any(f.casefold() == marker for f in filenames):
                continue

            bundle_dir = _pathlib.Path(dirpath)
            rel = bundle_dir.relative_to(root).as_posix()
            found.append(FoundSkill(source_path=rel, name=bundle_dir.name))
    except OSError as e:
        raise errors.ScanError(f"scanning {root}: {e}") from e

    found.sort()
    _logger.debug("Found %d bundle(s) under %s", len(found), root)
    return found
