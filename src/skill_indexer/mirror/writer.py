"""
Replacing mirrored bundles on disk.

Mirrored bundles live at <mirror_dir>/<root_name>/<bundle name>. Every
destination is checked with the confinement guard before it is removed or
written, and a guard rejection aborts the run.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import shutil as _shutil
import typing as _typing

import skill_indexer.constants as constants
import skill_indexer.errors as errors
import skill_indexer.manifest as manifest
import skill_indexer.mirror.guard as guard
import skill_indexer.scanning as scanning

_logger = _logging.getLogger(__name__)


def _remove_tree(path: _pathlib.Path) -> None:
    """Remove a file, symlink or directory tree; a missing path is fine."""
    if path.is_symlink() or path.is_file():
        path.unlink(missing_ok=True)
    elif path.exists():
        _shutil.rmtree(path)


def copy_tree(src: _pathlib.Path, dst: _pathlib.Path) -> None:
    """
    Copy a bundle directory, preserving permission bits.

    Raises:
        MirrorError: If src is not a directory or the copy fails.
    """
    if not src.is_dir():
        raise errors.MirrorError(f"source path is not a directory: {src}")
    try:
        _shutil.copytree(src, dst, copy_function=_shutil.copy2)
    except (OSError, _shutil.Error) as e:
        raise errors.MirrorError(f"copying {src} to {dst}: {e}") from e


class MirrorWriter:
    """
    Owns the mirror root and every filesystem mutation under it.
    """

    def __init__(
        self,
        mirror_dir: _pathlib.Path,
        root_name: str = constants.MIRROR_ROOT,
    ) -> None:
        """
        Initialize the writer.

        Args:
            mirror_dir: Directory that contains the mirror root folder.
            root_name: Name of the mirror root folder.
        """
        self._mirror_dir = mirror_dir
        self._root_name = root_name

    @property
    def root(self) -> _pathlib.Path:
        """Folder holding every mirrored bundle."""
        return self._mirror_dir / self._root_name

    def destination(self, name: str) -> str:
        """Destination of a bundle relative to the mirror directory."""
        return f"{self._root_name}/{name}"

    def skill_dir(self, name: str) -> _pathlib.Path:
        """
        Guarded on-disk location of a mirrored bundle.

        The name must be a single path segment, so "a/b" and (on any
        platform) "a\\b" are refused rather than landing inside bundle "a".

        Raises:
            PathConfinementError: If the name would leave the mirror root
                or is not exactly one folder directly under it.
        """
        destination = self.destination(name)
        clean = guard.require_confined(destination, self._root_name)
        if clean != destination or clean.count("/") != 1:
            raise errors.PathConfinementError(
                f"refusing to touch unexpected path {destination!r} "
                "(skill name must be a single path segment)"
            )
        return self._mirror_dir / clean

    def remove_owned(self, entries: _typing.Iterable[manifest.IndexEntry]) -> None:
        """
        Remove the mirrored directories of previously indexed bundles.

        Entries with an empty name are skipped.

        Raises:
            PathConfinementError: If any destination leaves the mirror root.
            MirrorError: If a removal fails.
        """
        for entry in entries:
            if not entry.name:
                continue
            target = self.skill_dir(entry.name)
            try:
                _remove_tree(target)
            except OSError as e:
                raise errors.MirrorError(f"removing {target}: {e}") from e
            _logger.debug("Removed %s (was %s from %s)", target, entry.path, entry.repo)

    def mirror_all(
        self,
        source_root: _pathlib.Path,
        found: _typing.Iterable[scanning.FoundSkill],
    ) -> None:
        """
        Copy every found bundle from a checkout into the mirror.

        An existing destination is replaced wholesale, so files from an
        older version of the bundle do not survive.

        Raises:
            SkillConflictError: On an empty or duplicate bundle name.
            PathConfinementError: If a destination leaves the mirror root.
            MirrorError: If removing or copying fails.
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise errors.MirrorError(f"creating {self.root}: {e}") from e

        seen: set[str] = set()
        for skill in found:
            if not skill.name:
                raise errors.SkillConflictError("skill name is empty")
            if skill.name in seen:
                raise errors.SkillConflictError(f"duplicate skill name {skill.name!r}")
            seen.add(skill.name)

            dst = self.skill_dir(skill.name)
            src = source_root.joinpath(*skill.source_path.split("/"))
            try:
                _remove_tree(dst)
            except OSError as e:
                raise errors.MirrorError(f"removing {dst}: {e}") from e
            copy_tree(src, dst)
            _logger.debug("Mirrored %s -> %s", src, dst)

    def write_sidecar(self, name: str, meta: manifest.SkillMeta) -> None:
        """
        Write the bundle's sidecar metadata file.

        Raises:
            MirrorError: If the file cannot be written (e.g. the bundle
                directory is missing).
        """
        path = self.skill_dir(name) / constants.SIDECAR_FILENAME
        try:
            manifest.write_json(path, meta.to_json_dict())
        except OSError as e:
            raise errors.MirrorError(f"writing {path}: {e}") from e
