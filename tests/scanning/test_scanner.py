"""
Tests for bundle scanning.

Tests verify that:
- Bundles are found by SKILL.md in any letter case
- Excluded and hidden directories are pruned with their subtrees
- Results are sorted by (path, name) and use forward slashes
- Walk errors abort the scan
"""

import os as _os
import pathlib as _pathlib

import pytest as _pytest

import skill_indexer.errors as errors
import skill_indexer.scanning as scanning
import tests.helpers as helpers


class TestScan:
    """Tests for scan()."""

    def test_exclusions_prune_bundles(self, tmp_path: _pathlib.Path) -> None:
        """Default and per-source exclusions hide bundles beneath them."""
        helpers.write_tree(
            tmp_path,
            {
                "pkg/node_modules/SKILL.md": "x",
                "pkg/docs/SKILL.md": "x",
                "pkg/foo/SKILL.md": "x",
            },
        )

        found = scanning.scan(tmp_path, scanning.build_exclude_set(["docs"]))

        assert found == [scanning.FoundSkill(source_path="pkg/foo", name="foo")]

    def test_pruning_covers_whole_subtree(self, tmp_path: _pathlib.Path) -> None:
        """Nothing below an excluded directory is visited."""
        helpers.write_tree(
            tmp_path,
            {
                "build/deep/nested/SKILL.md": "x",
                ".hidden/skill-a/SKILL.md": "x",
                "ok/skill-b/SKILL.md": "x",
            },
        )

        found = scanning.scan(tmp_path)

        assert [f.name for f in found] == ["skill-b"]

    def test_marker_matched_case_insensitively(self, tmp_path: _pathlib.Path) -> None:
        """skill.md and Skill.MD both mark a bundle."""
        helpers.write_tree(
            tmp_path,
            {
                "a/skill.md": "x",
                "b/Skill.MD": "x",
                "c/SKILL.md.bak": "x",
            },
        )

        found = scanning.scan(tmp_path)

        assert [f.name for f in found] == ["a", "b"]

    def test_sorted_by_path_then_name(self, tmp_path: _pathlib.Path) -> None:
        """Output order is independent of filesystem order."""
        helpers.write_tree(
            tmp_path,
            {
                "z/alpha/SKILL.md": "x",
                "a/zulu/SKILL.md": "x",
                "m/SKILL.md": "x",
                "a/beta/SKILL.md": "x",
            },
        )

        found = scanning.scan(tmp_path)

        assert [f.source_path for f in found] == ["a/beta", "a/zulu", "m", "z/alpha"]

    def test_nested_bundles_both_found(self, tmp_path: _pathlib.Path) -> None:
        """A bundle inside another bundle is still reported."""
        helpers.write_tree(
            tmp_path,
            {
                "outer/SKILL.md": "x",
                "outer/inner/SKILL.md": "x",
            },
        )

        found = scanning.scan(tmp_path)

        assert [(f.source_path, f.name) for f in found] == [
            ("outer", "outer"),
            ("outer/inner", "inner"),
        ]

    def test_marker_in_root(self, tmp_path: _pathlib.Path) -> None:
        """A marker at the root yields path '.' named after the root."""
        root = tmp_path / "my-repo"
        helpers.write_tree(root, {"SKILL.md": "x"})

        found = scanning.scan(root)

        assert found == [scanning.FoundSkill(source_path=".", name="my-repo")]

    def test_root_is_never_pruned(self, tmp_path: _pathlib.Path) -> None:
        """A checkout folder whose name is excluded is still scanned."""
        root = tmp_path / "build"
        helpers.write_tree(root, {"skills/a/SKILL.md": "x"})

        assert [f.name for f in scanning.scan(root)] == ["a"]

    def test_empty_tree_returns_empty_list(self, tmp_path: _pathlib.Path) -> None:
        """No bundles is not an error."""
        helpers.write_tree(tmp_path, {"README.md": "hello"})

        assert scanning.scan(tmp_path) == []

    def test_missing_root_raises(self, tmp_path: _pathlib.Path) -> None:
        """A root that does not exist is a scan error."""
        with _pytest.raises(errors.ScanError, match="not a directory"):
            scanning.scan(tmp_path / "missing")

    @_pytest.mark.skipif(
        not hasattr(_os, "geteuid") or _os.geteuid() == 0,
        reason="permission bits are not enforced for root",
    )
    def test_unreadable_directory_aborts(self, tmp_path: _pathlib.Path) -> None:
        """The first walk error stops the scan."""
        helpers.write_tree(tmp_path, {"locked/a/SKILL.md": "x"})
        locked = tmp_path / "locked"
        locked.chmod(0o000)
        try:
            with _pytest.raises(errors.ScanError):
                scanning.scan(tmp_path)
        finally:
            locked.chmod(0o755)
