"""
Test doubles and builders shared across the test suite.

Import as:  import tests.helpers as helpers
"""

import dataclasses as _dataclasses
import datetime as _datetime
import pathlib as _pathlib
import typing as _typing

import skill_indexer.errors as errors
import skill_indexer.manifest as manifest
import skill_indexer.vcs as vcs

FIXED_NOW = _datetime.datetime(2026, 10, 19, 8, 30, 0, tzinfo=_datetime.UTC)
FIXED_NOW_TEXT = "2026-10-19T08:30:00Z"


@_dataclasses.dataclass
class FakeRepo:
    """In-memory repository: a head and a map of relative path -> content."""

    head: str
    files: dict[str, str] = _dataclasses.field(default_factory=dict)
    fetched_head: str | None = None
    """Revision a clone lands on; defaults to head (set to simulate a moving branch)."""


class FakeVersionControl(vcs.VersionControl):
    """VersionControl that materializes FakeRepo contents instead of cloning."""

    def __init__(self) -> None:
        self.repos: dict[str, FakeRepo] = {}
        self.remote_head_calls: list[tuple[str, str | None]] = []
        self.clone_calls: list[tuple[str, str | None, _pathlib.Path]] = []
        self.fail_clone: set[str] = set()
        self._checkouts: dict[_pathlib.Path, str] = {}

    def add(self, repo: str, head: str, files: dict[str, str]) -> FakeRepo:
        fake = FakeRepo(head=head, files=dict(files))
        self.repos[repo] = fake
        return fake

    def remote_head(self, repo: str, branch: str | None = None) -> str:
        self.remote_head_calls.append((repo, branch))
        if repo not in self.repos:
            raise errors.GitCommandError(["ls-remote", repo, branch or "HEAD"], "repository not found")
        return self.repos[repo].head

    def clone(self, repo: str, branch: str | None, dest: _pathlib.Path) -> None:
        self.clone_calls.append((repo, branch, dest))
        if repo in self.fail_clone:
            raise errors.GitCommandError(["clone", repo, str(dest)], "fatal: could not read from remote")
        fake = self.repos[repo]
        dest.mkdir(parents=True)
        for rel, content in fake.files.items():
            path = dest / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        self._checkouts[dest] = fake.fetched_head or fake.head

    def checked_out_head(self, workdir: _pathlib.Path) -> str:
        return self._checkouts[workdir]

    @property
    def cloned_repos(self) -> list[str]:
        return [repo for repo, _, _ in self.clone_calls]


def skill_md(description: str = "", version: str = "") -> str:
    """Build SKILL.md content with an optional front-matter block."""
    lines = ["---", "name: test"]
    if description:
        lines.append(f"description: {description}")
    if version:
        lines.append(f'version: "{version}"')
    lines += ["---", "", "# Body", ""]
    return "\n".join(lines)


def sources(*repos: str, **kwargs: _typing.Any) -> list[manifest.SourceDeclaration]:
    """Source declarations for the given repos (shared keyword fields)."""
    return [manifest.SourceDeclaration(repo=repo, **kwargs) for repo in repos]


def write_tree(root: _pathlib.Path, files: dict[str, str]) -> None:
    """Create files (relative path -> content) under root."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
