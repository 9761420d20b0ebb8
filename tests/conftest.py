"""
Shared pytest fixtures for Skill Indexer tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports. Test doubles live in
tests/helpers.py.
"""

import os as _os
import pathlib as _pathlib

import pytest as _pytest

import skill_indexer.config as config
import skill_indexer.core as core
import skill_indexer.mirror as mirror
import tests.helpers as helpers

# =============================================================================
# Environment isolation
# =============================================================================


@_pytest.fixture(autouse=True)
def _clean_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Remove SKILL_INDEXER_* variables so the user's environment can't leak in."""
    for key in list(_os.environ):
        if key.startswith("SKILL_INDEXER_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Settings and engine
# =============================================================================


@_pytest.fixture
def fake_vcs() -> helpers.FakeVersionControl:
    """Fresh fake version control backend."""
    return helpers.FakeVersionControl()


@_pytest.fixture
def settings(tmp_path: _pathlib.Path) -> config.Settings:
    """Settings with every path inside tmp_path."""
    return config.Settings.construct_without_dotenv(
        sources_path=tmp_path / "sources.skill.json",
        index_path=tmp_path / "index.skill.json",
        sources_dir=tmp_path / "sources",
        mirror_dir=tmp_path / "mirror",
    )


@_pytest.fixture
def writer(settings: config.Settings) -> mirror.MirrorWriter:
    """Mirror writer rooted at the test mirror directory."""
    return mirror.MirrorWriter(settings.mirror_dir)


@_pytest.fixture
def reconciler(
    settings: config.Settings,
    fake_vcs: helpers.FakeVersionControl,
    writer: mirror.MirrorWriter,
) -> core.Reconciler:
    """Reconciler wired to the fake backend and a fixed clock."""
    return core.Reconciler(
        settings,
        vcs_client=fake_vcs,
        writer=writer,
        clock=lambda: helpers.FIXED_NOW,
    )
