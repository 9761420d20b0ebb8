"""
Skill Indexer - mirror skill bundles from git repositories.

Keeps a local copy of every skill bundle (a directory marked by SKILL.md)
found in a declared list of repositories, plus an index recording which
repository, path and revision each mirrored bundle came from.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("skill-indexer")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "Skill Indexer Contributors"

from skill_indexer.config import Settings  # noqa: E402
from skill_indexer.core import Reconciler, reconcile  # noqa: E402

__all__ = ["__version__", "__version_info__", "Settings", "Reconciler", "reconcile"]
