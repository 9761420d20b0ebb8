"""
The on-disk mirror of skill bundles and its path confinement guard.
"""

from skill_indexer.mirror.guard import confine, is_confined, require_confined
from skill_indexer.mirror.writer import MirrorWriter, copy_tree

__all__ = [
    "MirrorWriter",
    "confine",
    "copy_tree",
    "is_confined",
    "require_confined",
]
