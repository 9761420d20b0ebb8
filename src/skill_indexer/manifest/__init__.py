"""
On-disk documents: sources declaration, index and sidecar metadata.
"""

from skill_indexer.manifest.io import (
    dumps,
    load_index,
    load_sources,
    write_index,
    write_json,
)
from skill_indexer.manifest.models import (
    IndexEntry,
    IndexFile,
    SkillMeta,
    SourceDeclaration,
    SourcesFile,
)

__all__ = [
    # Models
    "IndexEntry",
    "IndexFile",
    "SkillMeta",
    "SourceDeclaration",
    "SourcesFile",
    # I/O
    "dumps",
    "load_index",
    "load_sources",
    "write_index",
    "write_json",
]
