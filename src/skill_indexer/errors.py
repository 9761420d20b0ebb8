"""
Exception hierarchy for Skill Indexer.

Every fatal condition raised during a run derives from SkillIndexerError,
so the command line can report it as a single diagnostic line:

- ConfigurationError: bad or inconsistent source declarations
- SourcesFileError: an input file could not be read or validated
- VCSError / GitCommandError: the version-control collaborator failed
- ScanError / MirrorError: filesystem failures while scanning or mirroring
- SkillConflictError: empty, duplicate or cross-source bundle names
- PathConfinementError: a destination escaped the mirror root
"""

import pathlib as _pathlib


class SkillIndexerError(Exception):
    """Base class for all fatal Skill Indexer errors."""

    pass


class ConfigurationError(SkillIndexerError):
    """Raised when the declared sources are invalid or inconsistent."""

    pass


class SourcesFileError(ConfigurationError):
    """Error loading or parsing a sources or index file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in {path}: {message}")


class VCSError(SkillIndexerError):
    """Raised when a revision lookup or fetch fails."""

    pass


class GitCommandError(VCSError):
    """A git subprocess exited unsuccessfully."""

    def __init__(self, args: list[str], output: str) -> None:
        self.args_list = list(args)
        self.output = output
        super().__init__(f"git {' '.join(args)}: {output}")


class ScanError(SkillIndexerError):
    """Raised when walking a fetched source tree fails."""

    pass


class MirrorError(SkillIndexerError):
    """Raised when mirrored content cannot be replaced or written."""

    pass


class SkillConflictError(SkillIndexerError):
    """Raised for empty, duplicate or cross-source bundle names."""

    pass


class PathConfinementError(SkillIndexerError):
    """Raised when a computed destination is not inside the mirror root."""

    pass
