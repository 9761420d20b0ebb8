"""
Directory pruning rules for the bundle scan.

A fixed deny-list of build, VCS and dependency folders is combined with
per-source additions. Matching is on the whole directory name and ignores
case; hidden directories (leading ".") are always pruned.
"""

import typing as _typing

import skill_indexer.constants as constants


def build_exclude_set(extra: _typing.Iterable[str] | None = None) -> frozenset[str]:
    """
    Build the set of directory names to prune.

    Args:
        extra: Additional names from the source declaration. Entries are
            trimmed; empty entries are dropped.

    Returns:
        Case-folded directory names.
    """
    names = {name.casefold() for name in constants.DEFAULT_EXCLUDE}
    for name in extra or ():
        name = name.strip()
        if not name:
            continue
        names.add(name.casefold())
    return frozenset(names)


def should_skip_dir(name: str, exclude: _typing.AbstractSet[str]) -> bool:
    """Return True if a directory with this name must not be descended into."""
    if name.startswith("."):
        return True
    return name.casefold() in exclude
