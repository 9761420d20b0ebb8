"""
Local working-directory names for source repositories.

    https://github.com/org/skills.git  -> skills
    git@github.com:org/skills.git      -> skills
    /srv/mirrors/skills/               -> skills
"""

import os as _os


def _strip_suffixes(repo: str) -> str:
    repo = repo.removesuffix("/")
    return repo.removesuffix(".git")


def repo_folder_name(repo: str) -> str:
    """
    Derive the checkout folder name for a repository identifier.

    Strips a trailing slash and ".git", an scp-style "user@host:" prefix,
    a "scheme://host/" prefix, and returns the final path segment.

    Returns:
        The folder name, or "" if none can be derived.
    """
    repo = _strip_suffixes(repo.strip())

    if repo.startswith("git@") and ":" in repo:
        repo = repo.rsplit(":", 1)[-1]
    if "://" in repo:
        repo = repo.split("://", 1)[1]
        if "/" in repo:
            repo = repo.split("/", 1)[1]

    repo = _strip_suffixes(repo)
    if _os.sep != "/":
        repo = repo.replace(_os.sep, "/")
    return repo.split("/")[-1]
