"""
Confinement checks for mirror destinations.

Every path that is about to be deleted or written under the mirror is
first passed through confine(). A bundle name such as "../../etc" or an
absolute path must never reach a filesystem call.
"""

import ntpath as _ntpath
import posixpath as _posixpath

import skill_indexer.constants as constants
import skill_indexer.errors as errors


def confine(
    relative_path: str,
    root_name: str = constants.MIRROR_ROOT,
) -> tuple[str, bool]:
    """
    Normalize a destination and check it stays inside the mirror root.

    Args:
        relative_path: Destination relative to the mirror directory,
            e.g. "skill/my-skill".
        root_name: Name of the mirror root folder (first path segment).

    Returns:
        Tuple of (clean_path, ok). clean_path uses forward slashes and is
        empty when ok is False.
    """
    if not relative_path:
        return "", False

    candidate = relative_path.replace("\\", "/")
    if _posixpath.isabs(candidate) or _ntpath.splitdrive(candidate)[0]:
        return "", False

    clean = _posixpath.normpath(candidate)
    if clean == ".." or clean.startswith("../"):
        return "", False

    parts = clean.split("/")
    # The root itself is not a bundle destination.
    if len(parts) < 2 or parts[0] != root_name:
        return "", False

    return clean, True


def is_confined(relative_path: str, root_name: str = constants.MIRROR_ROOT) -> bool:
    """Non-throwing boolean check; see confine()."""
    return confine(relative_path, root_name)[1]


def require_confined(
    relative_path: str,
    root_name: str = constants.MIRROR_ROOT,
) -> str:
    """
    Raising version of confine().

    Raises:
        PathConfinementError: If the path leaves the mirror root.
    """
    clean, ok = confine(relative_path, root_name)
    if not ok:
        raise errors.PathConfinementError(
            f"refusing to touch unexpected path {relative_path!r} "
            f"(must stay inside {root_name!r})"
        )
    return clean
