"""
Version-control collaborator.

The reconciliation engine only needs three things from version control:
the current head of a remote ref, a shallow checkout of that ref, and the
revision that checkout actually landed on. VersionControl is that contract;
GitClient implements it with the git command line.
"""

from __future__ import annotations

import abc as _abc
import logging as _logging
import os as _os
import pathlib as _pathlib
import subprocess as _subprocess

import skill_indexer.errors as errors

_logger = _logging.getLogger(__name__)


class VersionControl(_abc.ABC):
    """Revision lookup and checkout for source repositories."""

    @_abc.abstractmethod
    def remote_head(self, repo: str, branch: str | None = None) -> str:
        """
        Resolve the current revision of a remote ref.

        Args:
            repo: Repository identifier.
            branch: Branch or ref; the remote HEAD when empty.

        Returns:
            Non-empty revision identifier.

        Raises:
            VCSError: If the lookup fails or returns nothing.
        """
        ...

    @_abc.abstractmethod
    def clone(self, repo: str, branch: str | None, dest: _pathlib.Path) -> None:
        """
        Produce a working directory of repo at branch (or its default).

        Raises:
            VCSError: If the fetch fails.
        """
        ...

    @_abc.abstractmethod
    def checked_out_head(self, workdir: _pathlib.Path) -> str:
        """
        Revision a working directory is checked out at.

        Raises:
            VCSError: If the revision cannot be resolved.
        """
        ...


class GitClient(VersionControl):
    """
    VersionControl backed by the git executable.

    Terminal prompts are disabled so an unreachable private repository
    fails instead of waiting for credentials.
    """

    def __init__(self, executable: str = "git") -> None:
        self._executable = executable

    def run(self, *args: str, cwd: _pathlib.Path | None = None) -> str:
        """
        Run git and return its trimmed combined output.

        Raises:
            GitCommandError: On a non-zero exit or if git cannot be started.
        """
        env = _os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        _logger.debug("git %s", " ".join(args))
        try:
            result = _subprocess.run(
                [self._executable, *args],
                cwd=cwd,
                env=env,
                stdout=_subprocess.PIPE,
                stderr=_subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            raise errors.GitCommandError(list(args), str(e)) from e

        output = result.stdout.strip()
        if result.returncode != 0:
            raise errors.GitCommandError(
                list(args), output or f"exit status {result.returncode}"
            )
        return output

    def remote_head(self, repo: str, branch: str | None = None) -> str:
        ref = branch or "HEAD"
        fields = self.run("ls-remote", repo, ref).split()
        if not fields:
            raise errors.VCSError(f"git ls-remote returned no data for {repo!r} {ref!r}")
        return fields[0]

    def clone(self, repo: str, branch: str | None, dest: _pathlib.Path) -> None:
        args = ["clone", "--depth", "1"]
        if branch:
            args += ["--branch", branch]
        args += [repo, str(dest)]
        self.run(*args)

    def checked_out_head(self, workdir: _pathlib.Path) -> str:
        head = self.run("rev-parse", "HEAD", cwd=workdir)
        if not head:
            raise errors.VCSError(f"git rev-parse HEAD returned no data in {workdir}")
        return head
