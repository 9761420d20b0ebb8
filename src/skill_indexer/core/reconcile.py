"""
Reconciliation of declared sources against the previous index.

For each declared source, in order:

1. Validate the declaration (non-empty, unique, distinct checkout folder).
2. Ask version control for the remote head.
3. If the head matches the one recorded in the previous index, reuse the
   recorded entries and only refresh each bundle's sidecar.
4. Otherwise clone, scan, check bundle names against every source seen so
   far, replace the source's mirrored bundles and record new entries.

The new index is sorted by (repo, path, name) and keeps the previous schema
marker verbatim. It is only reported as changed when its entries differ
from the previous index, so an idle run leaves the index file untouched.

Any error aborts the run before the index is written. Sources finished
before the failure keep their mirrored changes; there is no rollback.
"""

from __future__ import annotations

import collections.abc as _abc
import contextlib as _contextlib
import dataclasses as _dataclasses
import datetime as _datetime
import logging as _logging
import pathlib as _pathlib
import shutil as _shutil
import typing as _typing

import skill_indexer.config as config
import skill_indexer.core.naming as naming
import skill_indexer.errors as errors
import skill_indexer.manifest as manifest
import skill_indexer.mirror as mirror
import skill_indexer.scanning as scanning
import skill_indexer.skills as skills
import skill_indexer.vcs as vcs

_logger = _logging.getLogger(__name__)

Clock = _typing.Callable[[], _datetime.datetime]


def _utc_now() -> _datetime.datetime:
    return _datetime.datetime.now(_datetime.UTC)


def format_timestamp(moment: _datetime.datetime) -> str:
    """RFC 3339 UTC timestamp with second precision, e.g. 2026-10-19T08:30:00Z."""
    return moment.astimezone(_datetime.UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def sort_entries(entries: _abc.Iterable[manifest.IndexEntry]) -> list[manifest.IndexEntry]:
    """Index order: repository, then source path, then bundle name."""
    return sorted(entries, key=lambda e: (e.repo, e.path, e.name))


def _as_documents(entries: _abc.Iterable[manifest.IndexEntry]) -> list[dict[str, _typing.Any]]:
    return [e.to_json_dict() for e in entries]


def needs_source_path_update(
    entries: _abc.Iterable[manifest.IndexEntry],
    writer: mirror.MirrorWriter,
) -> bool:
    """
    True if any entry records its mirror destination as its source path.

    Such entries were written by an older layout that stored the mirrored
    location instead of the path inside the source repository.
    """
    for entry in entries:
        if not entry.name:
            continue
        if entry.path == writer.destination(entry.name):
            return True
    return False


@_dataclasses.dataclass
class RunState:
    """
    Everything accumulated across sources during one reconciliation.

    A fresh RunState is created for every run.
    """

    seen_repos: set[str] = _dataclasses.field(default_factory=set)
    """Repository identifiers processed so far."""

    folder_owners: dict[str, str] = _dataclasses.field(default_factory=dict)
    """Checkout folder name -> repository using it."""

    path_owners: dict[str, str] = _dataclasses.field(default_factory=dict)
    """Mirror destination -> repository entitled to it."""

    entries: list[manifest.IndexEntry] = _dataclasses.field(default_factory=list)
    """Index entries in processing order."""

    def owner_of(self, destination: str) -> str | None:
        """Repository currently owning a destination, if any."""
        return self.path_owners.get(destination)

    def check_available(self, destination: str, repo: str) -> None:
        """
        Raises:
            SkillConflictError: If another repository owns the destination.
        """
        owner = self.path_owners.get(destination)
        if owner is not None and owner != repo:
            raise errors.SkillConflictError(
                f"skill path {destination!r} already owned by repo {owner!r}"
            )

    def claim(self, destination: str, repo: str) -> None:
        """Register repo as the owner of destination."""
        self.check_available(destination, repo)
        self.path_owners[destination] = repo


@_dataclasses.dataclass
class ReconcileResult:
    """Outcome of a reconciliation."""

    index: manifest.IndexFile
    """The new index (carrying the previous generatedAt when unchanged)."""

    changed: bool
    """Whether the index differs from the previous one and must be written."""


class Reconciler:
    """
    Drives a full reconciliation run.

    Collaborators are injectable so tests can substitute a fake version
    control backend and a fixed clock.
    """

    def __init__(
        self,
        settings: config.Settings,
        vcs_client: vcs.VersionControl | None = None,
        writer: mirror.MirrorWriter | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the reconciler.

        Args:
            settings: Effective settings (paths, keep_sources, policies).
            vcs_client: Version control backend. Defaults to GitClient.
            writer: Mirror writer. Defaults to one rooted at settings.mirror_dir.
            clock: Returns the current time. Defaults to UTC now.
        """
        self._settings = settings
        self._vcs = vcs_client or vcs.GitClient(settings.git_executable)
        self._writer = writer or mirror.MirrorWriter(settings.mirror_dir)
        self._clock = clock or _utc_now

    @property
    def writer(self) -> mirror.MirrorWriter:
        """The mirror writer in use."""
        return self._writer

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def run(self) -> ReconcileResult:
        """
        Load inputs, reconcile, and write the index if it changed.

        Raises:
            SkillIndexerError: On any fatal condition; the index is not written.
        """
        sources_file = manifest.load_sources(self._settings.sources_path)
        previous = manifest.load_index(self._settings.index_path)

        result = self.reconcile(sources_file.sources, previous)

        if result.changed:
            manifest.write_index(self._settings.index_path, result.index)
            _logger.info(
                "Wrote %s (%d skill(s))",
                self._settings.index_path,
                len(result.index.skills),
            )
        else:
            _logger.info("Index unchanged: %s", self._settings.index_path)
        return result

    def reconcile(
        self,
        sources: _abc.Sequence[manifest.SourceDeclaration],
        previous: manifest.IndexFile,
    ) -> ReconcileResult:
        """
        Reconcile declared sources against the previous index.

        Mirrors content as a side effect; does not write the index.

        Args:
            sources: Declared sources, processed in order.
            previous: Previously generated index (empty on first run).

        Returns:
            The new index and whether it changed.

        Raises:
            ConfigurationError: Empty/duplicate repos or colliding folders.
            VCSError: Revision lookup or fetch failure.
            ScanError, MirrorError: Filesystem failures.
            SkillConflictError: Empty, duplicate or cross-source names.
            PathConfinementError: A destination outside the mirror root.
        """
        if not sources:
            raise errors.ConfigurationError("sources list is empty")

        now = format_timestamp(self._clock())
        previous_entries = previous.entries_by_repo()
        previous_heads = previous.head_by_repo()
        state = RunState()

        for source in sources:
            self._reconcile_source(source, previous_entries, previous_heads, state, now)

        entries = sort_entries(state.entries)
        # The schema marker is carried over verbatim, so only entries can differ.
        changed = _as_documents(entries) != _as_documents(previous.skills)
        index = manifest.IndexFile(
            schema_=previous.schema_,
            generated_at=now if changed else previous.generated_at,
            skills=entries,
        )
        return ReconcileResult(index=index, changed=changed)

    # -------------------------------------------------------------------------
    # Per-source processing
    # -------------------------------------------------------------------------

    def _register_source(self, source: manifest.SourceDeclaration, state: RunState) -> tuple[str, str]:
        repo = source.repo.strip()
        if not repo:
            raise errors.ConfigurationError("source repo is empty")
        if repo in state.seen_repos:
            raise errors.ConfigurationError(f"duplicate repo entry {repo!r}")
        state.seen_repos.add(repo)

        folder = naming.repo_folder_name(repo)
        if folder in ("", ".", ".."):
            raise errors.ConfigurationError(f"unable to derive repo folder name from {repo!r}")
        prev = state.folder_owners.get(folder)
        if prev is not None and prev != repo:
            raise errors.ConfigurationError(
                f"duplicate repo folder name {folder!r} for {prev!r} and {repo!r}"
            )
        state.folder_owners[folder] = repo
        return repo, folder

    def _reconcile_source(
        self,
        source: manifest.SourceDeclaration,
        previous_entries: dict[str, list[manifest.IndexEntry]],
        previous_heads: dict[str, str],
        state: RunState,
        now: str,
    ) -> None:
        repo, folder = self._register_source(source, state)

        head = self._vcs.remote_head(repo, source.branch)
        if not head:
            raise errors.VCSError(f"no revision reported for {repo!r}")

        old_entries = previous_entries.get(repo, [])
        if previous_heads.get(repo) == head and not self._needs_rescan(old_entries):
            _logger.info("%s: unchanged at %s, reusing %d skill(s)", repo, head[:12], len(old_entries))
            self._carry_over(repo, old_entries, state, now)
            return

        _logger.info("%s: fetching (remote head %s)", repo, head[:12])
        with self._scratch_checkout(folder) as workdir:
            self._vcs.clone(repo, source.branch, workdir)
            fetched_head = self._vcs.checked_out_head(workdir)
            found = scanning.scan(workdir, scanning.build_exclude_set(source.exclude))
            self._validate_found(repo, found, state)

            # A destination another source took over earlier in this run
            # is no longer ours to delete.
            stale = [
                e for e in old_entries
                if state.owner_of(self._writer.destination(e.name)) in (None, repo)
            ]
            self._writer.remove_owned(stale)
            self._writer.mirror_all(workdir, found)

        for skill in found:
            state.claim(self._writer.destination(skill.name), repo)
            entry = manifest.IndexEntry(
                name=skill.name,
                path=skill.source_path,
                repo=repo,
                head=fetched_head,
                updated_at=now,
            )
            state.entries.append(entry)
            self._refresh_sidecar(entry, now)

        _logger.info("%s: mirrored %d skill(s) at %s", repo, len(found), fetched_head[:12])

    def _needs_rescan(self, entries: list[manifest.IndexEntry]) -> bool:
        if not self._settings.rescan_on_legacy_paths:
            return False
        return needs_source_path_update(entries, self._writer)

    def _carry_over(
        self,
        repo: str,
        entries: list[manifest.IndexEntry],
        state: RunState,
        now: str,
    ) -> None:
        for entry in entries:
            state.claim(self._writer.destination(entry.name), repo)
            skill_dir = self._writer.skill_dir(entry.name)
            if not skill_dir.is_dir():
                raise errors.MirrorError(
                    f"mirrored skill {entry.name!r} from repo {repo!r} is missing at "
                    f"{skill_dir}; remove the repo's entries "
                    f"from {self._settings.index_path} to fetch it again"
                )
            state.entries.append(entry.model_copy())
            self._refresh_sidecar(entry, now)

    def _validate_found(
        self,
        repo: str,
        found: list[scanning.FoundSkill],
        state: RunState,
    ) -> None:
        seen: set[str] = set()
        for skill in found:
            if not skill.name:
                raise errors.SkillConflictError(f"empty skill name in repo {repo!r}")
            if skill.name in seen:
                raise errors.SkillConflictError(
                    f"duplicate skill name {skill.name!r} in repo {repo!r}"
                )
            seen.add(skill.name)
            self._writer.skill_dir(skill.name)
            state.check_available(self._writer.destination(skill.name), repo)

    def _refresh_sidecar(self, entry: manifest.IndexEntry, now: str) -> None:
        meta = manifest.SkillMeta(
            name=entry.name,
            head=entry.head or None,
            updated_at=entry.updated_at or None,
            checked_at=now,
        )
        skill_dir = self._writer.skill_dir(entry.name)
        try:
            skills.enrich_meta(skill_dir, meta)
        except OSError as e:
            raise errors.MirrorError(f"reading metadata for {entry.name!r}: {e}") from e
        self._writer.write_sidecar(entry.name, meta)

    @_contextlib.contextmanager
    def _scratch_checkout(self, folder: str) -> _abc.Iterator[_pathlib.Path]:
        """
        Yield an empty checkout location and remove it afterwards.

        Removal happens on every exit path unless keep_sources is set, and
        a failed removal is logged rather than raised.
        """
        sources_dir = self._settings.sources_dir
        workdir = sources_dir / folder
        try:
            sources_dir.mkdir(parents=True, exist_ok=True)
            if workdir.exists():
                _shutil.rmtree(workdir)
        except OSError as e:
            raise errors.VCSError(f"preparing checkout {workdir}: {e}") from e

        try:
            yield workdir
        finally:
            if not self._settings.keep_sources:
                try:
                    _shutil.rmtree(workdir)
                except FileNotFoundError:
                    pass
                except OSError as e:
                    _logger.debug("Could not remove %s: %s", workdir, e)


def reconcile(
    sources: _abc.Sequence[manifest.SourceDeclaration],
    previous: manifest.IndexFile,
    settings: config.Settings | None = None,
    vcs_client: vcs.VersionControl | None = None,
) -> ReconcileResult:
    """Reconcile with default collaborators; see Reconciler.reconcile()."""
    reconciler = Reconciler(settings or config.Settings(), vcs_client=vcs_client)
    return reconciler.reconcile(sources, previous)
