"""
Pydantic models for the on-disk JSON documents.

- SourcesFile: the declared list of repositories to mirror from
- IndexFile: the generated provenance index
- SkillMeta: the per-bundle sidecar written next to mirrored content

Field aliases carry the camelCase / "$schema" spelling used on disk.
"""

from __future__ import annotations

import typing as _typing

import pydantic as _pydantic


class _Document(_pydantic.BaseModel):
    """Base for on-disk documents: aliases on the wire, names in Python."""

    model_config = _pydantic.ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, _typing.Any]:
        """Dump with on-disk aliases, omitting unset and empty optional fields."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        return {k: v for k, v in data.items() if v != ""}


class SourceDeclaration(_Document):
    """One repository to mirror skill bundles from."""

    repo: str = _pydantic.Field(
        ...,
        description="Repository identifier passed to git (URL or path)",
    )

    branch: str | None = _pydantic.Field(
        default=None,
        description="Branch or ref to track; the remote HEAD when unset",
    )

    exclude: list[str] = _pydantic.Field(
        default_factory=list,
        description="Extra directory names to prune while scanning",
    )


class SourcesFile(_Document):
    """The sources declaration file."""

    schema_: str | None = _pydantic.Field(default=None, alias="$schema")

    sources: list[SourceDeclaration] = _pydantic.Field(...)


class IndexEntry(_Document):
    """Provenance of one mirrored bundle."""

    name: str = ""
    """Bundle name; also the destination folder under the mirror root."""

    path: str = ""
    """Bundle directory relative to the source repository root."""

    repo: str = ""
    """Owning repository identifier."""

    head: str = ""
    """Revision the bundle was fetched at."""

    updated_at: str = _pydantic.Field(default="", alias="updatedAt")
    """When the bundle was last mirrored (RFC 3339, UTC)."""

    @_pydantic.field_validator("name", "path", "repo", "head", "updated_at", mode="before")
    @classmethod
    def _null_as_empty(cls, value: _typing.Any) -> _typing.Any:
        # Hand-edited indexes may carry null for any field.
        return "" if value is None else value

    def to_json_dict(self) -> dict[str, _typing.Any]:
        # Entries always carry every key, even when empty.
        return self.model_dump(by_alias=True)


class IndexFile(_Document):
    """The generated index file."""

    schema_: str | None = _pydantic.Field(default=None, alias="$schema")

    generated_at: str | None = _pydantic.Field(default=None, alias="generatedAt")

    skills: list[IndexEntry] = _pydantic.Field(default_factory=list)

    @_pydantic.field_validator("skills", mode="before")
    @classmethod
    def _null_skills(cls, value: _typing.Any) -> _typing.Any:
        # Older writers emitted "skills": null for an empty index.
        return [] if value is None else value

    def entries_by_repo(self) -> dict[str, list[IndexEntry]]:
        """Group entries by owning repository, preserving order."""
        grouped: dict[str, list[IndexEntry]] = {}
        for entry in self.skills:
            grouped.setdefault(entry.repo, []).append(entry)
        return grouped

    def head_by_repo(self) -> dict[str, str]:
        """Recorded head per repository (taken from its first entry)."""
        heads: dict[str, str] = {}
        for entry in self.skills:
            if not heads.get(entry.repo):
                heads[entry.repo] = entry.head
        return heads

    def to_json_dict(self) -> dict[str, _typing.Any]:
        data: dict[str, _typing.Any] = {}
        if self.schema_:
            data["$schema"] = self.schema_
        if self.generated_at:
            data["generatedAt"] = self.generated_at
        data["skills"] = [entry.to_json_dict() for entry in self.skills]
        return data


class SkillMeta(_Document):
    """Sidecar metadata written into each mirrored bundle."""

    name: str

    description: str | None = None

    version: str | None = None

    head: str | None = None

    updated_at: str | None = _pydantic.Field(default=None, alias="updatedAt")

    checked_at: str | None = _pydantic.Field(default=None, alias="checkedAt")
