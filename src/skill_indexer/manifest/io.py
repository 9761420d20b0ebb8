"""
Reading and writing the JSON documents.

All files are written with 2-space indentation and a trailing newline so
that an unchanged document is byte-identical between runs.
"""

from __future__ import annotations

import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic

import skill_indexer.errors as errors
import skill_indexer.manifest.models as models

_logger = _logging.getLogger(__name__)


def dumps(data: dict[str, _typing.Any]) -> str:
    """Serialize a document the way every file is written."""
    return _json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json(path: _pathlib.Path, data: dict[str, _typing.Any]) -> None:
    """Write a JSON document to disk."""
    path.write_text(dumps(data), encoding="utf-8")


def _read_json(path: _pathlib.Path) -> _typing.Any:
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as e:
        raise errors.SourcesFileError(path, f"cannot read file: {e}") from e
    except UnicodeDecodeError as e:
        raise errors.SourcesFileError(path, f"invalid UTF-8: {e}") from e
    try:
        return _json.loads(content)
    except _json.JSONDecodeError as e:
        raise errors.SourcesFileError(path, f"invalid JSON: {e}") from e


def load_sources(path: _pathlib.Path) -> models.SourcesFile:
    """
    Load and validate the sources declaration.

    Raises:
        SourcesFileError: If the file is missing, unreadable or invalid.
        ConfigurationError: If the sources list is empty.
    """
    try:
        data = _read_json(path)
    except FileNotFoundError as e:
        raise errors.SourcesFileError(path, "file not found") from e

    try:
        sources_file = models.SourcesFile.model_validate(data)
    except _pydantic.ValidationError as e:
        raise errors.SourcesFileError(path, f"invalid sources declaration: {e}") from e

    if not sources_file.sources:
        raise errors.ConfigurationError("sources list is empty")

    return sources_file


def load_index(path: _pathlib.Path) -> models.IndexFile:
    """
    Load the previously generated index.

    A missing file is the first run and yields an empty index.

    Raises:
        SourcesFileError: If the file exists but is unreadable or invalid.
    """
    try:
        data = _read_json(path)
    except FileNotFoundError:
        _logger.info("No index at %s, starting from an empty index", path)
        return models.IndexFile()

    try:
        return models.IndexFile.model_validate(data)
    except _pydantic.ValidationError as e:
        raise errors.SourcesFileError(path, f"invalid index: {e}") from e


def write_index(path: _pathlib.Path, index: models.IndexFile) -> None:
    """Persist the index."""
    write_json(path, index.to_json_dict())
