"""
Tests for loading and writing the sources declaration and the index.
"""

import json as _json
import pathlib as _pathlib

import pytest as _pytest

import skill_indexer.errors as errors
import skill_indexer.manifest as manifest


class TestLoadSources:
    """Tests for load_sources()."""

    def test_loads_declarations(self, tmp_path: _pathlib.Path) -> None:
        """Repo, branch and exclude are read; unknown keys are ignored."""
        path = tmp_path / "sources.skill.json"
        path.write_text(
            _json.dumps(
                {
                    "$schema": "./schema/sources.json",
                    "sources": [
                        {"repo": "https://example.com/a.git"},
                        {"repo": "/srv/b", "branch": "dev", "exclude": ["vendor"], "note": 1},
                    ],
                }
            )
        )

        loaded = manifest.load_sources(path)

        assert loaded.schema_ == "./schema/sources.json"
        assert [s.repo for s in loaded.sources] == ["https://example.com/a.git", "/srv/b"]
        assert loaded.sources[0].branch is None
        assert loaded.sources[0].exclude == []
        assert loaded.sources[1].branch == "dev"
        assert loaded.sources[1].exclude == ["vendor"]

    def test_missing_file(self, tmp_path: _pathlib.Path) -> None:
        """A missing declaration is a configuration error naming the file."""
        path = tmp_path / "absent.json"

        with _pytest.raises(errors.SourcesFileError, match="file not found") as exc_info:
            manifest.load_sources(path)

        assert exc_info.value.path == path

    def test_invalid_json(self, tmp_path: _pathlib.Path) -> None:
        """Malformed JSON raises SourcesFileError."""
        path = tmp_path / "sources.skill.json"
        path.write_text("{not json")

        with _pytest.raises(errors.SourcesFileError, match="invalid JSON"):
            manifest.load_sources(path)

    def test_missing_repo_field(self, tmp_path: _pathlib.Path) -> None:
        """A source without a repo fails validation."""
        path = tmp_path / "sources.skill.json"
        path.write_text('{"sources": [{"branch": "main"}]}')

        with _pytest.raises(errors.SourcesFileError, match="invalid sources declaration"):
            manifest.load_sources(path)

    def test_empty_sources(self, tmp_path: _pathlib.Path) -> None:
        """An empty list is rejected."""
        path = tmp_path / "sources.skill.json"
        path.write_text('{"sources": []}')

        with _pytest.raises(errors.ConfigurationError, match="sources list is empty"):
            manifest.load_sources(path)


class TestLoadIndex:
    """Tests for load_index()."""

    def test_missing_index_is_empty(self, tmp_path: _pathlib.Path) -> None:
        """The first run starts from an empty index."""
        index = manifest.load_index(tmp_path / "index.skill.json")

        assert index.skills == []
        assert index.generated_at is None

    def test_null_skills(self, tmp_path: _pathlib.Path) -> None:
        """A null skills list reads as an empty list."""
        path = tmp_path / "index.skill.json"
        path.write_text('{"generatedAt": "2026-01-01T00:00:00Z", "skills": null}')

        index = manifest.load_index(path)

        assert index.skills == []
        assert index.generated_at == "2026-01-01T00:00:00Z"

    def test_reads_entries(self, tmp_path: _pathlib.Path) -> None:
        """Entries keep their camelCase timestamp."""
        path = tmp_path / "index.skill.json"
        path.write_text(
            _json.dumps(
                {
                    "skills": [
                        {
                            "name": "alpha",
                            "path": "skills/alpha",
                            "repo": "r",
                            "head": "abc",
                            "updatedAt": "2026-01-01T00:00:00Z",
                        }
                    ]
                }
            )
        )

        index = manifest.load_index(path)

        assert index.skills[0].updated_at == "2026-01-01T00:00:00Z"
        assert index.head_by_repo() == {"r": "abc"}
        assert list(index.entries_by_repo()) == ["r"]

    def test_invalid_index(self, tmp_path: _pathlib.Path) -> None:
        """A corrupt index is an error rather than a silent reset."""
        path = tmp_path / "index.skill.json"
        path.write_text("[1, 2")

        with _pytest.raises(errors.SourcesFileError):
            manifest.load_index(path)

    def test_not_utf8(self, tmp_path: _pathlib.Path) -> None:
        """Undecodable bytes are a file error naming the path."""
        path = tmp_path / "index.skill.json"
        path.write_bytes(b'{"skills": [{"name": "\xff"}]}')

        with _pytest.raises(errors.SourcesFileError, match="invalid UTF-8") as exc_info:
            manifest.load_index(path)

        assert exc_info.value.path == path

    def test_null_entry_fields_read_as_empty(self, tmp_path: _pathlib.Path) -> None:
        """A hand-edited entry with null fields loads with empty strings."""
        path = tmp_path / "index.skill.json"
        path.write_text(
            '{"skills": [{"name": "pdf", "path": null, "repo": "r",'
            ' "head": null, "updatedAt": null}]}'
        )

        entry = manifest.load_index(path).skills[0]

        assert entry.to_json_dict() == {
            "name": "pdf",
            "path": "",
            "repo": "r",
            "head": "",
            "updatedAt": "",
        }


class TestWriteIndex:
    """Tests for write_index()."""

    def test_format(self, tmp_path: _pathlib.Path) -> None:
        """Two-space indent, trailing newline, $schema passed through."""
        path = tmp_path / "index.skill.json"
        index = manifest.IndexFile(
            schema_="./schema/index.json",
            generated_at="2026-10-19T08:30:00Z",
            skills=[
                manifest.IndexEntry(
                    name="alpha",
                    path="alpha",
                    repo="r",
                    head="abc",
                    updated_at="2026-10-19T08:30:00Z",
                )
            ],
        )

        manifest.write_index(path, index)

        text = path.read_text()
        assert text.endswith("\n")
        assert text.startswith('{\n  "$schema": "./schema/index.json",\n  "generatedAt"')
        assert _json.loads(text)["skills"][0]["updatedAt"] == "2026-10-19T08:30:00Z"

    def test_empty_index_writes_list(self, tmp_path: _pathlib.Path) -> None:
        """An empty index writes "skills": [] and no optional keys."""
        path = tmp_path / "index.skill.json"

        manifest.write_index(path, manifest.IndexFile())

        assert _json.loads(path.read_text()) == {"skills": []}

    def test_round_trip_is_byte_identical(self, tmp_path: _pathlib.Path) -> None:
        """Reading and rewriting an index does not change its bytes."""
        path = tmp_path / "index.skill.json"
        index = manifest.IndexFile(
            generated_at="2026-10-19T08:30:00Z",
            skills=[manifest.IndexEntry(name="a", path="a", repo="r", head="h", updated_at="t")],
        )
        manifest.write_index(path, index)
        before = path.read_bytes()

        manifest.write_index(path, manifest.load_index(path))

        assert path.read_bytes() == before
