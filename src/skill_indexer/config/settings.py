"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments / command-line flags (highest precedence)
2. Environment variables with SKILL_INDEXER_ prefix
3. .env file named by SKILL_INDEXER_ENV_FILE (if set)
4. YAML settings file (skill-indexer.yaml or $SKILL_INDEXER_CONFIG_FILE)
5. Field defaults (lowest)

Example:
  SKILL_INDEXER_SOURCES_DIR=/var/cache/skill-sources
  SKILL_INDEXER_KEEP_SOURCES=true
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import skill_indexer.config.sources as sources
import skill_indexer.constants as constants


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only an explicitly named file is used; if SKILL_INDEXER_ENV_FILE is
    set but missing, nothing is loaded rather than falling back silently.
    """
    if env_file := _os.environ.get("SKILL_INDEXER_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    Skill Indexer configuration settings.

    All settings can be overridden via environment variables with the
    SKILL_INDEXER_ prefix, e.g. SKILL_INDEXER_INDEX_PATH=index.json.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="SKILL_INDEXER_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (SKILL_INDEXER_* env vars)
        3. dotenv_settings (.env file)
        4. YAML settings file
        5. (defaults via Field definitions), lowest
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlFileSettingsSource(settings_cls),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings without loading any .env file (test isolation)."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    # =========================================================================
    # File locations
    # =========================================================================

    sources_path: _pathlib.Path = _pydantic.Field(
        default=_pathlib.Path(constants.DEFAULT_SOURCES_PATH),
        description="Path to the sources declaration (JSON)",
    )

    index_path: _pathlib.Path = _pydantic.Field(
        default=_pathlib.Path(constants.DEFAULT_INDEX_PATH),
        description="Path to the generated index (JSON)",
    )

    sources_dir: _pathlib.Path = _pydantic.Field(
        default=_pathlib.Path(constants.DEFAULT_SOURCES_DIR),
        description="Scratch directory repositories are cloned into",
    )

    mirror_dir: _pathlib.Path = _pydantic.Field(
        default=_pathlib.Path("."),
        description="Directory that contains the mirror root folder",
    )

    # =========================================================================
    # Behavior
    # =========================================================================

    keep_sources: bool = _pydantic.Field(
        default=False,
        description="Keep cloned repositories after the run",
    )

    rescan_on_legacy_paths: bool = _pydantic.Field(
        default=True,
        description=(
            "Force a rescan when a recorded entry path equals its mirror "
            "destination, even if the remote head is unchanged"
        ),
    )

    git_executable: str = _pydantic.Field(
        default="git",
        min_length=1,
        description="git binary used for ls-remote, clone and rev-parse",
    )

    verbose: bool = _pydantic.Field(
        default=False,
        description="Log per-source progress",
    )

    @property
    def mirror_root(self) -> _pathlib.Path:
        """Absolute-or-relative path of the folder holding mirrored bundles."""
        return self.mirror_dir / constants.MIRROR_ROOT

    def to_display_dict(self) -> dict[str, _typing.Any]:
        """Settings as plain JSON/YAML-friendly values."""
        return self.model_dump(mode="json")
