"""Custom pydantic-settings source for the optional YAML settings file.

The file is looked up, in order, at:
1. $SKILL_INDEXER_CONFIG_FILE (must exist if set)
2. skill-indexer.yaml in the working directory

A missing file is normal and contributes nothing. A file that exists but
cannot be read or parsed is an error, never silently ignored.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import skill_indexer.constants as constants
import skill_indexer.errors as errors

# Environment variable for overriding the settings file location
ENV_CONFIG_FILE = "SKILL_INDEXER_CONFIG_FILE"


def get_config_file_path(cwd: _pathlib.Path | None = None) -> _pathlib.Path:
    """Get the settings file path, respecting the environment override."""
    if env_file := _os.environ.get(ENV_CONFIG_FILE):
        return _pathlib.Path(env_file).expanduser()
    return (cwd or _pathlib.Path.cwd()) / constants.DEFAULT_CONFIG_FILE


class ConfigFileError(errors.SourcesFileError):
    """Error loading or parsing the YAML settings file."""

    pass


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Load a YAML settings file and return its contents as a dict.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed contents; an empty dict for an empty file.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or contains non-dict content at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigFileError(path, f"invalid UTF-8: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class YamlFileSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source backed by a single optional YAML file.

    Keys map one-to-one onto Settings fields (sources_path, index_path, ...).
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        config_path: _pathlib.Path | None = None,
    ) -> None:
        super().__init__(settings_cls)
        self._config_path = config_path or get_config_file_path()
        self._data = self._load()

    def _load(self) -> dict[str, _typing.Any]:
        path = self._config_path
        if not path.exists():
            if _os.environ.get(ENV_CONFIG_FILE):
                raise ConfigFileError(path, "file named by SKILL_INDEXER_CONFIG_FILE not found")
            return {}
        return load_yaml_file(path)

    @property
    def config_path(self) -> _pathlib.Path:
        """Path of the settings file this source reads."""
        return self._config_path

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """Get value for a field from the loaded YAML mapping."""
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return the loaded YAML mapping for Pydantic validation."""
        return dict(self._data)
