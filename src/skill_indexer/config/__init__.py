"""
Configuration module for Skill Indexer.

Uses pydantic-settings for environment variable and YAML file loading.
"""

from skill_indexer.config.settings import Settings
from skill_indexer.config.sources import ConfigFileError, get_config_file_path

__all__ = ["ConfigFileError", "Settings", "get_config_file_path"]
