"""
CLI module for Skill Indexer.

Provides the command-line interface using Click.
"""

from skill_indexer.cli.main import cli, main

__all__ = ["main", "cli"]
