"""
Main CLI entry point for Skill Indexer.

Provides the command-line interface using Click:

    skill-indexer sync      # reconcile sources, mirror bundles, update index
    skill-indexer list      # show the current index
    skill-indexer config    # show effective settings
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.logging as _rich_logging
import yaml as _yaml

import skill_indexer
import skill_indexer.config as config
import skill_indexer.core as core
import skill_indexer.errors as errors
import skill_indexer.manifest as manifest

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _one_line(message: str) -> str:
    """Collapse a (possibly multi-line) error message onto one line."""
    return "; ".join(part.strip() for part in message.splitlines() if part.strip())


def _fail(error: BaseException) -> _typing.NoReturn:
    """Report a fatal error as a single diagnostic line and exit 1."""
    _click.echo(f"error: {_one_line(str(error))}", err=True)
    raise SystemExit(1)


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    handler = _rich_logging.RichHandler(
        console=_rich_console.Console(stderr=True),
        show_path=False,
        show_time=False,
    )
    _logging.basicConfig(
        level=_logging.INFO if verbose else _logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _load_settings(**overrides: _typing.Any) -> config.Settings:
    """Build Settings, letting explicitly given CLI values win."""
    given = {k: v for k, v in overrides.items() if v is not None}
    try:
        return config.Settings(**given)
    except (errors.SkillIndexerError, _pydantic.ValidationError) as e:
        _fail(e)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(skill_indexer.__version__, "-v", "--version", prog_name="skill-indexer")
def cli() -> None:
    """
    Skill Indexer - mirror skill bundles from git repositories.

    \b
    Examples:
        skill-indexer sync                          # Use sources.skill.json
        skill-indexer sync --keep-sources --verbose
        skill-indexer list --json                   # Dump index.skill.json
    """
    pass


@cli.command()
@_click.option(
    "--sources",
    "sources_path",
    type=_click.Path(path_type=_pathlib.Path, dir_okay=False),
    default=None,
    help="Path to the sources declaration [default: sources.skill.json]",
)
@_click.option(
    "--index",
    "index_path",
    type=_click.Path(path_type=_pathlib.Path, dir_okay=False),
    default=None,
    help="Path to the generated index [default: index.skill.json]",
)
@_click.option(
    "--sources-dir",
    type=_click.Path(path_type=_pathlib.Path, file_okay=False),
    default=None,
    help="Directory to clone sources into [default: sources]",
)
@_click.option(
    "--mirror-dir",
    type=_click.Path(path_type=_pathlib.Path, file_okay=False),
    default=None,
    help="Directory containing the mirrored 'skill' folder [default: .]",
)
@_click.option(
    "--keep-sources",
    is_flag=True,
    help="Keep cloned repos after the run",
)
@_click.option(
    "--verbose",
    is_flag=True,
    help="Log per-source progress",
)
def sync(
    sources_path: _pathlib.Path | None,
    index_path: _pathlib.Path | None,
    sources_dir: _pathlib.Path | None,
    mirror_dir: _pathlib.Path | None,
    keep_sources: bool,
    verbose: bool,
) -> None:
    """Reconcile declared sources, refresh the mirror and update the index."""
    settings = _load_settings(
        sources_path=sources_path,
        index_path=index_path,
        sources_dir=sources_dir,
        mirror_dir=mirror_dir,
        keep_sources=keep_sources or None,
        verbose=verbose or None,
    )
    _configure_logging(settings.verbose)

    try:
        result = core.Reconciler(settings).run()
    except (errors.SkillIndexerError, OSError) as e:
        _fail(e)

    if settings.verbose:
        state = "updated" if result.changed else "unchanged"
        _click.echo(f"{len(result.index.skills)} skill(s), index {state}", err=True)


@cli.command(name="list")
@_click.option(
    "--index",
    "index_path",
    type=_click.Path(path_type=_pathlib.Path, dir_okay=False),
    default=None,
    help="Path to the generated index [default: index.skill.json]",
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
def list_cmd(index_path: _pathlib.Path | None, json_output: bool) -> None:
    """List mirrored skills recorded in the index."""
    settings = _load_settings(index_path=index_path)

    try:
        index = manifest.load_index(settings.index_path)
    except errors.SkillIndexerError as e:
        _fail(e)

    if json_output:
        _click.echo(manifest.dumps(index.to_json_dict()), nl=False)
        return

    if not index.skills:
        _click.echo("No skills indexed.")
        return

    _click.echo(f"Indexed Skills ({len(index.skills)}):")
    _click.echo(f"{'Name':<30} {'Head':<14} {'Repo'}")
    _click.echo("-" * 70)
    for entry in index.skills:
        _click.echo(f"{entry.name:<30} {entry.head[:12]:<14} {entry.repo}")
    if index.generated_at:
        _click.echo()
        _click.echo(f"Generated at: {index.generated_at}")


@cli.command(name="config")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
def config_cmd(json_output: bool) -> None:
    """Show effective settings."""
    settings = _load_settings()
    data = settings.to_display_dict()

    if json_output:
        _click.echo(_json.dumps(data, indent=2))
    else:
        _click.echo(f"# Settings file: {config.get_config_file_path()}")
        _click.echo(_yaml.safe_dump(data, default_flow_style=False, sort_keys=False), nl=False)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="skill-indexer")


if __name__ == "__main__":
    main()
