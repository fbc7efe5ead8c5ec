"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from PackageSearch.cli.runner import CommandRunner
from PackageSearch.config import load_config
from PackageSearch.renderers import OUTPUT_FORMATS

_format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="console",
    show_default=True,
    help="Output format: log lines on the console, or a JSON document on stdout.",
)


@click.group(help="PackageSearch: search npm packages ranked by relevance and quality.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/default.yml"),
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config,
    so that ``elasticsearch.api_key_env`` can point at a ``.env`` entry.

    Args:
        ctx: Click context.
        config_path: Path to YAML config file.
    """
    load_dotenv()

    cfg = load_config(config_path)
    ctx.obj = cfg


@cli.command("search")
@click.argument("query")
@click.option("--from", "from_", type=int, default=None, help="Result offset.")
@click.option("--size", type=int, default=None, help="Page size.")
@_format_option
@click.pass_context
def search_cmd(ctx: click.Context, query: str, from_: int | None, size: int | None, output_format: str) -> None:
    """Search packages with a QUERY such as 'cross spawn not:deprecated'.

    Raises:
        click.Abort: When the search fails.
    """
    runner = CommandRunner(ctx.obj)
    runner.run_search(ctx.command.name, query=query, from_=from_, size=size, output_format=output_format)


@cli.command("suggestions")
@click.argument("term")
@click.option("--size", type=int, default=None, help="Number of suggestions.")
@_format_option
@click.pass_context
def suggestions_cmd(ctx: click.Context, term: str, size: int | None, output_format: str) -> None:
    """Suggest packages whose name starts like TERM."""
    runner = CommandRunner(ctx.obj)
    runner.run_suggestions(ctx.command.name, term=term, size=size, output_format=output_format)


@cli.command("info")
@click.argument("names", nargs=-1, required=True)
@_format_option
@click.pass_context
def info_cmd(ctx: click.Context, names: tuple[str, ...], output_format: str) -> None:
    """Show metadata and score for one or more package NAMES."""
    runner = CommandRunner(ctx.obj)
    runner.run_info(ctx.command.name, names=names, output_format=output_format)


@cli.command("compile")
@click.argument("query")
@click.option("--from", "from_", type=int, default=None, help="Result offset.")
@click.option("--size", type=int, default=None, help="Page size.")
@click.pass_context
def compile_cmd(ctx: click.Context, query: str, from_: int | None, size: int | None) -> None:
    """Print the index request a QUERY compiles to, without running it."""
    runner = CommandRunner(ctx.obj)
    runner.run_compile(ctx.command.name, query=query, from_=from_, size=size)
