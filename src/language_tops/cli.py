"""Click-based CLI for Language Tops."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from language_tops.config import DEFAULT_SOURCE_WEIGHTS, LanguageTopsConfig, load_config
from language_tops.exceptions import LanguageTopsError, NotationError
from language_tops.formatter import (
    format_cli_output,
    format_fetch_summary,
    format_json,
    format_validation,
)
from language_tops.pipeline import fetch_sources, run_aggregation
from language_tops.storage import LINO_FILE, read_lino

_config_option = click.option(
    "--config", "config_path", default=None, help="Config file path"
)
_data_dir_option = click.option(
    "--data-dir", default=None, type=click.Path(file_okay=False), help="Data directory"
)


def _load(config_path: str | None, data_dir: str | None) -> LanguageTopsConfig:
    try:
        config = load_config(config_path)
    except LanguageTopsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    if data_dir is not None:
        output = config.output.model_copy(update={"data_dir": Path(data_dir)})
        config = config.model_copy(update={"output": output})
    return config


def _top(top: int | None, config: LanguageTopsConfig) -> int:
    return top if top is not None else config.output.top


@click.group()
@click.version_option(package_name="language-tops")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level",
)
def main(log_level: str) -> None:
    """Language Tops - weighted programming language popularity rankings."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument(
    "sources", nargs=-1, type=click.Choice(list(DEFAULT_SOURCE_WEIGHTS))
)
@_config_option
@_data_dir_option
def fetch(sources: tuple[str, ...], config_path: str | None, data_dir: str | None) -> None:
    """Download ranking data for SOURCES (all sources when omitted)."""
    config = _load(config_path, data_dir)
    outcomes = asyncio.run(fetch_sources(list(sources) or None, config))
    click.echo(format_fetch_summary(outcomes))
    if not any(o.ok for o in outcomes):
        sys.exit(1)


@main.command()
@_config_option
@_data_dir_option
@click.option(
    "--top", type=click.IntRange(min=0), default=None, help="Number of languages to show"
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def aggregate(
    config_path: str | None,
    data_dir: str | None,
    top: int | None,
    verbose: bool,
    output_json: bool,
) -> None:
    """Combine fetched sources into a weighted ranking."""
    config = _load(config_path, data_dir)
    try:
        report = run_aggregation(config)
    except LanguageTopsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output_json:
        click.echo(format_json(report))
    else:
        click.echo(format_cli_output(report, top=_top(top, config), verbose=verbose))


@main.command("fetch-all")
@_config_option
@_data_dir_option
@click.option(
    "--top", type=click.IntRange(min=0), default=None, help="Number of languages to show"
)
def fetch_all(config_path: str | None, data_dir: str | None, top: int | None) -> None:
    """Fetch every source, then aggregate whatever was fetched."""
    config = _load(config_path, data_dir)
    outcomes = asyncio.run(fetch_sources(None, config))
    click.echo(format_fetch_summary(outcomes))
    click.echo("")

    try:
        report = run_aggregation(config)
    except LanguageTopsError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(
            "Aggregation failed, but individual data files may still be available.",
            err=True,
        )
        sys.exit(1)

    click.echo(format_cli_output(report, top=_top(top, config)))


@main.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False))
@_config_option
@_data_dir_option
def validate(path: str | None, config_path: str | None, data_dir: str | None) -> None:
    """Check that PATH (default: aggregated.lino in the data directory) parses."""
    if path is None:
        config = _load(config_path, data_dir)
        path = str(config.output.data_dir / LINO_FILE)

    try:
        links = read_lino(path)
    except OSError as e:
        click.echo(f"Error: Could not read {path}: {e}", err=True)
        sys.exit(1)
    except NotationError as e:
        click.echo(f"Error: {path} failed to parse: {e}", err=True)
        sys.exit(1)

    click.echo(format_validation(path, links))
