"""
DataGenie CLI

Command-line interface for the natural-language-to-SQL pipeline.

Usage:
    datagenie prompt schema.json config.json          # Print the system prompt
    datagenie clean response.txt                      # Clean raw backend text
    echo "Sure! SELECT 1" | datagenie clean           # ...or from stdin
    datagenie ask "top 5 customers" --schema schema.json --config config.json
"""

import asyncio
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from datagenie.config import get_settings
from datagenie.models.errors import DataGenieError
from datagenie.pipeline.generator import SqlGenerator
from datagenie.prompts.builder import build_system_prompt
from datagenie.sql.normalizer import clean_and_format_sql

console = Console()

_QUIET_LOGGERS = ("datagenie", "httpx", "openai", "anthropic", "copilot", "asyncio")


def configure_cli_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(level)


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig")


# ============================================================================
# CLI Commands
# ============================================================================


@click.group()
@click.version_option(version="0.1.0", prog_name="DataGenie")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def cli(verbose: bool):
    """DataGenie - Generate T-SQL from natural language."""
    configure_cli_logging(verbose)


@cli.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--max-tables", default=200, show_default=True, type=click.IntRange(min=0))
@click.option("--max-columns", default=200, show_default=True, type=click.IntRange(min=0))
def prompt(schema_file: Path, config_file: Path, max_tables: int, max_columns: int):
    """Print the system prompt built from SCHEMA_FILE and CONFIG_FILE."""
    try:
        text = build_system_prompt(
            _read_text(schema_file),
            _read_text(config_file),
            max_tables=max_tables,
            max_columns_per_table=max_columns,
        )
    except DataGenieError as e:
        _fail(e.message)

    click.echo(text, nl=False)


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
def clean(source):
    """Clean raw backend text from SOURCE (default: stdin) into one SQL statement."""
    click.echo(clean_and_format_sql(source.read()))


@cli.command()
@click.argument("query")
@click.option(
    "--schema",
    "schema_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Schema JSON file.",
)
@click.option(
    "--config",
    "config_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Business metadata JSON file.",
)
@click.option("--hints", default=None, help="Hints sent ahead of the query.")
def ask(query: str, schema_file: Path, config_file: Path, hints: str | None):
    """Generate SQL for QUERY with the configured backend."""
    schema_json = _read_text(schema_file)
    config_json = _read_text(config_file)

    async def run_query() -> str:
        generator = SqlGenerator.from_settings(get_settings())
        try:
            with console.status("[cyan]Generating SQL...[/cyan]", spinner="dots"):
                return await generator.generate_statement_from_nlq(
                    query, schema_json, config_json, hints=hints
                )
        finally:
            await generator.aclose()

    try:
        sql = asyncio.run(run_query())
    except DataGenieError as e:
        _fail(e.message)
    except ValidationError as e:
        _fail(f"Invalid configuration: {e}")
    except (ValueError, ImportError) as e:
        _fail(str(e))

    click.echo(sql)


if __name__ == "__main__":
    cli()
