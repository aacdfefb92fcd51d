"""Command-line interface for astrule.

This module provides the CLI commands for creating, inspecting, combining
and evaluating stored rules.
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, NoReturn, TypeVar

import click
from sqlalchemy.exc import SQLAlchemyError

from astrule.core.config import Settings, get_settings
from astrule.core.logging import configure_logging, get_logger
from astrule.core.rules import (
    LiteralType,
    OperatorKind,
    RuleError,
    RuleSyntaxError,
    dumps_rule,
    format_rule,
    parse_rule,
    validate_rule,
)
from astrule.domain.services import RuleService
from astrule.infrastructure.persistence.database import DatabaseManager
from astrule.infrastructure.store import SqlRuleStore, StoreConnectionError, StoreError

T = TypeVar("T")


@click.group()
@click.version_option(version="0.1.0", prog_name="astrule")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides ASTRULE_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """astrule - compile, store and evaluate business rules.

    Rules are boolean expressions over named fields, for example:

        age > 30 AND (department == 'Sales' OR salary >= 50000)
    """
    settings = get_settings()
    if log_level is not None:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    ctx.obj = settings


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


def _report(error: Exception, expression: str | None = None) -> NoReturn:
    """Print a rule or store error and exit with status 1."""
    if isinstance(error, RuleSyntaxError) and expression is not None and error.position is not None:
        click.echo(f"  {expression}", err=True)
        click.echo(f"  {' ' * error.position}^ {error.kind.value}", err=True)
    _fail(str(error))


def _parse_object(value: str, what: str) -> dict[str, Any]:
    try:
        data = json.loads(value)
    except ValueError as e:
        raise click.BadParameter(f"{what} must be valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise click.BadParameter(f"{what} must be a JSON object")
    return data


def _parse_catalog(value: str | None) -> dict[str, LiteralType] | None:
    if value is None:
        return None
    catalog = _parse_object(value, "Catalog")
    try:
        return {name: LiteralType(type_name) for name, type_name in catalog.items()}
    except ValueError as e:
        valid = ", ".join(t.value for t in LiteralType)
        raise click.BadParameter(f"Catalog types must be one of: {valid}") from e


def _run(
    settings: Settings,
    action: Callable[[RuleService], Awaitable[T]],
    catalog: dict[str, LiteralType] | None = None,
    expression: str | None = None,
) -> T:
    """Run an action against the SQL rule store, creating the table if needed."""

    async def run() -> T:
        db = DatabaseManager(settings)
        try:
            try:
                await db.create_tables()
            except (SQLAlchemyError, OSError) as e:
                raise StoreConnectionError(f"Cannot open rule store: {e}") from e
            return await action(RuleService(SqlRuleStore(db), catalog=catalog))
        finally:
            await db.disconnect()

    try:
        return asyncio.run(run())
    except (RuleError, StoreError, ValueError) as e:
        get_logger(__name__).debug("Command failed", error=str(e))
        _report(e, expression)


@cli.command()
@click.argument("name")
@click.argument("expression")
@click.option("--catalog", default=None, help='Field types as JSON, e.g. \'{"age": "int"}\'')
@click.pass_obj
def create(settings: Settings, name: str, expression: str, catalog: str | None) -> None:
    """Parse EXPRESSION and store it as rule NAME."""
    field_types = _parse_catalog(catalog)
    rule = _run(
        settings,
        lambda service: service.create_rule(name, expression),
        catalog=field_types,
        expression=expression,
    )
    click.echo(f"Rule '{rule.name}' saved: {rule.text}")


@cli.command()
@click.argument("name")
@click.option("--json", "as_json", is_flag=True, help="Print the stored encoding")
@click.pass_obj
def show(settings: Settings, name: str, as_json: bool) -> None:
    """Print a stored rule."""
    rule = _run(settings, lambda service: service.get_rule(name))
    if as_json:
        click.echo(json.dumps(rule.encoding, indent=2, sort_keys=True))
    else:
        click.echo(rule.text)


@cli.command(name="list")
@click.pass_obj
def list_rules(settings: Settings) -> None:
    """List stored rule names."""
    for name in _run(settings, lambda service: service.list_rules()):
        click.echo(name)


@cli.command()
@click.argument("name")
@click.pass_obj
def delete(settings: Settings, name: str) -> None:
    """Delete a stored rule."""
    _run(settings, lambda service: service.delete_rule(name))
    click.echo(f"Rule '{name}' deleted")


@cli.command()
@click.argument("name")
@click.option("--data", "data", default=None, help="Record to evaluate as a JSON object")
@click.option(
    "--data-file",
    type=click.File("r"),
    default=None,
    help="File containing the record as a JSON object",
)
@click.pass_obj
def evaluate(settings: Settings, name: str, data: str | None, data_file: Any) -> None:
    """Evaluate stored rule NAME against a record."""
    if (data is None) == (data_file is None):
        raise click.UsageError("Pass exactly one of --data or --data-file")
    record = _parse_object(data if data is not None else data_file.read(), "Record")

    result = _run(settings, lambda service: service.evaluate(name, record))
    click.echo("True" if result else "False")


@cli.command()
@click.argument("name")
@click.argument("sources", nargs=-1, required=True)
@click.option("--any", "use_or", is_flag=True, help="Combine with OR instead of AND")
@click.pass_obj
def combine(settings: Settings, name: str, sources: tuple[str, ...], use_or: bool) -> None:
    """Combine stored rules SOURCES into a new rule NAME."""
    operator = OperatorKind.OR if use_or else OperatorKind.AND
    rule = _run(settings, lambda service: service.combine(name, list(sources), operator))
    click.echo(f"Rule '{rule.name}' saved: {rule.text}")


@cli.command()
@click.argument("expression")
@click.option("--catalog", default=None, help='Field types as JSON, e.g. \'{"age": "int"}\'')
def check(expression: str, catalog: str | None) -> None:
    """Parse EXPRESSION without storing it and print its encoding."""
    field_types = _parse_catalog(catalog)
    try:
        node = parse_rule(expression)
        if field_types is not None:
            validate_rule(node, field_types)
    except RuleError as e:
        _report(e, expression)

    click.echo(format_rule(node))
    click.echo(dumps_rule(node))


@cli.command(name="init-db")
@click.pass_obj
def init_db(settings: Settings) -> None:
    """Create the rules table."""

    async def initialize() -> None:
        db = DatabaseManager(settings)
        try:
            await db.create_tables()
        finally:
            await db.disconnect()

    try:
        asyncio.run(initialize())
    except (SQLAlchemyError, OSError) as e:
        _fail(f"Cannot initialize {settings.database_url}: {e}")
    click.echo("Database initialized successfully.")


@cli.command()
@click.pass_obj
def info(settings: Settings) -> None:
    """Display astrule configuration."""
    click.echo(f"""
astrule v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}

Rule Store:
  URL:          {settings.database_url}
  Echo:         {settings.db_echo}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `astrule` command is run
    or when using `python -m astrule`.
    """
    cli()


if __name__ == "__main__":
    main()
