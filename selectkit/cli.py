#!/usr/bin/env python3
"""
selectkit CLI - run SELECT and COUNT helpers from the command line

Usage:
    selectkit --help
    selectkit select app.db --from users -c id -c name --where "age > ?" -p 18 --limit 10
    selectkit count app.db --from users --where "active = ?" -p true
    selectkit engines
"""

import csv
import json
import sys
import time
from typing import Any, List, Optional, Tuple

import click
from pydantic import ValidationError
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from selectkit import __version__
from selectkit.adapters.base import ConnectionError
from selectkit.adapters.factory import list_engines
from selectkit.core.config import settings
from selectkit.core.logging import configure_logging
from selectkit.database import Database
from selectkit.domain.query.collectors import as_tuple
from selectkit.domain.query.executor import QueryOutcome
from selectkit.shared.types.models import CountSpec, QuerySpec

# =============================================================================
# CONFIGURATION
# =============================================================================

console = Console()
err_console = Console(stderr=True)


def parse_parameter(raw: str) -> Any:
    """
    Parse a command-line parameter.

    JSON literals become their Python value (18, 2.5, true, null);
    anything else is kept as a string.
    """
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def open_database(ctx: click.Context, database: str) -> Database:
    """Open the database named on the command line with the selected engine."""
    config = settings.engine_config()
    config["database"] = database
    try:
        return Database.open(ctx.obj["engine"], config, log_sql=ctx.obj["log_sql"])
    except ConnectionError as e:
        fail(str(e))


def fail(message: str):
    """Print an error and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


def check_outcome(outcome: QueryOutcome, show_sql: bool):
    """Exit with the engine's message when the outcome failed."""
    if show_sql:
        console.print(Syntax(outcome.sql, "sql"))
    if not outcome.ok:
        fail(f"{outcome.error} ({type(outcome.error).__name__})")


# =============================================================================
# MAIN CLI GROUP
# =============================================================================

@click.group()
@click.option("--engine", envvar="SELECTKIT_DEFAULT_ENGINE", default=None, help="Engine name (default: sqlite)")
@click.option("--verbose", "-v", is_flag=True, help="Log statements and engine activity")
@click.version_option(version=__version__, prog_name="selectkit")
@click.pass_context
def cli(ctx, engine, verbose):
    """
    selectkit CLI - build and run SELECT statements from structured clauses.

    \b
    Environment Variables:
        SELECTKIT_DEFAULT_ENGINE - Engine name (default: sqlite)
    """
    ctx.ensure_object(dict)
    ctx.obj["engine"] = engine or settings.default_engine
    ctx.obj["log_sql"] = True if verbose else None

    if verbose:
        configure_logging("DEBUG")
    else:
        configure_logging("WARNING")


@cli.command()
def engines():
    """List registered engines."""
    for name in list_engines():
        console.print(f"  • {name}")


# =============================================================================
# SELECT COMMAND
# =============================================================================

@cli.command("select")
@click.argument("database")
@click.option("--from", "source", required=True, help="FROM body, including any JOIN clauses")
@click.option("--column", "-c", "column_list", multiple=True, help="Column expression (repeatable, default: *)")
@click.option("--where", "where", default=None, help="WHERE clause")
@click.option("--group-by", default=None, help="GROUP BY clause")
@click.option("--having", default=None, help="HAVING clause")
@click.option("--order-by", default=None, help="ORDER BY clause")
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Maximum rows")
@click.option("--offset", type=click.IntRange(min=0), default=None, help="Rows to skip (needs --limit)")
@click.option("--param", "-p", "params", multiple=True, help="Positional parameter (repeatable, JSON literal or text)")
@click.option("--format", "output_format", type=click.Choice(["table", "json", "csv"]), default="table", help="Output format")
@click.option("--show-sql", is_flag=True, help="Print the generated statement")
@click.pass_context
def select_command(ctx, database, source, column_list, where, group_by, having, order_by,
                   limit, offset, params, output_format, show_sql):
    """
    Run a SELECT built from the given clauses.

    \b
    Examples:
        selectkit select app.db --from users
        selectkit select app.db --from users -c id -c name --where "age > ?" -p 18 --limit 10 --offset 5
        selectkit select app.db --from "orders o JOIN users u ON u.id = o.user_id" -c u.name -c "sum(o.total)" --group-by u.name
    """
    if offset is not None and limit is None:
        err_console.print("[yellow]--offset is ignored without --limit[/yellow]")

    try:
        spec = QuerySpec(
            source=source,
            columns=list(column_list) or None,
            where=where,
            group_by=group_by,
            having=having,
            order_by=order_by,
            limit=limit,
            offset=offset,
            parameters=[parse_parameter(p) for p in params],
        )
    except ValidationError as e:
        fail(f"Invalid query: {e}")

    column_names: List[str] = []

    def collect(row) -> Tuple[Any, ...]:
        if not column_names:
            column_names.extend(row.column_names)
        return as_tuple(row)

    with open_database(ctx, database) as db:
        start_time = time.time()
        outcome = db.select_from(spec, collect)
        elapsed = time.time() - start_time

    check_outcome(outcome, show_sql)
    render_rows(column_names, outcome.value, output_format, source, elapsed)


def render_rows(column_names: List[str], rows: List[Tuple[Any, ...]], output_format: str,
                title: str, elapsed: Optional[float] = None):
    """Print collected rows as a table, JSON or CSV."""
    if output_format == "json":
        records = [dict(zip(column_names, row)) for row in rows]
        click.echo(json.dumps(records, indent=2, default=str))
        return

    if output_format == "csv":
        writer = csv.writer(sys.stdout)
        if column_names:
            writer.writerow(column_names)
        writer.writerows(rows)
        return

    if not rows:
        console.print("[yellow]No results[/yellow]")
        return

    table = Table(title=f"Results: {title}", show_header=True)
    for name in column_names:
        table.add_column(name, style="cyan")
    for row in rows:
        table.add_row(*["NULL" if v is None else str(v) for v in row])

    console.print(table)
    if elapsed is not None:
        console.print(f"\n[dim]{len(rows)} rows in {elapsed:.2f}s[/dim]")


# =============================================================================
# COUNT COMMAND
# =============================================================================

@cli.command("count")
@click.argument("database")
@click.option("--from", "source", required=True, help="FROM body, including any JOIN clauses")
@click.option("--column", "-c", "column_list", multiple=True, help="Column to count (repeatable, default: *)")
@click.option("--where", "where", default=None, help="WHERE clause")
@click.option("--param", "-p", "params", multiple=True, help="Positional parameter (repeatable, JSON literal or text)")
@click.option("--show-sql", is_flag=True, help="Print the generated statement")
@click.pass_context
def count_command(ctx, database, source, column_list, where, params, show_sql):
    """
    Count rows matching the given clauses.

    \b
    Example:
        selectkit count app.db --from users --where "active = ?" -p true
    """
    try:
        spec = CountSpec(
            source=source,
            columns=list(column_list) or None,
            where=where,
            parameters=[parse_parameter(p) for p in params],
        )
    except ValidationError as e:
        fail(f"Invalid query: {e}")

    with open_database(ctx, database) as db:
        outcome = db.count_from(spec)

    check_outcome(outcome, show_sql)
    click.echo(outcome.value)


# =============================================================================
# ENTRY POINT
# =============================================================================

def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
