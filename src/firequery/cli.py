"""Typer-based command line front end for the query-expression engine."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, List, Optional

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from firequery.completion.catalog import CONSOLE_COMPLETIONS, EDITOR_COMPLETIONS
from firequery.completion.engine import QueryAutocomplete
from firequery.completion.suppliers import console_completion_supplier, editor_completion_supplier
from firequery.core.codec import decode_fields
from firequery.core.config import EngineSettings, load_settings
from firequery.core.console import ConsoleAction, interpret_console_input
from firequery.core.display import format_display_value, serialize_for_edit, value_type
from firequery.core.parsers.expression import parse_query_expression
from firequery.core.query_builder import parse_query_response
from firequery.logger import get_logger, setup_logger

logger = get_logger("cli")
app = typer.Typer(help="Parse, build and complete fluent document-database queries.", no_args_is_help=True)
console = Console()


def _settings(ctx: typer.Context) -> EngineSettings:
    return ctx.obj if isinstance(ctx.obj, EngineSettings) else EngineSettings()


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str, ensure_ascii=False)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON settings file"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to this file"),
) -> None:
    """Configure logging and settings shared by all commands."""
    load_dotenv()
    setup_logger(
        log_file=log_file,
        log_level=log_level.upper(),
        console_output=True,
        file_output=log_file is not None,
    )
    try:
        ctx.obj = load_settings(config)
    except (FileNotFoundError, json.JSONDecodeError, ValidationError) as e:
        typer.echo(f"❌ Could not load settings: {e}", err=True)
        raise typer.Exit(code=2)


@app.command()
def parse(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Fluent query expression"),
    collection: Optional[str] = typer.Option(None, "--collection", help="Default collection"),
) -> None:
    """Print the query parameters extracted from an expression."""
    settings = _settings(ctx)
    params = parse_query_expression(
        expression,
        settings.default_collection if collection is None else collection,
        settings.default_limit,
    )
    typer.echo(_to_json(asdict(params)))


@app.command()
def build(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Fluent query expression"),
    collection: Optional[str] = typer.Option(None, "--collection", help="Default collection"),
) -> None:
    """Print the structured query built from an expression."""
    _, query = QueryAutocomplete(settings=_settings(ctx)).build(expression, collection)
    typer.echo(_to_json(query))


@app.command()
def complete(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression text"),
    cursor: Optional[int] = typer.Option(None, "--cursor", help="Cursor offset (defaults to end of text)"),
    collection: str = typer.Option("", "--collection", help="Collection open in the editor"),
    fields: List[str] = typer.Option([], "--field", "-f", help="Known field name (repeatable)"),
    collections: List[str] = typer.Option([], "--known-collection", "-k", help="Known collection (repeatable)"),
    console_mode: bool = typer.Option(False, "--console", help="Use the console catalog"),
) -> None:
    """Rank completions for the cursor position."""
    settings = _settings(ctx)
    if console_mode:
        autocomplete = QueryAutocomplete(
            CONSOLE_COMPLETIONS, console_completion_supplier(collections), settings
        )
    else:
        autocomplete = QueryAutocomplete(
            EDITOR_COMPLETIONS,
            editor_completion_supplier(collection, fields, collections, settings.root_identifier),
            settings,
        )

    position = len(expression) if cursor is None else cursor
    result = autocomplete.complete(expression, position)
    context = result.context
    method = f"{context.method_call.name}[{context.method_call.arg_index}]" if context.method_call else "-"
    console.print(
        f"trigger={result.trigger!r} in_string={context.is_in_string} after_dot={context.is_after_dot} "
        f"db_access={context.is_db_access} method={method}",
        highlight=False,
    )

    if not result.items:
        typer.echo("No completions.")
        return

    table = Table("Completion", "Kind", "Description")
    for item in result.items:
        kind = item.kind.value if item.kind else ""
        table.add_row(item.effective_text.replace("\n", "⏎"), kind, item.description)
    console.print(table)


@app.command()
def decode(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Wire fields or query response JSON"),
    collection: str = typer.Option("", "--collection", help="Collection path for response rows"),
) -> None:
    """Decode wire-format fields or a query response file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        typer.echo(f"❌ Invalid JSON in {path}: {e}", err=True)
        raise typer.Exit(code=1)

    is_response = isinstance(data, list) or (isinstance(data, dict) and "document" in data)
    if not is_response:
        decoded = decode_fields(data.get("fields", data) if isinstance(data, dict) else None)
        typer.echo(_to_json({key: serialize_for_edit(value) for key, value in decoded.items()}))
        return

    documents = parse_query_response(data, collection)
    logger.info(f"Decoded {len(documents)} document(s) from {path}")
    table = Table("id", "field", "type", "value")
    for document in documents:
        for key, value in document.data.items():
            table.add_row(document.id, key, value_type(value), format_display_value(value))
    console.print(table)


@app.command("console")
def console_command(
    ctx: typer.Context,
    line: str = typer.Argument(..., help="Console input line"),
) -> None:
    """Show how the inline console interprets a line."""
    settings = _settings(ctx)
    command = interpret_console_input(line, settings.default_limit, settings.root_identifier)
    if command.action is ConsoleAction.ERROR:
        typer.echo(f"❌ {command.message}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"action: {command.action.value}")
    if command.path:
        typer.echo(f"path: {command.path}")
    if command.limit is not None:
        typer.echo(f"limit: {command.limit}")
    if command.message:
        typer.echo(command.message)


if __name__ == "__main__":
    app()
