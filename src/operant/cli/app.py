"""
Root Typer application for the operant CLI.

    operant list -m myapp.operations
    operant describe posts.create -m myapp.operations
    operant run posts.create -m myapp.operations --data '{"body": "hello"}'
    operant run posts.create -m myapp.operations --file post.xml --call
"""

from __future__ import annotations

from pathlib import Path

import typer

from operant.core.errors import OperantError, OperationNotFoundError, ValidationError
from operant.framework.logging import configure_logging
from operant.framework.registry import get_operation, list_operations, load_operations
from operant.cli.utils import console, err_console, load_payload, output_contract
from operant.framework.runner import get_runner

app = typer.Typer(
    name="operant",
    help="operant - run stateless operations gated by validating contracts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _module_option() -> typer.models.OptionInfo:
    return typer.Option(None, "--module", "-m", help="Module to import so its operations register.")


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("operant")
        except PackageNotFoundError:
            from operant import __version__ as v
        typer.echo(f"operant {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override OPERANT_LOG_LEVEL."),
) -> None:
    """operant CLI - inspect and invoke registered operations."""
    configure_logging(level=log_level.upper() if log_level else None)


def _load(modules: list[str] | None) -> None:
    try:
        load_operations(modules or [])
    except ImportError as e:
        err_console.print(f"[bold red]Error[/bold red]: cannot import {e.name or e}")
        raise typer.Exit(code=2) from e


@app.command("list")
def list_cmd(modules: list[str] | None = _module_option()) -> None:
    """List registered operations."""
    _load(modules)
    names = list_operations()
    if not names:
        console.print("[dim]No operations registered.[/dim]")
        return
    for name in names:
        operation_cls = get_operation(name)
        console.print(f"[cyan]{name}[/cyan]  {operation_cls.description or ''}".rstrip())


@app.command()
def describe(
    name: str = typer.Argument(..., help="Operation identifier"),
    modules: list[str] | None = _module_option(),
) -> None:
    """Show an operation's contract schema."""
    _load(modules)
    try:
        operation_cls = get_runner().resolve(name)
    except OperationNotFoundError as e:
        err_console.print(f"[bold red]Error[/bold red]: {e}")
        raise typer.Exit(code=1) from e

    console.print(f"[bold]{name}[/bold] ({operation_cls.__name__})")
    if operation_cls.description:
        console.print(operation_cls.description)
    console.print(f"Contract: {operation_cls.contract.__name__}")
    help_text = operation_cls.contract.help_text()
    if help_text:
        console.print(help_text, markup=False)


@app.command()
def run(
    name: str = typer.Argument(..., help="Operation identifier"),
    data: str | None = typer.Option(None, "--data", "-d", help="Inline payload text."),
    file: Path | None = typer.Option(None, "--file", "-f", help="Payload file (format from suffix)."),
    format_name: str | None = typer.Option(None, "--format", help="Payload format (json, xml, yaml)."),
    call_protocol: bool = typer.Option(False, "--call", help="Use the call protocol (raise on invalid)."),
    json_out: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    modules: list[str] | None = _module_option(),
) -> None:
    """Invoke an operation with a payload."""
    _load(modules)
    payload = load_payload(data, file, format_name)
    runner = get_runner()

    try:
        if call_protocol:
            contract = runner.call(name, payload)
        else:
            contract = runner.run(name, payload)
    except OperationNotFoundError as e:
        err_console.print(f"[bold red]Error[/bold red]: {e}")
        raise typer.Exit(code=1) from e
    except ValidationError as e:
        err_console.print(f"[bold red]ValidationError[/bold red]: {e.message}")
        raise typer.Exit(code=1) from e
    except OperantError as e:
        err_console.print(f"[bold red]{type(e).__name__}[/bold red]: {e.message}")
        raise typer.Exit(code=1) from e

    output_contract(contract, as_json=json_out, title=name)
