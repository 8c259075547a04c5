"""
CLI utility helpers - payload loading and output formatting.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from operant.framework.contracts import Contract, Document

console = Console()
err_console = Console(stderr=True)

_SUFFIX_FORMATS = {
    ".json": "json",
    ".xml": "xml",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def load_payload(data: str | None, file: Path | None, format_name: str | None) -> Document:
    """Build a tagged payload from ``--data`` or ``--file``."""
    if (data is None) == (file is None):
        err_console.print("[bold red]Error[/bold red]: pass exactly one of --data or --file")
        raise typer.Exit(code=2)

    if file is not None:
        if not file.exists():
            err_console.print(f"[bold red]Error[/bold red]: file not found: {file}")
            raise typer.Exit(code=2)
        text = file.read_text(encoding="utf-8")
        detected = _SUFFIX_FORMATS.get(file.suffix.lower())
    else:
        text = data or ""
        detected = None

    return Document(text, (format_name or detected or "json").lower())


def _plain(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    return str(value)


def contract_to_dict(contract: Contract) -> dict[str, Any]:
    """Serializable view of a Contract."""
    model = contract.model
    identifier = getattr(model, "id", None)
    result: dict[str, Any] = {
        "contract": type(contract).__name__,
        "valid": contract.valid,
        "values": _plain(contract.to_dict()),
        "errors": contract.errors.to_dict(),
    }
    if identifier is not None:
        result["id"] = _plain(identifier)
    return result


def output_contract(contract: Contract, *, as_json: bool = False, title: str = "") -> None:
    """Render a Contract; exit with code 1 when it is invalid."""
    if as_json:
        console.print_json(json.dumps(contract_to_dict(contract), default=str))
    elif contract.valid:
        table = Table(title=title or type(contract).__name__, show_header=True)
        table.add_column("Property", style="cyan")
        table.add_column("Value")
        for key, value in contract.to_dict().items():
            table.add_row(key, "" if value is None else str(value))
        console.print(table)
    else:
        err_console.print(f"[bold red]Invalid[/bold red] {type(contract).__name__}")
        for message in contract.errors.full_messages():
            err_console.print(f"  - {message}")

    if not contract.valid:
        raise typer.Exit(code=1)
