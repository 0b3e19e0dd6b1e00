"""Output formatting for CLI results."""

from __future__ import annotations

import json
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console(stderr=True)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


def print_output(
    data: dict[str, Any],
    fmt: OutputFormat = OutputFormat.TABLE,
    title: str | None = None,
) -> None:
    """Print a single record as a key/value table or as JSON."""
    if fmt == OutputFormat.JSON:
        print_json(data)
    else:
        print_table(data, title)


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def print_table(data: dict[str, Any], title: str | None = None) -> None:
    """Print a record as a two-column Rich table."""
    if not data:
        console.print("[dim]No results.[/dim]")
        return

    table = Table(title=title, show_lines=False)
    table.add_column("key")
    table.add_column("value", overflow="fold")
    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)


def mask(secret: str, visible: int = 4) -> str:
    """Hide all but the first few characters of a secret."""
    if len(secret) <= visible:
        return "*" * len(secret)
    return secret[:visible] + "*" * 8
