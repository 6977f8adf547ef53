"""Rich/JSON output for ServiceResult.

The CLI renders ServiceResult for humans (a status line plus a key/value
table) or machines (--json). Quiet mode prints only the status line.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from rich.table import Table
from rich.text import Text

from cardclone.output.console import create_console, get_output, style_for_key

if TYPE_CHECKING:
    from cardclone.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output mode flags taken from the CLI."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def _cell(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"))
    return str(value)


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    if not result.ok:
        code = result.error.code if result.error else "ERROR"
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} [{code}] {message}"

    if settings.quiet:
        return f"OK: {result.op}"

    console = create_console()
    console.print(Text("OK", style="card.ok"), Text(f"  {result.op}", style="card.op"))
    if result.data:
        table = Table(show_header=False, box=None, pad_edge=False)
        table.add_column(style="card.key")
        table.add_column()
        for key, value in result.data.items():
            table.add_row(key, Text(_cell(value), style=style_for_key(key)))
        console.print(table)
    return get_output(console).rstrip("\n")
