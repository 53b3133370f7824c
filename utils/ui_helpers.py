import os
import json
from typing import List, Any, Dict, Sequence
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def print_report(title: str, rows: Sequence[Any], columns: List[str], empty_message: str) -> None:
    """Print report rows in the current output mode.
    - plain: a header line, then one ' | '-separated line per row, or empty_message
    - json: JSON array of row dicts (empty array when there are no rows)
    - rich: Rich table
    """
    mode = get_output_mode()
    dicts = [r.to_dict() for r in rows]

    if mode == "json":
        print(json.dumps(dicts, ensure_ascii=False))
        return

    if not dicts:
        print(empty_message)
        return

    if mode == "rich":
        table = Table(title=title, show_lines=False, header_style="bold cyan")
        for col in columns:
            table.add_column(col, style="white")
        for d in dicts:
            table.add_row(*(str(d[c]) for c in columns))
        _console.print(table)
    else:
        print(title)
        print(" | ".join(columns))
        for d in dicts:
            print(" | ".join(str(d[c]) for c in columns))

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print library statistics in the current output mode."""
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{k.replace('_', ' ').title()}:[/] {v}" for k, v in stats.items())
        _console.print(Panel.fit(content, title="Stats", border_style="blue"))
    else:
        for k, v in stats.items():
            print(f"{k.replace('_', ' ').title()}: {v}")
