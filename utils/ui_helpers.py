import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()

def format_item_line(item: Any) -> str:
    status = "available" if item.available else f"on loan to {item.borrower_id}, due {item.due_on:%Y-%m-%d}"
    return f"{item.item_id} - {item.title} [{item.category_name}] ({status})"

def format_patron_line(patron: Any) -> str:
    return (f"{patron.patron_id} - {patron.name} [{patron.role.value}] "
            f"{patron.borrowed_count}/{patron.max_borrow_limit}")

def print_item_result(items: List[Any], empty_message: str = "No items in library.") -> None:
    """Print an item list in the current output mode.
    - plain: 'ID - Title [Category] (status)' lines, or the empty message
    - json: JSON array of item dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not items:
        print(empty_message)
        return

    if mode == "json":
        print(json.dumps([item.to_dict() for item in items], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Items", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Category", style="white")
        table.add_column("Status", style="white")
        table.add_column("Due", style="white")
        for item in items:
            status = "[green]available[/]" if item.available else f"[yellow]{item.borrower_id}[/]"
            due = f"{item.due_on:%Y-%m-%d}" if item.due_on else ""
            table.add_row(item.item_id, item.title, item.category_name, status, due)
        _console.print(table)
    else:
        for item in items:
            print(format_item_line(item))

def print_patron_result(patrons: List[Any]) -> None:
    mode = get_output_mode()

    if not patrons:
        print("No patrons registered.")
        return

    if mode == "json":
        print(json.dumps([p.to_dict() for p in patrons], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👥 Patrons", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Role", style="white")
        table.add_column("Borrowed", style="white", justify="right")
        for p in patrons:
            table.add_row(p.patron_id, p.name, p.role.value, f"{p.borrowed_count}/{p.max_borrow_limit}")
        _console.print(table)
    else:
        for p in patrons:
            print(format_patron_line(p))

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print library statistics in the current output mode.
    - plain: one 'Label: value' line per metric
    - json: JSON object
    - rich: Panel with the main metrics
    """
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
        return

    lines = [
        f"Total Items: {stats.get('total_items', 0)}",
        f"Available Items: {stats.get('available_items', 0)}",
        f"Borrowed Items: {stats.get('borrowed_items', 0)}",
        f"Total Patrons: {stats.get('total_patrons', 0)}",
        f"Active Borrowers: {stats.get('active_borrowers', 0)}",
    ]
    lines += [f"  {name}: {count}" for name, count in stats.get("patrons_by_role", {}).items()]

    if mode == "rich":
        content = "\n".join(f"[bold]{line.split(':')[0]}:[/]{line.split(':', 1)[1]}" for line in lines)
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        for line in lines:
            print(line)
