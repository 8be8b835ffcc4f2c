import logging
import sys
from datetime import datetime
from decimal import Decimal
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.markup import escape
from rich import box
import typer

from circulation import Item, Library, LibraryError, Patron, seed_demo_data
from config import settings
from utils.ui_helpers import (
    set_output_mode,
    print_item_result,
    print_patron_result,
    print_stats_result,
)
from utils.validators import IdValidator, TextValidator, parse_category, parse_date, parse_role

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("circulation.cli")

APP_NAME = settings.app_name

console = Console()


# Single in-memory Library shared by every command in this process
class LibraryManager:
    _instance: Optional[Library] = None

    @classmethod
    def get_instance(cls) -> Library:
        """Get or create the Library, seeded with the demo data when configured."""
        if cls._instance is None:
            cls._instance = Library()
            if settings.seed_demo_data:
                seed_demo_data(cls._instance)
            logger.debug("Library instance created")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


def _format_fine(fine: Decimal) -> str:
    return f"{fine:.2f}"


# --- Typer CLI ---
app = typer.Typer(help="Library circulation CLI")


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global CLI options (e.g. output mode). Without a command the interactive menu opens."""
    if output:
        set_output_mode(output)
    if ctx.invoked_subcommand is None:
        run_menu()


@app.command("list")
def cli_list(
    available: bool = typer.Option(False, "--available", "-a", help="Only items on the shelf"),
    borrowed: bool = typer.Option(False, "--borrowed", "-b", help="Only items on loan"),
):
    """List items in catalogue order."""
    lib = LibraryManager.get_instance()
    if available:
        print_item_result(lib.items.list_available(), "No items available.")
    elif borrowed:
        print_item_result(lib.items.list_borrowed(), "No items on loan.")
    else:
        print_item_result(lib.items.list_items())


@app.command("find")
def cli_find(item_id: str):
    """Find an item by id and show its details."""
    lib = LibraryManager.get_instance()
    item_id = IdValidator.normalize_id(item_id)
    item = lib.find_item(item_id)
    if not item:
        print(f"Item with ID {item_id} not found.")
        return
    print("Item Found")
    print(f"ID: {item.item_id}")
    print(f"Title: {item.title}")
    print(f"Category: {item.category_name}")
    if item.author:
        print(f"Author: {item.author}")
    if item.available:
        print("Status: available")
    else:
        print(f"Status: on loan to {item.borrower_id}")
        print(f"Due: {item.due_on:%Y-%m-%d}")


@app.command("search")
def cli_search(query: str = typer.Argument(..., help="Title or author keyword")):
    """Search items by title or author."""
    lib = LibraryManager.get_instance()
    print_item_result(lib.search_items(query), "No items match the query.")


@app.command("patrons")
def cli_patrons():
    """List registered patrons with their loan counts."""
    print_patron_result(LibraryManager.get_instance().patrons.list_patrons())


@app.command("loans")
def cli_loans(patron_id: str):
    """Show the items a patron currently has on loan."""
    lib = LibraryManager.get_instance()
    try:
        items = lib.loans_for(IdValidator.normalize_id(patron_id))
    except LibraryError as e:
        print(f"Error: {e}")
        return
    print_item_result(items, "No items on loan.")


@app.command("borrow")
def cli_borrow(
    item_id: str,
    patron_id: str,
    on: Optional[str] = typer.Option(None, "--on", help="Borrow date (YYYY-MM-DD), default now"),
):
    """Check an item out to a patron."""
    lib = LibraryManager.get_instance()
    item_id = IdValidator.normalize_id(item_id)
    patron_id = IdValidator.normalize_id(patron_id)
    try:
        due_on = lib.borrow(item_id, patron_id, parse_date(on))
    except (LibraryError, ValueError) as e:
        print(f"Error: {e}")
        return
    print(f"Item {item_id} checked out to {patron_id}. Due: {due_on:%Y-%m-%d}")


@app.command("return")
def cli_return(
    item_id: str,
    on: Optional[str] = typer.Option(None, "--on", help="Return date (YYYY-MM-DD), default now"),
):
    """Check an item back in and report any overdue fine."""
    lib = LibraryManager.get_instance()
    item_id = IdValidator.normalize_id(item_id)
    try:
        result = lib.return_item(item_id, parse_date(on))
    except (LibraryError, ValueError) as e:
        print(f"Error: {e}")
        return
    if result.overdue:
        print(f"Item {item_id} returned {result.overdue_days} day(s) late. Fine: {_format_fine(result.fine)}")
    else:
        print(f"Item {item_id} returned on time.")


@app.command("overdue")
def cli_overdue(on: Optional[str] = typer.Option(None, "--on", help="Reference date (YYYY-MM-DD), default now")):
    """List borrowed items past their due date with the fine owed so far."""
    lib = LibraryManager.get_instance()
    try:
        when = parse_date(on) or datetime.now()
    except ValueError as e:
        print(f"Error: {e}")
        return
    items = lib.overdue_items(when)
    if not items:
        print("No overdue items.")
        return
    for item in items:
        print(f"{item.item_id} - {item.title} (borrower {item.borrower_id}, "
              f"{item.overdue_days(when)} day(s) late, fine {_format_fine(item.calculate_fine(when))})")


@app.command("stats")
def cli_stats():
    """Show library statistics."""
    print_stats_result(LibraryManager.get_instance().get_statistics())


@app.command("add-item")
def cli_add_item(
    item_id: str,
    title: str,
    category: str = typer.Option("General", "--category", "-c", help="Textbook | Reference | Fiction | Periodical | General"),
    author: Optional[str] = typer.Option(None, "--author", "-a"),
    isbn: Optional[str] = typer.Option(None, "--isbn"),
):
    """Add an item to the catalogue."""
    lib = LibraryManager.get_instance()
    item_id = IdValidator.normalize_id(item_id)
    if not IdValidator.is_valid_id(item_id) or not TextValidator.validate_title(title):
        print("Error: item id and title are required.")
        return
    try:
        item = lib.add_item(Item(item_id, title, parse_category(category), author=author, isbn=isbn))
    except (LibraryError, ValueError) as e:
        print(f"Error: {e}")
        return
    print(f"Successfully added: {item.title} ({item.item_id})")


@app.command("remove-item")
def cli_remove_item(item_id: str):
    """Remove an item from the catalogue (even if it is on loan)."""
    lib = LibraryManager.get_instance()
    item_id = IdValidator.normalize_id(item_id)
    try:
        lib.remove_item(item_id)
    except LibraryError as e:
        print(f"Error: {e}")
        return
    print(f"Item with ID {item_id} has been removed.")


@app.command("add-patron")
def cli_add_patron(
    patron_id: str,
    name: str,
    role: str = typer.Option("Student", "--role", "-r", help="Student | Teacher | Librarian"),
):
    """Register a patron."""
    lib = LibraryManager.get_instance()
    patron_id = IdValidator.normalize_id(patron_id)
    if not IdValidator.is_valid_id(patron_id) or not TextValidator.validate_name(name):
        print("Error: patron id and name are required.")
        return
    try:
        patron = lib.add_patron(Patron(patron_id, name, parse_role(role)))
    except (LibraryError, ValueError) as e:
        print(f"Error: {e}")
        return
    print(f"Successfully registered: {patron.name} ({patron.role.value}, limit {patron.max_borrow_limit})")


@app.command("remove-patron")
def cli_remove_patron(patron_id: str):
    """Remove a patron."""
    lib = LibraryManager.get_instance()
    patron_id = IdValidator.normalize_id(patron_id)
    try:
        lib.remove_patron(patron_id)
    except LibraryError as e:
        print(f"Error: {e}")
        return
    print(f"Patron with ID {patron_id} has been removed.")


@app.command("reset")
def cli_reset():
    """Discard all in-memory state and start over."""
    LibraryManager.reset()
    LibraryManager.get_instance()
    print("Library state has been reset.")


# --- Interactive menu ---
def _items_table(items, title: str) -> Table:
    table = Table(title=title, show_lines=True, header_style="bold cyan")
    table.add_column("ID", style="magenta", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Category", style="white")
    table.add_column("Due", style="white")
    for item in items:
        due = f"{item.due_on:%Y-%m-%d}" if item.due_on else ""
        table.add_row(item.item_id, escape(item.title), item.category_name, due)
    return table


def show_items(available_only: bool = False):
    lib = LibraryManager.get_instance()
    items = lib.items.list_available() if available_only else lib.items.list_items()
    if not items:
        console.print("[yellow]No items to show.[/]")
        return
    console.print(_items_table(items, "📚 Available Items" if available_only else "📚 Catalogue"))
    console.print(f"[dim]📊 {len(items)} item(s)[/]")


def borrow():
    """Check out an item, asking for the patron and item ids."""
    lib = LibraryManager.get_instance()
    patron_id = IdValidator.normalize_id(Prompt.ask("🪪 Patron ID"))
    patron = lib.find_patron(patron_id)
    if not patron:
        console.print(f"[yellow]⚠️ Patron [bold]{escape(patron_id)}[/] not found.[/]")
        return
    if patron.has_reached_borrow_limit():
        console.print(f"[red]❌ {escape(patron.name)} has reached the borrow limit ({patron.max_borrow_limit}).[/]")
        return
    show_items(available_only=True)
    item_id = IdValidator.normalize_id(Prompt.ask("📕 Item ID to borrow"))
    try:
        due_on = lib.borrow(item_id, patron_id)
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return
    console.print(Panel.fit(f"[green]Checked out[/] {item_id} to {escape(patron.name)}\n"
                            f"[bold]Due:[/] {due_on:%Y-%m-%d}", title="✅ Borrowed", border_style="green"))


def give_back():
    """Check in one of a patron's loans."""
    lib = LibraryManager.get_instance()
    patron_id = IdValidator.normalize_id(Prompt.ask("🪪 Patron ID"))
    try:
        loans = lib.loans_for(patron_id)
    except LibraryError as e:
        console.print(f"[yellow]⚠️ {escape(str(e))}[/]")
        return
    if not loans:
        console.print("[yellow]No items on loan.[/]")
        return
    console.print(_items_table(loans, "📖 Your Loans"))
    item_id = IdValidator.normalize_id(Prompt.ask("📕 Item ID to return"))
    if item_id not in {item.item_id for item in loans}:
        console.print(f"[red]❌ {escape(item_id)} is not one of your loans.[/]")
        return
    result = lib.return_item(item_id)
    if result.overdue:
        console.print(f"[yellow]Returned {result.overdue_days} day(s) late. "
                      f"Fine: [bold]{_format_fine(result.fine)}[/][/]")
    else:
        console.print("[green]✅ Returned on time.[/]")


def add_item():
    lib = LibraryManager.get_instance()
    item_id = IdValidator.normalize_id(Prompt.ask("🆔 Item ID"))
    title = Prompt.ask("📕 Title")
    if not IdValidator.is_valid_id(item_id) or not TextValidator.validate_title(title):
        console.print("[bold red]Error:[/] item id and title are required.")
        return
    category = Prompt.ask("🏷️ Category", choices=["Textbook", "Reference", "Fiction", "Periodical", "General"],
                          default="General")
    author = Prompt.ask("✍️ Author", default="") or None
    try:
        lib.add_item(Item(item_id, title, parse_category(category), author=author))
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return
    console.print(f"[green]✅ Added [bold]{escape(title)}[/].[/]")


def remove_item():
    lib = LibraryManager.get_instance()
    item_id = IdValidator.normalize_id(Prompt.ask("🔍 Item ID to remove"))
    item = lib.find_item(item_id)
    if not item:
        console.print(f"[yellow]⚠️ Item [bold]{escape(item_id)}[/] not found.[/]")
        return
    warning = "" if item.available else f"\n[red]On loan to {item.borrower_id}; the loan will be dropped.[/]"
    console.print(Panel(f"[bold]Title:[/] {escape(item.title)}\n[bold]ID:[/] {item.item_id}{warning}",
                        title="📚 Item to remove", border_style="yellow"))
    if Confirm.ask("🗑️ Remove this item?", default=False):
        lib.remove_item(item_id)
        console.print(f"[green]✅ [bold]{escape(item.title)}[/] removed.[/]")
    else:
        console.print("[blue]🚫 Cancelled.[/]")


def add_patron():
    lib = LibraryManager.get_instance()
    patron_id = IdValidator.normalize_id(Prompt.ask("🆔 Patron ID"))
    name = Prompt.ask("👤 Name")
    if not IdValidator.is_valid_id(patron_id) or not TextValidator.validate_name(name):
        console.print("[bold red]Error:[/] patron id and name are required.")
        return
    role = Prompt.ask("🎓 Role", choices=["Student", "Teacher", "Librarian"], default="Student")
    try:
        patron = lib.add_patron(Patron(patron_id, name, parse_role(role)))
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return
    console.print(f"[green]✅ Registered [bold]{escape(patron.name)}[/] (limit {patron.max_borrow_limit}).[/]")


def remove_patron():
    lib = LibraryManager.get_instance()
    patron_id = IdValidator.normalize_id(Prompt.ask("🔍 Patron ID to remove"))
    try:
        patron = lib.remove_patron(patron_id)
    except LibraryError as e:
        console.print(f"[yellow]⚠️ {escape(str(e))}[/]")
        return
    console.print(f"[green]✅ {escape(patron.name)} removed.[/]")


def stats():
    lib = LibraryManager.get_instance()
    statistics = lib.get_statistics()
    roles = "\n".join(f"  {role}: {count}" for role, count in statistics["patrons_by_role"].items())
    console.print(Panel.fit(
        f"[bold]Total Items:[/] {statistics['total_items']}\n"
        f"[bold]Available:[/] {statistics['available_items']}\n"
        f"[bold]On Loan:[/] {statistics['borrowed_items']}\n"
        f"[bold]Patrons:[/] {statistics['total_patrons']}\n{roles}",
        title="📊 Statistics",
        border_style="blue"
    ))


def overdue():
    lib = LibraryManager.get_instance()
    now = datetime.now()
    items = lib.overdue_items(now)
    if not items:
        console.print("[green]No overdue items.[/]")
        return
    table = _items_table(items, "⏰ Overdue")
    console.print(table)
    total = sum((item.calculate_fine(now) for item in items), Decimal("0"))
    console.print(f"[dim]Outstanding fines: {_format_fine(total)}[/]")


def run_menu():
    """Simple interactive menu for the circulation desk."""
    menu_items = [
        ("1", "List all items", "📚", lambda: show_items()),
        ("2", "List available items", "📗", lambda: show_items(available_only=True)),
        ("3", "Borrow an item", "➕", borrow),
        ("4", "Return an item", "↩️", give_back),
        ("5", "Add an item", "🆕", add_item),
        ("6", "Remove an item", "🗑️", remove_item),
        ("7", "Register a patron", "👤", add_patron),
        ("8", "Remove a patron", "🚷", remove_patron),
        ("9", "Overdue report", "⏰", overdue),
        ("10", "Show statistics", "📊", stats),
    ]
    actions = {key: action for key, _, _, action in menu_items}

    def render_menu() -> None:
        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon, _ in menu_items:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")
        table.add_row("[reverse]0[/]", "🚪 Exit")
        console.print(Panel(table, title=f"{APP_NAME}", border_style="cyan", box=box.HEAVY, padding=(1, 2)))

    while True:
        render_menu()
        choice = Prompt.ask("Choose an option", choices=list(actions) + ["0"], default="1").strip()
        if choice == "0":
            console.print("[green]Goodbye![/]")
            break
        actions[choice]()
        print()  # spacing between operations


if __name__ == "__main__":
    if len(sys.argv) > 1:
        app()
    else:
        run_menu()
