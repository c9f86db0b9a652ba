"""
Mealink - CLI Entry Point.

Usage:
    mealink search tom                      Show ingredient suggestions
    mealink add tomato:3 "milk:1:l"         Record inventory lines
    mealink add salmon --location frozen    Store somewhere else
    mealink inventory                       List your inventory
    mealink health                          Check configuration
"""

import asyncio
import logging
from collections import defaultdict
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from mealink.config import get_settings
from mealink.errors import MealinkError
from mealink.inventory.service import InventoryEntryService
from mealink.models import IngredientIdentity, InventoryItem, InventoryLine, StorageLocation

app = typer.Typer(
    name="mealink",
    help="Mealink - log ingredients and keep track of what's in your kitchen.",
    add_completion=False,
)
console = Console()


@app.callback()
def main() -> None:
    """Configure logging once for every command."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _fail(error: MealinkError) -> None:
    console.print(f"[red]{error.message}[/red]")
    raise typer.Exit(code=1)


def parse_line_arg(
    arg: str,
    location: StorageLocation = StorageLocation.REFRIGERATED,
    expires_at: str | None = None,
) -> InventoryLine:
    """
    Parse NAME[:QTY[:UNIT]] into an input line.

    Examples:
        "tomato" -> name "tomato"
        "milk:1:l" -> name "milk", quantity "1", unit "l"
    """
    parts = arg.split(":", 2)
    parts += [""] * (3 - len(parts))
    name, quantity, unit = parts
    return InventoryLine(
        name_input=name,
        quantity_input=quantity,
        unit_input=unit,
        location=location,
        expires_at=expires_at,
    )


async def _search(keyword: str) -> list[IngredientIdentity]:
    service = await InventoryEntryService.from_settings()
    debouncer = service.debouncer("cli")
    debouncer.on_input_changed(keyword)
    await debouncer.wait()
    if debouncer.last_error is not None:
        raise debouncer.last_error
    return debouncer.suggestions


@app.command()
def search(keyword: str = typer.Argument(..., help="Ingredient name or prefix")) -> None:
    """Search the ingredient catalog."""
    try:
        suggestions = asyncio.run(_search(keyword))
    except MealinkError as e:
        _fail(e)
        return

    if not suggestions:
        console.print("[dim]No matching ingredients.[/dim]")
        return

    table = Table(title=f"Ingredients matching '{keyword}'")
    table.add_column("Name", style="bold")
    table.add_column("Category")
    table.add_column("Unit")
    table.add_column("Scope")
    for s in suggestions:
        scope = s.scope.value if s.status.value == "active" else f"{s.scope.value} ({s.status.value})"
        table.add_row(s.name, s.category or "-", s.unit or "-", scope)
    console.print(table)


async def _add(lines: list[InventoryLine]):
    service = await InventoryEntryService.from_settings()
    return await service.submit(lines)


@app.command()
def add(
    items: list[str] = typer.Argument(..., help="NAME[:QTY[:UNIT]] per item"),
    location: StorageLocation = typer.Option(
        StorageLocation.REFRIGERATED, "--location", "-l", help="Where the items are stored"
    ),
    expires: Optional[str] = typer.Option(None, "--expires", "-e", help="Expiry date (YYYY-MM-DD)"),
) -> None:
    """Record items in your inventory."""
    lines = [parse_line_arg(item, location, expires) for item in items]
    result = asyncio.run(_add(lines))

    if not result.ok:
        console.print(f"[red]{result.message}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]{result.message}[/green] [dim]({result.written} items)[/dim]")


async def _inventory() -> list[InventoryItem]:
    service = await InventoryEntryService.from_settings()
    return await service.list_inventory()


@app.command()
def inventory() -> None:
    """List your inventory grouped by storage location."""
    try:
        items = asyncio.run(_inventory())
    except MealinkError as e:
        _fail(e)
        return

    if not items:
        console.print("[dim]Your inventory is empty.[/dim]")
        return

    by_location: dict[str, list[InventoryItem]] = defaultdict(list)
    for item in items:
        by_location[item.location or "unset"].append(item)

    for location_name in sorted(by_location):
        table = Table(title=location_name)
        table.add_column("Name", style="bold")
        table.add_column("Quantity")
        table.add_column("Category")
        table.add_column("Expires")
        for item in by_location[location_name]:
            table.add_row(item.name, item.quantity_label, item.category or "-", item.expires_at or "-")
        console.print(table)


@app.command()
def health() -> None:
    """Check configuration."""
    config = get_settings()
    if config.is_supabase_configured:
        console.print(f"[green]Supabase configured[/green]: {config.supabase_url}")
    else:
        console.print("[yellow]Supabase not configured[/yellow] (set SUPABASE_URL and SUPABASE_ANON_KEY)")
    console.print(f"Identity mode: [bold]{config.identity_mode}[/bold]")
    console.print(f"Search debounce: {config.search_debounce_ms} ms, limit {config.search_limit}")


if __name__ == "__main__":
    app()
