"""Price commands: refresh from Yahoo Finance or set by hand."""

from decimal import Decimal, InvalidOperation
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import get_config
from ...data.repositories.securities_repo import SecuritiesRepository
from ...external.price_fetcher import PriceFetcher
from .securities import get_security_or_exit

app = typer.Typer(help="Refresh market prices")
console = Console()
repo = SecuritiesRepository()


@app.command("refresh")
def refresh(
    symbols: Optional[list[str]] = typer.Argument(None, help="Symbols to refresh (default: all)"),
):
    """Fetch the latest price for each security.

    A failed lookup leaves the previous price in place.
    """
    securities = [get_security_or_exit(s) for s in symbols] if symbols else repo.list_all()
    if not securities:
        console.print("[yellow]No securities to refresh[/yellow]")
        return

    console.print(f"Fetching prices for {len(securities)} securities...")
    fetched = PriceFetcher.fetch_batch([s.symbol for s in securities])

    sym = get_config().currency_symbol
    table = Table(title="Fetched Prices")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column(f"Price ({sym})", justify="right")
    table.add_column("Status")

    for s in securities:
        price = fetched.get(s.symbol)
        if price is not None:
            repo.update_price(s.id, price)
            table.add_row(s.symbol, s.name or "—", f"{price:,.4f}", "[green]OK[/green]")
        else:
            previous = f"{s.current_price:,.4f}" if s.current_price is not None else "—"
            table.add_row(s.symbol, s.name or "—", previous, "[red]FAILED[/red]")

    console.print(table)


@app.command("set")
def set_price(
    symbol: str = typer.Argument(..., help="Ticker symbol"),
    price: str = typer.Argument(..., help="Price per share"),
):
    """Set a security's price manually."""
    s = get_security_or_exit(symbol)
    try:
        value = Decimal(price)
    except InvalidOperation:
        console.print("[red]Invalid number format for price[/red]")
        raise typer.Exit(1)
    if value <= 0:
        console.print("[red]Price must be positive[/red]")
        raise typer.Exit(1)
    repo.update_price(s.id, value)
    console.print(f"[green]✓[/green] {s.symbol} price set to {get_config().currency_symbol}{value:,.4f}")
