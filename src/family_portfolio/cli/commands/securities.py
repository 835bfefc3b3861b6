"""Security commands: add, list and inspect who owns what."""

from decimal import Decimal, InvalidOperation

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from ...core.accounting import build_security_summary
from ...core.config import get_config
from ...core.exceptions import FamilyPortfolioError
from ...core.models import Security
from ...data.repositories.securities_repo import SecuritiesRepository
from ...data.snapshot import load_snapshot
from ...external.price_fetcher import PriceFetcher

app = typer.Typer(help="Tracked securities")
console = Console()
repo = SecuritiesRepository()


def get_security_or_exit(symbol: str) -> Security:
    s = repo.get_by_symbol(symbol)
    if not s:
        console.print(f"[red]Security {symbol.upper()} not found. Add it: fp securities add {symbol}[/red]")
        raise typer.Exit(1)
    return s


@app.command("add")
def add(
    symbol: str = typer.Argument(..., help="Ticker symbol (e.g. AAPL)"),
    name: str = typer.Option("", "--name", "-n", help="Display name (looked up when omitted)"),
    price: str = typer.Option(None, "--price", "-p", help="Initial price (skips the quote lookup)"),
    offline: bool = typer.Option(False, "--offline", help="Don't contact Yahoo Finance"),
):
    """Start tracking a security."""
    initial_price = None
    if price is not None:
        try:
            initial_price = Decimal(price)
        except InvalidOperation:
            console.print("[red]Invalid number format for price[/red]")
            raise typer.Exit(1)

    if not offline:
        if not name:
            name = PriceFetcher.fetch_name(symbol) or ""
        if initial_price is None:
            initial_price = PriceFetcher.fetch_price(symbol)

    try:
        s = repo.create(Security(symbol=symbol, name=name))
    except FamilyPortfolioError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    if initial_price is not None:
        s = repo.update_price(s.id, initial_price)

    sym = get_config().currency_symbol
    price_text = f"{sym}{s.current_price:,.4f}" if s.current_price is not None else "price unknown"
    label = f"{s.symbol} ({s.name})" if s.name else s.symbol
    console.print(f"[green]✓[/green] Added {label} — {price_text}")


@app.command("list")
def list_securities():
    """List securities with outstanding shares and market value."""
    snapshot = load_snapshot()
    if not snapshot.securities:
        console.print("[yellow]No securities yet. Add one: fp securities add <symbol>[/yellow]")
        return

    sym = get_config().currency_symbol
    table = Table(title="Securities")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column(f"Price ({sym})", justify="right")
    table.add_column("As of")
    table.add_column("Shares", justify="right")
    table.add_column(f"Value ({sym})", justify="right")
    table.add_column("Holders", justify="right")

    for s in snapshot.securities:
        summary = build_security_summary(s, snapshot)
        table.add_row(
            s.symbol,
            s.name or "—",
            f"{s.current_price:,.4f}" if s.current_price is not None else "[dim]—[/dim]",
            s.price_updated_at.strftime("%Y-%m-%d %H:%M") if s.price_updated_at else "—",
            f"{summary.shares_owned:,.4f}",
            f"{summary.current_value:,.2f}",
            str(len(summary.ownership)),
        )

    console.print(table)


@app.command("show")
def show(symbol: str = typer.Argument(..., help="Ticker symbol")):
    """Show one security's value, gain/loss and ownership breakdown."""
    s = get_security_or_exit(symbol)
    summary = build_security_summary(s, load_snapshot())
    sym = get_config().currency_symbol

    console.print(f"\n[bold]{s.symbol}[/bold] {s.name}\n")
    info = Table(show_header=False, box=None, padding=(0, 2))
    info.add_column("Label", style="dim")
    info.add_column("Value", justify="right")
    info.add_row("Price", f"{sym}{s.current_price:,.4f}" if s.current_price is not None else "unknown")
    info.add_row("Shares held", f"{summary.shares_owned:,.4f}")
    info.add_row("Current value", f"{sym}{summary.current_value:,.2f}")
    info.add_row("Cost basis", f"{sym}{summary.cost_basis:,.2f}")
    color = "green" if summary.gain_loss >= 0 else "red"
    info.add_row(
        "Gain/Loss",
        f"[{color}]{sym}{summary.gain_loss:,.2f} ({summary.gain_loss_pct:+.2f}%)[/{color}]",
    )
    console.print(info)

    if not summary.ownership:
        console.print("\n[yellow]Nobody currently holds shares of this security[/yellow]\n")
        return

    table = Table(title="Ownership")
    table.add_column("Member", style="bold")
    table.add_column("Shares", justify="right")
    table.add_column(f"Value ({sym})", justify="right")
    table.add_column("Share %", justify="right")
    for o in summary.ownership:
        table.add_row(o.member_name, f"{o.shares:,.4f}", f"{o.value:,.2f}", f"{o.percentage:.2f}%")
    console.print(table)
    console.print()


@app.command("remove")
def remove(
    symbol: str = typer.Argument(..., help="Ticker symbol"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a security together with its transactions and allocations."""
    s = get_security_or_exit(symbol)
    if not yes and not Confirm.ask(
        f"Delete {s.symbol} and every transaction recorded for it?", console=console
    ):
        raise typer.Abort()
    repo.delete(s.id)
    console.print(f"[green]✓[/green] Deleted {s.symbol}")
