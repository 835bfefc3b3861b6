"""Summary commands: portfolio totals, cash pools, recent activity."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.accounting import build_portfolio_summary, cash_by_member
from ...core.activity import recent_activity
from ...core.config import get_config
from ...core.models import ActivityType
from ...data.snapshot import load_snapshot

app = typer.Typer(help="Portfolio summaries")
console = Console()


def _signed(value, sym: str) -> str:
    color = "green" if value >= 0 else "red"
    return f"[{color}]{sym}{value:,.2f}[/{color}]"


@app.command("portfolio")
def portfolio():
    """Show portfolio totals and each member's share of it."""
    cfg = get_config()
    sym = cfg.currency_symbol
    snapshot = load_snapshot()
    if not snapshot.members:
        console.print("[yellow]No members yet. Add one: fp members add <name>[/yellow]")
        return

    s = build_portfolio_summary(snapshot)
    title = f"{cfg.family_name} Portfolio" if cfg.family_name else "Family Portfolio"
    console.print(f"\n[bold]{title}[/bold]\n")

    totals = Table(show_header=False, box=None, padding=(0, 2))
    totals.add_column("Label", style="dim")
    totals.add_column("Value", justify="right")
    totals.add_row("[bold]Total Value[/bold]", f"[bold]{sym}{s.total_value:,.2f}[/bold]")
    totals.add_row("Cash", f"{sym}{s.total_cash:,.2f}")
    totals.add_row("Cost Basis", f"{sym}{s.total_cost_basis:,.2f}")
    totals.add_row("Unrealized Gain/Loss", f"{_signed(s.total_gain_loss, sym)} ({s.total_gain_loss_pct:+.2f}%)")
    console.print(totals)

    table = Table(title="By Member")
    table.add_column("Member", style="bold")
    table.add_column(f"Contributed ({sym})", justify="right")
    table.add_column(f"Stocks ({sym})", justify="right")
    table.add_column(f"Cash ({sym})", justify="right")
    table.add_column(f"Total ({sym})", justify="right")
    table.add_column(f"Cost Basis ({sym})", justify="right")
    table.add_column("Gain/Loss", justify="right")
    table.add_column("Share", justify="right")

    for m in sorted(s.members, key=lambda x: x.total_value, reverse=True):
        table.add_row(
            m.member_name,
            f"{m.total_contributions:,.2f}",
            f"{m.stock_value:,.2f}",
            f"{m.available_cash:,.2f}",
            f"{m.total_value:,.2f}",
            f"{m.cost_basis:,.2f}",
            f"{_signed(m.gain_loss, sym)} ({m.gain_loss_pct:+.2f}%)",
            f"{m.ownership_pct:.2f}%",
        )

    console.print(table)
    console.print()


@app.command("cash")
def cash():
    """Show each member's cash pool."""
    snapshot = load_snapshot()
    pools = cash_by_member(snapshot)
    if not pools:
        console.print("[yellow]No members yet[/yellow]")
        return

    sym = get_config().currency_symbol
    table = Table(title="Cash by Member")
    table.add_column("Member", style="bold")
    table.add_column(f"Contributed ({sym})", justify="right")
    table.add_column(f"Bought ({sym})", justify="right")
    table.add_column(f"Sold ({sym})", justify="right")
    table.add_column(f"Available ({sym})", justify="right")

    for c in pools.values():
        table.add_row(
            c.member_name,
            f"{c.total_contributions:,.2f}",
            f"{c.total_buys:,.2f}",
            f"{c.total_sells:,.2f}",
            _signed(c.available_cash, ""),
        )
    console.print(table)


@app.command("activity")
def activity(
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Number of entries (default from config)"),
):
    """Show the most recent contributions and trades."""
    cfg = get_config()
    items = recent_activity(load_snapshot(), limit=limit or cfg.activity_limit)
    if not items:
        console.print("[yellow]No recent activity[/yellow]")
        return

    styles = {ActivityType.CONTRIBUTION: "cyan", ActivityType.BUY: "green", ActivityType.SELL: "red"}
    table = Table(title="Recent Activity")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Description")
    table.add_column(f"Amount ({cfg.currency_symbol})", justify="right")
    for item in items:
        style = styles[item.activity_type]
        table.add_row(
            item.activity_date.isoformat(),
            f"[{style}]{item.activity_type.value}[/{style}]",
            item.description,
            f"{item.amount:,.2f}",
        )
    console.print(table)
