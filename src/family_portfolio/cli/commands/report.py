"""Report commands: member report CSV export and yearly contributions."""

import csv
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.accounting import build_portfolio_summary
from ...core.config import get_config
from ...core.report import contributions_by_member, contributions_by_month, member_report_rows
from ...data.snapshot import load_snapshot

app = typer.Typer(help="Reports")
console = Console()


@app.command("export")
def export(
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Report year (default: current)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="CSV path"),
):
    """Write the member report to CSV."""
    year = year or date.today().year
    output = output or Path(f"portfolio-report-{year}.csv")
    summary = build_portfolio_summary(load_snapshot())
    rows = member_report_rows(summary, f"Member Report - {year}")

    with output.open("w", newline="", encoding="utf-8") as f:
        csv.writer(f).writerows(rows)
    console.print(f"[green]✓[/green] Wrote {len(summary.members)} member rows to {output}")


@app.command("contributions")
def contributions(
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Report year (default: current)"),
):
    """Show a year's contributions by month and by member."""
    year = year or date.today().year
    snapshot = load_snapshot()
    by_month = contributions_by_month(list(snapshot.contributions), year)
    if not by_month:
        console.print(f"[yellow]No contributions in {year}[/yellow]")
        return

    sym = get_config().currency_symbol
    month_table = Table(title=f"Contributions by Month — {year}")
    month_table.add_column("Month")
    month_table.add_column(f"Amount ({sym})", justify="right")
    for month, amount in by_month.items():
        month_table.add_row(month, f"{amount:,.2f}")
    console.print(month_table)

    member_table = Table(title=f"Contributions by Member — {year}")
    member_table.add_column("Member", style="bold")
    member_table.add_column(f"Amount ({sym})", justify="right")
    by_member = contributions_by_member(list(snapshot.contributions), list(snapshot.members), year)
    for name, amount in sorted(by_member.items(), key=lambda kv: kv[1], reverse=True):
        member_table.add_row(name, f"{amount:,.2f}")
    console.print(member_table)

    total = sum(by_month.values(), Decimal("0"))
    console.print(f"\n  Total {year}: [bold green]{sym}{total:,.2f}[/bold green]\n")
