"""Contribution commands: cash a member puts into the pool."""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import get_config
from ...core.exceptions import FamilyPortfolioError
from ...core.models import Contribution
from ...data.repositories.contributions_repo import ContributionsRepository
from ...data.repositories.members_repo import MembersRepository

app = typer.Typer(help="Cash contributions")
console = Console()
repo = ContributionsRepository()
members_repo = MembersRepository()


def parse_date(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print("[red]Invalid date format. Use YYYY-MM-DD[/red]")
        raise typer.Exit(1)


@app.command("add")
def add(
    member_id: int = typer.Argument(..., help="Member ID"),
    amount: str = typer.Argument(..., help="Amount deposited"),
    when: str = typer.Option(None, "--date", "-d", help="Contribution date (YYYY-MM-DD)"),
    notes: str = typer.Option("", "--notes", "-n", help="Notes"),
):
    """Record a cash contribution."""
    m = members_repo.get_by_id(member_id)
    if not m:
        console.print(f"[red]Member {member_id} not found[/red]")
        raise typer.Exit(1)

    try:
        value = Decimal(amount)
    except InvalidOperation:
        console.print("[red]Invalid number format for amount[/red]")
        raise typer.Exit(1)

    try:
        c = repo.create(Contribution(
            member_id=member_id, amount=value, contribution_date=parse_date(when), notes=notes,
        ))
    except FamilyPortfolioError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    sym = get_config().currency_symbol
    console.print(
        f"[green]✓[/green] {m.name} contributed {sym}{c.amount:,.2f} on {c.contribution_date.isoformat()}"
    )


@app.command("list")
def list_contributions(
    member_id: Optional[int] = typer.Option(None, "--member", "-m", help="Only this member"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Only this year"),
):
    """List contributions, oldest first."""
    if member_id is not None:
        rows = repo.list_by_member(member_id)
    elif year is not None:
        rows = repo.list_by_year(year)
    else:
        rows = repo.list_all()
    if member_id is not None and year is not None:
        rows = [c for c in rows if c.contribution_date.year == year]

    if not rows:
        console.print("[yellow]No contributions found[/yellow]")
        return

    sym = get_config().currency_symbol
    names = {m.id: m.name for m in members_repo.list_all()}

    table = Table(title="Contributions")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Date")
    table.add_column("Member", style="bold")
    table.add_column(f"Amount ({sym})", justify="right")
    table.add_column("Notes")

    total = Decimal("0")
    for c in rows:
        total += c.amount
        table.add_row(
            str(c.id),
            c.contribution_date.isoformat(),
            names.get(c.member_id, "Unknown"),
            f"[green]{c.amount:,.2f}[/green]",
            c.notes,
        )

    console.print(table)
    console.print(f"\n  Total: [bold green]{sym}{total:,.2f}[/bold green]\n")


@app.command("remove")
def remove(contribution_id: int = typer.Argument(..., help="Contribution ID")):
    """Delete a contribution."""
    if not repo.delete(contribution_id):
        console.print(f"[red]Contribution {contribution_id} not found[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Deleted contribution {contribution_id}")
