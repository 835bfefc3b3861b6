"""Family member management commands."""

import dataclasses
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from ...core.accounting import cash_by_member
from ...core.config import get_config
from ...core.models import Member
from ...data.repositories.members_repo import MembersRepository
from ...data.snapshot import load_snapshot

app = typer.Typer(help="Manage family members")
console = Console()
repo = MembersRepository()


def _get_member_or_exit(member_id: int) -> Member:
    m = repo.get_by_id(member_id)
    if not m:
        console.print(f"[red]Member {member_id} not found[/red]")
        raise typer.Exit(1)
    return m


@app.command("add")
def add(
    name: str = typer.Argument(..., help="Display name"),
    email: str = typer.Option("", "--email", "-e", help="Email address"),
    admin: bool = typer.Option(False, "--admin", help="Grant admin role"),
):
    """Add a family member."""
    if not name.strip():
        console.print("[red]Name must not be empty[/red]")
        raise typer.Exit(1)
    m = repo.create(Member(name=name, email=email, is_admin=admin))
    console.print(f"[green]✓[/green] Added member [bold]{m.name}[/bold] (ID {m.id})")


@app.command("list")
def list_members():
    """List members with their cash position."""
    members = repo.list_all()
    if not members:
        console.print("[yellow]No members yet. Add one: fp members add <name>[/yellow]")
        return

    sym = get_config().currency_symbol
    cash = cash_by_member(load_snapshot())

    table = Table(title="Family Members")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Email")
    table.add_column("Role")
    table.add_column(f"Contributed ({sym})", justify="right")
    table.add_column(f"Available Cash ({sym})", justify="right")

    for m in members:
        c = cash[m.id]
        color = "green" if c.available_cash >= 0 else "red"
        table.add_row(
            str(m.id),
            m.name,
            m.email or "—",
            "admin" if m.is_admin else "member",
            f"{c.total_contributions:,.2f}",
            f"[{color}]{c.available_cash:,.2f}[/{color}]",
        )

    console.print(table)


@app.command("edit")
def edit(
    member_id: int = typer.Argument(..., help="Member ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New display name"),
    email: Optional[str] = typer.Option(None, "--email", "-e", help="New email"),
    admin: Optional[bool] = typer.Option(None, "--admin/--no-admin", help="Change admin role"),
):
    """Edit a member's name, email or role."""
    m = _get_member_or_exit(member_id)
    changes = {}
    if name is not None:
        changes["name"] = name.strip()
    if email is not None:
        changes["email"] = email.strip()
    if admin is not None:
        changes["is_admin"] = admin
    if not changes:
        console.print("[yellow]Nothing to change[/yellow]")
        return
    updated = repo.save(dataclasses.replace(m, **changes))
    console.print(f"[green]✓[/green] Updated member {updated.id}: {updated.name}")


@app.command("remove")
def remove(
    member_id: int = typer.Argument(..., help="Member ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a member together with their contributions and allocations."""
    m = _get_member_or_exit(member_id)
    if not yes and not Confirm.ask(
        f"Delete {m.name} and all their contributions and allocations?", console=console
    ):
        raise typer.Abort()
    repo.delete(member_id)
    console.print(f"[green]✓[/green] Deleted member {m.name}")
