"""Config commands: fp config show / fp config set."""

import dataclasses
from decimal import Decimal, InvalidOperation

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import AppConfig, get_config, save_config

app = typer.Typer(help="Show or change settings")
console = Console()

_FIELDS = {f.name: f for f in dataclasses.fields(AppConfig)}


@app.command("show")
def show():
    """Print current settings."""
    cfg = get_config()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="dim")
    table.add_column("Value")
    for name in _FIELDS:
        table.add_row(name, str(getattr(cfg, name)))
    console.print(table)


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help=f"One of: {', '.join(_FIELDS)}"),
    value: str = typer.Argument(..., help="New value"),
):
    """Change one setting and save config.json."""
    if key not in _FIELDS:
        console.print(f"[red]Unknown setting '{key}'. Valid: {', '.join(_FIELDS)}[/red]")
        raise typer.Exit(1)

    current = getattr(get_config(), key)
    try:
        if isinstance(current, Decimal):
            parsed = Decimal(value)
        elif isinstance(current, int):
            parsed = int(value)
        else:
            parsed = value
    except (ValueError, InvalidOperation):
        console.print(f"[red]Invalid value for {key}: {value}[/red]")
        raise typer.Exit(1)

    save_config(dataclasses.replace(get_config(), **{key: parsed}))
    console.print(f"[green]✓[/green] {key} = {parsed}")
