"""Transaction commands: buy, sell, propose a sell split, list."""

from decimal import Decimal, InvalidOperation
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.accounting import propose_sell_allocations
from ...core.config import get_config
from ...core.exceptions import FamilyPortfolioError, ReferenceNotFoundError
from ...core.models import AllocationDraft, LedgerSnapshot, Transaction, TransactionType
from ...core.validation import (
    build_allocations,
    cash_shortfalls,
    check_sell_quantity,
    reconcile_proposals,
    validate_transaction,
)
from ...data.repositories.allocations_repo import AllocationsRepository
from ...data.repositories.transactions_repo import TransactionsRepository
from ...data.snapshot import load_snapshot
from .contributions import parse_date
from .securities import get_security_or_exit

app = typer.Typer(help="Record transactions")
console = Console()
tx_repo = TransactionsRepository()
allocations_repo = AllocationsRepository()

ALLOC_HELP = "Allocation as MEMBER_ID=AMOUNT (repeatable)"


def parse_allocation_specs(specs: list[str]) -> dict[int, Decimal]:
    """Parse ``["1=600", "2=400"]`` into ``{1: Decimal("600"), 2: Decimal("400")}``."""
    amounts: dict[int, Decimal] = {}
    for spec in specs:
        member_part, sep, amount_part = spec.partition("=")
        try:
            if not sep:
                raise ValueError
            member_id = int(member_part.strip())
            amount = Decimal(amount_part.strip())
        except (ValueError, InvalidOperation):
            console.print(f"[red]Invalid allocation '{spec}'. Use MEMBER_ID=AMOUNT[/red]")
            raise typer.Exit(1)
        if member_id in amounts:
            console.print(f"[red]Member {member_id} is allocated twice[/red]")
            raise typer.Exit(1)
        amounts[member_id] = amount
    return amounts


def _parse_trade(quantity: str, price: str) -> tuple[Decimal, Decimal]:
    try:
        qty = Decimal(quantity)
        prc = Decimal(price)
    except InvalidOperation:
        console.print("[red]Invalid number format for quantity or price[/red]")
        raise typer.Exit(1)
    try:
        validate_transaction(qty, prc)
    except FamilyPortfolioError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    return qty, prc


def _print_drafts(title: str, drafts: list[AllocationDraft], snapshot: LedgerSnapshot):
    sym = get_config().currency_symbol
    names = {m.id: m.name for m in snapshot.members}
    table = Table(title=title)
    table.add_column("Member", style="bold")
    table.add_column(f"Amount ({sym})", justify="right")
    table.add_column("Share", justify="right")
    for d in drafts:
        table.add_row(names.get(d.member_id, str(d.member_id)), f"{d.amount:,.2f}", f"{d.percentage * 100:.2f}%")
    console.print(table)


def _record_transaction(
    symbol: str,
    tx_type: TransactionType,
    quantity: str,
    price: str,
    when: Optional[str],
    notes: str,
    alloc_specs: Optional[list[str]],
):
    security = get_security_or_exit(symbol)
    qty, prc = _parse_trade(quantity, price)
    trade_date = parse_date(when)
    total = qty * prc
    cfg = get_config()
    snapshot = load_snapshot()

    try:
        if tx_type == TransactionType.SELL:
            check_sell_quantity(security.id, qty, snapshot)

        if alloc_specs:
            drafts = build_allocations(
                total, parse_allocation_specs(alloc_specs), tolerance=cfg.allocation_tolerance,
            )
        elif tx_type == TransactionType.SELL:
            proposals = propose_sell_allocations(security.id, qty, prc, snapshot)
            drafts = reconcile_proposals(proposals, total)
        else:
            console.print("[red]A buy needs at least one --alloc MEMBER_ID=AMOUNT[/red]")
            raise typer.Exit(1)

        known = {m.id for m in snapshot.members}
        for d in drafts:
            if d.member_id not in known:
                raise ReferenceNotFoundError("member", d.member_id)

        if tx_type == TransactionType.BUY:
            names = {m.id: m.name for m in snapshot.members}
            for member_id, gap in cash_shortfalls(snapshot, drafts).items():
                console.print(
                    f"[yellow]⚠ {names[member_id]} is allocated {cfg.currency_symbol}{gap:,.2f} "
                    f"more than their available cash[/yellow]"
                )

        tx = tx_repo.create_with_allocations(
            Transaction(
                security_id=security.id, transaction_type=tx_type, trade_date=trade_date,
                quantity=qty, price_per_unit=prc, notes=notes,
            ),
            drafts,
        )
    except FamilyPortfolioError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    action = "Bought" if tx_type == TransactionType.BUY else "Sold"
    console.print(
        f"[green]{action} {qty} × {security.symbol} @ {cfg.currency_symbol}{prc:,.4f} "
        f"= {cfg.currency_symbol}{tx.total_amount:,.2f}[/green]"
    )
    _print_drafts("Allocations", drafts, snapshot)


@app.command("buy")
def buy(
    symbol: str = typer.Argument(..., help="Ticker symbol"),
    quantity: str = typer.Argument(..., help="Number of shares (fractions allowed)"),
    price: str = typer.Argument(..., help="Price per share"),
    alloc: Optional[list[str]] = typer.Option(None, "--alloc", "-a", help=ALLOC_HELP),
    when: str = typer.Option(None, "--date", "-d", help="Trade date (YYYY-MM-DD)"),
    notes: str = typer.Option("", "--notes", "-n", help="Notes"),
):
    """Record a buy split across members."""
    _record_transaction(symbol, TransactionType.BUY, quantity, price, when, notes, alloc)


@app.command("sell")
def sell(
    symbol: str = typer.Argument(..., help="Ticker symbol"),
    quantity: str = typer.Argument(..., help="Number of shares (fractions allowed)"),
    price: str = typer.Argument(..., help="Price per share"),
    alloc: Optional[list[str]] = typer.Option(
        None, "--alloc", "-a", help=f"{ALLOC_HELP}; defaults to a split by current ownership",
    ),
    when: str = typer.Option(None, "--date", "-d", help="Trade date (YYYY-MM-DD)"),
    notes: str = typer.Option("", "--notes", "-n", help="Notes"),
):
    """Record a sell; proceeds follow current ownership unless --alloc is given."""
    _record_transaction(symbol, TransactionType.SELL, quantity, price, when, notes, alloc)


@app.command("propose-sell")
def propose_sell(
    symbol: str = typer.Argument(..., help="Ticker symbol"),
    quantity: str = typer.Argument(..., help="Number of shares"),
    price: str = typer.Argument(..., help="Price per share"),
):
    """Preview how a sale would be split by current ownership (nothing is saved)."""
    security = get_security_or_exit(symbol)
    qty, prc = _parse_trade(quantity, price)
    snapshot = load_snapshot()
    proposals = propose_sell_allocations(security.id, qty, prc, snapshot)
    if not proposals:
        console.print(
            f"[yellow]No outstanding shares of {security.symbol}; allocate the sale manually[/yellow]"
        )
        return
    _print_drafts(
        f"Proposed split: sell {qty} {security.symbol}",
        reconcile_proposals(proposals, qty * prc),
        snapshot,
    )


@app.command("list")
def list_transactions(
    symbol: Optional[str] = typer.Option(None, "--symbol", "-s", help="Only this security"),
):
    """List transactions with their allocations."""
    snapshot = load_snapshot()
    txs = list(snapshot.transactions)
    if symbol:
        security = get_security_or_exit(symbol)
        txs = [t for t in txs if t.security_id == security.id]
    if not txs:
        console.print("[yellow]No transactions found[/yellow]")
        return

    sym = get_config().currency_symbol
    names = {m.id: m.name for m in snapshot.members}
    symbols = {s.id: s.symbol for s in snapshot.securities}

    table = Table(title="Transactions")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Symbol", style="bold")
    table.add_column("Qty", justify="right")
    table.add_column(f"Price ({sym})", justify="right")
    table.add_column(f"Total ({sym})", justify="right")
    table.add_column("Allocations")
    table.add_column("Notes")

    for tx in txs:
        color = "green" if tx.transaction_type == TransactionType.BUY else "red"
        split = ", ".join(
            f"{names.get(a.member_id, a.member_id)} {a.percentage * 100:.1f}%"
            for a in allocations_repo.list_by_transaction(tx.id)
        )
        table.add_row(
            str(tx.id),
            tx.trade_date.isoformat(),
            f"[{color}]{tx.transaction_type.value.upper()}[/{color}]",
            symbols.get(tx.security_id, "?"),
            f"{tx.quantity:,.4f}",
            f"{tx.price_per_unit:,.4f}",
            f"{tx.total_amount:,.2f}",
            split,
            tx.notes,
        )

    console.print(table)


@app.command("remove")
def remove(transaction_id: int = typer.Argument(..., help="Transaction ID")):
    """Delete a transaction and its allocations."""
    if not tx_repo.delete(transaction_id):
        console.print(f"[red]Transaction {transaction_id} not found[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Deleted transaction {transaction_id}")
