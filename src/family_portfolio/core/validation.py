"""Write-time ledger checks.

The accounting engine computes through inconsistent data; these helpers are
what the CLI and repositories use to keep bad rows out of the ledger in the
first place.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .accounting import cash_by_member, shares_for_security
from .exceptions import (
    AllocationMismatchError,
    InsufficientSharesError,
    InvalidContributionError,
    InvalidTransactionError,
    ReferenceNotFoundError,
)
from .models import AllocationDraft, LedgerSnapshot, SellAllocation

ALLOCATION_TOLERANCE = Decimal("0.01")
SHARE_TOLERANCE = Decimal("0.000001")
CENT = Decimal("0.01")


def allocation_total(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, Decimal("0"))


def allocations_match_total(
    total: Decimal,
    amounts: Iterable[Decimal],
    tolerance: Decimal = ALLOCATION_TOLERANCE,
) -> bool:
    return abs(total - allocation_total(amounts)) <= tolerance


def validate_transaction(quantity: Decimal, price_per_unit: Decimal) -> None:
    if quantity <= 0:
        raise InvalidTransactionError(f"Quantity must be positive, got {quantity}")
    if price_per_unit <= 0:
        raise InvalidTransactionError(f"Price per unit must be positive, got {price_per_unit}")


def validate_contribution(amount: Decimal) -> None:
    if amount <= 0:
        raise InvalidContributionError(f"Contribution amount must be positive, got {amount}")


def build_allocations(
    transaction_total: Decimal,
    amounts_by_member: dict[int, Decimal],
    tolerance: Decimal = ALLOCATION_TOLERANCE,
) -> list[AllocationDraft]:
    """Turn {member_id: amount} into allocation drafts with percentages.

    Zero amounts are dropped. The amounts must add up to the transaction
    total within ``tolerance``.

    Raises:
        InvalidTransactionError: non-positive total or a negative amount.
        AllocationMismatchError: amounts do not sum to the total.
    """
    if transaction_total <= 0:
        raise InvalidTransactionError("Transaction total must be positive")
    for member_id, amount in amounts_by_member.items():
        if amount < 0:
            raise InvalidTransactionError(f"Allocation for member {member_id} is negative")

    allocated = allocation_total(amounts_by_member.values())
    if not allocations_match_total(transaction_total, [allocated], tolerance):
        raise AllocationMismatchError(
            f"Allocations sum to {allocated:,.2f} but the transaction total is "
            f"{transaction_total:,.2f}"
        )

    return [
        AllocationDraft(
            member_id=member_id,
            amount=amount,
            percentage=min(amount / transaction_total, Decimal("1")),
        )
        for member_id, amount in amounts_by_member.items()
        if amount > 0
    ]


def reconcile_proposals(proposals: list[SellAllocation], total: Decimal) -> list[AllocationDraft]:
    """Round proposed amounts to cents so they add up to the rounded total.

    The rounding remainder is spread a cent at a time over the holders in
    descending-percentage order (first holder wins ties), never taking
    anyone below zero. Holders left at zero are dropped.

    Raises:
        AllocationMismatchError: the remainder cannot be placed.
    """
    if not proposals:
        return []
    target = total.quantize(CENT, rounding=ROUND_HALF_UP)
    amounts = [p.amount.quantize(CENT, rounding=ROUND_HALF_UP) for p in proposals]
    remainder = target - sum(amounts, Decimal("0"))
    order = sorted(range(len(proposals)), key=lambda i: proposals[i].percentage, reverse=True)
    step = CENT if remainder > 0 else -CENT
    while remainder:
        moved = False
        for i in order:
            if not remainder:
                break
            if step < 0 and amounts[i] <= 0:
                continue
            amounts[i] += step
            remainder -= step
            moved = True
        if not moved:
            raise AllocationMismatchError(
                f"Cannot split {target:,.2f} across the proposed holders"
            )

    return [
        AllocationDraft(
            member_id=p.member_id,
            amount=amount,
            percentage=min(amount / total, Decimal("1")),
        )
        for p, amount in zip(proposals, amounts)
        if amount > 0
    ]


def cash_shortfalls(snapshot: LedgerSnapshot, drafts: list[AllocationDraft]) -> dict[int, Decimal]:
    """Members whose buy allocation exceeds their available cash, with the gap."""
    cash = cash_by_member(snapshot)
    shortfalls: dict[int, Decimal] = {}
    for d in drafts:
        if d.member_id not in cash:
            raise ReferenceNotFoundError("member", d.member_id)
        available = cash[d.member_id].available_cash
        if d.amount > available:
            shortfalls[d.member_id] = d.amount - available
    return shortfalls


def check_sell_quantity(security_id: int, quantity: Decimal, snapshot: LedgerSnapshot) -> Decimal:
    """Return outstanding shares; raise if the sale would exceed them."""
    outstanding = sum(shares_for_security(security_id, snapshot).values(), Decimal("0"))
    if quantity > outstanding + SHARE_TOLERANCE:
        raise InsufficientSharesError(
            f"Cannot sell {quantity} shares, only {outstanding:.6f} outstanding"
        )
    return outstanding
