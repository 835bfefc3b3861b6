"""Proportional sell-allocation proposals."""

from decimal import Decimal

from ..models import LedgerSnapshot, SellAllocation
from .shares import shares_for_security


def propose_sell_allocations(
    security_id: int,
    quantity: Decimal,
    price_per_unit: Decimal,
    snapshot: LedgerSnapshot,
) -> list[SellAllocation]:
    """Split a prospective sale across current holders by share count.

    Members with zero or negative shares are left out. Returns an empty list
    when nothing is outstanding, or when the outstanding total is negative
    because the ledger is oversold; the sale must then be allocated by hand.
    Amounts are unrounded; see ``validation.reconcile_proposals``.
    """
    holdings = shares_for_security(security_id, snapshot)
    total_shares = sum(holdings.values(), Decimal("0"))
    if total_shares <= 0:
        return []

    total_amount = quantity * price_per_unit
    proposals = []
    for member_id, count in holdings.items():
        if count <= 0:
            continue
        percentage = count / total_shares
        proposals.append(SellAllocation(
            member_id=member_id,
            amount=total_amount * percentage,
            percentage=percentage,
        ))
    return proposals
