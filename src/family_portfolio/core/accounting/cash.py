"""Per-member cash pool: contributions minus buys plus sell proceeds."""

from decimal import Decimal

from ..exceptions import ReferenceNotFoundError
from ..models import LedgerSnapshot, MemberCash, TransactionType
from ._refs import check_references


def cash_by_member(snapshot: LedgerSnapshot) -> dict[int, MemberCash]:
    """Cash figures for every member in the snapshot, active or not.

    ``available_cash = total_contributions - total_buys + total_sells``.
    A negative balance means the ledger over-allocated someone; it is
    reported, not rejected.
    """
    check_references(snapshot)
    tx_types = {t.id: t.transaction_type for t in snapshot.transactions}

    contributed: dict[int, Decimal] = {}
    for c in snapshot.contributions:
        contributed[c.member_id] = contributed.get(c.member_id, Decimal("0")) + c.amount

    bought: dict[int, Decimal] = {}
    sold: dict[int, Decimal] = {}
    for a in snapshot.allocations:
        tx_type = tx_types.get(a.transaction_id)
        if tx_type == TransactionType.BUY:
            bought[a.member_id] = bought.get(a.member_id, Decimal("0")) + a.amount
        elif tx_type == TransactionType.SELL:
            sold[a.member_id] = sold.get(a.member_id, Decimal("0")) + a.amount

    result: dict[int, MemberCash] = {}
    for m in snapshot.members:
        total_contributions = contributed.get(m.id, Decimal("0"))
        total_buys = bought.get(m.id, Decimal("0"))
        total_sells = sold.get(m.id, Decimal("0"))
        result[m.id] = MemberCash(
            member_id=m.id,
            member_name=m.name,
            total_contributions=total_contributions,
            total_buys=total_buys,
            total_sells=total_sells,
            available_cash=total_contributions - total_buys + total_sells,
        )
    return result


def cash_for_member(member_id: int, snapshot: LedgerSnapshot) -> MemberCash:
    cash = cash_by_member(snapshot)
    if member_id not in cash:
        raise ReferenceNotFoundError("member", member_id)
    return cash[member_id]
