"""Net cash each member has invested per security."""

from decimal import Decimal

from ..models import LedgerSnapshot, TransactionType
from ._refs import check_references
from .shares import ShareKey


def cost_basis_by_member_and_security(snapshot: LedgerSnapshot) -> dict[ShareKey, Decimal]:
    """Buy allocation amounts minus sell allocation amounts per (member, security).

    This tracks net cash invested, not weighted-average cost: selling at a
    profit can push the basis below zero, and that figure is kept.
    """
    check_references(snapshot)
    tx_by_id = {t.id: t for t in snapshot.transactions}
    basis: dict[ShareKey, Decimal] = {}
    for a in snapshot.allocations:
        tx = tx_by_id.get(a.transaction_id)
        if tx is None:
            continue
        key = (a.member_id, tx.security_id)
        current = basis.get(key, Decimal("0"))
        if tx.transaction_type == TransactionType.BUY:
            basis[key] = current + a.amount
        else:
            basis[key] = current - a.amount
    return basis
