"""Per-member share counts replayed from transaction allocations."""

from decimal import Decimal

from ..models import LedgerSnapshot, TransactionType
from ._refs import allocations_by_transaction, check_references, require_security

ShareKey = tuple[int, int]  # (member_id, security_id)


def shares_by_member_and_security(snapshot: LedgerSnapshot) -> dict[ShareKey, Decimal]:
    """Fold every allocation into a signed share count per (member, security).

    Each allocation moves ``quantity × percentage`` shares: added for a buy,
    subtracted for a sell. Negative results are reported as-is; an
    economically inconsistent ledger is not corrected here.

    Raises:
        ReferenceNotFoundError: a record names an unknown member or security.
    """
    check_references(snapshot)
    grouped = allocations_by_transaction(snapshot)
    shares: dict[ShareKey, Decimal] = {}
    for tx in snapshot.transactions:
        for alloc in grouped.get(tx.id, ()):
            delta = tx.quantity * alloc.percentage
            if tx.transaction_type == TransactionType.SELL:
                delta = -delta
            key = (alloc.member_id, tx.security_id)
            shares[key] = shares.get(key, Decimal("0")) + delta
    return shares


def shares_for_security(security_id: int, snapshot: LedgerSnapshot) -> dict[int, Decimal]:
    """Share count per member for one security, in snapshot member order.

    Members who never had an allocation on the security are absent.
    """
    require_security(snapshot, security_id)
    shares = shares_by_member_and_security(snapshot)
    result: dict[int, Decimal] = {}
    for m in snapshot.members:
        key = (m.id, security_id)
        if key in shares:
            result[m.id] = shares[key]
    return result


def ownership_percentages(snapshot: LedgerSnapshot) -> dict[ShareKey, Decimal]:
    """Each member's percentage (0-100) of a security's outstanding shares."""
    shares = shares_by_member_and_security(snapshot)
    totals: dict[int, Decimal] = {}
    for (_member_id, security_id), count in shares.items():
        totals[security_id] = totals.get(security_id, Decimal("0")) + count

    result: dict[ShareKey, Decimal] = {}
    for key, count in shares.items():
        total = totals[key[1]]
        result[key] = count / total * 100 if total > 0 else Decimal("0")
    return result
