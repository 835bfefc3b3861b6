"""Reference checks and lookups shared by the aggregators."""

from collections import defaultdict

from ..exceptions import ReferenceNotFoundError
from ..models import Allocation, LedgerSnapshot, Member, Security


def member_index(snapshot: LedgerSnapshot) -> dict[int, Member]:
    return {m.id: m for m in snapshot.members}


def security_index(snapshot: LedgerSnapshot) -> dict[int, Security]:
    return {s.id: s for s in snapshot.securities}


def check_references(snapshot: LedgerSnapshot) -> None:
    """Raise ReferenceNotFoundError for the first dangling member/security id.

    Allocations whose transaction is missing are left alone; the aggregators
    skip them because they have no buy/sell direction.
    """
    members = member_index(snapshot)
    securities = security_index(snapshot)
    for c in snapshot.contributions:
        if c.member_id not in members:
            raise ReferenceNotFoundError("member", c.member_id)
    for t in snapshot.transactions:
        if t.security_id not in securities:
            raise ReferenceNotFoundError("security", t.security_id)
    for a in snapshot.allocations:
        if a.member_id not in members:
            raise ReferenceNotFoundError("member", a.member_id)


def require_security(snapshot: LedgerSnapshot, security_id: int) -> Security:
    for s in snapshot.securities:
        if s.id == security_id:
            return s
    raise ReferenceNotFoundError("security", security_id)


def allocations_by_transaction(snapshot: LedgerSnapshot) -> dict[int, list[Allocation]]:
    grouped: dict[int, list[Allocation]] = defaultdict(list)
    for a in snapshot.allocations:
        grouped[a.transaction_id].append(a)
    return grouped
