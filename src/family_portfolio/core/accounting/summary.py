"""Portfolio-wide and per-security valuation summaries.

Combines the share, cash and cost-basis aggregators with each security's
current price. A security with no known price is valued at zero. Every
division by a zero (or negative) denominator falls back to zero.
"""

from decimal import Decimal

from ..models import (
    LedgerSnapshot,
    MemberSummary,
    PortfolioSummary,
    Security,
    SecurityOwnership,
    SecuritySummary,
)
from ._refs import require_security
from .cash import cash_by_member
from .cost_basis import cost_basis_by_member_and_security
from .shares import shares_by_member_and_security


def _pct(part: Decimal, whole: Decimal) -> Decimal:
    if whole > 0:
        return part / whole * 100
    return Decimal("0")


def build_portfolio_summary(snapshot: LedgerSnapshot) -> PortfolioSummary:
    """Value, cash, cost basis, gain/loss and ownership share per member.

    Portfolio totals are sums of the member rows. ``total_gain_loss`` is
    ``total_value - total_cash - total_cost_basis``, which differs from the
    sum of member gains when some member has negative cash or basis.
    """
    cash = cash_by_member(snapshot)
    shares = shares_by_member_and_security(snapshot)
    basis = cost_basis_by_member_and_security(snapshot)

    rows = []
    for m in snapshot.members:
        stock_value = Decimal("0")
        cost_basis = Decimal("0")
        for s in snapshot.securities:
            stock_value += shares.get((m.id, s.id), Decimal("0")) * s.price_or_zero
            cost_basis += basis.get((m.id, s.id), Decimal("0"))

        member_cash = cash[m.id]
        gain_loss = stock_value - cost_basis
        rows.append(dict(
            member_id=m.id,
            member_name=m.name,
            total_contributions=member_cash.total_contributions,
            stock_value=stock_value,
            available_cash=member_cash.available_cash,
            total_value=stock_value + member_cash.available_cash,
            cost_basis=cost_basis,
            gain_loss=gain_loss,
            gain_loss_pct=_pct(gain_loss, cost_basis),
        ))

    total_value = sum((r["total_value"] for r in rows), Decimal("0"))
    total_cost_basis = sum((r["cost_basis"] for r in rows), Decimal("0"))
    total_cash = sum((r["available_cash"] for r in rows), Decimal("0"))
    total_gain_loss = total_value - total_cash - total_cost_basis

    members = tuple(
        MemberSummary(ownership_pct=_pct(r["total_value"], total_value), **r)
        for r in rows
    )
    return PortfolioSummary(
        total_value=total_value,
        total_cost_basis=total_cost_basis,
        total_gain_loss=total_gain_loss,
        total_gain_loss_pct=_pct(total_gain_loss, total_cost_basis),
        total_cash=total_cash,
        members=members,
    )


def build_security_summary(security: Security, snapshot: LedgerSnapshot) -> SecuritySummary:
    """Holders of one security and their share of its outstanding units.

    Only members with a positive share count are listed; a member who sold
    out keeps any leftover cost basis but drops off the breakdown.

    Raises:
        ReferenceNotFoundError: the security is not in the snapshot.
    """
    require_security(snapshot, security.id)
    shares = shares_by_member_and_security(snapshot)
    basis = cost_basis_by_member_and_security(snapshot)
    price = security.price_or_zero

    holders = []
    total_shares = Decimal("0")
    total_basis = Decimal("0")
    for m in snapshot.members:
        count = shares.get((m.id, security.id), Decimal("0"))
        if count <= 0:
            continue
        total_shares += count
        total_basis += basis.get((m.id, security.id), Decimal("0"))
        holders.append((m, count))

    ownership = tuple(
        SecurityOwnership(
            member_id=m.id,
            member_name=m.name,
            shares=count,
            value=count * price,
            percentage=_pct(count, total_shares),
        )
        for m, count in holders
    )
    current_value = total_shares * price
    gain_loss = current_value - total_basis
    return SecuritySummary(
        security=security,
        shares_owned=total_shares,
        current_value=current_value,
        cost_basis=total_basis,
        gain_loss=gain_loss,
        gain_loss_pct=_pct(gain_loss, total_basis),
        ownership=ownership,
    )
