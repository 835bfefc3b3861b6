"""Ownership and allocation accounting.

Pure functions over a LedgerSnapshot. No database access, no I/O; each call
builds and discards its own accumulators, so results are identical for an
unchanged snapshot.

Usage:
    from family_portfolio.core.accounting import build_portfolio_summary
"""

from .cash import cash_by_member, cash_for_member
from .cost_basis import cost_basis_by_member_and_security
from .sell import propose_sell_allocations
from .shares import ownership_percentages, shares_by_member_and_security, shares_for_security
from .summary import build_portfolio_summary, build_security_summary

__all__ = [
    "shares_by_member_and_security",
    "shares_for_security",
    "ownership_percentages",
    "cash_by_member",
    "cash_for_member",
    "cost_basis_by_member_and_security",
    "build_portfolio_summary",
    "build_security_summary",
    "propose_sell_allocations",
]
