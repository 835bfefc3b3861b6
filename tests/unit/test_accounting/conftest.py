"""A small two-member ledger shared by the accounting tests."""

from datetime import date
from decimal import Decimal

import pytest

from family_portfolio.core.models import (
    Allocation,
    Contribution,
    LedgerSnapshot,
    Member,
    Security,
    Transaction,
    TransactionType,
)


@pytest.fixture
def family_ledger():
    """A and B each put in 1000; X bought 10 @ 100, split 600/400; X now 120."""
    return LedgerSnapshot(
        members=[Member(id=1, name="A"), Member(id=2, name="B")],
        contributions=[
            Contribution(id=1, member_id=1, amount=Decimal("1000"), contribution_date=date(2024, 1, 2)),
            Contribution(id=2, member_id=2, amount=Decimal("1000"), contribution_date=date(2024, 1, 3)),
        ],
        securities=[Security(id=10, symbol="X", current_price=Decimal("120"))],
        transactions=[
            Transaction(
                id=100, security_id=10, transaction_type=TransactionType.BUY,
                trade_date=date(2024, 1, 10), quantity=Decimal("10"),
                price_per_unit=Decimal("100"),
            ),
        ],
        allocations=[
            Allocation(id=1, transaction_id=100, member_id=1, amount=Decimal("600"), percentage=Decimal("0.6")),
            Allocation(id=2, transaction_id=100, member_id=2, amount=Decimal("400"), percentage=Decimal("0.4")),
        ],
    )
