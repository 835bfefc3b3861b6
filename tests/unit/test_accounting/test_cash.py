"""Tests for per-member cash pools."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from family_portfolio.core.accounting import cash_by_member, cash_for_member
from family_portfolio.core.exceptions import ReferenceNotFoundError
from family_portfolio.core.models import (
    Allocation,
    Contribution,
    LedgerSnapshot,
    Member,
    Transaction,
    TransactionType,
)


def _sell(snapshot, tx_id, qty, price, splits):
    tx = Transaction(
        id=tx_id, security_id=10, transaction_type=TransactionType.SELL,
        trade_date=date(2024, 2, 1), quantity=Decimal(qty), price_per_unit=Decimal(price),
    )
    allocs = [
        Allocation(transaction_id=tx_id, member_id=m, amount=Decimal(a), percentage=Decimal(p))
        for m, a, p in splits
    ]
    return replace(
        snapshot,
        transactions=snapshot.transactions + (tx,),
        allocations=snapshot.allocations + tuple(allocs),
    )


class TestCashByMember:
    def test_contributions_minus_buys(self, family_ledger):
        cash = cash_by_member(family_ledger)
        assert cash[1].available_cash == Decimal("400")
        assert cash[2].available_cash == Decimal("600")
        assert cash[1].total_buys == Decimal("600")
        assert cash[1].total_sells == Decimal("0")

    def test_sell_proceeds_return_to_cash(self, family_ledger):
        snap = _sell(family_ledger, 101, "5", "120", [(1, "360", "0.6"), (2, "240", "0.4")])
        cash = cash_by_member(snap)
        assert cash[1].total_sells == Decimal("360")
        assert cash[1].available_cash == Decimal("760")
        assert cash[2].available_cash == Decimal("840")

    def test_every_member_present_in_order(self, family_ledger):
        snap = replace(family_ledger, members=family_ledger.members + (Member(id=3, name="C"),))
        cash = cash_by_member(snap)
        assert list(cash) == [1, 2, 3]
        assert cash[3].available_cash == Decimal("0")
        assert cash[3].member_name == "C"

    def test_overspent_member_goes_negative(self, family_ledger):
        short = replace(family_ledger.contributions[0], amount=Decimal("500"))
        snap = replace(family_ledger, contributions=(short, family_ledger.contributions[1]))
        assert cash_by_member(snap)[1].available_cash == Decimal("-100")

    def test_orphan_allocation_ignored(self, family_ledger):
        stray = Allocation(transaction_id=999, member_id=1, amount=Decimal("77"), percentage=Decimal("1"))
        snap = replace(family_ledger, allocations=family_ledger.allocations + (stray,))
        assert cash_by_member(snap)[1].available_cash == Decimal("400")

    def test_contribution_for_unknown_member_raises(self, family_ledger):
        bad = Contribution(member_id=9, amount=Decimal("1"), contribution_date=date(2024, 1, 1))
        snap = replace(family_ledger, contributions=family_ledger.contributions + (bad,))
        with pytest.raises(ReferenceNotFoundError):
            cash_by_member(snap)

    def test_empty_snapshot(self):
        assert cash_by_member(LedgerSnapshot()) == {}


class TestCashForMember:
    def test_single_member(self, family_ledger):
        assert cash_for_member(2, family_ledger).available_cash == Decimal("600")

    def test_unknown_member_raises(self, family_ledger):
        with pytest.raises(ReferenceNotFoundError, match="member 5 not found"):
            cash_for_member(5, family_ledger)
