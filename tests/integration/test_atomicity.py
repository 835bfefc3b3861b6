"""Integration tests verifying atomic database operations."""

import sqlite3
from datetime import date
from decimal import Decimal

import pytest

from family_portfolio.core.models import (
    AllocationDraft,
    Member,
    Security,
    Transaction,
    TransactionType,
)
from family_portfolio.data.repositories.allocations_repo import AllocationsRepository
from family_portfolio.data.repositories.members_repo import MembersRepository
from family_portfolio.data.repositories.securities_repo import SecuritiesRepository
from family_portfolio.data.repositories.transactions_repo import TransactionsRepository


def _buy(security_id):
    return Transaction(
        security_id=security_id, transaction_type=TransactionType.BUY,
        trade_date=date(2024, 1, 10), quantity=Decimal("10"), price_per_unit=Decimal("100"),
    )


class TestTransactionContextManager:
    def test_rollback_on_error(self, isolated_db):
        """db.transaction() rolls back all writes when an exception is raised."""
        repo = MembersRepository()
        with pytest.raises(RuntimeError):
            with isolated_db.transaction():
                repo.create(Member(name="Should Be Rolled Back"))
                raise RuntimeError("Forced rollback")
        assert repo.list_all() == []

    def test_commit_on_success(self, isolated_db):
        repo = MembersRepository()
        with isolated_db.transaction():
            repo.create(Member(name="A"))
            repo.create(Member(name="B"))
        assert [m.name for m in repo.list_all()] == ["A", "B"]

    def test_flag_cleared_after_rollback(self, isolated_db):
        with pytest.raises(ValueError):
            with isolated_db.transaction():
                raise ValueError("boom")
        assert isolated_db._in_transaction is False


class TestCreateWithAllocationsAtomic:
    def test_unknown_member_leaves_no_transaction(self, isolated_db):
        """A failing allocation insert rolls back the transaction row too."""
        a = MembersRepository().create(Member(name="A"))
        s = SecuritiesRepository().create(Security(symbol="X"))
        with pytest.raises(sqlite3.IntegrityError):
            TransactionsRepository().create_with_allocations(_buy(s.id), [
                AllocationDraft(member_id=a.id, amount=Decimal("500"), percentage=Decimal("0.5")),
                AllocationDraft(member_id=999, amount=Decimal("500"), percentage=Decimal("0.5")),
            ])
        assert TransactionsRepository().list_all() == []
        assert AllocationsRepository().list_all() == []

    def test_duplicate_member_leaves_nothing(self, isolated_db):
        a = MembersRepository().create(Member(name="A"))
        s = SecuritiesRepository().create(Security(symbol="X"))
        with pytest.raises(sqlite3.IntegrityError):
            TransactionsRepository().create_with_allocations(_buy(s.id), [
                AllocationDraft(member_id=a.id, amount=Decimal("500"), percentage=Decimal("0.5")),
                AllocationDraft(member_id=a.id, amount=Decimal("500"), percentage=Decimal("0.5")),
            ])
        assert TransactionsRepository().list_all() == []
        assert AllocationsRepository().list_all() == []
