"""End-to-end: write a ledger through the repositories, summarise the snapshot."""

from datetime import date
from decimal import Decimal

from family_portfolio.core.accounting import (
    build_portfolio_summary,
    build_security_summary,
    propose_sell_allocations,
)
from family_portfolio.core.models import (
    AllocationDraft,
    Contribution,
    Member,
    Security,
    Transaction,
    TransactionType,
)
from family_portfolio.core.validation import build_allocations, reconcile_proposals
from family_portfolio.data.repositories.contributions_repo import ContributionsRepository
from family_portfolio.data.repositories.members_repo import MembersRepository
from family_portfolio.data.repositories.securities_repo import SecuritiesRepository
from family_portfolio.data.repositories.transactions_repo import TransactionsRepository
from family_portfolio.data.snapshot import load_snapshot


def _seed():
    members = MembersRepository()
    a = members.create(Member(name="A"))
    b = members.create(Member(name="B"))
    for m in (a, b):
        ContributionsRepository().create(Contribution(
            member_id=m.id, amount=Decimal("1000"), contribution_date=date(2024, 1, 2),
        ))
    securities = SecuritiesRepository()
    x = securities.create(Security(symbol="X"))
    x = securities.update_price(x.id, Decimal("120"))
    TransactionsRepository().create_with_allocations(
        Transaction(
            security_id=x.id, transaction_type=TransactionType.BUY, trade_date=date(2024, 1, 10),
            quantity=Decimal("10"), price_per_unit=Decimal("100"),
        ),
        build_allocations(Decimal("1000"), {a.id: Decimal("600"), b.id: Decimal("400")}),
    )
    return a, b, x


class TestEndToEnd:
    def test_summary_from_stored_ledger(self, isolated_db):
        a, b, _x = _seed()
        summary = build_portfolio_summary(load_snapshot())
        assert summary.total_value == Decimal("2200")
        assert summary.total_gain_loss == Decimal("200")
        rows = {m.member_id: m for m in summary.members}
        assert rows[a.id].stock_value == Decimal("720")
        assert rows[b.id].available_cash == Decimal("600")

    def test_proportional_sell_round_trip(self, isolated_db):
        """Record a sell split by ownership; holdings shrink pro rata."""
        a, b, x = _seed()
        snapshot = load_snapshot()
        total = Decimal("5") * Decimal("120")
        drafts = reconcile_proposals(
            propose_sell_allocations(x.id, Decimal("5"), Decimal("120"), snapshot), total,
        )
        assert drafts == [
            AllocationDraft(member_id=a.id, amount=Decimal("360.00"), percentage=Decimal("0.6")),
            AllocationDraft(member_id=b.id, amount=Decimal("240.00"), percentage=Decimal("0.4")),
        ]
        TransactionsRepository().create_with_allocations(
            Transaction(
                security_id=x.id, transaction_type=TransactionType.SELL, trade_date=date(2024, 2, 1),
                quantity=Decimal("5"), price_per_unit=Decimal("120"),
            ),
            drafts,
        )

        snapshot = load_snapshot()
        security = build_security_summary(snapshot.securities[0], snapshot)
        assert [o.shares for o in security.ownership] == [Decimal("3"), Decimal("2")]
        summary = build_portfolio_summary(snapshot)
        assert summary.total_cash == Decimal("1600")
        assert summary.total_value == Decimal("2200")

    def test_snapshot_is_fresh_each_load(self, isolated_db):
        _seed()
        before = load_snapshot()
        MembersRepository().create(Member(name="C"))
        assert len(load_snapshot().members) == len(before.members) + 1
