"""Tests for query.py: RowMapper, QueryBuilder, BaseRepository."""

import dataclasses
import sqlite3
from datetime import date, datetime
from decimal import Decimal

import pytest

from family_portfolio.core.models import (
    Allocation,
    Contribution,
    Member,
    Security,
    Transaction,
    TransactionType,
)
from family_portfolio.data.query import QueryBuilder, RowMapper, to_sql_value
from family_portfolio.data.repositories.members_repo import MembersRepository
from family_portfolio.data.repositories.securities_repo import SecuritiesRepository


def _make_row(**kwargs) -> sqlite3.Row:
    """Create a sqlite3.Row from keyword arguments.

    sqlite3.Row holds a reference to the cursor, which keeps the in-memory
    connection alive for as long as the row is.
    """
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    col_exprs = ", ".join(f"? as {name}" for name in kwargs)
    return conn.execute(f"SELECT {col_exprs}", list(kwargs.values())).fetchone()


# ---------------------------------------------------------------------------
# TestRowMapper
# ---------------------------------------------------------------------------

class TestRowMapper:
    def test_basic_member_mapping(self):
        """int, str, bool and Optional[datetime] fields are mapped correctly."""
        mapper = RowMapper(Member)
        row = _make_row(
            id=1, name="Ann", email="ann@example.com", is_admin=1,
            created_at="2024-01-15 10:00:00", updated_at="2024-01-16 10:00:00",
        )
        m = mapper.map(row)
        assert m.id == 1
        assert m.name == "Ann"
        assert m.is_admin is True
        assert isinstance(m.created_at, datetime)
        assert m.created_at.year == 2024

    def test_date_column(self):
        """A DATE column becomes a date, not a datetime."""
        mapper = RowMapper(Contribution)
        row = _make_row(
            id=3, member_id=1, amount="250.00", contribution_date="2024-03-01",
            notes="", created_at=None,
        )
        c = mapper.map(row)
        assert c.contribution_date == date(2024, 3, 1)
        assert type(c.contribution_date) is date
        assert c.amount == Decimal("250.00")

    def test_transaction_type_enum(self):
        mapper = RowMapper(Transaction)
        row = _make_row(
            id=1, security_id=1, transaction_type="sell", trade_date="2024-01-15",
            quantity="10", price_per_unit="100", notes="", created_at=None,
        )
        tx = mapper.map(row)
        assert tx.transaction_type == TransactionType.SELL

    def test_decimal_conversion(self):
        """TEXT Decimal columns are converted to Decimal without precision loss."""
        mapper = RowMapper(Allocation)
        row = _make_row(
            id=1, transaction_id=1, member_id=2,
            amount="333.333333333333", percentage="0.333333333333333333",
            created_at=None,
        )
        a = mapper.map(row)
        assert a.amount == Decimal("333.333333333333")
        assert a.percentage == Decimal("0.333333333333333333")

    def test_optional_decimal_null(self):
        """A security with no known price keeps current_price = None."""
        mapper = RowMapper(Security)
        row = _make_row(
            id=1, symbol="VTI", name="", current_price=None, price_updated_at=None,
            created_at=None, updated_at=None,
        )
        assert mapper.map(row).current_price is None

    def test_optional_decimal_non_null(self):
        mapper = RowMapper(Security)
        row = _make_row(
            id=1, symbol="VTI", name="", current_price="245.10",
            price_updated_at="2024-06-01T16:00:00", created_at=None, updated_at=None,
        )
        s = mapper.map(row)
        assert s.current_price == Decimal("245.10")
        assert s.price_updated_at == datetime(2024, 6, 1, 16, 0, 0)

    def test_str_default_for_null_column(self):
        mapper = RowMapper(Security)
        row = _make_row(id=1, symbol="VTI", name=None)
        assert mapper.map(row).name == ""

    def test_field_not_in_row_uses_default(self):
        mapper = RowMapper(Member)
        m = mapper.map(_make_row(id=1, name="Ann"))
        assert m.email == ""
        assert m.is_admin is False

    def test_field_not_in_row_no_default_raises(self):
        """Required field missing from row → TypeError on construction."""
        mapper = RowMapper(Contribution)
        row = _make_row(id=1, member_id=1, amount="10")
        with pytest.raises(TypeError):
            mapper.map(row)

    def test_map_all(self):
        mapper = RowMapper(Member)
        members = mapper.map_all([_make_row(id=1, name="A"), _make_row(id=2, name="B")])
        assert [m.name for m in members] == ["A", "B"]

    def test_sql_values(self):
        assert to_sql_value(Decimal("123.456")) == "123.456"
        assert to_sql_value(datetime(2024, 6, 15, 10, 30)) == "2024-06-15T10:30:00"
        assert to_sql_value(date(2024, 6, 15)) == "2024-06-15"
        assert to_sql_value(TransactionType.BUY) == "buy"
        assert to_sql_value(None) is None

    def test_bool_stored_as_int(self):
        assert to_sql_value(True) == 1
        assert to_sql_value(False) == 0

    def test_primitives_unchanged(self):
        assert to_sql_value(42) == 42
        assert to_sql_value("hello") == "hello"

    def test_to_row_excludes_fields(self):
        mapper = RowMapper(Transaction)
        tx = Transaction(
            security_id=4, transaction_type=TransactionType.BUY, trade_date=date(2024, 2, 1),
            quantity=Decimal("1.5"), price_per_unit=Decimal("20"),
        )
        d = mapper.to_row(tx, exclude=frozenset({"id", "created_at"}))
        assert d == {
            "security_id": 4,
            "transaction_type": "buy",
            "trade_date": "2024-02-01",
            "quantity": "1.5",
            "price_per_unit": "20",
            "notes": "",
        }


# ---------------------------------------------------------------------------
# TestQueryBuilder
# ---------------------------------------------------------------------------

class TestQueryBuilder:
    def test_default_is_select_star(self):
        sql, params = QueryBuilder("members").build()
        assert sql == "SELECT * FROM members"
        assert params == []

    def test_multiple_where_joined_with_and(self):
        sql, params = (
            QueryBuilder("allocations")
            .where("transaction_id = ?", 5)
            .where("member_id = ?", 2)
            .build()
        )
        assert sql.endswith("WHERE transaction_id = ? AND member_id = ?")
        assert params == [5, 2]

    def test_clause_order(self):
        sql, params = (
            QueryBuilder("transactions")
            .limit(10)
            .order_by("trade_date DESC")
            .where("security_id = ?", 1)
            .build()
        )
        assert sql == "SELECT * FROM transactions WHERE security_id = ? ORDER BY trade_date DESC LIMIT 10"
        assert params == [1]

    def test_fetch_against_real_connection(self, isolated_db):
        MembersRepository().create(Member(name="Ann"))
        row = QueryBuilder("members").where("name = ?", "Ann").fetch_one(isolated_db.conn)
        assert row["name"] == "Ann"
        assert QueryBuilder("members").where("name = ?", "Zed").fetch_all(isolated_db.conn) == []


# ---------------------------------------------------------------------------
# TestBaseRepository
# ---------------------------------------------------------------------------

class TestBaseRepository:
    """Uses MembersRepository as a concrete BaseRepository implementation."""

    def test_insert_returns_mapped_model(self, isolated_db):
        m = MembersRepository().create(Member(name="  Ann ", email="ann@example.com"))
        assert m.id is not None
        assert m.name == "Ann"
        assert isinstance(m.created_at, datetime)

    def test_get_by_id_missing_returns_none(self, isolated_db):
        assert MembersRepository().get_by_id(9999) is None

    def test_list_all_default_order(self, isolated_db):
        repo = SecuritiesRepository()
        repo.create(Security(symbol="vti"))
        repo.create(Security(symbol="AAPL"))
        assert [s.symbol for s in repo.list_all()] == ["AAPL", "VTI"]

    def test_delete(self, isolated_db):
        repo = MembersRepository()
        m = repo.create(Member(name="Gone"))
        assert repo.delete(m.id) is True
        assert repo.get_by_id(m.id) is None
        assert repo.delete(m.id) is False

    def test_save_updates_writable_fields(self, isolated_db):
        repo = MembersRepository()
        m = repo.create(Member(name="Original"))
        saved = repo.save(dataclasses.replace(m, name="Renamed", is_admin=True))
        assert saved.name == "Renamed"
        assert saved.is_admin is True
        assert saved.updated_at is not None
        assert repo.get_by_id(m.id).name == "Renamed"
