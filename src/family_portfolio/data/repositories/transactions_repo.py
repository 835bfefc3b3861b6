"""Repository for buy/sell transactions and their allocations."""

import logging

from ...core.exceptions import InvalidTransactionError
from ...core.models import Allocation, AllocationDraft, Transaction
from ...core.validation import validate_transaction
from ..query import BaseRepository, RowMapper
from .allocations_repo import AllocationsRepository

logger = logging.getLogger(__name__)


class TransactionsRepository(BaseRepository[Transaction]):
    _table = "transactions"
    _mapper = RowMapper(Transaction)
    _default_order = "trade_date, id"

    def create_with_allocations(
        self, transaction: Transaction, drafts: list[AllocationDraft]
    ) -> Transaction:
        """Insert a transaction and all of its allocations in one commit.

        If any allocation insert fails (unknown member, duplicate member,
        CHECK violation) nothing is written.
        """
        validate_transaction(transaction.quantity, transaction.price_per_unit)
        if not drafts:
            raise InvalidTransactionError("A transaction needs at least one allocation")

        allocations_repo = AllocationsRepository()
        db = self._db()
        with db.transaction():
            created = self._insert(transaction)
            for d in drafts:
                allocations_repo.create(Allocation(
                    transaction_id=created.id,
                    member_id=d.member_id,
                    amount=d.amount,
                    percentage=d.percentage,
                ))
        logger.info(
            "Recorded %s of %s units of security %s with %d allocation(s)",
            created.transaction_type.value, created.quantity, created.security_id, len(drafts),
        )
        return created

    def list_by_security(self, security_id: int) -> list[Transaction]:
        rows = (
            self._query()
            .where("security_id = ?", security_id)
            .order_by(self._default_order)
            .fetch_all(self._db().conn)
        )
        return self._mapper.map_all(rows)
