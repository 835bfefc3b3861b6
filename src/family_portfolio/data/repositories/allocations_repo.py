"""Repository for transaction allocations."""

from ...core.models import Allocation
from ..query import BaseRepository, RowMapper


class AllocationsRepository(BaseRepository[Allocation]):
    _table = "allocations"
    _mapper = RowMapper(Allocation)
    _default_order = "transaction_id, id"

    def create(self, allocation: Allocation) -> Allocation:
        return self._insert(allocation)

    def list_by_transaction(self, transaction_id: int) -> list[Allocation]:
        rows = (
            self._query()
            .where("transaction_id = ?", transaction_id)
            .order_by("id")
            .fetch_all(self._db().conn)
        )
        return self._mapper.map_all(rows)

    def list_by_member(self, member_id: int) -> list[Allocation]:
        rows = (
            self._query()
            .where("member_id = ?", member_id)
            .order_by(self._default_order)
            .fetch_all(self._db().conn)
        )
        return self._mapper.map_all(rows)
