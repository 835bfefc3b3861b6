"""Repository for member cash contributions."""

from ...core.models import Contribution
from ...core.validation import validate_contribution
from ..query import BaseRepository, RowMapper


class ContributionsRepository(BaseRepository[Contribution]):
    _table = "contributions"
    _mapper = RowMapper(Contribution)
    _default_order = "contribution_date, id"

    def create(self, contribution: Contribution) -> Contribution:
        validate_contribution(contribution.amount)
        return self._insert(contribution)

    def list_by_member(self, member_id: int) -> list[Contribution]:
        rows = (
            self._query()
            .where("member_id = ?", member_id)
            .order_by(self._default_order)
            .fetch_all(self._db().conn)
        )
        return self._mapper.map_all(rows)

    def list_by_year(self, year: int) -> list[Contribution]:
        rows = (
            self._query()
            .where("strftime('%Y', contribution_date) = ?", str(year))
            .order_by(self._default_order)
            .fetch_all(self._db().conn)
        )
        return self._mapper.map_all(rows)
