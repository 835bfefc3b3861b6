"""Repository for family member CRUD operations."""

import dataclasses
from typing import Optional

from ...core.models import Member
from ..query import BaseRepository, RowMapper


class MembersRepository(BaseRepository[Member]):
    _table = "members"
    _mapper = RowMapper(Member)

    def create(self, member: Member) -> Member:
        member = dataclasses.replace(member, name=member.name.strip(), email=member.email.strip())
        return self._insert(member)

    def get_by_name(self, name: str) -> Optional[Member]:
        row = (
            self._query()
            .where("name = ? COLLATE NOCASE", name.strip())
            .fetch_one(self._db().conn)
        )
        return self._mapper.map(row) if row else None
