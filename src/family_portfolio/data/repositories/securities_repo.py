"""Repository for securities and their last known price."""

import dataclasses
import logging
import sqlite3
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ...core.exceptions import DuplicateSecurityError
from ...core.models import Security
from ..query import BaseRepository, RowMapper, to_sql_value

logger = logging.getLogger(__name__)


class SecuritiesRepository(BaseRepository[Security]):
    _table = "securities"
    _mapper = RowMapper(Security)
    _default_order = "symbol"

    def create(self, security: Security) -> Security:
        security = dataclasses.replace(security, symbol=security.symbol.strip().upper())
        try:
            return self._insert(security)
        except sqlite3.IntegrityError as exc:
            raise DuplicateSecurityError(f"Security {security.symbol} already exists") from exc

    def get_by_symbol(self, symbol: str) -> Optional[Security]:
        row = (
            self._query()
            .where("symbol = ?", symbol.strip().upper())
            .fetch_one(self._db().conn)
        )
        return self._mapper.map(row) if row else None

    def update_price(
        self, security_id: int, price: Decimal, as_of: Optional[datetime] = None
    ) -> Optional[Security]:
        """Store the latest market price together with when it was observed."""
        as_of = as_of or datetime.now()
        self._write(
            """UPDATE securities
               SET current_price = ?, price_updated_at = ?, updated_at = CURRENT_TIMESTAMP
               WHERE id = ?""",
            (to_sql_value(price), to_sql_value(as_of), security_id),
        )
        logger.debug("Price for security %s set to %s", security_id, price)
        return self.get_by_id(security_id)
