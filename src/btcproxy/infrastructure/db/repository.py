# File: src/btcproxy/infrastructure/db/repository.py
import json
import logging
from typing import Any, Callable, Dict, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from btcproxy.domain.entities import HistoricalPriceEntry
from .models import BtcPriceCache
from .uow import session_scope

logger = logging.getLogger(__name__)


class HistoricalPriceRepository:
    """Session-bound access to the `btc_price_cache` table."""

    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _to_entity(row: BtcPriceCache) -> HistoricalPriceEntry:
        return HistoricalPriceEntry(
            key=row.date,
            payload=json.loads(row.price_data),
            written_at=int(row.timestamp),
        )

    def get(self, key: str) -> Optional[HistoricalPriceEntry]:
        row = self.session.get(BtcPriceCache, key)
        return self._to_entity(row) if row else None

    def upsert(self, key: str, payload: Dict[str, Any], written_at: int) -> HistoricalPriceEntry:
        """Inserts the entry, or fully replaces payload and timestamp of an existing one."""
        row = BtcPriceCache(date=key, price_data=json.dumps(payload), timestamp=written_at)
        self.session.merge(row)
        return HistoricalPriceEntry(key=key, payload=payload, written_at=written_at)

    def delete_older_than(self, cutoff_ms: int) -> int:
        result = self.session.execute(
            delete(BtcPriceCache).where(BtcPriceCache.timestamp < cutoff_ms)
        )
        return result.rowcount or 0

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(BtcPriceCache)) or 0


class HistoricalPriceStore:
    """
    Transaction-per-operation facade over `HistoricalPriceRepository`.
    Each write commits on its own, so a partially written entry is never visible.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[HistoricalPriceEntry]:
        with session_scope(self._session_factory) as session:
            return HistoricalPriceRepository(session).get(key)

    def upsert(self, key: str, payload: Dict[str, Any], written_at: int) -> HistoricalPriceEntry:
        with session_scope(self._session_factory) as session:
            return HistoricalPriceRepository(session).upsert(key, payload, written_at)

    def delete_older_than(self, cutoff_ms: int) -> int:
        with session_scope(self._session_factory) as session:
            return HistoricalPriceRepository(session).delete_older_than(cutoff_ms)

    def count(self) -> int:
        with session_scope(self._session_factory) as session:
            return HistoricalPriceRepository(session).count()
