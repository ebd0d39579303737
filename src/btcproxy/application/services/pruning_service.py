# src/btcproxy/application/services/pruning_service.py
"""
Periodic eviction of stale historical cache entries.
"""
import asyncio
import logging
import time
from typing import Callable, Optional

from btcproxy.infrastructure.db.repository import HistoricalPriceStore
from btcproxy.infrastructure.monitoring.metrics import PRUNED_ENTRIES

log = logging.getLogger(__name__)


class CachePruningService:
    """
    Owns the background sweep task. `prune_once` is the whole sweep and can be
    called directly; `start`/`stop` only manage the timer around it.
    """

    def __init__(
        self,
        store: HistoricalPriceStore,
        retention_seconds: int = 24 * 60 * 60,
        interval_seconds: float = 5 * 60 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.retention_ms = retention_seconds * 1000
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def prune_once(self) -> int:
        """Deletes every entry written more than the retention window ago. Returns the count."""
        cutoff = int(self._clock() * 1000) - self.retention_ms
        deleted = self.store.delete_older_than(cutoff)
        PRUNED_ENTRIES.inc(deleted)
        log.info(f"Pruned {deleted} old cache entries")
        return deleted

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.prune_once()
            except Exception:
                log.exception("Cache pruning sweep failed; will retry on the next tick.")

    def start(self):
        """Schedules the sweep loop on the running event loop."""
        if self.running:
            log.warning("CachePruningService already running.")
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="cache-pruning")
        log.info(f"Cache pruning scheduled every {self.interval_seconds}s.")

    async def stop(self):
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        log.info("Cache pruning stopped.")
