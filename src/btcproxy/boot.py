# File: src/btcproxy/boot.py
import logging
from typing import Any, Callable, Dict, Optional

import httpx
from sqlalchemy.orm import Session

from btcproxy.config import settings
from btcproxy.application.services import (
    LivePriceService,
    HistoricalPriceService,
    CachePruningService,
)
from btcproxy.infrastructure.cache import LivePriceCache
from btcproxy.infrastructure.db.base import SessionLocal
from btcproxy.infrastructure.db.repository import HistoricalPriceStore
from btcproxy.infrastructure.pricing.coingecko_client import CoinGeckoClient

log = logging.getLogger(__name__)


def build_services(
    session_factory: Callable[[], Session] = SessionLocal,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """Build and wire all application services and dependencies."""
    log.info("Building application services...")
    services: Dict[str, Any] = {}

    client = CoinGeckoClient(
        api_key=settings.API_KEY,
        base_url=settings.COINGECKO_BASE_URL,
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
        transport=transport,
    )
    if not settings.API_KEY:
        log.warning("API_KEY is not set; CoinGecko requests will be unauthenticated.")

    store = HistoricalPriceStore(session_factory)

    services["coingecko_client"] = client
    services["history_store"] = store
    services["live_price_service"] = LivePriceService(
        client=client,
        cache=LivePriceCache(ttl_seconds=settings.LIVE_PRICE_TTL_SECONDS),
    )
    services["history_service"] = HistoricalPriceService(
        client=client,
        store=store,
        retention_seconds=settings.HISTORY_RETENTION_SECONDS,
    )
    services["pruning_service"] = CachePruningService(
        store=store,
        retention_seconds=settings.HISTORY_RETENTION_SECONDS,
        interval_seconds=settings.PRUNE_INTERVAL_SECONDS,
    )

    log.info("Application services built.")
    return services
