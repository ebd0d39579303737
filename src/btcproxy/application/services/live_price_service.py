# src/btcproxy/application/services/live_price_service.py
"""
Current bitcoin prices in the five supported fiat currencies, memoized for a
short window.

A failed refresh never falls back to the previous payload: once the TTL has
elapsed, callers either get fresh data or an error.
"""
import logging
from typing import Any, Dict, Iterable, Optional

from btcproxy.domain.entities import LIVE_CURRENCIES, CurrencyQuote, is_number
from btcproxy.domain.errors import DataShapeError, UpstreamError
from btcproxy.infrastructure.cache import LivePriceCache
from btcproxy.infrastructure.monitoring.metrics import CACHE_HITS, CACHE_MISSES, UPSTREAM_REQUESTS
from btcproxy.infrastructure.pricing.coingecko_client import CoinGeckoClient, COIN_ID

log = logging.getLogger(__name__)

LivePrices = Dict[str, Dict[str, float]]


def shape_live_prices(data: Dict[str, Any], currencies: Iterable[str] = LIVE_CURRENCIES) -> LivePrices:
    """
    Reshapes a `/simple/price` body into {"USD": {"price", "percentChange24h", "marketCap"}, ...}.
    Raises DataShapeError if any requested currency is missing one of its three fields.
    """
    coin = data.get(COIN_ID)
    if not isinstance(coin, dict):
        raise DataShapeError(f"Upstream payload has no '{COIN_ID}' section")

    shaped: LivePrices = {}
    for currency in currencies:
        fields = (currency, f"{currency}_24h_change", f"{currency}_market_cap")
        missing = [f for f in fields if coin.get(f) is None]
        if missing:
            raise DataShapeError(f"Upstream payload missing fields: {', '.join(missing)}")
        invalid = [f for f in fields if not is_number(coin[f])]
        if invalid:
            raise DataShapeError(f"Upstream payload has non-numeric fields: {', '.join(invalid)}")
        quote = CurrencyQuote(
            price=coin[currency],
            percentChange24h=coin[f"{currency}_24h_change"],
            marketCap=coin[f"{currency}_market_cap"],
        )
        shaped[currency.upper()] = quote.to_dict()
    return shaped


class LivePriceService:

    def __init__(self, client: CoinGeckoClient, cache: LivePriceCache):
        self.client = client
        self.cache = cache

    @staticmethod
    def _select(payload: LivePrices, currencies: Optional[Iterable[str]]) -> LivePrices:
        if currencies is None:
            return payload
        wanted = {c.upper() for c in currencies}
        return {code: quote for code, quote in payload.items() if code in wanted}

    async def get_current_prices(self, currencies: Optional[Iterable[str]] = None) -> LivePrices:
        """
        Returns the cached payload while it is fresh, otherwise refreshes it from
        upstream. The upstream call always covers all supported currencies;
        `currencies` only narrows what is returned.
        """
        cached = self.cache.get()
        if cached is not None:
            CACHE_HITS.labels(cache="live").inc()
            log.debug("Price from cache")
            return self._select(cached, currencies)

        async with self.cache.refresh_lock:
            # Another request may have refreshed the slot while we waited.
            cached = self.cache.get()
            if cached is not None:
                CACHE_HITS.labels(cache="live").inc()
                log.debug("Price from cache")
                return self._select(cached, currencies)

            CACHE_MISSES.labels(cache="live").inc()
            try:
                data = await self.client.get_simple_price(LIVE_CURRENCIES)
                payload = shape_live_prices(data)
            except (UpstreamError, DataShapeError):
                UPSTREAM_REQUESTS.labels(endpoint="simple_price", outcome="error").inc()
                raise
            UPSTREAM_REQUESTS.labels(endpoint="simple_price", outcome="ok").inc()

            self.cache.set(payload)
            log.info("Price from API")
            return self._select(payload, currencies)
