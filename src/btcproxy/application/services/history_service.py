# src/btcproxy/application/services/history_service.py
"""
Historical bitcoin prices, cached in the database for the retention window.

Flow for one request:
  1. validate the date (no I/O on failure)
  2. resolve the currency selection and derive the composite cache key
  3. serve a fresh stored entry verbatim, or
  4. fetch the day's snapshot upstream, filter it, upsert it and return it
"""
import logging
import re
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from btcproxy.domain.entities import HISTORY_CURRENCIES, is_number
from btcproxy.domain.errors import DataShapeError, NoDataError, UpstreamError, ValidationError
from btcproxy.infrastructure.db.repository import HistoricalPriceStore
from btcproxy.infrastructure.monitoring.metrics import CACHE_HITS, CACHE_MISSES, UPSTREAM_REQUESTS
from btcproxy.infrastructure.pricing.coingecko_client import CoinGeckoClient

log = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"\d{2}-\d{2}-\d{4}", re.ASCII)

INVALID_DATE_MESSAGE = "Invalid date format. Use dd-mm-yyyy."
NO_PRICE_DATA_MESSAGE = "Price data not available for this date"
NO_CURRENCIES_MESSAGE = "No supported currencies found for this date"


def validate_date(date: str) -> str:
    """Accepts exactly `dd-mm-yyyy` (digits only; the calendar date itself is not checked)."""
    if not isinstance(date, str) or not DATE_PATTERN.fullmatch(date):
        raise ValidationError(INVALID_DATE_MESSAGE)
    return date


def resolve_currencies(currency: Optional[str]) -> List[str]:
    """
    A single supported currency selects just that currency. Anything else,
    including an unknown code or no parameter at all, selects every supported one.
    """
    code = (currency or "").lower()
    if code in HISTORY_CURRENCIES:
        return [code]
    return list(HISTORY_CURRENCIES)


def build_cache_key(date: str, currencies: Iterable[str]) -> str:
    """
    `<date>-<c1>,<c2>,...` in the order given.

    Order is part of the key: ["usd", "eur"] and ["eur", "usd"] are different
    entries. Callers only ever pass a single currency or HISTORY_CURRENCIES,
    which keeps this unambiguous today.
    """
    return f"{date}-{','.join(currencies)}"


def filter_prices(all_prices: Dict[str, Any], currencies: Iterable[str]) -> Dict[str, Any]:
    """
    Keeps the requested currencies that upstream actually reported, in request order.
    Raises DataShapeError if a selected price is not a number.
    """
    prices = {c: all_prices[c] for c in currencies if all_prices.get(c) is not None}
    bad = [c for c, v in prices.items() if not is_number(v)]
    if bad:
        raise DataShapeError(f"Upstream prices are not numeric: {', '.join(bad)}")
    return prices


class HistoricalPriceService:

    def __init__(
        self,
        client: CoinGeckoClient,
        store: HistoricalPriceStore,
        retention_seconds: int = 24 * 60 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client
        self.store = store
        self.retention_ms = retention_seconds * 1000
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def _fetch_prices(self, date: str) -> Dict[str, Any]:
        try:
            data = await self.client.get_coin_history(date)
        except (UpstreamError, DataShapeError):
            UPSTREAM_REQUESTS.labels(endpoint="coin_history", outcome="error").inc()
            raise
        UPSTREAM_REQUESTS.labels(endpoint="coin_history", outcome="ok").inc()

        market_data = data.get("market_data")
        all_prices = market_data.get("current_price") if isinstance(market_data, dict) else None
        if all_prices is None:
            raise NoDataError(NO_PRICE_DATA_MESSAGE)
        if not isinstance(all_prices, dict):
            raise DataShapeError("Upstream 'current_price' is not an object")
        return all_prices

    async def get_historical_price(self, date: str, currency: Optional[str] = None) -> Dict[str, Any]:
        """
        Returns {"date": date, "prices": {currency: price, ...}}.

        :raises ValidationError: `date` is not dd-mm-yyyy.
        :raises NoDataError: upstream has no prices for the day, or none of the selected currencies.
        :raises UpstreamError: transport failure or non-success status.
        """
        validate_date(date)
        currencies = resolve_currencies(currency)
        cache_key = build_cache_key(date, currencies)

        entry = self.store.get(cache_key)
        if entry is not None and entry.is_fresh(self._now_ms(), self.retention_ms):
            CACHE_HITS.labels(cache="history").inc()
            log.debug(f"Historical price from cache: {cache_key}")
            return entry.payload

        CACHE_MISSES.labels(cache="history").inc()
        log.info(f"Fetching historical price from API: {cache_key}")
        all_prices = await self._fetch_prices(date)

        prices = filter_prices(all_prices, currencies)
        if not prices:
            raise NoDataError(NO_CURRENCIES_MESSAGE)

        result = {"date": date, "prices": prices}
        self.store.upsert(cache_key, result, self._now_ms())
        return result
