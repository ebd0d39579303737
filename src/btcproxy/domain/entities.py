# src/btcproxy/domain/entities.py
"""
Core value types shared by the caches, the services and the HTTP layer.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Tuple

# Order matters: it is the upstream query order for live prices and the
# cache-key order for historical lookups.
LIVE_CURRENCIES: Tuple[str, ...] = ("usd", "aud", "gbp", "eur", "cad")
HISTORY_CURRENCIES: Tuple[str, ...] = ("usd", "aud", "cad", "eur", "gbp")


def is_number(value: Any) -> bool:
    """True for int and float prices. bool is an int subclass but never a price."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class CurrencyQuote:
    """Live bitcoin quote in one fiat currency."""
    price: float
    percentChange24h: float
    marketCap: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class HistoricalPriceEntry:
    """
    One row of the persistent historical cache.
    `payload` is the exact object returned to the caller: {"date": ..., "prices": {...}}.
    """
    key: str
    payload: Dict[str, Any]
    written_at: int  # ms since epoch

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.written_at

    def is_fresh(self, now_ms: int, retention_ms: int) -> bool:
        return self.age_ms(now_ms) < retention_ms
