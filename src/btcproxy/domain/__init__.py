# src/btcproxy/domain/__init__.py
from .entities import (
    LIVE_CURRENCIES,
    HISTORY_CURRENCIES,
    is_number,
    CurrencyQuote,
    HistoricalPriceEntry,
)
from .errors import (
    PriceProxyError,
    ValidationError,
    UpstreamError,
    NoDataError,
    DataShapeError,
)

__all__ = [
    "LIVE_CURRENCIES",
    "HISTORY_CURRENCIES",
    "is_number",
    "CurrencyQuote",
    "HistoricalPriceEntry",
    "PriceProxyError",
    "ValidationError",
    "UpstreamError",
    "NoDataError",
    "DataShapeError",
]
