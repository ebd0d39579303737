# File: src/btcproxy/application/services/__init__.py

from .live_price_service import LivePriceService
from .history_service import HistoricalPriceService
from .pruning_service import CachePruningService

__all__ = [
    "LivePriceService",
    "HistoricalPriceService",
    "CachePruningService",
]
