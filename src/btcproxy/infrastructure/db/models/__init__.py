# src/btcproxy/infrastructure/db/models/__init__.py
"""
Importing this package registers every ORM model on `Base.metadata`.
"""

from .base import Base
from .price_cache import BtcPriceCache

__all__ = [
    "Base",
    "BtcPriceCache",
]
