# --- START OF FILE: src/btcproxy/infrastructure/db/models/price_cache.py ---
from sqlalchemy import BigInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

class BtcPriceCache(Base):
    """
    Persistent cache of historical bitcoin prices.

    `date` holds the composite cache key (date plus currency list), not a bare
    date; the column name is kept for compatibility with existing databases.
    """
    __tablename__ = "btc_price_cache"

    date: Mapped[str] = mapped_column(String(255), primary_key=True)
    price_data: Mapped[str] = mapped_column(Text, nullable=False)  # JSON string
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)  # ms since epoch

    def __repr__(self):
        return f"<BtcPriceCache(key={self.date!r}, timestamp={self.timestamp})>"
# --- END OF FILE ---
