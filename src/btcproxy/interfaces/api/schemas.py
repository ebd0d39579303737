# --- START OF FILE: src/btcproxy/interfaces/api/schemas.py ---
from __future__ import annotations
from typing import Dict, Union
from pydantic import BaseModel

# Upstream numbers are passed through as received: 65000 stays 65000 on the wire.
Number = Union[int, float]

class CurrencyQuoteOut(BaseModel):
    price: Number
    percentChange24h: Number
    marketCap: Number

class HistoricalPriceOut(BaseModel):
    date: str
    prices: Dict[str, Number]

class ErrorOut(BaseModel):
    error: str

class HealthOut(BaseModel):
    status: str
# --- END OF FILE ---
