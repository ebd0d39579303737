"""Caching proxy for CoinGecko bitcoin prices."""

__version__ = "1.0.0"
