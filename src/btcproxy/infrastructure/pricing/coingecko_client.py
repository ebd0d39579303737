# src/btcproxy/infrastructure/pricing/coingecko_client.py
"""
Thin async client for the two CoinGecko endpoints this service proxies.
"""

import logging
from typing import Any, Dict, Iterable, Optional

import httpx

from btcproxy.domain.errors import UpstreamError, DataShapeError

log = logging.getLogger(__name__)

COIN_ID = "bitcoin"


class CoinGeckoClient:
    """
    Every call is bounded by `timeout` and either returns the decoded JSON
    object or raises. No retries, no backoff: a failed call simply fails.
    """
    BASE_URL = "https://api.coingecko.com/api/v3"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _auth_params(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"x_cg_demo_api_key": self.api_key}

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        params = {**params, **self._auth_params()}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            log.error(f"CoinGecko request to {path} timed out after {self.timeout}s")
            raise UpstreamError(f"CoinGecko request timed out: {path}") from e
        except httpx.HTTPError as e:
            log.error(f"CoinGecko transport error for {path}: {e}")
            raise UpstreamError(f"CoinGecko request failed: {e}") from e

        if response.status_code == 429:
            log.warning(f"CoinGecko 429 (Too Many Requests) for {path}.")
        if not response.is_success:
            log.error(f"CoinGecko HTTP error for {path}: {response.status_code}")
            raise UpstreamError(
                f"CoinGecko responded with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DataShapeError(f"CoinGecko returned a non-JSON body for {path}") from e
        if not isinstance(data, dict):
            raise DataShapeError(f"CoinGecko returned an unexpected body for {path}")
        return data

    async def get_simple_price(self, currencies: Iterable[str]) -> Dict[str, Any]:
        """
        Current price, 24h change and market cap of bitcoin in `currencies`.
        Shape: {"bitcoin": {"usd": .., "usd_24h_change": .., "usd_market_cap": .., ...}}
        """
        params = {
            "ids": COIN_ID,
            "vs_currencies": ",".join(currencies),
            "include_market_cap": "true",
            "include_24hr_change": "true",
        }
        return await self._get_json("/simple/price", params)

    async def get_coin_history(self, date: str) -> Dict[str, Any]:
        """
        Full market snapshot of bitcoin on `date` (dd-mm-yyyy).
        Prices live under ["market_data"]["current_price"]; the section is absent
        when CoinGecko has no data for that day.
        """
        params = {"date": date, "localization": "false"}
        return await self._get_json(f"/coins/{COIN_ID}/history", params)
