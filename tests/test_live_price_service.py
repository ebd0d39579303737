import asyncio

import httpx
import pytest

from btcproxy.application.services.live_price_service import LivePriceService, shape_live_prices
from btcproxy.domain.errors import DataShapeError, UpstreamError
from btcproxy.infrastructure.cache import LivePriceCache

from conftest import SIMPLE_PRICE_BODY

# This suite tests the LivePriceService against a fake upstream and a fake clock.


@pytest.fixture
def cache(clock) -> LivePriceCache:
    return LivePriceCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def service(client, cache) -> LivePriceService:
    return LivePriceService(client=client, cache=cache)


def test_shape_live_prices_reshapes_all_currencies():
    shaped = shape_live_prices(SIMPLE_PRICE_BODY)

    assert list(shaped) == ["USD", "AUD", "GBP", "EUR", "CAD"]
    assert shaped["USD"] == {"price": 65000, "percentChange24h": 1.5, "marketCap": 1.28e12}


def test_shape_live_prices_rejects_missing_field():
    body = {"bitcoin": dict(SIMPLE_PRICE_BODY["bitcoin"])}
    del body["bitcoin"]["eur_market_cap"]

    with pytest.raises(DataShapeError, match="eur_market_cap"):
        shape_live_prices(body)


def test_shape_live_prices_rejects_missing_coin_section():
    with pytest.raises(DataShapeError):
        shape_live_prices({"ethereum": {}})


@pytest.mark.asyncio
async def test_always_fetches_all_five_currencies(service, upstream):
    await service.get_current_prices({"usd"})
    assert upstream.requests[0].url.params["vs_currencies"] == "usd,aud,gbp,eur,cad"


@pytest.mark.asyncio
async def test_calls_within_ttl_share_one_upstream_call(service, upstream, clock):
    first = await service.get_current_prices()
    clock.advance(299)
    second = await service.get_current_prices()

    assert first == second
    assert upstream.calls("/simple/price") == 1


@pytest.mark.asyncio
async def test_calls_beyond_ttl_refresh_from_upstream(service, upstream, clock):
    await service.get_current_prices()
    clock.advance(301)
    await service.get_current_prices()

    assert upstream.calls("/simple/price") == 2


@pytest.mark.asyncio
async def test_refresh_replaces_payload_wholesale(service, upstream, clock):
    await service.get_current_prices()
    body = {"bitcoin": {k: v * 2 for k, v in SIMPLE_PRICE_BODY["bitcoin"].items()}}
    upstream.responses["/api/v3/simple/price"] = httpx.Response(200, json=body)
    clock.advance(300)

    refreshed = await service.get_current_prices()
    assert refreshed["USD"]["price"] == 130000


@pytest.mark.asyncio
async def test_failed_refresh_does_not_serve_stale_payload(service, upstream, clock):
    await service.get_current_prices()
    clock.advance(301)
    upstream.responses["/api/v3/simple/price"] = httpx.Response(502)

    with pytest.raises(UpstreamError):
        await service.get_current_prices()
    with pytest.raises(UpstreamError):
        await service.get_current_prices()
    assert upstream.calls("/simple/price") == 3


@pytest.mark.asyncio
async def test_malformed_payload_is_not_cached(service, upstream):
    upstream.responses["/api/v3/simple/price"] = httpx.Response(200, json={"bitcoin": {"usd": 1}})

    with pytest.raises(DataShapeError):
        await service.get_current_prices()
    assert service.cache.get() is None


@pytest.mark.asyncio
async def test_concurrent_misses_share_one_refresh(service, upstream):
    results = await asyncio.gather(*(service.get_current_prices() for _ in range(5)))

    assert all(r == results[0] for r in results)
    assert upstream.calls("/simple/price") == 1


@pytest.mark.asyncio
async def test_currencies_argument_narrows_result(service):
    prices = await service.get_current_prices({"usd", "eur"})
    assert set(prices) == {"USD", "EUR"}


@pytest.mark.parametrize("value", ["65000", {"v": 1}, True])
def test_shape_live_prices_rejects_non_numeric_field(value):
    body = {"bitcoin": dict(SIMPLE_PRICE_BODY["bitcoin"])}
    body["bitcoin"]["gbp_24h_change"] = value

    with pytest.raises(DataShapeError, match="gbp_24h_change"):
        shape_live_prices(body)
