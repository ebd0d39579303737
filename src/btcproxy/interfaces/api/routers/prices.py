# File: src/btcproxy/interfaces/api/routers/prices.py

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from btcproxy.application.services import LivePriceService, HistoricalPriceService
from btcproxy.domain.errors import (
    DataShapeError,
    NoDataError,
    UpstreamError,
    ValidationError,
)
from btcproxy.interfaces.api.deps import get_live_price_service, get_history_service
from btcproxy.interfaces.api.schemas import CurrencyQuoteOut, ErrorOut, HistoricalPriceOut

log = logging.getLogger(__name__)
router = APIRouter(tags=["Prices"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get(
    "/btc-data",
    response_model=Dict[str, CurrencyQuoteOut],
    responses={500: {"model": ErrorOut}},
)
async def get_btc_data(service: LivePriceService = Depends(get_live_price_service)):
    try:
        return await service.get_current_prices()
    except (UpstreamError, DataShapeError) as e:
        log.error(f"Failed to fetch BTC data: {e}")
        return _error(500, "Failed to fetch BTC data")


@router.get(
    "/btc-price-history/{date}",
    response_model=HistoricalPriceOut,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
async def get_btc_price_history(
    date: str,
    currency: Optional[str] = None,
    service: HistoricalPriceService = Depends(get_history_service),
):
    try:
        return await service.get_historical_price(date, currency)
    except (ValidationError, NoDataError) as e:
        return _error(400, str(e))
    except (UpstreamError, DataShapeError, SQLAlchemyError) as e:
        log.error(f"Error fetching BTC historical price for {date}: {e}")
        return _error(500, "Failed to fetch BTC price history")
