# src/btcproxy/interfaces/api/deps.py

from __future__ import annotations
from fastapi import HTTPException, Request

from btcproxy.application.services import LivePriceService, HistoricalPriceService

# --- Service Dependencies ---

def _get_service(request: Request, name: str):
    services = getattr(request.app.state, "services", None) or {}
    return services.get(name)

def get_live_price_service(request: Request) -> LivePriceService:
    """Dependency to get the LivePriceService instance from the app state."""
    service = _get_service(request, "live_price_service")
    if not service:
        raise HTTPException(status_code=503, detail="Live price service is currently unavailable.")
    return service

def get_history_service(request: Request) -> HistoricalPriceService:
    """Dependency to get the HistoricalPriceService instance from the app state."""
    service = _get_service(request, "history_service")
    if not service:
        raise HTTPException(status_code=503, detail="Price history service is currently unavailable.")
    return service
