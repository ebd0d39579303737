# File: src/btcproxy/interfaces/api/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from btcproxy import __version__
from btcproxy.config import settings
from btcproxy.boot import build_services
from btcproxy.logging_conf import setup_logging
from btcproxy.infrastructure.db.base import create_tables
from btcproxy.interfaces.api.metrics import router as metrics_router
from btcproxy.interfaces.api.routers import prices as prices_router
from btcproxy.interfaces.api.schemas import HealthOut

setup_logging()
log = logging.getLogger(__name__)

# --- FastAPI App ---
app = FastAPI(title="BTC Price Proxy", version=__version__)
app.state.services = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(prices_router.router)
app.include_router(metrics_router)


@app.on_event("startup")
async def on_startup():
    log.info("Application startup sequence initiated...")
    if app.state.services is None:
        create_tables()
        app.state.services = build_services()

    pruning_service = app.state.services.get("pruning_service")
    if pruning_service:
        if settings.PRUNE_ON_STARTUP:
            try:
                pruning_service.prune_once()
            except Exception:
                log.exception("Startup cache pruning failed.")
        pruning_service.start()
    log.info("Application startup complete.")


@app.on_event("shutdown")
async def on_shutdown():
    services = app.state.services or {}
    pruning_service = services.get("pruning_service")
    if pruning_service:
        await pruning_service.stop()
    log.info("Application shutdown complete.")


@app.get("/")
def root(): return {"message": "BTC Price Proxy Running"}

@app.get("/health", response_model=HealthOut)
def health(): return {"status": "ok"}


def run():
    import uvicorn
    log.info(f"BTC data backend running on http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
