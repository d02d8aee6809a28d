from __future__ import annotations

from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo

from fastapi import FastAPI
from pydantic import ValidationError

from stockwatch.api.routes import router
from stockwatch.config.settings import Settings, get_settings
from stockwatch.integrations.polygon_rest import PolygonRestClient
from stockwatch.schemas.market import LatestQuote
from stockwatch.services.market_gateway import MarketDataGateway, percentage_change
from stockwatch.services.refresh import RefreshOrchestrator
from stockwatch.services.snapshot_pipeline import SnapshotPipeline
from stockwatch.services.trading_days import market_today
from stockwatch.services.watchlist_store import WatchlistStore


class _DemoMarketDataClient:
    def fetch_latest(self, symbol: str) -> LatestQuote:
        return LatestQuote(
            symbol=symbol,
            open=100.0,
            close=101.0,
            percentage_change=percentage_change(100.0, 101.0),
        )

    def fetch_historical(self, symbol: str) -> list[float]:
        return [100.0 + 0.5 * i for i in range(20)]


def build_watchlist_store(settings: Settings, gateway: MarketDataGateway | None = None) -> WatchlistStore:
    if gateway is None:
        tz = ZoneInfo(settings.WATCHLIST_MARKET_TZ)
        gateway = PolygonRestClient(
            api_key=settings.POLYGON_API_KEY,
            base_url=settings.POLYGON_BASE_URL,
            timeout_sec=settings.POLYGON_TIMEOUT_SEC,
            today_fn=lambda: market_today(tz),
        )
    pipeline = SnapshotPipeline(
        gateway,
        ema_period=settings.WATCHLIST_EMA_PERIOD,
        ema_window=settings.WATCHLIST_EMA_WINDOW,
        ema_double_seed=settings.WATCHLIST_EMA_DOUBLE_SEED,
    )
    orchestrator = RefreshOrchestrator(
        pipeline,
        max_workers=settings.WATCHLIST_REFRESH_MAX_WORKERS,
        timeout_sec=settings.WATCHLIST_REFRESH_TIMEOUT_SEC,
    )
    return WatchlistStore(pipeline, orchestrator)


def _bind_runtime_clients(app: FastAPI) -> bool:
    try:
        settings = app.state.get_settings()
    except ValidationError as exc:
        # keep the demo gateway so the app still starts without POLYGON_API_KEY
        print(f"[WATCHLIST][gateway_bind_skipped] errors={exc.error_count()}", flush=True)
        return False

    app.state.watchlist_store = build_watchlist_store(settings)
    print(
        "[WATCHLIST][gateway_bind] "
        f"base_url={settings.POLYGON_BASE_URL} ema_period={settings.WATCHLIST_EMA_PERIOD} "
        f"double_seed={settings.WATCHLIST_EMA_DOUBLE_SEED}",
        flush=True,
    )
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    _bind_runtime_clients(app)
    yield


app = FastAPI(title="Stockwatch", version="0.1.0", lifespan=lifespan)
app.include_router(router, prefix="/v1")

# NOTE: lazy-loaded so app import does not require env during tests.
app.state.get_settings = get_settings
app.state.watchlist_store = WatchlistStore(SnapshotPipeline(_DemoMarketDataClient()))
