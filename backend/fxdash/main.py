"""
FXDash Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import aiohttp
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from fxdash.api.dependencies import NO_CACHE_HEADERS
from fxdash.api.v1 import router as api_v1_router
from fxdash.core.config import Settings, get_settings
from fxdash.core.logging import configure_logging
from fxdash.db.database import close_db, create_engine_from_settings, init_db
from fxdash.services.binance import BinanceClient
from fxdash.services.indicators import IndicatorService
from fxdash.services.prices import PriceRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the service graph on startup and tear it down on shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    engine = create_engine_from_settings(settings)
    if settings.database_url.startswith("sqlite"):
        # Local development database: make sure the tables exist
        await init_db(engine, settings.price_tables)

    session = aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=settings.binance_timeout_seconds),
        headers={"Accept": "application/json"},
    )

    app.state.price_repository = PriceRepository(
        engine,
        tables=settings.price_tables,
        default_table=settings.default_price_table,
    )
    app.state.indicator_service = IndicatorService(
        min_records=settings.indicator_min_records,
        rsi_period=settings.rsi_period,
        sma_period=settings.sma_period,
        ema_period=settings.ema_period,
    )
    app.state.binance_client = BinanceClient(
        session,
        base_url=settings.binance_base_url,
        max_retries=settings.binance_max_retries,
        backoff_seconds=settings.binance_backoff_seconds,
        max_retry_after_seconds=settings.binance_max_retry_after_seconds,
    )

    yield

    # Shutdown
    logger.info("Shutting down...")
    await session.close()
    await close_db(engine)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        FXDash Market Dashboard API

        ## Architecture
        - **Price History**: Daily EUR/USD candles from Postgres, bucketed by period
        - **Indicator Engine**: RSI, SMA and EMA (pure Python/NumPy)
        - **Market Data**: Binance tickers, klines and exchange info
        """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    # CORS middleware - allow both frontend ports
    cors_origins = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:3001",
    ]
    # Add any additional origins from settings
    if settings.allowed_origins:
        cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Include API routes
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check(response: Response):
        """Health check endpoint used by the dashboard connection indicator."""
        response.headers.update(NO_CACHE_HEADERS)
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "app": settings.app_name,
            "version": settings.app_version,
        }

    @app.head("/health")
    async def health_check_head():
        return Response(status_code=200, headers=NO_CACHE_HEADERS)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "FXDash Backend API",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
