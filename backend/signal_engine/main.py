"""
Momentum Signal Engine - FastAPI Application

Main entry point for the HTTP surface: health check, on-demand
evaluation and the background scanner.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from signal_engine.core.config import settings
from signal_engine.api.v1 import router as api_v1_router
from signal_engine.services.cache import InMemoryDedupStore
from signal_engine.services.data_ingestion import get_data_ingestion_service
from signal_engine.services.scanner import SignalScanner, LoggingSink
from signal_engine.services.strategy import get_signal_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    scanner = SignalScanner(
        get_signal_service(),
        dedup_store=InMemoryDedupStore(),
        sink=LoggingSink(),
    )
    app.state.scanner = scanner

    scanner_task = None
    if settings.enable_scanner and settings.instruments:
        scanner_task = asyncio.create_task(scanner.run_forever())
        logger.info(
            f"Scanner started: {len(settings.instruments)} instruments, "
            f"every {settings.scan_interval_seconds:.0f}s"
        )
    else:
        logger.info("Scanner disabled (enable_scanner=false or no instruments)")
    app.state.scanner_task = scanner_task

    yield

    # Shutdown
    logger.info("Shutting down...")
    if scanner_task:
        scanner_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await scanner_task
    await get_data_ingestion_service().close()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Momentum Signal Engine API

    ## Pipeline
    - **Multi-Source Fetch**: Binance Futures / Binance Spot / Bybit / OKX with fallback
    - **Indicator Engine**: RSI(14), Bollinger(20, 2), ATR(14), velocity/acceleration
    - **Decision Engine**: LONG / SHORT / no signal with SL, TP, RR and confidence
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    task = getattr(app.state, "scanner_task", None)
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "scanner_running": task is not None and not task.done(),
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.app_name} - running",
        "docs": "/docs",
        "health": "/health",
    }
