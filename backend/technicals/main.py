"""
StockPro Technicals - FastAPI Application

Main entry point for the technical analysis API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from technicals.core.config import settings
from technicals.api.v1 import router as api_v1_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Batch concurrency: {settings.batch_max_concurrency}")

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    StockPro Technical Analysis API

    ## Pipeline
    - **Moving Averages**: SMA20/50/200, EMA9/21, trend direction and strength
    - **Momentum**: RSI(14) and Stochastic(14, 3)
    - **MACD**: 12/26/9 line, signal, histogram and crossover
    - **Bollinger Bands**: 20-bar, 2 sigma, price position
    - **Composite**: weighted score, signal, confidence, interpretation

    ## Core Principles
    - Pure computation over the supplied series, no cached state
    - Missing history marks an indicator unavailable, never fails the report
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "StockPro Technicals API",
        "docs": "/docs",
        "health": "/health",
    }
