"""Coworking pricing API: FastAPI entry point.

Registers middleware, routers, and lifecycle hooks. Each vertical
adds its own router under /api/{vertical}/.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import RequestContextMiddleware
from core.observability.logging_setup import setup_logging
from verticals.coworking.config import config

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown hooks."""
    setup_logging(config.log_level)
    logger.info("Coworking pricing API started")
    yield
    logger.info("Coworking pricing API shutting down")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Coworking Pricing",
    description="Dynamic pricing-rule evaluation for the coworking marketplace",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request id + access log
app.add_middleware(RequestContextMiddleware)

# ---------------------------------------------------------------------------
# Routers: verticals register here
# ---------------------------------------------------------------------------

from verticals.coworking.router import router as coworking_router  # noqa: E402

app.include_router(coworking_router, prefix="/api/coworking", tags=["Coworking"])


# ---------------------------------------------------------------------------
# Health & root
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}


@app.get("/")
async def root():
    return {
        "name": "Coworking Pricing",
        "version": VERSION,
        "docs": "/docs",
        "verticals": ["coworking"],
    }
