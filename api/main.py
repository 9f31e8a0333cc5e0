"""
LeeCMS FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api import db
from api.config import settings
from api.routes import admin_pages as admin_page_routes
from api.routes import cms as cms_routes
from api.routes import pages as pages_routes

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown logic:
    - Initialize database pool
    - Close database pool on shutdown
    """
    # Startup
    await db.init_pool()
    logger.info("Database pool initialized")

    yield

    # Shutdown
    await db.close_pool()
    logger.info("Database pool closed")


app = FastAPI(
    title="LeeCMS",
    docs_url=None if settings.ENVIRONMENT == "production" else "/docs",
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(pages_routes.router)
app.include_router(admin_page_routes.router)
app.include_router(cms_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
