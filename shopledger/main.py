"""Shop Ledger API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly, one router per resource
    - Global error handlers map ShopLedgerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py and are registered once here
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from shopledger import __version__
from shopledger.api.error_handlers import register_error_handlers
from shopledger.api.routes import (
    accounts, categories, customers, dashboard, health, inventory, orders,
    products, settings as settings_routes, transactions, workers,
)
from shopledger.config import get_settings
from shopledger.infrastructure.database import close_db, init_db
from shopledger.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Shop Ledger API started")
    yield
    await close_db()
    logger.info("Shop Ledger API shut down")


app = FastAPI(
    title="Shop Ledger API", version=__version__, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(dashboard.router)
app.include_router(orders.router)
app.include_router(customers.router)
app.include_router(categories.router)
app.include_router(products.router)
app.include_router(inventory.router)
app.include_router(workers.router)
app.include_router(accounts.router)
app.include_router(transactions.router)
app.include_router(settings_routes.router)

# Mounted after the API routes so /api/v1/* takes precedence
if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
