"""
Bookkeeping Ledger: FastAPI application.

create_app() builds the app; the ledger store is opened in the
lifespan (unless one is passed in) and disposed on shutdown.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bookkeeping.config import get_settings
from bookkeeping.logging_config import setup_logging
from bookkeeping.store import LedgerStore
from bookkeeping.api.accounts import router as accounts_router
from bookkeeping.api.health import router as health_router
from bookkeeping.api.reports import router as reports_router
from bookkeeping.api.transactions import router as transactions_router

logger = logging.getLogger(__name__)


def create_app(store: LedgerStore | None = None) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_store = getattr(app.state, "store", None) is None
        if owns_store:
            app.state.store = LedgerStore(settings.DATABASE_URL)
            app.state.store.create_schema()
            logger.info("Ledger store opened", extra={"environment": settings.ENVIRONMENT})
        yield
        if owns_store:
            app.state.store.dispose()
            app.state.store = None

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Double-entry ledger with financial reports",
        lifespan=lifespan,
    )
    app.state.store = store

    # Register routers
    app.include_router(health_router)
    app.include_router(accounts_router)
    app.include_router(transactions_router)
    app.include_router(reports_router)
    return app


setup_logging()
app = create_app()
