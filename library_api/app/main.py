"""
Main entrypoint for the Library Management API.

This module assembles the FastAPI application: logging, the database
handle, the stores and the borrowing service, exception handlers and
the versioned routers.  ``create_app`` builds a fully wired app; an
instance is created at import time as ``app`` so it can be served
with uvicorn::

    uvicorn library_api.app.main:app --reload

Tests call ``create_app`` with their own ``Settings`` to get an app
bound to a temporary database.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from .api.handlers import register_exception_handlers
from .api.v1.router import router as v1_router
from .core.config import Settings, settings
from .core.db import Database
from .core.logging_config import setup_logging
from .services.borrowing_service import BorrowingService
from .stores.borrower_store import BorrowerStore
from .stores.catalog_store import CatalogStore
from .stores.loan_ledger import LoanLedger

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Configuration to use.  Defaults to the module-level settings
        read from the environment.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or settings
    # Initialise logging before anything else so that the stores can
    # safely log while the schema is migrated.
    setup_logging(app_settings.log_level, app_settings.log_file)

    database = Database.from_settings(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.init_schema()
        logger.info("Database ready at %s", database.path)
        yield

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        lifespan=lifespan,
    )

    catalog = CatalogStore(database)
    borrowers = BorrowerStore(database)
    loans = LoanLedger(database)
    app.state.settings = app_settings
    app.state.database = database
    app.state.catalog = catalog
    app.state.borrowers = borrowers
    app.state.loans = loans
    app.state.borrowing = BorrowingService(database, catalog, borrowers, loans)

    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception:
            logger.info("%s %s -> %s", request.method, request.url.path, 500)
            raise
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    app.include_router(v1_router)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
