"""
Main entrypoint for the Boycott Catalog API.

This module assembles the FastAPI application: it sets up logging,
CORS, the catalog error handlers and the versioned router.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app`` so it can be served
directly, e.g.::

    uvicorn boycott_api.app.main:app --reload

or through ``run.py``, which also reads a ``.env`` file.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.  Database
        migrations are applied when the application starts up.
    """
    # Configure logging before anything else so that startup can log.
    setup_logging()

    app = FastAPI(title=settings.project_name, version=settings.api_version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file on first start and brings the
        # schema up to date.
        init_db()

    return app


app = create_app()
