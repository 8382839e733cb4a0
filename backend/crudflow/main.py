"""crudflow API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CrudflowError → structured JSON or HTML responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - HTTPS redirect is opt-in (settings.require_https) and skips loopback clients
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from crudflow import __version__
from crudflow.api.error_handlers import register_error_handlers
from crudflow.api.middleware import require_secure_connection
from crudflow.api.routes import catalog, health
from crudflow.api.templating import templates
from crudflow.config import get_settings
from crudflow.infrastructure import database
from crudflow.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(f"crudflow API started ({settings.environment})")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("crudflow API shutting down")


app = FastAPI(
    title="crudflow API", version=__version__, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
if settings.require_https:
    app.middleware("http")(require_secure_connection)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(catalog.category_api_router)
app.include_router(catalog.product_api_router)
app.include_router(catalog.category_view_router)
app.include_router(catalog.product_view_router)

register_error_handlers(app, templates, settings)


@app.get("/", include_in_schema=False)
async def home():
    return RedirectResponse("/products")
