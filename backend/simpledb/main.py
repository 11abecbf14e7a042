"""SimpleDB API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SimpleDbError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Provider initialized and storage created on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - A failed on_create() does not stop the process: readiness probe reports 503
      and CRUD calls fail with PROVIDER_NOT_READY
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from simpledb.api.error_handlers import register_error_handlers
from simpledb.api.routes import changes, health, resources, schema
from simpledb.config import get_settings
from simpledb.infrastructure.observability import setup_logging
from simpledb.services.provider import build_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    provider = build_provider(settings)
    ready = await provider.on_create()
    app.state.provider = provider
    logger.info("SimpleDB API started (ready=%s)", ready)
    yield
    logger.info("SimpleDB API shutting down")
    await provider.close()


app = FastAPI(
    title="SimpleDB API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(schema.router)
app.include_router(changes.router)
app.include_router(resources.router)

register_error_handlers(app)
