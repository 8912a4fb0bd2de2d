"""CallRelay API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CallRelayError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - In-flight supervised dispatches are drained on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory: tests build a fresh app with dependency_overrides
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from callrelay import __version__
from callrelay.api.error_handlers import register_error_handlers
from callrelay.api.routes import agent_updates, chat_completion, health
from callrelay.config import get_settings
from callrelay.infrastructure.observability import setup_logging
from callrelay.services.container import get_container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    missing = settings.missing_agent_config()
    if missing:
        logger.warning(
            f"Specialized agents disabled until configured: {', '.join(missing)}",
        )
    logger.info("CallRelay API started")
    yield
    if get_container.cache_info().currsize:
        await get_container().supervisor.drain()
    logger.info("CallRelay API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="CallRelay API", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes: explicit registration
    app.include_router(health.router)
    app.include_router(chat_completion.router)
    app.include_router(agent_updates.router)

    register_error_handlers(app)
    return app


app = create_app()
