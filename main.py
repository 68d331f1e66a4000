import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pawmatch.application.use_cases.matching import swipe_sessions
from pawmatch.config import get_settings
from pawmatch.infrastructure.database import engine, initialize_database
from pawmatch.infrastructure.notifications import notification_feed
from pawmatch.interfaces.api.routes import register_routes
from pawmatch.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database and realtime feed, release them on shutdown."""

    setup_logging(get_settings())
    initialize_database()
    notification_feed.open()
    logger.info("PawMatch API started")
    yield
    notification_feed.close()
    swipe_sessions.clear()
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="PawMatch", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
