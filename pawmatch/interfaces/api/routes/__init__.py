from fastapi import FastAPI

from .admin_notifications import router as admin_notifications_router
from .conversations import router as conversations_router
from .notifications import router as notifications_router
from .pets import router as pets_router
from .swipe import router as swipe_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(notifications_router)
    app.include_router(admin_notifications_router)
    app.include_router(swipe_router)
    app.include_router(pets_router)
    app.include_router(conversations_router)
