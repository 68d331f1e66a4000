from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_TIMEZONE", "UTC")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from pawmatch.domain.entities import Notification, Pet  # noqa: E402
from pawmatch.infrastructure import models  # noqa: E402,F401
from pawmatch.infrastructure.database import Base  # noqa: E402
from pawmatch.infrastructure.notifications import notification_feed  # noqa: E402
from pawmatch.infrastructure.repositories import (  # noqa: E402
    ConversationRepository,
    NotificationRepository,
    PetRepository,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def feed():
    """Shared notification feed, reopened for every test."""

    notification_feed.open()
    yield notification_feed
    notification_feed.close()
    notification_feed.open()


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def make_pet(session):
    """Persist a pet; later calls get newer ``created_at`` values."""

    counter = {"value": 0}

    def _make_pet(owner_id: str, name: str, species: str | None = "dog", gender: str | None = "male") -> Pet:
        counter["value"] += 1
        return PetRepository(session).create(
            Pet(
                id=None,
                owner_id=owner_id,
                name=name,
                species=species,
                gender=gender,
                created_at=BASE_TIME + timedelta(minutes=counter["value"]),
            )
        )

    return _make_pet


@pytest.fixture()
def make_conversation(session):
    def _make_conversation(user1_id: str, user2_id: str):
        return ConversationRepository(session).create(user1_id=user1_id, user2_id=user2_id)

    return _make_conversation


@pytest.fixture()
def insert_notification(session):
    """Insert a raw notification row, bypassing the factory."""

    def _insert(
        user_id: str,
        type: str,
        *,
        sender_id: str | None = None,
        reference_id: int | None = None,
        data: dict | None = None,
        minutes: int = 0,
        is_read: bool = False,
        content: str = "raw",
    ) -> Notification:
        return NotificationRepository(session).create(
            Notification(
                id=None,
                user_id=user_id,
                type=type,
                sender_id=sender_id,
                content=content,
                reference_id=reference_id,
                data=data,
                is_read=is_read,
                created_at=BASE_TIME + timedelta(minutes=minutes),
            )
        )

    return _insert
