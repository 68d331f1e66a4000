"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy.orm import Session

from pawmatch.domain.entities import Notification, NotificationKey
from pawmatch.infrastructure.models import NotificationModel
from pawmatch.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: str,
        *,
        limit: int | None = 50,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_all(self, *, limit: int | None = 500) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_by_key(self, key: NotificationKey) -> Sequence[Notification]:
        """Return the notifications that describe the same logical event as ``key``.

        The logical reference of message notifications lives inside the JSON
        payload, so candidates are narrowed in SQL and matched in Python.
        """

        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == key.user_id)
            .filter(NotificationModel.type == key.type)
        )
        if key.sender_id is None:
            query = query.filter(NotificationModel.sender_id.is_(None))
        else:
            query = query.filter(NotificationModel.sender_id == key.sender_id)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        entities = [self._to_entity(model) for model in query.all()]
        return [entity for entity in entities if entity.key == key]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, notification_id: int, *, user_id: str | None = None) -> bool:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id
        )
        if user_id is not None:
            query = query.filter(NotificationModel.user_id == user_id)
        deleted = query.delete(synchronize_session=False)
        self.session.commit()
        return bool(deleted)

    def delete_many(self, notification_ids: Iterable[int]) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id.in_(ids))
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return int(deleted)

    def mark_as_read(
        self, notification_ids: Iterable[int], *, user_id: str
    ) -> Sequence[Notification]:
        """Flip ``is_read`` on the unread rows in ``notification_ids``.

        Returns the rows that actually changed so callers can publish update
        events for them only.
        """

        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return []
        models = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .all()
        )
        for model in models:
            model.is_read = True
        self.session.commit()
        return [self._to_entity(model) for model in models]

    def mark_all_as_read(self, user_id: str) -> Sequence[Notification]:
        ids = [
            row.id
            for row in self.session.query(NotificationModel.id)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .all()
        ]
        return self.mark_as_read(ids, user_id=user_id)

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .count()
        )

    def exists_newer_than(self, user_id: str, since: datetime | None) -> bool:
        query = self.session.query(NotificationModel.id).filter(
            NotificationModel.user_id == user_id
        )
        if since is not None:
            query = query.filter(
                NotificationModel.created_at > ensure_app_naive_datetime(since)
            )
        return query.first() is not None

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel,
        notification: Notification,
    ) -> None:
        model.created_at = (
            ensure_app_naive_datetime(notification.created_at) or now_in_app_naive_datetime()
        )
        model.user_id = notification.user_id
        model.type = notification.type
        model.sender_id = notification.sender_id
        model.content = notification.content
        model.reference_id = notification.reference_id
        model.data = notification.data or None
        model.is_read = bool(notification.is_read)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            sender_id=model.sender_id,
            content=model.content,
            reference_id=model.reference_id,
            data=dict(model.data) if model.data else None,
            is_read=bool(model.is_read),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
