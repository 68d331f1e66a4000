"""Live view of one user's notifications for a mounted consumer."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime

import anyio
from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawmatch.config import get_settings
from pawmatch.domain.entities import Notification
from pawmatch.infrastructure.notifications import (
    ChangeEvent,
    NotificationChangeFeed,
    NotificationSubscription,
    notification_feed,
)
from pawmatch.infrastructure.repositories import NotificationRepository

from .dedup import list_notifications
from .read_state import mark_all_notifications_as_read, mark_notifications_as_read

logger = logging.getLogger(__name__)

CONSUMER_BELL = "bell"
CONSUMER_PAGE = "page"

ChangeCallback = Callable[[Sequence[Notification]], "Awaitable[None] | None"]
ToastCallback = Callable[[Notification], "Awaitable[None] | None"]


@dataclass(frozen=True)
class ReadStatePatch:
    """Tentative read-state change together with its inverse."""

    tentative: dict[int, Notification]
    previous: dict[int, Notification | None]


class NotificationInbox:
    """Keep a consumer's notification list converged with the store.

    Realtime inserts trigger a full refresh (dedup + list), realtime updates
    patch the single changed row, and a periodic backstop poll refreshes when
    anything newer than the last seen ``created_at`` exists. The poll alone is
    enough for correctness; the feed only lowers latency.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        user_id: str,
        *,
        consumer: str = CONSUMER_BELL,
        feed: NotificationChangeFeed | None = None,
        limit: int | None = None,
        poll_seconds: float | None = None,
        retry_seconds: float | None = None,
        on_change: ChangeCallback | None = None,
        on_toast: ToastCallback | None = None,
    ) -> None:
        settings = get_settings()
        self.user_id = user_id
        self.consumer = consumer
        self._session_factory = session_factory
        if limit is None:
            limit = (
                settings.page_notification_limit
                if consumer == CONSUMER_PAGE
                else settings.bell_notification_limit
            )
        if poll_seconds is None:
            poll_seconds = (
                settings.page_poll_seconds
                if consumer == CONSUMER_PAGE
                else settings.bell_poll_seconds
            )
        self._limit = limit
        self._poll_seconds = poll_seconds
        self._on_change = on_change
        self._on_toast = on_toast
        self._confirmed: list[Notification] = []
        self._tentative: dict[int, Notification] = {}
        self._last_seen: datetime | None = None
        self._running = False
        self._poll_task: asyncio.Task[None] | None = None
        self._refresh_lock = asyncio.Lock()
        self.subscription = NotificationSubscription(
            feed or notification_feed,
            user_id,
            consumer=consumer,
            on_insert=self._handle_insert,
            on_update=self._handle_update,
            retry_seconds=retry_seconds,
        )

    @property
    def notifications(self) -> list[Notification]:
        return [self._tentative.get(n.id, n) if n.id is not None else n for n in self._confirmed]

    @property
    def confirmed_notifications(self) -> list[Notification]:
        return list(self._confirmed)

    @property
    def unread_count(self) -> int:
        return sum(1 for notification in self.notifications if not notification.is_read)

    @property
    def last_seen_at(self) -> datetime | None:
        return self._last_seen

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Subscribe, load the initial list and start the backstop poll."""

        if self._running:
            return
        self._running = True
        self.subscription.open()
        await self.refresh()
        self._poll_task = asyncio.create_task(
            self._poll_loop(), name=f"notification-poll-{self.consumer}-{self.user_id}"
        )

    def close(self) -> None:
        """Release the subscription and stop polling; nothing fires afterwards."""

        self._running = False
        self.subscription.close()
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

    async def __aenter__(self) -> "NotificationInbox":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def refresh(self, *, show_toast: bool = False) -> list[Notification]:
        """Reload the list after a dedup pass."""

        if not self._running:
            return self.notifications
        async with self._refresh_lock:
            try:
                loaded = await to_thread.run_sync(self._load)
            except SQLAlchemyError:
                logger.exception("Failed to refresh notifications for user %s", self.user_id)
                return self.notifications
            if not self._running:
                return self.notifications

            self._confirmed = list(loaded)
            present = {notification.id for notification in loaded}
            self._tentative = {
                notification_id: patched
                for notification_id, patched in self._tentative.items()
                if notification_id in present
            }
            newest = max(
                (n.created_at for n in loaded if n.created_at is not None), default=None
            )
            if newest is not None and (self._last_seen is None or newest > self._last_seen):
                self._last_seen = newest

            await self._emit_change()
            if show_toast and loaded and not loaded[0].is_read:
                await _maybe_await(self._on_toast, loaded[0])
        return self.notifications

    async def poll_once(self) -> bool:
        """Refresh when a notification newer than the last seen one exists."""

        if not self._running:
            return False
        try:
            has_newer = await to_thread.run_sync(self._has_newer)
        except SQLAlchemyError:
            logger.exception("Backstop poll failed for user %s", self.user_id)
            return False
        if not has_newer or not self._running:
            return False
        logger.debug("Backstop poll found new notifications for user %s", self.user_id)
        await self.refresh(show_toast=True)
        return True

    async def mark_as_read(self, notification_ids: Iterable[int]) -> bool:
        """Mark notifications read, showing the change before the store confirms it."""

        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        patch = self._build_read_patch(ids)
        if patch is None:
            return True
        return await self._run_read_command(
            patch,
            lambda session: mark_notifications_as_read(
                session, user_id=self.user_id, notification_ids=ids
            ),
        )

    async def mark_all_as_read(self) -> bool:
        patch = self._build_read_patch(
            notification.id for notification in self.notifications if not notification.is_read
        )
        if patch is None:
            return True
        return await self._run_read_command(
            patch,
            lambda session: mark_all_notifications_as_read(session, user_id=self.user_id),
        )

    async def _handle_insert(self, event: ChangeEvent) -> None:
        await self.refresh(show_toast=True)

    async def _handle_update(self, event: ChangeEvent) -> None:
        if not self._running:
            return
        updated = event.notification
        for index, notification in enumerate(self._confirmed):
            if notification.id == updated.id:
                self._confirmed[index] = updated
                tentative = self._tentative.get(updated.id)
                if tentative is not None and tentative.is_read == updated.is_read:
                    self._tentative.pop(updated.id, None)
                await self._emit_change()
                return

    async def _poll_loop(self) -> None:
        while self._running:
            await anyio.sleep(self._poll_seconds)
            await self.poll_once()

    async def _run_read_command(
        self, patch: ReadStatePatch, operation: Callable[[Session], object]
    ) -> bool:
        self._apply_patch(patch)
        await self._emit_change()
        try:
            await to_thread.run_sync(self._in_session, operation)
        except SQLAlchemyError:
            logger.exception("Failed to update read state for user %s", self.user_id)
            if self._running:
                self._revert_patch(patch)
                await self._emit_change()
            return False
        if self._running:
            self._confirm_patch(patch)
            await self._emit_change()
        return True

    def _build_read_patch(self, notification_ids: Iterable[int]) -> ReadStatePatch | None:
        wanted = set(notification_ids)
        tentative: dict[int, Notification] = {}
        previous: dict[int, Notification | None] = {}
        for notification in self.notifications:
            if notification.id in wanted and not notification.is_read:
                tentative[notification.id] = replace(notification, is_read=True)
                previous[notification.id] = self._tentative.get(notification.id)
        if not tentative:
            return None
        return ReadStatePatch(tentative=tentative, previous=previous)

    def _apply_patch(self, patch: ReadStatePatch) -> None:
        self._tentative.update(patch.tentative)

    def _revert_patch(self, patch: ReadStatePatch) -> None:
        for notification_id, previous in patch.previous.items():
            if previous is None:
                self._tentative.pop(notification_id, None)
            else:
                self._tentative[notification_id] = previous

    def _confirm_patch(self, patch: ReadStatePatch) -> None:
        for index, notification in enumerate(self._confirmed):
            confirmed = patch.tentative.get(notification.id)
            if confirmed is not None:
                self._confirmed[index] = confirmed
        for notification_id, patched in patch.tentative.items():
            if self._tentative.get(notification_id) is patched:
                self._tentative.pop(notification_id, None)

    async def _emit_change(self) -> None:
        await _maybe_await(self._on_change, self.notifications)

    def _in_session(self, operation: Callable[[Session], object]) -> object:
        with self._session_factory() as session:
            return operation(session)

    def _load(self) -> list[Notification]:
        with self._session_factory() as session:
            return list(list_notifications(session, self.user_id, limit=self._limit))

    def _has_newer(self) -> bool:
        with self._session_factory() as session:
            return NotificationRepository(session).exists_newer_than(self.user_id, self._last_seen)


async def _maybe_await(callback: Callable[..., object] | None, *args: object) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


__all__ = [
    "CONSUMER_BELL",
    "CONSUMER_PAGE",
    "NotificationInbox",
    "ReadStatePatch",
]
