"""Subscription handle owned by a single realtime consumer."""

from __future__ import annotations

import asyncio
import logging
import uuid

from pawmatch.config import get_settings

from .feed import (
    ChangeEventType,
    FeedChannel,
    Listener,
    NotificationChangeFeed,
    SubscriptionStatus,
)

logger = logging.getLogger(__name__)


class NotificationSubscription:
    """Acquire/release pair around one feed channel for one consumer.

    Each ``open`` creates a freshly named channel so several consumers of the
    same user (bell, notifications page, a second tab) never collide. A failed
    subscribe is retried after a fixed backoff until ``close`` is called.
    """

    def __init__(
        self,
        feed: NotificationChangeFeed,
        user_id: str,
        *,
        consumer: str,
        on_insert: Listener,
        on_update: Listener,
        retry_seconds: float | None = None,
    ) -> None:
        self._feed = feed
        self.user_id = user_id
        self.consumer = consumer
        self._on_insert = on_insert
        self._on_update = on_update
        if retry_seconds is None:
            retry_seconds = get_settings().realtime_retry_seconds
        self._retry_seconds = retry_seconds
        self._channel: FeedChannel | None = None
        self._retry_handle: asyncio.TimerHandle | None = None
        self._active = False
        self.attempts = 0

    @property
    def status(self) -> SubscriptionStatus | None:
        return self._channel.status if self._channel is not None else None

    @property
    def channel_name(self) -> str | None:
        return self._channel.name if self._channel is not None else None

    @property
    def is_subscribed(self) -> bool:
        return self._active and self.status is SubscriptionStatus.SUBSCRIBED

    def open(self) -> SubscriptionStatus:
        """Tear down any previous channel and subscribe a new one."""

        self._active = True
        self._cancel_retry()
        self._release_channel()

        self.attempts += 1
        channel = self._feed.channel(self._next_channel_name(), user_id=self.user_id)
        channel.on(ChangeEventType.INSERT, self._on_insert)
        channel.on(ChangeEventType.UPDATE, self._on_update)
        self._channel = channel
        status = channel.subscribe()
        logger.info(
            "Realtime subscription %s for user %s: %s", channel.name, self.user_id, status.value
        )
        if status is not SubscriptionStatus.SUBSCRIBED:
            self._schedule_retry()
        return status

    def close(self) -> None:
        """Release the channel; no listener fires after this returns."""

        self._active = False
        self._cancel_retry()
        self._release_channel()

    async def __aenter__(self) -> "NotificationSubscription":
        self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _next_channel_name(self) -> str:
        return f"notifications-{self.consumer}-{self.user_id}-{uuid.uuid4().hex}"

    def _schedule_retry(self) -> None:
        loop = asyncio.get_running_loop()
        logger.warning(
            "Retrying realtime subscription for user %s in %.1fs",
            self.user_id,
            self._retry_seconds,
        )
        self._retry_handle = loop.call_later(self._retry_seconds, self._retry)

    def _retry(self) -> None:
        self._retry_handle = None
        if self._active:
            self.open()

    def _cancel_retry(self) -> None:
        if self._retry_handle is not None:
            self._retry_handle.cancel()
            self._retry_handle = None

    def _release_channel(self) -> None:
        if self._channel is not None:
            self._feed.remove_channel(self._channel)
            self._channel = None


__all__ = ["NotificationSubscription"]
