"""In-process change feed for rows of the ``notifications`` table."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, DefaultDict

from pawmatch.domain.entities import Notification

logger = logging.getLogger(__name__)


class ChangeEventType(str, Enum):
    """Row-level change kinds carried by the feed."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"


class SubscriptionStatus(str, Enum):
    """Outcome reported to a channel when it tries to subscribe."""

    SUBSCRIBED = "SUBSCRIBED"
    CHANNEL_ERROR = "CHANNEL_ERROR"
    CLOSED = "CLOSED"


@dataclass(frozen=True)
class ChangeEvent:
    """A committed change to a single notification row."""

    type: ChangeEventType
    notification: Notification


Listener = Callable[[ChangeEvent], "Awaitable[None] | None"]


class FeedChannel:
    """Named channel delivering the changes of one user's notifications.

    Listeners always run on the event loop the channel was created on, so the
    feed can be published to from worker threads. Once the channel is closed no
    listener is invoked again, even for events already queued on the loop.
    """

    def __init__(
        self,
        feed: "NotificationChangeFeed",
        name: str,
        *,
        user_id: str,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self.name = name
        self.user_id = user_id
        self._feed = feed
        self._loop = loop
        self._listeners: DefaultDict[ChangeEventType, list[Listener]] = defaultdict(list)
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False
        self.status: SubscriptionStatus | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def on(self, event_type: ChangeEventType, listener: Listener) -> "FeedChannel":
        """Register ``listener`` for ``event_type`` and return the channel."""

        self._listeners[event_type].append(listener)
        return self

    def subscribe(
        self, callback: Callable[[SubscriptionStatus], None] | None = None
    ) -> SubscriptionStatus:
        """Attach the channel to the feed and report the resulting status."""

        status = self._feed._attach(self)
        self.status = status
        if status is not SubscriptionStatus.SUBSCRIBED:
            self._closed = True
        if callback is not None:
            callback(status)
        return status

    def deliver(self, event: ChangeEvent) -> None:
        """Queue ``event`` for the listeners; safe to call from any thread."""

        if self._closed:
            return
        try:
            self._loop.call_soon_threadsafe(self._dispatch, event)
        except RuntimeError:
            logger.warning("Event loop for channel %s is gone; dropping channel", self.name)
            self._feed.remove_channel(self)

    def close(self) -> None:
        self._closed = True
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    def _dispatch(self, event: ChangeEvent) -> None:
        if self._closed:
            return
        for listener in list(self._listeners.get(event.type, ())):
            try:
                result = listener(event)
            except Exception:
                logger.exception("Listener on channel %s failed", self.name)
                continue
            if inspect.isawaitable(result):
                task = self._loop.create_task(result)
                self._tasks.add(task)
                task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: "asyncio.Task[Any]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Listener on channel %s failed", self.name, exc_info=(type(exc), exc, exc.__traceback__)
            )


class NotificationChangeFeed:
    """Fan committed notification changes out to channels grouped by user."""

    def __init__(self) -> None:
        self._channels: DefaultDict[str, dict[str, FeedChannel]] = defaultdict(dict)
        self._names: set[str] = set()
        self._lock = threading.Lock()
        self._accepting = True

    def channel(self, name: str, *, user_id: str) -> FeedChannel:
        """Create a channel bound to the running event loop."""

        loop = asyncio.get_running_loop()
        return FeedChannel(self, name, user_id=user_id, loop=loop)

    def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to every channel filtered on its recipient."""

        with self._lock:
            channels = list(self._channels.get(event.notification.user_id, {}).values())
        for channel in channels:
            channel.deliver(event)
        return len(channels)

    def remove_channel(self, channel: FeedChannel) -> None:
        """Detach ``channel``; no listener of it runs afterwards."""

        channel.close()
        with self._lock:
            user_channels = self._channels.get(channel.user_id)
            if user_channels is not None and user_channels.get(channel.name) is channel:
                user_channels.pop(channel.name, None)
                self._names.discard(channel.name)
                if not user_channels:
                    self._channels.pop(channel.user_id, None)

    def channel_count(self, user_id: str | None = None) -> int:
        with self._lock:
            if user_id is not None:
                return len(self._channels.get(user_id, {}))
            return sum(len(channels) for channels in self._channels.values())

    def close(self) -> None:
        """Stop accepting subscriptions and drop every open channel."""

        with self._lock:
            self._accepting = False
            channels = [
                channel for group in self._channels.values() for channel in group.values()
            ]
        for channel in channels:
            self.remove_channel(channel)

    def open(self) -> None:
        with self._lock:
            self._accepting = True

    def _attach(self, channel: FeedChannel) -> SubscriptionStatus:
        with self._lock:
            if not self._accepting:
                return SubscriptionStatus.CLOSED
            if channel.name in self._names:
                return SubscriptionStatus.CHANNEL_ERROR
            self._names.add(channel.name)
            self._channels[channel.user_id][channel.name] = channel
        return SubscriptionStatus.SUBSCRIBED


__all__ = [
    "ChangeEvent",
    "ChangeEventType",
    "FeedChannel",
    "Listener",
    "NotificationChangeFeed",
    "SubscriptionStatus",
]
