"""Tests for the live notification inbox used by the bell and the page."""

from __future__ import annotations

import asyncio

import anyio
import pytest
from sqlalchemy.exc import SQLAlchemyError

from pawmatch.application.use_cases.notifications import (
    CONSUMER_PAGE,
    NotificationInbox,
    create_interest_notification,
    mark_notifications_as_read,
)
from pawmatch.infrastructure.notifications import NotificationChangeFeed
from pawmatch.infrastructure.repositories import NotificationRepository

pytestmark = pytest.mark.anyio


class Recorder:
    """Collect the snapshots and toasts emitted by an inbox."""

    def __init__(self) -> None:
        self.snapshots: list[list[tuple[int, bool]]] = []
        self.toasts: list[int] = []
        self.toast_received = asyncio.Event()
        self.changed = asyncio.Event()

    def on_change(self, notifications) -> None:
        self.snapshots.append([(n.id, n.is_read) for n in notifications])
        self.changed.set()

    def on_toast(self, notification) -> None:
        self.toasts.append(notification.id)
        self.toast_received.set()


def _inbox(session_factory, recorder, **kwargs):
    kwargs.setdefault("poll_seconds", 60)
    return NotificationInbox(
        session_factory,
        "alice",
        on_change=recorder.on_change,
        on_toast=recorder.on_toast,
        **kwargs,
    )


async def test_start_loads_deduplicated_list(session_factory, feed, insert_notification):
    insert_notification("alice", "interest", sender_id="bob", reference_id=1, minutes=0)
    newest = insert_notification("alice", "interest", sender_id="bob", reference_id=1, minutes=1)
    recorder = Recorder()

    async with _inbox(session_factory, recorder) as inbox:
        assert [n.id for n in inbox.notifications] == [newest.id]
        assert inbox.unread_count == 1
        assert inbox.subscription.is_subscribed
        assert inbox.last_seen_at is not None

    assert recorder.toasts == []
    assert not inbox.running


async def test_bell_is_limited_to_five_items(session_factory, feed, insert_notification):
    for minute in range(8):
        insert_notification("alice", "interest", sender_id=f"user-{minute}", minutes=minute)
    recorder = Recorder()

    async with _inbox(session_factory, recorder) as bell:
        assert len(bell.notifications) == 5
    async with _inbox(session_factory, recorder, consumer=CONSUMER_PAGE) as page:
        assert len(page.notifications) == 8


async def test_realtime_insert_refreshes_and_toasts(session, session_factory, feed):
    recorder = Recorder()

    async with _inbox(session_factory, recorder) as inbox:
        created = create_interest_notification(session, "alice", "bob", 1)
        with anyio.fail_after(2):
            await recorder.toast_received.wait()

        assert recorder.toasts == [created.id]
        assert [n.id for n in inbox.notifications] == [created.id]


async def test_realtime_update_patches_the_row(session, session_factory, feed, insert_notification):
    notification = insert_notification("alice", "interest", sender_id="bob", reference_id=1)
    recorder = Recorder()

    async with _inbox(session_factory, recorder) as inbox:
        recorder.changed.clear()
        mark_notifications_as_read(session, user_id="alice", notification_ids=[notification.id])
        with anyio.fail_after(2):
            await recorder.changed.wait()

        assert inbox.confirmed_notifications[0].is_read is True
        assert inbox.unread_count == 0


async def test_backstop_poll_recovers_a_dropped_event(session, session_factory):
    isolated_feed = NotificationChangeFeed()
    recorder = Recorder()

    async with _inbox(session_factory, recorder, feed=isolated_feed) as inbox:
        assert inbox.notifications == []
        # The realtime event goes to another feed, so only the poll can see it.
        created = create_interest_notification(session, "alice", "bob", 1)

        assert await inbox.poll_once() is True
        assert [n.id for n in inbox.notifications] == [created.id]
        assert recorder.toasts == [created.id]
        assert await inbox.poll_once() is False


async def test_poll_loop_runs_on_its_interval(session, session_factory):
    isolated_feed = NotificationChangeFeed()
    recorder = Recorder()

    async with _inbox(session_factory, recorder, feed=isolated_feed, poll_seconds=0.05):
        create_interest_notification(session, "alice", "bob", 1)
        with anyio.fail_after(2):
            await recorder.toast_received.wait()


async def test_mark_as_read_is_optimistic_and_reverted_on_failure(
    session_factory, feed, insert_notification, monkeypatch
):
    notification = insert_notification("alice", "interest", sender_id="bob", reference_id=1)
    recorder = Recorder()

    def _fail(self, ids, *, user_id):
        raise SQLAlchemyError("write failed")

    async with _inbox(session_factory, recorder) as inbox:
        monkeypatch.setattr(NotificationRepository, "mark_as_read", _fail)
        recorder.snapshots.clear()

        assert await inbox.mark_as_read([notification.id]) is False

        assert recorder.snapshots[0] == [(notification.id, True)]
        assert recorder.snapshots[-1] == [(notification.id, False)]
        assert inbox.notifications[0].is_read is False
        assert inbox.confirmed_notifications[0].is_read is False


async def test_mark_all_as_read_confirms_the_tentative_state(
    session, session_factory, insert_notification
):
    isolated_feed = NotificationChangeFeed()
    insert_notification("alice", "interest", sender_id="bob", reference_id=1)
    insert_notification("alice", "interest", sender_id="carol", reference_id=1, minutes=1)
    recorder = Recorder()

    async with _inbox(session_factory, recorder, feed=isolated_feed) as inbox:
        assert inbox.unread_count == 2

        assert await inbox.mark_all_as_read() is True

        assert inbox.unread_count == 0
        assert all(n.is_read for n in inbox.confirmed_notifications)
    assert NotificationRepository(session).count_unread("alice") == 0


async def test_nothing_fires_after_close(session, session_factory, feed):
    recorder = Recorder()
    inbox = _inbox(session_factory, recorder)
    await inbox.start()
    inbox.close()
    recorder.snapshots.clear()

    create_interest_notification(session, "alice", "bob", 1)
    await asyncio.sleep(0.1)

    assert recorder.snapshots == []
    assert recorder.toasts == []
    assert await inbox.poll_once() is False
    assert feed.channel_count("alice") == 0
