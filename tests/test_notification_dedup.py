"""Tests for duplicate notification cleanup."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from pawmatch.application.use_cases.notifications import (
    cleanup_duplicate_notifications,
    find_duplicate_ids,
    list_notifications,
)
from pawmatch.domain.entities import Notification
from pawmatch.infrastructure.repositories import NotificationRepository


def _notification(id, sender_id="bob", reference_id=1, type="match", data=None):
    return Notification(
        id=id,
        user_id="alice",
        type=type,
        sender_id=sender_id,
        content="x",
        reference_id=reference_id,
        data=data,
    )


def test_find_duplicate_ids_keeps_first_of_each_group():
    notifications = [
        _notification(5),
        _notification(4, sender_id="carol"),
        _notification(3),
        _notification(2, reference_id=2),
        _notification(1),
    ]

    assert find_duplicate_ids(notifications) == [3, 1]


def test_find_duplicate_ids_does_not_concatenate_key_fields():
    # ("ab", "c") and ("a", "bc") must stay distinct groups.
    notifications = [
        Notification(id=2, user_id="ab", type="match", sender_id="c", reference_id=1),
        Notification(id=1, user_id="a", type="match", sender_id="bc", reference_id=1),
    ]

    assert find_duplicate_ids(notifications) == []


def test_message_duplicates_group_by_conversation_in_data():
    notifications = [
        _notification(3, type="message", reference_id=7, data={"conversation_id": 7}),
        _notification(2, type="message", reference_id=None, data={"conversation_id": "7"}),
        _notification(1, type="message", reference_id=8, data={"conversation_id": 8}),
    ]

    assert find_duplicate_ids(notifications) == [2]


def test_cleanup_keeps_newest_and_is_idempotent(session, insert_notification):
    oldest = insert_notification("alice", "match", sender_id="bob", reference_id=1, minutes=0)
    middle = insert_notification("alice", "match", sender_id="bob", reference_id=1, minutes=5)
    newest = insert_notification("alice", "match", sender_id="bob", reference_id=1, minutes=10)
    other = insert_notification("alice", "interest", sender_id="bob", reference_id=1, minutes=1)

    first = cleanup_duplicate_notifications(session, "alice")
    second = cleanup_duplicate_notifications(session, "alice")

    assert first.success is True
    assert first.count == 2
    assert second.success is True
    assert second.count == 0
    remaining = {n.id for n in NotificationRepository(session).list_for_user("alice")}
    assert remaining == {newest.id, other.id}
    assert oldest.id not in remaining
    assert middle.id not in remaining


def test_cleanup_only_touches_the_given_user(session, insert_notification):
    insert_notification("alice", "match", sender_id="bob", reference_id=1, minutes=0)
    insert_notification("alice", "match", sender_id="bob", reference_id=1, minutes=1)
    insert_notification("carol", "match", sender_id="bob", reference_id=1, minutes=0)
    insert_notification("carol", "match", sender_id="bob", reference_id=1, minutes=1)

    result = cleanup_duplicate_notifications(session, "alice")

    assert result.count == 1
    assert len(NotificationRepository(session).list_for_user("carol")) == 2


def test_cleanup_requires_user_id(session):
    result = cleanup_duplicate_notifications(session, None)

    assert result.success is False
    assert result.count == 0
    assert result.error


def test_cleanup_reports_store_errors(session, insert_notification, monkeypatch):
    insert_notification("alice", "match", sender_id="bob", reference_id=1, minutes=0)
    insert_notification("alice", "match", sender_id="bob", reference_id=1, minutes=1)

    def _fail(self, ids):
        raise SQLAlchemyError("delete failed")

    monkeypatch.setattr(NotificationRepository, "delete_many", _fail)

    result = cleanup_duplicate_notifications(session, "alice")

    assert result.success is False
    assert "delete failed" in result.error


def test_list_notifications_runs_cleanup_first(session, insert_notification):
    insert_notification("alice", "match", sender_id="bob", reference_id=1, minutes=0)
    newest = insert_notification("alice", "match", sender_id="bob", reference_id=1, minutes=3)
    interest = insert_notification("alice", "interest", sender_id="bob", reference_id=1, minutes=2)

    listed = list_notifications(session, "alice", limit=5)

    assert [n.id for n in listed] == [newest.id, interest.id]


def test_list_notifications_respects_limit(session, insert_notification):
    for minute in range(7):
        insert_notification("alice", "interest", sender_id=f"user-{minute}", reference_id=1, minutes=minute)

    listed = list_notifications(session, "alice", limit=5)

    assert len(listed) == 5
    assert listed[0].sender_id == "user-6"
