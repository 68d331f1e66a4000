"""Tests for notification creation and supersession."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy.exc import SQLAlchemyError

from pawmatch.application.use_cases.notifications import (
    create_interest_notification,
    create_match_notification,
    create_message_notification,
    create_notification,
    default_content,
    mark_notifications_as_read,
)
from pawmatch.application.use_cases.notifications.factory import (
    INTEREST_CONTENT,
    MATCH_CONTENT,
    MESSAGE_CONTENT,
)
from pawmatch.infrastructure.repositories import NotificationRepository


def test_match_notification_references_existing_pet(session, make_pet):
    pet = make_pet("bob", "Rex")

    notification = create_match_notification(session, "alice", "bob", pet.id)

    assert notification is not None
    assert notification.id is not None
    assert notification.user_id == "alice"
    assert notification.type == "match"
    assert notification.sender_id == "bob"
    assert notification.reference_id == pet.id
    assert notification.data == {"pet_id": pet.id}
    assert notification.content == MATCH_CONTENT
    assert notification.is_read is False


def test_missing_reference_is_stored_as_null(session, caplog):
    with caplog.at_level(logging.WARNING):
        notification = create_interest_notification(session, "alice", "bob", 999)

    assert notification is not None
    assert notification.reference_id is None
    assert notification.data == {"pet_id": 999}
    assert notification.content == INTEREST_CONTENT
    assert "not found" in caplog.text


def test_message_text_is_never_stored(session, make_conversation):
    conversation = make_conversation("alice", "bob")

    notification = create_message_notification(
        session, "bob", "alice", conversation.id, "see you at the park at 5"
    )

    assert notification is not None
    assert notification.content == MESSAGE_CONTENT
    assert notification.reference_id == conversation.id
    assert notification.data == {"conversation_id": conversation.id}
    stored = NotificationRepository(session).get(notification.id)
    assert "park" not in (stored.content or "")
    assert "park" not in str(stored.data)


def test_new_notification_supersedes_same_logical_event(session, make_pet):
    pet = make_pet("bob", "Rex")

    first = create_match_notification(session, "alice", "bob", pet.id)
    second = create_match_notification(session, "alice", "bob", pet.id)

    remaining = NotificationRepository(session).list_for_user("alice")
    assert [n.id for n in remaining] == [second.id]
    assert first.id != second.id


def test_superseding_a_read_notice_creates_a_fresh_unread_row(session, make_pet):
    pet = make_pet("bob", "Rex")
    first = create_match_notification(session, "alice", "bob", pet.id)
    mark_notifications_as_read(session, user_id="alice", notification_ids=[first.id])

    second = create_match_notification(session, "alice", "bob", pet.id)

    assert second.id > first.id
    assert second.is_read is False
    assert NotificationRepository(session).count_unread("alice") == 1


def test_supersession_keeps_other_events(session, make_pet):
    rex = make_pet("bob", "Rex")
    luna = make_pet("bob", "Luna", gender="female")

    create_match_notification(session, "alice", "bob", rex.id)
    create_match_notification(session, "alice", "bob", luna.id)
    create_match_notification(session, "alice", "carol", rex.id)
    create_interest_notification(session, "alice", "bob", rex.id)

    assert len(NotificationRepository(session).list_for_user("alice")) == 4


def test_message_supersession_uses_conversation_in_data(session, make_conversation, insert_notification):
    conversation = make_conversation("alice", "bob")
    stale = insert_notification(
        "bob",
        "message",
        sender_id="alice",
        reference_id=None,
        data={"conversation_id": str(conversation.id)},
    )

    fresh = create_message_notification(session, "bob", "alice", conversation.id)

    ids = [n.id for n in NotificationRepository(session).list_for_user("bob")]
    assert ids == [fresh.id]
    assert stale.id not in ids


@pytest.mark.parametrize(
    ("recipient_id", "notification_type"),
    [
        (None, "match"),
        ("", "match"),
        ("alice", None),
        ("alice", "wink"),
    ],
)
def test_invalid_arguments_create_nothing(session, caplog, recipient_id, notification_type):
    with caplog.at_level(logging.ERROR):
        notification = create_notification(
            session, recipient_id=recipient_id, type=notification_type, sender_id="bob"
        )

    assert notification is None
    assert "Notification not created" in caplog.text
    assert NotificationRepository(session).list_all() == []


def test_store_failure_returns_none(session, make_pet, monkeypatch, caplog):
    pet = make_pet("bob", "Rex")

    def _fail(self, notification):
        raise SQLAlchemyError("database is unavailable")

    monkeypatch.setattr(NotificationRepository, "create", _fail)

    with caplog.at_level(logging.ERROR):
        notification = create_match_notification(session, "alice", "bob", pet.id)

    assert notification is None
    assert "Could not create match notification" in caplog.text


def test_reference_lookup_failure_nulls_reference(session, make_pet, monkeypatch):
    pet = make_pet("bob", "Rex")

    from pawmatch.infrastructure.repositories import PetRepository

    def _fail(self, pet_id):
        raise SQLAlchemyError("lookup failed")

    monkeypatch.setattr(PetRepository, "exists", _fail)

    notification = create_match_notification(session, "alice", "bob", pet.id)

    assert notification is not None
    assert notification.reference_id is None


def test_created_notification_is_published(session, make_pet, monkeypatch):
    published = []
    monkeypatch.setattr(
        "pawmatch.application.use_cases.notifications.factory.dispatch_notification_event",
        lambda event_type, notification: published.append((event_type.value, notification.id)),
    )
    pet = make_pet("bob", "Rex")

    notification = create_match_notification(session, "alice", "bob", pet.id)

    assert published == [("INSERT", notification.id)]


def test_default_content_by_type():
    assert default_content("match") == MATCH_CONTENT
    assert default_content("MESSAGE") == MESSAGE_CONTENT
    assert default_content("unknown") == "You have a new notification"


def test_empty_content_uses_default_text(session):
    notification = create_notification(session, recipient_id="alice", type="interest", content="")

    assert notification is not None
    assert notification.content == INTEREST_CONTENT
