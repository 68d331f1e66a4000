"""Tests for interests, mutual match detection and conversations."""

from __future__ import annotations

import pytest

from pawmatch.application.use_cases.matching import (
    has_mutual_interest,
    load_candidate_queue,
    notify_match,
    notify_message_sent,
    open_conversation,
    record_interest,
    register_like,
    show_interest,
)
from pawmatch.infrastructure.repositories import NotificationRepository


def test_like_without_reverse_interest_is_not_a_match(session, make_pet):
    rex = make_pet("alice", "Rex", gender="male")
    luna = make_pet("bob", "Luna", gender="female")

    result = register_like(session, user_id="alice", pet=luna, from_pet=rex)

    assert result.matched is False
    assert result.interest.pet_id == luna.id
    assert result.interest.from_pet_id == rex.id


def test_reverse_interest_is_detected(session, make_pet):
    rex = make_pet("alice", "Rex", gender="male")
    luna = make_pet("bob", "Luna", gender="female")
    record_interest(session, user_id="bob", pet_id=rex.id, from_pet_id=luna.id)

    result = register_like(session, user_id="alice", pet=luna, from_pet=rex)

    assert result.matched is True
    assert has_mutual_interest(session, other_owner_id="bob", from_pet_id=rex.id)
    assert not has_mutual_interest(session, other_owner_id="carol", from_pet_id=rex.id)


def test_match_notifies_both_owners_with_the_other_pet(session, make_pet):
    rex = make_pet("alice", "Rex", gender="male")
    luna = make_pet("bob", "Luna", gender="female")

    created = notify_match(session, user_id="alice", pet=luna, from_pet=rex)

    assert len(created) == 2
    repository = NotificationRepository(session)
    (alice_notice,) = repository.list_for_user("alice")
    (bob_notice,) = repository.list_for_user("bob")
    assert (alice_notice.type, alice_notice.sender_id, alice_notice.reference_id) == (
        "match",
        "bob",
        luna.id,
    )
    assert (bob_notice.type, bob_notice.sender_id, bob_notice.reference_id) == (
        "match",
        "alice",
        rex.id,
    )


def test_liked_pets_leave_the_candidate_queue(session, make_pet):
    rex = make_pet("alice", "Rex")
    luna = make_pet("bob", "Luna", gender="female")
    milo = make_pet("carol", "Milo", gender="female")
    make_pet("alice", "Second own pet")
    record_interest(session, user_id="alice", pet_id=luna.id, from_pet_id=rex.id)

    queue = load_candidate_queue(session, user_id="alice")

    assert [pet.id for pet in queue] == [milo.id]


def test_candidate_queue_filters_and_orders_newest_first(session, make_pet):
    make_pet("alice", "Rex")
    older = make_pet("bob", "Luna", species="dog", gender="female")
    make_pet("bob", "Tom", species="cat", gender="female")
    newer = make_pet("carol", "Nala", species="dog", gender="female")
    make_pet("carol", "Max", species="dog", gender="male")

    queue = load_candidate_queue(session, user_id="alice", species="dog", gender="female")

    assert [pet.id for pet in queue] == [newer.id, older.id]


def test_show_interest_notifies_the_owner(session, make_pet):
    luna = make_pet("bob", "Luna")

    notification = show_interest(session, user_id="alice", pet_id=luna.id)

    assert notification.user_id == "bob"
    assert notification.sender_id == "alice"
    assert notification.type == "interest"
    assert notification.reference_id == luna.id


def test_show_interest_rejects_own_and_missing_pets(session, make_pet):
    rex = make_pet("alice", "Rex")

    with pytest.raises(ValueError, match="own pet"):
        show_interest(session, user_id="alice", pet_id=rex.id)
    with pytest.raises(ValueError, match="not found"):
        show_interest(session, user_id="alice", pet_id=12345)


def test_open_conversation_reuses_existing_one(session):
    first = open_conversation(session, user_id="alice", other_user_id="bob")
    second = open_conversation(session, user_id="bob", other_user_id="alice")

    assert first.id == second.id
    with pytest.raises(ValueError):
        open_conversation(session, user_id="alice", other_user_id="alice")


def test_notify_message_sent_targets_the_other_participant(session):
    conversation = open_conversation(session, user_id="alice", other_user_id="bob")

    notification = notify_message_sent(
        session, conversation_id=conversation.id, sender_id="bob", message_text="hello"
    )

    assert notification.user_id == "alice"
    assert notification.reference_id == conversation.id
    assert notification.data == {"conversation_id": conversation.id}


def test_notify_message_sent_checks_membership(session):
    conversation = open_conversation(session, user_id="alice", other_user_id="bob")

    with pytest.raises(PermissionError):
        notify_message_sent(session, conversation_id=conversation.id, sender_id="mallory")
    with pytest.raises(ValueError):
        notify_message_sent(session, conversation_id=9999, sender_id="bob")
