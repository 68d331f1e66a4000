"""Per-user swipe session walking a queue of match candidates."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawmatch.config import get_settings
from pawmatch.domain.entities import DirectConversation, Notification, Pet
from pawmatch.infrastructure.repositories import PetRepository

from .candidates import load_candidate_queue
from .compatibility import check_compatibility
from .conversations import open_conversation
from .interests import notify_match, register_like

logger = logging.getLogger(__name__)


class SwipeState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    LIKING = "liking"
    DISLIKING = "disliking"
    EXHAUSTED = "exhausted"


class SwipeOutcomeStatus(str, Enum):
    INCOMPATIBLE = "incompatible"
    INTERESTED = "interested"
    MATCHED = "matched"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SwipeOutcome:
    status: SwipeOutcomeStatus
    pet: Pet
    reason: str | None = None
    notifications: tuple[Notification, ...] = ()


class SwipeStateError(RuntimeError):
    """Raised when an action is not allowed in the current state."""


class SwipeActionError(RuntimeError):
    """Raised when the store fails while performing a swipe action."""


class PetNotFoundError(ValueError):
    """Raised when the selected pet is missing or not owned by the user."""


class SwipeSession:
    """State machine behind the swipe screen of one user.

    ``Loading -> Ready -> {Liking | Disliking} -> Ready -> ... -> Exhausted``.
    An incompatible like leaves the cursor on the same candidate and stores
    the reason until :meth:`acknowledge` is called.
    """

    def __init__(self, user_id: str, *, page_size: int | None = None) -> None:
        self.user_id = user_id
        self.page_size = page_size or get_settings().candidate_page_size
        self.state = SwipeState.LOADING
        self.from_pet: Pet | None = None
        self.species_filter: str | None = None
        self.gender_filter: str | None = None
        self.queue: tuple[Pet, ...] = ()
        self.cursor = 0
        self.pending_reason: str | None = None
        self.matched_pet: Pet | None = None
        self._skipped: set[int] = set()
        self._closed = False
        self._lock = threading.Lock()

    @property
    def current(self) -> Pet | None:
        if self.cursor < len(self.queue):
            return self.queue[self.cursor]
        return None

    @property
    def remaining(self) -> int:
        return max(len(self.queue) - self.cursor, 0)

    @property
    def closed(self) -> bool:
        return self._closed

    def start(
        self,
        session: Session,
        from_pet_id: int,
        *,
        species: str | None = None,
        gender: str | None = None,
    ) -> SwipeState:
        """Select the user's pet and load the first candidate queue."""

        with self._exclusive():
            self.species_filter = species or None
            self.gender_filter = gender or None
            self._select_pet(session, from_pet_id)
            return self._load(session)

    def change_pet(self, session: Session, pet_id: int) -> SwipeState:
        """Swipe on behalf of another own pet; the queue starts over."""

        with self._exclusive():
            self._select_pet(session, pet_id)
            return self._load(session)

    def apply_filters(
        self, session: Session, *, species: str | None, gender: str | None
    ) -> SwipeState:
        with self._exclusive():
            self._require_pet()
            self.species_filter = species or None
            self.gender_filter = gender or None
            return self._load(session)

    def refresh(self, session: Session) -> SwipeState:
        """Clear the filters and reload a fresh queue."""

        with self._exclusive():
            self._require_pet()
            self.species_filter = None
            self.gender_filter = None
            return self._load(session)

    def acknowledge(self) -> None:
        """Dismiss the pending incompatibility notice."""

        self._ensure_open()
        self.pending_reason = None

    def like(self, session: Session) -> SwipeOutcome:
        """Like the current candidate."""

        with self._exclusive():
            candidate = self._require_candidate()
            from_pet = self._require_pet()
            with self._acting(SwipeState.LIKING):
                compatibility = check_compatibility(from_pet, candidate)
                if not compatibility.compatible:
                    self.pending_reason = compatibility.reason
                    logger.debug(
                        "Pets %s and %s are incompatible: %s",
                        from_pet.id,
                        candidate.id,
                        compatibility.reason,
                    )
                    return SwipeOutcome(
                        status=SwipeOutcomeStatus.INCOMPATIBLE,
                        pet=candidate,
                        reason=compatibility.reason,
                    )

                try:
                    result = register_like(
                        session, user_id=self.user_id, pet=candidate, from_pet=from_pet
                    )
                except SQLAlchemyError as exc:
                    logger.exception("Could not record interest in pet %s", candidate.id)
                    raise SwipeActionError("Could not record interest") from exc

                if not result.matched:
                    self._advance()
                    return SwipeOutcome(status=SwipeOutcomeStatus.INTERESTED, pet=candidate)

                notifications = notify_match(
                    session, user_id=self.user_id, pet=candidate, from_pet=from_pet
                )
                self.matched_pet = candidate
                self._advance()
                return SwipeOutcome(
                    status=SwipeOutcomeStatus.MATCHED,
                    pet=candidate,
                    notifications=notifications,
                )

    def dislike(self) -> SwipeOutcome:
        """Skip the current candidate."""

        with self._exclusive():
            candidate = self._require_candidate()
            with self._acting(SwipeState.DISLIKING):
                if candidate.id is not None:
                    self._skipped.add(candidate.id)
                self._advance()
                return SwipeOutcome(status=SwipeOutcomeStatus.SKIPPED, pet=candidate)

    def start_conversation(self, session: Session) -> DirectConversation:
        """Open (or reuse) the conversation with the last matched pet's owner."""

        self._ensure_open()
        if self.matched_pet is None:
            raise SwipeStateError("There is no match to start a conversation with")
        conversation = open_conversation(
            session, user_id=self.user_id, other_user_id=self.matched_pet.owner_id
        )
        self.matched_pet = None
        return conversation

    def close(self) -> None:
        self._closed = True
        self.queue = ()
        self.cursor = 0

    def _select_pet(self, session: Session, pet_id: int) -> None:
        pet = PetRepository(session).get(pet_id)
        if pet is None or pet.owner_id != self.user_id:
            raise PetNotFoundError("Pet not found")
        self.from_pet = pet
        self.pending_reason = None
        self.matched_pet = None

    def _load(self, session: Session) -> SwipeState:
        self.state = SwipeState.LOADING
        self.pending_reason = None
        self.queue = ()
        self.cursor = 0
        try:
            queue: Sequence[Pet] = load_candidate_queue(
                session,
                user_id=self.user_id,
                species=self.species_filter,
                gender=self.gender_filter,
                skipped_pet_ids=self._skipped,
                limit=self.page_size,
            )
        except SQLAlchemyError as exc:
            self.state = SwipeState.EXHAUSTED
            logger.exception("Could not load swipe candidates for user %s", self.user_id)
            raise SwipeActionError("Could not load pets to match") from exc
        if self._closed:
            return self.state
        self.queue = tuple(queue)
        self.state = SwipeState.READY if self.queue else SwipeState.EXHAUSTED
        return self.state

    def _advance(self) -> None:
        self.cursor += 1
        self.pending_reason = None

    def _settle(self) -> None:
        self.state = SwipeState.READY if self.cursor < len(self.queue) else SwipeState.EXHAUSTED

    def _require_pet(self) -> Pet:
        if self.from_pet is None:
            raise SwipeStateError("Select one of your pets first")
        return self.from_pet

    def _require_candidate(self) -> Pet:
        if self.state is not SwipeState.READY:
            raise SwipeStateError(f"Cannot swipe while {self.state.value}")
        if self.pending_reason is not None:
            raise SwipeStateError("Acknowledge the compatibility notice first")
        candidate = self.current
        if candidate is None:
            self.state = SwipeState.EXHAUSTED
            raise SwipeStateError("No more pets to show")
        return candidate

    def _ensure_open(self) -> None:
        if self._closed:
            raise SwipeStateError("Swipe session is closed")

    @contextmanager
    def _acting(self, state: SwipeState) -> Iterator[None]:
        self.state = state
        try:
            yield
        finally:
            if not self._closed:
                self._settle()

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        self._ensure_open()
        if not self._lock.acquire(blocking=False):
            raise SwipeStateError("Another swipe action is in progress")
        try:
            yield
        finally:
            self._lock.release()


class SwipeSessionRegistry:
    """Swipe sessions kept per user for the HTTP layer."""

    def __init__(self) -> None:
        self._sessions: dict[str, SwipeSession] = {}
        self._lock = threading.Lock()

    def open(self, user_id: str, *, page_size: int | None = None) -> SwipeSession:
        """Replace any existing session of ``user_id`` with a new one."""

        with self._lock:
            previous = self._sessions.pop(user_id, None)
            if previous is not None:
                previous.close()
            session = SwipeSession(user_id, page_size=page_size)
            self._sessions[user_id] = session
            return session

    def get(self, user_id: str) -> SwipeSession | None:
        with self._lock:
            return self._sessions.get(user_id)

    def close(self, user_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        session.close()
        return True

    def clear(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()


swipe_sessions = SwipeSessionRegistry()


__all__ = [
    "PetNotFoundError",
    "SwipeActionError",
    "SwipeOutcome",
    "SwipeOutcomeStatus",
    "SwipeSession",
    "SwipeSessionRegistry",
    "SwipeState",
    "SwipeStateError",
    "swipe_sessions",
]
