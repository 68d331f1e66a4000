"""Use cases behind the swipe screen and mutual match detection."""

from .candidates import load_candidate_queue
from .compatibility import (
    REASON_MISSING_DATA,
    REASON_MISSING_GENDER,
    REASON_SAME_GENDER,
    REASON_SPECIES_MISMATCH,
    CompatibilityResult,
    check_compatibility,
)
from .conversations import notify_message_sent, open_conversation
from .interests import (
    LikeResult,
    has_mutual_interest,
    notify_match,
    record_interest,
    register_like,
    show_interest,
)
from .swipe_session import (
    PetNotFoundError,
    SwipeActionError,
    SwipeOutcome,
    SwipeOutcomeStatus,
    SwipeSession,
    SwipeSessionRegistry,
    SwipeState,
    SwipeStateError,
    swipe_sessions,
)

__all__ = [
    "load_candidate_queue",
    "REASON_MISSING_DATA",
    "REASON_MISSING_GENDER",
    "REASON_SAME_GENDER",
    "REASON_SPECIES_MISMATCH",
    "CompatibilityResult",
    "check_compatibility",
    "notify_message_sent",
    "open_conversation",
    "LikeResult",
    "has_mutual_interest",
    "notify_match",
    "record_interest",
    "register_like",
    "show_interest",
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
