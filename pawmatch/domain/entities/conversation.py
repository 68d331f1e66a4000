"""Domain entity for a one-to-one conversation between two users."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class DirectConversation:
    """Direct conversation unlocked by a mutual match."""

    id: int | None
    user1_id: str
    user2_id: str
    created_at: datetime | None = None

    def includes(self, user_id: str) -> bool:
        return user_id in (self.user1_id, self.user2_id)
