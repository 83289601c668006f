"""SQLAlchemy models package."""

from taskboard.models.user import User
from taskboard.models.board import (
    MEMBER_ROLE,
    OWNER_ROLE,
    Board,
    BoardInvite,
    BoardMember,
    Label,
)
from taskboard.models.card import (
    BoardList,
    Card,
    CardLabel,
    ChecklistItem,
    Comment,
)

__all__ = [
    # User
    "User",
    # Boards
    "Board",
    "BoardMember",
    "BoardInvite",
    "Label",
    "MEMBER_ROLE",
    "OWNER_ROLE",
    # Lists & cards
    "BoardList",
    "Card",
    "CardLabel",
    "ChecklistItem",
    "Comment",
]
