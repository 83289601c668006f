"""Board access control service.

Two tiers of board access:
- ACCESSIBLE: board owner or any user holding a BoardMember row
- OWNED: board owner only (rename, delete, invite, member removal)

A failed check is always reported as "not found" so non-members cannot probe
for board existence. Board-scoped lookups below follow the same rule.
"""

from sqlalchemy import Select, and_, exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from taskboard.exceptions import ForbiddenError, NotFoundError
from taskboard.models import (
    Board,
    BoardList,
    BoardMember,
    Card,
    ChecklistItem,
    Comment,
    Label,
)

logger = structlog.get_logger()


def _member_exists(user_id: int):
    return exists().where(
        and_(
            BoardMember.board_id == Board.id,
            BoardMember.user_id == user_id,
        )
    )


def accessible_boards_query(user_id: int) -> Select[tuple[Board]]:
    """Boards the user owns or is a member of, oldest first."""
    return (
        select(Board)
        .where(or_(Board.owner_id == user_id, _member_exists(user_id)))
        .order_by(Board.created_at.asc(), Board.id.asc())
    )


async def resolve_board_access(
    db: AsyncSession,
    board_id: int,
    user_id: int,
) -> Board | None:
    """Return the board if the user is its owner or a member, else None."""
    result = await db.execute(
        select(Board).where(
            Board.id == board_id,
            or_(Board.owner_id == user_id, _member_exists(user_id)),
        )
    )
    return result.scalar_one_or_none()


async def resolve_owned_board(
    db: AsyncSession,
    board_id: int,
    user_id: int,
) -> Board | None:
    """Return the board only if the user owns it."""
    result = await db.execute(
        select(Board).where(Board.id == board_id, Board.owner_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_accessible_board(db: AsyncSession, board_id: int, user_id: int) -> Board:
    board = await resolve_board_access(db, board_id, user_id)
    if board is None:
        logger.debug("board_access_denied", board_id=board_id, user_id=user_id)
        raise NotFoundError("Board not found")
    return board


async def get_owned_board(db: AsyncSession, board_id: int, user_id: int) -> Board:
    board = await resolve_owned_board(db, board_id, user_id)
    if board is None:
        logger.debug("board_ownership_denied", board_id=board_id, user_id=user_id)
        raise NotFoundError("Board not found")
    return board


# =========================================================================
# Board-scoped lookups
# =========================================================================


async def get_board_list(
    db: AsyncSession,
    board_id: int,
    list_id: int,
    message: str = "List not found",
) -> BoardList:
    """Fetch a list that belongs to the given board."""
    result = await db.execute(
        select(BoardList).where(BoardList.id == list_id, BoardList.board_id == board_id)
    )
    board_list = result.scalar_one_or_none()
    if board_list is None:
        raise NotFoundError(message)
    return board_list


async def get_list_card(
    db: AsyncSession,
    board_id: int,
    list_id: int,
    card_id: int,
) -> Card:
    """Fetch a card that sits in ``list_id`` which in turn sits in ``board_id``."""
    result = await db.execute(
        select(Card)
        .join(BoardList, BoardList.id == Card.list_id)
        .where(
            Card.id == card_id,
            Card.list_id == list_id,
            BoardList.board_id == board_id,
        )
    )
    card = result.scalar_one_or_none()
    if card is None:
        raise NotFoundError("Card not found")
    return card


async def get_board_label(db: AsyncSession, board_id: int, label_id: int) -> Label:
    result = await db.execute(
        select(Label).where(Label.id == label_id, Label.board_id == board_id)
    )
    label = result.scalar_one_or_none()
    if label is None:
        raise NotFoundError("Label not found")
    return label


async def get_card_checklist_item(
    db: AsyncSession,
    card_id: int,
    item_id: int,
) -> ChecklistItem:
    result = await db.execute(
        select(ChecklistItem).where(
            ChecklistItem.id == item_id,
            ChecklistItem.card_id == card_id,
        )
    )
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError("Checklist item not found")
    return item


async def get_card_comment(db: AsyncSession, card_id: int, comment_id: int) -> Comment:
    result = await db.execute(
        select(Comment).where(Comment.id == comment_id, Comment.card_id == card_id)
    )
    comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


def ensure_comment_author(comment: Comment, user_id: int) -> None:
    """Comment ownership is per author, independent of board role."""
    if comment.author_id != user_id:
        raise ForbiddenError("Can only delete your own comments")
