"""Explicit cascading deletes.

Foreign keys carry ON DELETE CASCADE, but children are removed here as well
so the outcome does not depend on the engine enforcing them. Each helper
issues its statements without committing; callers commit once.
"""

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models import (
    Board,
    BoardInvite,
    BoardList,
    BoardMember,
    Card,
    CardLabel,
    ChecklistItem,
    Comment,
    Label,
)


async def _delete_cards_where(db: AsyncSession, card_ids: Select) -> None:
    await db.execute(delete(CardLabel).where(CardLabel.card_id.in_(card_ids)))
    await db.execute(delete(ChecklistItem).where(ChecklistItem.card_id.in_(card_ids)))
    await db.execute(delete(Comment).where(Comment.card_id.in_(card_ids)))
    await db.execute(delete(Card).where(Card.id.in_(card_ids)))


async def delete_card(db: AsyncSession, card_id: int) -> None:
    await _delete_cards_where(db, select(Card.id).where(Card.id == card_id))


async def delete_list(db: AsyncSession, list_id: int) -> None:
    await _delete_cards_where(db, select(Card.id).where(Card.list_id == list_id))
    await db.execute(delete(BoardList).where(BoardList.id == list_id))


async def delete_label(db: AsyncSession, label_id: int) -> None:
    await db.execute(delete(CardLabel).where(CardLabel.label_id == label_id))
    await db.execute(delete(Label).where(Label.id == label_id))


async def delete_board(db: AsyncSession, board_id: int) -> None:
    list_ids = select(BoardList.id).where(BoardList.board_id == board_id)
    await _delete_cards_where(db, select(Card.id).where(Card.list_id.in_(list_ids)))
    await db.execute(delete(BoardList).where(BoardList.board_id == board_id))

    label_ids = select(Label.id).where(Label.board_id == board_id)
    await db.execute(delete(CardLabel).where(CardLabel.label_id.in_(label_ids)))
    await db.execute(delete(Label).where(Label.board_id == board_id))

    await db.execute(delete(BoardInvite).where(BoardInvite.board_id == board_id))
    await db.execute(delete(BoardMember).where(BoardMember.board_id == board_id))
    await db.execute(delete(Board).where(Board.id == board_id))
