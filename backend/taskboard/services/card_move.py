"""Card relocation between lists and boards."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from taskboard.exceptions import NotFoundError
from taskboard.models import Board, Card, CardLabel, Label
from taskboard.services.access_control import (
    get_board_list,
    get_list_card,
    resolve_board_access,
)
from taskboard.services.positions import next_position

logger = structlog.get_logger()


async def _relocate(
    db: AsyncSession,
    card: Card,
    target_list_id: int,
    label_board_id: int | None = None,
) -> Card:
    # The source list keeps its gap; only an explicit reorder closes it.
    card.position = await next_position(db, Card.position, Card.list_id, target_list_id)
    card.list_id = target_list_id

    if label_board_id is not None:
        # Labels are board-scoped; links to labels of any other board are dropped
        await db.execute(
            delete(CardLabel).where(
                CardLabel.card_id == card.id,
                CardLabel.label_id.not_in(
                    select(Label.id).where(Label.board_id == label_board_id)
                ),
            )
        )
    await db.commit()

    result = await db.execute(
        select(Card)
        .where(Card.id == card.id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def move_card(
    db: AsyncSession,
    board: Board,
    source_list_id: int,
    card_id: int,
    target_list_id: int,
) -> Card:
    """Move a card to the end of another list on the same board."""
    card = await get_list_card(db, board.id, source_list_id, card_id)
    await get_board_list(db, board.id, target_list_id, message="Target list not found")

    source_position = card.position
    moved = await _relocate(db, card, target_list_id)

    logger.info(
        "Card moved",
        card_id=card_id,
        board_id=board.id,
        from_list_id=source_list_id,
        to_list_id=target_list_id,
        from_position=source_position,
        to_position=moved.position,
    )
    return moved


async def move_card_to_list(
    db: AsyncSession,
    user_id: int,
    source_board_id: int,
    source_list_id: int,
    card_id: int,
    target_board_id: int,
    target_list_id: int,
) -> Card:
    """Move a card to the end of a list that may live on another board.

    The acting user needs access to both boards.
    """
    source_board = await resolve_board_access(db, source_board_id, user_id)
    if source_board is None:
        raise NotFoundError("Board not found")

    target_board = await resolve_board_access(db, target_board_id, user_id)
    if target_board is None:
        raise NotFoundError("Target board not found")

    await get_board_list(db, source_board.id, source_list_id)
    card = await get_list_card(db, source_board.id, source_list_id, card_id)
    await get_board_list(db, target_board.id, target_list_id, message="Target list not found")

    label_board_id = target_board.id if target_board.id != source_board.id else None
    moved = await _relocate(db, card, target_list_id, label_board_id)

    logger.info(
        "Card moved to list",
        card_id=card_id,
        from_board_id=source_board_id,
        from_list_id=source_list_id,
        to_board_id=target_board_id,
        to_list_id=target_list_id,
        to_position=moved.position,
    )
    return moved
