"""Card endpoints: CRUD, reorder, move, archive and label assignment."""

from datetime import date, datetime, timezone
from typing import Any

import structlog
from fastapi import APIRouter, Response, status
from pydantic import Field
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.v1.auth import CurrentUser
from taskboard.api.v1.boards import require_title
from taskboard.db.session import DBSession
from taskboard.exceptions import NotFoundError, ValidationError
from taskboard.models import Card, CardLabel, Label
from taskboard.schemas import CamelModel, CardResponse
from taskboard.services import cascade
from taskboard.services.access_control import (
    get_accessible_board,
    get_board_list,
    get_list_card,
)
from taskboard.services.card_move import move_card, move_card_to_list
from taskboard.services.positions import next_position, parse_ordered_ids, reorder_siblings

router = APIRouter()
logger = structlog.get_logger()

CARDS_PATH = "/{board_id}/lists/{list_id}/cards"
CARD_PATH = CARDS_PATH + "/{card_id}"

# Matches the cards.title column width
TITLE_MAX_LENGTH = 500


class CardCreate(CamelModel):
    title: str | None = Field(None, max_length=TITLE_MAX_LENGTH)


class CardUpdate(CamelModel):
    """Partial update; fields left out of the body are not touched."""

    title: Any = None
    description: str | None = None
    due_date: Any = None


class CardReorder(CamelModel):
    ordered_card_ids: Any = None


class CardMove(CamelModel):
    target_list_id: Any = None


class CardMoveToList(CamelModel):
    target_board_id: Any = None
    target_list_id: Any = None


class CardLabelsUpdate(CamelModel):
    label_ids: list[int] = Field(default_factory=list)


class CardEnvelope(CamelModel):
    card: CardResponse


class CardsEnvelope(CamelModel):
    cards: list[CardResponse]


def parse_due_date(value: Any) -> datetime | None:
    """``YYYY-MM-DD`` to UTC midnight; ``None`` clears the due date."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Invalid dueDate")
    try:
        parsed = date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError("Invalid dueDate")
    return datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)


def _parse_target_id(value: Any, message: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(message)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        return int(value.strip())
    raise ValidationError(message)


async def _reload_card(db: AsyncSession, card_id: int) -> Card:
    result = await db.execute(
        select(Card).where(Card.id == card_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


@router.get(CARDS_PATH, response_model=CardsEnvelope)
async def get_cards(
    board_id: int,
    list_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Active cards of a list by position."""
    board = await get_accessible_board(db, board_id, current_user.id)
    board_list = await get_board_list(db, board.id, list_id)

    result = await db.execute(
        select(Card)
        .where(Card.list_id == board_list.id, Card.archived.is_(False))
        .order_by(Card.position.asc(), Card.id.asc())
    )
    return {"cards": result.scalars().all()}


@router.post(CARDS_PATH, response_model=CardEnvelope, status_code=status.HTTP_201_CREATED)
async def create_card(
    board_id: int,
    list_id: int,
    payload: CardCreate,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Append a card to the end of the list."""
    title = require_title(payload.title)
    board = await get_accessible_board(db, board_id, current_user.id)
    board_list = await get_board_list(db, board.id, list_id)

    position = await next_position(db, Card.position, Card.list_id, board_list.id)
    card = Card(title=title, list_id=board_list.id, position=position)
    db.add(card)
    await db.commit()

    logger.info("Card created", board_id=board.id, list_id=list_id, card_id=card.id, position=position)
    return {"card": await _reload_card(db, card.id)}


@router.patch(CARDS_PATH + "/reorder", response_model=CardsEnvelope)
async def reorder_cards(
    board_id: int,
    list_id: int,
    payload: CardReorder,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Rewrite card positions to match ``orderedCardIds``.

    The ids must be exactly the list's active cards. Archived cards are
    placed after them.
    """
    card_ids = parse_ordered_ids(payload.ordered_card_ids, "orderedCardIds")
    board = await get_accessible_board(db, board_id, current_user.id)
    board_list = await get_board_list(db, board.id, list_id)

    cards = await reorder_siblings(
        db,
        Card,
        Card.list_id,
        board_list.id,
        card_ids,
        "Card",
        visible=Card.archived.is_(False),
    )
    return {"cards": cards}


@router.patch(CARD_PATH, response_model=CardEnvelope)
async def update_card(
    board_id: int,
    list_id: int,
    card_id: int,
    payload: CardUpdate,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Update title, description and/or due date."""
    fields = payload.model_fields_set
    if not fields & {"title", "description", "due_date"}:
        raise ValidationError("title, description, or dueDate is required")

    title = None
    if "title" in fields:
        title = str(payload.title).strip() if payload.title is not None else ""
        if not title:
            raise ValidationError("Title is required")
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")

    due_date = parse_due_date(payload.due_date) if "due_date" in fields else None

    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)

    if title is not None:
        card.title = title
    if "description" in fields:
        card.description = payload.description
    if "due_date" in fields:
        card.due_date = due_date
    await db.commit()

    logger.info("Card updated", card_id=card_id, fields=sorted(fields))
    return {"card": await _reload_card(db, card.id)}


@router.delete(CARD_PATH, status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(
    board_id: int,
    list_id: int,
    card_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)

    await cascade.delete_card(db, card.id)
    await db.commit()

    logger.info("Card deleted", board_id=board.id, list_id=list_id, card_id=card_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(CARD_PATH + "/move", response_model=CardEnvelope)
async def move_card_within_board(
    board_id: int,
    list_id: int,
    card_id: int,
    payload: CardMove,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Move a card to the end of another list on this board."""
    if payload.target_list_id in (None, "", 0):
        raise ValidationError("targetListId is required")
    target_list_id = _parse_target_id(payload.target_list_id, "targetListId must be a number")

    board = await get_accessible_board(db, board_id, current_user.id)
    card = await move_card(db, board, list_id, card_id, target_list_id)
    return {"card": card}


@router.put(CARD_PATH + "/move-to-list", response_model=CardEnvelope)
async def move_card_across_boards(
    board_id: int,
    list_id: int,
    card_id: int,
    payload: CardMoveToList,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Move a card to the end of a list on any board the user can access."""
    if payload.target_board_id in (None, "", 0) or payload.target_list_id in (None, "", 0):
        raise ValidationError("targetBoardId and targetListId are required")
    message = "targetBoardId and targetListId must be numbers"
    target_board_id = _parse_target_id(payload.target_board_id, message)
    target_list_id = _parse_target_id(payload.target_list_id, message)

    card = await move_card_to_list(
        db,
        current_user.id,
        board_id,
        list_id,
        card_id,
        target_board_id,
        target_list_id,
    )
    return {"card": card}


async def _set_archived(
    db: AsyncSession,
    user_id: int,
    board_id: int,
    list_id: int,
    card_id: int,
    archived: bool,
) -> Card:
    board = await get_accessible_board(db, board_id, user_id)
    card = await get_list_card(db, board.id, list_id, card_id)

    # Position is kept so unarchiving restores the card in place
    card.archived = archived
    card.archived_at = datetime.now(timezone.utc) if archived else None
    await db.commit()

    logger.info("Card archive state changed", card_id=card_id, archived=archived)
    return await _reload_card(db, card.id)


@router.patch(CARD_PATH + "/archive", response_model=CardEnvelope)
async def archive_card(
    board_id: int,
    list_id: int,
    card_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    card = await _set_archived(db, current_user.id, board_id, list_id, card_id, True)
    return {"card": card}


@router.patch(CARD_PATH + "/unarchive", response_model=CardEnvelope)
async def unarchive_card(
    board_id: int,
    list_id: int,
    card_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    card = await _set_archived(db, current_user.id, board_id, list_id, card_id, False)
    return {"card": card}


@router.put(CARD_PATH + "/labels", response_model=CardEnvelope)
async def set_card_labels(
    board_id: int,
    list_id: int,
    card_id: int,
    payload: CardLabelsUpdate,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Replace the card's label set. Every label must belong to this board."""
    label_ids = list(dict.fromkeys(payload.label_ids))

    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)

    if label_ids:
        result = await db.execute(
            select(Label.id).where(Label.board_id == board.id, Label.id.in_(label_ids))
        )
        if len(set(result.scalars().all())) != len(label_ids):
            raise NotFoundError("Label not found")

    await db.execute(delete(CardLabel).where(CardLabel.card_id == card.id))
    db.add_all(CardLabel(card_id=card.id, label_id=label_id) for label_id in label_ids)
    await db.commit()

    logger.info("Card labels replaced", card_id=card_id, label_count=len(label_ids))
    return {"card": await _reload_card(db, card.id)}
