"""Card checklist endpoints."""

from typing import Any

import structlog
from fastapi import APIRouter, Response, status
from pydantic import Field
from sqlalchemy import delete, select

from taskboard.api.v1.auth import CurrentUser
from taskboard.db.session import DBSession
from taskboard.exceptions import ValidationError
from taskboard.models import ChecklistItem
from taskboard.schemas import CamelModel
from taskboard.services.access_control import (
    get_accessible_board,
    get_card_checklist_item,
    get_list_card,
)
from taskboard.services.positions import next_position, parse_ordered_ids, reorder_siblings

router = APIRouter()
logger = structlog.get_logger()

CHECKLIST_PATH = "/{board_id}/lists/{list_id}/cards/{card_id}/checklist"
ITEM_PATH = CHECKLIST_PATH + "/{item_id}"


class ChecklistItemCreate(CamelModel):
    text: str | None = Field(None, max_length=500)


class ChecklistItemUpdate(CamelModel):
    text: str | None = Field(None, max_length=500)
    done: bool | None = None


class ChecklistReorder(CamelModel):
    ordered_item_ids: Any = None


class ChecklistItemResponse(CamelModel):
    id: int
    card_id: int
    text: str
    done: bool
    position: int


class ItemEnvelope(CamelModel):
    item: ChecklistItemResponse


class ItemsEnvelope(CamelModel):
    items: list[ChecklistItemResponse]


def _require_text(text: str | None) -> str:
    if text is None or not text.strip():
        raise ValidationError("Text is required")
    return text.strip()


@router.get(CHECKLIST_PATH, response_model=ItemsEnvelope)
async def get_checklist(
    board_id: int,
    list_id: int,
    card_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)

    result = await db.execute(
        select(ChecklistItem)
        .where(ChecklistItem.card_id == card.id)
        .order_by(ChecklistItem.position.asc(), ChecklistItem.id.asc())
    )
    return {"items": result.scalars().all()}


@router.post(CHECKLIST_PATH, response_model=ItemEnvelope, status_code=status.HTTP_201_CREATED)
async def create_checklist_item(
    board_id: int,
    list_id: int,
    card_id: int,
    payload: ChecklistItemCreate,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    text = _require_text(payload.text)
    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)

    position = await next_position(db, ChecklistItem.position, ChecklistItem.card_id, card.id)
    item = ChecklistItem(card_id=card.id, text=text, done=False, position=position)
    db.add(item)
    await db.commit()

    logger.info("Checklist item created", card_id=card.id, item_id=item.id, position=position)
    return {"item": item}


@router.patch(CHECKLIST_PATH + "/reorder", response_model=ItemsEnvelope)
async def reorder_checklist(
    board_id: int,
    list_id: int,
    card_id: int,
    payload: ChecklistReorder,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    item_ids = parse_ordered_ids(payload.ordered_item_ids, "orderedItemIds")
    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)

    items = await reorder_siblings(
        db, ChecklistItem, ChecklistItem.card_id, card.id, item_ids, "Checklist item"
    )
    return {"items": items}


@router.patch(ITEM_PATH, response_model=ItemEnvelope)
async def update_checklist_item(
    board_id: int,
    list_id: int,
    card_id: int,
    item_id: int,
    payload: ChecklistItemUpdate,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    fields = payload.model_fields_set
    if not fields & {"text", "done"}:
        raise ValidationError("text or done is required")
    text = _require_text(payload.text) if "text" in fields else None
    if "done" in fields and payload.done is None:
        raise ValidationError("done must be a boolean")

    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)
    item = await get_card_checklist_item(db, card.id, item_id)

    if text is not None:
        item.text = text
    if "done" in fields:
        item.done = payload.done
    await db.commit()

    logger.info("Checklist item updated", item_id=item_id, fields=sorted(fields))
    return {"item": item}


@router.delete(ITEM_PATH, status_code=status.HTTP_204_NO_CONTENT)
async def delete_checklist_item(
    board_id: int,
    list_id: int,
    card_id: int,
    item_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)
    item = await get_card_checklist_item(db, card.id, item_id)

    await db.execute(delete(ChecklistItem).where(ChecklistItem.id == item.id))
    await db.commit()

    logger.info("Checklist item deleted", card_id=card.id, item_id=item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
