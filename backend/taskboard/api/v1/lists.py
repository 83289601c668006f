"""List endpoints: CRUD and reorder within a board."""

from typing import Any

import structlog
from fastapi import APIRouter, Response, status
from pydantic import Field
from sqlalchemy import select

from taskboard.api.v1.auth import CurrentUser
from taskboard.api.v1.boards import require_title
from taskboard.db.session import DBSession
from taskboard.models import BoardList
from taskboard.schemas import CamelModel, ListResponse
from taskboard.services import cascade
from taskboard.services.access_control import get_accessible_board, get_board_list
from taskboard.services.positions import next_position, parse_ordered_ids, reorder_siblings

router = APIRouter()
logger = structlog.get_logger()


class ListWrite(CamelModel):
    title: str | None = Field(None, max_length=255)


class ListReorder(CamelModel):
    ordered_list_ids: Any = None


class ListEnvelope(CamelModel):
    list: ListResponse


class ListsEnvelope(CamelModel):
    lists: list[ListResponse]


@router.get("/{board_id}/lists", response_model=ListsEnvelope)
async def get_lists(board_id: int, current_user: CurrentUser, db: DBSession) -> dict:
    board = await get_accessible_board(db, board_id, current_user.id)
    result = await db.execute(
        select(BoardList)
        .where(BoardList.board_id == board.id)
        .order_by(BoardList.position.asc(), BoardList.id.asc())
    )
    return {"lists": result.scalars().all()}


@router.post(
    "/{board_id}/lists",
    response_model=ListEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_list(
    board_id: int,
    payload: ListWrite,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Append a list to the end of the board."""
    title = require_title(payload.title)
    board = await get_accessible_board(db, board_id, current_user.id)

    position = await next_position(db, BoardList.position, BoardList.board_id, board.id)
    board_list = BoardList(title=title, board_id=board.id, position=position)
    db.add(board_list)
    await db.commit()

    logger.info("List created", board_id=board.id, list_id=board_list.id, position=position)
    return {"list": board_list}


@router.patch("/{board_id}/lists/reorder", response_model=ListsEnvelope)
async def reorder_lists(
    board_id: int,
    payload: ListReorder,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Rewrite list positions to match ``orderedListIds`` (every list on the board)."""
    list_ids = parse_ordered_ids(payload.ordered_list_ids, "orderedListIds")
    board = await get_accessible_board(db, board_id, current_user.id)

    lists = await reorder_siblings(
        db, BoardList, BoardList.board_id, board.id, list_ids, "List"
    )
    return {"lists": lists}


@router.put("/{board_id}/lists/{list_id}", response_model=ListEnvelope)
async def rename_list(
    board_id: int,
    list_id: int,
    payload: ListWrite,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    title = require_title(payload.title)
    board = await get_accessible_board(db, board_id, current_user.id)
    board_list = await get_board_list(db, board.id, list_id)

    board_list.title = title
    await db.commit()

    logger.info("List renamed", board_id=board.id, list_id=list_id)
    return {"list": board_list}


@router.delete("/{board_id}/lists/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_list(
    board_id: int,
    list_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    """Delete a list and its cards. Remaining lists keep their positions."""
    board = await get_accessible_board(db, board_id, current_user.id)
    board_list = await get_board_list(db, board.id, list_id)

    await cascade.delete_list(db, board_list.id)
    await db.commit()

    logger.info("List deleted", board_id=board.id, list_id=list_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
