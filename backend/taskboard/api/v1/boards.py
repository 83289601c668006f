"""Board endpoints: CRUD and the aggregate read views."""

import structlog
from fastapi import APIRouter, Response, status
from pydantic import Field

from taskboard.api.v1.auth import CurrentUser
from taskboard.db.session import DBSession
from taskboard.exceptions import ValidationError
from taskboard.models import Board
from taskboard.schemas import (
    BoardFullResponse,
    BoardResponse,
    CamelModel,
    list_with_cards,
)
from taskboard.services import cascade
from taskboard.services.access_control import (
    accessible_boards_query,
    get_accessible_board,
    get_owned_board,
)
from taskboard.services.board_loader import load_board_full, load_move_targets

router = APIRouter()
logger = structlog.get_logger()


class BoardWrite(CamelModel):
    title: str | None = Field(None, max_length=255)


class BoardEnvelope(CamelModel):
    board: BoardResponse


class BoardsEnvelope(CamelModel):
    boards: list[BoardResponse]


class MoveTargetResponse(CamelModel):
    board_id: int
    board_title: str
    list_id: int
    list_title: str


class MoveTargetsResponse(CamelModel):
    current_board_id: int
    targets: list[MoveTargetResponse]


def require_title(title: str | None) -> str:
    """Trimmed title, or ValidationError when blank or missing."""
    if title is None or not title.strip():
        raise ValidationError("Title is required")
    return title.strip()


@router.get("", response_model=BoardsEnvelope)
async def list_boards(current_user: CurrentUser, db: DBSession) -> dict:
    """Boards the user owns or has joined, oldest first."""
    result = await db.execute(accessible_boards_query(current_user.id))
    return {"boards": result.scalars().all()}


@router.post("", response_model=BoardEnvelope, status_code=status.HTTP_201_CREATED)
async def create_board(payload: BoardWrite, current_user: CurrentUser, db: DBSession) -> dict:
    title = require_title(payload.title)

    board = Board(title=title, owner_id=current_user.id)
    db.add(board)
    await db.commit()

    logger.info("Board created", board_id=board.id, owner_id=current_user.id)
    return {"board": board}


@router.get("/{board_id}", response_model=BoardEnvelope)
async def get_board(board_id: int, current_user: CurrentUser, db: DBSession) -> dict:
    board = await get_accessible_board(db, board_id, current_user.id)
    return {"board": board}


@router.get("/{board_id}/full", response_model=BoardFullResponse)
async def get_board_full(board_id: int, current_user: CurrentUser, db: DBSession) -> dict:
    """Board with lists by position, each with its active cards and their labels."""
    board = await get_accessible_board(db, board_id, current_user.id)
    lists = await load_board_full(db, board)
    return {
        "board": board,
        "lists": [list_with_cards(entry.board_list, entry.cards) for entry in lists],
    }


@router.get("/{board_id}/archived", response_model=BoardFullResponse)
async def get_board_archived(board_id: int, current_user: CurrentUser, db: DBSession) -> dict:
    """Same shape as ``/full`` but each list carries only archived cards."""
    board = await get_accessible_board(db, board_id, current_user.id)
    lists = await load_board_full(db, board, archived=True)
    return {
        "board": board,
        "lists": [list_with_cards(entry.board_list, entry.cards) for entry in lists],
    }


@router.get("/{board_id}/move-targets", response_model=MoveTargetsResponse)
async def get_move_targets(board_id: int, current_user: CurrentUser, db: DBSession) -> dict:
    """Flattened (board, list) pairs for the move picker, current board first."""
    board = await get_accessible_board(db, board_id, current_user.id)
    targets = await load_move_targets(db, current_user.id, board.id)
    return {"current_board_id": board.id, "targets": targets}


@router.put("/{board_id}", response_model=BoardEnvelope)
async def rename_board(
    board_id: int,
    payload: BoardWrite,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    title = require_title(payload.title)
    board = await get_owned_board(db, board_id, current_user.id)

    board.title = title
    await db.commit()

    logger.info("Board renamed", board_id=board.id)
    return {"board": board}


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_board(board_id: int, current_user: CurrentUser, db: DBSession) -> Response:
    board = await get_owned_board(db, board_id, current_user.id)

    await cascade.delete_board(db, board.id)
    await db.commit()

    logger.info("Board deleted", board_id=board_id, owner_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
