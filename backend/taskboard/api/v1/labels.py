"""Board label endpoints."""

import structlog
from fastapi import APIRouter, Response, status
from pydantic import Field
from sqlalchemy import select

from taskboard.api.v1.auth import CurrentUser
from taskboard.db.session import DBSession
from taskboard.exceptions import ValidationError
from taskboard.models import Label
from taskboard.schemas import CamelModel, LabelResponse
from taskboard.services import cascade
from taskboard.services.access_control import get_accessible_board, get_board_label

router = APIRouter()
logger = structlog.get_logger()


class LabelCreate(CamelModel):
    name: str | None = Field(None, max_length=100)
    color: str | None = Field(None, max_length=50)


class LabelUpdate(CamelModel):
    name: str | None = Field(None, max_length=100)
    color: str | None = Field(None, max_length=50)


class LabelEnvelope(CamelModel):
    label: LabelResponse


class LabelsEnvelope(CamelModel):
    labels: list[LabelResponse]


def _clean_color(color: str | None) -> str | None:
    return color.strip() or None if color else None


@router.get("/{board_id}/labels", response_model=LabelsEnvelope)
async def get_labels(board_id: int, current_user: CurrentUser, db: DBSession) -> dict:
    board = await get_accessible_board(db, board_id, current_user.id)
    result = await db.execute(
        select(Label).where(Label.board_id == board.id).order_by(Label.id.asc())
    )
    return {"labels": result.scalars().all()}


@router.post(
    "/{board_id}/labels",
    response_model=LabelEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_label(
    board_id: int,
    payload: LabelCreate,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    if payload.name is None or not payload.name.strip():
        raise ValidationError("Name is required")

    board = await get_accessible_board(db, board_id, current_user.id)
    label = Label(board_id=board.id, name=payload.name.strip(), color=_clean_color(payload.color))
    db.add(label)
    await db.commit()

    logger.info("Label created", board_id=board.id, label_id=label.id)
    return {"label": label}


@router.patch("/{board_id}/labels/{label_id}", response_model=LabelEnvelope)
async def update_label(
    board_id: int,
    label_id: int,
    payload: LabelUpdate,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    fields = payload.model_fields_set
    if not fields & {"name", "color"}:
        raise ValidationError("name or color is required")
    if "name" in fields and (payload.name is None or not payload.name.strip()):
        raise ValidationError("Name is required")

    board = await get_accessible_board(db, board_id, current_user.id)
    label = await get_board_label(db, board.id, label_id)

    if "name" in fields:
        label.name = payload.name.strip()
    if "color" in fields:
        label.color = _clean_color(payload.color)
    await db.commit()

    logger.info("Label updated", board_id=board.id, label_id=label_id)
    return {"label": label}


@router.delete("/{board_id}/labels/{label_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_label(
    board_id: int,
    label_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    """Delete a label and detach it from every card."""
    board = await get_accessible_board(db, board_id, current_user.id)
    label = await get_board_label(db, board.id, label_id)

    await cascade.delete_label(db, label.id)
    await db.commit()

    logger.info("Label deleted", board_id=board.id, label_id=label_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
