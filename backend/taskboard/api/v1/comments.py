"""Card comment endpoints."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Response, status
from pydantic import Field
from sqlalchemy import delete, select

from taskboard.api.v1.auth import CurrentUser
from taskboard.db.session import DBSession
from taskboard.exceptions import ValidationError
from taskboard.models import Comment
from taskboard.schemas import CamelModel
from taskboard.services.access_control import (
    ensure_comment_author,
    get_accessible_board,
    get_card_comment,
    get_list_card,
)

router = APIRouter()
logger = structlog.get_logger()

COMMENTS_PATH = "/{board_id}/lists/{list_id}/cards/{card_id}/comments"


class CommentCreate(CamelModel):
    content: str | None = Field(None, max_length=10000)


class CommentAuthor(CamelModel):
    id: int
    email: str
    name: str | None


class CommentResponse(CamelModel):
    id: int
    card_id: int
    author_id: int
    content: str
    created_at: datetime
    author: CommentAuthor


class CommentEnvelope(CamelModel):
    comment: CommentResponse


class CommentsEnvelope(CamelModel):
    comments: list[CommentResponse]


@router.get(COMMENTS_PATH, response_model=CommentsEnvelope)
async def get_comments(
    board_id: int,
    list_id: int,
    card_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Comments on a card, oldest first."""
    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)

    result = await db.execute(
        select(Comment)
        .where(Comment.card_id == card.id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    return {"comments": result.scalars().all()}


@router.post(COMMENTS_PATH, response_model=CommentEnvelope, status_code=status.HTTP_201_CREATED)
async def create_comment(
    board_id: int,
    list_id: int,
    card_id: int,
    payload: CommentCreate,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    if payload.content is None or not payload.content.strip():
        raise ValidationError("Content is required")

    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)

    comment = Comment(card_id=card.id, author_id=current_user.id, content=payload.content.strip())
    comment.author = current_user
    db.add(comment)
    await db.commit()

    logger.info("Comment created", card_id=card.id, comment_id=comment.id, author_id=current_user.id)
    return {"comment": comment}


@router.delete(COMMENTS_PATH + "/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    board_id: int,
    list_id: int,
    card_id: int,
    comment_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    """Delete a comment. Members may only delete their own."""
    board = await get_accessible_board(db, board_id, current_user.id)
    card = await get_list_card(db, board.id, list_id, card_id)
    comment = await get_card_comment(db, card.id, comment_id)
    ensure_comment_author(comment, current_user.id)

    await db.execute(delete(Comment).where(Comment.id == comment.id))
    await db.commit()

    logger.info("Comment deleted", card_id=card.id, comment_id=comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
