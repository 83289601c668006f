"""Board sharing endpoints: invite by email, list and remove members."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Response, status

from taskboard.api.v1.auth import CurrentUser
from taskboard.api.v1.invites import InviteEnvelope
from taskboard.db.session import DBSession
from taskboard.exceptions import ValidationError
from taskboard.schemas import CamelModel
from taskboard.services import membership
from taskboard.services.access_control import get_accessible_board, get_owned_board

router = APIRouter()
logger = structlog.get_logger()


class InviteRequest(CamelModel):
    email: str | None = None


class MemberResponse(CamelModel):
    user_id: int
    email: str
    name: str | None
    role: str
    is_owner: bool
    joined_at: datetime


class MembersEnvelope(CamelModel):
    members: list[MemberResponse]


@router.post(
    "/{board_id}/invite",
    response_model=InviteEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def invite_member(
    board_id: int,
    payload: InviteRequest,
    current_user: CurrentUser,
    db: DBSession,
) -> dict:
    """Invite an existing user by email. Owner only; repeat invites are no-ops."""
    email = (payload.email or "").strip()
    if not email:
        raise ValidationError("Email is required")

    board = await get_owned_board(db, board_id, current_user.id)
    invite = await membership.invite_member(db, board, current_user, email)
    return {"invite": invite}


@router.get("/{board_id}/members", response_model=MembersEnvelope)
async def list_members(board_id: int, current_user: CurrentUser, db: DBSession) -> dict:
    board = await get_accessible_board(db, board_id, current_user.id)
    return {"members": await membership.list_members(db, board)}


@router.delete("/{board_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    board_id: int,
    user_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    board = await get_owned_board(db, board_id, current_user.id)
    await membership.remove_member(db, board, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
