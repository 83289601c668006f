"""Invite inbox endpoints for the invited user."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Response, status

from taskboard.api.v1.auth import CurrentUser
from taskboard.db.session import DBSession
from taskboard.schemas import BoardResponse, CamelModel
from taskboard.services import membership

router = APIRouter()
logger = structlog.get_logger()


class InviteBoard(CamelModel):
    id: int
    title: str


class InviteUser(CamelModel):
    id: int
    email: str
    name: str | None


class InviteResponse(CamelModel):
    id: int
    board_id: int
    inviter_id: int
    invitee_id: int
    created_at: datetime
    board: InviteBoard
    inviter: InviteUser


class InviteEnvelope(CamelModel):
    invite: InviteResponse


class InvitesEnvelope(CamelModel):
    invites: list[InviteResponse]


class AcceptResponse(CamelModel):
    board: BoardResponse


@router.get("/invites", response_model=InvitesEnvelope)
async def list_invites(current_user: CurrentUser, db: DBSession) -> dict:
    """Pending invites addressed to the current user, newest first."""
    invites = await membership.list_pending_invites(db, current_user)
    return {"invites": invites}


@router.post("/invites/{invite_id}/accept", response_model=AcceptResponse)
async def accept_invite(invite_id: int, current_user: CurrentUser, db: DBSession) -> dict:
    board = await membership.accept_invite(db, current_user, invite_id)
    return {"board": board}


@router.delete("/invites/{invite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def decline_invite(invite_id: int, current_user: CurrentUser, db: DBSession) -> Response:
    await membership.decline_invite(db, current_user, invite_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
