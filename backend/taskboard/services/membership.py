"""Board membership and invite workflow.

Invites are owner-issued and addressed to an existing user by email. The
invitee accepts (membership upsert + invite delete, one transaction) or
declines (invite delete). Owners may remove members but never themselves.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from taskboard.exceptions import NotFoundError, ValidationError
from taskboard.models import (
    MEMBER_ROLE,
    OWNER_ROLE,
    Board,
    BoardInvite,
    BoardMember,
    User,
)

logger = structlog.get_logger()


@dataclass
class MemberEntry:
    """One row of the member listing; the owner is synthesized."""

    user_id: int
    email: str
    name: str | None
    role: str
    is_owner: bool
    joined_at: datetime


def _insert_for(db: AsyncSession, model: type) -> Any:
    """Dialect-specific INSERT so ``on_conflict_do_nothing`` is available."""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite.insert(model)
    return postgresql.insert(model)


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def is_member(db: AsyncSession, board_id: int, user_id: int) -> bool:
    result = await db.execute(
        select(BoardMember.id).where(
            BoardMember.board_id == board_id,
            BoardMember.user_id == user_id,
        )
    )
    return result.scalar_one_or_none() is not None


# =========================================================================
# Invites
# =========================================================================


async def invite_member(
    db: AsyncSession,
    board: Board,
    inviter: User,
    email: str,
) -> BoardInvite:
    """Invite a user to an owned board.

    Re-inviting an already invited user returns the existing invite
    unchanged.
    """
    invitee = await find_user_by_email(db, email)
    if invitee is None:
        raise NotFoundError("User not found")

    if invitee.id == inviter.id or invitee.id == board.owner_id:
        raise ValidationError("You cannot invite yourself")

    if await is_member(db, board.id, invitee.id):
        raise ValidationError("User is already a member")

    await db.execute(
        _insert_for(db, BoardInvite)
        .values(board_id=board.id, inviter_id=inviter.id, invitee_id=invitee.id)
        .on_conflict_do_nothing(index_elements=["board_id", "invitee_id"])
    )
    await db.commit()

    result = await db.execute(
        select(BoardInvite).where(
            BoardInvite.board_id == board.id,
            BoardInvite.invitee_id == invitee.id,
        )
    )
    invite = result.scalar_one()

    logger.info(
        "Board invite issued",
        board_id=board.id,
        invite_id=invite.id,
        inviter_id=inviter.id,
        invitee_id=invitee.id,
    )
    return invite


async def list_pending_invites(db: AsyncSession, user: User) -> list[BoardInvite]:
    result = await db.execute(
        select(BoardInvite)
        .where(BoardInvite.invitee_id == user.id)
        .order_by(BoardInvite.created_at.desc(), BoardInvite.id.desc())
    )
    return list(result.scalars().all())


async def _get_own_invite(db: AsyncSession, user: User, invite_id: int) -> BoardInvite:
    result = await db.execute(
        select(BoardInvite).where(
            BoardInvite.id == invite_id,
            BoardInvite.invitee_id == user.id,
        )
    )
    invite = result.scalar_one_or_none()
    if invite is None:
        raise NotFoundError("Invite not found")
    return invite


async def accept_invite(db: AsyncSession, user: User, invite_id: int) -> Board:
    """Turn an invite into a membership.

    The membership upsert and the invite delete commit together; a second
    accept of the same invite finds nothing and raises NotFoundError.
    """
    invite = await _get_own_invite(db, user, invite_id)
    board_id = invite.board_id

    try:
        await db.execute(
            _insert_for(db, BoardMember)
            .values(board_id=board_id, user_id=user.id, role=MEMBER_ROLE)
            .on_conflict_do_nothing(index_elements=["board_id", "user_id"])
        )
        await db.execute(delete(BoardInvite).where(BoardInvite.id == invite.id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    result = await db.execute(select(Board).where(Board.id == board_id))
    board = result.scalar_one()

    logger.info("Board invite accepted", board_id=board_id, invite_id=invite_id, user_id=user.id)
    return board


async def decline_invite(db: AsyncSession, user: User, invite_id: int) -> None:
    invite = await _get_own_invite(db, user, invite_id)
    await db.execute(delete(BoardInvite).where(BoardInvite.id == invite.id))
    await db.commit()

    logger.info("Board invite declined", invite_id=invite_id, user_id=user.id)


# =========================================================================
# Members
# =========================================================================


async def list_members(db: AsyncSession, board: Board) -> list[MemberEntry]:
    """Owner first, then members in join order."""
    owner_result = await db.execute(select(User).where(User.id == board.owner_id))
    owner = owner_result.scalar_one()

    members_result = await db.execute(
        select(BoardMember)
        .where(BoardMember.board_id == board.id)
        .order_by(BoardMember.created_at.asc(), BoardMember.id.asc())
    )

    entries = [
        MemberEntry(
            user_id=owner.id,
            email=owner.email,
            name=owner.name,
            role=OWNER_ROLE,
            is_owner=True,
            joined_at=board.created_at,
        )
    ]
    for member in members_result.scalars().all():
        # A stray membership row for the owner must not list them twice
        if member.user_id == board.owner_id:
            continue
        entries.append(
            MemberEntry(
                user_id=member.user_id,
                email=member.user.email,
                name=member.user.name,
                role=member.role,
                is_owner=False,
                joined_at=member.created_at,
            )
        )
    return entries


async def remove_member(db: AsyncSession, board: Board, user_id: int) -> None:
    if user_id == board.owner_id:
        raise ValidationError("Cannot remove the board owner")

    result = await db.execute(
        select(BoardMember).where(
            BoardMember.board_id == board.id,
            BoardMember.user_id == user_id,
        )
    )
    membership = result.scalar_one_or_none()
    if membership is None:
        raise NotFoundError("Member not found")

    await db.execute(delete(BoardMember).where(BoardMember.id == membership.id))
    await db.commit()

    logger.info("Board member removed", board_id=board.id, user_id=user_id)
