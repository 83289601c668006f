"""Board, membership, invite and label models."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.db.base import BaseModel

if TYPE_CHECKING:
    from taskboard.models.user import User


MEMBER_ROLE = "MEMBER"
OWNER_ROLE = "OWNER"


class Board(BaseModel):
    """Top-level container owned by a single user."""

    __tablename__ = "boards"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Board {self.id} {self.title!r}>"


class BoardMember(BaseModel):
    """Non-owner access grant to a board."""

    __tablename__ = "board_members"
    __table_args__ = (
        UniqueConstraint("board_id", "user_id", name="uq_board_member"),
    )

    board_id: Mapped[int] = mapped_column(
        ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=MEMBER_ROLE)

    user: Mapped["User"] = relationship("User", lazy="selectin")

    def __repr__(self) -> str:
        return f"<BoardMember board={self.board_id} user={self.user_id}>"


class BoardInvite(BaseModel):
    """Pending, owner-issued grant of membership to a specific user."""

    __tablename__ = "board_invites"
    __table_args__ = (
        UniqueConstraint("board_id", "invitee_id", name="uq_board_invite"),
    )

    board_id: Mapped[int] = mapped_column(
        ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    inviter_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    invitee_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    board: Mapped["Board"] = relationship("Board", lazy="selectin")
    inviter: Mapped["User"] = relationship("User", foreign_keys=[inviter_id], lazy="selectin")
    invitee: Mapped["User"] = relationship("User", foreign_keys=[invitee_id], lazy="selectin")

    def __repr__(self) -> str:
        return f"<BoardInvite board={self.board_id} invitee={self.invitee_id}>"


class Label(BaseModel):
    """Board-scoped tag that can be attached to cards."""

    __tablename__ = "labels"

    board_id: Mapped[int] = mapped_column(
        ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<Label {self.id} {self.name!r}>"
