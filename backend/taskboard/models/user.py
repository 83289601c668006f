"""User model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.db.base import BaseModel


class User(BaseModel):
    """Registered account. Email lookups are case-insensitive."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
