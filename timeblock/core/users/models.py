# timeblock/core/users/models.py
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from timeblock.db.base import Base

if TYPE_CHECKING:  # pragma: no cover
    from timeblock.core.chats.models import Chat


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True, comment="Internal User ID")
    email: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, comment="User display name")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    chats: Mapped[List["Chat"]] = relationship(back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"User(id={self.id!r})"
