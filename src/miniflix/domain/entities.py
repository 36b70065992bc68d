"""
Persistent entities for MiniFlix.

Only accounts and watch progress live in the database. Media items come from
the catalog on disk and are never persisted.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from ..infra.db import Base


class User(Base):
    """A registered account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(150), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    watch_progress: Mapped[list[WatchProgress]] = relationship(
        "WatchProgress", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (UniqueConstraint("username", name="uq_users_username"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"


class WatchProgress(Base):
    """
    Last reported playback position for one (user, media item) pair.

    The unique constraint on ``(user_id, item_id)`` is what the upsert in
    ``WatchProgressRepository`` conflicts on; at most one row exists per pair
    and updates overwrite it in place.
    """

    __tablename__ = "watch_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    item_id: Mapped[str] = mapped_column(Text, nullable=False)
    position_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user: Mapped[User] = relationship("User", back_populates="watch_progress")

    __table_args__ = (
        UniqueConstraint("user_id", "item_id", name="uq_watch_progress_user_item"),
        CheckConstraint("position_seconds >= 0", name="position_non_negative"),
        Index("ix_watch_progress_user_updated", "user_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<WatchProgress(user_id={self.user_id}, item_id={self.item_id}, "
            f"position_seconds={self.position_seconds})>"
        )
