"""
botlist.database.models — SQLAlchemy 2.0 Data Models
=====================================================

Tables:
- users     — Role assignments keyed by Discord snowflake
- bots      — Bot listings keyed by the bot's application client id
- bot_tags  — Tag membership for listings (one row per bot/tag)
- partners  — Partner organizations (store-generated id)

``rejected`` is never stored: a rejected listing is deleted and only the
snapshot returned by the reject operation carries that status.
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from botlist.constants import (
    MAX_CLIENT_ID_LENGTH,
    MAX_INVITE_URL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PREFIX_LENGTH,
    MAX_TAG_LENGTH,
    MAX_URL_LENGTH,
)


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all botlist ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class UserRole(enum.StrEnum):
    """Roles are additive; no role implies another."""
    ADMIN = "admin"
    BOT_REVIEWER = "bot_reviewer"
    BOT_FOUNDER = "bot_founder"
    USER = "user"


class BotStatus(enum.StrEnum):
    """Moderation state of a listing."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# ---------------------------------------------------------------------------
# Users: role assignments, created at first sign-in
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    discord_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    username: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), default=None)
    roles: Mapped[list] = mapped_column(JSONB, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<User id={self.discord_id} roles={self.roles!r}>"


# ---------------------------------------------------------------------------
# Bots: one row per listing
# ---------------------------------------------------------------------------
class Bot(Base):
    __tablename__ = "bots"

    client_id: Mapped[str] = mapped_column(String(MAX_CLIENT_ID_LENGTH), primary_key=True)

    owner_id: Mapped[str] = mapped_column(String(32), nullable=False)
    owner_username: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), default="Unknown")

    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    discriminator: Mapped[str] = mapped_column(String(8), default="")
    avatar: Mapped[str | None] = mapped_column(String(MAX_URL_LENGTH), default=None)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    long_description: Mapped[str] = mapped_column(Text, nullable=False)
    prefix: Mapped[str] = mapped_column(String(MAX_PREFIX_LENGTH), nullable=False)

    website: Mapped[str | None] = mapped_column(String(MAX_URL_LENGTH), default=None)
    support_server: Mapped[str | None] = mapped_column(String(MAX_URL_LENGTH), default=None)
    github_repo: Mapped[str | None] = mapped_column(String(MAX_URL_LENGTH), default=None)
    invite_url: Mapped[str | None] = mapped_column(String(MAX_INVITE_URL_LENGTH), default=None)

    status: Mapped[str] = mapped_column(String(16), default=BotStatus.PENDING)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    votes: Mapped[int] = mapped_column(Integer, default=0)
    servers: Mapped[int] = mapped_column(Integer, default=0)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    bot_public: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    tag_rows: Mapped[list[BotTag]] = relationship(
        back_populates="bot",
        cascade="all, delete-orphan",
        order_by="BotTag.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_bots_status_created", "status", "created_at"),
        Index("ix_bots_owner", "owner_id"),
    )

    @property
    def tags(self) -> list[str]:
        return [t.tag for t in self.tag_rows]

    def set_tags(self, tags: list[str]) -> None:
        """Replace tag membership with *tags* (already normalized).

        Rows for tags that survive are reused so a flush never deletes and
        re-inserts the same ``(bot_id, tag)`` key.
        """
        existing = {row.tag: row for row in self.tag_rows}
        rows: list[BotTag] = []
        for position, tag in enumerate(tags):
            row = existing.get(tag) or BotTag(tag=tag)
            row.position = position
            rows.append(row)
        self.tag_rows = rows

    def __repr__(self) -> str:
        return f"<Bot id={self.client_id} name={self.name!r} status={self.status}>"


class BotTag(Base):
    __tablename__ = "bot_tags"

    bot_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("bots.client_id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag: Mapped[str] = mapped_column(String(MAX_TAG_LENGTH), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    bot: Mapped[Bot] = relationship(back_populates="tag_rows")

    __table_args__ = (
        Index("ix_bot_tags_tag", "tag"),
    )


# ---------------------------------------------------------------------------
# Partners
# ---------------------------------------------------------------------------
class Partner(Base):
    __tablename__ = "partners"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    website: Mapped[str | None] = mapped_column(String(MAX_URL_LENGTH), default=None)
    logo_url: Mapped[str | None] = mapped_column(String(MAX_URL_LENGTH), default=None)
    metadata_: Mapped[dict | None] = mapped_column("metadata", JSONB, default=None)
    created_by: Mapped[str | None] = mapped_column(String(32), default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<Partner id={self.id} name={self.name!r}>"
