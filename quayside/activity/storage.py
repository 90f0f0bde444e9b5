"""Persistence model for the append-only activity trail."""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import typing as typ

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from quayside.common.time import utcnow
from quayside.registry.storage import Base, UTCDateTime

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


class Activity(Base):
    """Immutable audit entry: who did what to which entity.

    Trackables and recipients are referenced by ``(type, id)`` pairs rather
    than foreign keys so that later tag reconciliation never rewrites or
    removes history.
    """

    __tablename__ = "activities"
    __table_args__ = (
        Index("ix_activities_trackable", "trackable_type", "trackable_id"),
        Index("ix_activities_owner_time", "owner_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(64))
    owner_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), default=None
    )
    trackable_type: Mapped[str] = mapped_column(String(64))
    trackable_id: Mapped[int]
    recipient_type: Mapped[str | None] = mapped_column(String(64), default=None)
    recipient_id: Mapped[int | None] = mapped_column(default=None)
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime(), default=utcnow)


async def init_activity_storage(engine: AsyncEngine) -> None:
    """Create all tables registered with Base if they are absent."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
