"""Append activity records for completed registry operations."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from sqlalchemy import select

from quayside.activity.storage import Activity

if typ.TYPE_CHECKING:
    import datetime as dt

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class ActivityKey(enum.StrEnum):
    """Keys identifying recorded activities."""

    REPOSITORY_PUSH = "repository.push"


@dc.dataclass(frozen=True, slots=True)
class ActivityInfo:
    """Detached view of an activity row."""

    id: int
    key: str
    owner_id: int | None
    trackable_type: str
    trackable_id: int
    recipient_type: str | None
    recipient_id: int | None
    created_at: dt.datetime


def _to_activity_info(activity: Activity) -> ActivityInfo:
    return ActivityInfo(
        id=activity.id,
        key=activity.key,
        owner_id=activity.owner_id,
        trackable_type=activity.trackable_type,
        trackable_id=activity.trackable_id,
        recipient_type=activity.recipient_type,
        recipient_id=activity.recipient_id,
        created_at=activity.created_at,
    )


class ActivityRecorder:
    """Append-only writer for the activity trail.

    Each call commits in its own transaction, independent of whatever state
    change it describes. Callers decide how to treat a failed write.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Store the session factory used for audit writes."""
        self._session_factory = session_factory

    async def record_push(
        self, *, owner_id: int, repository_id: int, tag_id: int
    ) -> ActivityInfo:
        """Record that ``owner_id`` pushed ``tag_id`` into ``repository_id``."""
        async with self._session_factory() as session, session.begin():
            activity = Activity(
                key=ActivityKey.REPOSITORY_PUSH.value,
                owner_id=owner_id,
                trackable_type="Repository",
                trackable_id=repository_id,
                recipient_type="Tag",
                recipient_id=tag_id,
            )
            session.add(activity)
            await session.flush()
            return _to_activity_info(activity)

    async def list_for_repository(self, repository_id: int) -> list[ActivityInfo]:
        """Return activities tracking a repository, oldest first."""
        async with self._session_factory() as session:
            activities = await session.scalars(
                select(Activity)
                .where(
                    Activity.trackable_type == "Repository",
                    Activity.trackable_id == repository_id,
                )
                .order_by(Activity.created_at, Activity.id)
            )
            return [_to_activity_info(activity) for activity in activities]
