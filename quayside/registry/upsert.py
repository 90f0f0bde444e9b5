"""Idempotent find-or-create primitive backed by unique constraints.

Concurrent deliveries of the same registry notification race to create the
same namespace, repository or tag rows. No in-process lock is taken: the
natural-key unique constraints decide the winner, and the loser re-reads the
row the winner committed.
"""

from __future__ import annotations

import typing as typ

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from quayside.registry.errors import ConcurrentWriteError
from quayside.registry.storage import Base

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def find_or_create[ModelT: Base](
    session: AsyncSession,
    model: type[ModelT],
    *,
    defaults: dict[str, typ.Any] | None = None,
    **natural_key: typ.Any,  # noqa: ANN401 - column values vary per model
) -> tuple[ModelT, bool]:
    """Return the row matching ``natural_key``, creating it when absent.

    The lookup runs first. On a miss the row is inserted inside a SAVEPOINT
    so a unique violation only discards this insert; the surrounding
    transaction stays usable and the row is looked up again.

    Parameters
    ----------
    session
        Session whose transaction receives the insert.
    model
        Mapped class to query and instantiate.
    defaults
        Extra column values applied only when the row is created.
    **natural_key
        Column values identifying the row; they must be covered by a unique
        constraint on ``model``.

    Returns
    -------
    tuple[ModelT, bool]
        The row and whether this call created it.

    Raises
    ------
    ConcurrentWriteError
        If the insert conflicts but no matching row is visible afterwards.

    """
    stmt = select(model).filter_by(**natural_key)

    existing = await session.scalar(stmt)
    if existing is not None:
        return existing, False

    record = model(**natural_key, **(defaults or {}))
    try:
        async with session.begin_nested():
            session.add(record)
            await session.flush()
    except IntegrityError as exc:
        with session.no_autoflush:
            existing = await session.scalar(stmt)
        if existing is None:
            raise ConcurrentWriteError(model.__tablename__) from exc
        return existing, False

    return record, True
