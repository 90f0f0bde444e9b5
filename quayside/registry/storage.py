"""Persistence models for registries, namespaces, repositories and tags."""

from __future__ import annotations

import datetime as dt
import typing as typ

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from quayside.common.time import utcnow

if typ.TYPE_CHECKING:
    from sqlalchemy.engine import Dialect
    from sqlalchemy.ext.asyncio import AsyncEngine


class NaiveDatetimeError(ValueError):
    """Raised when a naive datetime is bound to a UTC column."""

    def __init__(self) -> None:
        """Attach a fixed message."""
        super().__init__("datetime values must be timezone aware")


class Base(DeclarativeBase):
    """Declarative base shared by every Quayside table."""


class UTCDateTime(TypeDecorator[dt.datetime]):
    """Timezone-aware datetime column that reads back as UTC on SQLite too."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: dt.datetime | None, dialect: Dialect
    ) -> dt.datetime | None:
        """Reject naive values and store everything in UTC."""
        if value is None:
            return None
        if value.tzinfo is None:
            raise NaiveDatetimeError
        return value.astimezone(dt.UTC)

    def process_result_value(
        self, value: dt.datetime | None, dialect: Dialect
    ) -> dt.datetime | None:
        """Attach UTC tzinfo to values returned without it."""
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.UTC)
        return value.astimezone(dt.UTC)


class Registry(Base):
    """A registry host whose notifications Quayside accepts."""

    __tablename__ = "registries"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    hostname: Mapped[str] = mapped_column(String(255), unique=True)
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime(), default=utcnow)

    namespaces: Mapped[list[Namespace]] = relationship(back_populates="registry")


class Namespace(Base):
    """Grouping of repositories within one registry.

    Every registry owns exactly one global namespace (``is_global``) named
    after the registry hostname. Other namespaces are provisioned
    administratively and are the only ones matched by name.
    """

    __tablename__ = "namespaces"
    __table_args__ = (
        UniqueConstraint("registry_id", "name", name="uq_namespaces_registry_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    registry_id: Mapped[int] = mapped_column(
        ForeignKey("registries.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255))
    is_global: Mapped[bool] = mapped_column(Boolean, default=False)
    description: Mapped[str] = mapped_column(Text(), default="")
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime(), default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, onupdate=utcnow
    )

    registry: Mapped[Registry] = relationship(back_populates="namespaces")
    repositories: Mapped[list[Repository]] = relationship(back_populates="namespace")


class Repository(Base):
    """Image repository inside a namespace."""

    __tablename__ = "repositories"
    __table_args__ = (
        UniqueConstraint(
            "namespace_id", "name", name="uq_repositories_namespace_name"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    namespace_id: Mapped[int] = mapped_column(
        ForeignKey("namespaces.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime(), default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, onupdate=utcnow
    )

    namespace: Mapped[Namespace] = relationship(back_populates="repositories")
    tags: Mapped[list[Tag]] = relationship(back_populates="repository")


class User(Base):
    """Identity that pushes images."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True)
    email: Mapped[str | None] = mapped_column(String(320), default=None)
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime(), default=utcnow)


class Tag(Base):
    """Named reference to a pushed manifest."""

    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("repository_id", "name", name="uq_tags_repository_name"),
        Index("ix_tags_repository_created", "repository_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    repository_id: Mapped[int] = mapped_column(
        ForeignKey("repositories.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255))
    author_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), default=None
    )
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime(), default=utcnow)

    repository: Mapped[Repository] = relationship(back_populates="tags")
    author: Mapped[User | None] = relationship()


async def init_registry_storage(engine: AsyncEngine) -> None:
    """Create all tables registered with Base if they are absent."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
