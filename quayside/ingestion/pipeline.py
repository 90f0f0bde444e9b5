"""Process registry push events from raw payload to persisted state.

The pipeline runs the stages in a fixed order and stops at the first
rejection:

1. Parse the raw event (no database access).
2. Validate the source registry and the pushing user.
3. Resolve the repository path to a namespace.
4. Reconcile the repository and tag inside one transaction.
5. Append an activity record in a separate transaction.

Rejections never write. Activity failures are logged and leave the
committed repository and tag in place.
"""

from __future__ import annotations

import typing as typ

from sqlalchemy.exc import SQLAlchemyError

from quayside.activity.recorder import ActivityRecorder
from quayside.events.errors import (
    MalformedEventError,
    PushOutcome,
    UnknownActorError,
    UnknownNamespaceError,
    UnknownRegistryError,
)
from quayside.events.parser import is_push_action, parse_push_event
from quayside.ingestion.namespaces import NamespaceResolver
from quayside.ingestion.observability import PushEventLogger
from quayside.ingestion.outcome import PushEventResult
from quayside.ingestion.reconciler import RepositoryReconciler
from quayside.ingestion.validation import OriginValidator
from quayside.registry.mapping import to_repository_info, to_tag_info
from quayside.registry.queries import tags_of

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from quayside.events.models import PushEvent
    from quayside.registry.models import RepositoryInfo, TagInfo


class PushEventProcessor:
    """Apply registry push events to repository and tag state."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        recorder: ActivityRecorder | None = None,
        event_logger: PushEventLogger | None = None,
    ) -> None:
        """Configure the processor.

        Parameters
        ----------
        session_factory
            Factory used for the reconciliation transaction.
        recorder
            Activity recorder; defaults to one sharing ``session_factory``.
        event_logger
            Destination for outcome logs; defaults to the module logger.

        """
        self._session_factory = session_factory
        self._recorder = recorder or ActivityRecorder(session_factory)
        self._event_logger = event_logger or PushEventLogger()
        self._validator = OriginValidator()
        self._resolver = NamespaceResolver()
        self._reconciler = RepositoryReconciler()

    async def process_push_event(
        self, raw: typ.Mapping[str, typ.Any]
    ) -> PushEventResult:
        """Process a single push event and report its outcome.

        Parameters
        ----------
        raw
            One event object from a registry notification envelope.

        Returns
        -------
        PushEventResult
            ``accepted`` with the reconciled repository and tag, or the
            rejection outcome with no state change.

        """
        try:
            event = parse_push_event(raw)
        except MalformedEventError as exc:
            self._event_logger.log_malformed(exc)
            return PushEventResult(exc.outcome)

        try:
            repository, tag, actor_id = await self._reconcile(event)
        except UnknownRegistryError as exc:
            self._event_logger.log_unknown_registry(exc)
            return PushEventResult(exc.outcome)
        except UnknownActorError as exc:
            self._event_logger.log_unknown_actor(exc)
            return PushEventResult(exc.outcome)
        except UnknownNamespaceError as exc:
            return PushEventResult(exc.outcome)

        await self._record_activity(actor_id, repository, tag)
        self._event_logger.log_accepted(event, repository, tag)
        return PushEventResult(PushOutcome.ACCEPTED, repository, tag)

    async def process_notification(
        self, envelope: typ.Mapping[str, typ.Any]
    ) -> list[PushEventResult]:
        """Process every event of a notification envelope in order.

        Events whose ``action`` is not ``push`` are reported as ignored
        without being parsed.
        """
        results: list[PushEventResult] = []
        for raw in envelope.get("events", ()):
            if not is_push_action(raw):
                results.append(PushEventResult(PushOutcome.IGNORED))
                continue
            results.append(await self.process_push_event(raw))
        return results

    async def _reconcile(
        self, event: PushEvent
    ) -> tuple[RepositoryInfo, TagInfo, int]:
        async with self._session_factory() as session, session.begin():
            registry, actor = await self._validator.validate(session, event)
            namespace, name = await self._resolver.resolve(
                session, registry, event.repository_path
            )
            repository, tag = await self._reconciler.reconcile_push(
                session, namespace, name, event.tag_name, actor
            )
            tags = await tags_of(session, repository.id)
            return (
                to_repository_info(repository, namespace, tags),
                to_tag_info(tag),
                actor.id,
            )

    async def _record_activity(
        self, actor_id: int, repository: RepositoryInfo, tag: TagInfo
    ) -> None:
        try:
            await self._recorder.record_push(
                owner_id=actor_id, repository_id=repository.id, tag_id=tag.id
            )
        except SQLAlchemyError as exc:
            self._event_logger.log_activity_failed(repository, tag, exc)
