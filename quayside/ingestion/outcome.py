"""Result values returned by the push-event pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from quayside.events.errors import PushOutcome

if typ.TYPE_CHECKING:
    from quayside.registry.models import RepositoryInfo, TagInfo


@dc.dataclass(frozen=True, slots=True)
class PushEventResult:
    """Outcome of processing one registry event.

    ``repository`` and ``tag`` are populated only for accepted pushes; every
    other outcome leaves registry state untouched.
    """

    outcome: PushOutcome
    repository: RepositoryInfo | None = None
    tag: TagInfo | None = None

    @property
    def accepted(self) -> bool:
        """Return True when the event changed or confirmed registry state."""
        return self.outcome is PushOutcome.ACCEPTED

    def as_dict(self) -> dict[str, str | None]:
        """Return a JSON-friendly summary of the result."""
        return {
            "outcome": self.outcome.value,
            "repository": None if self.repository is None else self.repository.full_name,
            "tag": None if self.tag is None else self.tag.name,
        }
