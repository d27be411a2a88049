"""Domain event primitives.

Aggregates collect events while a use case runs; the repository hands
them to the event bus once the surrounding transaction commits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable)."""

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", type(self).__name__)


class DomainEventMixin:
    """Mixin for aggregate roots that buffer domain events in memory."""

    def _event_buffer(self) -> list[DomainEvent]:
        buffer = self.__dict__.get("_domain_events")
        if buffer is None:
            buffer = self.__dict__["_domain_events"] = []
        return buffer

    def add_domain_event(self, event: DomainEvent) -> None:
        self._event_buffer().append(event)

    def clear_domain_events(self) -> None:
        self._event_buffer().clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        return list(self._event_buffer())
