"""Event bus contracts.

Order events are dispatched in-process after commit; the notification
handler is the only subscriber today.
"""

from __future__ import annotations

from typing import Generic, List, Protocol, Type, TypeVar, runtime_checkable

from shared.domain.events import DomainEvent

EventT = TypeVar("EventT", bound=DomainEvent, contravariant=True)


@runtime_checkable
class IEventHandler(Protocol, Generic[EventT]):
    def handle(self, event: EventT) -> None:
        """React to a committed event; must not raise for delivery problems."""


class IEventBus(Protocol):
    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None: ...

    def unsubscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None: ...

    def handlers_for(self, event_class: Type[DomainEvent]) -> List[IEventHandler]: ...

    def publish(self, event: DomainEvent) -> None: ...
