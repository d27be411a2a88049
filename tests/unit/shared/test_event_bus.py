from uuid import uuid4

import pytest

from modules.orders.events import OrderCancelled, OrderCreated
from shared.domain.bus import IEventHandler
from shared.domain.events import DomainEventMixin
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


class Recorder:
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)


class Aggregate(DomainEventMixin):
    pass


class TestDomainEvent:
    def test_event_name_is_class_name(self):
        assert OrderCreated(aggregate_id=uuid4()).event_name == "OrderCreated"

    def test_events_have_unique_ids(self):
        aggregate_id = uuid4()
        assert OrderCreated(aggregate_id).event_id != OrderCreated(aggregate_id).event_id

    def test_occurred_on_is_timezone_aware(self):
        assert OrderCreated(aggregate_id=uuid4()).occurred_on.tzinfo is not None


class TestDomainEventMixin:
    def test_collects_and_clears(self):
        aggregate = Aggregate()
        event = OrderCreated(aggregate_id=uuid4())
        aggregate.add_domain_event(event)
        assert aggregate.domain_events == [event]
        aggregate.clear_domain_events()
        assert aggregate.domain_events == []

    def test_domain_events_is_a_copy(self):
        aggregate = Aggregate()
        aggregate.domain_events.append(OrderCreated(aggregate_id=uuid4()))
        assert aggregate.domain_events == []


class TestInMemoryEventBus:
    def test_dispatches_to_exact_type_only(self):
        bus = InMemoryEventBus()
        created, cancelled = Recorder(), Recorder()
        bus.subscribe(OrderCreated, created)
        bus.subscribe(OrderCancelled, cancelled)

        event = OrderCreated(aggregate_id=uuid4())
        bus.publish(event)

        assert created.events == [event]
        assert cancelled.events == []

    def test_subscribe_is_idempotent(self):
        bus = InMemoryEventBus()
        handler = Recorder()
        bus.subscribe(OrderCreated, handler)
        bus.subscribe(OrderCreated, handler)
        bus.publish(OrderCreated(aggregate_id=uuid4()))
        assert len(handler.events) == 1

    def test_unsubscribe(self):
        bus = InMemoryEventBus()
        handler = Recorder()
        bus.subscribe(OrderCreated, handler)
        bus.unsubscribe(OrderCreated, handler)
        bus.publish(OrderCreated(aggregate_id=uuid4()))
        assert handler.events == []
        assert bus.handlers_for(OrderCreated) == []

    def test_publish_without_handlers(self):
        InMemoryEventBus().publish(OrderCreated(aggregate_id=uuid4()))

    def test_plain_objects_with_handle_are_handlers(self):
        assert isinstance(Recorder(), IEventHandler)
        assert not isinstance(object(), IEventHandler)

    def test_failing_handler_does_not_stop_dispatch(self, caplog):
        class Exploding:
            def handle(self, event):
                raise RuntimeError("redis OOM")

        bus = InMemoryEventBus()
        after = Recorder()
        bus.subscribe(OrderCreated, Exploding())
        bus.subscribe(OrderCreated, after)

        event = OrderCreated(aggregate_id=uuid4())
        bus.publish(event)

        assert after.events == [event]
        assert any("event.handler_failed" in r.getMessage() for r in caplog.records)
