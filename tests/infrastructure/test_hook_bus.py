from dataclasses import dataclass

import pytest

from assetcat.events.bus import CancellableEvent, Event, EventBus


@dataclass(kw_only=True)
class SimpleEvent(Event):
    payload: str = ""


@dataclass(kw_only=True)
class GuardedEvent(CancellableEvent):
    payload: str = ""


def test_sync_subscribe_publish():
    bus = EventBus()
    received = []

    bus.subscribe(SimpleEvent, lambda event: received.append(event.payload))
    bus.publish(SimpleEvent(payload="hello"))

    assert received == ["hello"]


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    calls = []
    bus.subscribe(SimpleEvent, lambda e: calls.append("first"))
    bus.subscribe(SimpleEvent, lambda e: calls.append("second"))
    bus.publish(SimpleEvent())
    assert calls == ["first", "second"]


def test_publish_continues_after_handler_error():
    bus = EventBus()
    calls = []

    def broken(event):
        raise RuntimeError("handler bug")

    bus.subscribe(SimpleEvent, broken)
    bus.subscribe(SimpleEvent, lambda e: calls.append("ran"))
    bus.publish(SimpleEvent())
    assert calls == ["ran"]


def test_unsubscribe():
    bus = EventBus()
    calls = []
    sub = bus.subscribe(SimpleEvent, lambda e: calls.append(1))
    bus.unsubscribe(sub)
    bus.publish(SimpleEvent())
    assert calls == []


def test_request_allows_by_default():
    bus = EventBus()
    bus.subscribe(GuardedEvent, lambda e: None)
    assert bus.request(GuardedEvent()) is True


def test_request_veto_by_return_value_stops_delivery():
    bus = EventBus()
    calls = []
    bus.subscribe(GuardedEvent, lambda e: False)
    bus.subscribe(GuardedEvent, lambda e: calls.append("late"))

    event = GuardedEvent()
    assert bus.request(event) is False
    assert event.perform_action is False
    assert calls == []


def test_request_veto_by_cancel():
    bus = EventBus()
    bus.subscribe(GuardedEvent, lambda e: e.cancel())
    assert bus.request(GuardedEvent()) is False


def test_request_propagates_handler_errors():
    bus = EventBus()

    def broken(event):
        raise RuntimeError("handler bug")

    bus.subscribe(GuardedEvent, broken)
    with pytest.raises(RuntimeError):
        bus.request(GuardedEvent())


def test_subscription_is_per_exact_type():
    bus = EventBus()
    calls = []
    bus.subscribe(Event, lambda e: calls.append(e))
    bus.publish(SimpleEvent())
    assert calls == []


def test_publish_raise_errors_stops_delivery():
    bus = EventBus()
    calls = []

    def broken(event):
        raise RuntimeError("handler bug")

    bus.subscribe(SimpleEvent, broken)
    bus.subscribe(SimpleEvent, lambda e: calls.append("ran"))
    with pytest.raises(RuntimeError):
        bus.publish(SimpleEvent(), raise_errors=True)
    assert calls == []
