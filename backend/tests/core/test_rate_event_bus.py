"""
Tests for rate_core.event_bus
"""
import pytest
from rate_core.event_bus import Event, EventBus


@pytest.fixture
def bus():
    return EventBus(history_size=3)


def test_event_creation():
    """Event gets an id and empty source by default"""
    event = Event(event_type="inventory:updated", data={"roomId": "room-a"})
    assert event.event_type == "inventory:updated"
    assert event.data == {"roomId": "room-a"}
    assert event.event_id
    assert event.source == ""


def test_buses_are_independent():
    """No process-wide instance"""
    first, second = EventBus(), EventBus()
    assert first is not second

    received = []
    first.subscribe("booking:created", received.append)
    second.publish(Event(event_type="booking:created", data={}))
    assert received == []


def test_subscribe_and_publish(bus):
    received = []

    def handler(event):
        received.append(event)

    bus.subscribe("inventory:updated", handler)
    event = Event(event_type="inventory:updated", data={"availableRooms": 3})
    result = bus.publish(event)

    assert received == [event]
    assert result.subscriber_count == 1
    assert result.success_count == 1
    assert result.failure_count == 0


def test_subscribe_same_handler_once(bus):
    received = []
    bus.subscribe("inventory:updated", received.append)
    bus.subscribe("inventory:updated", received.append)

    bus.publish(Event(event_type="inventory:updated", data={}))

    assert len(received) == 1


def test_unsubscribe(bus):
    received = []
    bus.subscribe("inventory:updated", received.append)
    bus.unsubscribe("inventory:updated", received.append)

    result = bus.publish(Event(event_type="inventory:updated", data={}))

    assert received == []
    assert result.subscriber_count == 0


def test_publish_without_subscribers(bus):
    result = bus.publish(Event(event_type="booking:created", data={}))
    assert result.subscriber_count == 0
    assert result.success_count == 0


def test_handler_error_isolated(bus):
    """A failing handler does not stop the others"""
    received = []

    def broken(event):
        raise ValueError("bad payload")

    bus.subscribe("booking:created", broken)
    bus.subscribe("booking:created", received.append)

    result = bus.publish(Event(event_type="booking:created", data={}))

    assert result.failure_count == 1
    assert result.success_count == 1
    assert isinstance(result.errors[0].error, ValueError)
    assert result.errors[0].handler_name.endswith("broken")
    assert len(received) == 1


def test_history_newest_first_and_bounded(bus):
    for i in range(5):
        bus.publish(Event(event_type="inventory:updated", data={"seq": i}))
    bus.publish(Event(event_type="booking:created", data={"seq": 5}))

    history = bus.get_history()
    assert [e.data["seq"] for e in history] == [5, 4, 3]
    assert [e.data["seq"] for e in bus.get_history("inventory:updated")] == [4, 3]
    assert len(bus.get_history(limit=1)) == 1


def test_statistics(bus):
    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe("inventory:updated", lambda event: None)
    bus.subscribe("inventory:updated", broken)
    bus.publish(Event(event_type="inventory:updated", data={}))

    stats = bus.get_statistics()
    assert stats.total_published == 1
    assert stats.total_processed == 1
    assert stats.total_failed == 1
    assert stats.published_by_type == {"inventory:updated": 1}
    assert stats.subscriber_count == {"inventory:updated": 2}


def test_clear(bus):
    bus.subscribe("inventory:updated", lambda event: None)
    bus.publish(Event(event_type="inventory:updated", data={}))

    bus.clear()

    assert bus.get_history() == []
    assert bus.get_statistics().total_published == 0
    assert bus.get_statistics().subscriber_count == {}
