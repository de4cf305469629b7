"""Tests for the in-memory EventBus."""

import asyncio

import pytest

from formvalidation.models.events import ValidationStartedEvent
from formvalidation.services import EventBus


@pytest.fixture
def bus():
    return EventBus(max_history=3)


class TestEventBus:
    """Subscription, delivery and history."""

    @pytest.mark.asyncio
    async def test_publish_reaches_target_listeners_only(self, bus):
        email_events, name_events = [], []

        async def on_email(event):
            email_events.append(event)

        async def on_name(event):
            name_events.append(event)

        bus.subscribe("email", on_email)
        bus.subscribe("name", on_name)

        await bus.publish("email", {"type": "validation_started"})

        assert email_events == [{"type": "validation_started"}]
        assert name_events == []

    @pytest.mark.asyncio
    async def test_subscribe_all_receives_every_target(self, bus):
        received = []

        async def on_any(event):
            received.append(event["target"])

        bus.subscribe_all(on_any)
        await bus.publish("email", {"target": "email"})
        await bus.publish("name", {"target": "name"})

        assert received == ["email", "name"]

        bus.unsubscribe_all(on_any)
        await bus.publish("email", {"target": "email"})
        assert received == ["email", "name"]

    @pytest.mark.asyncio
    async def test_unsubscribe(self, bus):
        received = []

        async def listener(event):
            received.append(event)

        bus.subscribe("email", listener)
        bus.unsubscribe("email", listener)
        bus.unsubscribe("never-subscribed", listener)
        await bus.publish("email", {"type": "x"})

        assert received == []

    @pytest.mark.asyncio
    async def test_failing_listener_is_dropped(self, bus):
        calls = 0
        received = []

        async def broken(event):
            nonlocal calls
            calls += 1
            raise RuntimeError("socket closed")

        async def healthy(event):
            received.append(event)

        bus.subscribe("email", broken)
        bus.subscribe("email", healthy)

        await bus.publish("email", {"n": 1})
        await bus.publish("email", {"n": 2})

        assert calls == 1
        assert received == [{"n": 1}, {"n": 2}]

    @pytest.mark.asyncio
    async def test_history_is_bounded(self, bus):
        for n in range(5):
            await bus.publish("email", {"n": n})

        assert [e["n"] for e in bus.get_history("email")] == [2, 3, 4]
        assert bus.get_history("unknown") == []

    @pytest.mark.asyncio
    async def test_publish_nowait_and_flush(self, bus):
        received = []

        async def slow(event):
            await asyncio.sleep(0.01)
            received.append(event)

        bus.subscribe("email", slow)
        bus.publish_nowait("email", {"n": 1})
        bus.publish_nowait("email", {"n": 2})
        assert received == []

        await bus.flush()

        assert sorted(e["n"] for e in received) == [1, 2]

    @pytest.mark.asyncio
    async def test_cleanup(self, bus):
        received = []

        async def listener(event):
            received.append(event)

        bus.subscribe("email", listener)
        await bus.publish("email", {"n": 1})

        bus.cleanup("email")
        await bus.publish("email", {"n": 2})

        assert received == [{"n": 1}]
        assert bus.get_history("email") == [{"n": 2}]

    @pytest.mark.asyncio
    async def test_event_models_serialize_to_json_safe_dicts(self, bus):
        event = ValidationStartedEvent(target="email", sync_validators=2, async_validators=1)

        await bus.publish("email", event.model_dump())

        stored = bus.get_history("email")[0]
        assert stored["type"] == "validation_started"
        assert isinstance(stored["timestamp"], str)

    @pytest.mark.asyncio
    async def test_publish_nowait_from_another_thread(self, bus):
        received = []

        async def listener(event):
            received.append(event)

        bus.subscribe("email", listener)
        loop = asyncio.get_running_loop()

        await loop.run_in_executor(None, bus.publish_nowait, "email", {"n": 1}, loop)
        await bus.flush()

        assert received == [{"n": 1}]

    def test_publish_nowait_off_loop_without_loop_raises(self, bus):
        with pytest.raises(RuntimeError):
            bus.publish_nowait("email", {"n": 1})


class TestEventBusHistorySize:
    """Explicit history sizes, including zero."""

    @pytest.mark.asyncio
    async def test_zero_history_keeps_nothing(self):
        bus = EventBus(max_history=0)

        await bus.publish("email", {"n": 1})

        assert bus._max_history == 0
        assert bus.get_history("email") == []
