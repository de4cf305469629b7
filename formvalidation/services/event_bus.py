"""Event bus: in-memory pub/sub announcing validation lifecycle events per target."""

import asyncio
import concurrent.futures
import threading
from collections import defaultdict
from typing import Awaitable, Callable, Dict, Optional, Set

import structlog

from formvalidation.config import get_settings

logger = structlog.get_logger()

# Type alias for event listeners
EventListener = Callable[[dict], Awaitable[None]]

ALL_TARGETS = "*"


class EventBus:
    """Routes validation events to listeners subscribed to a target name.

    A target can have multiple listeners (several widgets bound to the same
    field). Listeners subscribed with subscribe_all receive every target's
    events. Delivery is fire-and-forget: a listener that raises is dropped.
    """

    def __init__(self, max_history: Optional[int] = None):
        self._listeners: Dict[str, Set[EventListener]] = defaultdict(set)
        self._event_history: Dict[str, list] = defaultdict(list)
        self._max_history = get_settings().EVENT_HISTORY_SIZE if max_history is None else max_history
        self._pending: Set[asyncio.Task] = set()
        self._handoffs: Set[concurrent.futures.Future] = set()
        self._handoff_lock = threading.Lock()

    def subscribe(self, target: str, listener: EventListener) -> None:
        """Subscribe a listener to events for a target."""
        self._listeners[target].add(listener)
        logger.debug("event_bus_subscribe", target=target, total_listeners=len(self._listeners[target]))

    def unsubscribe(self, target: str, listener: EventListener) -> None:
        """Unsubscribe a listener from a target."""
        listeners = self._listeners.get(target)
        if listeners is None:
            return
        listeners.discard(listener)
        if not listeners:
            del self._listeners[target]

    def subscribe_all(self, listener: EventListener) -> None:
        """Subscribe a listener to events for every target."""
        self.subscribe(ALL_TARGETS, listener)

    def unsubscribe_all(self, listener: EventListener) -> None:
        self.unsubscribe(ALL_TARGETS, listener)

    async def publish(self, target: str, event: dict) -> None:
        """Publish an event to the target's listeners and wildcard listeners."""
        history = self._event_history[target]
        history.append(event)
        if len(history) > self._max_history:
            self._event_history[target] = history[len(history) - self._max_history:]

        dead_listeners = []
        for key in (target, ALL_TARGETS):
            for listener in list(self._listeners.get(key, ())):
                try:
                    await listener(event)
                except Exception as e:
                    logger.warning("event_listener_failed", target=target, error=str(e))
                    dead_listeners.append((key, listener))

        for key, dead in dead_listeners:
            self.unsubscribe(key, dead)

    def publish_nowait(
        self,
        target: str,
        event: dict,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        """Schedule a publish from synchronous code.

        Without a loop the caller must be on the running event loop. With a
        loop, the call may come from any thread (e.g. a run_in_executor
        worker). Cross-thread publishes go through run_coroutine_threadsafe
        and are tracked so flush() waits for them too.
        """
        if loop is None:
            loop = asyncio.get_running_loop()
        try:
            on_loop = asyncio.get_running_loop() is loop
        except RuntimeError:
            on_loop = False

        if on_loop:
            task = loop.create_task(self.publish(target, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        else:
            future = asyncio.run_coroutine_threadsafe(self.publish(target, event), loop)
            with self._handoff_lock:
                self._handoffs.add(future)
            future.add_done_callback(self._discard_handoff)

    def _discard_handoff(self, future: concurrent.futures.Future) -> None:
        with self._handoff_lock:
            self._handoffs.discard(future)

    async def flush(self) -> None:
        """Wait until every publish scheduled with publish_nowait has been delivered."""
        while True:
            with self._handoff_lock:
                handoffs = [asyncio.wrap_future(f) for f in self._handoffs]
            pending = list(self._pending) + handoffs
            if not pending:
                return
            await asyncio.gather(*pending)

    def get_history(self, target: str) -> list[dict]:
        """Get event history for a target."""
        return list(self._event_history.get(target, []))

    def cleanup(self, target: str) -> None:
        """Drop listeners and history for a target."""
        self._listeners.pop(target, None)
        self._event_history.pop(target, None)
