import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List

logger = logging.getLogger(__name__)

UPLOAD_SUCCESS = "upload_success"
UPLOAD_FAILED = "upload_failed"
BATCH_COMPLETE = "batch_complete"
JOB_COMPLETED = "job_completed"
JOB_FAILED = "job_failed"


@dataclass
class Event:
    """One emitted occurrence, as drained from an EventQueue."""
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


class EventEmitter:
    """Simple event emitter for upload events. One instance per component."""

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {}
        self._lock = asyncio.Lock()

    def on(self, event_name: str, callback: Callable):
        """Subscribe to an event."""
        if event_name not in self._listeners:
            self._listeners[event_name] = []
        if callback not in self._listeners[event_name]:
            self._listeners[event_name].append(callback)

    def off(self, event_name: str, callback: Callable):
        """Unsubscribe from an event."""
        if event_name in self._listeners:
            if callback in self._listeners[event_name]:
                self._listeners[event_name].remove(callback)

    def listener_count(self, event_name: str) -> int:
        return len(self._listeners.get(event_name, []))

    async def emit(self, event_name: str, **payload):
        """Emit an event to all listeners. Listener errors are logged, not raised."""
        if event_name not in self._listeners:
            return

        async with self._lock:
            for callback in self._listeners[event_name][:]:  # Copy list to avoid modification during iteration
                try:
                    if asyncio.iscoroutinefunction(callback):
                        await callback(**payload)
                    else:
                        callback(**payload)
                except Exception as e:
                    logger.error(f"Error in event listener for {event_name}: {e}")


class EventQueue:
    """
    Collects events from one or more emitters into an asyncio.Queue.

    Usage:
        events = EventQueue()
        events.attach(orchestrator.events, [UPLOAD_SUCCESS, UPLOAD_FAILED])
        await orchestrator.run(clips)
        for event in events.drain():
            print(event.name, event.payload)
    """

    def __init__(self):
        self._queue: "asyncio.Queue[Event]" = asyncio.Queue()

    def attach(self, emitter: EventEmitter, event_names: Iterable[str]) -> None:
        for name in event_names:
            emitter.on(name, self._listener_for(name))

    def _listener_for(self, name: str) -> Callable:
        def listener(**payload):
            self._queue.put_nowait(Event(name, payload))
        return listener

    async def get(self) -> Event:
        return await self._queue.get()

    def drain(self) -> List[Event]:
        """Return every queued event without waiting."""
        events = []
        while not self._queue.empty():
            events.append(self._queue.get_nowait())
        return events
