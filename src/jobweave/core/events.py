"""Event bus for resolution diagnostics.

The partitioner reports what it did (forced starters, finished
workflows) as frozen dataclass events instead of printing anything.
The CLI subscribes formatters; library callers subscribe their own
handlers or attach an EventRecorder.
"""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class EventBusProtocol(Protocol):
    """Interface shared by EventBus and NullEventBus (no inheritance)."""

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None: ...

    def emit(self, event: T) -> None: ...


class EventBus:
    """Synchronous event bus.

    Handlers run in subscription order, on the emitting thread, and
    their exceptions propagate to the emitter. Dispatch is by exact
    event type.

    Example:
        bus = EventBus()
        bus.subscribe(StarterForced, lambda e: print(f"forced {e.job_id}"))
        resolver = WorkflowResolver(event_bus=bus)
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Remove a handler.

        Raises:
            ValueError: If the handler was never subscribed to ``event_type``
        """
        self._subscribers.get(event_type, []).remove(handler)

    def emit(self, event: T) -> None:
        # Events nobody subscribed to are dropped
        for handler in list(self._subscribers.get(type(event), ())):
            handler(event)


class NullEventBus:
    """No-op event bus for library use where nobody listens.

    Does NOT inherit from EventBus: subscribing here is a no-op, and
    inheritance would hide that from someone expecting callbacks.
    """

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        pass

    def emit(self, event: T) -> None:
        pass


class EventRecorder:
    """Collects events of the given types in emission order.

    Example:
        bus = EventBus()
        recorder = EventRecorder(bus, StarterForced, ProgressForced)
        WorkflowResolver(event_bus=bus).resolve(jobs)
        if recorder.events:
            ...
    """

    def __init__(self, bus: EventBusProtocol, *event_types: type) -> None:
        self.events: list[Any] = []
        for event_type in event_types:
            bus.subscribe(event_type, self.events.append)

    def of_type(self, event_type: type[T]) -> list[T]:
        """Recorded events of exactly ``event_type``."""
        return [event for event in self.events if type(event) is event_type]
