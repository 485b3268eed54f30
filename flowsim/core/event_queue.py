"""Event base class and the future event list for discrete event simulation."""

import heapq
import itertools
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from .exceptions import InvalidOperationError

if TYPE_CHECKING:
    from .run_context import RunContext


class Event(ABC):
    """Single-use unit of action executed by the engine.

    Concrete events carry only the data their effect needs and call back
    into their owning component from ``execute``. The engine never looks
    at the concrete type.

    Attributes:
        owner: Component the event acts on, or None for free-standing events
        event_id: Insertion sequence number, assigned when scheduled
        execution_time: Absolute simulation time, assigned when scheduled
    """

    def __init__(self, owner: Any = None):
        self.owner = owner
        self.event_id: Optional[int] = None
        self.execution_time: Optional[float] = None

    @property
    def is_scheduled(self) -> bool:
        """Whether the event has already been placed on an event list."""
        return self.event_id is not None

    @abstractmethod
    def execute(self, context: "RunContext") -> None:
        """Apply the event's effect.

        Args:
            context: Read-only view of the running engine
        """

    def trace_details(self) -> Dict[str, Any]:
        """Extra key/value pairs recorded by tracers."""
        return {}

    def __repr__(self) -> str:
        owner_name = getattr(self.owner, "name", None)
        return (
            f"{self.__class__.__name__}(id={self.event_id}, "
            f"time={self.execution_time}, owner={owner_name})"
        )


class EventQueue:
    """Future event list ordered by ``(time, sequence)``.

    The sequence number is assigned on push in call order, so events
    scheduled for the same time come out first-in first-out.
    """

    def __init__(self):
        """Initialize empty event queue."""
        self._queue: List[Tuple[float, int, Event]] = []
        self._sequence = itertools.count(1)

    def push(self, event: Event, time: float) -> int:
        """Add event to the queue.

        Args:
            event: Event to add; must not have been scheduled before
            time: Absolute execution time

        Returns:
            Sequence number assigned to the event

        Raises:
            InvalidOperationError: If the event was already scheduled
        """
        if event.is_scheduled:
            raise InvalidOperationError(f"{event!r} has already been scheduled")
        sequence = next(self._sequence)
        event.event_id = sequence
        event.execution_time = time
        heapq.heappush(self._queue, (time, sequence, event))
        return sequence

    def pop(self) -> Event:
        """Remove and return the next event.

        Returns:
            Event with the smallest (time, sequence)

        Raises:
            IndexError: If queue is empty
        """
        if self.is_empty():
            raise IndexError("Cannot pop from empty event queue")
        return heapq.heappop(self._queue)[2]

    def peek(self) -> Optional[Event]:
        """Return the next event without removing it.

        Returns:
            Next event, or None if queue is empty
        """
        return self._queue[0][2] if self._queue else None

    def peek_time(self) -> Optional[float]:
        """Return the execution time of the next event, or None if empty."""
        return self._queue[0][0] if self._queue else None

    def is_empty(self) -> bool:
        """Check if queue is empty."""
        return len(self._queue) == 0

    def size(self) -> int:
        """Get number of events in queue."""
        return len(self._queue)

    def clear(self) -> None:
        """Remove all events from queue."""
        self._queue.clear()

    def __len__(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"EventQueue(size={len(self._queue)}, next={self.peek()})"
