"""Shared test doubles for driving components without a full engine."""

from typing import List, Optional, Tuple, Type

from flowsim.core.event_queue import Event, EventQueue
from flowsim.core.exceptions import OutOfRangeError
from flowsim.core.run_context import RunContext, Scheduler


class RecordingScheduler(Scheduler):
    """Scheduler that records every call and feeds a real event queue."""

    def __init__(self, context: "StubRunContext"):
        self.context = context
        self.scheduled: List[Tuple[float, Event]] = []
        self.queue = EventQueue()

    def schedule(self, event: Event, time: float) -> None:
        if time < self.context.clock_time:
            raise OutOfRangeError(f"time {time} is before clock {self.context.clock_time}")
        self.scheduled.append((time, event))
        self.queue.push(event, time)


class StubRunContext(RunContext):
    """Run context with a settable clock and a step-by-step event loop."""

    def __init__(self, clock_time: float = 0.0):
        self._clock_time = clock_time
        self._executed_event_count = 0
        self._scheduler = RecordingScheduler(self)

    @property
    def clock_time(self) -> float:
        return self._clock_time

    @clock_time.setter
    def clock_time(self, value: float) -> None:
        self._clock_time = value

    @property
    def executed_event_count(self) -> int:
        return self._executed_event_count

    @property
    def scheduler(self) -> RecordingScheduler:
        return self._scheduler

    @property
    def scheduled(self) -> List[Tuple[float, Event]]:
        return self._scheduler.scheduled

    def scheduled_of(self, event_type: Type[Event]) -> List[Tuple[float, Event]]:
        """Recorded (time, event) pairs of one event class."""
        return [(t, e) for t, e in self._scheduler.scheduled if isinstance(e, event_type)]

    def step(self) -> Optional[Event]:
        """Execute the next pending event, or return None if there is none."""
        queue = self._scheduler.queue
        if queue.is_empty():
            return None
        event = queue.pop()
        self._clock_time = event.execution_time
        event.execute(self)
        self._executed_event_count += 1
        return event

    def run_until(self, time: float) -> None:
        """Execute pending events whose time is at most ``time``."""
        queue = self._scheduler.queue
        while not queue.is_empty() and queue.peek_time() <= time:
            self.step()


class RecordingEvent(Event):
    """Event appending a label to a shared log when executed."""

    def __init__(self, log: list, label: str, owner=None):
        super().__init__(owner)
        self.log = log
        self.label = label

    def execute(self, context: RunContext) -> None:
        self.log.append((self.label, context.clock_time, context.executed_event_count))
