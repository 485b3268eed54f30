"""Capabilities the engine hands to models and events."""

from abc import ABC, abstractmethod

from .event_queue import Event


class Scheduler(ABC):
    """Narrow scheduling capability exposed to models."""

    @abstractmethod
    def schedule(self, event: Event, time: float) -> None:
        """Place an event on the future event list.

        Args:
            event: Event to execute later
            time: Absolute execution time, not earlier than the clock

        Raises:
            MissingArgumentError: If event is None
            OutOfRangeError: If time is earlier than the current clock
        """


class RunContext(ABC):
    """Read-only view of a running simulation."""

    @property
    @abstractmethod
    def clock_time(self) -> float:
        """Current simulation time."""

    @property
    @abstractmethod
    def executed_event_count(self) -> int:
        """Number of events executed so far."""

    @property
    @abstractmethod
    def scheduler(self) -> Scheduler:
        """Scheduler for placing follow-up events."""

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(clock_time={self.clock_time}, "
            f"executed_event_count={self.executed_event_count})"
        )
