"""First-in first-out buffer with optional capacity limit."""

import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, Generic, List, TypeVar, Union

from ..core.exceptions import OutOfRangeError, require
from ..core.run_context import RunContext
from ..statistics.time_based_metric import TimeBasedMetric
from ..utils.logger import setup_logger
from .base import NotificationHook, SimulationModel
from .events import DequeueEvent, EnqueueEvent, UpdateToDequeueEvent

T = TypeVar("T")


@dataclass
class QueueConfig:
    """Static configuration of a queue.

    Attributes:
        capacity: Maximum number of waiting loads; ``math.inf`` for unbounded
        record_history: Keep the full occupancy history in the metric
    """
    capacity: Union[int, float] = math.inf
    record_history: bool = False

    def __post_init__(self):
        if self.capacity != math.inf:
            if isinstance(self.capacity, float) and not self.capacity.is_integer():
                raise OutOfRangeError(f"Queue capacity must be a whole number, got {self.capacity}")
            if self.capacity < 1:
                raise OutOfRangeError(f"Queue capacity must be at least 1, got {self.capacity}")
            self.capacity = int(self.capacity)


class SimQueue(SimulationModel, Generic[T]):
    """Bounded or unbounded FIFO queue driven by events.

    Public methods only schedule events; the state changes happen when
    those events execute, so they interleave correctly with everything
    else scheduled for the same time.

    Notifications:
        load_enqueued(load, time)
        load_dequeued(load, time)
        load_balked(load, time): the queue was full
        state_changed(time): after every enqueue, dequeue or permission change
    """

    def __init__(self, config: QueueConfig, name: str, model_id: int = 0):
        """Initialize queue.

        Args:
            config: Capacity and metric options
            name: Instance name
            model_id: Identifier from the model's IdSource
        """
        super().__init__(name, model_id)
        self.config = require(config, "config")
        self.capacity = config.capacity
        self.logger = setup_logger(self.__class__.__name__)

        self._waiting_items: Deque[T] = deque()
        self._to_dequeue = True
        self.occupancy_metric = TimeBasedMetric(enable_history=config.record_history)

        self.load_enqueued = NotificationHook("load_enqueued")
        self.load_dequeued = NotificationHook("load_dequeued")
        self.load_balked = NotificationHook("load_balked")
        self.state_changed = NotificationHook("state_changed")

        self.logger.info(f"Queue '{name}' created with capacity {self.capacity}")

    @property
    def occupancy(self) -> int:
        return len(self._waiting_items)

    @property
    def vacancy(self) -> Union[int, float]:
        """Free places; ``math.inf`` for an unbounded queue."""
        return self.capacity - self.occupancy

    @property
    def is_full(self) -> bool:
        return self.occupancy >= self.capacity

    @property
    def to_dequeue(self) -> bool:
        """Whether dequeue events are allowed to remove loads."""
        return self._to_dequeue

    @property
    def waiting_items(self) -> List[T]:
        """Snapshot of waiting loads, head first."""
        return list(self._waiting_items)

    def initialize(self, context: RunContext) -> None:
        require(context, "context")
        self.occupancy_metric.observe_count(0, context.clock_time)

    def try_schedule_enqueue(self, load: T, context: RunContext) -> bool:
        """Schedule ``load`` to join the tail at the current clock.

        Args:
            load: Load to enqueue
            context: Run context

        Returns:
            True if an enqueue was scheduled, False if the load balked

        Raises:
            MissingArgumentError: If load or context is None
        """
        require(load, "load")
        require(context, "context")

        if self.is_full:
            self.logger.debug(f"Queue '{self.name}' full at {context.clock_time}; load balked")
            self.load_balked.emit(load, context.clock_time)
            return False

        context.scheduler.schedule(EnqueueEvent(self, load), context.clock_time)
        return True

    def trigger_dequeue_attempt(self, context: RunContext) -> None:
        """Schedule a dequeue at the current clock if one could succeed now."""
        require(context, "context")
        if self._to_dequeue and self.occupancy > 0:
            context.scheduler.schedule(DequeueEvent(self), context.clock_time)

    def schedule_update_to_dequeue(self, to_dequeue: bool, context: RunContext) -> None:
        """Schedule a change of the dequeue permission at the current clock."""
        require(to_dequeue, "to_dequeue")
        require(context, "context")
        context.scheduler.schedule(UpdateToDequeueEvent(self, to_dequeue), context.clock_time)

    def warmed_up(self, time: float) -> None:
        """Restart occupancy statistics at ``time``; waiting loads stay."""
        self.occupancy_metric.warmed_up(time, self.occupancy)

    def _handle_enqueue(self, load: T, time: float) -> None:
        # Another enqueue for the same instant may have filled the queue.
        if self.is_full:
            self.logger.warning(
                f"Queue '{self.name}' full when enqueue executed at {time}; load dropped"
            )
            self.load_balked.emit(load, time)
            return

        self._waiting_items.append(load)
        self.occupancy_metric.observe_count(self.occupancy, time)
        self.logger.debug(f"Queue '{self.name}' enqueued at {time}, occupancy {self.occupancy}")

        self.load_enqueued.emit(load, time)
        self.state_changed.emit(time)

    def _handle_dequeue(self, time: float) -> None:
        if not self._to_dequeue or not self._waiting_items:
            return

        load = self._waiting_items.popleft()
        self.occupancy_metric.observe_count(self.occupancy, time)
        self.logger.debug(f"Queue '{self.name}' dequeued at {time}, occupancy {self.occupancy}")

        self.load_dequeued.emit(load, time)
        self.state_changed.emit(time)

    def _handle_update_to_dequeue(self, to_dequeue: bool, time: float) -> None:
        if self._to_dequeue == to_dequeue:
            return
        self._to_dequeue = to_dequeue
        self.state_changed.emit(time)

    def __repr__(self) -> str:
        return (
            f"SimQueue(name={self.name!r}, occupancy={self.occupancy}, "
            f"capacity={self.capacity}, to_dequeue={self._to_dequeue})"
        )
