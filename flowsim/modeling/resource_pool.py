"""Pool of interchangeable resources acquired and released immediately."""

from typing import Generic, Iterable, List, Optional, TypeVar

from ..core.exceptions import require
from ..core.run_context import RunContext
from ..statistics.time_based_metric import TimeBasedMetric
from ..utils.logger import setup_logger
from .base import NotificationHook, SimulationModel

R = TypeVar("R")


class ResourcePool(SimulationModel, Generic[R]):
    """Fixed set of resources handed out last-in first-out.

    Unlike the queue and server, acquire and release take effect at the
    call; they are meant to be called from inside other components'
    event handlers.

    Notifications:
        resource_acquired(resource, time)
        resource_released(resource, time)
        request_failed(time): no resource was idle
    """

    def __init__(self, resources: Iterable[R], name: str, model_id: int = 0):
        super().__init__(name, model_id)
        self._idle_resources: List[R] = list(require(resources, "resources"))
        self.total_capacity = len(self._idle_resources)
        self.logger = setup_logger(self.__class__.__name__)
        self.utilization_metric = TimeBasedMetric()

        self.resource_acquired = NotificationHook("resource_acquired")
        self.resource_released = NotificationHook("resource_released")
        self.request_failed = NotificationHook("request_failed")

        self.logger.info(f"ResourcePool '{name}' created with capacity {self.total_capacity}")

    @property
    def available_count(self) -> int:
        return len(self._idle_resources)

    @property
    def busy_count(self) -> int:
        return self.total_capacity - self.available_count

    def initialize(self, context: RunContext) -> None:
        require(context, "context")
        self.utilization_metric.observe_count(0, context.clock_time)

    def try_acquire(self, context: RunContext) -> Optional[R]:
        """Take an idle resource.

        Args:
            context: Run context

        Returns:
            The resource, or None when the pool is empty
        """
        require(context, "context")
        now = context.clock_time

        if not self._idle_resources:
            self.logger.warning(f"Failed to acquire resource from '{self.name}' at {now}; none available")
            self.request_failed.emit(now)
            return None

        resource = self._idle_resources.pop()
        self.utilization_metric.observe_count(self.busy_count, now)
        self.logger.debug(f"Resource acquired from '{self.name}' at {now}, available {self.available_count}")
        self.resource_acquired.emit(resource, now)
        return resource

    def release(self, resource: R, context: RunContext) -> None:
        """Return a resource to the pool.

        Releasing into a full pool, or releasing a resource that is already
        idle, is logged as an error and ignored.

        Raises:
            MissingArgumentError: If resource or context is None
        """
        require(resource, "resource")
        require(context, "context")
        now = context.clock_time

        if len(self._idle_resources) >= self.total_capacity:
            self.logger.error(f"Release into '{self.name}' ignored: pool is already full")
            return
        if resource in self._idle_resources:
            self.logger.error(f"Release of {resource!r} into '{self.name}' ignored: already idle")
            return

        self._idle_resources.append(resource)
        self.utilization_metric.observe_count(self.busy_count, now)
        self.logger.debug(f"Resource released to '{self.name}' at {now}, available {self.available_count}")
        self.resource_released.emit(resource, now)

    def warmed_up(self, time: float) -> None:
        self.utilization_metric.warmed_up(time, self.busy_count)
