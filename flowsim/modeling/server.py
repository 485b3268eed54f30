"""Service point processing up to ``capacity`` loads at once."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Set, TypeVar

import numpy as np

from ..core.exceptions import InvalidOperationError, OutOfRangeError, require
from ..core.run_context import RunContext
from ..utils.logger import setup_logger
from .base import NotificationHook, SimulationModel
from .events import ServiceCompleteEvent

T = TypeVar("T")


@dataclass
class ServerConfig:
    """Static configuration of a server.

    Attributes:
        service_time: Samples the service duration of a load from the
            server's random stream
        capacity: Number of loads that can be served at the same time
    """
    service_time: Callable[[Any, np.random.Generator], float]
    capacity: int = 1

    def __post_init__(self):
        require(self.service_time, "service_time")
        if self.capacity < 1:
            raise OutOfRangeError(f"Server capacity must be at least 1, got {self.capacity}")


class Server(SimulationModel, Generic[T]):
    """Multi-slot server.

    Notifications:
        state_changed(time): after a service starts or completes
        load_departed(load, time): after a load finished service
    """

    def __init__(self, config: ServerConfig, seed: int, name: str, model_id: int = 0):
        """Initialize server.

        Args:
            config: Service time sampler and capacity
            seed: Seed of the server's private random stream
            name: Instance name
            model_id: Identifier from the model's IdSource
        """
        super().__init__(name, model_id)
        self.config = require(config, "config")
        self.capacity = config.capacity
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.logger = setup_logger(self.__class__.__name__)

        self._loads_in_service: Set[T] = set()
        self._service_start_times: Dict[T, float] = {}
        self._is_initialized = False

        self.state_changed = NotificationHook("state_changed")
        self.load_departed = NotificationHook("load_departed")

        self.logger.info(f"Server '{name}' created with capacity {self.capacity}")

    @property
    def loads_in_service(self) -> List[T]:
        return list(self._loads_in_service)

    @property
    def service_start_times(self) -> Dict[T, float]:
        return dict(self._service_start_times)

    @property
    def number_in_service(self) -> int:
        return len(self._loads_in_service)

    @property
    def vacancy(self) -> int:
        return self.capacity - self.number_in_service

    @property
    def is_busy(self) -> bool:
        """True when every service slot is taken."""
        return self.number_in_service >= self.capacity

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def initialize(self, context: RunContext) -> None:
        require(context, "context")
        self._is_initialized = True

    def try_start_service(self, load: T, context: RunContext) -> bool:
        """Start serving ``load`` now if a slot is free.

        Args:
            load: Load to serve
            context: Run context

        Returns:
            True if service started, False if the server is full

        Raises:
            MissingArgumentError: If load or context is None
            InvalidOperationError: If called before initialize, or if the
                load is already in service
            OutOfRangeError: If the sampled service time is negative
        """
        require(load, "load")
        require(context, "context")
        if not self._is_initialized:
            raise InvalidOperationError(f"Server '{self.name}' has not been initialized")
        if load in self._loads_in_service:
            raise InvalidOperationError(
                f"Server '{self.name}' cannot start {load!r}: load is already in service"
            )

        if self.is_busy:
            return False

        now = context.clock_time
        service_time = float(self.config.service_time(load, self.rng))
        if service_time < 0:
            raise OutOfRangeError(
                f"Server '{self.name}' sampled a negative service time ({service_time})"
            )

        self._loads_in_service.add(load)
        self._service_start_times[load] = now
        self.state_changed.emit(now)

        context.scheduler.schedule(ServiceCompleteEvent(self, load), now + service_time)
        self.logger.debug(f"Server '{self.name}' started service at {now} for {service_time}")
        return True

    def warmed_up(self, time: float) -> None:
        """Treat every load currently in service as started at ``time``."""
        for load in self._service_start_times:
            self._service_start_times[load] = time

    def _handle_service_completion(self, load: T, time: float) -> None:
        if load not in self._loads_in_service:
            raise InvalidOperationError(
                f"Server '{self.name}' cannot complete {load!r}: load is not in service"
            )

        self._loads_in_service.remove(load)
        self._service_start_times.pop(load, None)
        self.logger.debug(f"Server '{self.name}' completed service at {time}")

        self.load_departed.emit(load, time)
        self.state_changed.emit(time)

    def __repr__(self) -> str:
        return (
            f"Server(name={self.name!r}, in_service={self.number_in_service}, "
            f"capacity={self.capacity})"
        )
