"""Arrival generator producing loads at sampled inter-arrival times."""

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

import numpy as np

from ..core.exceptions import InvalidOperationError, OutOfRangeError, require
from ..core.run_context import RunContext
from ..utils.logger import setup_logger
from .base import NotificationHook, SimulationModel
from .events import GeneratorArriveEvent, GeneratorStartEvent, GeneratorStopEvent

T = TypeVar("T")


@dataclass
class GeneratorConfig(Generic[T]):
    """Static configuration of a generator.

    Attributes:
        inter_arrival_time: Samples the delay to the next arrival from
            the generator's random stream
        load_factory: Creates a new load from the generator's random stream
        is_skipping_first: If True the first arrival happens one
            inter-arrival time after start; otherwise at start
    """
    inter_arrival_time: Callable[[np.random.Generator], float]
    load_factory: Callable[[np.random.Generator], T]
    is_skipping_first: bool = True

    def __post_init__(self):
        require(self.inter_arrival_time, "inter_arrival_time")
        require(self.load_factory, "load_factory")


class Generator(SimulationModel, Generic[T]):
    """Produces loads while active.

    Start, arrival and stop are events; ``is_active`` is checked when an
    arrival executes, so stopping makes the already queued arrival a
    no-op instead of removing it.

    Notifications:
        load_generated(load, time): fired after each arrival has been
            counted and the next one scheduled
    """

    def __init__(self, config: GeneratorConfig[T], seed: int, name: str, model_id: int = 0):
        """Initialize generator.

        Args:
            config: Sampling functions and start behaviour
            seed: Seed of the generator's private random stream
            name: Instance name
            model_id: Identifier from the model's IdSource
        """
        super().__init__(name, model_id)
        self.config = require(config, "config")
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.logger = setup_logger(self.__class__.__name__)

        self._is_active = False
        self._start_time: Optional[float] = None
        self._loads_generated_count = 0
        self._is_initialized = False

        self.load_generated = NotificationHook("load_generated")

        self.logger.info(f"Generator '{name}' created (seed={seed})")

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def start_time(self) -> Optional[float]:
        """Time of the last start or warm-up, None before the first start."""
        return self._start_time

    @property
    def loads_generated_count(self) -> int:
        return self._loads_generated_count

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def initialize(self, context: RunContext) -> None:
        """Schedule the generator to start at the current clock."""
        require(context, "context")
        self._is_initialized = True
        context.scheduler.schedule(GeneratorStartEvent(self), context.clock_time)

    def schedule_start(self, context: RunContext) -> None:
        """Request a start at the current clock.

        Raises:
            MissingArgumentError: If context is None
            InvalidOperationError: If called before initialize
        """
        require(context, "context")
        self._require_initialized()
        context.scheduler.schedule(GeneratorStartEvent(self), context.clock_time)

    def schedule_stop(self, context: RunContext) -> None:
        """Request a stop at the current clock.

        Raises:
            MissingArgumentError: If context is None
            InvalidOperationError: If called before initialize
        """
        require(context, "context")
        self._require_initialized()
        context.scheduler.schedule(GeneratorStopEvent(self), context.clock_time)

    def warmed_up(self, time: float) -> None:
        """Restart counting at ``time``; the active flag is unchanged."""
        self._start_time = time
        self._loads_generated_count = 0

    def _require_initialized(self) -> None:
        if not self._is_initialized:
            raise InvalidOperationError(f"Generator '{self.name}' has not been initialized")

    def _sample_inter_arrival(self) -> float:
        delay = float(self.config.inter_arrival_time(self.rng))
        if delay < 0:
            raise OutOfRangeError(
                f"Generator '{self.name}' sampled a negative inter-arrival time ({delay})"
            )
        return delay

    def _handle_start(self, context: RunContext) -> None:
        if self._is_active:
            return

        now = context.clock_time
        self._is_active = True
        self._start_time = now
        self._loads_generated_count = 0

        first_arrival = now
        if self.config.is_skipping_first:
            first_arrival = now + self._sample_inter_arrival()
        context.scheduler.schedule(GeneratorArriveEvent(self), first_arrival)
        self.logger.debug(f"Generator '{self.name}' started at {now}, first arrival at {first_arrival}")

    def _handle_arrive(self, context: RunContext) -> None:
        if not self._is_active:
            return

        now = context.clock_time
        load = self.config.load_factory(self.rng)
        self._loads_generated_count += 1
        context.scheduler.schedule(GeneratorArriveEvent(self), now + self._sample_inter_arrival())

        self.load_generated.emit(load, now)

    def _handle_stop(self, context: RunContext) -> None:
        if not self._is_active:
            return
        self._is_active = False
        self.logger.debug(f"Generator '{self.name}' stopped at {context.clock_time}")
