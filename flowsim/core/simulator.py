"""Simulation engine driving the discrete event loop."""

import math
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .event_queue import Event, EventQueue
from .exceptions import (
    InvalidOperationError,
    OutOfRangeError,
    SimulationRunError,
    require,
)
from .result import SimulationResult
from .run_context import RunContext, Scheduler
from .run_strategy import RunStrategy
from ..statistics.tracer import SimulationTracer, TracePoint, TraceRecord
from ..utils.logger import setup_logger

if TYPE_CHECKING:
    from ..modeling.base import SimulationModel

STOP_BY_STRATEGY = "strategy"
STOP_EXHAUSTED = "exhausted"


class EngineState(Enum):
    """Lifecycle of a simulation engine."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class SimulationProfile:
    """Everything needed to run one simulation.

    Attributes:
        model: Root model; initialized and warmed up by the engine
        run_strategy: Stop condition and warm-up threshold
        name: Profile name, defaults to the model name
        run_id: Unique run identifier, defaults to a random UUID
        tracer: Optional sink for scheduling/execution trace records
    """
    model: "SimulationModel"
    run_strategy: RunStrategy
    name: Optional[str] = None
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    tracer: Optional[SimulationTracer] = None

    def __post_init__(self):
        require(self.model, "model")
        require(self.run_strategy, "run_strategy")
        if self.name is None:
            self.name = self.model.name


class _EngineRunContext(RunContext):
    """Read-only view over a running engine."""

    def __init__(self, engine: "SimulationEngine"):
        self._engine = engine

    @property
    def clock_time(self) -> float:
        return self._engine.clock_time

    @property
    def executed_event_count(self) -> int:
        return self._engine.executed_event_count

    @property
    def scheduler(self) -> Scheduler:
        return self._engine


class SimulationEngine(Scheduler):
    """Discrete event simulation engine.

    The engine owns the clock and the future event list. Each loop
    iteration checks the run strategy, pops the earliest event, advances
    the clock to it, applies the warm-up transition once when the
    threshold is reached, then executes the event.

    An engine runs exactly once; build a new profile and engine for every
    replication.
    """

    def __init__(self, profile: SimulationProfile):
        """Initialize engine.

        Args:
            profile: Model, run strategy and tracing options
        """
        self.profile = require(profile, "profile")
        self.model = profile.model
        self.run_strategy = profile.run_strategy
        self.tracer = profile.tracer
        self.logger = setup_logger(self.__class__.__name__)

        self._clock_time = 0.0
        self._executed_event_count = 0
        self._event_queue = EventQueue()
        self._state = EngineState.NOT_STARTED
        self._warmup_applied = False
        self._context = _EngineRunContext(self)
        self._current_event: Optional[Event] = None

    @property
    def clock_time(self) -> float:
        """Current simulation time."""
        return self._clock_time

    @property
    def executed_event_count(self) -> int:
        """Number of events executed so far."""
        return self._executed_event_count

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def warmup_applied(self) -> bool:
        return self._warmup_applied

    @property
    def context(self) -> RunContext:
        """Read-only run context handed to models and events."""
        return self._context

    @property
    def has_future_events(self) -> bool:
        return not self._event_queue.is_empty()

    @property
    def head_event_time(self) -> Optional[float]:
        """Execution time of the next pending event, or None."""
        return self._event_queue.peek_time()

    def schedule(self, event: Event, time: float) -> None:
        """Schedule an event at an absolute simulation time.

        Args:
            event: Event to execute
            time: Absolute execution time

        Raises:
            MissingArgumentError: If event or time is None
            OutOfRangeError: If time is NaN or earlier than the clock
            InvalidOperationError: If the event was already scheduled
        """
        require(event, "event")
        require(time, "time")
        time = float(time)
        if math.isnan(time) or time < self._clock_time:
            raise OutOfRangeError(
                f"Cannot schedule {event.__class__.__name__} at {time}; "
                f"clock is already at {self._clock_time}"
            )
        self._event_queue.push(event, time)
        self._trace(TracePoint.SCHEDULED, event)

    def schedule_after(self, event: Event, delay: float) -> None:
        """Schedule an event ``delay`` time units after the current clock.

        Raises:
            OutOfRangeError: If delay is negative
        """
        if delay < 0:
            raise OutOfRangeError(f"Delay cannot be negative, got {delay}")
        self.schedule(event, self._clock_time + delay)

    def run(self) -> SimulationResult:
        """Run the simulation until the strategy stops it or events run out.

        Returns:
            Summary of the run

        Raises:
            InvalidOperationError: If the engine has already been run
            SimulationRunError: If model code raised during the run
        """
        if self._state is not EngineState.NOT_STARTED:
            raise InvalidOperationError(
                f"Engine for '{self.profile.name}' is {self._state.value}; an engine can only run once"
            )

        self._state = EngineState.RUNNING
        start_time = time.time()
        self.logger.info(
            f"Starting run '{self.profile.name}' ({self.profile.run_id}) "
            f"with {self.run_strategy.describe()}"
        )

        try:
            self.model.initialize(self._context)
            stop_reason = self._run_loop()
        except Exception as exc:
            self._state = EngineState.STOPPED
            self.logger.exception(
                f"Run '{self.profile.name}' failed at clock {self._clock_time}"
            )
            raise SimulationRunError(
                f"Simulation failed at clock {self._clock_time}: {exc}",
                clock_time=self._clock_time,
                event=self._current_event,
            ) from exc

        self._state = EngineState.STOPPED
        elapsed_ms = (time.time() - start_time) * 1000.0
        self.logger.info(
            f"Run '{self.profile.name}' stopped ({stop_reason}) at clock "
            f"{self._clock_time} after {self._executed_event_count} events in {elapsed_ms:.2f} ms"
        )

        return SimulationResult(
            run_id=self.profile.run_id,
            profile_name=self.profile.name,
            model_id=self.model.model_id,
            model_name=self.model.name,
            final_clock_time=self._clock_time,
            executed_event_count=self._executed_event_count,
            real_time_duration_ms=elapsed_ms,
            stop_reason=stop_reason,
            warmup_applied=self._warmup_applied,
            metrics=self.model.summary(),
        )

    def _run_loop(self) -> str:
        while True:
            if not self.run_strategy.should_continue(self._context):
                return STOP_BY_STRATEGY
            if self._event_queue.is_empty():
                return STOP_EXHAUSTED

            event = self._event_queue.pop()
            self._current_event = event
            self._clock_time = event.execution_time
            self._apply_warmup_if_due()

            self._trace(TracePoint.EXECUTING, event)
            event.execute(self._context)
            self._executed_event_count += 1
            self._trace(TracePoint.COMPLETED, event)

    def _apply_warmup_if_due(self) -> None:
        warmup_end_time = self.run_strategy.warmup_end_time
        if self._warmup_applied or warmup_end_time is None:
            return
        if self._clock_time >= warmup_end_time:
            self.model.warmed_up(self._clock_time)
            self._warmup_applied = True
            self.logger.info(f"Warm-up applied at clock {self._clock_time}")

    def _trace(self, point: TracePoint, event: Event) -> None:
        if self.tracer is None:
            return
        self.tracer.trace(TraceRecord(
            point=point,
            clock_time=self._clock_time,
            scheduled_time=event.execution_time,
            event_id=event.event_id,
            event_type=event.__class__.__name__,
            owner_name=getattr(event.owner, "name", None),
            details=event.trace_details(),
        ))

    def __repr__(self) -> str:
        return (
            f"SimulationEngine(name={self.profile.name!r}, state={self._state.value}, "
            f"clock={self._clock_time}, pending={len(self._event_queue)})"
        )
