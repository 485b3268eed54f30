"""Core simulation components."""

from .event_queue import Event, EventQueue
from .exceptions import (
    InvalidOperationError,
    MissingArgumentError,
    OutOfRangeError,
    SimulationError,
    SimulationRunError,
)
from .result import SimulationResult
from .run_context import RunContext, Scheduler
from .run_strategy import (
    AbsoluteTimeRunStrategy,
    ConditionalRunStrategy,
    DurationRunStrategy,
    EventCountRunStrategy,
    RunStrategy,
    build_run_strategy,
)
from .simulator import EngineState, SimulationEngine, SimulationProfile

__all__ = [
    "Event",
    "EventQueue",
    "SimulationError",
    "MissingArgumentError",
    "OutOfRangeError",
    "InvalidOperationError",
    "SimulationRunError",
    "SimulationResult",
    "RunContext",
    "Scheduler",
    "RunStrategy",
    "DurationRunStrategy",
    "AbsoluteTimeRunStrategy",
    "EventCountRunStrategy",
    "ConditionalRunStrategy",
    "build_run_strategy",
    "EngineState",
    "SimulationEngine",
    "SimulationProfile",
]
