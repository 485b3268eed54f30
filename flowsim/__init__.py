"""flowsim: discrete event simulation kernel with reusable flow components."""

from .core.simulator import EngineState, SimulationEngine, SimulationProfile
from .core.event_queue import Event, EventQueue
from .core.result import SimulationResult
from .core.run_strategy import (
    AbsoluteTimeRunStrategy,
    ConditionalRunStrategy,
    DurationRunStrategy,
    EventCountRunStrategy,
    build_run_strategy,
)
from .modeling import Generator, QueueingSystem, Server, SimQueue
from .utils.logger import setup_logger

__version__ = "0.1.0"
__all__ = [
    "EngineState",
    "SimulationEngine",
    "SimulationProfile",
    "Event",
    "EventQueue",
    "SimulationResult",
    "AbsoluteTimeRunStrategy",
    "ConditionalRunStrategy",
    "DurationRunStrategy",
    "EventCountRunStrategy",
    "build_run_strategy",
    "Generator",
    "QueueingSystem",
    "Server",
    "SimQueue",
    "setup_logger",
]
