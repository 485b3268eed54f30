"""Run strategies deciding when a simulation stops and when warm-up ends."""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from .exceptions import OutOfRangeError, require
from .run_context import RunContext


class RunStrategy(ABC):
    """Stop condition plus an optional warm-up threshold.

    Attributes:
        warmup_end_time: Simulation time at which statistics are reset,
            or None for no warm-up
    """

    warmup_end_time: Optional[float] = None

    @abstractmethod
    def should_continue(self, context: RunContext) -> bool:
        """Return True while the engine should keep popping events."""

    def describe(self) -> str:
        """Short human-readable description used in log messages."""
        return self.__class__.__name__


def _check_warmup(warmup_end_time: Optional[float], upper: Optional[float] = None) -> Optional[float]:
    if warmup_end_time is None:
        return None
    if warmup_end_time < 0:
        raise OutOfRangeError(f"Warm-up end time cannot be negative, got {warmup_end_time}")
    if upper is not None and warmup_end_time >= upper:
        raise OutOfRangeError(
            f"Warm-up end time ({warmup_end_time}) must be less than {upper}"
        )
    return float(warmup_end_time)


class DurationRunStrategy(RunStrategy):
    """Run for a fixed amount of simulated time measured from zero."""

    def __init__(self, run_duration: float, warmup_duration: Optional[float] = None):
        """Initialize strategy.

        Args:
            run_duration: Total simulated time, must be positive
            warmup_duration: Optional warm-up period, in [0, run_duration)

        Raises:
            OutOfRangeError: If either value is out of range
        """
        if run_duration <= 0:
            raise OutOfRangeError(f"Run duration must be positive, got {run_duration}")
        self.run_duration = float(run_duration)
        self.warmup_end_time = _check_warmup(warmup_duration, self.run_duration)

    def should_continue(self, context: RunContext) -> bool:
        return context.clock_time < self.run_duration

    def describe(self) -> str:
        return f"duration={self.run_duration}, warmup={self.warmup_end_time}"


class AbsoluteTimeRunStrategy(RunStrategy):
    """Run until the clock reaches an absolute stop time."""

    def __init__(self, stop_time: float, warmup_end_time: Optional[float] = None):
        if stop_time <= 0:
            raise OutOfRangeError(f"Stop time must be positive, got {stop_time}")
        self.stop_time = float(stop_time)
        self.warmup_end_time = _check_warmup(warmup_end_time, self.stop_time)

    def should_continue(self, context: RunContext) -> bool:
        return context.clock_time < self.stop_time

    def describe(self) -> str:
        return f"stop_time={self.stop_time}, warmup={self.warmup_end_time}"


class EventCountRunStrategy(RunStrategy):
    """Run until a fixed number of events has been executed."""

    def __init__(self, max_event_count: int, warmup_end_time: Optional[float] = None):
        """Initialize strategy.

        Args:
            max_event_count: Number of events to execute, must be positive
            warmup_end_time: Optional non-negative warm-up end time

        Raises:
            OutOfRangeError: If either value is out of range
        """
        if max_event_count <= 0:
            raise OutOfRangeError(f"Maximum event count must be positive, got {max_event_count}")
        self.max_event_count = int(max_event_count)
        self.warmup_end_time = _check_warmup(warmup_end_time)

    def should_continue(self, context: RunContext) -> bool:
        return context.executed_event_count < self.max_event_count

    def describe(self) -> str:
        return f"max_events={self.max_event_count}, warmup={self.warmup_end_time}"


class ConditionalRunStrategy(RunStrategy):
    """Run while a user-supplied predicate over the run context holds.

    Example:
        >>> strategy = ConditionalRunStrategy(lambda ctx: queue.occupancy < 100)
    """

    def __init__(
        self,
        continue_condition: Callable[[RunContext], bool],
        warmup_end_time: Optional[float] = None,
    ):
        self.continue_condition = require(continue_condition, "continue_condition")
        self.warmup_end_time = _check_warmup(warmup_end_time)

    def should_continue(self, context: RunContext) -> bool:
        return bool(self.continue_condition(context))

    def describe(self) -> str:
        name = getattr(self.continue_condition, "__name__", "predicate")
        return f"condition={name}, warmup={self.warmup_end_time}"


def build_run_strategy(config: Dict) -> RunStrategy:
    """Create a run strategy from a ``run_strategy`` config section.

    Args:
        config: Dict with a ``type`` key (duration, absolute_time or
            event_count) and the matching parameters

    Returns:
        Configured run strategy

    Raises:
        ValueError: If the type is unknown or a required key is missing
    """
    strategy_type = config.get('type', 'duration')

    if strategy_type == 'duration':
        if 'run_duration' not in config:
            raise ValueError("Duration strategy requires 'run_duration'")
        return DurationRunStrategy(config['run_duration'], config.get('warmup_duration'))
    elif strategy_type == 'absolute_time':
        if 'stop_time' not in config:
            raise ValueError("Absolute time strategy requires 'stop_time'")
        return AbsoluteTimeRunStrategy(config['stop_time'], config.get('warmup_end_time'))
    elif strategy_type == 'event_count':
        if 'max_events' not in config:
            raise ValueError("Event count strategy requires 'max_events'")
        return EventCountRunStrategy(config['max_events'], config.get('warmup_end_time'))
    else:
        raise ValueError(f"Unknown run strategy type: {strategy_type}")
