"""Exception types raised by the simulation kernel."""

from typing import Any, TypeVar

T = TypeVar("T")


class SimulationError(Exception):
    """Base class for every error raised by flowsim."""


class MissingArgumentError(SimulationError, ValueError):
    """A required reference (config, context, load, event) was None."""


class OutOfRangeError(SimulationError, ValueError):
    """A numeric argument is outside its allowed range."""


class InvalidOperationError(SimulationError, RuntimeError):
    """An operation was invoked in a state that does not allow it."""


class SimulationRunError(SimulationError):
    """An exception escaped model code while the engine was running.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, message: str, clock_time: float = 0.0, event: Any = None):
        super().__init__(message)
        self.clock_time = clock_time
        self.event = event


def require(value: T, name: str) -> T:
    """Return ``value`` unchanged, or raise if it is None.

    Args:
        value: Value to check
        name: Argument name used in the error message

    Returns:
        The value itself

    Raises:
        MissingArgumentError: If value is None
    """
    if value is None:
        raise MissingArgumentError(f"{name} must not be None")
    return value
