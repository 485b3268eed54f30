"""Base classes shared by every simulation model."""

import itertools
from typing import Any, Callable, Dict, List, Optional

from ..core.exceptions import require
from ..core.run_context import RunContext


class IdSource:
    """Hands out model identifiers.

    Pass one instance to every component of a model tree instead of
    relying on a process-wide counter, so separate runs and tests never
    share numbering state.
    """

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        """Return the next unused identifier."""
        return next(self._counter)


class NotificationHook:
    """Synchronous list of callbacks fired in subscription order.

    ``subscribe`` returns the callback so it can be used as a decorator::

        @generator.load_generated.subscribe
        def on_load(load, time):
            ...
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._callbacks: List[Callable[..., Any]] = []

    def subscribe(self, callback: Callable[..., Any]) -> Callable[..., Any]:
        self._callbacks.append(require(callback, "callback"))
        return callback

    def unsubscribe(self, callback: Callable[..., Any]) -> None:
        """Remove a callback; unknown callbacks are ignored."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def emit(self, *args: Any) -> None:
        """Call every subscriber with ``args``."""
        for callback in list(self._callbacks):
            callback(*args)

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"NotificationHook(name={self.name!r}, subscribers={len(self._callbacks)})"


class SimulationModel:
    """Base class for components and composite models.

    ``initialize`` and ``warmed_up`` cascade to registered sub-components
    in registration order. Components override them and call ``super()``
    when they also hold children.

    Attributes:
        name: Human-readable instance name
        model_id: Identifier supplied by the caller
        metadata: Free-form annotations
    """

    def __init__(self, name: str, model_id: int = 0):
        if not name:
            raise ValueError("Model name must not be empty")
        self.name = name
        self.model_id = model_id
        self.metadata: Dict[str, Any] = {}
        self._components: List["SimulationModel"] = []

    @property
    def components(self) -> List["SimulationModel"]:
        return list(self._components)

    def add_component(self, component: "SimulationModel") -> "SimulationModel":
        """Register a sub-component and return it."""
        self._components.append(require(component, "component"))
        return component

    def initialize(self, context: RunContext) -> None:
        """Prepare for a run; components schedule their first events here.

        Args:
            context: Run context of the engine
        """
        require(context, "context")
        for component in self._components:
            component.initialize(context)

    def warmed_up(self, time: float) -> None:
        """Restart statistics at ``time`` without changing physical state."""
        for component in self._components:
            component.warmed_up(time)

    def summary(self) -> Dict[str, Any]:
        """Metrics reported in the run result; empty by default."""
        return {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, id={self.model_id})"


def find_component(model: SimulationModel, name: str) -> Optional[SimulationModel]:
    """Depth-first search of a model tree by component name."""
    if model.name == name:
        return model
    for component in model.components:
        found = find_component(component, name)
        if found is not None:
            return found
    return None
