"""Events scheduled by the built-in components.

There is one event class per component operation. Each carries only the
data its effect needs and forwards to the owner's internal ``_handle_*``
method, which is the only path that mutates component state.
"""

from typing import TYPE_CHECKING, Any, Dict

from ..core.event_queue import Event
from ..core.exceptions import require
from ..core.run_context import RunContext

if TYPE_CHECKING:
    from .generator import Generator
    from .queue import SimQueue
    from .server import Server


class GeneratorStartEvent(Event):
    """Activates a generator and schedules its first arrival."""

    def __init__(self, generator: "Generator"):
        super().__init__(require(generator, "generator"))

    def execute(self, context: RunContext) -> None:
        self.owner._handle_start(context)


class GeneratorArriveEvent(Event):
    """Produces one load and schedules the next arrival."""

    def __init__(self, generator: "Generator"):
        super().__init__(require(generator, "generator"))

    def execute(self, context: RunContext) -> None:
        self.owner._handle_arrive(context)


class GeneratorStopEvent(Event):
    """Deactivates a generator; pending arrivals become no-ops."""

    def __init__(self, generator: "Generator"):
        super().__init__(require(generator, "generator"))

    def execute(self, context: RunContext) -> None:
        self.owner._handle_stop(context)


class EnqueueEvent(Event):
    """Appends a load to the tail of a queue."""

    def __init__(self, queue: "SimQueue", load: Any):
        super().__init__(require(queue, "queue"))
        self.load = require(load, "load")

    def execute(self, context: RunContext) -> None:
        self.owner._handle_enqueue(self.load, context.clock_time)

    def trace_details(self) -> Dict[str, Any]:
        return {'load': repr(self.load)}


class DequeueEvent(Event):
    """Removes the head load from a queue."""

    def __init__(self, queue: "SimQueue"):
        super().__init__(require(queue, "queue"))

    def execute(self, context: RunContext) -> None:
        self.owner._handle_dequeue(context.clock_time)


class UpdateToDequeueEvent(Event):
    """Switches a queue's dequeue permission on or off."""

    def __init__(self, queue: "SimQueue", to_dequeue: bool):
        super().__init__(require(queue, "queue"))
        self.to_dequeue = bool(to_dequeue)

    def execute(self, context: RunContext) -> None:
        self.owner._handle_update_to_dequeue(self.to_dequeue, context.clock_time)

    def trace_details(self) -> Dict[str, Any]:
        return {'to_dequeue': self.to_dequeue}


class ServiceCompleteEvent(Event):
    """Ends service of one load on a server."""

    def __init__(self, server: "Server", load: Any):
        super().__init__(require(server, "server"))
        self.load = require(load, "load")

    def execute(self, context: RunContext) -> None:
        self.owner._handle_service_completion(self.load, context.clock_time)

    def trace_details(self) -> Dict[str, Any]:
        return {'load': repr(self.load)}
