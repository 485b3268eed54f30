"""Utilization and throughput statistics for a server."""

from typing import TYPE_CHECKING, Any

from ..core.exceptions import require
from .time_based_metric import TimeBasedMetric

if TYPE_CHECKING:
    from ..modeling.server import Server


class ServerObserver:
    """Follows a server's notifications to measure busy units and completions."""

    def __init__(self, server: "Server"):
        """Initialize observer and subscribe to the server.

        Args:
            server: Server to observe
        """
        self.server = require(server, "server")
        self.busy_units_metric = TimeBasedMetric()
        self._loads_completed = 0

        server.state_changed.subscribe(self._on_state_changed)
        server.load_departed.subscribe(self._on_load_departed)

    @property
    def loads_completed(self) -> int:
        return self._loads_completed

    @property
    def utilization(self) -> float:
        """Time-weighted share of busy service units."""
        if self.server.capacity <= 0:
            return 0.0
        return self.busy_units_metric.average_count / self.server.capacity

    def warmed_up(self, time: float) -> None:
        """Restart statistics at ``time`` from the server's current load."""
        self.busy_units_metric.warmed_up(time, self.server.number_in_service)
        self._loads_completed = 0

    def _on_state_changed(self, time: float) -> None:
        self.busy_units_metric.observe_count(self.server.number_in_service, time)

    def _on_load_departed(self, load: Any, time: float) -> None:
        self._loads_completed += 1
