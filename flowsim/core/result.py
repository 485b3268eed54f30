"""Summary of a finished simulation run."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from dataclasses_json import DataClassJsonMixin


@dataclass
class SimulationResult(DataClassJsonMixin):
    """Outcome of a single engine run.

    Attributes:
        run_id: Unique identifier of the run
        profile_name: Name of the simulation profile
        model_id: Identifier of the root model
        model_name: Name of the root model
        final_clock_time: Clock value when the loop stopped
        executed_event_count: Number of events executed
        real_time_duration_ms: Wall-clock time spent in ``run``
        stop_reason: ``strategy`` or ``exhausted``
        warmup_applied: Whether the warm-up transition happened
        metrics: Free-form model metrics added by the caller
    """
    run_id: str
    profile_name: str
    model_id: int
    model_name: str
    final_clock_time: float
    executed_event_count: int
    real_time_duration_ms: float
    stop_reason: str = "strategy"
    warmup_applied: bool = False
    metrics: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def csv_header() -> str:
        """Header line matching :meth:`to_csv_row`."""
        return ",".join(SimulationResult._csv_columns())

    def to_csv_row(self) -> str:
        """Render the scalar fields as one CSV line."""
        values = []
        for column in self._csv_columns():
            value = getattr(self, column)
            text = str(value)
            if "," in text or '"' in text:
                text = '"' + text.replace('"', '""') + '"'
            values.append(text)
        return ",".join(values)

    @staticmethod
    def _csv_columns() -> List[str]:
        return [
            "run_id", "profile_name", "model_id", "model_name",
            "final_clock_time", "executed_event_count",
            "real_time_duration_ms", "stop_reason", "warmup_applied",
        ]

    def __str__(self) -> str:
        return (
            f"Run '{self.profile_name}' ({self.run_id}): "
            f"{self.executed_event_count} events, clock={self.final_clock_time:.4f}, "
            f"stopped by {self.stop_reason}, {self.real_time_duration_ms:.2f} ms"
        )
