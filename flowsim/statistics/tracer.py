"""Tracing of event scheduling and execution."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import pandas as pd
from dataclasses_json import DataClassJsonMixin


class TracePoint(Enum):
    """Points in an event's life at which a trace record is emitted."""
    SCHEDULED = "scheduled"
    EXECUTING = "executing"
    COMPLETED = "completed"


@dataclass
class TraceRecord(DataClassJsonMixin):
    """One tracing observation.

    Attributes:
        point: Which stage of the event's life was observed
        clock_time: Engine clock when the record was made
        scheduled_time: Execution time the event was scheduled for
        event_id: Sequence number of the event
        event_type: Class name of the event
        owner_name: Name of the owning component, if any
        details: Event-specific key/value pairs
    """
    point: TracePoint
    clock_time: float
    scheduled_time: Optional[float]
    event_id: Optional[int]
    event_type: str
    owner_name: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


class SimulationTracer(ABC):
    """Sink for trace records emitted by the engine."""

    @abstractmethod
    def trace(self, record: TraceRecord) -> None:
        """Consume one trace record."""


class MemoryTracer(SimulationTracer):
    """Tracer that keeps every record in memory."""

    def __init__(self):
        self._records: List[TraceRecord] = []

    @property
    def records(self) -> List[TraceRecord]:
        """Records in emission order."""
        return list(self._records)

    def trace(self, record: TraceRecord) -> None:
        self._records.append(record)

    def clear(self) -> None:
        """Drop all recorded entries."""
        self._records.clear()

    def to_dataframe(self) -> pd.DataFrame:
        """Return the records as a DataFrame, one row per record."""
        rows = [
            {
                'point': record.point.value,
                'clock_time': record.clock_time,
                'scheduled_time': record.scheduled_time,
                'event_id': record.event_id,
                'event_type': record.event_type,
                'owner_name': record.owner_name,
                **record.details,
            }
            for record in self._records
        ]
        columns = ['point', 'clock_time', 'scheduled_time', 'event_id', 'event_type', 'owner_name']
        if not rows:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame(rows)

    def __len__(self) -> int:
        return len(self._records)
