"""Statistics collected from simulation components."""

from .time_based_metric import HistogramBin, TimeBasedMetric
from .server_observer import ServerObserver
from .tracer import MemoryTracer, SimulationTracer, TracePoint, TraceRecord

__all__ = [
    "HistogramBin",
    "TimeBasedMetric",
    "ServerObserver",
    "MemoryTracer",
    "SimulationTracer",
    "TracePoint",
    "TraceRecord",
]
