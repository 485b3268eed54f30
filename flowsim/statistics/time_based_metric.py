"""Time-weighted statistics for counts that change over simulation time."""

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
import pandas as pd

from ..core.exceptions import InvalidOperationError, OutOfRangeError


@dataclass(frozen=True)
class HistogramBin:
    """Time spent within one count interval.

    Attributes:
        count_lower_bound: Inclusive lower bound of the interval
        total_time: Observed time with a count inside the interval
        probability: ``total_time`` divided by the active duration
        cumulative_probability: Probability of this and all lower bins
    """
    count_lower_bound: float
    total_time: float
    probability: float
    cumulative_probability: float


class TimeBasedMetric:
    """Tracks a count over time and derives time-weighted statistics.

    Each observation closes the interval spent at the previous count, so
    averages are weighted by how long each count was held.
    """

    def __init__(self, initial_time: float = 0.0, enable_history: bool = False):
        """Initialize metric.

        Args:
            initial_time: Start of the observation period
            enable_history: Keep every (time, count) observation

        Raises:
            OutOfRangeError: If initial_time is negative
        """
        if initial_time < 0:
            raise OutOfRangeError("Initial time cannot be negative")
        self._reset(initial_time, enable_history)

    def _reset(self, initial_time: float, enable_history: bool) -> None:
        self.initial_time = float(initial_time)
        self.current_time = float(initial_time)
        self.current_count = 0.0
        self.total_increment_observed = 0.0
        self.total_decrement_observed = 0.0
        self.total_active_duration = 0.0
        self.cumulative_count_time_product = 0.0
        self.is_history_enabled = enable_history
        self._time_per_count: Dict[int, float] = {}
        self._history: List[Tuple[float, float]] = []

    def observe_count(self, count: float, clock_time: float) -> None:
        """Record the count value at ``clock_time``.

        Args:
            count: Count value from now on
            clock_time: Observation time, not earlier than the last one

        Raises:
            OutOfRangeError: If clock_time goes backwards
        """
        if clock_time < self.current_time:
            raise OutOfRangeError(
                f"New clock time ({clock_time}) cannot be less than current time "
                f"({self.current_time})"
            )

        if count > self.current_count:
            self.total_increment_observed += count - self.current_count
        elif count < self.current_count:
            self.total_decrement_observed += self.current_count - count

        if clock_time > self.current_time:
            duration = clock_time - self.current_time
            self.total_active_duration += duration
            self.cumulative_count_time_product += duration * self.current_count
            key = int(round(self.current_count))
            self._time_per_count[key] = self._time_per_count.get(key, 0.0) + duration

        self.current_time = float(clock_time)
        self.current_count = float(count)

        if self.is_history_enabled:
            self._history.append((self.current_time, self.current_count))

    def observe_change(self, change: float, clock_time: float) -> None:
        """Record a relative change of the count at ``clock_time``."""
        self.observe_count(self.current_count + change, clock_time)

    def warmed_up(self, clock_time: float, current_count: float) -> None:
        """Discard everything observed so far and restart at ``clock_time``.

        Args:
            clock_time: New start of the observation period
            current_count: Count held at that moment

        Raises:
            OutOfRangeError: If clock_time is negative
        """
        if clock_time < 0:
            raise OutOfRangeError("Clock time for warm-up cannot be negative")
        self._reset(clock_time, self.is_history_enabled)
        self.current_count = float(current_count)
        if self.is_history_enabled:
            self._history.append((self.current_time, self.current_count))

    @property
    def increment_rate(self) -> float:
        if self.total_active_duration == 0:
            return 0.0
        return self.total_increment_observed / self.total_active_duration

    @property
    def decrement_rate(self) -> float:
        if self.total_active_duration == 0:
            return 0.0
        return self.total_decrement_observed / self.total_active_duration

    @property
    def observation_coverage_ratio(self) -> float:
        """Share of ``[initial_time, current_time]`` covered by observations."""
        if self.current_time == self.initial_time:
            return 0.0
        return self.total_active_duration / (self.current_time - self.initial_time)

    @property
    def average_count(self) -> float:
        """Time-weighted average count, or the current count if no time passed."""
        if self.total_active_duration == 0:
            return self.current_count
        return self.cumulative_count_time_product / self.total_active_duration

    @property
    def average_sojourn_time(self) -> float:
        """Average time an item stays, by Little's law (W = L / lambda)."""
        if self.decrement_rate == 0:
            return 0.0
        duration = self.average_count / self.decrement_rate
        if math.isnan(duration) or math.isinf(duration):
            return 0.0
        return duration

    @property
    def time_per_count(self) -> Dict[int, float]:
        """Total time spent at each (rounded) count, sorted by count."""
        return dict(sorted(self._time_per_count.items()))

    @property
    def history(self) -> List[Tuple[float, float]]:
        """Recorded (time, count) pairs sorted by time; empty if disabled."""
        if not self.is_history_enabled:
            return []
        return sorted(self._history, key=lambda point: point[0])

    def history_frame(self) -> pd.DataFrame:
        """Return the history as a DataFrame with ``time`` and ``count`` columns."""
        return pd.DataFrame(self.history, columns=['time', 'count'])

    def count_percentile_by_time(self, percentile_ratio: float) -> int:
        """Count level at or below which the system spent the given share of time.

        Args:
            percentile_ratio: Percentile between 0 and 100

        Returns:
            Smallest count whose cumulative time reaches the percentile

        Raises:
            OutOfRangeError: If percentile_ratio is outside [0, 100]
            InvalidOperationError: If nothing has been observed
        """
        if percentile_ratio < 0 or percentile_ratio > 100:
            raise OutOfRangeError("Percentile ratio must be between 0 and 100")

        if not self._time_per_count or self.total_active_duration == 0:
            raise InvalidOperationError("No observation time recorded yet")

        counts = np.array(sorted(self._time_per_count), dtype=int)
        durations = np.array([self._time_per_count[c] for c in counts], dtype=float)
        threshold = self.total_active_duration * percentile_ratio / 100.0
        cumulative = np.cumsum(durations)
        index = int(np.searchsorted(cumulative, threshold, side='left'))
        if index >= len(counts):
            return int(counts[-1])
        return int(counts[index])

    def generate_histogram(self, count_interval_width: float) -> List[HistogramBin]:
        """Summarize the time spent per count interval.

        Args:
            count_interval_width: Width of each bin, must be positive

        Returns:
            Bins from the lowest to the highest observed count; empty if
            nothing has been observed

        Raises:
            OutOfRangeError: If count_interval_width is not positive
        """
        if count_interval_width <= 0:
            raise OutOfRangeError("Count interval width must be positive")

        if not self._time_per_count or self.total_active_duration == 0:
            return []

        counts = sorted(self._time_per_count)
        lower = math.floor(counts[0] / count_interval_width) * count_interval_width
        edges = np.arange(lower, counts[-1] + count_interval_width, count_interval_width)
        if edges[-1] <= counts[-1]:
            edges = np.append(edges, edges[-1] + count_interval_width)

        totals, _ = np.histogram(
            counts,
            bins=edges,
            weights=[self._time_per_count[c] for c in counts],
        )
        probabilities = totals / self.total_active_duration
        cumulative = np.cumsum(probabilities)

        return [
            HistogramBin(
                count_lower_bound=float(edges[i]),
                total_time=float(totals[i]),
                probability=float(probabilities[i]),
                cumulative_probability=float(cumulative[i]),
            )
            for i in range(len(totals))
        ]

    def __repr__(self) -> str:
        return (
            f"TimeBasedMetric(count={self.current_count}, time={self.current_time}, "
            f"average={self.average_count:.4f})"
        )
