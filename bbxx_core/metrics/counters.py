"""
Pipeline counters and value histograms.

A host running the pipeline unattended needs to know why no report went
out. The collector answers that with:
- Counters for each stage (samples loaded and rejected, samples without
  true wind, aggregations, reports encoded and decoded, decode issues)
- Aggregation failures by reason code
- Bounded histograms of reported values (true wind speed, water temperature)

All methods are safe to call from several threads.
"""

import logging
import statistics
import threading
import time
from collections import Counter, deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional

logger = logging.getLogger(__name__)

# Counters always present in a snapshot, even before the first increment
STANDARD_COUNTERS = (
    'samples_in',
    'samples_rejected',
    'samples_missing_wind',
    'aggregations',
    'aggregation_failures',
    'reports_encoded',
    'reports_decoded',
    'decode_errors',
    'decode_warnings',
)

# Values kept per histogram; older values are discarded first
HISTOGRAM_CAPACITY = 1000


@dataclass(frozen=True)
class HistogramStats:
    """Summary of one histogram."""

    count: int
    min: float
    max: float
    mean: float
    median: float


@dataclass
class CounterSnapshot:
    """
    Metrics state at a point in time.

    Attributes:
        timestamp: Wall-clock time of the snapshot
        uptime_s: Seconds since the collector was created or reset
        counters: Counter values
        failure_reasons: Aggregation failures per reason code
        histograms: Summary per non-empty histogram
    """

    timestamp: float
    uptime_s: float
    counters: Dict[str, int]
    failure_reasons: Dict[str, int]
    histograms: Dict[str, HistogramStats]

    def total_failures(self) -> int:
        return sum(self.failure_reasons.values())

    def failure_rate(self) -> float:
        """Percentage of aggregation attempts that failed."""
        attempts = self.counters.get('aggregations', 0) + self.total_failures()
        if attempts == 0:
            return 0.0
        return self.total_failures() / attempts * 100.0


class MetricsCollector:
    """
    Thread-safe pipeline metrics.

    Usage:
        metrics = MetricsCollector()
        metrics.increment('samples_in', 3)
        metrics.increment_failure('missing_required')
        metrics.record_histogram('water_temp_c', 22.5)

        for line in metrics.summary_lines():
            print(line)
    """

    # Aggregation failure reason codes
    FAILURE_REASONS = {
        'empty_batch': 'No samples were supplied',
        'missing_required': 'Required field absent from every sample',
    }

    def __init__(self):
        self._lock = threading.Lock()
        self._clear()

    def _clear(self) -> None:
        """Drop all state. Caller holds the lock, or no other thread has the collector yet."""
        self._counters: Counter = Counter({name: 0 for name in STANDARD_COUNTERS})
        self._failure_reasons: Counter = Counter({reason: 0 for reason in self.FAILURE_REASONS})
        self._histograms: Dict[str, Deque[float]] = {}
        self._start_time = time.time()

    def increment(self, counter_name: str, value: int = 1) -> None:
        with self._lock:
            self._counters[counter_name] += value

    def increment_failure(self, reason: str, value: int = 1) -> None:
        """
        Record a failed aggregation.

        Args:
            reason: Reason code from FAILURE_REASONS (unknown codes are
                counted too, with a warning)
            value: Number of failures
        """
        if reason not in self.FAILURE_REASONS:
            logger.warning(f"Unknown aggregation failure reason '{reason}'")

        with self._lock:
            self._failure_reasons[reason] += value
            self._counters['aggregation_failures'] += value

    def get_counter(self, counter_name: str) -> int:
        with self._lock:
            return self._counters.get(counter_name, 0)

    def record_histogram(self, histogram_name: str, value: float) -> None:
        """Add a value, discarding the oldest once HISTOGRAM_CAPACITY is reached."""
        with self._lock:
            if histogram_name not in self._histograms:
                self._histograms[histogram_name] = deque(maxlen=HISTOGRAM_CAPACITY)
            self._histograms[histogram_name].append(float(value))

    def get_histogram_stats(self, histogram_name: str) -> Optional[HistogramStats]:
        """Summary of a histogram, None if nothing was recorded."""
        with self._lock:
            values = list(self._histograms.get(histogram_name, ()))
        return _summarize(values)

    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            counters = dict(self._counters)
            failure_reasons = dict(self._failure_reasons)
            histograms = {name: list(values) for name, values in self._histograms.items()}
            start_time = self._start_time

        now = time.time()
        return CounterSnapshot(
            timestamp=now,
            uptime_s=now - start_time,
            counters=counters,
            failure_reasons=failure_reasons,
            histograms={name: _summarize(values)
                        for name, values in histograms.items() if values},
        )

    def reset(self) -> None:
        with self._lock:
            self._clear()

    def summary_lines(self) -> List[str]:
        """Plain-text summary for the command line tool."""
        snapshot = self.snapshot()
        lines = [f"Metrics (uptime {snapshot.uptime_s:.1f}s)"]

        for name in STANDARD_COUNTERS:
            lines.append(f"  {name:24s} {snapshot.counters.get(name, 0):6d}")

        if snapshot.total_failures():
            lines.append(f"  failure rate             {snapshot.failure_rate():5.1f}%")
            for reason, count in sorted(snapshot.failure_reasons.items()):
                if count:
                    lines.append(f"    {reason:22s} {count:6d}")

        for name, stats in sorted(snapshot.histograms.items()):
            lines.append(f"  {name}: n={stats.count} mean={stats.mean:.2f} "
                         f"min={stats.min:.2f} max={stats.max:.2f}")
        return lines


def _summarize(values: List[float]) -> Optional[HistogramStats]:
    if not values:
        return None
    return HistogramStats(
        count=len(values),
        min=min(values),
        max=max(values),
        mean=statistics.mean(values),
        median=statistics.median(values),
    )
