"""
Metrics Module: Diagnostic counters and histograms.

Counts samples, aggregation failures (with reason codes), encoded reports
and decode issues, so that a host can report why no observation was sent.

Usage:
    from bbxx_core.metrics import get_metrics

    metrics = get_metrics()
    metrics.increment('samples_in')
    metrics.increment_failure('missing_required')
    metrics.record_histogram('water_temp_c', 22.5)
"""

from .counters import CounterSnapshot, HistogramStats, MetricsCollector

# Global singleton for easy access
_global_metrics = None


def get_metrics() -> MetricsCollector:
    """
    Get the global metrics collector singleton.

    Returns:
        MetricsCollector instance
    """
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = MetricsCollector()
    return _global_metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    global _global_metrics
    _global_metrics = MetricsCollector()


__all__ = ['CounterSnapshot', 'HistogramStats', 'MetricsCollector', 'get_metrics', 'reset_metrics']
