"""Metrics Protocol - Interface for metrics collection without concrete dependency

This protocol enables dependency injection of metrics throughout the pipeline,
allowing components to be tested and run without the server module.
"""

from typing import Protocol, Any, ContextManager
from contextlib import contextmanager


class LabeledCounter(Protocol):
    def labels(self, **kwargs: Any) -> "LabeledCounter": ...
    def inc(self, amount: float = 1) -> None: ...


class LabeledHistogram(Protocol):
    def labels(self, **kwargs: Any) -> "LabeledHistogram": ...
    def observe(self, value: float) -> None: ...
    def time(self) -> ContextManager: ...


class MetricsCollector(Protocol):
    """Unified metrics interface for all pipeline components

    Used by:
    - vendors/adapters/base_adapter_async.py - Vendor request metrics
    - pipeline/fetcher.py - Per-run extraction counts
    - pipeline/reconciler.py - NEW/UPDATED/UNCHANGED outcomes
    """
    vendor_requests: LabeledCounter
    vendor_request_duration: LabeledHistogram
    updates_fetched: LabeledCounter
    updates_reconciled: LabeledCounter
    run_duration: LabeledHistogram

    def record_error(self, component: str, error: Exception) -> None: ...


class _NullCounter:
    def labels(self, **kwargs: Any) -> "_NullCounter":
        return self

    def inc(self, amount: float = 1) -> None:
        pass


class _NullHistogram:
    def labels(self, **kwargs: Any) -> "_NullHistogram":
        return self

    def observe(self, value: float) -> None:
        pass

    @contextmanager
    def time(self):
        yield


class NullMetrics:
    """No-op metrics for testing or standalone use"""

    def __init__(self):
        self.vendor_requests = _NullCounter()
        self.vendor_request_duration = _NullHistogram()
        self.updates_fetched = _NullCounter()
        self.updates_reconciled = _NullCounter()
        self.run_duration = _NullHistogram()

    def record_error(self, component: str, error: Exception) -> None:
        pass
