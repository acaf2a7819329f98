"""
Prometheus Metrics Module

Provides instrumentation for all core operations:
- Vendor documentation requests
- Extraction and reconciliation outcomes
- API requests
- Error tracking

Used by the API process (served on /metrics) and by CLI runs when
RELEASEWATCH_METRICS_TEXTFILE is set.

Usage:
    from server.metrics import metrics
    metrics.updates_reconciled.labels(tool="Veracode", outcome="new").inc()
    with metrics.run_duration.time():
        await fetcher.run_all()
"""

from prometheus_client import Counter, Histogram, generate_latest, write_to_textfile, REGISTRY


class ReleaseWatchMetrics:
    """Centralized metrics for releasewatch pipeline and API

    Implements pipeline.protocols.MetricsCollector.
    """

    def __init__(self):
        # Vendor metrics
        self.vendor_requests = Counter(
            'releasewatch_vendor_requests_total',
            'Total vendor documentation requests',
            ['vendor', 'status']
        )

        self.vendor_request_duration = Histogram(
            'releasewatch_vendor_request_duration_seconds',
            'Vendor request duration',
            ['vendor'],
            buckets=[0.5, 1, 2, 5, 10, 30, 60]
        )

        # Pipeline metrics
        self.updates_fetched = Counter(
            'releasewatch_updates_fetched_total',
            'Total validated drafts returned by extractors',
            ['tool']
        )

        self.updates_reconciled = Counter(
            'releasewatch_updates_reconciled_total',
            'Reconciliation outcomes',
            ['tool', 'outcome']  # outcome: new/updated/unchanged
        )

        self.run_duration = Histogram(
            'releasewatch_run_duration_seconds',
            'Duration of a full monitoring run',
            buckets=[5, 10, 30, 60, 120, 300, 600]
        )

        # API metrics
        self.api_requests = Counter(
            'releasewatch_api_requests_total',
            'Total API requests',
            ['endpoint', 'method', 'status_code']
        )

        self.api_request_duration = Histogram(
            'releasewatch_api_request_duration_seconds',
            'API request duration',
            ['endpoint', 'method'],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
        )

        # Error metrics
        self.errors = Counter(
            'releasewatch_errors_total',
            'Total errors by component and type',
            ['component', 'error_type']
        )

    def record_error(self, component: str, error: Exception):
        """Record an error

        Args:
            component: Component name (vendor/reconciler/database/api)
            error: Exception instance
        """
        error_type = type(error).__name__
        self.errors.labels(component=component, error_type=error_type).inc()


# Global metrics instance
metrics = ReleaseWatchMetrics()


def get_metrics_text() -> str:
    """Get Prometheus metrics in text format

    Returns:
        Metrics text suitable for /metrics endpoint
    """
    return generate_latest(REGISTRY).decode('utf-8')


def write_metrics_textfile(path: str):
    """Write the registry to a textfile for node_exporter's textfile collector"""
    write_to_textfile(path, REGISTRY)
