"""Prometheus metrics for the table store."""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
)


class MetricsRegistry:
    """Registry of all table store metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # CRUD metrics
        self.operations_total = Counter(
            "tabledb_operations_total",
            "Total number of table operations",
            ["operation", "status"],  # create_table, insert, ...; ok, error
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "tabledb_operation_latency_seconds",
            "Operation latency in seconds, lock wait included",
            ["operation"],
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        self.rows_affected_total = Counter(
            "tabledb_rows_affected_total",
            "Rows inserted, updated or deleted",
            ["operation"],
            registry=self._registry,
        )

        # Lock metrics
        self.lock_wait_seconds = Histogram(
            "tabledb_lock_wait_seconds",
            "Time spent waiting for the database and table locks",
            buckets=(0.0001, 0.001, 0.01, 0.1, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        self.tables = Gauge(
            "tabledb_tables",
            "Number of tables registered",
            ["database"],
            registry=self._registry,
        )

        # Persistence metrics
        self.table_files_written_total = Counter(
            "tabledb_table_files_written_total",
            "Table files written by save",
            registry=self._registry,
        )

        self.save_failures_total = Counter(
            "tabledb_save_failures_total",
            "Table files that failed to write during save",
            registry=self._registry,
        )

        self.save_duration_seconds = Histogram(
            "tabledb_save_duration_seconds",
            "Save duration in seconds",
            buckets=(0.001, 0.01, 0.1, 0.5, 1.0, 5.0, 30.0),
            registry=self._registry,
        )

        # Command interpreter metrics
        self.commands_total = Counter(
            "tabledb_commands_total",
            "Text commands executed",
            ["command", "status"],
            registry=self._registry,
        )

        self.info = Info(
            "tabledb",
            "Table store information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int | None = None, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics and start the scrape endpoint.

    Args:
        port: Port for the metrics HTTP server (default from config)
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    from tabledb import __version__
    from tabledb.infrastructure.config import get_config

    _metrics = MetricsRegistry(registry)
    _metrics.info.info({"version": __version__})

    start_http_server(port or get_config().observability.metrics_port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
