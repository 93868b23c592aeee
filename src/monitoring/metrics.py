"""
Metrics Collection
Prometheus metrics for interpretation and the prompt shell
"""

import time
from contextlib import contextmanager
from typing import Callable, Iterator

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the service.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else REGISTRY

        # Interpretation
        self.renders_total = Counter(
            "ui_renders_total",
            "Total number of full render passes",
            ["status"],
            registry=self.registry,
        )
        self.render_duration = Histogram(
            "ui_render_duration_seconds",
            "Render pass duration in seconds",
            buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
            registry=self.registry,
        )
        self.diagnostics_total = Counter(
            "ui_diagnostics_total",
            "Recoverable interpretation problems",
            ["kind"],
            registry=self.registry,
        )

        # Actions
        self.dispatches_total = Counter(
            "ui_dispatches_total",
            "Actions dispatched by interactive nodes",
            ["action", "status"],
            registry=self.registry,
        )

        # Sessions
        self.sessions_active = Gauge(
            "ui_sessions_active",
            "Live prompt shell sessions",
            registry=self.registry,
        )
        self.sessions_created = Counter(
            "ui_sessions_created_total",
            "Sessions created by app",
            ["app"],
            registry=self.registry,
        )

        # System
        self.uptime = Gauge(
            "ui_uptime_seconds",
            "Service uptime in seconds",
            registry=self.registry,
        )
        self.start_time = time.time()

    def record_render(self, status: str, duration: float) -> None:
        """Record a render pass."""
        self.renders_total.labels(status=status).inc()
        self.render_duration.observe(duration)

    def record_diagnostic(self, kind: str) -> None:
        """Record a recoverable problem (unknown node, dropped action, ...)."""
        self.diagnostics_total.labels(kind=kind).inc()

    def record_dispatch(self, action: str, status: str) -> None:
        """Record an action dispatch."""
        self.dispatches_total.labels(action=action, status=status).inc()

    def record_session_created(self, app: str) -> None:
        self.sessions_created.labels(app=app).inc()

    def set_active_sessions(self, count: int) -> None:
        self.sessions_active.set(count)

    def update_uptime(self) -> None:
        self.uptime.set(time.time() - self.start_time)

    @contextmanager
    def measure_duration(self, callback: Callable[[float], None]) -> Iterator[None]:
        """Context manager to measure operation duration."""
        start = time.perf_counter()
        try:
            yield
        finally:
            callback(time.perf_counter() - start)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        self.update_uptime()
        return generate_latest(self.registry)


# Global metrics collector instance
metrics_collector = MetricsCollector()
