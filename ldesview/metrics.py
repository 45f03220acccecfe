"""
Prometheus metrics for the view service.
"""
from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry
import psutil
import os


class Metrics:
    """
    Centralized metrics for the view service.
    """

    def __init__(self, service_name: str = "ldesview", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # HTTP Metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["service", "method", "path", "status"],
            registry=self.registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["service", "method", "path"],
            registry=self.registry,
        )

        self.http_requests_active = Gauge(
            "http_requests_active",
            "Number of active HTTP requests",
            ["service"],
            registry=self.registry,
        )
        self.http_requests_active.labels(service=service_name).set(0)

        # Application Info
        self.app_info = Info(
            "app",
            "Application information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Pagination
        self.pages_total = Counter(
            "ldes_pages_total",
            "Pages served by view and completion",
            ["view", "completion"],
            registry=self.registry,
        )

        self.page_events = Histogram(
            "ldes_page_events",
            "Events per served page",
            ["view"],
            buckets=(0, 1, 10, 50, 100, 250, 500, 1000, 2000),
            registry=self.registry,
        )

        self.redirects_total = Counter(
            "ldes_redirects_total",
            "Permanent redirects from stream aliases",
            ["view"],
            registry=self.registry,
        )

        self.lookup_failures_total = Counter(
            "ldes_lookup_failures_total",
            "Requests rejected by name or fragmentation resolution",
            ["error"],
            registry=self.registry,
        )

        # System Metrics
        self.process_memory_bytes = Gauge(
            "process_resident_memory_bytes",
            "Resident memory size in bytes",
            ["service"],
            registry=self.registry,
        )
        self.update_system_metrics()

    def update_system_metrics(self):
        """Update system metrics from psutil."""
        try:
            memory_info = psutil.Process(os.getpid()).memory_info()
        except psutil.Error:
            return
        self.process_memory_bytes.labels(service=self.service_name).set(memory_info.rss)

    def record_page(self, view: str, completion: str, events: int):
        """Record a served page."""
        self.pages_total.labels(view=view, completion=completion).inc()
        self.page_events.labels(view=view).observe(events)

    def record_redirect(self, view: str):
        self.redirects_total.labels(view=view).inc()

    def record_lookup_failure(self, error: str):
        self.lookup_failures_total.labels(error=error).inc()
