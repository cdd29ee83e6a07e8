"""
Simple Prometheus metrics exporter for the curl speed test.
"""

import logging
from prometheus_client import CollectorRegistry, Counter, Gauge, start_http_server

logger = logging.getLogger(__name__)


class SimplePrometheusExporter:
    """Simple Prometheus metrics exporter."""

    def __init__(self, port: int = 9100, registry: CollectorRegistry = None):
        self.port = port
        self.server_started = False
        self.registry = registry or CollectorRegistry()

        # Define metrics
        self.probes_total = Counter(
            'curl_bench_probes_total', 'Total probes', ['status'], registry=self.registry
        )
        self.sink_failures_total = Counter(
            'curl_bench_sink_failures_total', 'Failed sink operations', ['sink'], registry=self.registry
        )
        self.speed = Gauge(
            'curl_bench_speed_bytes_per_second', 'Speed of the last successful probe',
            ['url'], registry=self.registry
        )

    def start_server(self):
        """Start the Prometheus HTTP server."""
        if not self.server_started:
            try:
                start_http_server(self.port, registry=self.registry)
                self.server_started = True
                logger.info(f"Prometheus server started on port {self.port}")
            except OSError as e:
                logger.error(f"Failed to start Prometheus server: {e}")

    def record_probe(self, success: bool, url: str = "", speed: str = ""):
        """Record a probe outcome."""
        self.probes_total.labels(status='success' if success else 'failure').inc()
        if success and speed:
            try:
                self.speed.labels(url=url).set(float(speed))
            except ValueError:
                logger.debug(f"Ignoring non-numeric speed {speed!r} for {url}")

    def record_sink_failure(self, sink: str):
        """Record a failed local save, upload or report."""
        self.sink_failures_total.labels(sink=sink).inc()
