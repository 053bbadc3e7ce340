import logging
import threading
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, start_http_server

from .metrics import OutcomeMetrics


logger = logging.getLogger(__name__)


class PrometheusExporter:
    def __init__(
        self,
        metrics: OutcomeMetrics,
        port: int = 8000,
        addr: str = "0.0.0.0",
        registry: CollectorRegistry = REGISTRY,
        interval_s: float = 5.0,
    ) -> None:
        self.metrics = metrics
        self.port = port
        self.addr = addr
        self.registry = registry
        self.interval_s = interval_s
        self._server_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

        self.calls_total = Counter(
            'httpclient_calls_total', 'Total number of classified calls', registry=registry
        )
        self.outcomes_total = Counter(
            'httpclient_outcomes_total',
            'Classified call outcomes',
            ['outcome'],
            registry=registry,
        )
        self.bytes_total = Counter(
            'httpclient_bytes_total', 'Total payload bytes of successful calls', registry=registry
        )
        self.avg_call_duration_seconds = Gauge(
            'httpclient_avg_call_duration_seconds', 'Average call duration in seconds', registry=registry
        )

        self._last_calls = 0
        self._last_successes = 0
        self._last_transport_failures = 0
        self._last_unexpected = 0
        self._last_bytes = 0

    def start(self) -> None:
        start_http_server(self.port, addr=self.addr, registry=self.registry)
        logger.info("Prometheus metrics server started on port %d", self.port)

        self._server_thread = threading.Thread(
            target=self._update_metrics_loop,
            name="prometheus-updater",
            daemon=True,
        )
        self._server_thread.start()

    def _update_metrics_loop(self) -> None:
        while not self._stop_event.is_set():
            self._update_metrics()
            self._stop_event.wait(self.interval_s)

    def _update_metrics(self) -> None:
        totals, _ = self.metrics.snapshot()

        calls_delta = totals.calls - self._last_calls
        if calls_delta > 0:
            self.calls_total.inc(calls_delta)
        for outcome, current, last in (
            ("success", totals.successes, self._last_successes),
            ("transport_error", totals.transport_failures, self._last_transport_failures),
            ("unexpected_representation", totals.unexpected_representations, self._last_unexpected),
        ):
            if current > last:
                self.outcomes_total.labels(outcome=outcome).inc(current - last)
        bytes_delta = totals.bytes - self._last_bytes
        if bytes_delta > 0:
            self.bytes_total.inc(bytes_delta)

        if totals.calls > 0:
            avg_ms = totals.duration_ms_sum / totals.calls
            self.avg_call_duration_seconds.set(avg_ms / 1000.0)

        self._last_calls = totals.calls
        self._last_successes = totals.successes
        self._last_transport_failures = totals.transport_failures
        self._last_unexpected = totals.unexpected_representations
        self._last_bytes = totals.bytes

    def stop(self) -> None:
        self._stop_event.set()
        if self._server_thread:
            self._server_thread.join(timeout=2.0)
        # One last pass so totals recorded after the final tick are exported.
        self._update_metrics()
