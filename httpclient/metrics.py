import threading
import time
from dataclasses import dataclass

from .errors import UnexpectedRepresentationError
from .types import Failure, Result, Success


@dataclass
class Totals:
    calls: int = 0
    successes: int = 0
    transport_failures: int = 0
    unexpected_representations: int = 0
    bytes: int = 0
    duration_ms_sum: float = 0.0


class OutcomeMetrics:
    def __init__(self):
        self._totals = Totals()
        self._lock = threading.Lock()
        self._start = time.time()

    def record(self, result: Result, duration_ms: float) -> None:
        with self._lock:
            self._totals.calls += 1
            self._totals.duration_ms_sum += duration_ms
            if isinstance(result, Success):
                self._totals.successes += 1
                self._totals.bytes += len(result.data)
            elif isinstance(result, Failure) and isinstance(result.error, UnexpectedRepresentationError):
                self._totals.unexpected_representations += 1
            else:
                self._totals.transport_failures += 1

    def snapshot(self) -> tuple[Totals, float]:
        with self._lock:
            t = Totals(
                calls=self._totals.calls,
                successes=self._totals.successes,
                transport_failures=self._totals.transport_failures,
                unexpected_representations=self._totals.unexpected_representations,
                bytes=self._totals.bytes,
                duration_ms_sum=self._totals.duration_ms_sum,
            )
        elapsed = max(1e-6, time.time() - self._start)
        return t, elapsed
