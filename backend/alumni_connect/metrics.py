"""
In-process counters for observability. Process-local; for multi-worker use external metrics (e.g. Prometheus).
"""
import threading

# Accept/reject calls that found no pending row (already processed, or lost a race).
# Storage failures surfaced as StorageFailure.
_counters: dict[str, int] = {
    "request_transition_conflicts_total": 0,
    "storage_failures_total": 0,
}
_lock = threading.Lock()


def increment(name: str) -> int:
    """Increment counter `name`; return new value. Thread-safe."""
    with _lock:
        _counters[name] = _counters.get(name, 0) + 1
        return _counters[name]


def get(name: str) -> int:
    with _lock:
        return _counters.get(name, 0)


def snapshot() -> dict[str, int]:
    """Copy of all counters (for /health)."""
    with _lock:
        return dict(_counters)
