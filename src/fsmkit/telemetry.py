"""Telemetry - shared logging and metrics entry points

Provides a logger factory and a small metrics facade so every component
reports through the same channel.

Log format: [module:machine] msg
Metric examples: transition.ok, transition.vetoed, queue.depth, trigger.busy_rejected
"""

import logging

from .core.ids import short_id

_LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a module logger.

    Args:
        name: Module name (usually ``__name__``)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def configure_logging(level: str | int = "INFO") -> None:
    """Install a basic stderr handler for scripts such as the demo.

    The library itself never installs handlers; applications own that.
    """
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def format_machine_log(module: str, machine_id: str, msg: str) -> str:
    """Format a log message tagged with a machine id.

    Args:
        module: Short component name (e.g. "SM", "Queue")
        machine_id: Machine identifier
        msg: Message body

    Returns:
        "[module:machine_id[:16]] msg"
    """
    machine_short = short_id(machine_id) if machine_id else "unknown"
    return f"[{module}:{machine_short}] {msg}"


class Metrics:
    """In-memory metrics facade

    Counters and gauges keyed by name plus optional labels.
    """

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._gauges: dict[str, float] = {}

    def inc(self, name: str, labels: dict[str, str] | None = None, value: int = 1) -> None:
        """Increment a counter.

        Args:
            name: Metric name (e.g. "transition.ok")
            labels: Optional labels (e.g. {"machine": machine_id})
            value: Increment, defaults to 1
        """
        key = self._make_key(name, labels)
        self._counters[key] = self._counters.get(key, 0) + value

    def gauge(self, name: str, value: float, labels: dict[str, str] | None = None) -> None:
        """Set a gauge value."""
        key = self._make_key(name, labels)
        self._gauges[key] = value

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        key = self._make_key(name, labels)
        return self._counters.get(key, 0)

    def get_gauge(self, name: str, labels: dict[str, str] | None = None) -> float:
        key = self._make_key(name, labels)
        return self._gauges.get(key, 0.0)

    def reset(self) -> None:
        """Clear all metrics (used by tests)."""
        self._counters.clear()
        self._gauges.clear()

    def _make_key(self, name: str, labels: dict[str, str] | None) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
        return f"{name}{{{label_str}}}"


# Global metrics instance
metrics = Metrics()
