"""TriggerQueue - per-machine pending trigger queue

Holds resolved trigger keys waiting to be processed, in arrival order.

Properties:
- Unbounded; nothing is dropped while processing succeeds
- The processing flag is the machine's busy flag
- Debug log line past the high watermark
- Depth reported as the queue.depth gauge
"""

from collections import deque

from ..config import METRICS_ENABLED, QUEUE_HIGH_WATERMARK
from ..telemetry import format_machine_log, get_logger, metrics

logger = get_logger(__name__)


class TriggerQueue:
    """FIFO of pending trigger keys for one machine.

    Attributes:
        machine_id: Owning machine id (for logs and metric labels)
        high_watermark: Depth at which a debug line is logged
    """

    def __init__(self, machine_id: str, high_watermark: int = QUEUE_HIGH_WATERMARK):
        self.machine_id = machine_id
        self._high_watermark = high_watermark
        self._queue: deque[str] = deque()
        self._processing = False

    def enqueue(self, key: str) -> None:
        """Append a trigger key to the tail."""
        self._queue.append(key)
        depth = len(self._queue)
        self._report_depth(depth)

        logger.debug(self._log(f"Enqueued {key} (depth={depth})"))
        if depth >= self._high_watermark:
            logger.debug(self._log(f"High watermark: {depth}/{self._high_watermark}"))

    def dequeue(self) -> str | None:
        """Pop the oldest key.

        Returns:
            Oldest key, or None when empty
        """
        if not self._queue:
            return None
        key = self._queue.popleft()
        self._report_depth(len(self._queue))
        return key

    def clear(self) -> int:
        """Drop all pending keys.

        Returns:
            Number of keys dropped
        """
        count = len(self._queue)
        self._queue.clear()
        self._report_depth(0)
        return count

    # === State ===

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return len(self._queue) > 0

    @property
    def pending(self) -> tuple[str, ...]:
        """Snapshot of pending keys, oldest first."""
        return tuple(self._queue)

    @property
    def is_processing(self) -> bool:
        """Whether a processor is currently draining the queue."""
        return self._processing

    def set_processing(self, value: bool) -> None:
        self._processing = value

    def _report_depth(self, depth: int) -> None:
        if METRICS_ENABLED:
            metrics.gauge("queue.depth", depth, {"machine": self.machine_id})

    def _log(self, msg: str) -> str:
        return format_machine_log("Queue", self.machine_id, msg)
