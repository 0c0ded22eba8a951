"""Tests for TriggerQueue"""

import pytest

from fsmkit.machine.queue import TriggerQueue
from fsmkit.telemetry import metrics


@pytest.fixture
def queue():
    return TriggerQueue("test-machine")


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics around every test"""
    metrics.reset()
    yield
    metrics.reset()


class TestTriggerQueue:
    """FIFO behaviour"""

    def test_fifo_order(self, queue):
        """Keys come out in arrival order"""
        queue.enqueue("a:one")
        queue.enqueue("a:two")
        queue.enqueue("three")

        assert queue.dequeue() == "a:one"
        assert queue.dequeue() == "a:two"
        assert queue.dequeue() == "three"
        assert queue.dequeue() is None

    def test_empty_state(self, queue):
        assert not queue
        assert len(queue) == 0
        assert queue.pending == ()

    def test_clear_returns_count(self, queue):
        queue.enqueue("a")
        queue.enqueue("b")

        assert queue.clear() == 2
        assert not queue

    def test_pending_snapshot(self, queue):
        """pending is an immutable snapshot"""
        queue.enqueue("a")
        snapshot = queue.pending
        queue.enqueue("b")

        assert snapshot == ("a",)
        assert queue.pending == ("a", "b")

    def test_unbounded(self, queue):
        """Nothing is dropped past the high watermark"""
        for i in range(100):
            queue.enqueue(f"k{i}")
        assert len(queue) == 100
        assert queue.pending[0] == "k0"


class TestProcessingFlag:
    """Busy flag"""

    def test_default_not_processing(self, queue):
        assert queue.is_processing is False

    def test_set_processing(self, queue):
        queue.set_processing(True)
        assert queue.is_processing is True
        queue.set_processing(False)
        assert queue.is_processing is False


class TestQueueMetrics:
    """queue.depth gauge"""

    def test_depth_gauge_tracks_queue(self, queue):
        labels = {"machine": "test-machine"}
        queue.enqueue("a")
        queue.enqueue("b")
        assert metrics.get_gauge("queue.depth", labels) == 2

        queue.dequeue()
        assert metrics.get_gauge("queue.depth", labels) == 1

        queue.clear()
        assert metrics.get_gauge("queue.depth", labels) == 0
