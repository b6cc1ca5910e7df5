import threading

import pytest

from token_printer.state_queue import SingleSlotQueue


class TestSingleSlotQueue:
    """Test suite for SingleSlotQueue"""

    def test_latest_wins(self):
        """Only the newest published item is read"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        queue.publish(1)
        queue.publish(2)
        queue.publish(3)
        assert queue.get(timeout=1) == 3

    def test_get_times_out(self):
        """get() raises when nothing arrives in time"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        with pytest.raises(TimeoutError):
            queue.get(timeout=0.01)

    def test_value_survives_close(self):
        """The last value published before close is still delivered, then None"""
        queue: SingleSlotQueue[str] = SingleSlotQueue()
        queue.publish("done")
        queue.close()
        assert queue.closed
        assert queue.get(timeout=1) == "done"
        assert queue.get(timeout=1) is None

    def test_publish_after_close_is_ignored(self):
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        queue.close()
        queue.publish(1)
        assert queue.get(timeout=1) is None

    def test_close_wakes_consumer(self):
        """A blocked consumer returns None when the producer closes"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        results = []
        consumer = threading.Thread(target=lambda: results.append(queue.get(timeout=5)))
        consumer.start()
        queue.close()
        consumer.join(timeout=5)
        assert results == [None]

    def test_counts_skipped_items(self):
        """Items replaced before the consumer reads them are counted"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        queue.publish(1)
        queue.publish(2)
        assert queue.get(timeout=1) == 2
        queue.publish(3)
        assert queue.get(timeout=1) == 3
        assert queue.skipped == 1

    def test_iteration_stops_on_close(self):
        """Iterating yields the pending item and ends once closed"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        queue.publish(7)
        queue.close()
        assert list(queue) == [7]

    def test_iterates_items_from_producer_thread(self):
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        seen = []
        consumer = threading.Thread(target=lambda: seen.extend(queue))
        consumer.start()
        for i in range(1, 4):
            queue.publish(i)
        queue.close()
        consumer.join(timeout=5)
        assert not consumer.is_alive()
        assert seen == sorted(seen)
        assert seen[-1] == 3
        assert len(seen) + queue.skipped == 3
