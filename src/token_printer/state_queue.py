import threading
from typing import Generic, Iterator, Optional, TypeVar

T = TypeVar("T")

_EMPTY = object()


class SingleSlotQueue(Generic[T]):
    """Hand-off slot between the solver thread and whoever draws its progress.

    The producer never blocks: publishing replaces whatever the consumer has
    not picked up yet, and `skipped` counts those replaced items. Closing ends
    iteration once the pending item, if any, has been read.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ready = threading.Condition(self._lock)
        self._slot: object = _EMPTY
        self._closed = False
        self._skipped = 0

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def skipped(self) -> int:
        with self._lock:
            return self._skipped

    def publish(self, item: T) -> None:
        with self._lock:
            if self._closed:
                return
            if self._slot is not _EMPTY:
                self._skipped += 1
            self._slot = item
            self._ready.notify()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._ready.notify_all()

    def get(self, timeout: Optional[float] = None) -> Optional[T]:
        """Take the pending item, waiting for one if needed.

        Returns None once the queue is closed and drained. Raises TimeoutError
        if neither happens within `timeout` seconds.
        """
        with self._ready:
            if not self._ready.wait_for(lambda: self._slot is not _EMPTY or self._closed, timeout):
                raise TimeoutError(f"nothing published within {timeout}s")
            item, self._slot = self._slot, _EMPTY
        return None if item is _EMPTY else item

    def __iter__(self) -> Iterator[T]:
        while (item := self.get()) is not None:
            yield item
