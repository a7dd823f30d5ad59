"""Reader-writer lock guarding a View's shared state."""

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """Writer-preferring reader-writer lock with reentrant readers.

    Any number of threads may hold the read side at once. A writer waits for
    active readers to drain, and while a writer is waiting no new reader is
    admitted, except a thread that already holds the read side: nested
    renders (template includes) re-enter without deadlocking against a
    queued writer.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0
        self._local = threading.local()

    def _held_reads(self) -> int:
        return getattr(self._local, "count", 0)

    def acquire_read(self) -> None:
        held = self._held_reads()
        with self._cond:
            if held == 0:
                while self._writer or self._writers_waiting:
                    self._cond.wait()
            self._readers += 1
        self._local.count = held + 1

    def release_read(self) -> None:
        held = self._held_reads()
        if held == 0:
            raise RuntimeError("release_read called without holding the read lock")
        self._local.count = held - 1
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        if self._held_reads():
            raise RuntimeError("cannot acquire write lock while holding read lock")
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold the shared side for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Hold the exclusive side for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
