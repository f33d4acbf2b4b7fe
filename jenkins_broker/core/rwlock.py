"""
Reader/writer lock built on threading.Condition.

Many readers may hold the lock at once; a writer holds it alone. Waiting
writers block new readers so a stream of cache hits cannot starve an
invalidation. Not reentrant: a thread must release a read hold before
asking for the write side.
"""

import threading
from contextlib import contextmanager


class ReadWriteLock:
    """Shared/exclusive lock with writer preference."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read called without a read hold")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self):
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write called without a write hold")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read(self):
        """Hold the shared side for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self):
        """Hold the exclusive side for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
