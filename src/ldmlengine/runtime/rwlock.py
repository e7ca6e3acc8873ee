"""Readers-writer lock guarding lazy per-locale store construction.

Store lookups are overwhelmingly reads of already-built stores; building a
store happens once per locale. The lock therefore allows:
- Multiple concurrent readers (registry hits)
- A single exclusive writer (store construction and publication)
- Writer preference, so a pending construction is not starved by readers
- Reentrant read acquisition by the same thread
- Optional acquisition timeout (raises TimeoutError)

Upgrades (read -> write), downgrades (write -> read) and reentrant write
acquisition are rejected with RuntimeError. The registry releases its read
lock before taking the write lock, so none of these are needed.

Python 3.13+.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

__all__ = ["RWLock"]


class RWLock:
    """Readers-writer lock with writer preference.

    Example:
        >>> lock = RWLock()
        >>> with lock.read():
        ...     with lock.read():  # reentrant
        ...         pass
        >>> with lock.write(timeout=1.0):
        ...     pass
    """

    __slots__ = (
        "_condition",
        "_reader_threads",
        "_waiting_writers",
        "_writer",
    )

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        # Thread id -> reentrant read depth
        self._reader_threads: dict[int, int] = {}
        self._writer: int | None = None
        self._waiting_writers: int = 0

    @contextmanager
    def read(self, timeout: float | None = None) -> Generator[None]:
        """Hold a shared lock for the duration of the block.

        Raises:
            RuntimeError: If the thread holds the write lock.
            TimeoutError: If the lock is not acquired within ``timeout``.
            ValueError: If ``timeout`` is negative.
        """
        self._acquire_read(timeout)
        try:
            yield
        finally:
            self._release_read()

    @contextmanager
    def write(self, timeout: float | None = None) -> Generator[None]:
        """Hold the exclusive lock for the duration of the block.

        Raises:
            RuntimeError: If the thread already holds a read or the write lock.
            TimeoutError: If the lock is not acquired within ``timeout``.
            ValueError: If ``timeout`` is negative.
        """
        self._acquire_write(timeout)
        try:
            yield
        finally:
            self._release_write()

    def _wait_until(self, ready: Callable[[], bool], timeout: float | None, what: str) -> None:
        # Caller holds self._condition.
        deadline = time.monotonic() + timeout if timeout is not None else None
        while not ready():
            if deadline is None:
                self._condition.wait()
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                msg = f"Timed out waiting for {what} lock"
                raise TimeoutError(msg)
            self._condition.wait(timeout=remaining)

    def _acquire_read(self, timeout: float | None) -> None:
        _check_timeout(timeout)
        me = threading.get_ident()
        with self._condition:
            depth = self._reader_threads.get(me)
            if depth is not None:
                self._reader_threads[me] = depth + 1
                return
            if self._writer == me:
                msg = "Cannot acquire read lock while holding write lock"
                raise RuntimeError(msg)
            self._wait_until(
                lambda: self._writer is None and self._waiting_writers == 0, timeout, "read"
            )
            self._reader_threads[me] = 1

    def _release_read(self) -> None:
        me = threading.get_ident()
        with self._condition:
            depth = self._reader_threads.get(me)
            if depth is None:
                msg = "Thread does not hold read lock"
                raise RuntimeError(msg)
            if depth > 1:
                self._reader_threads[me] = depth - 1
                return
            del self._reader_threads[me]
            if not self._reader_threads:
                self._condition.notify_all()

    def _acquire_write(self, timeout: float | None) -> None:
        _check_timeout(timeout)
        me = threading.get_ident()
        with self._condition:
            if me in self._reader_threads:
                msg = "Cannot upgrade read lock to write lock"
                raise RuntimeError(msg)
            if self._writer == me:
                msg = "Cannot acquire write lock: already holding write lock"
                raise RuntimeError(msg)
            self._waiting_writers += 1
            try:
                self._wait_until(
                    lambda: not self._reader_threads and self._writer is None, timeout, "write"
                )
                self._writer = me
            finally:
                # Readers wait on _waiting_writers; wake them on success and timeout.
                self._waiting_writers -= 1
                self._condition.notify_all()

    def _release_write(self) -> None:
        with self._condition:
            if self._writer != threading.get_ident():
                msg = "Thread does not hold write lock"
                raise RuntimeError(msg)
            self._writer = None
            self._condition.notify_all()

    @property
    def reader_count(self) -> int:
        """Distinct threads currently holding the read lock."""
        with self._condition:
            return len(self._reader_threads)

    @property
    def writer_active(self) -> bool:
        """True if a thread currently holds the write lock."""
        with self._condition:
            return self._writer is not None

    @property
    def writers_waiting(self) -> int:
        """Threads blocked waiting for the write lock."""
        with self._condition:
            return self._waiting_writers


def _check_timeout(timeout: float | None) -> None:
    if timeout is not None and timeout < 0:
        msg = f"Timeout must be non-negative, got {timeout}"
        raise ValueError(msg)
