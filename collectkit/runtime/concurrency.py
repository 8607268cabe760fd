# collectkit/runtime/concurrency.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class RWLock:
    """
    Reader/writer lock: any number of concurrent readers or exactly one
    writer. Waiting writers block new readers so a steady stream of reads
    cannot starve a write.

    Not reentrant. A thread holding either side must not acquire again.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        """Block until no writer holds or waits for the lock, then enter as a reader."""
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() called without a matching acquire_read()")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        """Block until there are no readers and no writer, then enter as the writer."""
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
            if not self._writer:
                raise RuntimeError("release_write() called without a matching acquire_write()")
            self._writer = False
            self._cond.notify_all()

    @property
    def readers(self) -> int:
        """Number of threads currently holding the read side."""
        with self._cond:
            return self._readers

    @property
    def write_locked(self) -> bool:
        with self._cond:
            return self._writer


class _LockFactory:
    """
    Internal factory for producing lock instances used by the thread-safe
    collection wrapper.
    """

    def create_rw_lock(self) -> RWLock:
        """
        Return a new reader/writer lock.
        """
        return RWLock()


def get_rw_lock() -> RWLock:
    """
    Provide a new reader/writer lock to be used for synchronization.
    """
    return _LockFactory().create_rw_lock()


@contextmanager
def read_locked(lock: RWLock) -> Iterator[None]:
    """
    Hold the read side of ``lock`` for the duration of the with-block.
    """
    lock.acquire_read()
    try:
        yield
    finally:
        lock.release_read()


@contextmanager
def write_locked(lock: RWLock) -> Iterator[None]:
    """
    Hold the write side of ``lock`` for the duration of the with-block.
    """
    lock.acquire_write()
    try:
        yield
    finally:
        lock.release_write()
