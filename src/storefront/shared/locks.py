"""Process-local exclusive sections keyed by string."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class _Entry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class KeyedLocks:
    """A registry of locks, one per key, created on first use.

    ``hold`` acquires several keys in sorted order, so two callers asking for
    overlapping key sets cannot deadlock each other. A key's lock is dropped
    as soon as no caller holds it or waits for it, so the registry only ever
    contains keys in use.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def _check_out(self, key: str) -> threading.Lock:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
            return entry.lock

    def _check_in(self, key: str) -> None:
        with self._guard:
            entry = self._entries[key]
            entry.users -= 1
            if entry.users == 0:
                del self._entries[key]

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        ordered = sorted(set(keys))
        locks = [self._check_out(key) for key in ordered]
        acquired: list[threading.Lock] = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in ordered:
                self._check_in(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


# TODO: swap for a conditional UPDATE on the postgresql provider before running more than one worker process.
stock_locks = KeyedLocks()
order_locks = KeyedLocks()
