"""Keyed mutual exclusion for order transitions and stock changes.

Fulfillment reads stock, checks it against the order, then decrements it.
Two fulfillments touching the same item must not both pass the check before
either decrements, so every piece of work that reads-then-writes an order or
an item's stock holds the matching keys for its whole unit of work, commit
included.

Locks form a two-level hierarchy: an order key is always taken before any item
key, and keys taken together are acquired in sorted order. Nothing waits on an
order key while holding an item key, which rules out deadlocks between
overlapping key sets. Each attempt waits at most
``LOCK_TIMEOUT`` seconds per key; a failed attempt releases everything it
holds, backs off, and retries. When ``LOCK_ATTEMPTS`` attempts fail the
caller gets a ``Conflict``.
"""

import os
import threading
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from cafe.domain import logger
from cafe.errors import Conflict

LOCK_TIMEOUT = float(os.getenv("CAFE_LOCK_TIMEOUT", "2.0"))
LOCK_ATTEMPTS = int(os.getenv("CAFE_LOCK_ATTEMPTS", "3"))
LOCK_BACKOFF = float(os.getenv("CAFE_LOCK_BACKOFF", "0.05"))


def order_key(order_id) -> str:
    return f"order:{order_id}"


def item_key(item_id) -> str:
    return f"item:{item_id}"


class KeyedLocks:
    """A registry of per-key locks.

    A key's lock exists only while someone holds it or waits on it; the last
    user to let go removes it, so the registry does not grow with the number
    of orders and items ever touched.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            remaining = self._users[key] - 1
            if remaining:
                self._users[key] = remaining
            else:
                del self._users[key]
                del self._locks[key]

    def try_acquire_all(self, keys: list[str], timeout: float) -> bool:
        """Acquire every key in order, or none of them."""
        acquired = []
        for key in keys:
            lock = self._checkout(key)
            if not lock.acquire(timeout=timeout):
                self._checkin(key)
                for held_key, held in reversed(acquired):
                    held.release()
                    self._checkin(held_key)
                return False
            acquired.append((key, lock))
        return True

    def release_all(self, keys: list[str]) -> None:
        for key in reversed(keys):
            with self._guard:
                lock = self._locks[key]
            lock.release()
            self._checkin(key)

    def is_locked(self, key: str) -> bool:
        with self._guard:
            lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @contextmanager
    def hold(
        self,
        keys: Iterable[str],
        timeout: float | None = None,
        attempts: int | None = None,
        backoff: float | None = None,
    ) -> Iterator[list[str]]:
        ordered = sorted(set(keys))
        timeout = LOCK_TIMEOUT if timeout is None else timeout
        attempts = LOCK_ATTEMPTS if attempts is None else attempts
        backoff = LOCK_BACKOFF if backoff is None else backoff

        for attempt in range(1, attempts + 1):
            if self.try_acquire_all(ordered, timeout):
                break
            logger.warning("lock_contention", keys=ordered, attempt=attempt, attempts=attempts)
            if attempt < attempts:
                time.sleep(backoff * attempt)
        else:
            raise Conflict(ordered, attempts)

        try:
            yield ordered
        finally:
            self.release_all(ordered)


# Shared by every request served by this process
cafe_locks = KeyedLocks()
