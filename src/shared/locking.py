"""Per-aggregate serialization points.

Every Order, Route, Vehicle and InventoryItem is an independently lockable
unit. Public operations hold the lock of each aggregate they mutate around the
whole ``current_domain.process`` call, so the guard checks, the mutation and
the unit-of-work commit happen in one critical section.

Keys are ``(aggregate_name, identifier)`` pairs. Multi-aggregate operations
always acquire in rank order (Order, Route, Vehicle) which rules out lock
cycles. Locks are re-entrant, so an operation may take an Order lock, read the
order, and then take the lock of the vehicle bound to it.

Acquisition waits at most ``LOCK_TIMEOUT_SECONDS`` and raises ``Conflict``
when the key stays busy.
"""

import os
import threading
from contextlib import ExitStack, contextmanager

import structlog

from shared.errors import Conflict

logger = structlog.get_logger(__name__)

LOCK_TIMEOUT_SECONDS = float(os.environ.get("LOCK_TIMEOUT_SECONDS", "5"))

_RANK = {
    "Order": 0,
    "Route": 1,
    "Vehicle": 2,
    "InventoryItem": 3,
}


def _sort_key(key: tuple[str, str]) -> tuple[int, str, str]:
    name, identifier = key
    return (_RANK.get(name, len(_RANK)), name, identifier)


class AggregateLocks:
    """Registry of re-entrant locks keyed by aggregate name and identifier.

    A key's lock lives only while some caller holds or waits for it; the last
    one out drops it from the registry.
    """

    def __init__(self, timeout: float | None = None):
        self.timeout = LOCK_TIMEOUT_SECONDS if timeout is None else timeout
        self._guard = threading.Lock()
        self._locks: dict[tuple[str, str], threading.RLock] = {}
        self._users: dict[tuple[str, str], int] = {}

    def _checkout(self, key: tuple[str, str]) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _checkin(self, key: tuple[str, str]) -> None:
        with self._guard:
            remaining = self._users.get(key, 0) - 1
            if remaining > 0:
                self._users[key] = remaining
            else:
                self._users.pop(key, None)
                self._locks.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, *keys: tuple[str, str | None]):
        """Hold the locks for all ``keys`` for the duration of the block.

        Keys with an empty identifier are skipped, which lets callers pass
        optional references (an unbound vehicle, an order without a route)
        without branching.
        """
        wanted = sorted({(name, str(ident)) for name, ident in keys if ident}, key=_sort_key)
        with ExitStack() as stack:
            for key in wanted:
                lock = self._checkout(key)
                stack.callback(self._checkin, key)
                if not lock.acquire(timeout=self.timeout):
                    logger.warning(
                        "Serialization point busy",
                        aggregate=key[0],
                        identifier=key[1],
                        timeout=self.timeout,
                    )
                    raise Conflict(f"{key[0]} {key[1]} is being modified by another request, retry")
                stack.callback(lock.release)
            yield

    def clear(self) -> None:
        """Drop all registered locks (test isolation)."""
        with self._guard:
            self._locks.clear()
            self._users.clear()


aggregate_locks = AggregateLocks()


def serialized(*keys: tuple[str, str | None]):
    """Shorthand for ``aggregate_locks.hold(*keys)``."""
    return aggregate_locks.hold(*keys)
