"""Packages (semi-finished products) and the pool that hands out their IDs."""

from __future__ import annotations

from collections import Counter

FIRST_ID = 1


class IdPool:
    """Tracks which package IDs are in use and which have been released.

    An ID may be assigned more than once; it only becomes free again when
    every assignment of it has been released.
    """

    def __init__(self) -> None:
        self._assigned: Counter[int] = Counter()
        self._freed: set[int] = set()

    def assign(self, id: int) -> None:
        """Mark ``id`` as taken, counting duplicate assignments."""
        self._freed.discard(id)
        self._assigned[id] += 1

    def free(self, id: int) -> None:
        """Release one assignment of ``id``; free it once none remain."""
        if self._assigned[id] > 0:
            self._assigned[id] -= 1
        if self._assigned[id] <= 0:
            del self._assigned[id]
            self._freed.add(id)

    def next_id(self) -> int:
        """Return the ID the next new package should get."""
        if self._freed:
            return min(self._freed)
        if not self._assigned:
            return FIRST_ID
        return max(self._assigned) + 1

    def reset(self) -> None:
        """Forget every assigned and freed ID."""
        self._assigned.clear()
        self._freed.clear()


DEFAULT_POOL = IdPool()


class Package:
    """A product moving through the network, identified by a unique ID."""

    def __init__(self, id: int | None = None, pool: IdPool | None = None) -> None:
        self._pool = DEFAULT_POOL if pool is None else pool
        if id is None:
            id = self._pool.next_id()
        self._pool.assign(id)
        self.id = id
        self._released = False

    def release(self) -> None:
        """Give the package's ID back to its pool. Safe to call twice."""
        if not self._released:
            self._pool.free(self.id)
            self._released = True

    def __repr__(self) -> str:
        return f"Package(id={self.id})"