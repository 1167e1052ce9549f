"""Queues that hold packages waiting to be processed or stored."""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Iterator

from netsim.package import Package


class PackageQueueType(Enum):
    LIFO = "LIFO"
    FIFO = "FIFO"


class PackageQueue:
    """A package stockpile taken from the front (FIFO) or the back (LIFO)."""

    def __init__(self, queue_type: PackageQueueType) -> None:
        self.queue_type = queue_type
        self._items: deque[Package] = deque()

    def push(self, package: Package) -> None:
        self._items.append(package)

    def pop(self) -> Package:
        """Remove and return the next package; IndexError when empty."""
        if not self._items:
            raise IndexError("pop from an empty package queue")
        if self.queue_type is PackageQueueType.FIFO:
            return self._items.popleft()
        if self.queue_type is PackageQueueType.LIFO:
            return self._items.pop()
        raise ValueError(f"unknown queue type: {self.queue_type!r}")

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Package]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"PackageQueue({self.queue_type.name}, {[p.id for p in self._items]})"