"""Network nodes: loading ramps, workers and storehouses."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping

from netsim.helpers import default_probability_generator
from netsim.package import Package
from netsim.storage_types import PackageQueue, PackageQueueType

ProbabilityGenerator = Callable[[], float]


class ReceiverType(Enum):
    WORKER = "worker"
    STOREHOUSE = "storehouse"


class ReceiverPreferences:
    """Receivers of a sender, each with an equal probability of being chosen."""

    def __init__(self, probability_generator: ProbabilityGenerator | None = None) -> None:
        self._generator = probability_generator or default_probability_generator
        self._preferences: dict[Any, float] = {}

    @property
    def preferences(self) -> Mapping[Any, float]:
        """Read-only view of receiver -> probability."""
        return MappingProxyType(self._preferences)

    def add_receiver(self, receiver: Any) -> None:
        self._preferences[receiver] = 0.0
        probability = 1 / len(self._preferences)
        for key in self._preferences:
            self._preferences[key] = probability

    def remove_receiver(self, receiver: Any) -> None:
        self._preferences.pop(receiver, None)
        total = sum(self._preferences.values())
        if total:
            for key, value in self._preferences.items():
                self._preferences[key] = value / total

    def choose_receiver(self) -> Any | None:
        """Pick a receiver by its probability; None if nothing is chosen."""
        p = self._generator()
        cumulative = 0.0
        for receiver, probability in self._preferences.items():
            cumulative += probability
            if cumulative >= p:
                return receiver
        return None

    def __iter__(self) -> Iterator[Any]:
        return iter(self._preferences)

    def __len__(self) -> int:
        return len(self._preferences)

    def __contains__(self, receiver: object) -> bool:
        return receiver in self._preferences


class PackageSender:
    """A node with a sending buffer that passes packages on to its receivers."""

    def __init__(self) -> None:
        self.receiver_preferences = ReceiverPreferences()
        self.sending_buffer: Package | None = None

    def send_package(self) -> None:
        if self.sending_buffer is None:
            return
        receiver = self.receiver_preferences.choose_receiver()
        if receiver is not None:
            receiver.receive_package(self.sending_buffer)
            self.sending_buffer = None

    def push_package(self, package: Package) -> None:
        """Put ``package`` into the sending buffer, dropping what was there."""
        if self.sending_buffer is not None and self.sending_buffer is not package:
            self.sending_buffer.release()
        self.sending_buffer = package


class Storehouse:
    """Final destination that keeps every package it receives."""

    receiver_type = ReceiverType.STOREHOUSE

    def __init__(self, id: int, stockpile: PackageQueue | None = None) -> None:
        self.id = id
        self.stockpile = stockpile if stockpile is not None else PackageQueue(PackageQueueType.FIFO)

    def receive_package(self, package: Package) -> None:
        self.stockpile.push(package)

    def __iter__(self) -> Iterator[Package]:
        return iter(self.stockpile)

    def __repr__(self) -> str:
        return f"Storehouse(id={self.id})"


class Ramp(PackageSender):
    """Source of new packages, producing one every ``delivery_interval`` turns."""

    def __init__(self, id: int, delivery_interval: int) -> None:
        super().__init__()
        self.id = id
        self.delivery_interval = delivery_interval

    def deliver_goods(self, t: int) -> None:
        if (t - 1) % self.delivery_interval == 0:
            self.push_package(Package())

    def __repr__(self) -> str:
        return f"Ramp(id={self.id}, delivery_interval={self.delivery_interval})"


class Worker(PackageSender):
    """Takes packages from its queue, processes them and sends them on."""

    receiver_type = ReceiverType.WORKER

    def __init__(self, id: int, processing_duration: int, queue: PackageQueue) -> None:
        super().__init__()
        self.id = id
        self.processing_duration = processing_duration
        self.queue = queue
        self.processing_buffer: Package | None = None
        self.processing_start_time = 0

    @property
    def is_processing(self) -> bool:
        return self.processing_buffer is not None

    def do_work(self, t: int) -> None:
        if self.processing_buffer is not None:
            if t > self.processing_duration + self.processing_start_time - 1:
                finished = self.processing_buffer
                self.processing_buffer = None
                self.push_package(finished)
        if self.processing_buffer is None and self.queue:
            package = self.queue.pop()
            if self.processing_duration <= 1:
                self.push_package(package)
            else:
                self.processing_buffer = package

    def receive_package(self, package: Package) -> None:
        self.queue.push(package)

    def __iter__(self) -> Iterator[Package]:
        return iter(self.queue)

    def __repr__(self) -> str:
        return f"Worker(id={self.id}, processing_duration={self.processing_duration})"