"""Text reports describing a factory's structure and its state during a turn."""

from __future__ import annotations

from typing import Any, Iterable, TextIO

from netsim.factory import Factory
from netsim.nodes import ReceiverPreferences, ReceiverType
from netsim.package import Package


def _receiver_sort_key(receiver: Any) -> tuple[bool, int]:
    # Storehouses come before workers; within a type, ascending ID.
    return (receiver.receiver_type is ReceiverType.WORKER, receiver.id)


def _by_id(nodes: Iterable[Any]) -> list[Any]:
    return sorted(nodes, key=lambda node: node.id)


def _format_packages(packages: Iterable[Package]) -> str:
    ids = [f"#{package.id}" for package in packages]
    return ", ".join(ids) if ids else "(empty)"


def write_receivers(preferences: ReceiverPreferences, stream: TextIO) -> None:
    """Write one indented line per receiver, storehouses first, sorted by ID."""
    for receiver in sorted(preferences, key=_receiver_sort_key):
        stream.write(f"\n    {receiver.receiver_type.value} #{receiver.id}")


def generate_structure_report(factory: Factory, stream: TextIO) -> None:
    """Write a description of every ramp, worker and storehouse and their links."""
    stream.write("\n== LOADING RAMPS ==\n")
    for ramp in _by_id(factory.ramps):
        stream.write(f"\nLOADING RAMP #{ramp.id}")
        stream.write(f"\n  Delivery interval: {ramp.delivery_interval}")
        stream.write("\n  Receivers:")
        write_receivers(ramp.receiver_preferences, stream)
        stream.write("\n")
    stream.write("\n")

    stream.write("\n== WORKERS ==\n")
    for worker in _by_id(factory.workers):
        stream.write(f"\nWORKER #{worker.id}")
        stream.write(f"\n  Processing time: {worker.processing_duration}")
        stream.write(f"\n  Queue type: {worker.queue.queue_type.value}")
        stream.write("\n  Receivers:")
        write_receivers(worker.receiver_preferences, stream)
        stream.write("\n")
    stream.write("\n")

    stream.write("\n== STOREHOUSES ==\n")
    for storehouse in _by_id(factory.storehouses):
        stream.write(f"\nSTOREHOUSE #{storehouse.id}")
        stream.write("\n")
    stream.write("\n")


def generate_simulation_turn_report(factory: Factory, stream: TextIO, t: int) -> None:
    """Write the contents of every worker's buffers and every storehouse at turn ``t``."""
    stream.write(f"=== [ Turn: {t} ] ===\n")

    stream.write("\n== WORKERS ==\n")
    for worker in _by_id(factory.workers):
        stream.write(f"\nWORKER #{worker.id}")

        stream.write("\n  PBuffer: ")
        if worker.processing_buffer is not None:
            elapsed = t - worker.processing_start_time
            stream.write(f"#{worker.processing_buffer.id} (pt = {elapsed})")
        else:
            stream.write("(empty)")

        stream.write(f"\n  Queue: {_format_packages(worker)}")

        stream.write("\n  SBuffer: ")
        if worker.sending_buffer is not None:
            stream.write(f"#{worker.sending_buffer.id}")
        else:
            stream.write("(empty)")

        stream.write("\n")
    stream.write("\n")

    stream.write("\n== STOREHOUSES ==\n")
    for storehouse in _by_id(factory.storehouses):
        stream.write(f"\nSTOREHOUSE #{storehouse.id}")
        stream.write(f"\n  Stock: {_format_packages(storehouse)}")
        stream.write("\n")
    stream.write("\n")