"""The factory: collections of nodes, consistency checks and the text format."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterator, Protocol, TextIO, TypeVar

from netsim.nodes import PackageSender, Ramp, ReceiverType, Storehouse, Worker
from netsim.storage_types import PackageQueue, PackageQueueType


class FactoryError(ValueError):
    """Raised for malformed factory descriptions and unknown nodes."""


class _HasId(Protocol):
    id: int


NodeT = TypeVar("NodeT", bound=_HasId)


class NodeCollection(Generic[NodeT]):
    """An ordered collection of nodes looked up by their ID."""

    def __init__(self) -> None:
        self._nodes: list[NodeT] = []

    def add(self, node: NodeT) -> None:
        self._nodes.append(node)

    def find_by_id(self, id: int) -> NodeT | None:
        """Return the first node with ``id``, or None."""
        return next((node for node in self._nodes if node.id == id), None)

    def remove_by_id(self, id: int) -> None:
        """Remove the first node with ``id``; do nothing if there is none."""
        node = self.find_by_id(id)
        if node is not None:
            self._nodes.remove(node)

    def __iter__(self) -> Iterator[NodeT]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)


class _Color(Enum):
    UNVISITED = 0
    VISITED = 1
    VERIFIED = 2


class _Inconsistent(Exception):
    pass


def _reaches_storehouse(sender: PackageSender, colors: dict[PackageSender, _Color]) -> bool:
    if colors.get(sender) is _Color.VERIFIED:
        return True
    colors[sender] = _Color.VISITED
    if not len(sender.receiver_preferences):
        raise _Inconsistent("sender has no receivers")
    has_other_receiver = False
    for receiver in sender.receiver_preferences:
        if receiver.receiver_type is ReceiverType.STOREHOUSE:
            has_other_receiver = True
        elif receiver.receiver_type is ReceiverType.WORKER:
            if receiver is sender:
                continue
            has_other_receiver = True
            if colors.get(receiver, _Color.UNVISITED) is _Color.UNVISITED:
                _reaches_storehouse(receiver, colors)
    colors[sender] = _Color.VERIFIED
    if has_other_receiver:
        return True
    raise _Inconsistent("no storehouse reachable")


class Factory:
    """A network of ramps, workers and storehouses."""

    def __init__(self) -> None:
        self._ramps: NodeCollection[Ramp] = NodeCollection()
        self._workers: NodeCollection[Worker] = NodeCollection()
        self._storehouses: NodeCollection[Storehouse] = NodeCollection()

    @property
    def ramps(self) -> NodeCollection[Ramp]:
        return self._ramps

    @property
    def workers(self) -> NodeCollection[Worker]:
        return self._workers

    @property
    def storehouses(self) -> NodeCollection[Storehouse]:
        return self._storehouses

    # Ramps

    def add_ramp(self, ramp: Ramp) -> None:
        self._ramps.add(ramp)

    def remove_ramp(self, id: int) -> None:
        self._ramps.remove_by_id(id)

    def find_ramp_by_id(self, id: int) -> Ramp | None:
        return self._ramps.find_by_id(id)

    # Workers

    def add_worker(self, worker: Worker) -> None:
        self._workers.add(worker)

    def remove_worker(self, id: int) -> None:
        """Remove a worker and unlink it from every sender."""
        self._unlink(self._workers.find_by_id(id))
        self._workers.remove_by_id(id)

    def find_worker_by_id(self, id: int) -> Worker | None:
        return self._workers.find_by_id(id)

    # Storehouses

    def add_storehouse(self, storehouse: Storehouse) -> None:
        self._storehouses.add(storehouse)

    def remove_storehouse(self, id: int) -> None:
        """Remove a storehouse and unlink it from every sender."""
        self._unlink(self._storehouses.find_by_id(id))
        self._storehouses.remove_by_id(id)

    def find_storehouse_by_id(self, id: int) -> Storehouse | None:
        return self._storehouses.find_by_id(id)

    def _senders(self) -> Iterator[PackageSender]:
        yield from self._ramps
        yield from self._workers

    def _unlink(self, receiver: Worker | Storehouse | None) -> None:
        if receiver is None:
            return
        for sender in self._senders():
            sender.receiver_preferences.remove_receiver(receiver)

    # Simulation logic

    def is_consistent(self) -> bool:
        """True if every ramp can pass packages on to some storehouse."""
        colors: dict[PackageSender, _Color] = {
            sender: _Color.UNVISITED for sender in self._senders()
        }
        try:
            for ramp in self._ramps:
                _reaches_storehouse(ramp, colors)
        except _Inconsistent:
            return False
        return True

    def do_deliveries(self, t: int) -> None:
        for ramp in self._ramps:
            ramp.deliver_goods(t)

    def do_package_passing(self) -> None:
        for sender in self._senders():
            sender.send_package()

    def do_work(self, t: int) -> None:
        for worker in self._workers:
            worker.do_work(t)


class ElementType(Enum):
    RAMP = "LOADING_RAMP"
    WORKER = "WORKER"
    STOREHOUSE = "STOREHOUSE"
    LINK = "LINK"


@dataclass
class ParsedLineData:
    element_type: ElementType
    parameters: dict[str, str] = field(default_factory=dict)


def parse_line(line: str) -> ParsedLineData:
    """Split a line such as ``WORKER id=1 processing-time=2`` into its parts."""
    tokens = line.split(" ")
    if tokens[-1] == "":
        tokens.pop()
    if not tokens:
        raise FactoryError("empty line")
    try:
        element_type = ElementType(tokens[0])
    except ValueError:
        raise FactoryError(f"unknown element type: {tokens[0]!r}") from None
    parameters: dict[str, str] = {}
    for token in tokens[1:]:
        parts = token.split("=")
        key = parts[0]
        value = parts[1] if len(parts) > 1 else ""
        parameters[key] = value
    return ParsedLineData(element_type, parameters)


def _int_param(parameters: dict[str, str], key: str) -> int:
    raw = parameters.get(key, "")
    try:
        return int(raw)
    except ValueError:
        raise FactoryError(f"invalid value for {key!r}: {raw!r}") from None


def _split_endpoint(endpoint: str) -> tuple[str, str]:
    parts = endpoint.split("-")
    if parts[-1] == "" and len(parts) > 1:
        parts.pop()
    kind = parts[0]
    value = parts[-1] if len(parts) > 1 else ""
    return kind, value


def _require(node, kind: str, id: int):
    if node is None:
        raise FactoryError(f"no {kind} with id {id}")
    return node


def _add_link(factory: Factory, parameters: dict[str, str]) -> None:
    src_kind, src_value = _split_endpoint(parameters.get("src", ""))
    dest_kind, dest_value = _split_endpoint(parameters.get("dest", ""))

    if src_kind == "ramp":
        find_src, src_name = factory.find_ramp_by_id, "ramp"
    elif src_kind == "worker":
        find_src, src_name = factory.find_worker_by_id, "worker"
    else:
        return
    if dest_kind == "worker":
        find_dest, dest_name = factory.find_worker_by_id, "worker"
    elif dest_kind == "store":
        find_dest, dest_name = factory.find_storehouse_by_id, "storehouse"
    else:
        return

    src_id = _int_param({"src": src_value}, "src")
    dest_id = _int_param({"dest": dest_value}, "dest")
    sender = _require(find_src(src_id), src_name, src_id)
    receiver = _require(find_dest(dest_id), dest_name, dest_id)
    sender.receiver_preferences.add_receiver(receiver)


def load_factory_structure(stream: TextIO) -> Factory:
    """Build a factory from its text description; ``;`` starts a comment line."""
    factory = Factory()
    for raw_line in stream:
        line = raw_line[:-1] if raw_line.endswith("\n") else raw_line
        if not line or line.startswith(";"):
            continue
        parsed = parse_line(line)
        params = parsed.parameters
        if parsed.element_type is ElementType.RAMP:
            factory.add_ramp(Ramp(_int_param(params, "id"), _int_param(params, "delivery-interval")))
        elif parsed.element_type is ElementType.WORKER:
            queue_type = (
                PackageQueueType.FIFO if params.get("queue-type") == "FIFO" else PackageQueueType.LIFO
            )
            factory.add_worker(
                Worker(
                    _int_param(params, "id"),
                    _int_param(params, "processing-time"),
                    PackageQueue(queue_type),
                )
            )
        elif parsed.element_type is ElementType.STOREHOUSE:
            factory.add_storehouse(Storehouse(_int_param(params, "id")))
        else:
            _add_link(factory, params)
    return factory


def save_factory_structure(factory: Factory, stream: TextIO) -> None:
    """Write the factory in the text form read by load_factory_structure."""
    stream.write("; == LOADING RAMPS ==\n\n")
    for ramp in factory.ramps:
        stream.write(f"LOADING_RAMP id={ramp.id} delivery-interval={ramp.delivery_interval}\n")

    stream.write("; == WORKERS ==\n\n")
    for worker in factory.workers:
        stream.write(
            f"WORKER id={worker.id} processing-time={worker.processing_duration}"
            f" queue-type={worker.queue.queue_type.value}\n"
        )

    stream.write("; == STOREHOUSES ==\n\n")
    for storehouse in factory.storehouses:
        stream.write(f"STOREHOUSE id={storehouse.id}\n")

    stream.write("; == LINKS ==\n\n")
    for ramp in factory.ramps:
        for receiver in ramp.receiver_preferences:
            if receiver.receiver_type is ReceiverType.WORKER:
                stream.write(f"LINK src=ramp-{ramp.id} dest=worker-{receiver.id}\n")
    for worker in factory.workers:
        for receiver in worker.receiver_preferences:
            if receiver.receiver_type is ReceiverType.STOREHOUSE:
                stream.write(f"LINK src=worker-{worker.id} dest=store-{receiver.id}\n")
            elif receiver.receiver_type is ReceiverType.WORKER:
                stream.write(f"LINK src=worker-{worker.id} dest=worker-{receiver.id}\n")