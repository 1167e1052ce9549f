# netsim

A small library for simulating a production network in discrete time steps.
A network is made of three kinds of nodes, all in `netsim.nodes`:

- **Ramps** (`Ramp`) put a new package into their sending buffer on turn 1
  and then every `delivery_interval` turns.
- **Workers** (`Worker`) take packages from a `PackageQueue` (FIFO or LIFO)
  and spend `processing_duration` turns on each one before moving it to the
  sending buffer.
- **Storehouses** (`Storehouse`) keep every package they receive.

Ramps and workers are `PackageSender`s. Each keeps its receivers in a
`ReceiverPreferences`, which gives every receiver the same probability and
rescales the probabilities whenever a receiver is added or removed.
`send_package()` picks a receiver at random and hands over the package in
the sending buffer.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Describing a factory

A factory structure is plain text with one element on each line. Lines that
are empty or that start with `;` are ignored.

```
; == LOADING RAMPS ==
LOADING_RAMP id=1 delivery-interval=3

; == WORKERS ==
WORKER id=1 processing-time=2 queue-type=FIFO

; == STOREHOUSES ==
STOREHOUSE id=1

; == LINKS ==
LINK src=ramp-1 dest=worker-1
LINK src=worker-1 dest=store-1
```

`LINK` lines may connect `ramp` to `worker` or `store`, and `worker` to
`worker` or `store`; links of any other kind are skipped. A worker whose
`queue-type` is not `FIFO` gets a LIFO queue.

`load_factory_structure` raises `netsim.factory.FactoryError` (a
`ValueError`) for an unknown element type, a missing or non-integer number,
or a link to a node that has not been defined. `save_factory_structure`
writes a factory back in the same form, ramps first, then workers,
storehouses and links.

## Usage

```python
import io

from netsim.factory import load_factory_structure, save_factory_structure
from netsim.reports import generate_structure_report, generate_simulation_turn_report

with open("factory.txt") as stream:
    factory = load_factory_structure(stream)

if not factory.is_consistent():
    raise SystemExit("the network is not consistent")

out = io.StringIO()
generate_structure_report(factory, out)
print(out.getvalue())

for t in range(1, 11):
    factory.do_deliveries(t)
    factory.do_package_passing()
    factory.do_work(t)

    out = io.StringIO()
    generate_simulation_turn_report(factory, out, t)
    print(out.getvalue())

with open("factory-copy.txt", "w") as stream:
    save_factory_structure(factory, stream)
```

`Factory.is_consistent()` walks the network from every ramp and returns
`False` if some sender it reaches has no receivers, or has no receiver other
than itself.

A factory can also be built in code:

```python
from netsim.factory import Factory
from netsim.nodes import Ramp, Storehouse, Worker
from netsim.storage_types import PackageQueue, PackageQueueType

factory = Factory()
factory.add_ramp(Ramp(1, 1))
factory.add_worker(Worker(1, 2, PackageQueue(PackageQueueType.FIFO)))
factory.add_storehouse(Storehouse(1))

factory.find_ramp_by_id(1).receiver_preferences.add_receiver(factory.find_worker_by_id(1))
factory.find_worker_by_id(1).receiver_preferences.add_receiver(factory.find_storehouse_by_id(1))

assert factory.is_consistent()
```

Removing a worker or storehouse with `remove_worker` or `remove_storehouse`
also unlinks it from every ramp and worker.

## Reports

`netsim.reports` writes plain-text reports to any text stream:

- `generate_structure_report(factory, stream)` lists ramps, workers and
  storehouses sorted by ID, with each sender's receivers (storehouses before
  workers).
- `generate_simulation_turn_report(factory, stream, t)` shows, for turn `t`,
  each worker's processing buffer, queue and sending buffer, and each
  storehouse's stock.
- `write_receivers(preferences, stream)` writes the receiver lines on their own.

## Package identifiers

Each `Package` takes an identifier from an `IdPool` (by default a shared
module-level pool). A new package gets the smallest freed identifier if
there is one, and otherwise one more than the largest identifier in use,
starting at 1. `Package.release()` hands the identifier back to the pool and
`IdPool.reset()` forgets every identifier.

## What it does not do

There is no command-line program and no ready-made simulation loop: you run
the turns yourself by calling `do_deliveries`, `do_package_passing` and
`do_work` as shown above, and decide yourself on which turns to write
reports. Nothing is stored between runs beyond the text files you save.