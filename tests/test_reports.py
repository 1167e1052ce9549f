import io

import pytest

from netsim.factory import Factory
from netsim.nodes import Ramp, ReceiverPreferences, Storehouse, Worker
from netsim.package import DEFAULT_POOL, Package
from netsim.reports import (
    generate_simulation_turn_report,
    generate_structure_report,
    write_receivers,
)
from netsim.storage_types import PackageQueue, PackageQueueType

EMPTY = "(empty)"


@pytest.fixture(autouse=True)
def fresh_id_pool():
    DEFAULT_POOL.reset()
    yield
    DEFAULT_POOL.reset()


def _structure_lines(factory: Factory) -> list[str]:
    out = io.StringIO()
    generate_structure_report(factory, out)
    return out.getvalue().splitlines()


def _turn_lines(factory: Factory, t: int) -> list[str]:
    out = io.StringIO()
    generate_simulation_turn_report(factory, out, t)
    return out.getvalue().splitlines()


def _fifo() -> PackageQueue:
    return PackageQueue(PackageQueueType.FIFO)


def _r_w_s_factory(delivery_interval: int, processing_time: int) -> Factory:
    factory = Factory()
    factory.add_ramp(Ramp(1, delivery_interval))
    factory.add_worker(Worker(1, processing_time, _fifo()))
    factory.add_storehouse(Storehouse(1))
    factory.find_ramp_by_id(1).receiver_preferences.add_receiver(factory.find_worker_by_id(1))
    factory.find_worker_by_id(1).receiver_preferences.add_receiver(
        factory.find_storehouse_by_id(1)
    )
    return factory


# Builders for the expected text, one block per node.

def _heading(title: str) -> list[str]:
    return ["", f"== {title} ==", ""]


def _receivers(names: list[str]) -> list[str]:
    return ["  Receivers:", *(f"    {name}" for name in names)]


def _ramp_entry(node_id: int, interval: int, receivers: list[str]) -> list[str]:
    return [f"LOADING RAMP #{node_id}", f"  Delivery interval: {interval}",
            *_receivers(receivers), ""]


def _worker_entry(node_id: int, ptime: int, kind: str, receivers: list[str]) -> list[str]:
    return [f"WORKER #{node_id}", f"  Processing time: {ptime}", f"  Queue type: {kind}",
            *_receivers(receivers), ""]


def _store_entry(node_id: int) -> list[str]:
    return [f"STOREHOUSE #{node_id}", ""]


def _turn_header(t: int) -> list[str]:
    return [f"=== [ Turn: {t} ] ==="]


def _worker_state(node_id: int, pbuffer: str, queue: str, sbuffer: str) -> list[str]:
    return [f"WORKER #{node_id}", f"  PBuffer: {pbuffer}", f"  Queue: {queue}",
            f"  SBuffer: {sbuffer}", ""]


def _store_state(node_id: int, stock: str) -> list[str]:
    return [f"STOREHOUSE #{node_id}", f"  Stock: {stock}", ""]


def _single_chain_turn(t: int, pbuffer: str, queue: str, sbuffer: str) -> list[str]:
    return (_turn_header(t)
            + _heading("WORKERS") + _worker_state(1, pbuffer, queue, sbuffer)
            + _heading("STOREHOUSES") + _store_state(1, EMPTY))


def test_structure_report_r1w1s1():
    factory = _r_w_s_factory(1, 1)
    expected = (_heading("LOADING RAMPS") + _ramp_entry(1, 1, ["worker #1"])
                + _heading("WORKERS") + _worker_entry(1, 1, "FIFO", ["storehouse #1"])
                + _heading("STOREHOUSES") + _store_entry(1))
    assert _structure_lines(factory) == expected


def test_structure_report_r2w2s2():
    factory = Factory()
    factory.add_ramp(Ramp(1, 1))
    factory.add_ramp(Ramp(2, 2))
    factory.add_worker(Worker(1, 1, _fifo()))
    factory.add_worker(Worker(2, 2, PackageQueue(PackageQueueType.LIFO)))
    factory.add_storehouse(Storehouse(1))
    factory.add_storehouse(Storehouse(2))

    w1 = factory.find_worker_by_id(1)
    w2 = factory.find_worker_by_id(2)
    s1 = factory.find_storehouse_by_id(1)
    s2 = factory.find_storehouse_by_id(2)

    factory.find_ramp_by_id(1).receiver_preferences.add_receiver(w1)
    r2 = factory.find_ramp_by_id(2)
    r2.receiver_preferences.add_receiver(w1)
    r2.receiver_preferences.add_receiver(w2)
    w1.receiver_preferences.add_receiver(s1)
    w2.receiver_preferences.add_receiver(s1)
    w2.receiver_preferences.add_receiver(s2)

    expected = (_heading("LOADING RAMPS")
                + _ramp_entry(1, 1, ["worker #1"])
                + _ramp_entry(2, 2, ["worker #1", "worker #2"])
                + _heading("WORKERS")
                + _worker_entry(1, 1, "FIFO", ["storehouse #1"])
                + _worker_entry(2, 2, "LIFO", ["storehouse #1", "storehouse #2"])
                + _heading("STOREHOUSES")
                + _store_entry(1) + _store_entry(2))
    assert _structure_lines(factory) == expected


def test_structure_report_exact_first_lines():
    factory = _r_w_s_factory(1, 1)
    assert _structure_lines(factory)[:4] == ["", "== LOADING RAMPS ==", "", "LOADING RAMP #1"]


def test_structure_report_sorts_nodes_by_id():
    factory = Factory()
    factory.add_storehouse(Storehouse(5))
    factory.add_storehouse(Storehouse(2))
    lines = _structure_lines(factory)
    assert lines.index("STOREHOUSE #2") < lines.index("STOREHOUSE #5")


def test_turn_report_no_packages():
    factory = _r_w_s_factory(10, 1)
    assert _turn_lines(factory, 1) == _single_chain_turn(1, EMPTY, EMPTY, EMPTY)


def test_turn_report_package_in_processing_buffer():
    factory = _r_w_s_factory(10, 2)
    r = factory.find_ramp_by_id(1)
    w = factory.find_worker_by_id(1)
    t = 1
    r.deliver_goods(t)
    r.send_package()
    w.do_work(t)
    assert _turn_lines(factory, t) == _single_chain_turn(t, "#1 (pt = 1)", EMPTY, EMPTY)


def test_turn_report_package_in_queue():
    factory = _r_w_s_factory(10, 2)
    r = factory.find_ramp_by_id(1)
    t = 1
    r.deliver_goods(t)
    r.send_package()
    assert _turn_lines(factory, t) == _single_chain_turn(t, EMPTY, "#1", EMPTY)


def test_turn_report_package_in_sending_buffer():
    factory = _r_w_s_factory(10, 1)
    r = factory.find_ramp_by_id(1)
    w = factory.find_worker_by_id(1)
    t = 1
    r.deliver_goods(t)
    r.send_package()
    w.do_work(t)
    assert _turn_lines(factory, t) == _single_chain_turn(t, EMPTY, EMPTY, "#1")


def test_turn_report_package_in_stock():
    factory = Factory()
    factory.add_ramp(Ramp(1, 10))
    factory.add_storehouse(Storehouse(1))
    r = factory.find_ramp_by_id(1)
    r.receiver_preferences.add_receiver(factory.find_storehouse_by_id(1))
    t = 1
    r.deliver_goods(t)
    r.send_package()

    expected = (_turn_header(t) + _heading("WORKERS")
                + _heading("STOREHOUSES") + _store_state(1, "#1"))
    assert _turn_lines(factory, t) == expected


def test_turn_report_exact_text_start():
    factory = _r_w_s_factory(10, 1)
    out = io.StringIO()
    generate_simulation_turn_report(factory, out, 1)
    assert out.getvalue().startswith("=== [ Turn: 1 ] ===\n\n== WORKERS ==\n")


def test_turn_report_lists_queue_in_order():
    factory = _r_w_s_factory(10, 2)
    w = factory.find_worker_by_id(1)
    w.receive_package(Package(3))
    w.receive_package(Package(7))
    lines = _turn_lines(factory, 4)
    assert "  Queue: #3, #7" in lines
    assert lines[0] == "=== [ Turn: 4 ] ==="


def test_write_receivers_puts_storehouses_first_sorted_by_id():
    prefs = ReceiverPreferences()
    prefs.add_receiver(Worker(2, 1, _fifo()))
    prefs.add_receiver(Storehouse(3))
    prefs.add_receiver(Worker(1, 1, _fifo()))
    prefs.add_receiver(Storehouse(1))
    out = io.StringIO()
    write_receivers(prefs, out)
    assert out.getvalue() == (
        "\n    storehouse #1"
        "\n    storehouse #3"
        "\n    worker #1"
        "\n    worker #2"
    )


def test_write_receivers_with_no_receivers_writes_nothing():
    out = io.StringIO()
    write_receivers(ReceiverPreferences(), out)
    assert out.getvalue() == ""