"""Concurrent reservations against one item never oversell."""

import threading

from inventory import operations
from inventory.domain import inventory
from shared.errors import InsufficientStock


def _race(calls):
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def _run(index, call):
        with inventory.domain_context():
            barrier.wait()
            try:
                outcomes[index] = call()
            except Exception as exc:  # collected for assertions
                outcomes[index] = exc

    threads = [threading.Thread(target=_run, args=(i, call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    return outcomes


class TestConcurrentReservations:
    def test_two_reservations_of_six_against_ten(self, register):
        item_id = register(opening_quantity=10)

        outcomes = _race([lambda: operations.reserve_stock(item_id, 6) for _ in range(2)])

        assert sum(isinstance(o, dict) for o in outcomes) == 1
        assert sum(isinstance(o, InsufficientStock) for o in outcomes) == 1
        item = operations.get_item(item_id)
        assert (item.stock.reserved, item.stock.available) == (6, 4)

    def test_many_small_reservations_add_up(self, register):
        item_id = register(opening_quantity=10)

        outcomes = _race([lambda: operations.reserve_stock(item_id, 1) for _ in range(8)])

        assert all(isinstance(o, dict) for o in outcomes)
        item = operations.get_item(item_id)
        assert item.stock.reserved == 8
        assert item.stock.available == 2

    def test_movement_racing_reservation(self, register):
        item_id = register(opening_quantity=10)

        _race(
            [
                lambda: operations.reserve_stock(item_id, 8),
                lambda: operations.add_inventory_movement(item_id, "out", 8),
            ]
        )

        item = operations.get_item(item_id)
        assert item.stock.available >= 0
        assert item.stock.available == item.stock.current - item.stock.reserved
        assert (item.stock.current, item.stock.reserved) in ((10, 8), (2, 0))
