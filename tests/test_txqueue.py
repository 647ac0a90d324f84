from __future__ import annotations

import asyncio
import threading
import time

import pytest

from riasec_core.txqueue import WriteQueue


def test_units_run_one_at_a_time_in_arrival_order():
    queue = WriteQueue()
    order: list[int] = []
    active = {"now": 0, "max": 0}
    guard = threading.Lock()

    def unit(n: int):
        def work():
            with guard:
                active["now"] += 1
                active["max"] = max(active["max"], active["now"])
            time.sleep(0.01)
            order.append(n)
            with guard:
                active["now"] -= 1
            return n
        return work

    async def _all():
        return await asyncio.gather(*(queue.run(unit(n)) for n in range(5)))

    assert asyncio.run(_all()) == [0, 1, 2, 3, 4]
    assert order == [0, 1, 2, 3, 4]
    assert active["max"] == 1
    assert queue.waiting == 0


def test_failure_releases_queue_for_next_unit():
    queue = WriteQueue()

    def bad():
        raise RuntimeError("boom")

    async def _pair():
        return await asyncio.gather(queue.run(bad), queue.run(lambda: "ok"), return_exceptions=True)

    first, second = asyncio.run(_pair())
    assert isinstance(first, RuntimeError)
    assert second == "ok"


def test_queue_survives_a_new_event_loop():
    queue = WriteQueue()
    assert asyncio.run(queue.run(lambda: 1)) == 1
    assert asyncio.run(queue.run(lambda: 2)) == 2


def test_exception_propagates_to_caller():
    queue = WriteQueue()

    def bad():
        raise ValueError("nope")

    with pytest.raises(ValueError, match="nope"):
        asyncio.run(queue.run(bad))
