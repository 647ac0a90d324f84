"""Single-writer queue for store transactions.

``WriteQueue.run`` takes a zero-argument unit of work, waits (suspended, not
polling) until every earlier caller has finished, runs the unit in a worker
thread and hands back its result or re-raises its exception. Waiters are
served in arrival order. The queue is process-local: a multi-process
deployment needs a store-level lock instead.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

log = logging.getLogger(__name__)


class WriteQueue:
    def __init__(self) -> None:
        self._lock: Optional[asyncio.Lock] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._waiting = 0

    def _lock_for_loop(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock is None or self._loop is not loop:
            self._loop = loop
            self._lock = asyncio.Lock()
        return self._lock

    @property
    def waiting(self) -> int:
        return self._waiting

    async def run(self, work: Callable[[], T]) -> T:
        lock = self._lock_for_loop()
        self._waiting += 1
        if lock.locked():
            log.debug("write queued behind running transaction (%d waiting)", self._waiting)
        try:
            await lock.acquire()
        finally:
            self._waiting -= 1
        try:
            return await asyncio.to_thread(work)
        finally:
            lock.release()


__all__ = ["WriteQueue"]
