"""
Per owner-day write serialization.

Overlap check and write must not interleave with another writer on the same
(owner, date); naive check-then-insert has a race window.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Tuple

from ..errors import ScheduleBusyError

LOCK_TIMEOUT_SECONDS = 10.0


class DayLockRegistry:
    def __init__(self, timeout: float = LOCK_TIMEOUT_SECONDS):
        self.timeout = timeout
        self._guard = threading.Lock()
        self._locks: Dict[Tuple[int, str], threading.Lock] = {}

    def lock_for(self, owner_id: int, date: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault((owner_id, date), threading.Lock())

    @contextmanager
    def hold(self, owner_id: int, *dates: str) -> Iterator[None]:
        """
        Hold the locks of every given date for this owner. Dates are taken in
        sorted order so two writers moving sessions between the same days
        cannot deadlock.
        """
        acquired = []
        try:
            for date in sorted(set(dates)):
                lock = self.lock_for(owner_id, date)
                if not lock.acquire(timeout=self.timeout):
                    raise ScheduleBusyError(f"Schedule for {date} is busy, try again")
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
