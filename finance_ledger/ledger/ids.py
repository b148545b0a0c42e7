"""Transaction id generation."""

import time
from typing import Callable, Optional


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class MonotonicIdGenerator:
    """
    Issues strictly increasing integer ids.

    Ids look like millisecond timestamps, but two ids issued in the same
    millisecond still differ: each id is max(now, last + 1).
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None, floor: int = 0):
        self._clock = clock or _now_ms
        self._last = floor

    @property
    def last_issued(self) -> int:
        return self._last

    def observe(self, transaction_id: int) -> None:
        """Make sure future ids are greater than ``transaction_id``."""
        if transaction_id > self._last:
            self._last = transaction_id

    def next_id(self) -> int:
        candidate = max(self._clock(), self._last + 1)
        self._last = candidate
        return candidate
