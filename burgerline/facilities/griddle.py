# burgerline/facilities/griddle.py
from __future__ import annotations
import heapq
import logging
from typing import List, Optional

from burgerline.errors import ConfigurationError, InvariantViolation

log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())


class Griddle:
    """
    Fixed number of cooking slots shared by every counter.

    Each occupied slot holds the tick at which its patty is done. The ticks
    live in a min-heap so the next slot to free up is always at the top.

    Invariants:
      - occupied == len(pending ticks)
      - 0 <= occupied <= capacity
    """

    def __init__(self, capacity: int):
        if not isinstance(capacity, int) or capacity < 1:
            errmsg = f"griddle capacity must be a positive integer, got {capacity!r}"
            log.error(errmsg)
            raise ConfigurationError(errmsg)
        self._capacity = capacity
        self._cook_ticks: List[int] = []
        self._peak = 0

    # ----------------------- Query helpers -----------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def occupied(self) -> int:
        return len(self._cook_ticks)

    @property
    def free_slots(self) -> int:
        return self._capacity - len(self._cook_ticks)

    @property
    def peak_occupied(self) -> int:
        """Highest number of slots ever held at once."""
        return self._peak

    def is_full(self) -> bool:
        return len(self._cook_ticks) == self._capacity

    def earliest_completion(self) -> Optional[int]:
        """Tick at which the next slot frees up, or None when the griddle is empty."""
        if not self._cook_ticks:
            return None
        return self._cook_ticks[0]

    # ----------------------- Core operations -----------------------

    def reserve(self, completion_tick: int) -> None:
        if self.is_full():
            errmsg = f"reserve({completion_tick}) on a full griddle {self!r}"
            log.error(errmsg)
            raise InvariantViolation(errmsg)
        if completion_tick < 0:
            errmsg = f"completion tick must be non-negative, got {completion_tick}"
            log.error(errmsg)
            raise InvariantViolation(errmsg)
        heapq.heappush(self._cook_ticks, completion_tick)
        self._peak = max(self._peak, len(self._cook_ticks))

    def release_if_due(self, current_tick: int) -> bool:
        """
        Free the single earliest slot if it is done by current_tick.
        At most one slot per call, even if several are due.
        """
        if self._cook_ticks and self._cook_ticks[0] <= current_tick:
            heapq.heappop(self._cook_ticks)
            return True
        return False

    def release_all_due(self, current_tick: int) -> int:
        """Drain every slot that is done by current_tick; returns how many were freed."""
        freed = 0
        while self.release_if_due(current_tick):
            freed += 1
        return freed

    def __repr__(self) -> str:
        return (
            f"Griddle(capacity={self._capacity}, "
            f"occupied={self.occupied}, "
            f"cook_ticks={sorted(self._cook_ticks)})"
        )
