# burgerline/facilities/queues.py
from __future__ import annotations
from collections import deque
from typing import Deque, Optional

from burgerline.restaurant.customer import Customer

class OrderQueue:
    """
    FIFO line in front of one counter.

    Not thread-safe on purpose: the Coordinator is the only owner and
    touches it while holding its own lock.

    Router side:       q.push(customer)
    Admission side:    customer = q.pop_front()   # None when nobody is waiting
    """

    def __init__(self, station: int):
        self.station = station
        self._line: Deque[Customer] = deque()

    # ---------- basic info ----------
    def length(self) -> int:
        return len(self._line)

    def __len__(self) -> int:
        return len(self._line)

    # ---------- producers ----------
    def push(self, customer: Customer) -> None:
        self._line.append(customer)

    def push_front(self, customer: Customer) -> None:
        """Put a customer back at the head of the line (admission was cancelled)."""
        self._line.appendleft(customer)

    # ---------- consumers ----------
    def pop_front(self) -> Optional[Customer]:
        if not self._line:
            return None
        return self._line.popleft()

    def __repr__(self) -> str:
        return f"OrderQueue(station={self.station}, waiting={[c.cid for c in self._line]})"
