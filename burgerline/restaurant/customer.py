# burgerline/restaurant/customer.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional

from burgerline.errors import InvariantViolation

log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())


@dataclass
class Customer:
    cid: int
    arrival_tick: int
    _wait_time: Optional[int] = field(default=None, repr=False)

    def __post_init__(self):
        tick = self.arrival_tick
        if isinstance(tick, bool) or not isinstance(tick, int) or tick < 0:
            raise ValueError(f"customer {self.cid}: arrival tick must be a non-negative integer, got {tick!r}")

    @property
    def wait_time(self) -> Optional[int]:
        """None until the customer has been admitted to the griddle."""
        return self._wait_time

    @property
    def admitted(self) -> bool:
        return self._wait_time is not None

    def assign_wait(self, wait: int) -> None:
        # set exactly once, on admission
        if self._wait_time is not None:
            errmsg = f"customer {self.cid} admitted twice (wait already {self._wait_time})"
            log.error(errmsg)
            raise InvariantViolation(errmsg)
        self._wait_time = wait


@dataclass(frozen=True)
class CompletionRecord:
    """What the outside world sees of one admission."""
    customer_id: int
    wait_time: int
    station: int
    finish_tick: int
