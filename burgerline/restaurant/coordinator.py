# burgerline/restaurant/coordinator.py
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from burgerline.errors import ConfigurationError
from burgerline.facilities.griddle import Griddle
from burgerline.facilities.queues import OrderQueue
from burgerline.restaurant.customer import CompletionRecord, Customer
from burgerline.restaurant.strategies import ShortestLineStrategy, StationChoiceStrategy

log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class Snapshot:
    now: int
    occupied: int
    capacity: int
    peak_occupied: int
    queue_lengths: Tuple[int, ...]
    admitted: int
    total_wait: int
    average_wait: float
    max_wait: int
    p90_wait: float
    throughput: float   # admissions per elapsed tick


def _require_positive(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        errmsg = f"{name} must be a positive integer, got {value!r}"
        log.error(errmsg)
        raise ConfigurationError(errmsg)


class Coordinator:
    """
    Owns the counters' lines, the griddle and the simulated clock.

    Every piece of mutable state sits behind one lock. Two threads talk to it:
      - the clock thread calls advance_clock() once per tick; it is the only
        caller that moves time forward and frees griddle slots.
      - the admission thread calls admit_one(); it is the only caller that
        takes customers out of a line and reserves slots. When the griddle is
        full it parks on the `space` condition (releasing the lock) until the
        clock thread frees a slot.

    State machine of the griddle seen from here:
        HAS_SPACE --reserve fills last slot--> FULL
        FULL --release while at capacity--> HAS_SPACE (all waiters woken)
    """

    def __init__(self, station_count: int, resource_capacity: int, cook_duration: int,
                 strategy: Optional[StationChoiceStrategy] = None, drain_due_slots: bool = False):
        _require_positive("station_count", station_count)
        _require_positive("resource_capacity", resource_capacity)
        _require_positive("cook_duration", cook_duration)

        self._queues: List[OrderQueue] = [OrderQueue(i) for i in range(station_count)]
        self._griddle = Griddle(resource_capacity)
        self._cook_duration = cook_duration
        self._strategy = strategy or ShortestLineStrategy()
        self._drain_due_slots = drain_due_slots

        self._now = 0
        self._records: List[CompletionRecord] = []
        self._waiting = 0
        self._closed = False

        self._lock = threading.Lock()                 # protects everything above
        self._space = threading.Condition(self._lock)  # griddle went from FULL to HAS_SPACE, or close()

    # ----------------------- Query helpers -----------------------

    @property
    def station_count(self) -> int:
        return len(self._queues)

    @property
    def cook_duration(self) -> int:
        return self._cook_duration

    @property
    def now(self) -> int:
        with self._lock:
            return self._now

    @property
    def waiting(self) -> int:
        """Number of admission threads currently parked on a full griddle."""
        with self._lock:
            return self._waiting

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def pending(self) -> int:
        """Customers still standing in some line."""
        with self._lock:
            return sum(q.length() for q in self._queues)

    def queue_lengths(self) -> Tuple[int, ...]:
        with self._lock:
            return tuple(q.length() for q in self._queues)

    def completions(self) -> Tuple[CompletionRecord, ...]:
        """Every record emitted so far, in admission order."""
        with self._lock:
            return tuple(self._records)

    def snapshot(self) -> Snapshot:
        with self._lock:
            waits = [r.wait_time for r in self._records]
            total = sum(waits)
            admitted = len(waits)
            return Snapshot(
                now=self._now,
                occupied=self._griddle.occupied,
                capacity=self._griddle.capacity,
                peak_occupied=self._griddle.peak_occupied,
                queue_lengths=tuple(q.length() for q in self._queues),
                admitted=admitted,
                total_wait=total,
                average_wait=total / admitted if admitted else 0.0,
                max_wait=max(waits) if waits else 0,
                p90_wait=float(np.percentile(waits, 90)) if waits else 0.0,
                throughput=admitted / self._now if self._now else 0.0,
            )

    # ----------------------- Routing -----------------------

    def enqueue(self, customer: Customer) -> int:
        """Route an arrival to the shortest line; returns the chosen station."""
        with self._lock:
            lengths = [q.length() for q in self._queues]
            station = self._strategy.select(lengths)
            self._queues[station].push(customer)
            log.debug("customer %s (arrived %d) -> counter %d, lines=%s",
                      customer.cid, customer.arrival_tick, station, lengths)
            return station

    # ----------------------- Admission -----------------------

    def admit_one(self) -> List[CompletionRecord]:
        """
        One pass over the counters in index order, admitting at most one
        customer from each non-empty line. Blocks while the griddle is full.
        Returns the records produced by this pass, in admission order.
        """
        admitted: List[CompletionRecord] = []
        with self._lock:
            if self._closed:
                return admitted
            for queue in self._queues:
                customer = queue.pop_front()
                if customer is None:
                    continue
                if not self._wait_for_space():
                    # shut down while parked: the customer keeps their place
                    queue.push_front(customer)
                    log.info("admission cancelled at tick %d; customer %s returned to counter %d",
                             self._now, customer.cid, queue.station)
                    break
                admitted.append(self._admit(customer, queue.station))
        return admitted

    def _wait_for_space(self) -> bool:
        # lock held by caller; Condition.wait_for re-checks the predicate on every wake
        self._waiting += 1
        try:
            self._space.wait_for(lambda: self._closed or not self._griddle.is_full())
        finally:
            self._waiting -= 1
        return not self._closed

    def _admit(self, customer: Customer, station: int) -> CompletionRecord:
        earliest = self._griddle.earliest_completion()
        if earliest is None:
            earliest = 0
        finish_tick = max(earliest, customer.arrival_tick) + self._cook_duration
        self._griddle.reserve(finish_tick)

        customer.assign_wait(finish_tick + 1 - customer.arrival_tick)
        record = CompletionRecord(
            customer_id=customer.cid,
            wait_time=customer.wait_time,
            station=station,
            finish_tick=finish_tick,
        )
        self._records.append(record)
        log.debug("[tick %d] customer %s admitted from counter %d, done at %d, wait %d",
                  self._now, customer.cid, station, finish_tick, record.wait_time)
        return record

    # ----------------------- Clock -----------------------

    def advance_clock(self) -> bool:
        """Move time forward one tick and free a finished slot; returns True if one was freed."""
        with self._lock:
            self._now += 1
            if self._drain_due_slots:
                released = self._griddle.release_all_due(self._now) > 0
            else:
                released = self._griddle.release_if_due(self._now)
            if released:
                log.debug("[tick %d] griddle slot freed, occupied=%d",
                          self._now, self._griddle.occupied)
                self._space.notify_all()
            return released

    # ----------------------- Shutdown -----------------------

    def close(self) -> None:
        """Stop admitting; wakes every parked admission thread so it can return."""
        with self._lock:
            self._closed = True
            self._space.notify_all()
            log.info("coordinator closed at tick %d", self._now)

    def __repr__(self) -> str:
        return (
            f"Coordinator(now={self._now}, "
            f"lines={[q.length() for q in self._queues]}, "
            f"griddle={self._griddle!r})"
        )
