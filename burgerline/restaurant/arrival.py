# burgerline/restaurant/arrival.py
from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from burgerline.core import Ids
from burgerline.restaurant.customer import Customer

log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

Arrival = Tuple[int, int]  # (customer id, arrival tick)


def scripted_arrivals(count: int, spacing: int = 2, start: int = 0, ids: Optional[Ids] = None) -> List[Arrival]:
    """Evenly spaced arrivals: ids 1..count at start, start+spacing, ..."""
    if count < 0 or spacing < 0 or start < 0:
        raise ValueError("count, spacing and start must be non-negative")
    ids = ids or Ids()
    return [(ids.customer(), start + i * spacing) for i in range(count)]


class ArrivalCurve:
    """
    Arrival intensity over the day, given as control points.

    - curve_points: list of {'minute': int, 'mean': float}; linear in between,
      clamped at both ends. Negative means count as zero.
    """

    def __init__(self, curve_points: Sequence[dict]):
        if not curve_points:
            raise ValueError("an arrival curve needs at least one control point")
        ordered = sorted(curve_points, key=lambda p: int(p["minute"]))
        self.minutes = np.array([int(p["minute"]) for p in ordered])
        self.means = np.array([float(p["mean"]) for p in ordered])

    def mean_at(self, minute) -> float:
        # np.interp holds the end values outside the control range
        return float(np.interp(minute, self.minutes, self.means))

    def probabilities(self) -> np.ndarray:
        """Probability of an arrival landing on each tick 0..last control point."""
        ticks = np.arange(max(int(self.minutes[-1]), 0) + 1)
        weights = np.clip(np.interp(ticks, self.minutes, self.means), 0.0, None)
        total = weights.sum()
        if total == 0:
            return np.full(len(weights), 1.0 / len(weights))
        return weights / total


def curve_arrivals(total: int, curve_points: Sequence[dict], seed: Optional[int] = None,
                   ids: Optional[Ids] = None) -> List[Arrival]:
    """Draw `total` arrival ticks following the curve; ids are handed out in arrival order."""
    if total < 0:
        raise ValueError("total must be non-negative")
    curve = ArrivalCurve(curve_points)
    probs = curve.probabilities()
    rng = np.random.default_rng(seed)
    ticks = np.sort(rng.choice(len(probs), size=total, p=probs, replace=True))
    ids = ids or Ids()
    return [(ids.customer(), int(t)) for t in ticks]


def feed(coordinator, arrivals: Iterable[Arrival], metrics=None) -> List[Customer]:
    """Route every arrival to a counter before admission starts."""
    customers = []
    for cid, tick in arrivals:
        customer = Customer(cid, tick)
        station = coordinator.enqueue(customer)
        if metrics:
            metrics.record_arrival(cid, station, tick)
        customers.append(customer)
    log.info("fed %d customers, lines=%s", len(customers), list(coordinator.queue_lengths()))
    return customers
