# burgerline/restaurant/restaurant.py
from __future__ import annotations
import logging
from typing import List, Optional

from burgerline.config import RestaurantConfig
from burgerline.core import GriddleClock
from burgerline.facilities.kitchen import AdmissionWorker
from burgerline.metrics_recorder import CompletionLog
from burgerline.restaurant.arrival import curve_arrivals, feed, scripted_arrivals
from burgerline.restaurant.coordinator import Coordinator, Snapshot

log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())


class Restaurant:
    """
    One closed run: every arrival is routed to a counter up front, then the
    clock thread and the admission thread run until every line is empty.
    """

    def __init__(self, cfg: RestaurantConfig, metrics=None):
        cfg.validate()
        self.cfg = cfg
        self.metrics = metrics
        self.coordinator = Coordinator(
            station_count=cfg.station_count,
            resource_capacity=cfg.resource_capacity,
            cook_duration=cfg.cook_duration,
            drain_due_slots=cfg.drain_due_slots,
        )
        self.log = CompletionLog()
        self.customers: List = []

    def arrivals(self):
        a = self.cfg.arrival
        if a.mode == "curve":
            return curve_arrivals(a.count, a.curve_points, seed=a.seed)
        return scripted_arrivals(a.count, a.spacing)

    def run(self, arrivals=None, timeout: Optional[float] = None) -> Snapshot:
        """Run to completion and return the final snapshot."""
        if arrivals is None:
            arrivals = self.arrivals()
        self.customers = feed(self.coordinator, arrivals, self.metrics)

        sinks = [self.log] + ([self.metrics] if self.metrics else [])
        clock = GriddleClock(self.coordinator, self.cfg.tick_interval_ms)
        worker = AdmissionWorker(self.coordinator, sinks=sinks, drain=True)

        clock.start()
        worker.start()
        try:
            worker.join(timeout)
        except KeyboardInterrupt:
            log.warning("interrupted, shutting down")
        finally:
            if worker.is_alive():
                log.warning("admission still running after %s s, stopping with %d customers in line",
                            timeout, self.coordinator.pending())
                worker.stop()
                worker.join()
            clock.stop()
            clock.join()
            self.coordinator.close()

        snapshot = self.coordinator.snapshot()
        if self.metrics:
            self.metrics.record_snapshot(snapshot)
        if worker.error is not None:
            raise worker.error
        if sum(snapshot.queue_lengths):
            log.warning("run stopped early at tick %d: %d served, %d never admitted",
                        snapshot.now, snapshot.admitted, sum(snapshot.queue_lengths))
        else:
            log.info("run finished at tick %d: %d admitted, average wait %.2f",
                     snapshot.now, snapshot.admitted, snapshot.average_wait)
        return snapshot
