# burgerline/facilities/kitchen.py
# The admission side of the kitchen: one thread moving customers from the
# counters onto the griddle.

from __future__ import annotations
import logging
import threading
from typing import Iterable, Optional

from burgerline.restaurant.customer import CompletionRecord

log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())


class AdmissionWorker(threading.Thread):
    """
    Calls coordinator.admit_one() over and over and hands every
    CompletionRecord to the sinks, in admission order.

    drain=True   stop once every line is empty (closed arrival feed)
    drain=False  keep polling until stop() is called (live feed)

    An exception escaping the coordinator is a defect: it is logged, kept on
    `error`, and the loop ends so the owner can tear the simulation down.
    """

    def __init__(self, coordinator, sinks: Iterable = (), drain: bool = True,
                 idle_interval: float = 0.01, daemon=True):
        super().__init__(daemon=daemon, name="admission")
        self.coordinator = coordinator
        self.sinks = list(sinks)
        self.drain = drain
        self.idle_interval = idle_interval
        self.error: Optional[BaseException] = None
        self.admitted = 0
        self._halt = threading.Event()

    def _emit(self, record: CompletionRecord):
        self.admitted += 1
        for sink in self.sinks:
            sink.record_completion(record)

    def run(self):
        try:
            while not self._halt.is_set():
                if self.drain and self.coordinator.pending() == 0:
                    break
                records = self.coordinator.admit_one()
                for record in records:
                    self._emit(record)
                if not records:
                    if self.coordinator.closed:
                        break
                    self._halt.wait(self.idle_interval)
        except Exception as e:
            log.error("admission thread terminated: %r", e)
            self.error = e
        log.info("admission thread finished, %d customers admitted", self.admitted)

    def stop(self):
        """Stop polling and wake the thread if it is parked on a full griddle."""
        self._halt.set()
        self.coordinator.close()
