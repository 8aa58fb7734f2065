# burgerline/core.py
import logging
import threading

log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# ---------- Clock (drives simulated time) ----------
class GriddleClock(threading.Thread):
    """
    Clock thread for the restaurant.
    - tick_interval_ms: real milliseconds between two simulated ticks
    - max_ticks: optional hard stop (None = run until stop() is called)

    Each tick calls coordinator.advance_clock(), which is where finished
    patties come off the griddle. The stop signal is checked once per tick.
    """

    def __init__(self, coordinator, tick_interval_ms: float = 60000, max_ticks=None):
        super().__init__(daemon=True, name="griddle-clock")
        self.coordinator = coordinator
        self._interval = max(tick_interval_ms, 0.001) / 1000.0  # prevent zero or negative
        self._max_ticks = max_ticks
        self._halt = threading.Event()
        self.ticks = 0

    def run(self):
        log.info("clock started, %.3fs per tick", self._interval)
        while not self._halt.wait(self._interval):
            self.coordinator.advance_clock()
            self.ticks += 1
            if self._max_ticks is not None and self.ticks >= self._max_ticks:
                break
        log.info("clock stopped after %d ticks", self.ticks)

    def stop(self):
        """Ask the clock to stop at the next tick boundary."""
        self._halt.set()

    def should_stop(self) -> bool:
        return self._halt.is_set()

# ---------- Ids ----------
class Ids:
    """Simple id generator for customers."""

    def __init__(self, start: int = 0):
        self._last = start
        self._lock = threading.Lock()

    def customer(self) -> int:
        with self._lock:
            self._last += 1
            return self._last
