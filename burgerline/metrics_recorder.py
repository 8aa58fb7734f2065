import csv
import logging
import os
import threading

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())


class CompletionLog:
    """In-memory completion sink; keeps records in the order they arrive."""

    def __init__(self):
        self._lock = threading.Lock()
        self.records = []

    def record_completion(self, record):
        with self._lock:
            self.records.append(record)

    def average_wait(self) -> float:
        with self._lock:
            if not self.records:
                return 0.0
            return sum(r.wait_time for r in self.records) / len(self.records)


class MetricsRecorder:
    """
    Thread-safe CSV logger for simulation events.
    Call record_* methods from any thread (feed, admission, driver).

    Each recorder starts a fresh file unless append=True, so the graph only
    ever shows the current run.
    """

    FIELDS = [
        "sim_tick",
        "event",
        # common fields
        "customer_id",
        "station",
        "wait_time",
        "count",
        "reason",
    ]

    def __init__(self, out_dir: str = "results", filename: str = "metrics.csv", append: bool = False):
        self.out_dir = out_dir
        self.filename = filename
        self._path = os.path.join(out_dir, filename)
        os.makedirs(out_dir, exist_ok=True)

        # Write the header unless we are appending to a non-empty file
        self._lock = threading.Lock()
        new_file = not append or not os.path.exists(self._path) or os.path.getsize(self._path) == 0
        self._fh = open(self._path, "a" if append else "w", newline="", encoding="utf-8")
        self._writer = csv.DictWriter(self._fh, fieldnames=self.FIELDS)
        if new_file:
            self._writer.writeheader()
            self._fh.flush()

    @property
    def path(self) -> str:
        return self._path

    # ---------- low-level write ----------
    def _write(self, row: dict, sim_tick: int = None):
        if sim_tick is not None:
            row["sim_tick"] = sim_tick
        with self._lock:
            self._writer.writerow(row)
            self._fh.flush()

    # ---------- arrivals ----------
    def record_arrival(self, customer_id: int, station: int, sim_tick: int):
        self._write({
            "event": "arrival",
            "customer_id": customer_id,
            "station": station,
        }, sim_tick)

    # ---------- admissions ----------
    def record_completion(self, record):
        # the row is stamped with the tick the patty is done
        self._write({
            "event": "served",
            "customer_id": record.customer_id,
            "station": record.station,
            "wait_time": record.wait_time,
        }, record.finish_tick)

    # ---------- aggregate ----------
    def record_snapshot(self, snapshot, reason: str = "final"):
        self._write({
            "event": "snapshot",
            "count": snapshot.admitted,
            "wait_time": f"{snapshot.average_wait:.2f}",
            "reason": reason,
        }, snapshot.now)

    # ---------- cleanup ----------
    def close(self):
        with self._lock:
            try:
                self._fh.flush()
            finally:
                self._fh.close()

    # ---------- visualization ----------
    def generate_wait_time_graph(self):
        """Bar chart of every served customer's wait; returns the image path or None."""
        waits = {}
        with open(self._path, 'r', newline="", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                if row['event'] == 'served':
                    waits[int(row['customer_id'])] = int(row['wait_time'])

        if not waits:
            log.warning("no served customers in %s, skipping graph", self._path)
            return None

        ids = sorted(waits)
        average = sum(waits.values()) / len(waits)

        plt.figure(figsize=(10, 5))
        plt.bar([str(i) for i in ids], [waits[i] for i in ids], color='tab:orange', alpha=0.8)
        plt.axhline(average, color='black', linestyle='--', linewidth=1,
                    label=f'average {average:.1f}')
        plt.xlabel('Customer', fontsize=12)
        plt.ylabel('Wait (ticks)', fontsize=12)
        plt.title('Wait Time per Customer', fontsize=14, fontweight='bold')
        plt.legend(loc='upper left', fontsize=9)
        plt.grid(True, axis='y', alpha=0.3)
        plt.tight_layout()

        graph_path = os.path.join(self.out_dir, 'wait_time_graph.png')
        plt.savefig(graph_path, dpi=150)
        plt.close()

        log.info("wait time graph saved to %s", graph_path)
        return graph_path
