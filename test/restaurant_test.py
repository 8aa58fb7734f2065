"""
test/restaurant_test.py

Configuration loading, arrival feeds, the CSV recorder and full threaded runs
with a real clock thread.
"""

import csv
import logging
from pathlib import Path

import pytest
import yaml

from burgerline.config import RestaurantConfig, load_config
from burgerline.core import GriddleClock, Ids
from burgerline.errors import ConfigurationError
from burgerline.metrics_recorder import MetricsRecorder
from burgerline.restaurant.arrival import ArrivalCurve, curve_arrivals, scripted_arrivals
from burgerline.restaurant.coordinator import Coordinator
from burgerline.restaurant.customer import CompletionRecord
from burgerline.restaurant.restaurant import Restaurant


SHIPPED_CONFIG = Path(__file__).resolve().parent.parent / "Config" / "restaurant.yaml"
CURVE = [{"minute": 0, "mean": 1.0}, {"minute": 10, "mean": 3.0}, {"minute": 20, "mean": 0.0}]


@pytest.fixture
def fast_cfg():
    return RestaurantConfig(tick_interval_ms=1, metrics={"enabled": False})


def write_yaml(tmp_path, data):
    path = tmp_path / "restaurant.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


# ── Configuration ─────────────────────────────────────────────────────────────

class TestConfig:

    def test_defaults_three_counters_four_patties(self):
        cfg = RestaurantConfig()
        assert (cfg.station_count, cfg.resource_capacity, cfg.cook_duration) == (3, 4, 10)
        assert cfg.drain_due_slots is False
        assert cfg.arrival.mode == "scripted"

    def test_load_yaml(self, tmp_path):
        path = write_yaml(tmp_path, {
            "station_count": 2,
            "resource_capacity": 3,
            "cook_duration": 5,
            "tick_interval_ms": 1,
            "arrival": {"mode": "curve", "count": 7, "curve_points": CURVE, "seed": 3},
            "metrics": {"enabled": False},
        })
        cfg = load_config(path)
        assert cfg.station_count == 2
        assert cfg.arrival.count == 7
        assert cfg.arrival.curve_points == CURVE
        assert cfg.metrics.enabled is False

    def test_shipped_config_loads(self):
        cfg = load_config(str(SHIPPED_CONFIG))
        assert cfg.station_count == 3

    @pytest.mark.parametrize("overrides", [
        {"station_count": 0},
        {"resource_capacity": -2},
        {"cook_duration": 0},
        {"cook_duration": "10"},
        {"tick_interval_ms": 0},
        {"griddles": 2},
        {"arrival": {"mode": "poisson"}},
        {"arrival": {"mode": "curve"}},
        {"arrival": {"bogus": 1}},
        {"arrival": {"spacing": 0.5}},
        {"arrival": {"count": 2.5}},
        {"arrival": {"count": True}},
    ])
    def test_rejected(self, tmp_path, overrides):
        with pytest.raises(ConfigurationError):
            load_config(write_yaml(tmp_path, overrides))

    def test_fractional_arrivals_rejected_at_construction(self):
        with pytest.raises(ConfigurationError):
            RestaurantConfig(arrival={"count": 4, "spacing": 0.5})
        with pytest.raises(ConfigurationError):
            RestaurantConfig(arrival={"count": 2.5})


# ── Arrivals ──────────────────────────────────────────────────────────────────

class TestArrivals:

    def test_scripted(self):
        assert scripted_arrivals(4, 2) == [(1, 0), (2, 2), (3, 4), (4, 6)]

    def test_scripted_shares_ids(self):
        ids = Ids()
        scripted_arrivals(2, 1, ids=ids)
        assert scripted_arrivals(1, 1, start=5, ids=ids) == [(3, 5)]

    def test_curve_interpolation(self):
        curve = ArrivalCurve(CURVE)
        assert curve.mean_at(-5) == 1.0
        assert curve.mean_at(5) == pytest.approx(2.0)
        assert curve.mean_at(15) == pytest.approx(1.5)
        assert curve.mean_at(99) == 0.0
        assert curve.probabilities().sum() == pytest.approx(1.0)

    def test_curve_arrivals_sorted_and_seeded(self):
        a = curve_arrivals(50, CURVE, seed=11)
        b = curve_arrivals(50, CURVE, seed=11)
        assert a == b
        ticks = [t for _, t in a]
        assert ticks == sorted(ticks)
        assert all(0 <= t <= 20 for t in ticks)
        assert [cid for cid, _ in a] == list(range(1, 51))


# ── Clock thread ──────────────────────────────────────────────────────────────

class TestGriddleClock:

    def test_max_ticks(self):
        coord = Coordinator(1, 1, 1)
        clock = GriddleClock(coord, tick_interval_ms=1, max_ticks=5)
        clock.start()
        clock.join(timeout=5)
        assert not clock.is_alive()
        assert coord.now == 5

    def test_stop(self):
        coord = Coordinator(1, 1, 1)
        clock = GriddleClock(coord, tick_interval_ms=1)
        clock.start()
        clock.stop()
        clock.join(timeout=5)
        assert not clock.is_alive()
        assert clock.should_stop()


# ── Full runs ─────────────────────────────────────────────────────────────────

class TestRestaurant:

    def test_scripted_run(self, fast_cfg):
        restaurant = Restaurant(fast_cfg)
        snap = restaurant.run(timeout=30)

        records = restaurant.log.records
        arrival = {c.cid: c.arrival_tick for c in restaurant.customers}
        assert sorted(r.customer_id for r in records) == list(range(1, 11))
        for r in records:
            assert r.wait_time == r.finish_tick + 1 - arrival[r.customer_id]
            assert r.finish_tick >= arrival[r.customer_id] + fast_cfg.cook_duration
        assert snap.admitted == 10
        assert snap.peak_occupied <= 4
        assert snap.queue_lengths == (0, 0, 0)
        assert snap.average_wait == pytest.approx(restaurant.log.average_wait())
        assert restaurant.coordinator.closed

    def test_drain_policy_run(self):
        cfg = RestaurantConfig(tick_interval_ms=1, drain_due_slots=True, metrics={"enabled": False})
        snap = Restaurant(cfg).run(timeout=30)
        assert snap.admitted == 10
        assert snap.peak_occupied <= 4

    def test_curve_run(self):
        cfg = RestaurantConfig(
            station_count=2, resource_capacity=2, cook_duration=3, tick_interval_ms=1,
            arrival={"mode": "curve", "count": 12, "curve_points": CURVE, "seed": 5},
            metrics={"enabled": False},
        )
        snap = Restaurant(cfg).run(timeout=30)
        assert snap.admitted == 12
        assert snap.peak_occupied <= 2

    def test_explicit_arrivals(self, fast_cfg):
        snap = Restaurant(fast_cfg).run(arrivals=[(7, 0)], timeout=30)
        assert snap.admitted == 1
        assert snap.total_wait == 11

    def test_metrics_written(self, fast_cfg, tmp_path):
        metrics = MetricsRecorder(out_dir=str(tmp_path), filename="run.csv")
        Restaurant(fast_cfg, metrics).run(timeout=30)
        metrics.close()

        with open(metrics.path, newline="") as f:
            rows = list(csv.DictReader(f))
        events = [row["event"] for row in rows]
        assert events.count("arrival") == 10
        assert events.count("served") == 10
        assert events[-1] == "snapshot"

        graph = metrics.generate_wait_time_graph()
        assert graph is not None
        assert (tmp_path / "wait_time_graph.png").exists()

    def test_timeout_warns_and_leaves_customers_in_line(self, caplog):
        # a one-minute tick never frees a slot before the timeout
        cfg = RestaurantConfig(tick_interval_ms=60000, metrics={"enabled": False})
        restaurant = Restaurant(cfg)
        with caplog.at_level(logging.WARNING, logger="burgerline.restaurant.restaurant"):
            snap = restaurant.run(timeout=0.2)

        assert snap.admitted == 4
        assert sum(snap.queue_lengths) == 6
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert any("admission still running" in m for m in warnings)
        assert any("6 never admitted" in m for m in warnings)


# ── Recorder ──────────────────────────────────────────────────────────────────

class TestMetricsRecorder:

    def test_empty_graph_skipped(self, tmp_path):
        metrics = MetricsRecorder(out_dir=str(tmp_path))
        metrics.close()
        assert metrics.generate_wait_time_graph() is None

    def test_header_written_once_when_appending(self, tmp_path):
        for _ in range(2):
            MetricsRecorder(out_dir=str(tmp_path), append=True).close()
        with open(tmp_path / "metrics.csv") as f:
            lines = f.read().splitlines()
        assert lines == [",".join(MetricsRecorder.FIELDS)]

    def test_each_run_starts_a_fresh_file(self, tmp_path):
        first = MetricsRecorder(out_dir=str(tmp_path))
        first.record_completion(CompletionRecord(customer_id=1, wait_time=5, station=0, finish_tick=9))
        first.close()
        second = MetricsRecorder(out_dir=str(tmp_path))
        second.record_completion(CompletionRecord(customer_id=2, wait_time=7, station=1, finish_tick=12))
        second.close()

        with open(second.path, newline="") as f:
            served = [row["customer_id"] for row in csv.DictReader(f) if row["event"] == "served"]
        assert served == ["2"]

    def test_append_keeps_earlier_runs(self, tmp_path):
        for cid in (1, 2):
            metrics = MetricsRecorder(out_dir=str(tmp_path), append=True)
            metrics.record_completion(CompletionRecord(customer_id=cid, wait_time=3, station=0, finish_tick=4))
            metrics.close()

        with open(tmp_path / "metrics.csv", newline="") as f:
            served = [row["customer_id"] for row in csv.DictReader(f) if row["event"] == "served"]
        assert served == ["1", "2"]
