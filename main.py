#!/usr/bin/env python3
"""
Main entry point for the burger restaurant simulation.
Loads configuration, routes the customers, and runs the griddle until
everyone has been served.
"""

import logging
import sys

from burgerline.config import load_config
from burgerline.metrics_recorder import MetricsRecorder
from burgerline.restaurant.restaurant import Restaurant


def main(config_path: str = "Config/restaurant.yaml"):
    """Main simulation entry point."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    print("🍔 Starting burger restaurant simulation...")

    cfg = load_config(config_path)
    metrics = None
    if cfg.metrics.enabled:
        metrics = MetricsRecorder(cfg.metrics.out_dir, cfg.metrics.filename)

    restaurant = Restaurant(cfg, metrics)

    print(f"📊 Restaurant setup complete:")
    print(f"  - {cfg.station_count} counters")
    print(f"  - Griddle capacity: {cfg.resource_capacity} patties, {cfg.cook_duration} ticks each")
    print(f"  - Tick interval: {cfg.tick_interval_ms} ms")
    print("\n🚀 Starting clock and admission threads...\n")

    try:
        snapshot = restaurant.run()
    finally:
        if metrics:
            metrics.close()

    for record in restaurant.log.records:
        print(f"Customer {record.customer_id} is served. Wait time: {record.wait_time} minutes.")

    print("\n" + "=" * 60)
    print(f"Average waiting time: {snapshot.average_wait:.2f} minutes.")
    print(f"  - Served: {snapshot.admitted} customers by tick {snapshot.now}")
    print(f"  - Longest wait: {snapshot.max_wait}, 90th percentile: {snapshot.p90_wait:.1f}")
    print(f"  - Griddle peak: {snapshot.peak_occupied}/{snapshot.capacity} slots")
    if metrics:
        print(f"📈 Metrics saved to: {metrics.path}")
        if cfg.metrics.graph:
            graph = metrics.generate_wait_time_graph()
            if graph:
                print(f"📊 Wait time graph saved to: {graph}")
    print("=" * 60 + "\n")
    return snapshot


if __name__ == "__main__":
    main(*sys.argv[1:2])
