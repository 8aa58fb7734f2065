# burgerline/config.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import yaml

from burgerline.errors import ConfigurationError

log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())


@dataclass
class ArrivalConfig:
    mode: str = "scripted"          # scripted | curve
    count: int = 10
    spacing: int = 2                # scripted: ticks between two customers
    curve_points: List[dict] = field(default_factory=list)
    seed: Optional[int] = None


@dataclass
class MetricsConfig:
    enabled: bool = True
    out_dir: str = "results"
    filename: str = "metrics.csv"
    graph: bool = False


@dataclass
class RestaurantConfig:
    """Everything needed to build and run one restaurant."""
    station_count: int = 3
    resource_capacity: int = 4
    cook_duration: int = 10
    tick_interval_ms: float = 60000.0   # one real minute per simulated minute
    drain_due_slots: bool = False       # free every due slot per tick instead of one
    arrival: ArrivalConfig = field(default_factory=ArrivalConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)

    def __post_init__(self):
        if isinstance(self.arrival, dict):
            self.arrival = ArrivalConfig(**self.arrival)
        if isinstance(self.metrics, dict):
            self.metrics = MetricsConfig(**self.metrics)
        self.validate()

    def validate(self):
        for name in ("station_count", "resource_capacity", "cook_duration"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                _fail(f"{name} must be a positive integer, got {value!r}")
        if isinstance(self.tick_interval_ms, bool) or not isinstance(self.tick_interval_ms, (int, float)) \
                or self.tick_interval_ms <= 0:
            _fail(f"tick_interval_ms must be a positive number, got {self.tick_interval_ms!r}")
        a = self.arrival
        if a.mode not in ("scripted", "curve"):
            _fail(f"arrival.mode must be 'scripted' or 'curve', got {a.mode!r}")
        for name in ("count", "spacing"):
            value = getattr(a, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                _fail(f"arrival.{name} must be a non-negative integer, got {value!r}")
        if a.mode == "curve" and not a.curve_points:
            _fail("arrival.mode 'curve' needs arrival.curve_points")

    @classmethod
    def from_dict(cls, cfg: dict) -> "RestaurantConfig":
        cfg = dict(cfg or {})
        arrival = cfg.pop("arrival", None) or {}
        metrics = cfg.pop("metrics", None) or {}
        unknown = set(cfg) - {"station_count", "resource_capacity", "cook_duration",
                              "tick_interval_ms", "drain_due_slots"}
        if unknown:
            _fail(f"unknown configuration keys: {sorted(unknown)}")
        return cls(arrival=arrival, metrics=metrics, **cfg)


def _fail(errmsg: str):
    log.error(errmsg)
    raise ConfigurationError(errmsg)


def load_config(path: str) -> RestaurantConfig:
    """Read a YAML file into a validated RestaurantConfig."""
    with open(path) as f:
        cfg = yaml.safe_load(f)
    try:
        return RestaurantConfig.from_dict(cfg)
    except TypeError as e:
        # unexpected key inside the arrival/metrics sections
        _fail(f"{path}: {e}")
