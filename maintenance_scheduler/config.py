"""Load and validate scheduler configuration (JSON or YAML)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .domain.records import Settings
from .timeutils import time_to_minutes


@dataclass
class WorkHours:
    start: str = "07:00"
    end: str = "18:00"
    lunch_start: str = "12:00"
    lunch_duration_minutes: int = 60


@dataclass
class CapacityConfig:
    max_daily_services: int = 4
    max_weekly_hours: float = 50.0


@dataclass
class SuggestionConfig:
    max_days_to_check: int = 30
    max_results: int = 3
    # One above the nominal daily cap so a tight day is still considered
    busy_day_threshold: int = 5
    default_start: str = "09:00"


@dataclass
class ImportConfig:
    visits_per_month: int = 1
    duration_minutes: int = 120
    dishwasher_model: str = "Hobart CXL"
    weekly_client_patterns: List[str] = field(default_factory=lambda: ["CHEESECAKE FACTORY"])
    weekly_visits_per_month: int = 4
    # Monday=0; None uses distribution.default_recurring_day
    weekly_day_of_week: Optional[int] = None
    weekly_time: str = "10:00"


@dataclass
class DistributionConfig:
    time_rotation: List[str] = field(default_factory=lambda: ["08:00", "10:00", "13:00", "15:00"])
    fallback_time: str = "09:00"
    default_recurring_day: int = 2  # Wednesday


@dataclass
class SchedulerConfig:
    db_url: str = "sqlite:///maintenance.db"
    end_of_day_alert_hour: int = 17
    work_hours: WorkHours = field(default_factory=WorkHours)
    capacity: CapacityConfig = field(default_factory=CapacityConfig)
    suggestions: SuggestionConfig = field(default_factory=SuggestionConfig)
    imports: ImportConfig = field(default_factory=ImportConfig)
    distribution: DistributionConfig = field(default_factory=DistributionConfig)

    def settings(self) -> Settings:
        return Settings(
            max_daily_services=self.capacity.max_daily_services,
            max_weekly_hours=self.capacity.max_weekly_hours,
        )


def _build(cls, data: Dict[str, Any], path: str):
    if not isinstance(data, dict):
        raise ValueError(f"Config section '{path}' must be a mapping")
    known = {f.name: f for f in fields(cls)}
    unknown = set(data) - set(known)
    if unknown:
        raise ValueError(f"Unknown config keys in '{path}': {sorted(unknown)}")
    kwargs = {}
    for name, value in data.items():
        default = known[name].default_factory() if callable(known[name].default_factory) else known[name].default
        if is_dataclass(default):
            kwargs[name] = _build(type(default), value, f"{path}.{name}" if path else name)
        else:
            kwargs[name] = value
    return cls(**kwargs)


def _validate(cfg: SchedulerConfig) -> None:
    for label in ("start", "end", "lunch_start"):
        time_to_minutes(getattr(cfg.work_hours, label))
    if time_to_minutes(cfg.work_hours.start) >= time_to_minutes(cfg.work_hours.end):
        raise ValueError("work_hours.start must be before work_hours.end")
    if cfg.capacity.max_daily_services <= 0:
        raise ValueError("capacity.max_daily_services must be positive")
    if cfg.capacity.max_weekly_hours <= 0:
        raise ValueError("capacity.max_weekly_hours must be positive")
    if not 0 <= cfg.distribution.default_recurring_day <= 4:
        raise ValueError("distribution.default_recurring_day must be a weekday (0-4)")
    if not 0 <= cfg.end_of_day_alert_hour <= 23:
        raise ValueError("end_of_day_alert_hour must be between 0 and 23")
    if not cfg.distribution.time_rotation:
        raise ValueError("distribution.time_rotation must not be empty")
    for t in cfg.distribution.time_rotation + [cfg.distribution.fallback_time, cfg.imports.weekly_time]:
        time_to_minutes(t)


def load_config(path: str | Path | None = None) -> SchedulerConfig:
    """
    Load configuration from a JSON or YAML file.

    Args:
        path: Config file path; None returns the defaults

    Returns:
        Validated SchedulerConfig

    Raises:
        ValueError: On unknown keys, bad times or non-positive capacities
    """
    if path is None:
        cfg = SchedulerConfig()
        _validate(cfg)
        return cfg

    path = Path(path)
    text = path.read_text()
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)

    cfg = _build(SchedulerConfig, data, "")
    _validate(cfg)
    return cfg
