"""Tests for configuration loading."""

import json

import pytest

from maintenance_scheduler.config import SchedulerConfig, load_config
from maintenance_scheduler.domain.records import Settings
from maintenance_scheduler.services.suggestions import SlotPolicy


def test_defaults():
    cfg = load_config()
    assert cfg.capacity.max_daily_services == 4
    assert cfg.work_hours.start == "07:00"
    assert cfg.distribution.time_rotation == ["08:00", "10:00", "13:00", "15:00"]
    assert cfg.settings() == Settings()
    assert SlotPolicy.from_config(cfg) == SlotPolicy()


def test_load_json(tmp_path):
    """Test partial JSON config merged over defaults."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"capacity": {"max_daily_services": 3}, "work_hours": {"start": "08:00"}}))

    cfg = load_config(path)

    assert cfg.capacity.max_daily_services == 3
    assert cfg.capacity.max_weekly_hours == 50.0
    assert cfg.work_hours.start == "08:00"
    assert cfg.work_hours.end == "18:00"
    assert SlotPolicy.from_config(cfg).work_start == 8 * 60


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "db_url: sqlite:///other.db\n"
        "imports:\n"
        "  weekly_client_patterns:\n"
        "    - CHEESECAKE FACTORY\n"
        "    - HARBOR GRILL\n"
        "suggestions:\n"
        "  max_results: 5\n"
    )

    cfg = load_config(path)

    assert cfg.db_url == "sqlite:///other.db"
    assert cfg.imports.weekly_client_patterns == ["CHEESECAKE FACTORY", "HARBOR GRILL"]
    assert cfg.suggestions.max_results == 5


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("")
    assert load_config(path) == SchedulerConfig()


def test_unknown_keys_rejected(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"capacity": {"max_monthly_services": 80}}))
    with pytest.raises(ValueError, match="capacity"):
        load_config(path)


@pytest.mark.parametrize(
    "data",
    [
        {"work_hours": {"start": "18:00", "end": "07:00"}},
        {"work_hours": {"lunch_start": "noon"}},
        {"capacity": {"max_daily_services": 0}},
        {"distribution": {"time_rotation": []}},
        {"capacity": 4},
        {"distribution": {"default_recurring_day": 6}},
        {"end_of_day_alert_hour": 24},
    ],
)
def test_invalid_values_rejected(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data))
    with pytest.raises(ValueError):
        load_config(path)
