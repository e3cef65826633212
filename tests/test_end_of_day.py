"""Tests for the end-of-day reminder."""

from datetime import date, datetime

import pytest

from maintenance_scheduler.services.end_of_day import (
    ALERT_SEEN_KEY,
    AlertTracker,
    InMemoryStore,
    daily_completion_rate,
    pending_services,
    today_pending_count,
)


TODAY = date(2025, 9, 2)


@pytest.fixture
def day_services(make_service):
    return [
        make_service(TODAY, "08:00", status="completed"),
        make_service(TODAY, "10:00"),
        make_service(TODAY, "13:00", status="in_progress"),
        make_service(TODAY, "15:00", status="canceled"),
        make_service(TODAY, "12:00", is_lunch_block=True),
        make_service(date(2025, 9, 3), "10:00"),
    ]


def test_pending_services_only_after_alert_hour(day_services):
    assert pending_services(day_services, datetime(2025, 9, 2, 16, 59)) == []

    pending = pending_services(day_services, datetime(2025, 9, 2, 17, 0))
    assert [s.start_time for s in pending] == ["10:00", "13:00"]


def test_today_pending_count(day_services):
    assert today_pending_count(day_services, TODAY) == 2
    assert today_pending_count(day_services, "2025-09-03") == 1


def test_daily_completion_rate(day_services):
    # 1 completed out of 4 non-lunch services
    assert daily_completion_rate(day_services, TODAY) == pytest.approx(25.0)
    assert daily_completion_rate(day_services, date(2025, 9, 4)) == 100.0


def test_alert_tracker_dismissal_is_per_day(day_services):
    now = {"value": datetime(2025, 9, 2, 17, 30)}
    store = InMemoryStore()
    tracker = AlertTracker(store, clock=lambda: now["value"])

    assert len(tracker.should_alert(day_services)) == 2
    tracker.mark_seen_today()
    assert tracker.has_seen_today()
    assert store.get(ALERT_SEEN_KEY) == "2025-09-02"
    assert tracker.should_alert(day_services) == []

    now["value"] = datetime(2025, 9, 3, 17, 30)
    assert not tracker.has_seen_today()
    assert len(tracker.should_alert(day_services)) == 1


def test_alert_tracker_clear():
    store = InMemoryStore()
    tracker = AlertTracker(store, clock=lambda: datetime(2025, 9, 2, 18, 0))
    tracker.mark_seen_today()
    tracker.clear()
    assert store.get(ALERT_SEEN_KEY) is None
    assert not tracker.has_seen_today()
