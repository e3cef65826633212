"""Tests for service status transitions."""

from datetime import date

import pytest

from maintenance_scheduler.services.lifecycle import (
    InvalidTransition,
    cancel_service,
    mark_completed,
    move_lunch_block,
    reschedule_service,
    start_service,
)
from maintenance_scheduler.services.lunch import create_default_lunch_break
from maintenance_scheduler.timeutils import FormatError


DAY = date(2025, 9, 2)


def test_reschedule_records_origin_and_reason(make_service):
    service = make_service(DAY, "09:00")

    moved = reschedule_service(service, date(2025, 9, 4), "13:00", reason="Client closed")

    assert moved.status == "rescheduled"
    assert moved.service_date == date(2025, 9, 4)
    assert moved.start_time == "13:00"
    assert moved.rescheduled_from == DAY
    assert moved.rescheduled_reason == "Client closed"
    assert moved.id == service.id
    # original untouched
    assert service.status == "scheduled"
    assert service.service_date == DAY


def test_reschedule_twice_keeps_latest_origin(make_service):
    service = make_service(DAY, "09:00")
    once = reschedule_service(service, date(2025, 9, 4), "13:00")
    twice = reschedule_service(once, date(2025, 9, 5), "10:00")
    assert twice.rescheduled_from == date(2025, 9, 4)
    assert twice.rescheduled_reason is None


@pytest.mark.parametrize("status", ["completed", "in_progress", "canceled"])
def test_reschedule_rejected_for_closed_statuses(make_service, status):
    with pytest.raises(InvalidTransition):
        reschedule_service(make_service(status=status), DAY, "10:00")


def test_reschedule_rejects_lunch_block():
    with pytest.raises(InvalidTransition, match="different rescheduling flow"):
        reschedule_service(create_default_lunch_break(DAY), DAY, "13:00")


def test_completed_override_keeps_status(make_service):
    """Test the clerical override for completed services."""
    service = make_service(DAY, "09:00", status="completed")
    moved = reschedule_service(service, date(2025, 9, 3), "09:00", allow_completed=True)
    assert moved.status == "completed"
    assert moved.rescheduled_from == DAY


def test_reschedule_validates_time(make_service):
    with pytest.raises(FormatError):
        reschedule_service(make_service(), DAY, "late")


def test_start_complete_cancel(make_service):
    service = make_service()
    running = start_service(service)
    assert running.status == "in_progress"
    assert mark_completed(running).status == "completed"
    assert cancel_service(running).status == "canceled"
    assert mark_completed(service).status == "completed"


def test_invalid_transitions(make_service):
    with pytest.raises(InvalidTransition):
        start_service(make_service(status="completed"))
    with pytest.raises(InvalidTransition):
        mark_completed(make_service(status="canceled"))
    with pytest.raises(InvalidTransition):
        cancel_service(make_service(status="completed"))
    with pytest.raises(InvalidTransition):
        mark_completed(create_default_lunch_break(DAY))


def test_move_lunch_block(make_service):
    lunch = create_default_lunch_break(DAY)
    visit = make_service(DAY, "12:00", 60)

    moved = move_lunch_block(lunch, "13:00", [lunch, visit])
    assert moved.start_time == "13:00"
    assert moved.service_date == DAY

    with pytest.raises(InvalidTransition, match="Overlaps with"):
        move_lunch_block(lunch, "11:30", [lunch, visit])
    with pytest.raises(InvalidTransition, match="work hours"):
        move_lunch_block(lunch, "18:30", [lunch])
    with pytest.raises(InvalidTransition):
        move_lunch_block(visit, "13:00", [visit])
