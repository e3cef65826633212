"""Tests for listing filters."""

from dataclasses import replace
from datetime import date

from maintenance_scheduler.services.filters import (
    ServiceFilters,
    active_filter_count,
    filter_services,
    is_emergency,
    status_count,
)


DAY = date(2025, 9, 2)


def _mixed(make_service):
    return {
        "scheduled": make_service(DAY, "08:00"),
        "completed": make_service(DAY, "09:00", status="completed"),
        "emergency": make_service(DAY, "10:00", kind="emergency", priority="emergency"),
        "rescheduled": make_service(DAY, "11:00", status="rescheduled"),
        "recurring": make_service(DAY, "13:00", kind="recurring", status="completed"),
        "canceled": make_service(DAY, "14:00", status="canceled"),
        "lunch": make_service(DAY, "12:00", is_lunch_block=True),
    }


def test_default_filters_show_everything(make_service):
    services = list(_mixed(make_service).values())
    assert filter_services(services, ServiceFilters()) == services
    assert active_filter_count(ServiceFilters()) == 0


def test_no_filters_hide_everything(make_service):
    services = list(_mixed(make_service).values())
    assert filter_services(services, ServiceFilters.none()) == []
    assert active_filter_count(ServiceFilters.none()) == 7


def test_any_enabled_filter_shows_the_service(make_service):
    mixed = _mixed(make_service)
    only_recurring = replace(ServiceFilters.none(), show_recurring=True)
    assert filter_services(list(mixed.values()), only_recurring) == [mixed["recurring"]]

    completed_only = ServiceFilters(
        show_pending=False,
        show_emergencies=False,
        show_rescheduled=False,
        show_recurring=False,
        show_canceled=False,
        show_lunch_blocks=False,
    )
    # the completed recurring visit matches through its status
    assert filter_services(list(mixed.values()), completed_only) == [mixed["completed"], mixed["recurring"]]


def test_lunch_blocks_follow_their_own_flag(make_service):
    lunch = make_service(DAY, "12:00", is_lunch_block=True)
    assert filter_services([lunch], ServiceFilters(show_lunch_blocks=False)) == []
    assert filter_services([lunch], ServiceFilters(show_pending=False)) == [lunch]


def test_is_emergency_by_kind_or_priority(make_service):
    assert is_emergency(make_service(kind="emergency"))
    assert is_emergency(make_service(priority="emergency"))
    assert not is_emergency(make_service(priority="urgent"))


def test_status_count(make_service):
    services = list(_mixed(make_service).values())
    assert status_count(services, "completed") == 2
    assert status_count(services, "pending") == 3  # scheduled visit, emergency and the lunch block
    assert status_count(services, "emergency") == 1
    assert status_count(services, "lunch") == 1
    assert status_count(services, "unknown") == 0
