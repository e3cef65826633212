"""Daily and weekly load accounting, capacity checks and service capabilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence

from maintenance_scheduler.domain.records import ServiceRecord, Settings
from maintenance_scheduler.timeutils import month_range, to_date, week_range


class MonthlyCompletion(NamedTuple):
    completed: int
    total: int


@dataclass(frozen=True)
class ServiceActions:
    can_reschedule: bool
    can_mark_completed: bool
    can_edit: bool
    can_delete: bool
    can_add_notes: bool


@dataclass(frozen=True)
class RescheduleCheck:
    valid: bool
    error: Optional[str] = None
    suggestion: Optional[str] = None


def _active(service: ServiceRecord) -> bool:
    return service.status != "canceled"


def daily_service_count(services: Sequence[ServiceRecord], day) -> int:
    """Count non-lunch, non-canceled services on ``day``."""
    day = to_date(day)
    return sum(
        1 for s in services
        if s.service_date == day and not s.is_lunch_block and _active(s)
    )


def daily_hours(services: Sequence[ServiceRecord], day) -> float:
    """Total scheduled hours on ``day``, lunch blocks included."""
    day = to_date(day)
    return sum(s.duration_minutes / 60 for s in services if s.service_date == day and _active(s))


def weekly_hours(services: Sequence[ServiceRecord], week_start, exclude_id: Optional[str] = None) -> float:
    """
    Total hours of non-canceled services in the Monday..Sunday week of ``week_start``.

    Lunch blocks count toward the total.
    """
    start, end = week_range(week_start)
    return sum(
        s.duration_minutes / 60
        for s in services
        if start <= s.service_date <= end
        and _active(s)
        and (exclude_id is None or s.id != exclude_id)
    )


def weekly_service_count(services: Sequence[ServiceRecord], week_start) -> int:
    start, end = week_range(week_start)
    return sum(
        1 for s in services
        if start <= s.service_date <= end and not s.is_lunch_block and _active(s)
    )


def monthly_completion(services: Sequence[ServiceRecord], month_date) -> MonthlyCompletion:
    """Completed vs total non-lunch, non-canceled services in the month."""
    start, end = month_range(month_date)
    month_services = [
        s for s in services
        if start <= s.service_date <= end and not s.is_lunch_block and _active(s)
    ]
    completed = sum(1 for s in month_services if s.status == "completed")
    return MonthlyCompletion(completed=completed, total=len(month_services))


def has_daily_capacity(services: Sequence[ServiceRecord], day, settings: Settings = Settings()) -> bool:
    """True while the day is below ``max_daily_services``."""
    return daily_service_count(services, day) < settings.max_daily_services


def fits_weekly_hours(
    services: Sequence[ServiceRecord],
    day,
    duration_minutes: int,
    settings: Settings = Settings(),
) -> bool:
    """True if adding ``duration_minutes`` keeps the week at or below ``max_weekly_hours``."""
    return weekly_hours(services, day) + duration_minutes / 60 <= settings.max_weekly_hours


def available_actions(service: ServiceRecord) -> ServiceActions:
    """Derive the actions allowed on a service from its status and lunch flag."""
    if service.is_lunch_block:
        return ServiceActions(
            can_reschedule=False,
            can_mark_completed=False,
            can_edit=True,
            can_delete=True,
            can_add_notes=False,
        )
    if service.status == "completed":
        return ServiceActions(False, False, True, True, True)
    if service.status == "in_progress":
        return ServiceActions(False, True, True, False, True)
    if service.status == "canceled":
        return ServiceActions(False, False, True, True, True)
    # scheduled / rescheduled
    return ServiceActions(True, True, True, True, True)


def can_reschedule(service: ServiceRecord) -> bool:
    return available_actions(service).can_reschedule


def validate_reschedule(service: ServiceRecord) -> RescheduleCheck:
    """Explain why the normal reschedule flow is closed for a service, if it is."""
    if service.status == "completed":
        return RescheduleCheck(
            valid=False,
            error="Cannot reschedule completed services",
            suggestion="Create a new service instead",
        )
    if service.is_lunch_block:
        return RescheduleCheck(
            valid=False,
            error="Lunch breaks use a different rescheduling flow",
            suggestion="Click on lunch break to move it within the same day",
        )
    if service.status == "in_progress":
        return RescheduleCheck(
            valid=False,
            error="Cannot reschedule services in progress",
            suggestion="Complete or cancel the service first",
        )
    if service.status == "canceled":
        return RescheduleCheck(
            valid=False,
            error="Cannot reschedule canceled services",
            suggestion="Create a new service instead",
        )
    return RescheduleCheck(valid=True)
