"""Lunch block helpers: creation, same-day moves and free-time lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from maintenance_scheduler.domain.records import ServiceRecord
from maintenance_scheduler.timeutils import format_time_label, time_to_minutes, to_date

from .conflicts import overlaps_service


DEFAULT_LUNCH_TIME = "12:00"
LUNCH_DURATION_MINUTES = 60
COMMON_LUNCH_TIMES = ("11:00", "11:30", "12:00", "12:30", "13:00", "13:30", "14:00")


@dataclass(frozen=True)
class LunchConflict:
    service: ServiceRecord
    message: str


@dataclass(frozen=True)
class LunchSuggestion:
    time: str
    label: str
    conflicts: bool


@dataclass(frozen=True)
class MoveCheck:
    valid: bool
    error: Optional[str] = None


def create_default_lunch_break(day, lunch_time: str = DEFAULT_LUNCH_TIME) -> ServiceRecord:
    time_to_minutes(lunch_time)
    return ServiceRecord(
        kind="scheduled_maintenance",
        client_name="Lunch Break",
        dishwasher_model="N/A",
        service_date=to_date(day),
        start_time=lunch_time,
        duration_minutes=LUNCH_DURATION_MINUTES,
        zone="other",
        address="N/A",
        status="scheduled",
        priority="normal",
        is_lunch_block=True,
        notes="Daily lunch break",
    )


def validate_lunch_move(service: ServiceRecord, new_start: str, new_date, work_start_hour: int = 7, work_end_hour: int = 18) -> MoveCheck:
    """A lunch block may only move within its own day and inside work hours."""
    if to_date(new_date) != service.service_date:
        return MoveCheck(False, "Lunch break must stay on the same day")
    hour = time_to_minutes(new_start) // 60
    if hour < work_start_hour or hour >= work_end_hour:
        return MoveCheck(
            False,
            f"Lunch break must be within work hours ({format_time_label(f'{work_start_hour:02d}:00')} - "
            f"{format_time_label(f'{work_end_hour:02d}:00')})",
        )
    return MoveCheck(True)


def check_lunch_conflicts(
    new_start: str,
    day,
    services: Sequence[ServiceRecord],
    exclude_id: Optional[str] = None,
) -> List[LunchConflict]:
    """Non-lunch services that a lunch block starting at ``new_start`` would overlap."""
    day = to_date(day)
    start = time_to_minutes(new_start)
    end = start + LUNCH_DURATION_MINUTES
    conflicts = []
    for s in services:
        if s.service_date != day or s.is_lunch_block or s.status == "canceled":
            continue
        if exclude_id is not None and s.id == exclude_id:
            continue
        if overlaps_service(start, end, s):
            conflicts.append(LunchConflict(s, f"Overlaps with {s.client_name} ({s.start_time})"))
    return conflicts


def suggest_lunch_times(day, services: Sequence[ServiceRecord], exclude_id: Optional[str] = None) -> List[LunchSuggestion]:
    return [
        LunchSuggestion(
            time=t,
            label=format_time_label(t),
            conflicts=bool(check_lunch_conflicts(t, day, services, exclude_id)),
        )
        for t in COMMON_LUNCH_TIMES
    ]


def find_best_lunch_time(day, services: Sequence[ServiceRecord], preferred_time: str = DEFAULT_LUNCH_TIME) -> str:
    """Preferred time if free, else the first free common time, else the preferred time."""
    if not check_lunch_conflicts(preferred_time, day, services):
        return preferred_time
    for suggestion in suggest_lunch_times(day, services):
        if not suggestion.conflicts:
            return suggestion.time
    return preferred_time


def should_auto_create_lunch_break(day, services: Sequence[ServiceRecord]) -> bool:
    """True when the day has regular services but no lunch block yet."""
    day = to_date(day)
    day_services = [s for s in services if s.service_date == day and s.status != "canceled"]
    if any(s.is_lunch_block for s in day_services):
        return False
    return any(not s.is_lunch_block for s in day_services)
