"""Status transitions for a single service.

Every function returns a new ServiceRecord; inputs are never mutated.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from maintenance_scheduler.domain.records import ServiceRecord
from maintenance_scheduler.timeutils import time_to_minutes, to_date

from .load import validate_reschedule
from .lunch import check_lunch_conflicts, validate_lunch_move


class InvalidTransition(ValueError):
    """Raised when a service cannot move to the requested status."""


def _require(service: ServiceRecord, allowed, verb: str) -> None:
    if service.is_lunch_block:
        raise InvalidTransition(f"Cannot {verb} a lunch block through this flow")
    if service.status not in allowed:
        raise InvalidTransition(f"Cannot {verb} a {service.status} service")


def reschedule_service(
    service: ServiceRecord,
    new_date,
    new_time: str,
    reason: Optional[str] = None,
    allow_completed: bool = False,
) -> ServiceRecord:
    """
    Move a service to a new date and time.

    The result has status ``rescheduled`` and records the previous date and
    the reason. With ``allow_completed`` a completed service may be moved
    for clerical correction and keeps its ``completed`` status.

    Raises:
        InvalidTransition: For lunch blocks, in-progress or canceled services,
            and completed ones unless ``allow_completed`` is set
        FormatError: If ``new_time`` is malformed
    """
    time_to_minutes(new_time)
    if service.status == "completed" and allow_completed and not service.is_lunch_block:
        status = "completed"
    else:
        check = validate_reschedule(service)
        if not check.valid:
            raise InvalidTransition(check.error)
        status = "rescheduled"
    return replace(
        service,
        service_date=to_date(new_date),
        start_time=new_time,
        status=status,
        rescheduled_from=service.service_date,
        rescheduled_reason=reason or None,
    )


def start_service(service: ServiceRecord) -> ServiceRecord:
    _require(service, ("scheduled", "rescheduled"), "start")
    return replace(service, status="in_progress")


def mark_completed(service: ServiceRecord) -> ServiceRecord:
    _require(service, ("scheduled", "rescheduled", "in_progress"), "complete")
    return replace(service, status="completed")


def cancel_service(service: ServiceRecord) -> ServiceRecord:
    if service.status not in ("scheduled", "rescheduled", "in_progress"):
        raise InvalidTransition(f"Cannot cancel a {service.status} service")
    return replace(service, status="canceled")


def move_lunch_block(service: ServiceRecord, new_start: str, services: Sequence[ServiceRecord]) -> ServiceRecord:
    """
    Move a lunch block to another time on the same day.

    Raises:
        InvalidTransition: If the service is not a lunch block, the move
            leaves work hours, or it would overlap another service
    """
    if not service.is_lunch_block:
        raise InvalidTransition("Only lunch blocks can be moved within the day")
    check = validate_lunch_move(service, new_start, service.service_date)
    if not check.valid:
        raise InvalidTransition(check.error)
    conflicts = check_lunch_conflicts(new_start, service.service_date, services, exclude_id=service.id)
    if conflicts:
        raise InvalidTransition(conflicts[0].message)
    return replace(service, start_time=new_start)
