"""Time conflict detection between services on the same day."""

from __future__ import annotations

from typing import List, Optional, Sequence

from maintenance_scheduler.domain.records import ServiceRecord
from maintenance_scheduler.timeutils import intervals_overlap, service_end_minutes, time_to_minutes, to_date


def services_on_date(services: Sequence[ServiceRecord], day, include_canceled: bool = False) -> List[ServiceRecord]:
    day = to_date(day)
    return [
        s for s in services
        if s.service_date == day and (include_canceled or s.status != "canceled")
    ]


def overlaps_service(start_minutes: int, end_minutes: int, service: ServiceRecord) -> bool:
    return intervals_overlap(
        start_minutes,
        end_minutes,
        time_to_minutes(service.start_time),
        service_end_minutes(service),
    )


def find_conflicts(
    candidate_date,
    candidate_start: str,
    candidate_duration: int,
    services: Sequence[ServiceRecord],
    exclude_id: Optional[str] = None,
) -> List[ServiceRecord]:
    """
    Find every service that overlaps a candidate slot.

    Canceled services, services on other dates and ``exclude_id`` are
    ignored. Lunch blocks are included. Results keep the input order.

    Args:
        candidate_date: Day of the candidate slot
        candidate_start: Start time as ``HH:MM``
        candidate_duration: Length in minutes
        services: Snapshot of existing services
        exclude_id: Service being moved, if any

    Returns:
        Overlapping services, possibly empty

    Raises:
        FormatError: If a start time is malformed
    """
    start = time_to_minutes(candidate_start)
    end = start + int(candidate_duration)
    return [
        s for s in services_on_date(services, candidate_date)
        if (exclude_id is None or s.id != exclude_id) and overlaps_service(start, end, s)
    ]


def has_conflict(
    candidate_date,
    candidate_start: str,
    candidate_duration: int,
    services: Sequence[ServiceRecord],
    exclude_id: Optional[str] = None,
) -> bool:
    return bool(find_conflicts(candidate_date, candidate_start, candidate_duration, services, exclude_id))
