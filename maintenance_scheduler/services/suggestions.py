"""Alternative slot search and ranking for services that must move."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Sequence

from maintenance_scheduler.domain.records import ServiceRecord
from maintenance_scheduler.timeutils import intervals_overlap, is_weekday, minutes_to_time, time_to_minutes, to_date

from .conflicts import overlaps_service, services_on_date
from .load import weekly_hours


CATEGORY_ORDER = {"optimal": 0, "good": 1, "acceptable": 2}


@dataclass(frozen=True)
class SlotPolicy:
    """Work-day shape and search limits for slot suggestions (minutes since midnight)."""

    work_start: int = 7 * 60
    work_end: int = 18 * 60
    lunch_start: int = 12 * 60
    lunch_end: int = 13 * 60
    default_start: int = 9 * 60
    max_weekly_hours: float = 50.0
    max_days_to_check: int = 30
    max_results: int = 3
    busy_day_threshold: int = 5

    @classmethod
    def from_config(cls, cfg) -> "SlotPolicy":
        lunch_start = time_to_minutes(cfg.work_hours.lunch_start)
        return cls(
            work_start=time_to_minutes(cfg.work_hours.start),
            work_end=time_to_minutes(cfg.work_hours.end),
            lunch_start=lunch_start,
            lunch_end=lunch_start + cfg.work_hours.lunch_duration_minutes,
            default_start=time_to_minutes(cfg.suggestions.default_start),
            max_weekly_hours=cfg.capacity.max_weekly_hours,
            max_days_to_check=cfg.suggestions.max_days_to_check,
            max_results=cfg.suggestions.max_results,
            busy_day_threshold=cfg.suggestions.busy_day_threshold,
        )


@dataclass(frozen=True)
class Suggestion:
    date: date
    time: str
    score: int
    category: str
    service_count: int
    week_hours: float
    days_from_original: int
    same_zone: bool


def candidate_start_times(duration_minutes: int, preferred: Optional[int], policy: SlotPolicy) -> List[int]:
    """Preferred (or default) start first, then every whole hour that ends by work end."""
    first = preferred if preferred is not None else policy.default_start
    times = [first]
    t = policy.work_start
    while t + duration_minutes <= policy.work_end:
        if t not in times:
            times.append(t)
        t += 60
    return times


def score_slot(
    service_count: int,
    days_from_original: int,
    current_week_hours: float,
    same_zone: bool,
    start_minutes: int,
    original_minutes: Optional[int],
):
    """
    Score an accepted slot.

    Returns:
        Tuple of (score, category)
    """
    score = 100
    category = "acceptable"
    if service_count <= 2:
        score += 30
        category = "optimal"
    elif service_count == 3:
        score += 15
        category = "good"

    if days_from_original == 1:
        score += 25
    elif days_from_original <= 3:
        score += 15
    elif days_from_original <= 7:
        score += 5
    else:
        score -= (days_from_original - 7) * 2

    if current_week_hours < 40:
        score += 10
    elif current_week_hours > 45:
        score -= 15

    if same_zone:
        score += 20

    if original_minutes is not None and abs(start_minutes - original_minutes) < 120:
        score += 15

    return score, category


def _first_free_start(
    day_services: Sequence[ServiceRecord],
    duration_minutes: int,
    preferred: Optional[int],
    policy: SlotPolicy,
) -> Optional[int]:
    for start in candidate_start_times(duration_minutes, preferred, policy):
        end = start + duration_minutes
        if start < policy.work_start or end > policy.work_end:
            continue
        if intervals_overlap(start, end, policy.lunch_start, policy.lunch_end):
            continue
        if any(overlaps_service(start, end, s) for s in day_services):
            continue
        return start
    return None


def suggest_slots(
    services: Sequence[ServiceRecord],
    original_date,
    duration_minutes: int,
    preferred_zone: Optional[str] = None,
    original_time: Optional[str] = None,
    policy: SlotPolicy = SlotPolicy(),
    exclude_id: Optional[str] = None,
) -> List[Suggestion]:
    """
    Find up to ``policy.max_results`` alternative slots after ``original_date``.

    Scans weekdays forward from the day after ``original_date``, takes the
    first free start time on each usable day, then ranks the results by
    category (optimal, good, acceptable) and descending score. A slot must
    fit inside work hours at both ends, so a preferred time that starts
    before ``policy.work_start`` is rejected like one that runs past
    ``policy.work_end``.

    Args:
        services: Snapshot of all services
        original_date: Date the service is moving away from
        duration_minutes: Length of the service being moved
        preferred_zone: Zone used for the same-zone bonus
        original_time: Original start time, tried first and used for the proximity bonus
        policy: Work-day shape and search limits
        exclude_id: Service being moved, left out of week-hour totals

    Returns:
        Ranked suggestions, possibly empty when the horizon is fully booked

    Raises:
        FormatError: If ``original_time`` or a stored start time is malformed
    """
    original_date = to_date(original_date)
    original_minutes = time_to_minutes(original_time) if original_time else None

    suggestions: List[Suggestion] = []
    day = original_date + timedelta(days=1)
    days_checked = 0

    while len(suggestions) < policy.max_results and days_checked < policy.max_days_to_check:
        current = day
        day += timedelta(days=1)
        days_checked += 1

        if not is_weekday(current):
            continue

        day_services = [
            s for s in services_on_date(services, current)
            if exclude_id is None or s.id != exclude_id
        ]
        service_count = sum(1 for s in day_services if not s.is_lunch_block)
        if service_count >= policy.busy_day_threshold:
            continue

        current_week_hours = weekly_hours(services, current, exclude_id=exclude_id)
        projected_week_hours = current_week_hours + duration_minutes / 60
        if projected_week_hours > policy.max_weekly_hours:
            continue

        start = _first_free_start(day_services, duration_minutes, original_minutes, policy)
        if start is None:
            continue

        same_zone = bool(preferred_zone) and any(
            s.zone == preferred_zone and not s.is_lunch_block for s in day_services
        )
        days_from_original = (current - original_date).days
        score, category = score_slot(
            service_count,
            days_from_original,
            current_week_hours,
            same_zone,
            start,
            original_minutes,
        )
        suggestions.append(
            Suggestion(
                date=current,
                time=minutes_to_time(start),
                score=score,
                category=category,
                service_count=service_count,
                week_hours=projected_week_hours,
                days_from_original=days_from_original,
                same_zone=same_zone,
            )
        )

    suggestions.sort(key=lambda s: (CATEGORY_ORDER[s.category], -s.score))
    return suggestions[: policy.max_results]
