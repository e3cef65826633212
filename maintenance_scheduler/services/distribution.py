"""Month distribution of imported client visits across workdays."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

import pandas as pd

from maintenance_scheduler.domain.records import ServiceRecord, Settings
from maintenance_scheduler.timeutils import month_range, to_date


DEFAULT_TIME_ROTATION = ("08:00", "10:00", "13:00", "15:00")
FALLBACK_TIME = "09:00"
DEFAULT_RECURRING_DAY = 2  # Wednesday


@dataclass
class ImportCandidate:
    """
    A client row waiting to be distributed.

    Recurring clients carry ``fixed_day_of_week`` (Monday=0) and usually
    ``fixed_time``; one-off clients carry ``visits_per_month``.
    """

    client_name: str
    address: str = ""
    visits_per_month: int = 1
    duration: int = 120
    zone: str = "other"
    selected: bool = True
    is_recurring: bool = False
    fixed_day_of_week: Optional[int] = None
    fixed_time: Optional[str] = None
    account_number: Optional[str] = None
    site_name: Optional[str] = None
    dishwasher_model: str = ""


@dataclass
class DistributionSummary:
    total_visits: int
    clients_imported: int
    recurring_clients: int
    average_services_per_day: float
    max_day_exceeded: bool
    max_week_exceeded: bool
    warnings: List[str] = field(default_factory=list)


@dataclass
class DistributionResult:
    services: List[ServiceRecord]
    summary: DistributionSummary


def work_days_of_month(month) -> List[date]:
    """Monday..Friday dates of the calendar month containing ``month``."""
    start, end = month_range(month)
    return [ts.date() for ts in pd.bdate_range(start, end)]


def weeks_in_month(month) -> List[List[date]]:
    """Group the month's workdays into weeks; a new week starts on each Monday."""
    weeks: List[List[date]] = []
    current: List[date] = []
    for day in work_days_of_month(month):
        if day.weekday() == 0 and current:
            weeks.append(current)
            current = []
        current.append(day)
    if current:
        weeks.append(current)
    return weeks


def day_in_week(week: Sequence[date], weekday: int) -> Optional[date]:
    for day in week:
        if day.weekday() == weekday:
            return day
    return None


def time_slot_for_count(count: int, rotation: Sequence[str] = DEFAULT_TIME_ROTATION, fallback: str = FALLBACK_TIME) -> str:
    """Start time for the next visit on a day that already has ``count`` visits."""
    if 0 <= count < len(rotation):
        return rotation[count]
    return fallback


def find_least_busy_day(
    work_days: Sequence[date],
    daily_counts: Dict[date, int],
    max_daily_services: int,
) -> Optional[date]:
    """
    Pick the day with the lowest count still below ``max_daily_services``.

    Ties go to the earliest day in ``work_days`` order. Returns None when
    every day is full.
    """
    best = None
    best_count = None
    for day in work_days:
        count = daily_counts.get(day, 0)
        if count >= max_daily_services:
            continue
        if best_count is None or count < best_count:
            best, best_count = day, count
    return best


def _round_half_up(value: float, places: str = "0.1") -> float:
    return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def _visit(candidate: ImportCandidate, day: date, start_time: str, kind: str) -> ServiceRecord:
    return ServiceRecord(
        kind=kind,
        client_name=candidate.client_name,
        dishwasher_model=candidate.dishwasher_model,
        service_date=day,
        start_time=start_time,
        duration_minutes=candidate.duration,
        zone=candidate.zone,
        address=candidate.address,
        status="scheduled",
        priority="normal",
        is_lunch_block=False,
        account_number=candidate.account_number,
        site_name=candidate.site_name,
        imported_from="csv",
    )


def distribute_visits(
    candidates: Sequence[ImportCandidate],
    target_month,
    settings: Settings = Settings(),
    existing_services: Sequence[ServiceRecord] = (),
    time_rotation: Sequence[str] = DEFAULT_TIME_ROTATION,
    fallback_time: str = FALLBACK_TIME,
    default_recurring_day: int = DEFAULT_RECURRING_DAY,
) -> DistributionResult:
    """
    Assign every candidate visit to a workday and start time in ``target_month``.

    Recurring clients get one visit per week on their fixed weekday (even
    on a full day, with a warning). One-off clients go to the least busy
    day with capacity; visits that fit nowhere are skipped with a warning.
    Recurring candidates are distributed regardless of their ``selected``
    flag. Never raises for capacity problems.

    Args:
        candidates: Clients to distribute
        target_month: Any date inside the target month
        settings: Daily and weekly ceilings
        existing_services: Already-booked services that seed the daily counts
        time_rotation: Start times indexed by a day's current visit count
        fallback_time: Start time once the rotation is exhausted
        default_recurring_day: Weekday (Monday=0) for recurring clients without one

    Returns:
        DistributionResult with unsaved service records and a summary
    """
    target_month = to_date(target_month)
    work_days = work_days_of_month(target_month)
    weeks = weeks_in_month(target_month)

    daily_counts: Dict[date, int] = defaultdict(int)
    month_days = set(work_days)
    for s in existing_services:
        if s.service_date in month_days and not s.is_lunch_block and s.status != "canceled":
            daily_counts[s.service_date] += 1

    services: List[ServiceRecord] = []
    warnings: List[str] = []
    total_hours = 0.0

    recurring = [c for c in candidates if c.is_recurring]
    regular = [c for c in candidates if not c.is_recurring and c.selected]

    for client in recurring:
        weekday = client.fixed_day_of_week if client.fixed_day_of_week is not None else default_recurring_day
        for week in weeks:
            day = day_in_week(week, weekday)
            if day is None:
                continue
            count = daily_counts[day]
            if count >= settings.max_daily_services:
                warnings.append(f"{client.client_name}: Day {day.isoformat()} already has {count} services")
            start_time = client.fixed_time or time_slot_for_count(count, time_rotation, fallback_time)
            services.append(_visit(client, day, start_time, "recurring"))
            daily_counts[day] = count + 1
            total_hours += client.duration / 60

    for client in regular:
        for visit in range(client.visits_per_month):
            day = find_least_busy_day(work_days, daily_counts, settings.max_daily_services)
            if day is None:
                warnings.append(f"{client.client_name}: Cannot schedule visit {visit + 1}, all days at capacity")
                continue
            count = daily_counts[day]
            services.append(
                _visit(client, day, time_slot_for_count(count, time_rotation, fallback_time), "scheduled_maintenance")
            )
            daily_counts[day] = count + 1
            total_hours += client.duration / 60

    average = len(services) / len(work_days) if work_days else 0.0
    summary = DistributionSummary(
        total_visits=len(services),
        clients_imported=sum(1 for c in candidates if c.selected),
        recurring_clients=len(recurring),
        average_services_per_day=_round_half_up(average),
        max_day_exceeded=any(count > settings.max_daily_services for count in daily_counts.values()),
        # Coarse month-level proxy, not a per-week check
        max_week_exceeded=total_hours > settings.max_weekly_hours * 4,
        warnings=warnings,
    )
    return DistributionResult(services=services, summary=summary)
