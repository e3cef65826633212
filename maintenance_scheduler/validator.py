from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from .config import SchedulerConfig
from .domain.records import ServiceRecord, Settings
from .timeutils import iso_week_id, time_to_minutes


def _frame(services: Sequence[ServiceRecord]) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "id": s.id,
                "client_name": s.client_name,
                "service_date": s.service_date,
                "start": time_to_minutes(s.start_time),
                "duration": s.duration_minutes,
                "status": s.status,
                "is_lunch_block": s.is_lunch_block,
            }
            for s in services
            if s.status != "canceled"
        ],
        columns=["id", "client_name", "service_date", "start", "duration", "status", "is_lunch_block"],
    )
    df["end"] = df["start"] + df["duration"]
    df["hours"] = df["duration"] / 60.0
    df["week"] = df["service_date"].map(iso_week_id)
    return df


def find_schedule_violations(
    services: Sequence[ServiceRecord],
    settings: Settings = Settings(),
    cfg: SchedulerConfig | None = None,
) -> List[str]:
    """
    List every hard-rule violation in a set of services (canceled ones ignored).

    Checks: overlaps within a day, days above ``max_daily_services`` (lunch
    blocks not counted), ISO weeks above ``max_weekly_hours`` and services
    outside work hours.
    """
    cfg = cfg or SchedulerConfig()
    df = _frame(services)
    if df.empty:
        return []

    problems: List[str] = []

    # Overlaps per day
    df = df.sort_values(["service_date", "start"], kind="stable")
    for day, group in df.groupby("service_date"):
        prev_end, prev_name = None, None
        for _, row in group.iterrows():
            if prev_end is not None and row["start"] < prev_end:
                problems.append(f"{day}: {row['client_name']} overlaps {prev_name}")
            if prev_end is None or row["end"] > prev_end:
                prev_end, prev_name = row["end"], row["client_name"]

    # Daily service cap
    daily = df[~df["is_lunch_block"]].groupby("service_date").size()
    for day, count in daily.items():
        if count > settings.max_daily_services:
            problems.append(f"{day}: {count} services exceeds daily cap of {settings.max_daily_services}")

    # Weekly hours cap
    weekly = df.groupby("week")["hours"].sum()
    for week, hours in weekly.items():
        if hours > settings.max_weekly_hours + 1e-6:
            problems.append(f"{week}: {hours:.1f}h exceeds weekly cap of {settings.max_weekly_hours}h")

    # Work hours window
    work_start = time_to_minutes(cfg.work_hours.start)
    work_end = time_to_minutes(cfg.work_hours.end)
    outside = df[(df["start"] < work_start) | (df["end"] > work_end)]
    for _, row in outside.iterrows():
        problems.append(f"{row['service_date']}: {row['client_name']} is outside work hours")

    return problems


def validate_schedule(
    services: Sequence[ServiceRecord],
    settings: Settings = Settings(),
    cfg: SchedulerConfig | None = None,
) -> None:
    """
    Raises:
        ValueError: Listing every violation found
    """
    problems = find_schedule_violations(services, settings, cfg)
    if problems:
        raise ValueError("Schedule violations:\n" + "\n".join(f"- {p}" for p in problems))


def summarize_services(services: Sequence[ServiceRecord]) -> str:
    if not services:
        return "No services."
    df = pd.DataFrame(
        [
            {
                "date": s.service_date.isoformat(),
                "week": iso_week_id(s.service_date),
                "status": s.status,
                "hours": s.duration_minutes / 60.0,
                "is_lunch_block": s.is_lunch_block,
            }
            for s in services
        ]
    )
    active = df[df["status"] != "canceled"]
    work = active[~active["is_lunch_block"]]

    per_day = work.groupby("date").size().rename("services")
    per_week = active.groupby("week")["hours"].sum().round(2).rename("hours")
    statuses = df[~df["is_lunch_block"]].groupby("status").size().rename("count")

    lines = ["Services per day:"]
    lines.append(per_day.to_string())
    lines.append("")
    lines.append("Hours per week (lunch included):")
    lines.append(per_week.to_string())
    lines.append("")
    lines.append("Services by status:")
    lines.append(statuses.to_string())
    return "\n".join(lines)
