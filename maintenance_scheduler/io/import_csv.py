"""CSV import of client lists into month distributions."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd
from sqlalchemy.orm import Session

from maintenance_scheduler.config import SchedulerConfig
from maintenance_scheduler.domain.repositories import ServiceRepository, SettingsRepository
from maintenance_scheduler.services.distribution import DistributionResult, ImportCandidate, distribute_visits
from maintenance_scheduler.timeutils import month_range


CLIENT_COLUMNS = ["Account Name", "Account Number", "Address", "Customer Site"]


def auto_detect_zone(address: str) -> str:
    """Guess a zone from keywords in the address."""
    addr = (address or "").lower()
    if "downtown" in addr or "main st" in addr or "center" in addr:
        return "downtown"
    for zone in ("north", "south", "east", "west"):
        if zone in addr:
            return zone
    return "other"


def is_weekly_client(client_name: str, cfg: SchedulerConfig) -> bool:
    name = (client_name or "").upper()
    return any(pattern.upper() in name for pattern in cfg.imports.weekly_client_patterns)


def _optional(value) -> str | None:
    if pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def read_clients_csv(csv_path: str | Path, cfg: SchedulerConfig | None = None) -> List[ImportCandidate]:
    """
    Read a client export into import candidates.

    Args:
        csv_path: CSV with Account Name, Account Number, Address, Customer Site
        cfg: Import defaults (durations, weekly client patterns)

    Returns:
        One candidate per row with a non-empty account name
    """
    cfg = cfg or SchedulerConfig()
    df = pd.read_csv(csv_path, dtype=str)

    # Normalize column names
    df.columns = df.columns.str.strip()
    for col in CLIENT_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df["Account Name"] = df["Account Name"].fillna("").str.strip()
    df = df[df["Account Name"] != ""]

    candidates = []
    for _, row in df.iterrows():
        name = row["Account Name"]
        address = _optional(row["Address"]) or ""
        weekly = is_weekly_client(name, cfg)
        candidates.append(
            ImportCandidate(
                client_name=name,
                address=address,
                account_number=_optional(row["Account Number"]),
                site_name=_optional(row["Customer Site"]),
                selected=True,
                visits_per_month=cfg.imports.weekly_visits_per_month if weekly else cfg.imports.visits_per_month,
                duration=cfg.imports.duration_minutes,
                zone=auto_detect_zone(address),
                is_recurring=weekly,
                fixed_day_of_week=cfg.imports.weekly_day_of_week if weekly else None,
                fixed_time=cfg.imports.weekly_time if weekly else None,
                dishwasher_model=cfg.imports.dishwasher_model,
            )
        )
    return candidates


def import_clients_csv(
    session: Session,
    csv_path: str | Path,
    month,
    cfg: SchedulerConfig | None = None,
    persist: bool = True,
) -> DistributionResult:
    """
    Read a client CSV, distribute its visits over ``month`` and store them.

    Already-booked services in the month seed the daily counts.

    Returns:
        The DistributionResult (services carry ids only after persisting)
    """
    cfg = cfg or SchedulerConfig()
    candidates = read_clients_csv(csv_path, cfg)
    start, end = month_range(month)
    existing = [row.to_record() for row in ServiceRepository.get_by_date_range(session, start, end)]

    result = distribute_visits(
        candidates,
        month,
        SettingsRepository.get_settings(session),
        existing_services=existing,
        time_rotation=cfg.distribution.time_rotation,
        fallback_time=cfg.distribution.fallback_time,
        default_recurring_day=cfg.distribution.default_recurring_day,
    )
    for warning in result.summary.warnings:
        print(f"[WARN] {warning}")

    if persist:
        ServiceRepository.bulk_create(session, result.services)
    print(f"[INFO] Imported {result.summary.total_visits} visits for {len(candidates)} clients from {csv_path}")
    return result
