"""CSV export of stored services."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from sqlalchemy.orm import Session

from maintenance_scheduler.domain.repositories import ServiceRepository
from maintenance_scheduler.timeutils import month_range


EXPORT_COLUMNS = [
    "id",
    "service_date",
    "start_time",
    "duration_minutes",
    "client_name",
    "kind",
    "priority",
    "status",
    "zone",
    "address",
    "is_lunch_block",
    "rescheduled_from",
    "rescheduled_reason",
    "imported_from",
]


def services_frame(records) -> pd.DataFrame:
    """Tabulate service records with the export columns, sorted by date and time."""
    df = pd.DataFrame([{col: getattr(r, col) for col in EXPORT_COLUMNS} for r in records], columns=EXPORT_COLUMNS)
    if not df.empty:
        df = df.sort_values(["service_date", "start_time"], kind="stable").reset_index(drop=True)
    return df


def export_services_csv(session: Session, csv_path: str | Path, month=None) -> int:
    """
    Export services to CSV, optionally limited to one calendar month.

    Returns:
        Number of services written
    """
    if month is None:
        rows = ServiceRepository.get_all(session)
    else:
        start, end = month_range(month)
        rows = ServiceRepository.get_by_date_range(session, start, end)

    df = services_frame(row.to_record() for row in rows)
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} services to {csv_path}")
    return len(df)
