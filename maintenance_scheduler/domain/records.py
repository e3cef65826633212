"""Immutable snapshots passed into the scheduling services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


KINDS = {"scheduled_maintenance", "emergency", "recurring"}
PRIORITIES = {"normal", "urgent", "emergency"}
STATUSES = {"scheduled", "in_progress", "completed", "rescheduled", "canceled"}
ZONES = {"north", "south", "east", "west", "downtown", "other"}
IMPORT_SOURCES = {"csv", "manual"}


@dataclass(frozen=True)
class ServiceRecord:
    """
    A single visit (or lunch block) as seen by the scheduling services.

    ``id`` is None for records that have not been persisted yet.
    ``start_time`` is an ``HH:MM`` (or ``HH:MM:SS``) string.
    """

    service_date: date
    start_time: str
    duration_minutes: int
    client_name: str = ""
    kind: str = "scheduled_maintenance"
    priority: str = "normal"
    status: str = "scheduled"
    zone: str = "other"
    address: str = ""
    is_lunch_block: bool = False
    id: Optional[str] = None
    dishwasher_model: str = ""
    notes: str = ""
    account_number: Optional[str] = None
    site_name: Optional[str] = None
    rescheduled_from: Optional[date] = None
    rescheduled_reason: Optional[str] = None
    imported_from: Optional[str] = None

    def __post_init__(self):
        if int(self.duration_minutes) <= 0:
            raise ValueError(f"duration_minutes must be positive, got {self.duration_minutes}")
        if self.kind not in KINDS:
            raise ValueError(f"Unknown service kind: {self.kind}")
        if self.status not in STATUSES:
            raise ValueError(f"Unknown service status: {self.status}")
        if self.priority not in PRIORITIES:
            raise ValueError(f"Unknown service priority: {self.priority}")
        if self.zone not in ZONES:
            raise ValueError(f"Unknown zone: {self.zone}")
        if self.is_lunch_block and self.kind in ("emergency", "recurring"):
            raise ValueError("A lunch block cannot be an emergency or recurring service")


@dataclass(frozen=True)
class Settings:
    """Capacity ceilings supplied by the caller."""

    max_daily_services: int = 4
    max_weekly_hours: float = 50.0
