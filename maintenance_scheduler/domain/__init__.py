"""Domain models, snapshots and data access layer."""

from .models import Base, RescheduleHistory, SchedulerSettings, Service, ServiceNote
from .records import ServiceRecord, Settings
from .repositories import (
    NoteRepository,
    RescheduleHistoryRepository,
    ServiceRepository,
    SettingsRepository,
)

__all__ = [
    "Base",
    "Service",
    "ServiceNote",
    "RescheduleHistory",
    "SchedulerSettings",
    "ServiceRecord",
    "Settings",
    "ServiceRepository",
    "NoteRepository",
    "RescheduleHistoryRepository",
    "SettingsRepository",
]
