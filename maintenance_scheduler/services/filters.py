"""Status and type filters for service listings."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import List, Sequence

from maintenance_scheduler.domain.records import ServiceRecord


@dataclass(frozen=True)
class ServiceFilters:
    show_completed: bool = True
    show_pending: bool = True
    show_emergencies: bool = True
    show_rescheduled: bool = True
    show_recurring: bool = True
    show_canceled: bool = True
    show_lunch_blocks: bool = True

    @classmethod
    def none(cls) -> "ServiceFilters":
        return cls(**{f.name: False for f in fields(cls)})


def is_emergency(service: ServiceRecord) -> bool:
    return service.kind == "emergency" or service.priority == "emergency"


def matches(service: ServiceRecord, filters: ServiceFilters) -> bool:
    """A service is shown if any enabled filter matches it; lunch blocks follow their own flag."""
    if service.is_lunch_block:
        return filters.show_lunch_blocks
    return (
        (filters.show_completed and service.status == "completed")
        or (filters.show_pending and service.status == "scheduled")
        or (filters.show_emergencies and is_emergency(service))
        or (filters.show_rescheduled and service.status == "rescheduled")
        or (filters.show_recurring and service.kind == "recurring")
        or (filters.show_canceled and service.status == "canceled")
    )


def filter_services(services: Sequence[ServiceRecord], filters: ServiceFilters) -> List[ServiceRecord]:
    return [s for s in services if matches(s, filters)]


def active_filter_count(filters: ServiceFilters) -> int:
    """Number of categories currently hidden."""
    return sum(1 for f in fields(filters) if not getattr(filters, f.name))


def status_count(services: Sequence[ServiceRecord], status: str) -> int:
    """
    Count services in a listing category.

    Categories: completed, pending, emergency, rescheduled, recurring,
    canceled, lunch. Unknown categories count zero.
    """
    checks = {
        "completed": lambda s: s.status == "completed",
        "pending": lambda s: s.status == "scheduled",
        "emergency": is_emergency,
        "rescheduled": lambda s: s.status == "rescheduled",
        "recurring": lambda s: s.kind == "recurring",
        "canceled": lambda s: s.status == "canceled",
        "lunch": lambda s: s.is_lunch_block,
    }
    check = checks.get(status)
    if check is None:
        return 0
    return sum(1 for s in services if check(s))
