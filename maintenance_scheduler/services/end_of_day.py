"""End-of-day reminder for services still open today."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from maintenance_scheduler.domain.records import ServiceRecord
from maintenance_scheduler.timeutils import to_date


ALERT_SEEN_KEY = "endOfDayAlertDismissed"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStore:
    """Dict-backed KeyValueStore."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


def _open_today(service: ServiceRecord, today: date) -> bool:
    return (
        service.service_date == today
        and not service.is_lunch_block
        and service.status not in ("completed", "canceled")
    )


def pending_services(services: Sequence[ServiceRecord], now: datetime, alert_hour: int = 17) -> List[ServiceRecord]:
    """Today's unfinished services, but only once ``now`` has reached ``alert_hour``."""
    if now.hour < alert_hour:
        return []
    today = now.date()
    return [s for s in services if _open_today(s, today)]


def today_pending_count(services: Sequence[ServiceRecord], today) -> int:
    today = to_date(today)
    return sum(1 for s in services if _open_today(s, today))


def daily_completion_rate(services: Sequence[ServiceRecord], day) -> float:
    """Percentage of the day's non-lunch services that are completed; 100 for an empty day."""
    day = to_date(day)
    day_services = [s for s in services if s.service_date == day and not s.is_lunch_block]
    if not day_services:
        return 100.0
    completed = sum(1 for s in day_services if s.status == "completed")
    return completed / len(day_services) * 100


class AlertTracker:
    """Remembers whether the end-of-day alert was dismissed today."""

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock

    def _today_key(self) -> str:
        return self.clock().date().isoformat()

    def has_seen_today(self) -> bool:
        return self.store.get(ALERT_SEEN_KEY) == self._today_key()

    def mark_seen_today(self) -> None:
        self.store.set(ALERT_SEEN_KEY, self._today_key())

    def clear(self) -> None:
        self.store.remove(ALERT_SEEN_KEY)

    def should_alert(self, services: Sequence[ServiceRecord], alert_hour: int = 17) -> List[ServiceRecord]:
        """Pending services to show, or an empty list if already dismissed today."""
        if self.has_seen_today():
            return []
        return pending_services(services, self.clock(), alert_hour)
