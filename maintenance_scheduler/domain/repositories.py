"""Repository classes for the service record store."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from maintenance_scheduler.timeutils import month_range

from .models import RescheduleHistory, SchedulerSettings, Service, ServiceNote
from .records import ServiceRecord, Settings


# Columns a caller may change through ServiceRepository.update
UPDATABLE_FIELDS = {
    "kind",
    "client_name",
    "dishwasher_model",
    "service_date",
    "start_time",
    "duration_minutes",
    "zone",
    "address",
    "notes",
    "status",
    "priority",
    "rescheduled_from",
    "rescheduled_reason",
    "account_number",
    "site_name",
}


class ServiceRepository:
    """Repository for service data access."""

    @staticmethod
    def get_all(session: Session) -> List[Service]:
        """Get all services ordered by date and start time."""
        return session.query(Service).order_by(Service.service_date, Service.start_time).all()

    @staticmethod
    def get_by_id(session: Session, service_id: str) -> Optional[Service]:
        return session.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def get_by_date(session: Session, service_date: date) -> List[Service]:
        return (
            session.query(Service)
            .filter(Service.service_date == service_date)
            .order_by(Service.start_time)
            .all()
        )

    @staticmethod
    def get_by_date_range(session: Session, start: date, end: date) -> List[Service]:
        """Get services with start <= service_date <= end."""
        return (
            session.query(Service)
            .filter(Service.service_date >= start, Service.service_date <= end)
            .order_by(Service.service_date, Service.start_time)
            .all()
        )

    @staticmethod
    def snapshot(session: Session) -> Tuple[ServiceRecord, ...]:
        """Immutable copy of every service, for the scheduling services."""
        return tuple(row.to_record() for row in ServiceRepository.get_all(session))

    @staticmethod
    def create(session: Session, record: ServiceRecord, commit: bool = True) -> Service:
        """Create a new service from a record; the store assigns the id.

        With ``commit=False`` the row is only flushed, so the id is set but the
        caller owns the transaction.
        """
        row = Service.from_record(record)
        session.add(row)
        if not commit:
            session.flush()
            return row
        session.commit()
        session.refresh(row)
        return row

    @staticmethod
    def bulk_create(session: Session, records: Iterable[ServiceRecord]) -> List[Service]:
        rows = [Service.from_record(r) for r in records]
        session.add_all(rows)
        session.commit()
        return rows

    @staticmethod
    def update(session: Session, service_id: str, commit: bool = True, **changes) -> Service:
        """
        Apply field changes to a stored service.

        Raises:
            KeyError: If the service does not exist
            ValueError: If a change names a field that cannot be updated
        """
        row = ServiceRepository.get_by_id(session, service_id)
        if row is None:
            raise KeyError(f"Unknown service id: {service_id}")
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        for name, value in changes.items():
            setattr(row, name, value)
        if commit:
            session.commit()
            session.refresh(row)
        return row

    @staticmethod
    def save_record(session: Session, record: ServiceRecord, commit: bool = True) -> Service:
        """Write every updatable field of ``record`` back to its row."""
        return ServiceRepository.update(
            session,
            record.id,
            commit=commit,
            **{name: getattr(record, name) for name in UPDATABLE_FIELDS},
        )

    @staticmethod
    def delete(session: Session, service_id: str) -> bool:
        row = ServiceRepository.get_by_id(session, service_id)
        if row is None:
            return False
        session.delete(row)
        session.commit()
        return True

    @staticmethod
    def delete_by_month(session: Session, month: date) -> int:
        """Delete all services in the calendar month of ``month``. Returns number of deleted rows."""
        start, end = month_range(month)
        rows = ServiceRepository.get_by_date_range(session, start, end)
        for row in rows:
            session.delete(row)
        session.commit()
        return len(rows)


class NoteRepository:
    """Repository for service notes."""

    @staticmethod
    def add(session: Session, service_id: str, note_text: str) -> ServiceNote:
        note = ServiceNote(service_id=service_id, note_text=note_text)
        session.add(note)
        session.commit()
        session.refresh(note)
        return note

    @staticmethod
    def get_by_service(session: Session, service_id: str) -> List[ServiceNote]:
        return (
            session.query(ServiceNote)
            .filter(ServiceNote.service_id == service_id)
            .order_by(ServiceNote.created_at)
            .all()
        )


class RescheduleHistoryRepository:
    """Repository for the reschedule audit trail."""

    @staticmethod
    def record_move(
        session: Session,
        before: ServiceRecord,
        after: ServiceRecord,
        commit: bool = True,
    ) -> RescheduleHistory:
        entry = RescheduleHistory(
            service_id=before.id,
            original_date=before.service_date,
            original_time=before.start_time,
            new_date=after.service_date,
            new_time=after.start_time,
            reason=after.rescheduled_reason,
        )
        session.add(entry)
        if commit:
            session.commit()
        return entry

    @staticmethod
    def get_by_service(session: Session, service_id: str) -> List[RescheduleHistory]:
        return (
            session.query(RescheduleHistory)
            .filter(RescheduleHistory.service_id == service_id)
            .order_by(RescheduleHistory.id)
            .all()
        )


class SettingsRepository:
    """Repository for the single settings row."""

    @staticmethod
    def get_or_create(session: Session) -> SchedulerSettings:
        """Return the settings row, inserting defaults on first use."""
        row = session.query(SchedulerSettings).first()
        if row is None:
            row = SchedulerSettings()
            session.add(row)
            session.commit()
            session.refresh(row)
        return row

    @staticmethod
    def get_settings(session: Session) -> Settings:
        return SettingsRepository.get_or_create(session).to_settings()

    @staticmethod
    def update(session: Session, **changes) -> SchedulerSettings:
        row = SettingsRepository.get_or_create(session)
        for name, value in changes.items():
            if name not in SchedulerSettings.__table__.columns.keys() or name == "id":
                raise ValueError(f"Unknown settings field: {name}")
            setattr(row, name, value)
        session.commit()
        session.refresh(row)
        return row
