"""SQLAlchemy models for the maintenance scheduling store."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship

from .records import ServiceRecord, Settings


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Service(Base):
    """A scheduled visit or lunch block for the technician."""

    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=_new_id)
    kind = Column(String(30), nullable=False, default="scheduled_maintenance")  # scheduled_maintenance, emergency, recurring
    client_name = Column(String(200), nullable=False)
    dishwasher_model = Column(String(100), nullable=False, default="")
    service_date = Column(Date, nullable=False)
    start_time = Column(String(8), nullable=False)  # HH:MM or HH:MM:SS
    duration_minutes = Column(Integer, nullable=False)
    zone = Column(String(20), nullable=False, default="other")
    address = Column(String(300), nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    status = Column(String(20), nullable=False, default="scheduled")
    priority = Column(String(20), nullable=False, default="normal")
    is_lunch_block = Column(Boolean, nullable=False, default=False)
    rescheduled_from = Column(Date, nullable=True)
    rescheduled_reason = Column(Text, nullable=True)
    account_number = Column(String(50), nullable=True)
    site_name = Column(String(200), nullable=True)
    imported_from = Column(String(10), nullable=True)  # csv, manual
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    service_notes = relationship("ServiceNote", back_populates="service", cascade="all, delete-orphan")
    reschedule_history = relationship("RescheduleHistory", back_populates="service", cascade="all, delete-orphan")

    def to_record(self) -> ServiceRecord:
        """Detach the row into an immutable snapshot."""
        return ServiceRecord(
            id=self.id,
            kind=self.kind,
            client_name=self.client_name,
            dishwasher_model=self.dishwasher_model or "",
            service_date=self.service_date,
            start_time=self.start_time,
            duration_minutes=int(self.duration_minutes),
            zone=self.zone,
            address=self.address or "",
            notes=self.notes or "",
            status=self.status,
            priority=self.priority,
            is_lunch_block=bool(self.is_lunch_block),
            rescheduled_from=self.rescheduled_from,
            rescheduled_reason=self.rescheduled_reason,
            account_number=self.account_number,
            site_name=self.site_name,
            imported_from=self.imported_from,
        )

    @classmethod
    def from_record(cls, record: ServiceRecord) -> "Service":
        row = cls(
            kind=record.kind,
            client_name=record.client_name,
            dishwasher_model=record.dishwasher_model,
            service_date=record.service_date,
            start_time=record.start_time,
            duration_minutes=record.duration_minutes,
            zone=record.zone,
            address=record.address,
            notes=record.notes,
            status=record.status,
            priority=record.priority,
            is_lunch_block=record.is_lunch_block,
            rescheduled_from=record.rescheduled_from,
            rescheduled_reason=record.rescheduled_reason,
            account_number=record.account_number,
            site_name=record.site_name,
            imported_from=record.imported_from,
        )
        if record.id is not None:
            row.id = record.id
        return row

    def __repr__(self) -> str:
        return f"<Service(id={self.id}, client='{self.client_name}', date={self.service_date}, start={self.start_time}, status={self.status})>"


class ServiceNote(Base):
    """Free-text note attached to a service."""

    __tablename__ = "service_notes"

    id = Column(String(36), primary_key=True, default=_new_id)
    service_id = Column(String(36), ForeignKey("services.id"), nullable=False)
    note_text = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    service = relationship("Service", back_populates="service_notes")

    def __repr__(self) -> str:
        return f"<ServiceNote(id={self.id}, service={self.service_id})>"


class RescheduleHistory(Base):
    """Audit trail of every date/time move of a service."""

    __tablename__ = "reschedule_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    service_id = Column(String(36), ForeignKey("services.id"), nullable=False)
    original_date = Column(Date, nullable=False)
    original_time = Column(String(8), nullable=False)
    new_date = Column(Date, nullable=False)
    new_time = Column(String(8), nullable=False)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    service = relationship("Service", back_populates="reschedule_history")

    def __repr__(self) -> str:
        return f"<RescheduleHistory(service={self.service_id}, {self.original_date} -> {self.new_date})>"


class SchedulerSettings(Base):
    """Single-row technician settings.

    Work hours and lunch placement come from SchedulerConfig; this row holds
    the values the technician can change at runtime.
    """

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    max_weekly_hours = Column(Float, nullable=False, default=50.0)
    max_daily_services = Column(Integer, nullable=False, default=4)
    end_of_day_alert_enabled = Column(Boolean, nullable=False, default=True)
    end_of_day_alert_hour = Column(Integer, nullable=False, default=17)

    def to_settings(self) -> Settings:
        return Settings(
            max_daily_services=int(self.max_daily_services),
            max_weekly_hours=float(self.max_weekly_hours),
        )

    def __repr__(self) -> str:
        return f"<SchedulerSettings(max_daily={self.max_daily_services}, max_weekly_hours={self.max_weekly_hours})>"
