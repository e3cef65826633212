"""Emergency insertion - finds displaced services and moves them to suggested slots."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from maintenance_scheduler.domain.models import Service
from maintenance_scheduler.domain.records import ServiceRecord
from maintenance_scheduler.domain.repositories import RescheduleHistoryRepository, ServiceRepository
from maintenance_scheduler.services.conflicts import find_conflicts
from maintenance_scheduler.services.lifecycle import reschedule_service
from maintenance_scheduler.services.suggestions import SlotPolicy, Suggestion, suggest_slots


@dataclass
class DisplacedService:
    """A service that overlaps the emergency, with its ranked alternatives."""

    service: ServiceRecord
    suggestions: List[Suggestion] = field(default_factory=list)

    @property
    def default_slot(self) -> Optional[Tuple[date, str]]:
        if not self.suggestions:
            return None
        return self.suggestions[0].date, self.suggestions[0].time


@dataclass
class EmergencyPlan:
    emergency: ServiceRecord
    displaced: List[DisplacedService] = field(default_factory=list)
    # Conflicts that are never moved automatically (lunch blocks)
    kept: List[ServiceRecord] = field(default_factory=list)


@dataclass
class EmergencyOutcome:
    emergency: ServiceRecord
    moved: List[ServiceRecord] = field(default_factory=list)
    unmoved: List[ServiceRecord] = field(default_factory=list)


def plan_emergency(
    emergency: ServiceRecord,
    services: Sequence[ServiceRecord],
    policy: SlotPolicy = SlotPolicy(),
) -> EmergencyPlan:
    """
    Work out which services the emergency displaces and where they could go.

    Args:
        emergency: The emergency visit to insert (not yet stored)
        services: Snapshot of all services
        policy: Slot search limits

    Returns:
        EmergencyPlan with suggestions for every displaced service
    """
    conflicts = find_conflicts(
        emergency.service_date,
        emergency.start_time,
        emergency.duration_minutes,
        services,
        exclude_id=emergency.id,
    )
    plan = EmergencyPlan(emergency=emergency)
    for service in conflicts:
        if service.is_lunch_block:
            plan.kept.append(service)
            continue
        suggestions = suggest_slots(
            services,
            emergency.service_date,
            service.duration_minutes,
            preferred_zone=service.zone,
            original_time=service.start_time,
            policy=policy,
            exclude_id=service.id,
        )
        plan.displaced.append(DisplacedService(service=service, suggestions=suggestions))
    return plan


def apply_emergency_plan(
    plan: EmergencyPlan,
    selections: Optional[Dict[str, Tuple[date, str]]] = None,
) -> EmergencyOutcome:
    """
    Build the rescheduled records for a plan.

    Args:
        plan: Result of plan_emergency
        selections: Optional service id -> (date, time) overrides; services
            without a selection take their best suggestion

    Returns:
        EmergencyOutcome; services with no slot (or that cannot be
        rescheduled) are listed in ``unmoved``
    """
    selections = selections or {}
    outcome = EmergencyOutcome(emergency=plan.emergency, unmoved=list(plan.kept))
    reason = f"Rescheduled due to emergency - {plan.emergency.client_name}"
    for displaced in plan.displaced:
        slot = selections.get(displaced.service.id) or displaced.default_slot
        if slot is None or displaced.service.status not in ("scheduled", "rescheduled"):
            outcome.unmoved.append(displaced.service)
            continue
        new_date, new_time = slot
        outcome.moved.append(reschedule_service(displaced.service, new_date, new_time, reason=reason))
    return outcome


def insert_emergency(
    session: Session,
    emergency: ServiceRecord,
    policy: SlotPolicy = SlotPolicy(),
    selections: Optional[Dict[str, Tuple[date, str]]] = None,
    persist: bool = True,
) -> EmergencyOutcome:
    """
    Plan, apply and (optionally) store an emergency insertion.

    Args:
        session: Database session
        emergency: Emergency visit to insert
        policy: Slot search limits
        selections: Optional manual slot choices per displaced service id
        persist: If True, create the emergency and save every move

    Returns:
        EmergencyOutcome; when persisted, ``emergency`` carries its new id
    """
    if emergency.kind != "emergency":
        emergency = replace(emergency, kind="emergency", priority="emergency")

    services = ServiceRepository.snapshot(session)
    plan = plan_emergency(emergency, services, policy)
    print(f"[INFO] Emergency for {emergency.client_name} on {emergency.service_date} {emergency.start_time}: "
          f"{len(plan.displaced)} service(s) displaced")

    outcome = apply_emergency_plan(plan, selections)
    for service in outcome.unmoved:
        print(f"[WARN] {service.client_name} ({service.start_time}) stays in place")

    if not persist:
        return outcome

    # One transaction: the emergency and every move are stored together or not at all
    row: Service = ServiceRepository.create(session, emergency, commit=False)
    originals = {d.service.id: d.service for d in plan.displaced}
    for moved in outcome.moved:
        RescheduleHistoryRepository.record_move(session, originals[moved.id], moved, commit=False)
        ServiceRepository.save_record(session, moved, commit=False)
    session.commit()
    session.refresh(row)
    outcome.emergency = row.to_record()
    for moved in outcome.moved:
        print(f"[OK] {moved.client_name} moved to {moved.service_date} {moved.start_time}")
    return outcome
