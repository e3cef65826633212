"""Services for scheduling logic."""

from .conflicts import find_conflicts, has_conflict
from .distribution import DistributionResult, ImportCandidate, distribute_visits
from .lifecycle import InvalidTransition, cancel_service, mark_completed, reschedule_service
from .load import (
    available_actions,
    daily_service_count,
    monthly_completion,
    validate_reschedule,
    weekly_hours,
)
from .suggestions import SlotPolicy, Suggestion, suggest_slots

__all__ = [
    "find_conflicts",
    "has_conflict",
    "daily_service_count",
    "weekly_hours",
    "monthly_completion",
    "available_actions",
    "validate_reschedule",
    "suggest_slots",
    "SlotPolicy",
    "Suggestion",
    "distribute_visits",
    "ImportCandidate",
    "DistributionResult",
    "reschedule_service",
    "mark_completed",
    "cancel_service",
    "InvalidTransition",
]
