"""Multi-step scheduling flows built on the services layer."""

from .emergency import EmergencyOutcome, EmergencyPlan, apply_emergency_plan, insert_emergency, plan_emergency

__all__ = [
    "EmergencyPlan",
    "EmergencyOutcome",
    "plan_emergency",
    "apply_emergency_plan",
    "insert_emergency",
]
