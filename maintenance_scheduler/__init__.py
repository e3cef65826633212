"""Scheduling assistant for a single dishwasher maintenance technician.

Modules:
- timeutils: time-of-day parsing, interval overlap, week/month ranges
- config: load and validate configuration (JSON or YAML)
- domain: SQLAlchemy store, immutable service snapshots, repositories
- services: conflicts, load accounting, slot suggestions, month distribution,
  lunch blocks, lifecycle transitions, end-of-day alert, filters
- engine: emergency insertion flow
- io: client CSV import and service CSV export
- validator: schedule validation and text summaries
- cli: command-line interface entrypoints
"""

__all__ = [
    "timeutils",
    "config",
    "domain",
    "services",
    "engine",
    "io",
    "validator",
    "cli",
]
