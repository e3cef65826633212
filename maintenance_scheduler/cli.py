"""Command-line interface for the maintenance scheduler."""

from __future__ import annotations

import argparse
from datetime import datetime

from maintenance_scheduler.config import SchedulerConfig, load_config
from maintenance_scheduler.domain.db import init_database, session_scope
from maintenance_scheduler.domain.records import ServiceRecord
from maintenance_scheduler.domain.repositories import ServiceRepository, SettingsRepository
from maintenance_scheduler.engine.emergency import insert_emergency
from maintenance_scheduler.io.export_csv import export_services_csv
from maintenance_scheduler.io.import_csv import import_clients_csv
from maintenance_scheduler.services.conflicts import find_conflicts
from maintenance_scheduler.services.end_of_day import daily_completion_rate, pending_services
from maintenance_scheduler.services.load import monthly_completion
from maintenance_scheduler.services.suggestions import SlotPolicy, suggest_slots
from maintenance_scheduler.timeutils import month_range, to_date, week_range
from maintenance_scheduler.validator import find_schedule_violations, summarize_services


def _config(args: argparse.Namespace) -> SchedulerConfig:
    return load_config(args.config) if args.config else SchedulerConfig()


def _db_url(args: argparse.Namespace, cfg: SchedulerConfig) -> str:
    return args.db or cfg.db_url


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    cfg = _config(args)
    init_database(_db_url(args, cfg))
    with session_scope(_db_url(args, cfg)) as session:
        SettingsRepository.update(
            session,
            max_daily_services=cfg.capacity.max_daily_services,
            max_weekly_hours=cfg.capacity.max_weekly_hours,
            end_of_day_alert_hour=cfg.end_of_day_alert_hour,
        )
    print("[OK] Database ready")


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Distribute a client CSV over a month."""
    cfg = _config(args)
    try:
        with session_scope(_db_url(args, cfg)) as session:
            result = import_clients_csv(session, args.csv, to_date(args.month), cfg, persist=not args.dry_run)
    except Exception as e:
        print(f"[ERROR] Import failed: {e}")
        raise
    summary = result.summary
    print(f"[OK] {summary.total_visits} visits, {summary.clients_imported} clients "
          f"({summary.recurring_clients} recurring), {summary.average_services_per_day} per workday")
    if summary.max_day_exceeded:
        print("[WARN] At least one day exceeds the daily service cap")
    if summary.max_week_exceeded:
        print("[WARN] Month total exceeds four weeks of the weekly hours cap")
    if args.dry_run:
        print("[INFO] Dry run: nothing saved")


def _cmd_conflicts(args: argparse.Namespace) -> None:
    cfg = _config(args)
    with session_scope(_db_url(args, cfg)) as session:
        services = ServiceRepository.snapshot(session)
    conflicts = find_conflicts(to_date(args.date), args.start, args.duration, services, exclude_id=args.exclude)
    if not conflicts:
        print("[OK] No conflicts")
        return
    for s in conflicts:
        label = "lunch" if s.is_lunch_block else s.status
        print(f"  - {s.start_time} {s.client_name} ({s.duration_minutes} min, {label})")


def _cmd_suggest(args: argparse.Namespace) -> None:
    """Suggest new slots for a stored service or an ad-hoc duration."""
    cfg = _config(args)
    with session_scope(_db_url(args, cfg)) as session:
        services = ServiceRepository.snapshot(session)
        if args.service_id:
            row = ServiceRepository.get_by_id(session, args.service_id)
            if row is None:
                raise SystemExit(f"Unknown service id {args.service_id}")
            target = row.to_record()
            original_date, duration = target.service_date, target.duration_minutes
            zone, original_time, exclude = target.zone, target.start_time, target.id
        else:
            if not (args.date and args.duration):
                raise SystemExit("Provide --service-id or both --date and --duration")
            original_date, duration = to_date(args.date), args.duration
            zone, original_time, exclude = args.zone, args.time, None

    suggestions = suggest_slots(
        services,
        original_date,
        duration,
        preferred_zone=zone,
        original_time=original_time,
        policy=SlotPolicy.from_config(cfg),
        exclude_id=exclude,
    )
    if not suggestions:
        print("[WARN] No free slot found in the search window")
        return
    for s in suggestions:
        print(f"  {s.date} {s.time}  score={s.score:<4} {s.category:<10} "
              f"services={s.service_count} week={s.week_hours:.1f}h +{s.days_from_original}d"
              f"{' same-zone' if s.same_zone else ''}")


def _cmd_emergency(args: argparse.Namespace) -> None:
    cfg = _config(args)
    emergency = ServiceRecord(
        kind="emergency",
        priority="emergency",
        client_name=args.client,
        address=args.address or "",
        zone=args.zone,
        service_date=to_date(args.date),
        start_time=args.start,
        duration_minutes=args.duration,
        imported_from="manual",
    )
    try:
        with session_scope(_db_url(args, cfg)) as session:
            outcome = insert_emergency(session, emergency, SlotPolicy.from_config(cfg), persist=not args.dry_run)
    except Exception as e:
        print(f"[ERROR] Emergency insertion failed: {e}")
        raise
    print(f"[OK] Emergency booked; {len(outcome.moved)} moved, {len(outcome.unmoved)} left in place")


def _cmd_pending(args: argparse.Namespace) -> None:
    """End-of-day reminder: today's services that are still open."""
    cfg = _config(args)
    now = datetime.fromisoformat(args.now) if args.now else datetime.now()
    with session_scope(_db_url(args, cfg)) as session:
        row = SettingsRepository.get_or_create(session)
        enabled, alert_hour = bool(row.end_of_day_alert_enabled), int(row.end_of_day_alert_hour)
        services = [r.to_record() for r in ServiceRepository.get_by_date(session, now.date())]
    if not enabled:
        print("[INFO] End-of-day alert is disabled")
        return
    if now.hour < alert_hour:
        print(f"[INFO] Alert starts at {alert_hour:02d}:00")
        return
    pending = pending_services(services, now, alert_hour)
    print(f"[INFO] {daily_completion_rate(services, now.date()):.0f}% of today's services completed")
    if not pending:
        print("[OK] Nothing pending today")
        return
    for s in pending:
        print(f"[WARN] {s.start_time} {s.client_name} is still {s.status}")


def _cmd_summary(args: argparse.Namespace) -> None:
    cfg = _config(args)
    month = to_date(args.month)
    start, end = month_range(month)
    with session_scope(_db_url(args, cfg)) as session:
        services = [row.to_record() for row in ServiceRepository.get_by_date_range(session, start, end)]
    completion = monthly_completion(services, month)
    print(summarize_services(services))
    print(f"\nCompleted {completion.completed}/{completion.total} services in {month:%B %Y}")


def _cmd_validate(args: argparse.Namespace) -> None:
    cfg = _config(args)
    start, end = week_range(to_date(args.week_of)) if args.week_of else month_range(to_date(args.month))
    with session_scope(_db_url(args, cfg)) as session:
        services = [row.to_record() for row in ServiceRepository.get_by_date_range(session, start, end)]
        settings = SettingsRepository.get_settings(session)
    problems = find_schedule_violations(services, settings, cfg)
    if problems:
        for p in problems:
            print(f"[ERROR] {p}")
        raise SystemExit(1)
    print(f"[OK] Validation passed for {start} .. {end}")


def _cmd_export(args: argparse.Namespace) -> None:
    cfg = _config(args)
    with session_scope(_db_url(args, cfg)) as session:
        count = export_services_csv(session, args.out, month=to_date(args.month) if args.month else None)
    print(f"[OK] Exported {count} services to {args.out}")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="maintenance-scheduler",
        description="Dishwasher maintenance scheduling assistant",
    )

    # Global options
    parser.add_argument("--db", help="Database URL (default from config: sqlite:///maintenance.db)")
    parser.add_argument("--config", help="Path to config JSON/YAML")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize database and settings")
    init.set_defaults(func=_cmd_init_db)

    imp = sub.add_parser("import-csv", help="Distribute a client CSV over a month")
    imp.add_argument("--csv", required=True, help="Path to client CSV")
    imp.add_argument("--month", required=True, help="Any date in the target month (YYYY-MM-DD)")
    imp.add_argument("--dry-run", action="store_true", help="Report without saving")
    imp.set_defaults(func=_cmd_import_csv)

    con = sub.add_parser("conflicts", help="List services overlapping a slot")
    con.add_argument("--date", required=True)
    con.add_argument("--start", required=True, help="HH:MM")
    con.add_argument("--duration", required=True, type=int, help="Minutes")
    con.add_argument("--exclude", help="Service id to ignore")
    con.set_defaults(func=_cmd_conflicts)

    sug = sub.add_parser("suggest", help="Suggest alternative slots")
    sug.add_argument("--service-id", help="Stored service to move")
    sug.add_argument("--date", help="Original date (without --service-id)")
    sug.add_argument("--duration", type=int, help="Minutes (without --service-id)")
    sug.add_argument("--time", help="Original start time HH:MM")
    sug.add_argument("--zone", help="Preferred zone")
    sug.set_defaults(func=_cmd_suggest)

    em = sub.add_parser("emergency", help="Insert an emergency and move displaced services")
    em.add_argument("--client", required=True)
    em.add_argument("--date", required=True)
    em.add_argument("--start", required=True, help="HH:MM")
    em.add_argument("--duration", required=True, type=int, help="Minutes")
    em.add_argument("--zone", default="other")
    em.add_argument("--address")
    em.add_argument("--dry-run", action="store_true", help="Report without saving")
    em.set_defaults(func=_cmd_emergency)

    pend = sub.add_parser("pending", help="List today's unfinished services after the alert hour")
    pend.add_argument("--now", help="Override the current time (ISO datetime)")
    pend.set_defaults(func=_cmd_pending)

    summ = sub.add_parser("summary", help="Summarize a month")
    summ.add_argument("--month", required=True, help="Any date in the month")
    summ.set_defaults(func=_cmd_summary)

    val = sub.add_parser("validate", help="Check caps, overlaps and work hours")
    group = val.add_mutually_exclusive_group(required=True)
    group.add_argument("--week-of", help="Any date in the week")
    group.add_argument("--month", help="Any date in the month")
    val.set_defaults(func=_cmd_validate)

    exp = sub.add_parser("export", help="Export services to CSV")
    exp.add_argument("--out", required=True)
    exp.add_argument("--month", help="Limit to the month of this date")
    exp.set_defaults(func=_cmd_export)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
