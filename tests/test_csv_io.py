"""Tests for client CSV import and service CSV export."""

from datetime import date

import pandas as pd
import pytest

from maintenance_scheduler.config import SchedulerConfig
from maintenance_scheduler.domain.records import ServiceRecord
from maintenance_scheduler.domain.repositories import ServiceRepository
from maintenance_scheduler.io.export_csv import EXPORT_COLUMNS, export_services_csv, services_frame
from maintenance_scheduler.io.import_csv import auto_detect_zone, import_clients_csv, read_clients_csv


CLIENTS_CSV = """Account Name,Account Number,Address,Customer Site
THE CHEESECAKE FACTORY #12,A-100,"500 Main St, Downtown",Galleria
Harbor Grill,A-101,12 North Rd,
,A-102,Nowhere,
Sunset Diner,,44 West Ave,Sunset
"""


@pytest.fixture
def clients_csv(tmp_path):
    csv_file = tmp_path / "clients.csv"
    csv_file.write_text(CLIENTS_CSV)
    return csv_file


@pytest.mark.parametrize(
    "address, zone",
    [
        ("500 Main St", "downtown"),
        ("1 Civic Center Plaza", "downtown"),
        ("12 North Rd", "north"),
        ("9 SOUTH BLVD", "south"),
        ("", "other"),
        (None, "other"),
    ],
)
def test_auto_detect_zone(address, zone):
    assert auto_detect_zone(address) == zone


def test_read_clients_csv(clients_csv):
    """Test rows become candidates; blank account names are dropped."""
    candidates = read_clients_csv(clients_csv)

    assert [c.client_name for c in candidates] == ["THE CHEESECAKE FACTORY #12", "Harbor Grill", "Sunset Diner"]

    weekly = candidates[0]
    assert weekly.is_recurring
    assert weekly.fixed_day_of_week is None
    assert weekly.fixed_time == "10:00"
    assert weekly.visits_per_month == 4
    assert weekly.zone == "downtown"
    assert weekly.site_name == "Galleria"

    assert candidates[1].zone == "north"
    assert candidates[1].site_name is None
    assert not candidates[1].is_recurring
    assert candidates[2].account_number is None
    assert all(c.duration == 120 for c in candidates)


def test_read_clients_csv_custom_weekly_pattern(clients_csv):
    cfg = SchedulerConfig()
    cfg.imports.weekly_client_patterns = ["harbor"]

    candidates = read_clients_csv(clients_csv, cfg)

    assert [c.is_recurring for c in candidates] == [False, True, False]


def test_import_clients_csv_distributes_and_stores(db_session, clients_csv):
    """Test import into September 2025 around an existing booking."""
    ServiceRepository.create(
        db_session,
        ServiceRecord(service_date=date(2025, 9, 1), start_time="08:00", duration_minutes=60, client_name="Existing"),
    )

    result = import_clients_csv(db_session, clients_csv, date(2025, 9, 1))

    assert result.summary.total_visits == 6
    assert result.summary.recurring_clients == 1
    by_client = {}
    for s in result.services:
        by_client.setdefault(s.client_name, []).append(s)
    assert [s.service_date.day for s in by_client["THE CHEESECAKE FACTORY #12"]] == [3, 10, 17, 24]
    assert by_client["Harbor Grill"][0].service_date == date(2025, 9, 2)
    assert by_client["Harbor Grill"][0].start_time == "08:00"
    assert by_client["Sunset Diner"][0].service_date == date(2025, 9, 4)

    assert len(ServiceRepository.get_all(db_session)) == 7


def test_import_clients_csv_uses_configured_recurring_day(db_session, clients_csv):
    cfg = SchedulerConfig()
    cfg.distribution.default_recurring_day = 0

    result = import_clients_csv(db_session, clients_csv, date(2025, 9, 1), cfg=cfg, persist=False)

    weekly = [s for s in result.services if s.kind == "recurring"]
    assert [s.service_date.day for s in weekly] == [1, 8, 15, 22, 29]
    assert all(s.start_time == "10:00" for s in weekly)


def test_import_clients_csv_dry_run(db_session, clients_csv):
    result = import_clients_csv(db_session, clients_csv, date(2025, 9, 1), persist=False)
    assert result.summary.total_visits == 6
    assert ServiceRepository.get_all(db_session) == []


def test_services_frame_sorted(make_service):
    records = [make_service(date(2025, 9, 3), "08:00"), make_service(date(2025, 9, 2), "13:00")]
    df = services_frame(records)
    assert list(df.columns) == EXPORT_COLUMNS
    assert list(df["start_time"]) == ["13:00", "08:00"]
    assert services_frame([]).empty


def test_export_services_csv(db_session, tmp_path):
    ServiceRepository.bulk_create(
        db_session,
        [
            ServiceRecord(service_date=date(2025, 9, 2), start_time="10:00", duration_minutes=60, client_name="B"),
            ServiceRecord(service_date=date(2025, 9, 2), start_time="08:00", duration_minutes=60, client_name="A"),
            ServiceRecord(service_date=date(2025, 10, 1), start_time="08:00", duration_minutes=60, client_name="C"),
        ],
    )
    out = tmp_path / "services.csv"

    count = export_services_csv(db_session, out, month=date(2025, 9, 1))

    assert count == 2
    df = pd.read_csv(out)
    assert list(df.columns) == EXPORT_COLUMNS
    assert list(df["client_name"]) == ["A", "B"]

    assert export_services_csv(db_session, out) == 3
