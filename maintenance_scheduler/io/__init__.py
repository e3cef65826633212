"""I/O utilities for CSV import/export."""

from .export_csv import export_services_csv, services_frame
from .import_csv import auto_detect_zone, import_clients_csv, read_clients_csv

__all__ = [
    "read_clients_csv",
    "import_clients_csv",
    "auto_detect_zone",
    "export_services_csv",
    "services_frame",
]
