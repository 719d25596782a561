"""CSV export: serializer, file writer and the ad gate in front of it."""

from microspend.export.ad_gate import AdGate, AdState
from microspend.export.csv_serializer import (
    CSV_COLUMNS,
    CSV_HEADER,
    CSV_MIME_TYPE,
    quote_field,
    to_csv,
)
from microspend.export.exporter import (
    ExpenseExporter,
    ExportError,
    ExportResult,
    NothingToExportError,
)

__all__ = [
    "AdGate",
    "AdState",
    "CSV_COLUMNS",
    "CSV_HEADER",
    "CSV_MIME_TYPE",
    "quote_field",
    "to_csv",
    "ExpenseExporter",
    "ExportError",
    "ExportResult",
    "NothingToExportError",
]
