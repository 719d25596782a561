"""
CSV File Export

Writes the CSV produced by the serializer to a UTF-8 file that the UI
can hand to the user (download / share sheet).

Failures here are NON-FATAL: the caller shows a notice and the
in-memory expense lists are never touched.
"""

from pathlib import Path
from typing import Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from microspend.config import get_settings
from microspend.export.csv_serializer import CSV_MIME_TYPE, to_csv
from microspend.models.expense import Expense


class ExportError(Exception):
    """Base exception for export operations."""
    pass


class NothingToExportError(ExportError):
    """The user has no expenses yet."""

    def __init__(self):
        super().__init__("Nothing to export. Add some expenses first.")


class ExportResult(BaseModel):
    """A finished export."""
    model_config = ConfigDict(frozen=True)

    path: Path
    row_count: int = Field(ge=0)
    csv_text: str
    mime_type: str = CSV_MIME_TYPE

    @property
    def filename(self) -> str:
        return self.path.name


class ExpenseExporter:
    """Serializes expenses and writes them to the export directory."""

    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        filename: Optional[str] = None,
    ):
        settings = get_settings().export
        self._directory = Path(directory or settings.directory)
        self._filename = filename or settings.filename

    @property
    def target_path(self) -> Path:
        return self._directory / self._filename

    def write(self, expenses: Sequence[Expense]) -> ExportResult:
        """
        Write all expenses to CSV, replacing any previous export.

        Raises:
            NothingToExportError: If `expenses` is empty
            ExportError: If the file can't be written
        """
        if not expenses:
            raise NothingToExportError()

        csv_text = to_csv(expenses)
        path = self.target_path
        # Written beside the target, then swapped in so a failed write keeps the old export
        partial = path.with_name(path.name + ".part")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            partial.write_text(csv_text, encoding="utf-8")
            partial.replace(path)
        except OSError as e:
            if partial.exists():
                partial.unlink()
            raise ExportError(f"Failed to write {path}: {e}") from e

        return ExportResult(path=path, row_count=len(expenses), csv_text=csv_text)
