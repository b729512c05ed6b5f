"""Pydantic result models for the ingestkit-html package."""

from __future__ import annotations

from openpyxl.worksheet.worksheet import Worksheet
from pydantic import BaseModel

from ingestkit_html.errors import IngestError


class SheetSummary(BaseModel):
    """Shape of one worksheet after a load."""

    title: str
    max_row: int = 0
    max_column: int = 0
    cell_count: int = 0

    @classmethod
    def from_worksheet(cls, worksheet: Worksheet) -> SheetSummary:
        cell_count = sum(
            1
            for row in worksheet.iter_rows(values_only=True)
            for value in row
            if value not in (None, "")
        )
        if cell_count == 0:
            return cls(title=worksheet.title)
        return cls(
            title=worksheet.title,
            max_row=worksheet.max_row,
            max_column=worksheet.max_column,
            cell_count=cell_count,
        )


class ProcessingResult(BaseModel):
    """Final result of HTML ingestion via ``HTMLRouter.process()``."""

    file_path: str
    ingest_key: str
    ingest_run_id: str
    tenant_id: str | None = None
    sheets: list[SheetSummary] = []
    cells_written: int = 0
    output_path: str | None = None
    errors: list[str] = []
    warnings: list[str] = []
    error_details: list[IngestError] = []
    processing_time_seconds: float = 0.0
