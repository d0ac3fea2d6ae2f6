from __future__ import annotations

from typing import Any, Dict, List
from pydantic import BaseModel, Field

from .dates import DateValue
from .extract import RowIssue
from .headers import ColumnMap
from .records import TaskRecord


class ExportedCsv(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8-sig")
    content_b64: str
    rows: int = 0


class ReportSummary(BaseModel):
    lines: int = 0
    imported: int = 0
    skipped: int = 0


class ImportReport(BaseModel):
    summary: ReportSummary
    decoding: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[RowIssue] = Field(default_factory=list)


class ImportResponse(BaseModel):
    tasks: List[TaskRecord]
    column_map: ColumnMap
    report: ImportReport


class ExportRequest(BaseModel):
    tasks: List[TaskRecord] = Field(default_factory=list)


class ExportResponse(BaseModel):
    csv: ExportedCsv


class DateRequest(BaseModel):
    text: str


class DateResponse(BaseModel):
    value: DateValue
    rendered: str


class HealthResponse(BaseModel):
    ok: bool = True
