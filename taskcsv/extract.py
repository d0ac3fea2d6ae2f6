from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from .config import DEFAULT_CONFIG, EngineConfig
from .dates import DateValue, PlaceholderDate, normalize_date
from .headers import ColumnMap, is_blank_line

logger = logging.getLogger(__name__)


class CandidateRecord(BaseModel):
    """A row that passed validation; identity and defaults are assigned later."""

    content: str
    termini_raw: str
    original_due_date: DateValue
    adjusted_date: DateValue
    source_row: int


class RowIssue(BaseModel):
    row: int
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str = "skipped"


class ExtractionResult(BaseModel):
    records: list[CandidateRecord] = Field(default_factory=list)
    issues: list[RowIssue] = Field(default_factory=list)


def _cell(row: list[str], index: Optional[int]) -> str:
    if index is None:
        return ""
    return row[index].strip()


def extract_records(
    lines: Sequence[str],
    column_map: ColumnMap,
    config: EngineConfig = DEFAULT_CONFIG,
    *,
    today: Optional[date] = None,
) -> ExtractionResult:
    result = ExtractionResult()
    required_index = column_map.max_index

    for i in range(column_map.data_start_row, len(lines)):
        line = lines[i]
        row_number = i + 1
        if is_blank_line(line, config.delimiter):
            continue

        # naive split; quoted delimiters are not honored
        row = line.split(config.delimiter)

        if len(row) <= required_index:
            logger.warning(
                "skipping row %d: %d columns, need index %d: %r",
                row_number, len(row), required_index, line,
            )
            result.issues.append(RowIssue(
                row=row_number,
                issue="row_too_short",
                value=str(len(row)),
            ))
            continue

        termini_raw = _cell(row, column_map.termini)
        content = _cell(row, column_map.content)
        due_text = _cell(row, column_map.due_date)

        if not content and not termini_raw and not due_text:
            logger.warning("skipping row %d: all key fields empty: %r", row_number, line)
            result.issues.append(RowIssue(row=row_number, issue="empty_fields", value=line))
            continue
        if not content:
            logger.warning(
                "skipping row %d: empty content (termini=%r, due date=%r)",
                row_number, termini_raw, due_text,
            )
            result.issues.append(RowIssue(
                row=row_number,
                column=config.content.name,
                issue="empty_content",
                value=line,
            ))
            continue

        if column_map.termini is None:
            termini_raw = config.not_applicable

        if due_text:
            due = normalize_date(due_text, today=today, sentinels=config.date_sentinels)
        else:
            due = PlaceholderDate(text=config.not_specified)

        result.records.append(CandidateRecord(
            content=content,
            termini_raw=termini_raw,
            original_due_date=due,
            adjusted_date=due,
            source_row=row_number,
        ))

    return result
