from __future__ import annotations

from typing import Iterable, Optional, Protocol

from . import rules
from .config import DEFAULT_CONFIG, EngineConfig
from .dates import ConcreteDate, PlaceholderDate, render_date


class ExportableRecord(Protocol):
    termini_raw: str
    content: str
    original_due_date: ConcreteDate | PlaceholderDate


def escape_cell(cell: Optional[str], delimiter: str = rules.DELIMITER) -> str:
    """Quote a cell holding the delimiter, a line break or a quote; double inner quotes."""
    if cell is None:
        return ""
    if delimiter in cell or "\n" in cell or "\r" in cell or '"' in cell:
        return '"' + cell.replace('"', '""') + '"'
    return cell


def serialize_records(
    records: Iterable[ExportableRecord],
    config: EngineConfig = DEFAULT_CONFIG,
) -> str:
    delim = config.delimiter
    lines = [delim.join(spec.canonical for spec in config.field_specs)]
    for record in records:
        lines.append(delim.join([
            escape_cell(record.termini_raw, delim),
            escape_cell(record.content, delim),
            escape_cell(render_date(record.original_due_date), delim),
        ]))
    return "\n".join(lines)


def encode_export(text: str) -> bytes:
    return text.encode(rules.TARGET_ENCODING)
