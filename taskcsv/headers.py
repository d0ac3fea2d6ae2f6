from __future__ import annotations

import logging
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict

from .config import DEFAULT_CONFIG, EngineConfig, FieldSpec
from .errors import MissingHeadersError

logger = logging.getLogger(__name__)


class ColumnMap(BaseModel):
    """Resolved column positions plus the first row that may hold data (0-based)."""

    model_config = ConfigDict(frozen=True)

    termini: Optional[int]
    content: int
    due_date: int
    header_rows: dict[str, int]
    data_start_row: int

    @property
    def max_index(self) -> int:
        return max(i for i in (self.termini, self.content, self.due_date) if i is not None)


def split_cells(line: str, delimiter: str = DEFAULT_CONFIG.delimiter) -> list[str]:
    return [cell.strip() for cell in line.split(delimiter)]


def is_blank_line(line: str, delimiter: str = DEFAULT_CONFIG.delimiter) -> bool:
    return all(cell == "" for cell in split_cells(line, delimiter))


def _match_field(cells_upper: list[str], spec: FieldSpec) -> Optional[int]:
    for variant in spec.variants_upper:
        if variant in cells_upper:
            return cells_upper.index(variant)
    return None


def locate_headers(lines: Sequence[str], config: EngineConfig = DEFAULT_CONFIG) -> ColumnMap:
    """
    Find the column of each logical field within the first non-blank lines.

    Fields may sit on different rows. A field keeps the first position it is
    found at; later rows only fill fields still missing. An optional field
    is only taken from rows up to the last required header row. Scanning stops once
    every required field is placed or ``config.max_scan_lines`` non-blank lines were seen.
    """
    found: dict[str, tuple[int, int]] = {}
    scanned = 0

    for row_index, line in enumerate(lines):
        if scanned >= config.max_scan_lines:
            break
        if is_blank_line(line, config.delimiter):
            continue
        scanned += 1

        cells_upper = [cell.upper() for cell in split_cells(line, config.delimiter)]
        for spec in config.field_specs:
            if spec.name in found:
                continue
            column = _match_field(cells_upper, spec)
            if column is not None:
                found[spec.name] = (column, row_index)

        if all(spec.name in found for spec in config.field_specs if spec.required):
            break

    missing = tuple(spec for spec in config.field_specs if spec.required and spec.name not in found)
    if missing:
        logger.warning(
            "header scan failed after %d lines; missing %s",
            scanned,
            ", ".join(spec.name for spec in missing),
        )
        raise MissingHeadersError(missing, config.max_scan_lines)

    header_rows = {name: row for name, (_, row) in found.items()}
    termini = found.get(config.termini.name)
    column_map = ColumnMap(
        termini=termini[0] if termini else None,
        content=found[config.content.name][0],
        due_date=found[config.due_date.name][0],
        header_rows=header_rows,
        data_start_row=max(header_rows.values()) + 1,
    )
    logger.debug("located headers: %s", column_map)
    return column_map
