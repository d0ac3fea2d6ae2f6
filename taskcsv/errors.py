from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import FieldSpec


class ImportStructureError(ValueError):
    """The file cannot be imported at all. Nothing from it is committed."""


class MissingHeadersError(ImportStructureError):
    def __init__(self, missing: tuple["FieldSpec", ...], scanned_lines: int) -> None:
        self.missing = missing
        self.scanned_lines = scanned_lines
        details = "; ".join(
            f"{spec.name} column not found (expected variants: {', '.join(spec.variants)})"
            for spec in missing
        )
        super().__init__(
            "Could not find all required columns. "
            f"Details: {details}. "
            f"Make sure the CSV contains these headers within its first {scanned_lines} non-blank rows."
        )

    @property
    def missing_fields(self) -> list[str]:
        return [spec.name for spec in self.missing]


class NoDataRowsError(ImportStructureError):
    def __init__(self, header_row: int) -> None:
        self.header_row = header_row
        super().__init__(f"Headers found on row {header_row + 1}, but no data rows follow them.")
