"""
Import/export pipeline.

Responsibilities:
- encoding detection + decoding of uploaded bytes
- newline normalization
- header location, row extraction
- export back to UTF-8 with BOM
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, Optional

from charset_normalizer import from_bytes
from pydantic import BaseModel, Field

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import NoDataRowsError
from .extract import CandidateRecord, RowIssue, extract_records
from .headers import ColumnMap, is_blank_line, locate_headers
from .serialize import ExportableRecord, encode_export, serialize_records

logger = logging.getLogger(__name__)


class ImportResult(BaseModel):
    column_map: ColumnMap
    records: list[CandidateRecord] = Field(default_factory=list)
    issues: list[RowIssue] = Field(default_factory=list)
    decoding: Dict[str, Any] = Field(default_factory=dict)
    total_lines: int = 0


def decode_upload(raw: bytes) -> tuple[str, Dict[str, Any]]:
    """
    Decode uploaded bytes to text with LF newlines.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is stripped.
    - If decode fails, fall back to UTF-8, then to replacement characters, and report it.
    """
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and (decode_used.lower().replace("-", "_") in ("utf_8", "utf8", "utf_8_sig")):
        decode_used = "utf-8-sig"

    decode_fallback = False

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8")
            decode_used = "utf-8"
            decode_fallback = True
        except UnicodeDecodeError:
            # Last resort: decode with replacement so the import can continue deterministically
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"
            decode_fallback = True

    if decode_fallback:
        logger.warning("decode with %s failed, fell back to %s", detected, decode_used)

    nl_before = {
        "crlf": text.count("\r\n"),
        "cr": text.count("\r") - text.count("\r\n"),
    }
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    report = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
        "newlines": {
            "policy": "lf",
            "before": nl_before,
            "changed": (nl_before["crlf"] > 0) or (nl_before["cr"] > 0),
        },
    }
    return text, report


def split_lines(text: str) -> list[str]:
    if text.startswith("\ufeff"):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def import_tasks(
    raw: bytes | str,
    config: EngineConfig = DEFAULT_CONFIG,
    *,
    today: Optional[date] = None,
) -> ImportResult:
    """
    Turn a delimited file into candidate task records.

    Raises ``MissingHeadersError`` or ``NoDataRowsError``; row-level problems
    are reported in ``issues`` instead.
    """
    if isinstance(raw, bytes):
        text, decoding = decode_upload(raw)
    else:
        text, decoding = raw, {}

    lines = split_lines(text)
    column_map = locate_headers(lines, config)

    data_lines = lines[column_map.data_start_row:]
    if all(is_blank_line(line, config.delimiter) for line in data_lines):
        logger.warning("headers found but no data lines after row %d", column_map.data_start_row)
        raise NoDataRowsError(column_map.data_start_row - 1)

    extracted = extract_records(lines, column_map, config, today=today)
    logger.info(
        "imported %d records (%d rows skipped) from %d lines",
        len(extracted.records), len(extracted.issues), len(lines),
    )
    return ImportResult(
        column_map=column_map,
        records=extracted.records,
        issues=extracted.issues,
        decoding=decoding,
        total_lines=len(lines),
    )


def export_tasks(
    records: Iterable[ExportableRecord],
    config: EngineConfig = DEFAULT_CONFIG,
) -> bytes:
    return encode_export(serialize_records(records, config))
