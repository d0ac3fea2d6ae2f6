from __future__ import annotations

import re
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Callable, Iterable, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, field_validator

from .config import DEFAULT_CONFIG, EngineConfig
from .dates import DateValue, coerce_date
from .extract import CandidateRecord

_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class TaskStatus(StrEnum):
    PENDING = "Pendent"
    IN_PROGRESS = "En progrés"
    COMPLETED = "Completat"
    ARCHIVED = "Arxivat"


class TaskRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    termini_raw: str
    original_due_date: DateValue
    adjusted_date: DateValue
    status: TaskStatus = TaskStatus.PENDING
    color: str
    created_at: datetime

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content must not be empty")
        return value

    @field_validator("color")
    @classmethod
    def hex_color(cls, value: str) -> str:
        if not _COLOR_RE.match(value):
            raise ValueError(f"color must be #RRGGBB, got {value!r}")
        return value.upper()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


def _palette_color(color: str, config: EngineConfig) -> str:
    allowed = {value.upper() for _, value in config.palette}
    if color.upper() not in allowed:
        raise ValueError(f"color {color!r} is not in the palette")
    return color


def materialize(
    candidate: CandidateRecord,
    config: EngineConfig = DEFAULT_CONFIG,
    *,
    now: Optional[datetime] = None,
    id_factory: Callable[[], str] = _new_id,
) -> TaskRecord:
    return TaskRecord(
        id=id_factory(),
        content=candidate.content,
        termini_raw=candidate.termini_raw,
        original_due_date=candidate.original_due_date,
        adjusted_date=candidate.adjusted_date,
        status=TaskStatus(config.default_status),
        color=_palette_color(config.default_color, config),
        created_at=now or _utcnow(),
    )


def new_task(
    content: str,
    *,
    termini_raw: Optional[str] = None,
    due_date: object = None,
    adjusted_date: object = None,
    status: Optional[TaskStatus] = None,
    color: Optional[str] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
    today: Optional[date] = None,
) -> TaskRecord:
    """Build a task from manual input. ``adjusted_date`` falls back to the due date."""
    date_opts = {
        "not_specified": config.not_specified,
        "today": today,
        "sentinels": config.date_sentinels,
    }
    original = coerce_date(due_date, **date_opts)
    adjusted = original if adjusted_date is None else coerce_date(adjusted_date, **date_opts)
    return TaskRecord(
        id=_new_id(),
        content=content,
        termini_raw=termini_raw if termini_raw is not None else config.not_applicable,
        original_due_date=original,
        adjusted_date=adjusted,
        status=status or TaskStatus(config.default_status),
        color=_palette_color(color or config.default_color, config),
        created_at=now or _utcnow(),
    )


def update_task(
    record: TaskRecord,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    **changes: object,
) -> TaskRecord:
    """Replace whole fields; the result is revalidated."""
    frozen = _IMMUTABLE_FIELDS.intersection(changes)
    if frozen:
        raise ValueError(f"cannot change {', '.join(sorted(frozen))}")
    unknown = set(changes) - set(TaskRecord.model_fields)
    if unknown:
        raise ValueError(f"unknown task fields: {', '.join(sorted(unknown))}")
    for key in ("original_due_date", "adjusted_date"):
        if key in changes:
            changes[key] = coerce_date(
                changes[key],
                not_specified=config.not_specified,
                sentinels=config.date_sentinels,
            )
    if "color" in changes:
        changes["color"] = _palette_color(str(changes["color"]), config)
    data = record.model_dump()
    data.update(changes)
    return TaskRecord.model_validate(data)


def merge_import(
    existing: Iterable[TaskRecord],
    imported: Iterable[TaskRecord],
    *,
    replace: bool = False,
) -> list[TaskRecord]:
    if replace:
        return list(imported)
    return [*existing, *imported]


def remove_task(records: Iterable[TaskRecord], task_id: str) -> list[TaskRecord]:
    return [record for record in records if record.id != task_id]
