from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import rules

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class FieldSpec(BaseModel):
    """One logical column: how it is exported and which spellings are accepted on import."""

    model_config = ConfigDict(frozen=True)

    name: str
    canonical: str
    variants: tuple[str, ...]
    required: bool = True

    @field_validator("variants")
    @classmethod
    def variants_include_canonical(cls, value: tuple[str, ...], info) -> tuple[str, ...]:
        cleaned = tuple(v.strip() for v in value if v and v.strip())
        canonical = info.data.get("canonical")
        if canonical and canonical.upper() not in {v.upper() for v in cleaned}:
            cleaned = (canonical,) + cleaned
        if not cleaned:
            raise ValueError("at least one header variant is required")
        return cleaned

    @property
    def variants_upper(self) -> tuple[str, ...]:
        return tuple(v.upper() for v in self.variants)


class EngineConfig(BaseModel):
    """Everything the engine needs at call time. Passed in, never mutated."""

    model_config = ConfigDict(frozen=True)

    termini: FieldSpec = FieldSpec(
        name="Termini",
        canonical=rules.HEADER_TERMINI,
        variants=rules.HEADER_VARIANTS_TERMINI,
    )
    content: FieldSpec = FieldSpec(
        name="Content",
        canonical=rules.HEADER_CONTENT,
        variants=rules.HEADER_VARIANTS_CONTENT,
    )
    due_date: FieldSpec = FieldSpec(
        name="DueDate",
        canonical=rules.HEADER_DUE_DATE,
        variants=rules.HEADER_VARIANTS_DUE_DATE,
    )
    max_scan_lines: int = Field(default=rules.MAX_SCAN_LINES, gt=0)
    delimiter: str = Field(default=rules.DELIMITER, min_length=1, max_length=1)
    date_sentinels: tuple[str, ...] = rules.DATE_SENTINELS
    not_specified: str = rules.NOT_SPECIFIED
    not_applicable: str = rules.NOT_APPLICABLE
    default_status: str = rules.DEFAULT_TASK_STATUS
    default_color: str = rules.INITIAL_POSTIT_COLOR
    palette: tuple[tuple[str, str], ...] = rules.POSTIT_COLOR_PALETTE

    @field_validator("content", "due_date")
    @classmethod
    def always_required(cls, value: FieldSpec) -> FieldSpec:
        if not value.required:
            raise ValueError(f"{value.name} column cannot be optional")
        return value

    @property
    def field_specs(self) -> tuple[FieldSpec, FieldSpec, FieldSpec]:
        return (self.termini, self.content, self.due_date)


DEFAULT_CONFIG = EngineConfig()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    app_env: str = "development"
    log_level: str = "INFO"
    max_upload_bytes: Optional[int] = 5_000_000


def load_settings() -> Settings:
    load_env()
    raw_limit = os.getenv("MAX_UPLOAD_BYTES", "").strip()
    return Settings(
        app_env=os.getenv("APP_ENV", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        max_upload_bytes=int(raw_limit) if raw_limit else Settings.max_upload_bytes,
    )
