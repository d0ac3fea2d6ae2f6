from __future__ import annotations

import base64
import hashlib
import logging

from fastapi import FastAPI, File, HTTPException, UploadFile

from .config import DEFAULT_CONFIG, load_settings
from .dates import normalize_date, render_date
from .errors import ImportStructureError
from .logging_config import setup_logging
from .models import (
    DateRequest,
    DateResponse,
    ExportedCsv,
    ExportRequest,
    ExportResponse,
    HealthResponse,
    ImportReport,
    ImportResponse,
    ReportSummary,
)
from .normalize import export_tasks, import_tasks
from .records import materialize

settings = load_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="task-csv-engine",
    description="Task list import/export for loosely structured CSV files",
    version="0.1.0",
)


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/tasks/import", response_model=ImportResponse)
async def import_csv(file: UploadFile = File(...)):
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    if settings.max_upload_bytes is not None and len(raw) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        result = import_tasks(raw, DEFAULT_CONFIG)
    except ImportStructureError as exc:
        logger.warning("import of %s rejected: %s", file.filename, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    tasks = [materialize(candidate, DEFAULT_CONFIG) for candidate in result.records]
    return ImportResponse(
        tasks=tasks,
        column_map=result.column_map,
        report=ImportReport(
            summary=ReportSummary(
                lines=result.total_lines,
                imported=len(tasks),
                skipped=len(result.issues),
            ),
            decoding=result.decoding,
            warnings=result.issues,
        ),
    )


@app.post("/tasks/export", response_model=ExportResponse)
def export_csv(body: ExportRequest):
    data = export_tasks(body.tasks, DEFAULT_CONFIG)
    return ExportResponse(
        csv=ExportedCsv(
            sha256=_sha256_hex(data),
            content_b64=base64.b64encode(data).decode("ascii"),
            rows=len(body.tasks),
        )
    )


@app.post("/dates/normalize", response_model=DateResponse)
def normalize_date_cell(body: DateRequest):
    value = normalize_date(body.text, sentinels=DEFAULT_CONFIG.date_sentinels)
    return DateResponse(value=value, rendered=render_date(value))
