"""
Import API Routes

Upload endpoints for bulk-importing exercise definitions and workout logs
from CSV, JSON or XML files.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from workout_import_api.config import settings
from workout_import_api.parsers.models import DataKind
from workout_import_api.services.import_service import (
    ImportParseError,
    ImportService,
    ImportSummary,
    UnsupportedFileTypeError,
)
from workout_import_api.services.record_store import InMemoryRecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import", tags=["Import"])

UNSUPPORTED_FILE_MESSAGE = "Unsupported file type. Please upload a CSV, JSON, or XML file."

# Initialize service
import_service = ImportService(InMemoryRecordStore())


def get_import_service() -> ImportService:
    """Dependency hook so tests can swap the record store."""
    return import_service


def _summary_response(summary: ImportSummary) -> dict:
    return {
        "success": True,
        "format": summary.file_format,
        "summary": {
            "total": summary.total,
            "imported": len(summary.imported),
            "skipped": len(summary.skipped),
            "errors": len(summary.errors),
        },
        "imported": summary.imported,
        "skipped": summary.skipped,
        "errors": summary.errors or None,
    }


async def _import_upload(
    file: UploadFile,
    kind: DataKind,
    format_hint: Optional[str],
    service: ImportService,
) -> dict:
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {settings.MAX_UPLOAD_BYTES} bytes.",
        )

    try:
        summary = service.import_file(
            filename=file.filename,
            content=content,
            kind=kind,
            content_type=file.content_type,
            format_hint=format_hint,
        )
    except UnsupportedFileTypeError as exc:
        logger.warning(f"Rejected upload {file.filename!r}: {exc}")
        raise HTTPException(status_code=400, detail=UNSUPPORTED_FILE_MESSAGE) from exc
    except ImportParseError as exc:
        raise HTTPException(
            status_code=400,
            detail={"error": "Failed to parse file", "details": exc.errors},
        ) from exc
    except Exception as exc:
        logger.exception(f"{kind.value.capitalize()} import error")
        raise HTTPException(
            status_code=500, detail="Internal server error during import"
        ) from exc

    return _summary_response(summary)


@router.post("/exercises")
async def import_exercises(
    file: UploadFile = File(..., description="CSV, JSON or XML file of exercises"),
    format: Optional[str] = Form(default=None, description="Explicit format: csv, json or xml"),
    service: ImportService = Depends(get_import_service),
):
    """
    Import exercise definitions.

    Exercises whose name already exists are skipped.
    """
    return await _import_upload(file, DataKind.EXERCISE, format, service)


@router.post("/workouts")
async def import_workouts(
    file: UploadFile = File(..., description="CSV, JSON or XML file of workout logs"),
    format: Optional[str] = Form(default=None, description="Explicit format: csv, json or xml"),
    service: ImportService = Depends(get_import_service),
):
    """
    Import workout logs with their exercises and sets.

    Exercises referenced by name that do not exist yet are created.
    """
    return await _import_upload(file, DataKind.WORKOUT, format, service)
