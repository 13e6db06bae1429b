"""
Import Service

Orchestrates a file import: resolve the format, run the parsing pipeline,
then hand each canonical record to the record store and report what was
imported, skipped or failed.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from workout_import_api.parsers import parse_file
from workout_import_api.parsers.detection import coerce_format, resolve_format
from workout_import_api.parsers.models import (
    CanonicalRecord,
    DataKind,
    ExerciseRecord,
    FileFormat,
    WorkoutRecord,
)
from workout_import_api.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class ImportServiceError(RuntimeError):
    """Raised when an import cannot be carried out."""


class UnsupportedFileTypeError(ImportServiceError):
    """Raised when the upload is not CSV, JSON or XML."""


class ImportParseError(ImportServiceError):
    """Raised when the file does not parse into valid records."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class ImportSummary(BaseModel):
    """Outcome of one import"""
    kind: DataKind
    file_format: FileFormat
    total: int = 0
    imported: List[Dict[str, Any]] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    class Config:
        use_enum_values = True


class ImportService:
    """Parse uploaded files and store the resulting records."""

    def __init__(self, store: RecordStore):
        self.store = store

    def import_file(
        self,
        filename: Optional[str],
        content: Union[str, bytes],
        kind: Union[str, DataKind],
        content_type: Optional[str] = None,
        format_hint: Optional[str] = None,
    ) -> ImportSummary:
        """
        Import one uploaded file.

        Args:
            filename: Original filename (used for format detection)
            content: Raw file bytes or text
            kind: 'exercise' or 'workout'
            content_type: MIME type reported by the client
            format_hint: Explicit format chosen by the user

        Returns:
            ImportSummary with per-record outcomes

        Raises:
            UnsupportedFileTypeError: format could not be determined
            ImportParseError: the file failed to parse or validate
        """
        kind = DataKind(kind)

        if format_hint and coerce_format(format_hint) is None:
            raise UnsupportedFileTypeError(f"Unsupported file type: {format_hint}")

        file_format = resolve_format(filename, content_type, hint=format_hint)
        if file_format is None:
            raise UnsupportedFileTypeError(
                f"Unsupported file type for '{filename}' ({content_type or 'unknown type'})"
            )

        result = parse_file(content, file_format, kind)
        if not result.success:
            raise ImportParseError(result.errors or ["Failed to parse file"])

        records = result.records
        summary = ImportSummary(kind=kind, file_format=file_format, total=len(records))

        for record in records:
            self._store_record(record, summary)

        logger.info(
            f"Imported {len(summary.imported)}/{summary.total} {kind.value} records from "
            f"{filename or 'upload'} ({len(summary.skipped)} skipped, {len(summary.errors)} failed)"
        )
        return summary

    def _store_record(self, record: CanonicalRecord, summary: ImportSummary):
        try:
            if isinstance(record, ExerciseRecord):
                if self.store.get_exercise(record.name) is not None:
                    summary.skipped.append(f"{record.name} (already exists)")
                    return
                created = self.store.create_exercise(record)
                summary.imported.append({
                    "id": created.get("id"),
                    "name": record.name,
                    "category": record.category,
                    "muscleGroup": list(record.muscle_group),
                })
            elif isinstance(record, WorkoutRecord):
                created = self.store.create_workout(record)
                summary.imported.append({
                    "id": created.get("id"),
                    "name": record.name,
                    "date": record.date.isoformat(),
                    "exerciseCount": len(record.exercises),
                    "totalSets": record.total_sets,
                })
        except Exception as e:
            logger.exception(f"Failed to import {record.name}")
            summary.errors.append(f"Failed to import {record.name}: {e}")
