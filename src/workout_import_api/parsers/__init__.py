"""Multi-format import pipeline for exercise and workout files."""
from .detection import detect_format, format_from_mime, resolve_format
from .dispatch import parse_file
from .models import (
    DataKind,
    ExerciseRecord,
    FileFormat,
    ParseResult,
    SetRecord,
    ValidationResult,
    WorkoutExerciseRecord,
    WorkoutRecord,
)
from .validators import (
    normalize_exercise,
    normalize_workout,
    validate_exercise,
    validate_workout,
)

__all__ = [
    "DataKind",
    "ExerciseRecord",
    "FileFormat",
    "ParseResult",
    "SetRecord",
    "ValidationResult",
    "WorkoutExerciseRecord",
    "WorkoutRecord",
    "detect_format",
    "format_from_mime",
    "normalize_exercise",
    "normalize_workout",
    "parse_file",
    "resolve_format",
    "validate_exercise",
    "validate_workout",
]
