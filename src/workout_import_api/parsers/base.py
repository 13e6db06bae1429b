"""
Base Parser

Abstract base class for all import parsers.
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from .models import (
    CanonicalRecord,
    DataKind,
    FileFormat,
    ParseResult,
)
from .validators import (
    DEFAULT_MUSCLE_GROUP,
    normalize_exercise,
    normalize_workout,
    validate_exercise,
    validate_workout,
)

logger = logging.getLogger(__name__)


MUSCLE_GROUP_DELIMITERS = re.compile(r'[,;|]')


def decode_content(content: bytes) -> str:
    """Decode bytes to string, trying multiple encodings"""
    encodings = ['utf-8-sig', 'utf-8', 'latin-1', 'cp1252']

    for encoding in encodings:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue

    # Fallback with error replacement
    return content.decode('utf-8', errors='replace')


def split_muscle_groups(value: Optional[str]) -> List[str]:
    """Split 'chest, triceps' / 'chest;triceps' / 'chest|triceps' into groups"""
    if not value:
        return []
    return [g.strip() for g in MUSCLE_GROUP_DELIMITERS.split(value) if g.strip()]


def muscle_groups_or_default(groups: Iterable[str]) -> List[str]:
    groups = [g for g in groups if g]
    return groups if groups else [DEFAULT_MUSCLE_GROUP]


class BaseParser(ABC):
    """Abstract base class for import parsers"""

    file_format: FileFormat

    def __init__(self):
        self.errors: List[str] = []
        self.records: List[CanonicalRecord] = []

    def parse(self, text: str, kind: DataKind) -> ParseResult:
        """
        Parse file text into canonical records of the requested kind.

        Args:
            text: Decoded file content
            kind: Which record shape the file holds

        Returns:
            ParseResult with accepted records and per-record errors
        """
        self.errors = []
        self.records = []

        if kind == DataKind.EXERCISE:
            return self.parse_exercises(text)
        return self.parse_workouts(text)

    @abstractmethod
    def parse_exercises(self, text: str) -> ParseResult:
        """Parse exercise definitions"""
        pass

    @abstractmethod
    def parse_workouts(self, text: str) -> ParseResult:
        """Parse workout logs"""
        pass

    def accept_exercise(self, candidate: Any, prefix: str = '') -> bool:
        """Validate and normalize one exercise candidate, recording failures"""
        validation = validate_exercise(candidate)
        if not validation.valid:
            self.add_error(f"{prefix}{'; '.join(validation.errors)}")
            return False
        self.records.append(normalize_exercise(candidate))
        return True

    def accept_workout(self, candidate: Any, prefix: str = '') -> bool:
        """Validate and normalize one workout candidate, recording failures"""
        validation = validate_workout(candidate)
        if not validation.valid:
            self.add_error(f"{prefix}{'; '.join(validation.errors)}")
            return False
        self.records.append(normalize_workout(candidate))
        return True

    def failure(self, error: str) -> ParseResult:
        """Structural failure: one error, no partial data"""
        logger.error(f"{self.file_format.value.upper()} import failed: {error}")
        return ParseResult(
            success=False,
            errors=[error],
            detected_format=self.file_format.value,
        )

    def result(self) -> ParseResult:
        """Accepted records plus any per-record errors collected so far"""
        return ParseResult(
            success=len(self.errors) == 0,
            data=list(self.records),
            errors=list(self.errors) if self.errors else None,
            detected_format=self.file_format.value,
        )

    def add_error(self, error: str):
        """Add a per-record error message"""
        self.errors.append(error)
        logger.warning(f"Parser error: {error}")
