"""
Parser Models

Pydantic models for the canonical exercise and workout records that every
import parser produces, plus the result types shared by the pipeline.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


Number = Union[int, float]


class FileFormat(str, Enum):
    """Supported interchange formats"""
    CSV = "csv"
    JSON = "json"
    XML = "xml"


class DataKind(str, Enum):
    """Which canonical record shape an import targets"""
    EXERCISE = "exercise"
    WORKOUT = "workout"


class CanonicalModel(BaseModel):
    """Immutable record with camelCase wire aliases (muscleGroup, setNumber...)"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


class ExerciseRecord(CanonicalModel):
    """Normalized exercise definition"""
    name: str = Field(..., min_length=1)
    category: str
    muscle_group: List[str] = Field(..., min_length=1)
    notes: Optional[str] = None


class SetRecord(CanonicalModel):
    """One performed set; at least one metric is always present"""
    set_number: int = Field(..., ge=1)
    reps: Optional[Number] = None
    weight: Optional[Number] = None
    duration: Optional[Number] = None
    distance: Optional[Number] = None
    notes: Optional[str] = None


class WorkoutExerciseRecord(CanonicalModel):
    """An exercise performed within a workout, referenced by name"""
    exercise_name: str = Field(..., min_length=1)
    order: int = Field(..., ge=0)
    sets: List[SetRecord] = Field(..., min_length=1)


class WorkoutRecord(CanonicalModel):
    """Normalized workout log: workout -> exercises -> sets"""
    name: str = Field(..., min_length=1)
    date: datetime
    notes: Optional[str] = None
    exercises: List[WorkoutExerciseRecord] = Field(..., min_length=1)

    @property
    def total_sets(self) -> int:
        return sum(len(e.sets) for e in self.exercises)


CanonicalRecord = Union[ExerciseRecord, WorkoutRecord]


class ValidationResult(BaseModel):
    """Outcome of validating one candidate record"""
    valid: bool
    errors: List[str] = Field(default_factory=list)


class ParseResult(BaseModel):
    """Result from a parser"""
    success: bool = True
    data: Optional[List[CanonicalRecord]] = None
    errors: Optional[List[str]] = None
    detected_format: Optional[str] = None

    class Config:
        frozen = True

    @property
    def records(self) -> List[CanonicalRecord]:
        """Accepted records, empty when the file failed structurally"""
        return list(self.data or [])
