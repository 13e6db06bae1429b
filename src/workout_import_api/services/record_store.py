"""
Record Store Interface (Port) and in-memory implementation.

The import pipeline hands canonical records to a RecordStore; persistence
itself (database, client cache) lives behind this interface.
"""
import uuid
from typing import Any, Dict, List, Optional, Protocol, Union

from workout_import_api.parsers.models import ExerciseRecord, WorkoutRecord


AUTO_CREATED_NOTE = "Auto-created during workout import"


class RecordStore(Protocol):
    """
    Abstract interface for storing imported records.

    Exercise names are unique; workouts reference exercises by name.
    """

    def get_exercise(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Find a stored exercise by exact name.

        Args:
            name: Exercise name

        Returns:
            Stored exercise dictionary or None if not found
        """
        ...

    def create_exercise(self, record: ExerciseRecord) -> Dict[str, Any]:
        """
        Store a new exercise.

        Returns:
            Stored exercise dictionary including its generated id
        """
        ...

    def create_workout(self, record: WorkoutRecord) -> Dict[str, Any]:
        """
        Store a workout with its exercises and sets.

        Exercises referenced by name that do not exist yet are created.

        Returns:
            Stored workout dictionary including its generated id
        """
        ...


class InMemoryRecordStore:
    """Dict-backed RecordStore for local development and tests."""

    def __init__(self):
        self._exercises: Dict[str, Dict[str, Any]] = {}
        self._workouts: List[Dict[str, Any]] = []

    def get_exercise(self, name: str) -> Optional[Dict[str, Any]]:
        return self._exercises.get(name)

    def create_exercise(self, record: ExerciseRecord) -> Dict[str, Any]:
        if record.name in self._exercises:
            raise ValueError(f"Exercise '{record.name}' already exists")
        stored = self._stored(record)
        self._exercises[record.name] = stored
        return stored

    def create_workout(self, record: WorkoutRecord) -> Dict[str, Any]:
        # Nothing is written until the workout and its new exercises are all built
        new_exercises: Dict[str, Dict[str, Any]] = {}
        for exercise in record.exercises:
            name = exercise.exercise_name
            if name not in self._exercises and name not in new_exercises:
                new_exercises[name] = self._stored(ExerciseRecord(
                    name=name,
                    category="other",
                    muscle_group=["full body"],
                    notes=AUTO_CREATED_NOTE,
                ))

        stored = self._stored(record)

        self._exercises.update(new_exercises)
        self._workouts.append(stored)
        return stored

    def list_exercises(self) -> List[Dict[str, Any]]:
        return list(self._exercises.values())

    def list_workouts(self) -> List[Dict[str, Any]]:
        return list(self._workouts)

    def _stored(self, record: Union[ExerciseRecord, WorkoutRecord]) -> Dict[str, Any]:
        return {"id": str(uuid.uuid4()), **record.model_dump(by_alias=True)}
