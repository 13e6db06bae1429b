"""
JSON Parser

Parses JSON files with support for:
- A single record or an array of records
- Wrapper objects ({"exercises": [...]}, {"workouts": [...]})
- Common workout shape variants (workoutExercises, exercise.name, set)
"""

import json
import logging
from typing import Any, Dict, List, Sequence, Tuple

from .base import BaseParser
from .models import DataKind, FileFormat, ParseResult

logger = logging.getLogger(__name__)


# Accepted spellings per logical field, highest priority first
WORKOUT_EXERCISES_ALIASES: Sequence[Tuple[str, ...]] = (
    ('exercises',),
    ('workoutExercises',),
    ('workout_exercises',),
)
EXERCISE_NAME_ALIASES: Sequence[Tuple[str, ...]] = (
    ('exerciseName',),
    ('exercise_name',),
    ('exercise', 'name'),
    ('name',),
)
SETS_ALIASES: Sequence[Tuple[str, ...]] = (
    ('sets',),
    ('set',),
)
SET_NUMBER_ALIASES: Sequence[Tuple[str, ...]] = (
    ('setNumber',),
    ('set_number',),
)

WRAPPER_KEYS = {
    DataKind.EXERCISE: 'exercises',
    DataKind.WORKOUT: 'workouts',
}


def first_present(data: Dict[str, Any], aliases: Sequence[Tuple[str, ...]]) -> Any:
    """Value of the first alias path that resolves to something non-empty"""
    for path in aliases:
        value: Any = data
        for key in path:
            value = value.get(key) if isinstance(value, dict) else None
        if value not in (None, '', []):
            return value
    return None


class JSONParser(BaseParser):
    """Parser for JSON files"""

    file_format = FileFormat.JSON

    def parse_exercises(self, text: str) -> ParseResult:
        return self._parse_items(text, DataKind.EXERCISE)

    def parse_workouts(self, text: str) -> ParseResult:
        return self._parse_items(text, DataKind.WORKOUT)

    def _parse_items(self, text: str, kind: DataKind) -> ParseResult:
        """Validate every record in the document, continuing past bad items"""
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            return self.failure(f"Failed to parse JSON: {e}")

        # Handle both single object and array
        data = parsed if isinstance(parsed, list) else [parsed]
        if not data:
            return self.failure(f"No data found: JSON file contains no {kind.value} data")

        label = kind.value.capitalize()

        for index, item in enumerate(data):
            try:
                entries = self._unwrap(item, WRAPPER_KEYS[kind])
                for entry_index, entry in enumerate(entries):
                    parts = []
                    if len(data) > 1:
                        parts.append(f"Item {index + 1}")
                    if len(entries) > 1:
                        parts.append(f"{label} {entry_index + 1}")
                    prefix = f"{', '.join(parts)}: " if parts else ''

                    if kind == DataKind.EXERCISE:
                        self.accept_exercise(entry, prefix=prefix)
                    else:
                        self.accept_workout(self._reshape_workout(entry), prefix=prefix)
            except Exception as e:
                logger.exception(f"Unexpected error in JSON item {index + 1}")
                self.add_error(f"Item {index + 1}: Failed to parse - {e}")

        if not self.records and not self.errors:
            return self.failure(f"No data found: JSON file contains no {kind.value} data")

        return self.result()

    def _unwrap(self, item: Any, wrapper_key: str) -> List[Any]:
        """Payload records of one top-level item, with or without a wrapper object"""
        if isinstance(item, list):
            return item
        if isinstance(item, dict) and isinstance(item.get(wrapper_key), (list, dict)):
            payload = item[wrapper_key]
            return payload if isinstance(payload, list) else [payload]
        return [item]

    def _reshape_workout(self, workout: Any) -> Any:
        """Resolve shape variants into the candidate shape the validator expects"""
        if not isinstance(workout, dict):
            return workout

        reshaped = dict(workout)
        exercises = first_present(workout, WORKOUT_EXERCISES_ALIASES)
        if exercises is not None:
            reshaped['exercises'] = exercises

        if isinstance(reshaped.get('exercises'), list):
            reshaped['exercises'] = [
                self._reshape_exercise(exercise, index)
                for index, exercise in enumerate(reshaped['exercises'])
            ]

        return reshaped

    def _reshape_exercise(self, exercise: Any, index: int) -> Any:
        if not isinstance(exercise, dict):
            return exercise

        reshaped = dict(exercise)
        exercise_name = first_present(exercise, EXERCISE_NAME_ALIASES)
        if exercise_name is not None:
            reshaped['exerciseName'] = exercise_name

        sets = first_present(exercise, SETS_ALIASES)
        if sets is not None:
            reshaped['sets'] = sets if isinstance(sets, list) else [sets]

        if reshaped.get('order') is None:
            reshaped['order'] = index

        if isinstance(reshaped.get('sets'), list):
            reshaped['sets'] = [
                self._reshape_set(workout_set, set_index)
                for set_index, workout_set in enumerate(reshaped['sets'])
            ]

        return reshaped

    def _reshape_set(self, workout_set: Any, index: int) -> Any:
        if not isinstance(workout_set, dict):
            return workout_set

        reshaped = dict(workout_set)
        set_number = first_present(workout_set, SET_NUMBER_ALIASES)
        reshaped['setNumber'] = set_number if set_number is not None else index + 1
        return reshaped
