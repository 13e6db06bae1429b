"""
Validators

Schema validation and normalization for imported records.

Candidates are loosely-typed dicts produced by the format parsers (camelCase
keys, as on the wire). validate_* reports every violation of one record;
normalize_* turns a candidate that passed validation into a canonical model.
"""

from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from typing import Any, List, Optional

from workout_import_api.utils import is_number

from .models import (
    CanonicalModel,
    ExerciseRecord,
    SetRecord,
    ValidationResult,
    WorkoutExerciseRecord,
    WorkoutRecord,
)


VALID_CATEGORIES = ['strength', 'cardio', 'flexibility', 'balance', 'sports', 'other']

VALID_MUSCLE_GROUPS = [
    'chest', 'back', 'shoulders', 'biceps', 'triceps', 'forearms',
    'abs', 'obliques', 'lower back', 'glutes', 'quadriceps', 'hamstrings',
    'calves', 'hip flexors', 'adductors', 'abductors', 'neck', 'full body',
]

DEFAULT_MUSCLE_GROUP = 'full body'

SET_METRICS = ('reps', 'weight', 'duration', 'distance')

# Non-ISO date layouts seen in spreadsheet exports
DATE_FORMATS = [
    '%m/%d/%Y',
    '%m/%d/%Y %H:%M',
    '%m/%d/%Y %H:%M:%S',
    '%Y/%m/%d',
    '%d.%m.%Y',
    '%B %d, %Y',
    '%b %d, %Y',
    '%d %B %Y',
    '%d %b %Y',
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _snake(key: str) -> str:
    return ''.join(f'_{c.lower()}' if c.isupper() else c for c in key)


def get_field(candidate: Mapping, key: str) -> Any:
    """Read a camelCase field, falling back to its snake_case spelling."""
    value = candidate.get(key)
    if value is None:
        value = candidate.get(_snake(key))
    return value


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def _as_candidate(value: Any) -> Any:
    """Canonical records are checked in their camelCase wire shape."""
    if isinstance(value, CanonicalModel):
        return value.model_dump(by_alias=True)
    return value


def _is_whole(value: Any) -> bool:
    return is_number(value) and float(value).is_integer()


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse a workout date.

    Accepts datetime/date values, ISO-8601 strings (a trailing 'Z' is UTC),
    a few common spreadsheet layouts, and numbers as epoch milliseconds.
    Values without an offset are taken as UTC, so every parsed date is
    timezone-aware. Returns None when the value is not a recognisable date.
    """
    parsed = _read_date(value)
    if parsed is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _read_date(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if is_number(value):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    iso_text = text[:-1] + '+00:00' if text.endswith(('Z', 'z')) else text
    try:
        return datetime.fromisoformat(iso_text)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_exercise(exercise: Any) -> ValidationResult:
    """Check an exercise candidate against the canonical exercise schema."""
    exercise = _as_candidate(exercise)
    if not isinstance(exercise, Mapping):
        return ValidationResult(valid=False, errors=['Exercise must be an object'])

    errors: List[str] = []

    if not _is_non_empty_string(exercise.get('name')):
        errors.append('Exercise name is required and must be a non-empty string')

    category = exercise.get('category')
    if not isinstance(category, str) or category.strip().lower() not in VALID_CATEGORIES:
        errors.append(f"Exercise category must be one of: {', '.join(VALID_CATEGORIES)}")

    muscle_groups = get_field(exercise, 'muscleGroup')
    if not isinstance(muscle_groups, list) or len(muscle_groups) == 0:
        errors.append('Exercise must have at least one muscle group')
    else:
        invalid_groups = [
            str(group) for group in muscle_groups
            if not isinstance(group, str) or group.strip().lower() not in VALID_MUSCLE_GROUPS
        ]
        if invalid_groups:
            errors.append(
                f"Invalid muscle groups: {', '.join(invalid_groups)}. "
                f"Valid options: {', '.join(VALID_MUSCLE_GROUPS)}"
            )

    notes = exercise.get('notes')
    if notes is not None and not isinstance(notes, str):
        errors.append('Exercise notes must be a string')

    return ValidationResult(valid=len(errors) == 0, errors=errors)


def validate_workout(workout: Any) -> ValidationResult:
    """Check a workout candidate, recursing into its exercises and sets."""
    workout = _as_candidate(workout)
    if not isinstance(workout, Mapping):
        return ValidationResult(valid=False, errors=['Workout must be an object'])

    errors: List[str] = []

    if not _is_non_empty_string(workout.get('name')):
        errors.append('Workout name is required and must be a non-empty string')

    workout_date = workout.get('date')
    if workout_date is None or workout_date == '':
        errors.append('Workout date is required')
    elif parse_date(workout_date) is None:
        errors.append('Invalid workout date format')

    notes = workout.get('notes')
    if notes is not None and not isinstance(notes, str):
        errors.append('Workout notes must be a string')

    exercises = workout.get('exercises')
    if not isinstance(exercises, list) or len(exercises) == 0:
        errors.append('Workout must have at least one exercise')
    else:
        for index, exercise in enumerate(exercises):
            errors.extend(_validate_workout_exercise(exercise, index))

    return ValidationResult(valid=len(errors) == 0, errors=errors)


def _validate_workout_exercise(exercise: Any, index: int) -> List[str]:
    prefix = f'Exercise {index + 1}: '
    if not isinstance(exercise, Mapping):
        return [prefix + 'Exercise entry must be an object']

    errors: List[str] = []

    if not _is_non_empty_string(get_field(exercise, 'exerciseName')):
        errors.append(prefix + 'Exercise name is required')

    order = exercise.get('order')
    if not _is_whole(order) or order < 0:
        errors.append(prefix + 'Exercise order must be a non-negative number')

    sets = exercise.get('sets')
    if not isinstance(sets, list) or len(sets) == 0:
        errors.append(prefix + 'Exercise must have at least one set')
    else:
        for set_index, workout_set in enumerate(sets):
            errors.extend(_validate_set(workout_set, set_index, prefix))

    return errors


def _validate_set(workout_set: Any, index: int, prefix: str) -> List[str]:
    set_prefix = prefix + f'Set {index + 1}: '
    if not isinstance(workout_set, Mapping):
        return [set_prefix + 'Set must be an object']

    errors: List[str] = []

    set_number = get_field(workout_set, 'setNumber')
    if not _is_whole(set_number) or set_number < 1:
        errors.append(set_prefix + 'Set number must be a positive number')

    if all(workout_set.get(metric) is None for metric in SET_METRICS):
        errors.append(set_prefix + 'At least one metric (reps, weight, duration, or distance) is required')

    for metric in SET_METRICS:
        value = workout_set.get(metric)
        if value is not None and (not is_number(value) or value < 0):
            errors.append(set_prefix + f'{metric.capitalize()} must be a non-negative number')

    notes = workout_set.get('notes')
    if notes is not None and not isinstance(notes, str):
        errors.append(set_prefix + 'Notes must be a string')

    return errors


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def _trim(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


def normalize_exercise(exercise: Mapping) -> ExerciseRecord:
    """Canonical exercise from a candidate that passed validate_exercise."""
    exercise = _as_candidate(exercise)
    return ExerciseRecord(
        name=exercise['name'].strip(),
        category=exercise['category'].strip().lower(),
        muscle_group=[group.strip().lower() for group in get_field(exercise, 'muscleGroup')],
        notes=_trim(exercise.get('notes')),
    )


def normalize_workout(workout: Mapping) -> WorkoutRecord:
    """Canonical workout from a candidate that passed validate_workout."""
    workout = _as_candidate(workout)
    exercises = []
    for index, exercise in enumerate(workout['exercises']):
        order = exercise.get('order')
        sets = []
        for set_index, workout_set in enumerate(exercise['sets']):
            set_number = get_field(workout_set, 'setNumber')
            sets.append(SetRecord(
                set_number=int(set_number) if set_number is not None else set_index + 1,
                reps=workout_set.get('reps'),
                weight=workout_set.get('weight'),
                duration=workout_set.get('duration'),
                distance=workout_set.get('distance'),
                notes=_trim(workout_set.get('notes')),
            ))
        exercises.append(WorkoutExerciseRecord(
            exercise_name=get_field(exercise, 'exerciseName').strip(),
            order=int(order) if order is not None else index,
            sets=sets,
        ))

    return WorkoutRecord(
        name=workout['name'].strip(),
        date=parse_date(workout['date']),
        notes=_trim(workout.get('notes')),
        exercises=exercises,
    )
