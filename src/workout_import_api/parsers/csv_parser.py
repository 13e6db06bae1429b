"""
CSV Parser

Parses delimited-text exports of:
- Exercise definitions (one row per exercise)
- Workout logs (one row per set, folded into workout -> exercise -> sets)

Features:
- Standard CSV quoting ("chest,triceps", doubled "" escapes)
- Substring, case-insensitive header matching ("Muscle Group", "muscle_group")
- Tolerant numeric cells (non-numeric values are treated as missing)
"""

import csv
import re
import logging
from typing import Any, Dict, List, Optional

from workout_import_api.utils import clean_text, to_float, to_int

from .base import BaseParser, muscle_groups_or_default, split_muscle_groups
from .models import FileFormat, ParseResult

logger = logging.getLogger(__name__)


EMPTY_FILE_ERROR = 'Empty file: CSV must have a header row and at least one data row'

# Keywords that must appear in at least one header column
EXERCISE_REQUIRED_HEADERS = ['name', 'category', 'musclegroup']
WORKOUT_REQUIRED_HEADERS = ['workout', 'date', 'exercise', 'set', 'reps']

SET_NOTES_HEADERS = ('setnotes', 'setnote')

HEADER_NOISE = re.compile(r'[\s_\-]+')


def split_csv_line(line: str) -> List[str]:
    """Split one CSV line, honouring quoted fields and doubled-quote escapes"""
    return next(csv.reader([line], skipinitialspace=True), [])


def header_key(header: str) -> str:
    """'Muscle Group' / 'muscle_group' / 'muscleGroup' -> 'musclegroup'"""
    return HEADER_NOISE.sub('', header.lower())


class CSVParser(BaseParser):
    """Parser for CSV files"""

    file_format = FileFormat.CSV

    def parse_exercises(self, text: str) -> ParseResult:
        """Parse one exercise per data row"""
        lines = self._split_lines(text)
        if len(lines) < 2:
            return self.failure(EMPTY_FILE_ERROR)

        headers = [header_key(h) for h in split_csv_line(lines[0])]
        missing = self._missing_headers(headers, EXERCISE_REQUIRED_HEADERS)
        if missing:
            return self.failure(f"Missing required headers: {', '.join(missing)}")

        name_idx = self._find_column(headers, 'name')
        category_idx = self._find_column(headers, 'category')
        muscle_group_idx = self._find_column(headers, 'musclegroup')
        notes_idx = self._find_column(headers, 'notes')

        for row_number, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue

            try:
                values = split_csv_line(line)
                exercise = {
                    'name': self._cell(values, name_idx) or '',
                    'category': self._cell(values, category_idx) or '',
                    'muscleGroup': muscle_groups_or_default(
                        split_muscle_groups(self._cell(values, muscle_group_idx))
                    ),
                    'notes': clean_text(self._cell(values, notes_idx)),
                }
            except Exception as e:
                self.add_error(f"Row {row_number}: Failed to parse - {e}")
                continue

            self.accept_exercise(exercise, prefix=f"Row {row_number}: ")

        return self.result()

    def parse_workouts(self, text: str) -> ParseResult:
        """Parse one set per data row and fold rows into workouts"""
        lines = self._split_lines(text)
        if len(lines) < 2:
            return self.failure(EMPTY_FILE_ERROR)

        headers = [header_key(h) for h in split_csv_line(lines[0])]
        missing = self._missing_headers(headers, WORKOUT_REQUIRED_HEADERS)
        if missing:
            return self.failure(f"Missing required headers: {', '.join(missing)}")

        set_notes_idx = next((i for i, h in enumerate(headers) if h in SET_NOTES_HEADERS), None)
        columns = {
            'workout': self._find_column(headers, 'workout'),
            'date': self._find_column(headers, 'date'),
            'notes': self._find_column(headers, 'notes', skip=set_notes_idx),
            'exercise': self._find_column(headers, 'exercise'),
            'set': self._find_column(headers, 'set', skip=set_notes_idx),
            'reps': self._find_column(headers, 'reps'),
            'weight': self._find_column(headers, 'weight'),
            'duration': self._find_column(headers, 'duration'),
            'distance': self._find_column(headers, 'distance'),
            'set_notes': set_notes_idx,
        }

        # Insertion order = first appearance in the file
        workouts: Dict[str, Dict[str, Any]] = {}
        exercises_by_workout: Dict[str, Dict[str, Dict[str, Any]]] = {}

        for row_number, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue

            try:
                values = split_csv_line(line)
                self._fold_row(values, columns, workouts, exercises_by_workout)
            except Exception as e:
                self.add_error(f"Row {row_number}: Failed to parse - {e}")

        logger.info(f"Folded {len(lines) - 1} CSV rows into {len(workouts)} workouts")

        for name, workout in workouts.items():
            self.accept_workout(workout, prefix=f'Workout "{name}": ')

        return self.result()

    def _fold_row(
        self,
        values: List[str],
        columns: Dict[str, Optional[int]],
        workouts: Dict[str, Dict[str, Any]],
        exercises_by_workout: Dict[str, Dict[str, Dict[str, Any]]],
    ):
        """Append the set on this row to its workout/exercise, creating them on first sight"""
        workout_name = self._cell(values, columns['workout']) or ''
        exercise_name = self._cell(values, columns['exercise']) or ''

        workout = workouts.get(workout_name)
        if workout is None:
            workout = {
                'name': workout_name,
                'date': self._cell(values, columns['date']) or '',
                'notes': clean_text(self._cell(values, columns['notes'])),
                'exercises': [],
            }
            workouts[workout_name] = workout
            exercises_by_workout[workout_name] = {}

        exercise = exercises_by_workout[workout_name].get(exercise_name)
        if exercise is None:
            exercise = {
                'exerciseName': exercise_name,
                'order': len(workout['exercises']),
                'sets': [],
            }
            workout['exercises'].append(exercise)
            exercises_by_workout[workout_name][exercise_name] = exercise

        exercise['sets'].append({
            'setNumber': to_int(self._cell(values, columns['set'])) or len(exercise['sets']) + 1,
            'reps': to_int(self._cell(values, columns['reps'])),
            'weight': to_float(self._cell(values, columns['weight'])),
            'duration': to_int(self._cell(values, columns['duration'])),
            'distance': to_float(self._cell(values, columns['distance'])),
            'notes': clean_text(self._cell(values, columns['set_notes'])),
        })

    def _split_lines(self, text: str) -> List[str]:
        return text.strip().splitlines()

    def _missing_headers(self, headers: List[str], required: List[str]) -> List[str]:
        return [keyword for keyword in required if not any(keyword in h for h in headers)]

    def _find_column(self, headers: List[str], keyword: str, skip: Optional[int] = None) -> Optional[int]:
        """Index of the first header containing keyword, resolved once per file"""
        for idx, header in enumerate(headers):
            if idx != skip and keyword in header:
                return idx
        return None

    def _cell(self, values: List[str], idx: Optional[int]) -> Optional[str]:
        if idx is None or idx >= len(values):
            return None
        return values[idx].strip()
