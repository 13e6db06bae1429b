"""Tests for CSV exercise and workout parsing."""
from datetime import datetime, timezone

from workout_import_api.parsers.csv_parser import (
    EMPTY_FILE_ERROR,
    CSVParser,
    header_key,
    split_csv_line,
)
from workout_import_api.parsers.models import DataKind


def parse_exercises(text):
    return CSVParser().parse(text, DataKind.EXERCISE)


def parse_workouts(text):
    return CSVParser().parse(text, DataKind.WORKOUT)


class TestCsvHelpers:
    """Line splitting and header matching."""

    def test_quoted_fields(self):
        assert split_csv_line('Push-ups,"chest,triceps","say ""hi"""') == [
            "Push-ups", "chest,triceps", 'say "hi"',
        ]

    def test_header_key(self):
        assert header_key("Muscle Group") == "musclegroup"
        assert header_key("muscle_group") == "musclegroup"
        assert header_key("Set-Notes") == "setnotes"


class TestCsvExercises:
    """One exercise per row."""

    def test_single_exercise(self, exercise_csv):
        result = parse_exercises(exercise_csv)

        assert result.success
        assert result.detected_format == "csv"
        assert len(result.records) == 1
        record = result.records[0]
        assert record.name == "Push-ups"
        assert record.category == "strength"
        assert record.muscle_group == ["chest", "triceps"]
        assert record.notes == "Keep form strict"

    def test_header_only_is_empty(self):
        result = parse_exercises("name,category,muscleGroup\n")
        assert not result.success
        assert result.errors == [EMPTY_FILE_ERROR]
        assert "Empty" in result.errors[0]
        assert result.data is None

    def test_missing_headers(self):
        result = parse_exercises("name,notes\nPush-ups,x\n")
        assert not result.success
        assert result.errors == ["Missing required headers: category, musclegroup"]

    def test_loose_headers_and_delimiters(self):
        text = "Exercise Name,Category,Muscle_Group\nRow,Cardio,back; biceps | forearms\n"
        result = parse_exercises(text)
        assert result.success
        assert result.records[0].muscle_group == ["back", "biceps", "forearms"]

    def test_blank_muscle_group_defaults_to_full_body(self):
        result = parse_exercises("name,category,muscleGroup\nBurpee,cardio,\n")
        assert result.records[0].muscle_group == ["full body"]
        assert result.records[0].notes is None

    def test_invalid_row_is_reported_with_row_number(self):
        text = (
            "name,category,muscleGroup\n"
            "Push-ups,strength,chest\n"
            "\n"
            "Lotus,meditation,abs\n"
        )
        result = parse_exercises(text)

        assert not result.success
        assert len(result.records) == 1
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Row 4: ")
        assert "category" in result.errors[0]

    def test_crlf_line_endings(self):
        result = parse_exercises("name,category,muscleGroup\r\nSquat,strength,glutes\r\n")
        assert result.success
        assert result.records[0].name == "Squat"


class TestCsvWorkouts:
    """One set per row, folded into workouts."""

    def test_rows_fold_into_workout(self, workout_csv):
        result = parse_workouts(workout_csv)

        assert result.success
        assert len(result.records) == 1
        workout = result.records[0]
        assert workout.name == "Push Day"
        assert workout.date == datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert workout.notes == "Felt strong"
        assert [e.exercise_name for e in workout.exercises] == ["Bench Press", "Overhead Press"]
        assert [e.order for e in workout.exercises] == [0, 1]
        bench_sets = workout.exercises[0].sets
        assert [s.set_number for s in bench_sets] == [1, 2]
        assert [s.reps for s in bench_sets] == [10, 8]
        assert bench_sets[1].weight == 65.0
        assert workout.total_sets == 3

    def test_two_rows_one_exercise(self):
        text = (
            "workout,date,exercise,set,reps\n"
            "Legs,2024-03-01,Squat,1,5\n"
            "Legs,2024-03-01,Squat,2,5\n"
        )
        result = parse_workouts(text)

        assert len(result.records) == 1
        assert len(result.records[0].exercises) == 1
        assert len(result.records[0].exercises[0].sets) == 2

    def test_separate_workouts_keep_file_order(self):
        text = (
            "workout,date,exercise,set,reps\n"
            "B,2024-03-02,Row,1,10\n"
            "A,2024-03-01,Squat,1,5\n"
            "B,2024-03-02,Row,2,10\n"
        )
        result = parse_workouts(text)
        assert [w.name for w in result.records] == ["B", "A"]
        assert result.records[0].total_sets == 2

    def test_set_notes_column(self):
        text = (
            "workout,date,exercise,set,reps,duration,distance,notes,set notes\n"
            "Run,2024-03-01,Treadmill,,,1200,5.5,Easy pace,warm up\n"
        )
        result = parse_workouts(text)

        workout = result.records[0]
        workout_set = workout.exercises[0].sets[0]
        assert workout.notes == "Easy pace"
        assert workout_set.notes == "warm up"
        assert workout_set.set_number == 1
        assert workout_set.reps is None
        assert workout_set.duration == 1200
        assert workout_set.distance == 5.5

    def test_row_without_metrics_fails_workout(self):
        text = (
            "workout,date,exercise,set,reps\n"
            "Core,2024-03-01,Plank,1,\n"
        )
        result = parse_workouts(text)

        assert not result.success
        assert result.records == []
        assert result.errors == [
            'Workout "Core": Exercise 1: Set 1: '
            "At least one metric (reps, weight, duration, or distance) is required"
        ]

    def test_missing_workout_headers(self):
        result = parse_workouts("date,exercise,reps\n2024-01-01,Squat,5\n")
        assert result.errors == ["Missing required headers: workout, set"]

    def test_empty_file(self):
        result = parse_workouts("   \n")
        assert result.errors == [EMPTY_FILE_ERROR]


class TestCsvRowExceptions:
    """A row that cannot be split is reported and later rows still parse."""

    def test_oversized_exercise_cell(self):
        text = (
            "name,category,muscleGroup\n"
            f'"{"x" * 200_000}",strength,chest\n'
            "Row,cardio,back\n"
        )
        result = parse_exercises(text)

        assert not result.success
        assert [r.name for r in result.records] == ["Row"]
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Row 2: Failed to parse - ")

    def test_oversized_workout_cell(self):
        text = (
            "workout,date,exercise,set,reps\n"
            f'Legs,2024-03-01,"{"x" * 200_000}",1,5\n'
            "Legs,2024-03-01,Squat,1,5\n"
        )
        result = parse_workouts(text)

        assert [w.name for w in result.records] == ["Legs"]
        assert result.records[0].exercises[0].exercise_name == "Squat"
        assert result.errors[0].startswith("Row 2: Failed to parse - ")
