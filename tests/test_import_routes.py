"""
Tests for the /import upload endpoints.
"""

from workout_import_api.config import settings


def _upload(client, path, filename, content, content_type="text/plain", data=None):
    return client.post(
        path,
        files={"file": (filename, content, content_type)},
        data=data or {},
    )


class TestImportExercisesEndpoint:
    """POST /import/exercises"""

    def test_csv_upload(self, client, exercise_csv):
        response = _upload(client, "/import/exercises", "exercises.csv", exercise_csv, "text/csv")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["format"] == "csv"
        assert body["summary"] == {"total": 1, "imported": 1, "skipped": 0, "errors": 0}
        assert body["imported"][0]["name"] == "Push-ups"
        assert body["errors"] is None

    def test_second_upload_skips_existing(self, client, exercise_xml):
        _upload(client, "/import/exercises", "exercises.xml", exercise_xml)
        response = _upload(client, "/import/exercises", "exercises.xml", exercise_xml)

        body = response.json()
        assert body["summary"]["skipped"] == 1
        assert body["skipped"] == ["Push-ups (already exists)"]

    def test_explicit_format_field(self, client):
        content = '[{"name": "Squat", "category": "strength", "muscleGroup": ["glutes"]}]'
        response = _upload(client, "/import/exercises", "export.txt", content, data={"format": "json"})

        assert response.status_code == 200
        assert response.json()["format"] == "json"

    def test_unsupported_file_type(self, client):
        response = _upload(client, "/import/exercises", "sheet.xlsx", b"PK\x03\x04", "application/octet-stream")

        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported file type. Please upload a CSV, JSON, or XML file."

    def test_parse_failure(self, client):
        response = _upload(client, "/import/exercises", "bad.xml", "<wrongroot><item>data</item></wrongroot>")

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "Failed to parse file"
        assert detail["details"][0].startswith("Invalid XML structure")

    def test_file_too_large(self, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 10)

        response = _upload(client, "/import/exercises", "big.csv", "name,category,muscleGroup\n")

        assert response.status_code == 413
        assert "File too large" in response.json()["detail"]

    def test_store_failure_is_counted(self, client, record_store, exercise_csv, monkeypatch):
        def broken(name):
            raise RuntimeError("store offline")

        monkeypatch.setattr(record_store, "get_exercise", broken)
        monkeypatch.setattr(record_store, "create_exercise", broken)

        response = _upload(client, "/import/exercises", "exercises.csv", exercise_csv)

        assert response.status_code == 200
        assert response.json()["summary"]["errors"] == 1


class TestImportWorkoutsEndpoint:
    """POST /import/workouts"""

    def test_csv_upload(self, client, workout_csv):
        response = _upload(client, "/import/workouts", "log.csv", workout_csv)

        assert response.status_code == 200
        body = response.json()
        assert body["imported"][0]["exerciseCount"] == 2
        assert body["imported"][0]["totalSets"] == 3

    def test_json_upload(self, client, workout_json):
        response = _upload(client, "/import/workouts", "log.json", workout_json, "application/json")

        assert response.status_code == 200
        assert response.json()["imported"][0]["name"] == "Leg Day"

    def test_invalid_workout_rejects_file(self, client):
        content = "workout,date,exercise,set,reps\nCore,2024-03-01,Plank,1,\n"
        response = _upload(client, "/import/workouts", "log.csv", content)

        assert response.status_code == 400
        assert response.json()["detail"]["details"][0].startswith('Workout "Core": ')

    def test_server_error(self, client, monkeypatch):
        from workout_import_api.services.import_service import ImportService

        def explode(self, *args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(ImportService, "import_file", explode)

        response = _upload(client, "/import/workouts", "log.csv", "x")

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal server error during import"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}
