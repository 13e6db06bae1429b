"""Verify all modules can be imported without errors."""


def test_core_module_imports():
    """Import core modules to catch bad import paths."""
    import workout_import_api.main
    import workout_import_api.config
    import workout_import_api.utils


def test_parser_imports():
    """Import parser modules."""
    import workout_import_api.parsers
    import workout_import_api.parsers.models
    import workout_import_api.parsers.detection
    import workout_import_api.parsers.validators
    import workout_import_api.parsers.base
    import workout_import_api.parsers.csv_parser
    import workout_import_api.parsers.json_parser
    import workout_import_api.parsers.xml_parser
    import workout_import_api.parsers.dispatch


def test_service_and_api_imports():
    """Import service and API route modules."""
    import workout_import_api.services.record_store
    import workout_import_api.services.import_service
    import workout_import_api.api.import_routes


def test_app_registers_import_routes():
    """The app exposes both upload endpoints and the health check."""
    from workout_import_api.main import app

    paths = app.openapi()["paths"]
    assert "/import/exercises" in paths
    assert "/import/workouts" in paths
    assert "/health" in paths
