# tests/conftest.py
import os

# main.py builds a module-level app on import: keep it off the disk
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from starlette.testclient import TestClient

from main import create_app
from signup.core.config import Settings
from signup.db.session import Database
from signup.services.attendance_ledger import AttendanceLedger
from signup.services.session_registry import SessionRegistry


# --- Test database (one SQLite file per test) ---
@pytest.fixture(scope="function")
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        AUTO_CREATE_TABLES=True,
        PUBLIC_BASE_URL="",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture(scope="function")
def database(settings):
    db = Database(settings.DATABASE_URL)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture(scope="function")
def registry(database, settings):
    return SessionRegistry(database, settings)


@pytest.fixture(scope="function")
def ledger(database, registry):
    return AttendanceLedger(database, registry)


# --- Factories ---
@pytest.fixture(scope="function")
def make_session(registry):
    """Create a session through the registry and return the creation result."""

    def _make(**overrides):
        fields = {
            "title": "Demo",
            "date": "2025-01-01",
            "time": "10:00",
            "location": "Room A",
            "visibility": "public",
        }
        fields.update(overrides)
        created, err = registry.create(fields)
        assert err is None, err
        return created

    return _make


# --- Test client ---
@pytest.fixture(scope="function")
def client(settings, database):
    """TestClient over an app wired to the per-test database."""
    app = create_app(settings, database)
    with TestClient(app) as client:
        yield client
