import logging
import shutil

import pytest
from fastapi.testclient import TestClient

from equipment_service.core.config import Settings
from equipment_service.db.migrations import DEFAULT_SCRIPT_LOCATION, MigrationManager
from equipment_service.db.session import build_engine
from equipment_service.main import create_app
from equipment_service.services.equipment import EquipmentRepository


@pytest.fixture()
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'equipment_test.db'}"


@pytest.fixture()
def engine(database_url):
    engine = build_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture()
def migration_manager(engine):
    return MigrationManager(engine, logging.getLogger("tests.migrations"))


@pytest.fixture()
def migrated_engine(engine, migration_manager):
    migration_manager.apply("head")
    return engine


@pytest.fixture()
def repository(migrated_engine):
    return EquipmentRepository(migrated_engine, logging.getLogger("tests.repository"))


@pytest.fixture()
def app_settings(database_url):
    return Settings(database_url=database_url, seed_sample_data=False)


@pytest.fixture()
def client(engine, app_settings):
    app = create_app(engine=engine, config=app_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def pump_payload():
    return {
        "tagNumber": "P-101",
        "name": "Crude Feed Pump",
        "type": "Centrifugal Pump",
        "status": "Operating",
        "capacity": 500,
        "unit": "m³/h",
        "installDate": "2020-01-15T00:00:00Z",
    }


@pytest.fixture()
def failing_scripts(tmp_path):
    """A copy of the migration scripts whose first revision raises mid-upgrade."""

    location = tmp_path / "alembic"
    shutil.copytree(DEFAULT_SCRIPT_LOCATION, location, ignore=shutil.ignore_patterns("__pycache__"))
    revision = location / "versions" / "0001_create_equipment.py"
    source = revision.read_text(encoding="utf-8")
    revision.write_text(
        source.replace(
            "def upgrade() -> None:\n",
            'def upgrade() -> None:\n    raise RuntimeError("revision exploded")\n',
            1,
        ),
        encoding="utf-8",
    )
    return location
