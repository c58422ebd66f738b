import logging

import pytest
from sqlalchemy import inspect, text

from equipment_service.core.errors import MigrationError
from equipment_service.db.migrations import SAMPLE_EQUIPMENT, MigrationManager


def test_apply_creates_table_and_indexes(engine, migration_manager):
    revision = migration_manager.apply("head")

    assert revision == "0001_create_equipment"
    inspector = inspect(engine)
    assert "equipment" in inspector.get_table_names()
    columns = {col["name"] for col in inspector.get_columns("equipment")}
    assert columns == {
        "id",
        "tag_number",
        "name",
        "type",
        "status",
        "capacity",
        "unit",
        "install_date",
        "created_at",
        "updated_at",
    }
    indexes = {idx["name"]: idx for idx in inspector.get_indexes("equipment")}
    assert indexes["ix_equipment_tag_number"]["column_names"] == ["tag_number"]
    assert indexes["ix_equipment_tag_number"]["unique"]
    assert indexes["ix_equipment_type"]["column_names"] == ["type"]
    assert not indexes["ix_equipment_type"]["unique"]
    assert indexes["ix_equipment_status"]["column_names"] == ["status"]


def test_apply_is_idempotent(engine, migration_manager):
    first = migration_manager.apply("head")
    second = migration_manager.apply("head")

    assert first == second == migration_manager.current_revision()
    assert migration_manager.head_revision() == first


def test_status_defaults_to_operating_at_store_level(migrated_engine):
    with migrated_engine.begin() as conn:
        conn.execute(
            text(
                "INSERT INTO equipment (tag_number, name, type, install_date, created_at) "
                "VALUES ('V-1', 'Valve', 'Gate Valve', '2021-01-01 00:00:00', '2021-01-01 00:00:00')"
            )
        )
        status = conn.execute(text("SELECT status FROM equipment WHERE tag_number = 'V-1'")).scalar_one()
    assert status == "Operating"


def test_seed_only_fills_empty_table(engine):
    manager = MigrationManager(engine, logging.getLogger("tests.migrations"), seed_sample_data=True)
    manager.apply("head")
    manager.apply("head")

    with engine.connect() as conn:
        tags = conn.execute(text("SELECT tag_number FROM equipment ORDER BY id")).scalars().all()
    assert tags == [row["tag_number"] for row in SAMPLE_EQUIPMENT]


def test_unknown_revision_raises_migration_error(migration_manager):
    with pytest.raises(MigrationError) as excinfo:
        migration_manager.apply("9999_does_not_exist")
    assert "9999_does_not_exist" in excinfo.value.message


def test_missing_scripts_raise_migration_error(engine, tmp_path):
    manager = MigrationManager(
        engine,
        logging.getLogger("tests.migrations"),
        script_location=tmp_path / "nowhere",
    )
    with pytest.raises(MigrationError):
        manager.apply("head")


def test_revision_script_error_becomes_migration_error(engine, failing_scripts):
    manager = MigrationManager(engine, logging.getLogger("tests.migrations"), script_location=failing_scripts)
    with pytest.raises(MigrationError) as excinfo:
        manager.apply("head")
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert excinfo.value.details == ["RuntimeError: revision exploded"]
    assert manager.current_revision() is None
