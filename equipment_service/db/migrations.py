"""Schema migration and sample-data bootstrap for the equipment store."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import func, insert, select
from sqlalchemy.engine import Connection, Engine

from equipment_service.core.errors import MigrationError
from equipment_service.db.types import utcnow
from equipment_service.models import Equipment

DEFAULT_SCRIPT_LOCATION = Path(__file__).resolve().parents[2] / "alembic"

SAMPLE_EQUIPMENT: tuple[dict, ...] = (
    {
        "tag_number": "P-101",
        "name": "Crude Feed Pump",
        "type": "Centrifugal Pump",
        "status": "Operating",
        "capacity": 500.0,
        "unit": "m³/h",
        "install_date": datetime(2020, 1, 15, tzinfo=timezone.utc),
    },
    {
        "tag_number": "E-201",
        "name": "Crude Preheat Exchanger",
        "type": "Shell & Tube Heat Exchanger",
        "status": "Operating",
        "capacity": 50.0,
        "unit": "MW",
        "install_date": datetime(2019, 6, 20, tzinfo=timezone.utc),
    },
    {
        "tag_number": "T-301",
        "name": "Distillation Column",
        "type": "Fractionation Tower",
        "status": "Operating",
        "capacity": 100000.0,
        "unit": "bbl/day",
        "install_date": datetime(2018, 3, 10, tzinfo=timezone.utc),
    },
)


class MigrationManager:
    """Bring the store schema to a target Alembic revision.

    ``apply`` runs inside a single transaction so a failed revision leaves
    nothing half-applied on backends with transactional DDL. Failures are
    logged with their traceback and raised as ``MigrationError``; nothing is
    retried here.
    """

    def __init__(
        self,
        engine: Engine,
        logger: logging.Logger,
        script_location: str | Path | None = None,
        seed_sample_data: bool = False,
    ) -> None:
        self.engine = engine
        self.logger = logger
        self.script_location = Path(script_location or DEFAULT_SCRIPT_LOCATION)
        self.seed_sample_data = seed_sample_data

    def _config(self, connection: Connection | None = None) -> Config:
        config = Config()
        config.set_main_option("script_location", str(self.script_location))
        if connection is not None:
            config.attributes["connection"] = connection
        return config

    def current_revision(self) -> str | None:
        with self.engine.connect() as connection:
            return MigrationContext.configure(connection).get_current_revision()

    def head_revision(self) -> str | None:
        return ScriptDirectory.from_config(self._config()).get_current_head()

    def apply(self, target_version: str = "head") -> str | None:
        """Upgrade to ``target_version``; a store already there is left untouched.

        Returns the revision the store is at afterwards.
        """

        self.logger.info("Applying equipment schema (target=%s)", target_version)
        try:
            with self.engine.begin() as connection:
                config = self._config(connection)
                script = ScriptDirectory.from_config(config)
                targets = {rev.revision for rev in script.get_revisions(target_version) if rev}
                current = MigrationContext.configure(connection).get_current_revision()
                if current is not None and current in targets:
                    self.logger.info("Equipment schema already at %s; nothing to apply", current)
                else:
                    command.upgrade(config, target_version)
                    current = MigrationContext.configure(connection).get_current_revision()
                    self.logger.info("Equipment schema upgraded to %s", current)
                if self.seed_sample_data:
                    self._seed(connection)
        except Exception as exc:
            # Revision scripts and env.py are arbitrary code; any failure blocks readiness
            raise self._failed(target_version, exc) from exc
        return current

    def _failed(self, target_version: str, exc: Exception) -> MigrationError:
        self.logger.exception(
            "Equipment schema migration to %s failed (script_location=%s)",
            target_version,
            self.script_location,
        )
        return MigrationError(
            f"Could not apply schema revision '{target_version}'",
            details=[f"{type(exc).__name__}: {exc}"],
        )

    def _seed(self, connection: Connection) -> int:
        table = Equipment.__table__
        existing = connection.execute(select(func.count()).select_from(table)).scalar_one()
        if existing:
            return 0
        now = utcnow()
        connection.execute(insert(table), [{**row, "created_at": now} for row in SAMPLE_EQUIPMENT])
        self.logger.info("Seeded %d sample equipment records", len(SAMPLE_EQUIPMENT))
        return len(SAMPLE_EQUIPMENT)


__all__ = ["MigrationManager", "SAMPLE_EQUIPMENT", "DEFAULT_SCRIPT_LOCATION"]
