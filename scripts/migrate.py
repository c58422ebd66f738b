"""Apply equipment schema migrations out of band (e.g. after a failed startup)."""

from __future__ import annotations

import argparse
import logging
import sys

from equipment_service.core.config import settings
from equipment_service.core.errors import MigrationError
from equipment_service.core.logging_config import setup_logging
from equipment_service.db.migrations import MigrationManager
from equipment_service.db.session import build_engine


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Apply equipment store migrations.")
    parser.add_argument("--target", type=str, default=settings.migration_target, help="Revision to upgrade to.")
    parser.add_argument("--database-url", type=str, default=None, help="Override DATABASE_URL.")
    parser.add_argument("--seed", action="store_true", help="Seed sample equipment when the table is empty.")
    parser.add_argument("--show", action="store_true", help="Print current and head revisions only.")
    args = parser.parse_args(argv)

    setup_logging(service_name="equipment-migrate")
    engine = build_engine(args.database_url or settings.database_url)
    manager = MigrationManager(
        engine,
        logging.getLogger("equipment_service.migrations"),
        script_location=settings.alembic_script_location,
        seed_sample_data=args.seed,
    )
    try:
        if args.show:
            print(f"current: {manager.current_revision()}")
            print(f"head:    {manager.head_revision()}")
            return 0
        revision = manager.apply(args.target)
    except MigrationError as exc:
        print(f"Migration failed: {exc.message}", file=sys.stderr)
        for detail in exc.details:
            print(f"  {detail}", file=sys.stderr)
        return 1
    finally:
        engine.dispose()
    print(f"Equipment schema at revision {revision}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
