"""Equipment service FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from equipment_service.api import api_router, health_router
from equipment_service.api.handlers import register_exception_handlers
from equipment_service.core.config import Settings, settings
from equipment_service.core.errors import MigrationError
from equipment_service.core.logging_config import setup_logging
from equipment_service.db.migrations import MigrationManager
from equipment_service.db.session import get_engine

logger = logging.getLogger(__name__)


def _apply_migrations(app: FastAPI, engine: Engine, config: Settings) -> None:
    manager = MigrationManager(
        engine,
        logging.getLogger("equipment_service.migrations"),
        script_location=config.alembic_script_location,
        seed_sample_data=config.seed_sample_data,
    )
    try:
        app.state.schema_revision = manager.apply(config.migration_target)
    except MigrationError as exc:
        # Stay up for /health and /ready but refuse equipment requests
        app.state.migration_error = "; ".join([exc.message, *exc.details])
        logger.error("Equipment service is not ready: %s", app.state.migration_error)
        return
    app.state.ready = True
    logger.info("Equipment service ready at schema revision %s", app.state.schema_revision)


def create_app(engine: Engine | None = None, config: Settings | None = None) -> FastAPI:
    setup_logging()
    config = config or settings
    owns_engine = engine is None
    db_engine = engine if engine is not None else get_engine()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        _apply_migrations(app, db_engine, config)
        yield
        if owns_engine:
            db_engine.dispose()

    app = FastAPI(title=config.app_name, version=config.app_version, lifespan=lifespan)
    app.state.engine = db_engine
    app.state.ready = False
    app.state.migration_error = None
    app.state.schema_revision = None

    app.include_router(health_router)
    app.include_router(api_router, prefix=config.api_prefix)
    register_exception_handlers(app)
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("equipment_service.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=False)
