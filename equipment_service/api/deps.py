"""API dependencies."""

from __future__ import annotations

import logging

from fastapi import Request

from equipment_service.core.errors import ServiceNotReady
from equipment_service.services.equipment import EquipmentRepository

repository_logger = logging.getLogger("equipment_service.repository")


def get_repository(request: Request) -> EquipmentRepository:
    state = request.app.state
    if not getattr(state, "ready", False):
        raise ServiceNotReady(
            "Equipment store schema has not been applied",
            details=[state.migration_error] if getattr(state, "migration_error", None) else None,
        )
    return EquipmentRepository(state.engine, repository_logger)
