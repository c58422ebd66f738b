"""Operator log view: recent entries plus the schema state that gates readiness."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Query, Request

from equipment_service.core.logging_config import get_log_buffer

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("")
def list_logs(
    request: Request,
    limit: int = Query(100, ge=1, le=500),
    level: Optional[str] = Query(None, description="Minimum level, e.g. WARNING or ERROR"),
) -> dict[str, Any]:
    state = request.app.state
    return {
        "ready": getattr(state, "ready", False),
        "schemaRevision": getattr(state, "schema_revision", None),
        "migrationError": getattr(state, "migration_error", None),
        "logs": get_log_buffer(limit=limit, level=level),
    }


__all__ = ["router"]
