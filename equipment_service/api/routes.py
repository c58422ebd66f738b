"""Root API routers."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

health_router = APIRouter(tags=["system"])


@health_router.get("/health", summary="Service health probe")
async def healthcheck(request: Request) -> dict[str, str]:
    """Liveness only; never touches the equipment store."""

    return {
        "status": "Healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": request.app.title,
    }


@health_router.get("/ready", summary="Service readiness probe")
async def readiness(request: Request) -> JSONResponse:
    """Report whether the schema is applied and requests can be served."""

    state = request.app.state
    if getattr(state, "ready", False):
        return JSONResponse({"status": "ready", "revision": state.schema_revision})
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "message": getattr(state, "migration_error", None)},
    )
