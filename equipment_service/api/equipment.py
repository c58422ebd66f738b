"""Equipment CRUD, search and stats endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from equipment_service.api.deps import get_repository
from equipment_service.core.errors import InvalidArgument
from equipment_service.models import EquipmentPayload, EquipmentRead, EquipmentStats
from equipment_service.services.equipment import EquipmentRepository

router = APIRouter(prefix="/equipment", tags=["equipment"])


@router.get("", response_model=List[EquipmentRead])
def list_equipment(repo: EquipmentRepository = Depends(get_repository)) -> List[EquipmentRead]:
    return [EquipmentRead.model_validate(row) for row in repo.list()]


# Literal paths are registered ahead of /{equipment_id}
@router.get("/stats", response_model=EquipmentStats)
def equipment_stats(repo: EquipmentRepository = Depends(get_repository)) -> EquipmentStats:
    return repo.stats()


@router.get("/search", response_model=List[EquipmentRead])
def search_equipment(
    query: Optional[str] = Query(default=None, description="Substring of tag number or name"),
    repo: EquipmentRepository = Depends(get_repository),
) -> List[EquipmentRead]:
    return [EquipmentRead.model_validate(row) for row in repo.search(query)]


@router.get("/{equipment_id}", response_model=EquipmentRead)
def get_equipment(equipment_id: int, repo: EquipmentRepository = Depends(get_repository)) -> EquipmentRead:
    return EquipmentRead.model_validate(repo.get(equipment_id))


@router.post("", response_model=EquipmentRead, status_code=201)
def create_equipment(
    payload: EquipmentPayload,
    request: Request,
    response: Response,
    repo: EquipmentRepository = Depends(get_repository),
) -> EquipmentRead:
    record = repo.create(payload)
    response.headers["Location"] = request.app.url_path_for("get_equipment", equipment_id=str(record.id))
    return EquipmentRead.model_validate(record)


@router.put("/{equipment_id}", response_model=EquipmentRead)
def update_equipment(
    equipment_id: int,
    payload: EquipmentPayload,
    repo: EquipmentRepository = Depends(get_repository),
) -> EquipmentRead:
    if payload.id is not None and payload.id != equipment_id:
        raise InvalidArgument(f"Body id {payload.id} does not match route id {equipment_id}")
    return EquipmentRead.model_validate(repo.update(equipment_id, payload))


@router.delete("/{equipment_id}", status_code=204)
def delete_equipment(equipment_id: int, repo: EquipmentRepository = Depends(get_repository)) -> Response:
    repo.delete(equipment_id)
    return Response(status_code=204)


__all__ = ["router"]
