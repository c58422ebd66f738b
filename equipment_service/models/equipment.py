"""Equipment persistence and transport models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import Column
from sqlmodel import Field, SQLModel

from equipment_service.db.types import UTCDateTime

DEFAULT_STATUS = "Operating"
MAINTENANCE_STATUS = "Maintenance"

TAG_NUMBER_MAX = 50
NAME_MAX = 200
TYPE_MAX = 100
STATUS_MAX = 50
UNIT_MAX = 50


class Equipment(SQLModel, table=True):
    """A physical industrial asset tracked by the digital twin."""

    __tablename__ = "equipment"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    tag_number: str = Field(max_length=TAG_NUMBER_MAX, index=True, unique=True)
    name: str = Field(max_length=NAME_MAX)
    type: str = Field(max_length=TYPE_MAX, index=True)
    status: str = Field(default=DEFAULT_STATUS, max_length=STATUS_MAX, index=True)
    capacity: Optional[float] = None
    unit: Optional[str] = Field(default=None, max_length=UNIT_MAX)
    install_date: datetime = Field(sa_column=Column(UTCDateTime(), nullable=False))
    created_at: datetime = Field(sa_column=Column(UTCDateTime(), nullable=False))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime(), nullable=True))


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EquipmentPayload(_CamelModel):
    """Client-supplied fields for create and update.

    Everything is optional here so that missing or blank values surface as
    ``InvalidArgument`` from the repository rather than as schema errors.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: Optional[int] = None
    tag_number: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    capacity: Optional[float] = None
    unit: Optional[str] = None
    install_date: Optional[datetime] = None


class EquipmentRead(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    tag_number: str
    name: str
    type: str
    status: str
    capacity: Optional[float] = None
    unit: Optional[str] = None
    install_date: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None


class EquipmentTypeCount(_CamelModel):
    type: str
    count: int


class EquipmentStats(_CamelModel):
    """Inventory roll-up by status and type."""

    total_count: int
    operating_count: int
    maintenance_count: int
    status_counts: dict[str, int]
    equipment_types: list[EquipmentTypeCount]


__all__ = [
    "DEFAULT_STATUS",
    "MAINTENANCE_STATUS",
    "Equipment",
    "EquipmentPayload",
    "EquipmentRead",
    "EquipmentStats",
    "EquipmentTypeCount",
]
