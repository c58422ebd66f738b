"""Database and transport models."""

from .equipment import (
    Equipment,
    EquipmentPayload,
    EquipmentRead,
    EquipmentStats,
    EquipmentTypeCount,
)

__all__ = [
    "Equipment",
    "EquipmentPayload",
    "EquipmentRead",
    "EquipmentStats",
    "EquipmentTypeCount",
]
