"""Service layer."""

from .equipment import EquipmentRepository, validate_payload

__all__ = ["EquipmentRepository", "validate_payload"]
