"""Equipment repository: CRUD, search and stats over the equipment store."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any, Sequence

from pydantic import ValidationError
from sqlalchemy import delete, func, or_, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from equipment_service.core.errors import Conflict, InvalidArgument, NotFound
from equipment_service.db.session import store_session
from equipment_service.db.types import as_utc, utcnow
from equipment_service.models.equipment import (
    DEFAULT_STATUS,
    MAINTENANCE_STATUS,
    NAME_MAX,
    STATUS_MAX,
    TAG_NUMBER_MAX,
    TYPE_MAX,
    UNIT_MAX,
    Equipment,
    EquipmentPayload,
    EquipmentStats,
    EquipmentTypeCount,
)

_REQUIRED_TEXT = (
    ("tag_number", "tagNumber", TAG_NUMBER_MAX),
    ("name", "name", NAME_MAX),
    ("type", "type", TYPE_MAX),
)


def validate_payload(payload: EquipmentPayload | Mapping[str, Any]) -> dict[str, Any]:
    """Return the column values for a create/update, or raise ``InvalidArgument``.

    Every problem is reported at once in ``details``.
    """

    if not isinstance(payload, EquipmentPayload):
        try:
            payload = EquipmentPayload.model_validate(payload)
        except ValidationError as exc:
            details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
            raise InvalidArgument("Equipment payload is malformed", details=details) from exc

    errors: list[str] = []
    values: dict[str, Any] = {}

    for field, label, limit in _REQUIRED_TEXT:
        value = getattr(payload, field)
        if value is None or not value.strip():
            errors.append(f"{label} is required")
        elif len(value) > limit:
            errors.append(f"{label} must be at most {limit} characters")
        values[field] = value

    status = payload.status
    if status is None:
        status = DEFAULT_STATUS
    elif not status.strip():
        errors.append("status must not be blank")
    elif len(status) > STATUS_MAX:
        errors.append(f"status must be at most {STATUS_MAX} characters")
    values["status"] = status

    if payload.unit is not None and len(payload.unit) > UNIT_MAX:
        errors.append(f"unit must be at most {UNIT_MAX} characters")
    values["unit"] = payload.unit

    if payload.capacity is not None and not math.isfinite(payload.capacity):
        errors.append("capacity must be a finite number")
    values["capacity"] = payload.capacity

    if payload.install_date is None:
        errors.append("installDate is required")
        values["install_date"] = None
    else:
        try:
            values["install_date"] = as_utc(payload.install_date)
        except OverflowError:
            errors.append("installDate is out of range")
            values["install_date"] = None

    if errors:
        raise InvalidArgument("Equipment payload is invalid", details=errors)
    return values


class EquipmentRepository:
    """Sole reader and writer of the equipment table.

    Every operation opens its own short session from the pooled engine. Tag
    uniqueness is decided by the unique index on ``tag_number``: writes are
    attempted directly and a constraint violation becomes ``Conflict``.
    """

    def __init__(self, engine: Engine, logger: logging.Logger) -> None:
        self.engine = engine
        self.logger = logger

    def list(self) -> Sequence[Equipment]:
        with store_session(self.engine) as session:
            return session.exec(select(Equipment).order_by(Equipment.id)).all()

    def get(self, equipment_id: int) -> Equipment:
        with store_session(self.engine) as session:
            return self._get_or_raise(session, equipment_id)

    def create(self, payload: EquipmentPayload | Mapping[str, Any]) -> Equipment:
        values = validate_payload(payload)
        record = Equipment(**values, created_at=utcnow())
        with store_session(self.engine) as session:
            session.add(record)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise self._conflict(values["tag_number"]) from exc
            session.refresh(record)
        self.logger.info("Created equipment %s (id=%s)", record.tag_number, record.id)
        return record

    def update(self, equipment_id: int, payload: EquipmentPayload | Mapping[str, Any]) -> Equipment:
        values = validate_payload(payload)
        stmt = (
            update(Equipment)
            .where(Equipment.id == equipment_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with store_session(self.engine) as session:
            # The write comes first so the row stays locked until commit
            try:
                result = session.exec(stmt)
            except IntegrityError as exc:
                session.rollback()
                raise self._conflict(values["tag_number"]) from exc
            if result.rowcount == 0:
                session.rollback()
                raise self._not_found(equipment_id)
            record = self._get_or_raise(session, equipment_id)
            record.updated_at = self._next_updated_at(record)
            session.add(record)
            session.commit()
            session.refresh(record)
        self.logger.info("Updated equipment %s (id=%s)", record.tag_number, record.id)
        return record

    def delete(self, equipment_id: int) -> None:
        with store_session(self.engine) as session:
            result = session.exec(delete(Equipment).where(Equipment.id == equipment_id))
            if result.rowcount == 0:
                session.rollback()
                raise self._not_found(equipment_id)
            session.commit()
        self.logger.info("Deleted equipment id=%s", equipment_id)

    def search(self, query: str | None) -> Sequence[Equipment]:
        """Records whose tag number or name contains ``query`` (case-sensitive)."""

        if query is None or not query.strip():
            raise InvalidArgument("Search query must not be empty")
        stmt = (
            select(Equipment)
            .where(
                or_(
                    Equipment.tag_number.contains(query, autoescape=True),
                    Equipment.name.contains(query, autoescape=True),
                )
            )
            .order_by(Equipment.id)
        )
        with store_session(self.engine) as session:
            rows = session.exec(stmt).all()
        # LIKE folds ASCII case on SQLite
        return [row for row in rows if query in row.tag_number or query in row.name]

    def stats(self) -> EquipmentStats:
        with store_session(self.engine) as session:
            by_status = session.exec(
                select(Equipment.status, func.count()).group_by(Equipment.status)
            ).all()
            by_type = session.exec(
                select(Equipment.type, func.count()).group_by(Equipment.type).order_by(Equipment.type)
            ).all()
        status_counts = {status: count for status, count in by_status}
        return EquipmentStats(
            total_count=sum(status_counts.values()),
            operating_count=status_counts.get(DEFAULT_STATUS, 0),
            maintenance_count=status_counts.get(MAINTENANCE_STATUS, 0),
            status_counts=status_counts,
            equipment_types=[EquipmentTypeCount(type=kind, count=count) for kind, count in by_type],
        )

    def _get_or_raise(self, session: Session, equipment_id: int) -> Equipment:
        record = session.get(Equipment, equipment_id)
        if record is None:
            raise self._not_found(equipment_id)
        return record

    @staticmethod
    def _next_updated_at(record: Equipment) -> datetime:
        floor = record.updated_at or record.created_at
        now = utcnow()
        if floor is not None and now <= floor:
            now = floor + timedelta(microseconds=1)
        return now

    def _not_found(self, equipment_id: int) -> NotFound:
        self.logger.info("Equipment id=%s not found", equipment_id)
        return NotFound(f"Equipment with ID {equipment_id} not found")

    def _conflict(self, tag_number: str) -> Conflict:
        self.logger.info("Rejected duplicate tag number %s", tag_number)
        return Conflict(f"Equipment with tag number '{tag_number}' already exists")


__all__ = ["EquipmentRepository", "validate_payload"]
