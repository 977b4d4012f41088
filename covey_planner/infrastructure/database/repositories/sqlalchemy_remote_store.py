"""Concrete RemoteStore implementation backed by SQLAlchemy async sessions."""

import datetime as dt
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import ValidationError
from sqlalchemy import Boolean, Column, Date, DateTime, Integer, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from covey_planner.application.interfaces import OWNER_COLUMN, OrderBy, RemoteStore
from covey_planner.application.schemas.records import RecordRow
from covey_planner.application.schemas.tables import RecordDescriptor, get_descriptor
from covey_planner.domain.exceptions import (
    RecordOwnershipError,
    RemoteStoreError,
    UnknownColumnError,
    UnscopedQueryError,
    ValidationFailedError,
)
from covey_planner.infrastructure.database.models import RECORD_MODELS

logger = logging.getLogger(__name__)

_TRUE = frozenset({"true", "1", "yes"})
_FALSE = frozenset({"false", "0", "no"})


class SQLAlchemyRemoteStore(RemoteStore):
    """Implements the RemoteStore port over the planner tables.

    Rows are validated through the table's row schema on the way in and
    serialized through it on the way out, so callers always see the same
    JSON-ready shape whether rows come from here or over HTTP.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def select(
        self,
        table: str,
        filters: Mapping[str, Any],
        order: OrderBy | None = None,
    ) -> list[dict[str, Any]]:
        descriptor = get_descriptor(table)
        model = RECORD_MODELS[table]
        if not filters.get(OWNER_COLUMN):
            raise UnscopedQueryError(table)

        stmt = select(model)
        for name, value in filters.items():
            column = self._column(table, name)
            stmt = stmt.where(column == self._coerce(table, column, value))
        if order is not None:
            column = self._column(table, order.column)
            stmt = stmt.order_by(column.desc() if order.descending else column.asc())

        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise RemoteStoreError("select", table, str(exc)) from exc
        return [self._to_row(descriptor, m) for m in result.scalars().all()]

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        descriptor = get_descriptor(table)
        model = RECORD_MODELS[table]
        record = self._validate(descriptor, row)
        values = self._column_values(record)

        try:
            instance = await self._session.get(model, record.id)
            if instance is None:
                instance = model(**values)
                self._session.add(instance)
            elif instance.user_id != record.user_id:
                raise RecordOwnershipError(table, record.id)
            else:
                logger.debug("Insert of existing %s %s overwrites it", table, record.id)
                for name, value in values.items():
                    setattr(instance, name, value)
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise RemoteStoreError("insert", table, str(exc)) from exc
        return self._to_row(descriptor, instance)

    async def update(
        self,
        table: str,
        record_id: str,
        patch: Mapping[str, Any],
        *,
        owner_id: str,
    ) -> bool:
        descriptor = get_descriptor(table)
        model = RECORD_MODELS[table]
        for name in patch:
            self._column(table, name)
        if any(name in patch for name in ("id", OWNER_COLUMN, "created_at")):
            raise ValidationFailedError(
                descriptor.label, ["id, user_id and created_at cannot be changed"]
            )

        try:
            instance = await self._session.get(model, record_id)
            if instance is None or instance.user_id != owner_id:
                return False
            merged = {**self._to_row(descriptor, instance), **patch}
            if "updated_at" not in patch:
                merged["updated_at"] = dt.datetime.now(dt.timezone.utc)
            record = self._validate(descriptor, merged)
            for name, value in self._column_values(record).items():
                setattr(instance, name, value)
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise RemoteStoreError("update", table, str(exc)) from exc
        return True

    async def delete(self, table: str, record_id: str, *, owner_id: str) -> bool:
        get_descriptor(table)
        model = RECORD_MODELS[table]
        try:
            instance = await self._session.get(model, record_id)
            if instance is None or instance.user_id != owner_id:
                return False
            await self._session.delete(instance)
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise RemoteStoreError("delete", table, str(exc)) from exc
        return True

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    def _column(table: str, name: str) -> Column:
        column = RECORD_MODELS[table].__table__.columns.get(name)
        if column is None:
            raise UnknownColumnError(table, name)
        return column

    @staticmethod
    def _coerce(table: str, column: Column, value: Any) -> Any:
        """Turn query-string filter values into the column's Python type."""
        column_type = column.type
        try:
            if isinstance(value, str):
                if isinstance(column_type, Boolean):
                    lowered = value.strip().lower()
                    if lowered not in _TRUE | _FALSE:
                        raise ValueError(f"'{value}' is not a boolean")
                    return lowered in _TRUE
                if isinstance(column_type, Integer):
                    return int(value)
                if isinstance(column_type, DateTime):
                    value = dt.datetime.fromisoformat(value)
                elif isinstance(column_type, Date):
                    return dt.date.fromisoformat(value.split("T")[0])
        except ValueError as exc:
            raise ValidationFailedError(table, [f"{column.name}: {exc}"]) from exc

        if (
            isinstance(value, dt.datetime)
            and isinstance(column_type, DateTime)
            and not column_type.timezone
            and value.tzinfo is not None
        ):
            return value.astimezone().replace(tzinfo=None)
        return value

    @staticmethod
    def _validate(descriptor: RecordDescriptor, row: Mapping[str, Any]) -> RecordRow:
        try:
            return descriptor.row_schema.model_validate(dict(row))
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(p) for p in err['loc']) or 'row'}: {err['msg']}"
                for err in exc.errors()
            ]
            raise ValidationFailedError(descriptor.label, errors) from exc

    @staticmethod
    def _column_values(record: RecordRow) -> dict[str, Any]:
        return {
            name: value.value if isinstance(value, Enum) else value
            for name, value in record.model_dump().items()
        }

    @staticmethod
    def _to_row(descriptor: RecordDescriptor, instance: Any) -> dict[str, Any]:
        """Map ORM model → JSON-ready row."""
        data = {c.name: getattr(instance, c.key) for c in instance.__table__.columns}
        return descriptor.row_schema.model_validate(data).to_row()
