"""SqlRecordStore — API key records in a relational `api_keys` table.

Reads map updated_at ?? created_at. A failing list query degrades to seed
data; every other failing query surfaces as PersistenceFailure.
"""

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import (
    Column, DateTime, MetaData, String, Table, Text,
    delete, func, insert, select, update,
)
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError

from domain.models import ApiKeyRecord, ApiKeyUpdate, ensure_utc, utc_now
from domain.seed import generate_seed_records
from errors import PersistenceFailure
from ports.record_store import RecordStorePort

logger = logging.getLogger(__name__)

metadata = MetaData()

api_keys = Table(
    "api_keys",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", Text, nullable=False),
    Column("value", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=True),
)


def row_to_record(row: RowMapping) -> ApiKeyRecord:
    created_at = ensure_utc(row["created_at"])
    updated_at = row["updated_at"]
    return ApiKeyRecord(
        id=row["id"],
        name=row["name"],
        value=row["value"],
        created_at=created_at,
        updated_at=ensure_utc(updated_at) if updated_at is not None else created_at,
    )


def _failure(action: str, e: Exception) -> PersistenceFailure:
    # The engine hides bound parameters; the client message never carries driver text.
    logger.error(f"Remote {action} failed: {e}")
    return PersistenceFailure(f"Remote {action} failed ({type(e).__name__})")


class SqlRecordStore(RecordStorePort):
    backend_name = "remote"

    def __init__(self, engine: Engine):
        self._engine = engine

    def list_all(self) -> list[ApiKeyRecord]:
        stmt = select(api_keys).order_by(
            func.coalesce(api_keys.c.updated_at, api_keys.c.created_at).desc()
        )
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
            return [row_to_record(row) for row in rows]
        except (SQLAlchemyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Remote list failed, serving seed data: {type(e).__name__}: {e}")
            return generate_seed_records()

    def _fetch_one(self, stmt: Any, action: str) -> Optional[ApiKeyRecord]:
        try:
            with self._engine.connect() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as e:
            raise _failure(action, e) from e
        return row_to_record(row) if row is not None else None

    def get_by_id(self, key_id: str) -> Optional[ApiKeyRecord]:
        return self._fetch_one(select(api_keys).where(api_keys.c.id == key_id), "get")

    def get_by_value(self, value: str) -> Optional[ApiKeyRecord]:
        return self._fetch_one(select(api_keys).where(api_keys.c.value == value), "lookup")

    def create(self, name: str, value: str) -> ApiKeyRecord:
        now = utc_now()
        record = ApiKeyRecord(
            id=str(uuid.uuid4()),
            name=name,
            value=value,
            created_at=now,
            updated_at=now,
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(api_keys).values(
                    id=record.id,
                    name=record.name,
                    value=record.value,
                    created_at=record.created_at,
                    updated_at=record.updated_at,
                ))
        except SQLAlchemyError as e:
            raise _failure("insert", e) from e
        return record

    def update(self, key_id: str, changes: ApiKeyUpdate) -> Optional[ApiKeyRecord]:
        values: dict[str, Any] = {}
        if changes.name is not None:
            values["name"] = changes.name
        if changes.value is not None:
            values["value"] = changes.value
        try:
            with self._engine.begin() as conn:
                prior = conn.execute(
                    select(api_keys).where(api_keys.c.id == key_id)
                ).mappings().first()
                if prior is None:
                    return None
                # updated_at never moves backwards, even past a row stamped by a faster clock.
                values["updated_at"] = max(utc_now(), row_to_record(prior).updated_at)
                conn.execute(
                    update(api_keys).where(api_keys.c.id == key_id).values(**values)
                )
                row = conn.execute(
                    select(api_keys).where(api_keys.c.id == key_id)
                ).mappings().one()
        except SQLAlchemyError as e:
            raise _failure("update", e) from e
        return row_to_record(row)

    def delete(self, key_id: str) -> bool:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(delete(api_keys).where(api_keys.c.id == key_id))
        except SQLAlchemyError as e:
            raise _failure("delete", e) from e
        return result.rowcount > 0
