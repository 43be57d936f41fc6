"""JsonFileRecordStore — keeps all API key records in one JSON array file.

Every mutation reads the whole document, changes it in memory and rewrites
the whole file through a temp file and atomic rename. A process-local lock
serializes access; separate processes sharing the file can still lose updates.
"""

import json
import logging
import os
import tempfile
import threading
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

from domain.models import (
    ApiKeyRecord, ApiKeyUpdate,
    format_timestamp, parse_timestamp, utc_now,
)
from domain.seed import generate_seed_records
from errors import PersistenceFailure
from ports.record_store import RecordStorePort

logger = logging.getLogger(__name__)


def record_to_document(record: ApiKeyRecord) -> dict[str, str]:
    return {
        "id": record.id,
        "name": record.name,
        "value": record.value,
        "createdAt": format_timestamp(record.created_at),
        "updatedAt": format_timestamp(record.updated_at),
    }


def document_to_record(doc: dict[str, Any]) -> ApiKeyRecord:
    for field_name in ("id", "name", "value", "createdAt"):
        if not isinstance(doc[field_name], str):
            raise TypeError(f"{field_name!r} must be a string")
    updated_raw = doc.get("updatedAt")
    if updated_raw is not None and not isinstance(updated_raw, str):
        raise TypeError("'updatedAt' must be a string")
    created_at = parse_timestamp(doc["createdAt"])
    return ApiKeyRecord(
        id=doc["id"],
        name=doc["name"],
        value=doc["value"],
        created_at=created_at,
        updated_at=parse_timestamp(updated_raw) if updated_raw else created_at,
    )


class JsonFileRecordStore(RecordStorePort):
    backend_name = "file"

    def __init__(self, keys_file: str = "data/api-keys.json"):
        self._keys_file = Path(keys_file)
        self._lock = threading.RLock()

    @property
    def keys_file(self) -> Path:
        return self._keys_file

    def _read_document(self) -> Optional[Any]:
        try:
            text = self._keys_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"Keys file {self._keys_file} not found, seeding")
            return None
        except UnicodeDecodeError as e:
            logger.warning(f"Keys file is not valid UTF-8, reseeding: {e}")
            return None
        except OSError as e:
            raise PersistenceFailure(f"Could not read keys file: {e}") from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Keys file is not valid JSON, reseeding: {e}")
            return None

    def _load(self) -> list[ApiKeyRecord]:
        data = self._read_document()
        records = []
        if isinstance(data, list):
            for entry in data:
                try:
                    records.append(document_to_record(entry))
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(f"Skipping malformed key entry: {e!r}")
        elif data is not None:
            logger.warning("Keys file does not hold a JSON array, reseeding")

        if not records:
            records = generate_seed_records()
            self._save(records)
        return records

    def _save(self, records: list[ApiKeyRecord]) -> None:
        payload = json.dumps([record_to_document(r) for r in records], indent=2)
        tmp_path = None
        try:
            self._keys_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._keys_file.parent, prefix=".api-keys-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self._keys_file)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceFailure(f"Could not write keys file: {e}") from e

    def list_all(self) -> list[ApiKeyRecord]:
        with self._lock:
            records = self._load()
        return sorted(records, key=lambda r: r.updated_at, reverse=True)

    def get_by_id(self, key_id: str) -> Optional[ApiKeyRecord]:
        with self._lock:
            return next((r for r in self._load() if r.id == key_id), None)

    def get_by_value(self, value: str) -> Optional[ApiKeyRecord]:
        with self._lock:
            return next((r for r in self._load() if r.value == value), None)

    def create(self, name: str, value: str) -> ApiKeyRecord:
        now = utc_now()
        record = ApiKeyRecord(
            id=str(uuid.uuid4()),
            name=name,
            value=value,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            records = self._load()
            records.append(record)
            self._save(records)
        return record

    def update(self, key_id: str, changes: ApiKeyUpdate) -> Optional[ApiKeyRecord]:
        with self._lock:
            records = self._load()
            for i, existing in enumerate(records):
                if existing.id != key_id:
                    continue
                updated = replace(
                    existing,
                    name=changes.name if changes.name is not None else existing.name,
                    value=changes.value if changes.value is not None else existing.value,
                    updated_at=max(utc_now(), existing.updated_at),
                )
                records[i] = updated
                self._save(records)
                return updated
        return None

    def delete(self, key_id: str) -> bool:
        with self._lock:
            records = self._load()
            remaining = [r for r in records if r.id != key_id]
            if len(remaining) == len(records):
                return False
            self._save(remaining)
        return True
