"""KeyStore — the persistence facade HTTP handlers call.

The backend is resolved on every call: the remote store when its engine is
available, otherwise the JSON file store. Reads degrade to seed data, writes
surface their errors.
"""

import logging
from typing import Optional

from adapters.local.json_record_store import JsonFileRecordStore
from adapters.remote.engine import RemoteEngineProvider
from adapters.remote.sql_record_store import SqlRecordStore
from domain.models import ApiKeyRecord, ApiKeyUpdate
from domain.seed import generate_seed_records
from errors import BackendUnavailable, KeyStoreError, ValidationError
from key_classifier import mask
from ports.record_store import RecordStorePort

logger = logging.getLogger(__name__)

BACKEND_MODES = ("auto", "remote", "file")


def _is_blank(text: Optional[str]) -> bool:
    return not isinstance(text, str) or not text.strip()


class KeyStore:
    def __init__(
        self,
        file_store: JsonFileRecordStore,
        engines: Optional[RemoteEngineProvider] = None,
        mode: str = "auto",
    ):
        if mode not in BACKEND_MODES:
            raise ValueError(f"Unknown KEYSTORE_BACKEND: {mode!r}. Valid options: {', '.join(BACKEND_MODES)}")
        self._file_store = file_store
        self._engines = engines or RemoteEngineProvider(None)
        self._mode = mode

    @property
    def mode(self) -> str:
        return self._mode

    def backend(self) -> RecordStorePort:
        """Resolve the store for this call."""
        if self._mode == "file":
            return self._file_store
        engine = self._engines.get()
        if engine is not None:
            return SqlRecordStore(engine)
        if self._mode == "remote":
            raise BackendUnavailable()
        return self._file_store

    def backend_name(self) -> str:
        try:
            return self.backend().backend_name
        except BackendUnavailable:
            return "unavailable"

    def close(self) -> None:
        self._engines.dispose()

    def list_all(self) -> list[ApiKeyRecord]:
        try:
            return self.backend().list_all()
        except KeyStoreError as e:
            logger.error(f"Listing keys failed, serving seed data: {e.message}")
            return generate_seed_records()
        except Exception:
            logger.exception("Unexpected error listing keys, serving seed data")
            return generate_seed_records()

    def get_by_id(self, key_id: str) -> Optional[ApiKeyRecord]:
        return self.backend().get_by_id(key_id)

    def get_by_value(self, value: str) -> Optional[ApiKeyRecord]:
        return self.backend().get_by_value(value)

    def create(self, name: Optional[str], value: Optional[str]) -> ApiKeyRecord:
        # Whitespace-only input counts as missing; accepted input is stored verbatim.
        if _is_blank(name) or _is_blank(value):
            raise ValidationError()
        store = self.backend()
        record = store.create(name, value)
        logger.info(f"Created key {record.id} ({mask(value)}) in {store.backend_name} store")
        return record

    def update(self, key_id: str, changes: ApiKeyUpdate) -> Optional[ApiKeyRecord]:
        for field_name in ("name", "value"):
            provided = getattr(changes, field_name)
            if provided is not None and _is_blank(provided):
                raise ValidationError(f"'{field_name}' must not be blank")
        record = self.backend().update(key_id, changes)
        if record is None:
            logger.info(f"Update skipped, key {key_id} not found")
        else:
            logger.info(f"Updated key {key_id}")
        return record

    def delete(self, key_id: str) -> bool:
        removed = self.backend().delete(key_id)
        if removed:
            logger.info(f"Deleted key {key_id}")
        return removed
