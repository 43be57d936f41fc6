"""RecordStorePort — abstract interface for API key record persistence."""

from abc import ABC, abstractmethod
from typing import Optional

from domain.models import ApiKeyRecord, ApiKeyUpdate


class RecordStorePort(ABC):
    #: Short backend label reported by health checks and logs.
    backend_name: str = "unknown"

    @abstractmethod
    def list_all(self) -> list[ApiKeyRecord]:
        """Return every record, most recently updated first."""

    @abstractmethod
    def get_by_id(self, key_id: str) -> Optional[ApiKeyRecord]:
        """Return the record with this id, or None."""

    @abstractmethod
    def get_by_value(self, value: str) -> Optional[ApiKeyRecord]:
        """Return the record whose secret equals value, or None."""

    @abstractmethod
    def create(self, name: str, value: str) -> ApiKeyRecord:
        """Persist a new record. Inputs are already validated."""

    @abstractmethod
    def update(self, key_id: str, changes: ApiKeyUpdate) -> Optional[ApiKeyRecord]:
        """Apply changes and refresh updated_at. None if the id is unknown."""

    @abstractmethod
    def delete(self, key_id: str) -> bool:
        """Remove a record. True if it existed."""
