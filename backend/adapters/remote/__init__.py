"""Relational database adapters for the remote key store."""

from .engine import RemoteEngineProvider
from .sql_record_store import SqlRecordStore

__all__ = ["RemoteEngineProvider", "SqlRecordStore"]
