"""Shared fixtures: temp-file stores and SQLite-backed remote engines."""

from __future__ import annotations

from pathlib import Path

import pytest

from adapters.local.json_record_store import JsonFileRecordStore
from adapters.remote.engine import RemoteEngineProvider
from key_store import KeyStore


@pytest.fixture
def keys_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "api-keys.json"


@pytest.fixture
def file_store(keys_file: Path) -> JsonFileRecordStore:
    return JsonFileRecordStore(str(keys_file))


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'keys.db'}"


@pytest.fixture
def engines(sqlite_url: str):
    provider = RemoteEngineProvider(sqlite_url)
    yield provider
    provider.dispose()


@pytest.fixture
def file_key_store(file_store: JsonFileRecordStore) -> KeyStore:
    return KeyStore(file_store=file_store)


@pytest.fixture
def remote_key_store(file_store: JsonFileRecordStore, engines: RemoteEngineProvider) -> KeyStore:
    return KeyStore(file_store=file_store, engines=engines)
