"""Unit tests for the SQLAlchemy-backed remote record store (SQLite)."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import insert, text

from adapters.remote.engine import RemoteEngineProvider
from adapters.remote.sql_record_store import SqlRecordStore, api_keys
from domain.models import ApiKeyUpdate
from errors import PersistenceFailure
from key_classifier import classify


@pytest.fixture
def engine(engines: RemoteEngineProvider):
    return engines.get()


@pytest.fixture
def store(engine) -> SqlRecordStore:
    return SqlRecordStore(engine)


@pytest.fixture
def broken_store(engine) -> SqlRecordStore:
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE api_keys"))
    return SqlRecordStore(engine)


class TestReads:
    def test_empty_table_is_not_seeded(self, store):
        assert store.list_all() == []

    def test_list_orders_by_recency(self, store):
        first = store.create("first", "v1")
        time.sleep(0.001)
        second = store.create("second", "v2")
        time.sleep(0.001)
        store.update(first.id, ApiKeyUpdate(name="first-renamed"))

        assert [r.id for r in store.list_all()] == [first.id, second.id]

    def test_null_updated_at_reports_created_at(self, store, engine):
        created = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        with engine.begin() as conn:
            conn.execute(insert(api_keys).values(
                id="legacy", name="Legacy", value="sk-legacy", created_at=created, updated_at=None,
            ))

        record = store.get_by_id("legacy")

        assert record.updated_at == record.created_at == created

    def test_get_unknown_id_returns_none(self, store):
        assert store.get_by_id("missing") is None

    def test_get_by_value(self, store):
        record = store.create("K1", "stg_lookup")
        assert store.get_by_value("stg_lookup").id == record.id
        assert store.get_by_value("nope") is None


class TestWrites:
    def test_create_round_trip(self, store):
        record = store.create("K1", "prod_abc")

        fetched = store.get_by_id(record.id)

        assert fetched.name == "K1"
        assert fetched.value == "prod_abc"
        assert fetched.created_at == fetched.updated_at

    def test_update_name_only(self, store):
        record = store.create("K1", "prod_abc")
        time.sleep(0.001)

        updated = store.update(record.id, ApiKeyUpdate(name="K1b"))

        assert updated.name == "K1b"
        assert updated.value == "prod_abc"
        assert updated.updated_at >= record.updated_at
        assert updated.created_at == record.created_at

    def test_update_value_only(self, store):
        record = store.create("K1", "prod_abc")
        updated = store.update(record.id, ApiKeyUpdate(value="dev_xyz"))
        assert updated.name == "K1"
        assert classify(updated.value) == "dev"

    def test_update_never_moves_updated_at_backwards(self, store, engine):
        created = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        future = datetime.now(timezone.utc) + timedelta(days=1)
        with engine.begin() as conn:
            conn.execute(insert(api_keys).values(
                id="ahead", name="Ahead", value="v", created_at=created, updated_at=future,
            ))

        updated = store.update("ahead", ApiKeyUpdate(name="Renamed"))

        assert updated.name == "Renamed"
        assert updated.updated_at >= future

    def test_update_unknown_id_returns_none(self, store):
        assert store.update("missing", ApiKeyUpdate(name="x")) is None

    def test_delete(self, store):
        record = store.create("K1", "v")
        assert store.delete(record.id) is True
        assert store.get_by_id(record.id) is None
        assert store.delete(record.id) is False


class TestFailures:
    def test_list_failure_degrades_to_seed_data(self, broken_store):
        records = broken_store.list_all()
        assert sorted(classify(r.value) for r in records) == ["dev", "prod", "stg"]

    def test_undecodable_row_degrades_to_seed_data(self, store, engine):
        with engine.begin() as conn:
            conn.execute(text(
                "INSERT INTO api_keys (id, name, value, created_at, updated_at) "
                "VALUES ('bad', 'n', 'v', 'not a timestamp', NULL)"
            ))

        records = store.list_all()

        assert sorted(classify(r.value) for r in records) == ["dev", "prod", "stg"]

    def test_failed_create_does_not_echo_secret(self, broken_store, caplog):
        caplog.set_level(logging.DEBUG)

        with pytest.raises(PersistenceFailure) as exc_info:
            broken_store.create("n", "prod_TOPSECRET")

        assert "prod_TOPSECRET" not in exc_info.value.message
        assert "prod_TOPSECRET" not in caplog.text
        assert exc_info.value.message == "Remote insert failed (OperationalError)"

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: s.get_by_id("x"),
            lambda s: s.get_by_value("x"),
            lambda s: s.create("n", "v"),
            lambda s: s.update("x", ApiKeyUpdate(name="n")),
            lambda s: s.delete("x"),
        ],
    )
    def test_other_failures_surface(self, broken_store, call):
        with pytest.raises(PersistenceFailure):
            call(broken_store)


class TestRemoteEngineProvider:
    def test_unconfigured_returns_none(self):
        provider = RemoteEngineProvider(None)
        assert provider.configured is False
        assert provider.get() is None

    def test_engine_is_memoized(self, engines):
        assert engines.get() is engines.get()

    def test_creates_table_on_first_build(self, engines):
        with engines.get().connect() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM api_keys")).scalar() == 0

    def test_invalid_url_returns_none(self):
        provider = RemoteEngineProvider("not a database url")
        assert provider.configured is True
        assert provider.get() is None

    def test_unknown_driver_returns_none(self):
        assert RemoteEngineProvider("nosuchdb://user@host/db").get() is None

    def test_dispose_forces_rebuild(self, engines):
        first = engines.get()
        engines.dispose()
        assert engines.get() is not first
