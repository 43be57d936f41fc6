"""Tests for environment-driven configuration and the store factory."""

from __future__ import annotations

import pytest

from config import Config, create_key_store


@pytest.fixture
def fresh_config(monkeypatch):
    for var in ("HOST", "PORT", "DEBUG", "KEYS_FILE", "DATABASE_URL", "DATABASE_PASSWORD", "KEYSTORE_BACKEND"):
        monkeypatch.delenv(var, raising=False)

    def _load(**env):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return Config.reload()

    yield _load
    Config.reload()


def test_defaults(fresh_config):
    cfg = fresh_config()
    assert cfg.port == 8001
    assert cfg.keys_file == "data/api-keys.json"
    assert cfg.database_url is None
    assert cfg.backend == "auto"
    assert cfg.as_dict()["has_database_url"] is False


def test_singleton(fresh_config):
    cfg = fresh_config()
    assert Config() is cfg


def test_environment_overrides(fresh_config, tmp_path):
    cfg = fresh_config(
        KEYS_FILE=str(tmp_path / "k.json"),
        DATABASE_URL=f"sqlite:///{tmp_path / 'k.db'}",
        DATABASE_PASSWORD="secret",
        KEYSTORE_BACKEND="Remote",
        DEBUG="1",
    )
    assert cfg.backend == "remote"
    assert cfg.debug is True
    assert cfg.get_database_password() == "secret"
    assert "secret" not in str(cfg.as_dict())


def test_factory_builds_file_backed_store(fresh_config, tmp_path):
    store = create_key_store(fresh_config(KEYS_FILE=str(tmp_path / "k.json")))
    assert store.mode == "auto"
    assert store.backend_name() == "file"


def test_factory_builds_remote_backed_store(fresh_config, tmp_path):
    store = create_key_store(fresh_config(DATABASE_URL=f"sqlite:///{tmp_path / 'k.db'}"))
    try:
        assert store.backend_name() == "remote"
    finally:
        store.close()


def test_factory_rejects_unknown_backend(fresh_config):
    with pytest.raises(ValueError):
        create_key_store(fresh_config(KEYSTORE_BACKEND="redis"))
