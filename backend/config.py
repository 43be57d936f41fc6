import os
import logging
from typing import Dict, Optional, Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001
DEFAULT_KEYS_FILE = "data/api-keys.json"
DEFAULT_BACKEND = "auto"


class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self.host = os.environ.get("HOST", DEFAULT_HOST)
        self.port = int(os.environ.get("PORT", DEFAULT_PORT))
        self.debug = os.environ.get("DEBUG", "0") == "1"
        self.keys_file = os.environ.get("KEYS_FILE", DEFAULT_KEYS_FILE)
        self.database_url = os.environ.get("DATABASE_URL", "").strip() or None
        self.database_password = os.environ.get("DATABASE_PASSWORD") or None
        self.backend = os.environ.get("KEYSTORE_BACKEND", DEFAULT_BACKEND).strip().lower()

    @classmethod
    def reload(cls) -> "Config":
        """Drop the cached instance and re-read the environment."""
        cls._instance = None
        return cls()

    def get_database_password(self) -> Optional[str]:
        return self.database_password

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "keys_file": self.keys_file,
            "has_database_url": self.database_url is not None,
            "has_database_password": self.database_password is not None,
            "backend": self.backend,
        }


config = Config()


def get_config() -> Config:
    return config


def create_key_store(cfg: Config):
    """Create the KeyStore facade with both backends wired in.

    The remote engine is built lazily on first use, so an unset or broken
    DATABASE_URL only costs a fallback to the file store.
    """
    from adapters.local.json_record_store import JsonFileRecordStore
    from adapters.remote.engine import RemoteEngineProvider
    from key_store import KeyStore

    key_store = KeyStore(
        file_store=JsonFileRecordStore(cfg.keys_file),
        engines=RemoteEngineProvider(cfg.database_url, cfg.get_database_password()),
        mode=cfg.backend,
    )
    remote = "configured" if cfg.database_url else "not configured"
    logger.info(f"Key store: mode={cfg.backend}, remote {remote}, file={cfg.keys_file}")
    return key_store
