"""RemoteEngineProvider — owns the lazily built SQLAlchemy engine."""

import logging
import threading
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from adapters.remote.sql_record_store import metadata

logger = logging.getLogger(__name__)


class RemoteEngineProvider:
    """Builds the remote engine on first use and reuses it until dispose().

    A failed construction is logged and attempted again on the next call,
    so a misconfigured backend keeps degrading to the file store.
    """

    def __init__(
        self,
        database_url: Optional[str],
        password: Optional[str] = None,
        create_tables: bool = True,
    ):
        self._database_url = database_url
        self._password = password
        self._create_tables = create_tables
        self._engine: Optional[Engine] = None
        self._lock = threading.Lock()

    @property
    def configured(self) -> bool:
        return bool(self._database_url)

    def get(self) -> Optional[Engine]:
        if not self.configured:
            return None
        with self._lock:
            if self._engine is None:
                self._engine = self._build()
            return self._engine

    def _build(self) -> Optional[Engine]:
        try:
            url = make_url(self._database_url)
            if self._password:
                url = url.set(password=self._password)
            connect_args = {"check_same_thread": False} if url.get_backend_name() == "sqlite" else {}
            engine = create_engine(url, connect_args=connect_args, hide_parameters=True)
        except (SQLAlchemyError, ImportError, ValueError) as e:
            logger.error(f"Could not create remote database engine: {e}")
            return None

        if self._create_tables:
            try:
                metadata.create_all(engine, checkfirst=True)
            except SQLAlchemyError as e:
                logger.warning(f"api_keys table check skipped: {e}")

        logger.info(f"Remote key store engine ready ({url.render_as_string(hide_password=True)})")
        return engine

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
                logger.info("Remote key store engine disposed")
