"""Engine, session and transaction management."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager, nullcontext
from typing import Any, TypeVar

from sqlalchemy import create_engine, event, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import Settings
from ..errors import StorageError
from ..models import DatabaseHealth
from ..utils import now_utc
from .retry import with_retry
from .schema import SCHEMA_VERSION, Base, DatabaseInfoRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Execution option marking sessions that only read
READ_ONLY_OPTION = "kanbanstore_read_only"

# SQLite OperationalError messages that indicate lock contention
SQLITE_TRANSIENT_MESSAGES = ("database is locked", "database table is locked", "database is busy")


def is_transient(error: DBAPIError, dialect_name: str) -> bool:
    """Whether a failed transaction may succeed if simply run again."""
    if error.connection_invalidated:
        return True
    if not isinstance(error, OperationalError):
        return False
    if dialect_name == "sqlite":
        message = str(error.orig).lower()
        return any(fragment in message for fragment in SQLITE_TRANSIENT_MESSAGES)
    # Serialization failures, deadlocks and dropped connections
    return True


def _create_engine(settings: Settings) -> Engine:
    """Build an engine whose transactions serialize writers.

    SQLite: the driver's implicit transaction handling is disabled and every
    write transaction starts with BEGIN IMMEDIATE, so the write lock is taken
    before the first read. Other dialects run at SERIALIZABLE.
    """
    if not settings.is_sqlite:
        return create_engine(
            settings.database_url,
            isolation_level="SERIALIZABLE",
            pool_size=settings.pool_size,
            pool_pre_ping=True,
        )

    connect_args: dict[str, Any] = {
        "timeout": settings.busy_timeout,
        "check_same_thread": False,
    }
    if settings.is_memory:
        # One shared connection, otherwise each checkout sees an empty database
        engine = create_engine(
            settings.database_url, connect_args=connect_args, poolclass=StaticPool
        )
    else:
        sqlite_path = settings.sqlite_path
        if sqlite_path is not None:
            sqlite_path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            pool_size=settings.pool_size,
        )

    busy_timeout_ms = int(settings.busy_timeout * 1000)
    use_wal = not settings.is_memory

    @event.listens_for(engine, "connect")
    def _configure_connection(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
        if use_wal:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Any) -> None:
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


class Database:
    """Owned handle to one store: an engine plus a session factory.

    Every operation runs inside ``run``, one transaction per call, retried
    on contention.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.engine = _create_engine(self.settings)
        self._session_factory = sessionmaker(self.engine, expire_on_commit=False)
        self._read_session_factory = sessionmaker(
            self.engine.execution_options(**{READ_ONLY_OPTION: True}),
            expire_on_commit=False,
        )
        # In-memory SQLite shares one connection across threads; transactions take this lock
        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if self.settings.is_memory else nullcontext()
        )
        self._started = time.monotonic()
        self._closed = False
        logger.debug("Opened database %s", self.engine.url.render_as_string(hide_password=True))

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    @contextmanager
    def transaction(self, operation: str, *, read_only: bool = False) -> Iterator[Session]:
        """Open a session inside one transaction, committed on normal exit.

        Any exception rolls the transaction back. SQLAlchemy errors are
        re-raised as StorageError; lock timeouts, serialization failures and
        dropped connections are marked retryable.
        """
        factory = self._read_session_factory if read_only else self._session_factory
        with self._lock:
            session = factory()
            try:
                with session.begin():
                    yield session
            except DBAPIError as e:
                retryable = is_transient(e, self.engine.dialect.name)
                if retryable:
                    logger.debug("%s hit transient storage error: %s", operation, e.orig)
                else:
                    logger.error("%s failed: %s", operation, e.orig)
                raise StorageError(operation, str(e.orig), retryable=retryable) from e
            except SQLAlchemyError as e:
                logger.error("%s failed: %s", operation, e)
                raise StorageError(operation, str(e)) from e
            finally:
                session.close()

    def run(
        self,
        fn: Callable[[Session], T],
        operation: str,
        *,
        read_only: bool = False,
    ) -> T:
        """Run ``fn(session)`` in its own transaction, retrying on contention."""

        def attempt() -> T:
            with self.transaction(operation, read_only=read_only) as session:
                return fn(session)

        return with_retry(
            attempt,
            operation=operation,
            max_retries=self.settings.max_retries,
            backoff=self.settings.retry_backoff,
        )

    def create_schema(self) -> None:
        """Create missing tables and record the schema version."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            logger.error("Schema creation failed: %s", e)
            raise StorageError("create_schema", str(e)) from e

        def record_version(session: Session) -> None:
            info = session.get(DatabaseInfoRecord, 1)
            if info is None:
                session.add(
                    DatabaseInfoRecord(
                        id=1, schema_version=SCHEMA_VERSION, last_migration=now_utc()
                    )
                )
                logger.info("Initialized schema version %d", SCHEMA_VERSION)
            elif info.schema_version < SCHEMA_VERSION:
                logger.info(
                    "Schema version %d -> %d", info.schema_version, SCHEMA_VERSION
                )
                info.schema_version = SCHEMA_VERSION
                info.last_migration = now_utc()

        self.run(record_version, "create_schema")

    def health_check(self) -> DatabaseHealth:
        """Probe connectivity and read schema bookkeeping. Never raises."""
        errors: list[str] = []
        schema_version = None
        last_migration = None
        try:
            with self.transaction("health_check", read_only=True) as session:
                session.execute(text("SELECT 1"))
                info = session.scalar(
                    select(DatabaseInfoRecord).where(DatabaseInfoRecord.id == 1)
                )
                if info is None:
                    errors.append("Schema version information missing")
                else:
                    schema_version = info.schema_version
                    last_migration = info.last_migration
        except StorageError as e:
            errors.append(e.message)

        if not errors:
            logger.debug("Health check passed (schema version %s)", schema_version)
        else:
            logger.warning("Health check failed: %s", "; ".join(errors))

        return DatabaseHealth(
            is_healthy=not errors,
            schema_version=schema_version,
            last_migration=last_migration,
            uptime_seconds=time.monotonic() - self._started,
            errors=errors,
        )

    def close(self) -> None:
        """Dispose of the connection pool. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self.engine.dispose()
        logger.debug("Closed database")
