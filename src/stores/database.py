"""
Database Core

SQLAlchemy engine and session management for hotel-api.

A ``Database`` owns one engine and its session factory. The application
creates it in its lifespan, shares it with every request through
``app.state`` and disposes it on shutdown; nothing here is a module-level
global.

Features:
- SQLite-aware pooling: one persistent connection shared by all requests
- Session and transaction context managers with automatic rollback
- Connection test and pool status for health checks
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Generator, Optional

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import (
    ArgumentError,
    DatabaseError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from src.core.config import settings
from src.core.error_codes import ConfigurationErrorCode, DatabaseErrorCode
from src.core.exceptions import (
    ApplicationException,
    ConfigurationException,
    DatabaseException,
)
from src.core.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PoolStatus:
    """Immutable connection pool status information."""

    size: int
    checked_out: int
    overflow: int


def describe_error(exc: Exception) -> str:
    """Return the driver's own message for a SQLAlchemy error."""
    return str(getattr(exc, "orig", None) or exc)


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _engine_options(url: str, echo: bool) -> Dict[str, Any]:
    """Build create_engine() keyword arguments for the given URL."""
    options: Dict[str, Any] = {"echo": echo}

    if url.startswith("sqlite"):
        # The connection is handed between worker threads, one at a time.
        options["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url):
            options["poolclass"] = StaticPool
            return options

    options.update(
        pool_pre_ping=settings.database__pool_pre_ping,
        pool_size=settings.database__pool_size,
        max_overflow=settings.database__max_overflow,
        pool_timeout=settings.database__pool_timeout,
        pool_recycle=settings.database__pool_recycle,
        poolclass=QueuePool,
    )
    return options


def _create_database_engine(url: str, echo: bool) -> Engine:
    """Create and configure the database engine."""
    try:
        return create_engine(url, **_engine_options(url, echo))

    except ArgumentError as e:
        logger.error("Invalid database URL: %s", str(e))
        raise ConfigurationException(
            f"Invalid database URL: {str(e)}",
            ConfigurationErrorCode.INVALID_CONFIG,
        ) from e

    except Exception as e:
        logger.error("Failed to create database engine: %s", str(e))

        host = url.rsplit("@", maxsplit=1)[-1].split("/")[0] if "@" in url else "local"
        raise DatabaseException(
            f"Database engine creation failed: {str(e)}",
            DatabaseErrorCode.CONNECTION_FAILED,
            details={"database_url_host": host},
        ) from e


class Database:
    """Owned datastore handle: one engine plus its session factory."""

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or settings.database__url
        self.engine = _create_database_engine(
            self.url, settings.database__echo if echo is None else echo
        )
        # expire_on_commit=True: objects expire after commit, safe default
        self.session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=True,
        )

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for a database session.

        Rolls back on any error; SQLAlchemy errors that escape the caller's own
        handling are wrapped in DatabaseException.

        Example:
            with database.session() as db:
                rows = db.execute(select(table)).mappings().all()
        """
        db_session = self.session_factory()
        logger.debug("Database session created")
        try:
            yield db_session

        except SQLAlchemyError as e:
            logger.error("Database session error: %s", str(e))
            self._rollback(db_session)
            raise DatabaseException(
                f"Database session error: {describe_error(e)}",
                DatabaseErrorCode.QUERY_FAILED,
            ) from e

        except Exception:
            self._rollback(db_session)
            raise

        finally:
            try:
                db_session.close()
                logger.debug("Database session closed")
            except SQLAlchemyError as close_error:
                logger.error("Failed to close database session: %s", str(close_error))

    @staticmethod
    def _rollback(db_session: Session) -> None:
        try:
            db_session.rollback()
            logger.debug("Database session rolled back due to error")
        except SQLAlchemyError as rollback_error:
            logger.error("Failed to rollback session: %s", str(rollback_error))

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """
        Session scoped to one transaction: commits on success, rolls back on error.

        Usage:
            with database.transaction() as tx:
                tx.execute(insert(table).values(**values))
        """
        with self.session() as db_session:
            logger.debug("Starting database transaction")
            try:
                yield db_session
                db_session.commit()
                logger.debug("Database transaction committed successfully")

            except (ApplicationException, SQLAlchemyError):
                raise

            except Exception as e:
                logger.error("Database transaction failed: %s", str(e))
                raise DatabaseException(
                    f"Database transaction failed: {str(e)}",
                    DatabaseErrorCode.TRANSACTION_FAILED,
                ) from e

    def get_pool_status(self) -> PoolStatus:
        """
        Get current connection pool status.

        Pools without sizing (StaticPool) report zeros.
        """
        pool = self.engine.pool
        return PoolStatus(
            size=getattr(pool, "size", lambda: 0)(),
            checked_out=getattr(pool, "checkedout", lambda: 0)(),
            overflow=getattr(pool, "overflow", lambda: 0)(),
        )

    def dispose(self) -> None:
        """
        Dispose the engine and close all connections.

        Called from the application lifespan on shutdown.
        """
        try:
            self.engine.dispose()
            logger.info("Database engine disposed successfully")
        except SQLAlchemyError as e:
            logger.error("Failed to dispose database engine: %s", str(e))

    def test_connection(self) -> Dict[str, Any]:
        """
        Test database connection and return status information.

        Returns:
            Dict[str, Any]: Connection test results and pool status

        Raises:
            DatabaseException: If connection test fails
        """
        try:
            with self.engine.connect() as conn:
                test_value = conn.execute(text("SELECT 1 as test_value")).scalar()

            pool_status = self.get_pool_status()
            logger.info(
                "Database connection test - Pool status: Size=%d, Checked out=%d, "
                "Overflow=%d",
                pool_status.size,
                pool_status.checked_out,
                pool_status.overflow,
            )

            return {
                "connection_test": "passed",
                "test_query_result": test_value,
                "pool_status": {
                    "size": pool_status.size,
                    "checked_out": pool_status.checked_out,
                    "overflow": pool_status.overflow,
                },
                "engine_url": self.engine.url.render_as_string(hide_password=True),
            }

        except (OperationalError, DatabaseError, InterfaceError) as e:
            logger.error("Database connection test failed: %s", str(e))
            raise DatabaseException(
                f"Database connection test failed: {describe_error(e)}",
                DatabaseErrorCode.CONNECTION_FAILED,
                details={"error_type": type(e).__name__},
            ) from e
