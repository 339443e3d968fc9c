"""
Engine and ORM session handling for the session store and message log.

A DatabaseConnection owns one SQLAlchemy engine and hands out short-lived
ORM sessions through get_session(): commit when the block exits cleanly,
rollback when it raises. Repositories open one session per operation.

SQLite (the default) is opened with check_same_thread disabled because
FastAPI runs sync endpoints on a worker pool; server databases get a
pre-pinged connection pool.
"""
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from career_assistant.core.config import get_settings
from career_assistant.core.logging_config import get_logger

logger = get_logger(__name__)

POOL_SIZE = 5
POOL_OVERFLOW = 10


def _engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": POOL_SIZE, "max_overflow": POOL_OVERFLOW}


def _safe_url(url: str) -> str:
    """URL without credentials, for log lines."""
    return url.rsplit("@", 1)[-1] if "@" in url else url


class DatabaseConnection:
    """
    One engine plus an ORM session factory.

    Example:
        >>> db = DatabaseConnection("sqlite:///./assistant.db")
        >>> with db.get_session() as session:
        ...     session.execute(text("SELECT 1"))
    """

    def __init__(self, connection_url: Optional[str] = None):
        """
        Args:
            connection_url: SQLAlchemy URL; DATABASE_URL from settings if omitted
        """
        self.url = connection_url or get_settings().database_url
        self.engine = create_engine(self.url, echo=False, **_engine_options(self.url))

        # Records are built from rows after commit, so keep attributes loaded
        self._session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

        logger.info(f"Database engine created for {_safe_url(self.url)}")

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        ORM session scoped to a with-block.

        Raises:
            SQLAlchemyError: Re-raised after rollback; repositories wrap it
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Rolled back {self.dialect} transaction: {e}")
            raise
        finally:
            session.close()

    def check_connection(self) -> bool:
        """True if a trivial query succeeds."""
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Database check failed for {_safe_url(self.url)}: {e}")
            return False
        return True

    def close(self) -> None:
        """Dispose of pooled connections."""
        self.engine.dispose()
        logger.info(f"Database engine disposed ({self.dialect})")


_db_connection: Optional[DatabaseConnection] = None


def get_database() -> DatabaseConnection:
    """Process-wide connection, created on first use."""
    global _db_connection
    if _db_connection is None:
        _db_connection = DatabaseConnection()
    return _db_connection


def reset_database() -> None:
    """Dispose of and forget the process-wide connection."""
    global _db_connection
    if _db_connection is not None:
        _db_connection.close()
    _db_connection = None
