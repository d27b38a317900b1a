"""
Database connection and session management.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from message_store.core.logging import get_logger

logger = get_logger(__name__)

# Create base class for models
Base = declarative_base()


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    db_path = make_url(database_url).database
    if not db_path or db_path == ":memory:":
        return
    db_dir = Path(db_path).parent
    if not db_dir.exists():
        db_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created database directory: {db_dir}")


class Database:
    """
    Long-lived database handle: one engine (connection pool) and the
    session factory bound to it.

    Created once by the owning service and shared by every request handler.
    """

    def __init__(self, database_url: str, echo: bool = False, **engine_kwargs):
        self.url = database_url

        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
            _ensure_sqlite_directory(database_url)

        self.engine: Engine = create_engine(
            database_url,
            connect_args=connect_args,
            echo=echo,
            pool_pre_ping=True,
            **engine_kwargs,
        )

        if database_url.startswith("sqlite"):
            @event.listens_for(self.engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

        logger.info(
            "Database engine created",
            extra={"extra_data": {"database_url": self.engine.url.render_as_string(hide_password=True)}}
        )

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Context manager to get database session."""
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def check_connection(self) -> bool:
        """Check if database is reachable."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection check failed: {e}")
            return False

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Database engine disposed")


def get_database(request: Request) -> Database:
    """Dependency returning the database handle owned by the running app."""
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency to get database session."""
    with get_database(request).session() as db:
        yield db
