"""
SQLAlchemy engine and session. Supports PostgreSQL and SQLite (for local testing without Docker).
The Database handle is built once at app startup, kept on app.state and disposed at shutdown;
request handlers receive an ORM session through get_db and never touch the engine directly.
"""
import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.is_sqlite = url.startswith("sqlite")
        connect_args = {"check_same_thread": False} if self.is_sqlite else {}
        self.engine = create_engine(
            url,
            pool_pre_ping=not self.is_sqlite,
            connect_args=connect_args,
            echo=echo,
        )
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_schema(self) -> None:
        """Create tables from the models. Used for SQLite; PostgreSQL goes through Alembic."""
        # Import all models so they register with Base before create_all
        from aev_scheduler.models import user, project, task, activity  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_db(request: Request) -> Iterator[Session]:
    """Dependency: yield a DB session from the app's Database, close after request."""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
