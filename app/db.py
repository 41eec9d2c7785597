"""Database engine, session factory and FastAPI session dependency."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings

Base = declarative_base()


class DatabaseManager:
    """Lazily builds the engine and session factory from settings."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        self._database_url = database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine, autoflush=False, expire_on_commit=False
            )
        return self._session_factory

    def _create_engine(self) -> Engine:
        settings = get_settings()
        url = (
            make_url(self._database_url)
            if self._database_url
            else settings.database_url_obj
        )

        if url.get_backend_name() == "sqlite":
            # In-memory SQLite must share one connection across sessions
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )

        return create_engine(
            url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            connect_args={"application_name": settings.db_app_name},
        )

    @contextmanager
    def db_session(self) -> Generator[Session, None, None]:
        """Yield a session; commit on success, roll back on error."""
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


db_manager = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a database session."""
    db = db_manager.session_factory()
    try:
        yield db
    finally:
        db.close()
