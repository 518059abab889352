"""
Database engine configuration for browser preferences and bookmarks.
SQLite by default; any SQLAlchemy URL works.
"""
import os
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

# Load environment variables
load_dotenv()

DATABASE_URL = os.getenv("LIGHTBROWSER_DATABASE_URL", "sqlite:///./data/lightbrowser.db")


def _is_sqlite(url: str) -> bool:
    """Check if database URL is SQLite"""
    return url.startswith("sqlite:")


def _ensure_sqlite_directory(url: str) -> None:
    database = make_url(url).database
    if not database or database == ":memory:":
        return
    Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def create_engine_for_url(url: str):
    """Create SQLAlchemy engine for the given URL."""
    if _is_sqlite(url):
        _ensure_sqlite_directory(url)
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            pool_pre_ping=True,
            echo=False,
        )

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_con, _):  # pragma: no cover - driver specific
            cursor = dbapi_con.cursor()
            try:
                cursor.execute("PRAGMA journal_mode = WAL;")
                cursor.execute("PRAGMA synchronous = NORMAL;")
            finally:
                cursor.close()

        return engine

    return create_engine(url, pool_pre_ping=True, echo=False)


def create_session_factory(engine):
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )


# Global engine and session factory
Engine = create_engine_for_url(DATABASE_URL)
SessionLocal = create_session_factory(Engine)


def init_db(engine=None):
    """Create all tables on ``engine`` (the global engine by default)."""
    from lightbrowser.models.base import Base
    # Import all models to register them with Base
    from lightbrowser.models import bookmark  # noqa: F401
    from lightbrowser.models import setting  # noqa: F401

    Base.metadata.create_all(bind=engine or Engine)
