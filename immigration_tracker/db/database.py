import logging
import threading
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from immigration_tracker.core.config import Settings, get_settings
from immigration_tracker.core.exceptions import StorageUnavailableError
from immigration_tracker.core.profiles import DatabaseProfileBinding, StorageEngine, get_resolver

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None
_engine_lock = threading.Lock()


def database_url_for(binding: DatabaseProfileBinding, settings: Settings) -> str:
    """Connection URL for the binding's storage engine."""
    if binding.engine == StorageEngine.postgresql:
        return settings.postgres_url
    if binding.engine == StorageEngine.sqlite:
        return settings.sqlite_url
    return "sqlite://"


def create_engine_for(binding: DatabaseProfileBinding, settings: Settings) -> Engine:
    """
    Build a SQLAlchemy engine for a profile binding.

    - postgresql: connection pool (pool_size=5, max_overflow=10)
    - sqlite: file database usable from request threads
    - memory: one shared connection so every session sees the same data
    """
    url = database_url_for(binding, settings)

    if binding.engine == StorageEngine.postgresql:
        return create_engine(url, pool_size=5, max_overflow=10, echo=settings.debug)

    if binding.engine == StorageEngine.sqlite:
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=settings.debug
        )

    return create_engine(
        url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=settings.debug
    )


def get_engine() -> Engine:
    """Get or create the engine for the active profile (singleton pattern)"""
    global _engine, _session_factory
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                binding = get_resolver().active_binding()
                engine = create_engine_for(binding, get_settings())
                _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
                _engine = engine
                logger.info(binding.description)
    return _engine


def reset_engine():
    """Dispose the cached engine (used on shutdown and in tests)."""
    global _engine, _session_factory
    with _engine_lock:
        if _engine is not None:
            _engine.dispose()
        _engine = None
        _session_factory = None


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT 1"))
    """
    get_engine()
    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db():
    """
    Dependency for FastAPI route injection.
    Usage:
        @app.get("/deadlines")
        def list_deadlines(db: Session = Depends(get_db)):
            ...
    """
    get_engine()
    db = _session_factory()
    try:
        yield db
    finally:
        db.close()


def verify_connection(engine: Engine):
    """Run SELECT 1, raising StorageUnavailableError if the database is unreachable."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        safe_url = engine.url.render_as_string(hide_password=True)
        raise StorageUnavailableError(safe_url, e) from e


def test_database_connection() -> bool:
    """
    Test if the active profile's database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        verify_connection(get_engine())
        return True
    except StorageUnavailableError as e:
        logger.warning("Database connection failed: %s", e)
        return False
