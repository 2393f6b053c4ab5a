"""
Database connection and session management for the AI Learning Service.

SQLite by default; any SQLAlchemy URL (e.g. PostgreSQL) can be configured
through DATABASE_URL.
"""

import os
import time
from typing import Any, Dict, Generator
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
import sqlite3
import logging

from config import get_settings
from .models import Base

logger = logging.getLogger(__name__)

settings = get_settings()

# Database configuration
DATABASE_URL = settings.database_url


def _build_engine_kwargs(database_url: str, query_timeout: int) -> Dict[str, Any]:
    """Engine options, including the fixed per-query timeout for the backend."""
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        kwargs: Dict[str, Any] = {
            "connect_args": {"check_same_thread": False, "timeout": query_timeout},
        }
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            # Create database directory if it doesn't exist
            directory = os.path.dirname(url.database)
            if directory:
                os.makedirs(directory, exist_ok=True)
        return kwargs

    if url.get_backend_name() == "postgresql":
        return {
            "connect_args": {
                "connect_timeout": query_timeout,
                "options": f"-c statement_timeout={query_timeout * 1000}",
            },
            "pool_pre_ping": True,
        }

    return {"pool_pre_ping": True}


engine = create_engine(
    DATABASE_URL,
    echo=False,  # Set to True for SQL debugging
    **_build_engine_kwargs(DATABASE_URL, settings.database_query_timeout),
)


# Configure SQLite pragma settings
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enforce foreign keys so deleting a project removes its records."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create session factory
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.

    Use with FastAPI's dependency injection.
    """
    session = SessionLocal()
    try:
        yield session
    except Exception as e:
        logger.error(f"Database session error: {e}")
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Example:
        with get_session() as session:
            project = Project(name="Docs site", project_type="website")
            session.add(project)
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception as e:
        logger.error(f"Database session error: {e}")
        session.rollback()
        raise
    finally:
        session.close()


def create_tables():
    """Create all database tables."""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        raise


def init_db():
    """Initialize the database with tables."""
    create_tables()


def check_db_connection() -> bool:
    """Check if database connection is working."""
    try:
        with get_session() as session:
            session.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False


def check_db_connection_with_retry(
    max_retries: int = 3,
    delay: float = 2.0,
    backoff: float = 1.5,
) -> bool:
    """
    Test the database connection, retrying with exponential backoff.

    Only used while the server starts; request handlers never retry.

    Args:
        max_retries: Number of attempts before giving up
        delay: Seconds to wait after the first failed attempt
        backoff: Multiplier applied to the delay after each failure

    Returns:
        True once a connection succeeds, False after the final attempt fails
    """
    for attempt in range(1, max_retries + 1):
        logger.info(f"Testing database connection (attempt {attempt}/{max_retries})...")
        if check_db_connection():
            logger.info("Database connection successful")
            return True

        if attempt < max_retries:
            logger.info(f"Retrying in {delay:.1f}s...")
            time.sleep(delay)
            delay *= backoff

    logger.error(f"Database connection failed after {max_retries} attempts")
    return False
