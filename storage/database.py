"""
Storage - Database Engine.

============================================================
RESPONSIBILITY
============================================================
Creates SQLAlchemy engines and sessions for the SQL store.

- Engine built from StoreConfig (environment / .env driven)
- Explicit transaction boundaries
- Hard failures on persistence errors

============================================================
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.config import StoreConfig

from .exceptions import QueryError, StoreUnavailable
from .models import Base


logger = logging.getLogger(__name__)


# =============================================================
# DATABASE ENGINE
# =============================================================

def _safe_url(url: str) -> str:
    return url.split("@")[-1]


def create_database_engine(config: Optional[StoreConfig] = None) -> Engine:
    """
    Create a SQLAlchemy engine.
    
    Args:
        config: Store configuration (environment by default)
        
    Returns:
        SQLAlchemy Engine
    """
    config = config or StoreConfig.from_env()
    logger.info(f"Creating database engine for: {_safe_url(config.database_url)}")
    
    return create_engine(
        config.database_url,
        pool_recycle=config.pool_recycle_seconds,
        echo=config.echo,
    )


def get_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine."""
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


# =============================================================
# SESSION MANAGEMENT
# =============================================================

@contextmanager
def transaction_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Context manager for explicit transaction boundaries.
    
    Commits only if no exception occurs.
    Rolls back on ANY exception and re-raises it unchanged.
    
    Usage:
        with transaction_scope(factory) as session:
            session.add(record)
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        logger.debug(f"Transaction rolled back: {e}")
        session.rollback()
        raise
    finally:
        session.close()


# =============================================================
# DATABASE INITIALIZATION
# =============================================================

def verify_connection(engine: Engine) -> bool:
    """
    Verify the database is reachable.
    
    Raises:
        StoreUnavailable: connection failed
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        logger.info("Database connection verified successfully")
        return True
    except OperationalError as e:
        logger.error(f"Database connection failed: {e}")
        raise StoreUnavailable("database", "verify_connection", str(e)) from e


def create_all_tables(engine: Engine) -> None:
    """
    Create the store tables if they do not exist.
    
    Raises:
        StoreUnavailable: database unreachable
        QueryError: table creation failed
    """
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except OperationalError as e:
        logger.error(f"Failed to create database tables: {e}")
        raise StoreUnavailable("database", "create_all_tables", str(e)) from e
    except SQLAlchemyError as e:
        logger.error(f"Failed to create database tables: {e}")
        raise QueryError("database", "create_all_tables", str(e)) from e
