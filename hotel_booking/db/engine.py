"""
SQLAlchemy engine singleton with production-ready connection pooling.

This module creates a single engine instance shared by every SqlUnitOfWork in
the process. Importing it requires DATABASE_URL; the rest of the package
(services, in-memory store) can be used without a database.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from hotel_booking.config import DATABASE_URL, DB_MAX_OVERFLOW, DB_POOL_SIZE

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")

engine: Engine = create_engine(
    DATABASE_URL,
    future=True,
    pool_size=DB_POOL_SIZE,
    max_overflow=DB_MAX_OVERFLOW,
    pool_pre_ping=True,  # Verify connections before using (detect stale connections)
    pool_recycle=3600,
    echo=False,
)


def check_engine_health() -> bool:
    """
    Check if database engine is healthy and connections are working.

    Intended for the embedding service's readiness probe.

    Returns:
        bool: True if database is reachable and healthy, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
