"""
Database connection (PostgreSQL in production, SQLite for local runs and tests)

This module centralizes database access:
- SQLAlchemy engine and session factory
- FastAPI dependency yielding a request-scoped session
- Connection check with retry logic (used by the health endpoint and scripts)
"""
import logging
import time

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

logger = logging.getLogger(__name__)

CONNECTION_TIMEOUT = 10


def _engine_kwargs(database_url: str) -> dict:
    """Pool options differ between SQLite and server databases"""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_pre_ping": True,  # Check connection before use
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "connect_args": {"connect_timeout": CONNECTION_TIMEOUT},
    }


# ============================================================================
# SQLAlchemy Configuration
# ============================================================================

engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    FastAPI dependency yielding a SQLAlchemy session

    Usage:
        @router.get("/items")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ============================================================================
# Connection check with retry logic
# ============================================================================

def check_db_connection_with_retry(max_retries=3, retry_delay=1.0) -> float:
    """
    Run `SELECT 1` against the configured database, retrying on connection failures

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        Query latency in milliseconds

    Raises:
        OperationalError: If all retry attempts fail
    """
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            start = time.time()
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            latency_ms = round((time.time() - start) * 1000, 2)
            logger.debug(f"Database connection successful on attempt {attempt}")
            return latency_ms

        except OperationalError as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")

    raise last_error


def create_all_tables():
    """Create every table registered on Base (idempotent)"""
    # Import models so they register with Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
