# ============================================================================
# DATABASE CONNECTION POOL
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - PostgreSQL connection management
# PURPOSE: Process-wide psycopg3 connection pool and table identifiers
# CREATED: 03 MAR 2026
# ============================================================================
"""
Database Connection Pool

One synchronous psycopg_pool.ConnectionPool per process. Registration runs
inside blocking save paths, so there is no async pool.

Connection settings, in priority order:
    DATABASE_URL                          full libpq URL or DSN
    POSTGRES_HOST / _PORT / _DB / _USER / _PASSWORD / _SSLMODE

Pool size: CVOC_POOL_MIN_SIZE (1), CVOC_POOL_MAX_SIZE (10).

Usage:
    from repositories.database import get_pool

    with get_pool().connection() as conn:
        conn.execute("SELECT 1")
"""

import os
import logging
from contextlib import contextmanager
from typing import Optional

from psycopg import sql
from psycopg.conninfo import conninfo_to_dict, make_conninfo
from psycopg_pool import ConnectionPool

from core.config import get_defaults

logger = logging.getLogger(__name__)

_pool: Optional[ConnectionPool] = None


def get_connection_string() -> str:
    """Connection string from DATABASE_URL, else from POSTGRES_* components."""
    if url := os.environ.get("DATABASE_URL"):
        return url

    user = os.environ.get("POSTGRES_USER", "postgres")
    password = os.environ.get("POSTGRES_PASSWORD", "")
    host = os.environ.get("POSTGRES_HOST", "localhost")
    port = os.environ.get("POSTGRES_PORT", "5432")
    name = os.environ.get("POSTGRES_DB", "postgres")
    sslmode = os.environ.get("POSTGRES_SSLMODE", "prefer")

    return f"postgresql://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}"


def _safe_conninfo(conninfo: str) -> str:
    """Connection target without credentials, for logging."""
    if "://" in conninfo:
        return conninfo.rsplit("@", 1)[-1]
    params = conninfo_to_dict(conninfo)
    if "password" in params:
        params["password"] = "***"
    return make_conninfo(**params)


def init_pool(
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
    connection_string: Optional[str] = None,
) -> ConnectionPool:
    """
    Open the process-wide pool, or return it if already open.

    Args:
        min_size: Connections kept open (CVOC_POOL_MIN_SIZE, default 1)
        max_size: Connection ceiling (CVOC_POOL_MAX_SIZE, default 10)
        connection_string: Overrides the environment
    """
    global _pool

    if _pool is not None:
        logger.warning("Pool already initialized, returning existing pool")
        return _pool

    min_size = min_size or int(os.environ.get("CVOC_POOL_MIN_SIZE", 1))
    max_size = max_size or int(os.environ.get("CVOC_POOL_MAX_SIZE", 10))
    conninfo = connection_string or get_connection_string()

    pool = ConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        name="cvoc",
        open=False,
    )
    pool.open()
    _pool = pool
    logger.info(f"Connection pool opened: {_safe_conninfo(conninfo)} (min={min_size}, max={max_size})")
    return _pool


def get_pool() -> ConnectionPool:
    """The process-wide pool, opened on first use."""
    return _pool if _pool is not None else init_pool()


def close_pool() -> None:
    """Close the process-wide pool if open."""
    global _pool

    if _pool is None:
        return
    _pool.close()
    _pool = None
    logger.info("Connection pool closed")


@contextmanager
def get_connection():
    """Borrow a connection from the process-wide pool."""
    with get_pool().connection() as conn:
        yield conn


class DatabasePool:
    """
    Pool lifecycle as a context manager, for tools and scripts.

    Usage:
        with DatabasePool() as pool:
            service = ExternalVocabularyService(pool)
    """

    def __init__(
        self,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
        connection_string: Optional[str] = None,
    ):
        self.min_size = min_size
        self.max_size = max_size
        self.connection_string = connection_string

    def __enter__(self) -> ConnectionPool:
        return init_pool(self.min_size, self.max_size, self.connection_string)

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        close_pool()


# ============================================================================
# TABLE IDENTIFIERS
# ============================================================================

SCHEMA = get_defaults().vocabulary.db_schema

# Use with sql.SQL(...).format(); never interpolate table names into strings
TABLE_EXTERNAL_VOCABULARY_VALUES = sql.Identifier(SCHEMA, "external_vocabulary_value")
TABLE_DATASET_FIELD_TYPES = sql.Identifier(SCHEMA, "dataset_field_type")
TABLE_SETTINGS = sql.Identifier(SCHEMA, "setting")
