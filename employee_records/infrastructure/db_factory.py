"""
Database connection factory utilities for the Employee Records service.

The pool is created exactly once by the application bootstrap from an explicit
`Settings` instance and handed to the store; nothing in this module keeps a
process-wide pool of its own.

Includes retry logic for transient connection failures using tenacity.
"""

from __future__ import annotations

import psycopg
from psycopg_pool import ConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from employee_records.config import Settings
from employee_records.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Settings) -> str:
    """Compose a DSN string from settings."""
    return settings.dsn


def create_pool(settings: Settings, open: bool = True) -> ConnectionPool:
    """
    Create the synchronous connection pool used by the record store.

    Parameters
    ----------
    settings : Settings
        Effective configuration; pool sizes and timeouts come from here.
    open : bool
        Whether to open the pool immediately. Connections are still created
        lazily when `db_pool_min_size` is 0.

    Returns
    -------
    ConnectionPool
        The pool to hand to `PostgresEmployeeStore`.
    """
    pool = ConnectionPool(
        conninfo=build_dsn(settings),
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        timeout=settings.db_connect_timeout_s,
        name="employee-records",
        open=open,
    )
    log.info(
        "Connection pool created",
        extra={
            "db_host": settings.db_host,
            "db_name": settings.db_name,
            "pool_min_size": settings.db_pool_min_size,
            "pool_max_size": settings.db_pool_max_size,
        },
    )
    return pool


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def verify_connection(settings: Settings) -> str:
    """
    Open a dedicated connection and report the server version.

    Retries up to 3 times with exponential backoff for transient connection
    errors. This bypasses the pool so it can be used before serving traffic.

    Returns
    -------
    str
        The server version string reported by PostgreSQL.

    Raises
    ------
    psycopg.OperationalError
        If the connection fails after all retry attempts.
    """
    with psycopg.connect(
        build_dsn(settings), connect_timeout=int(settings.db_connect_timeout_s)
    ) as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT version();")
            version = cur.fetchone()[0]
    log.info("Database connection verified", extra={"server_version": version})
    return version


__all__ = [
    "build_dsn",
    "create_pool",
    "verify_connection",
]
