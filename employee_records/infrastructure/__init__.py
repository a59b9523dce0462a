"""
Infrastructure package for the Employee Records service.

Centralizes database connectivity concerns (DSN, pool creation, connection
checks). Keep this layer focused on I/O and resource management, decoupled
from record mapping and business rules.
"""

from employee_records.infrastructure.db_factory import (
    build_dsn,
    create_pool,
    verify_connection,
)

__all__ = [
    "build_dsn",
    "create_pool",
    "verify_connection",
]
