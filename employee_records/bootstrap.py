"""
Application wiring.

Builds the object graph once per process, leaves first:
settings -> pool -> store -> service -> router. Transports receive the router;
nothing below them reaches for global state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from psycopg_pool import ConnectionPool

from employee_records.api.router import Router
from employee_records.config import Settings
from employee_records.infrastructure.db_factory import create_pool
from employee_records.salary_sources import JsonSalarySource, SalarySource
from employee_records.service import EmployeeService
from employee_records.store.abstract import EmployeeStore
from employee_records.store.postgres import PostgresEmployeeStore
from employee_records.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class AppContainer:
    settings: Settings
    store: EmployeeStore
    service: EmployeeService
    router: Router
    pool: Optional[ConnectionPool] = None

    def close(self) -> None:
        """Close the connection pool if this container created one."""
        if self.pool is not None:
            self.pool.close()
            self.pool = None
            log.info("Connection pool closed")


def build_container(
    settings: Settings,
    store: Optional[EmployeeStore] = None,
    salary_source: Optional[SalarySource] = None,
) -> AppContainer:
    """
    Compose the application.

    Parameters
    ----------
    settings : Settings
        Effective configuration.
    store : EmployeeStore, optional
        Store to use instead of PostgreSQL (tests, `serve --in-memory`). When
        omitted a pool is created from `settings` and owned by the container.
    salary_source : SalarySource, optional
        Defaults to JSON files under `settings.salary_sources_dir`, or the
        packaged resources when that is unset.
    """
    pool: Optional[ConnectionPool] = None
    if store is None:
        pool = create_pool(settings)
        store = PostgresEmployeeStore(pool)

    if salary_source is None:
        salary_source = JsonSalarySource(settings.salary_sources_dir)

    service = EmployeeService(
        store,
        salary_source,
        default_top_n=settings.salary_top_default,
    )
    return AppContainer(
        settings=settings,
        store=store,
        service=service,
        router=Router(service),
        pool=pool,
    )


__all__ = ["AppContainer", "build_container"]
