"""
Pytest configuration for the Employee Records service.

Provides fixtures for:
- Settings override for integration tests
- Database connection management and schema setup
- In-memory store, salary sources, service and router for unit tests
"""

from __future__ import annotations

import os
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Generator

import psycopg
import pytest

from employee_records.api.router import Router
from employee_records.config import Settings
from employee_records.domain.models import Employee
from employee_records.salary_sources import SALARY_SOURCE_NAMES, JsonSalarySource
from employee_records.service import EmployeeService
from tests.helpers import SALARY_SOURCE_DATA, RecordingStore, write_salary_sources


@pytest.fixture
def sample_employee() -> Employee:
    return Employee(
        full_name="Jane Smith",
        position="Developer",
        department="Engineering",
        hire_date=date(2025, 6, 26),
        salary=Decimal("7500.00"),
    )


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    return {
        "full_name": "Jane Smith",
        "position": "Developer",
        "department": "Engineering",
        "hire_date": "2025-06-26",
        "salary": 7500.00,
    }


@pytest.fixture
def salary_dir(tmp_path: Path) -> Path:
    return write_salary_sources(tmp_path / "salaries", SALARY_SOURCE_DATA)


@pytest.fixture
def salary_source(salary_dir: Path) -> JsonSalarySource:
    return JsonSalarySource(salary_dir)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def service(store: RecordingStore, salary_source: JsonSalarySource) -> EmployeeService:
    return EmployeeService(store, salary_source, source_names=SALARY_SOURCE_NAMES)


@pytest.fixture
def router(service: EmployeeService) -> Router:
    return Router(service)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "employees"),
        db_pool_min_size=0,
        db_pool_max_size=4,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return test_settings.dsn


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection, test_dsn: str) -> bool:
    """
    Ensure the employees table and the sp_* functions exist.
    """
    from scripts.seed_employees import _apply_schema

    _apply_schema(test_dsn)
    return True


@pytest.fixture(scope="function")
def clean_employees_table(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty the employees table before and after each test function.
    """
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.employees RESTART IDENTITY CASCADE;")
    db_connection.commit()
    yield
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.employees RESTART IDENTITY CASCADE;")
    db_connection.commit()
