"""
PostgreSQL record store: one stored-function call per domain operation.

The functions themselves live in `db/init.sql`. Every call borrows a connection
from the pool for its own duration; the pool context manager commits on
success, rolls back on error and always returns the connection.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from employee_records.domain.errors import StoreError
from employee_records.domain.models import Employee
from employee_records.store.abstract import AbstractEmployeeStore
from employee_records.utils.logging import get_logger

log = get_logger(__name__)

_COLUMNS = "id, full_name, position, department, hire_date, salary"

SQL_CREATE = "SELECT sp_create_employee(%s, %s, %s, %s, %s) AS new_id;"
SQL_GET_BY_ID = f"SELECT {_COLUMNS} FROM sp_get_employee_by_id(%s);"
SQL_LIST = f"SELECT {_COLUMNS} FROM sp_list_employees();"
SQL_UPDATE = "SELECT sp_update_employee(%s, %s, %s, %s, %s, %s) AS affected_rows;"
SQL_DELETE = "SELECT sp_delete_employee(%s) AS affected_rows;"


def _row_to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        id=row["id"],
        full_name=row["full_name"],
        position=row["position"],
        department=row["department"],
        hire_date=row["hire_date"],
        salary=row["salary"],
    )


class PostgresEmployeeStore(AbstractEmployeeStore):
    """
    Record store backed by PostgreSQL stored functions.

    The pool is created by the caller (see `infrastructure.db_factory.create_pool`)
    and owned by it; this class never opens or closes it.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def _call(self, procedure: str, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(sql, params)
                    return cur.fetchall()
        except psycopg.Error as exc:
            log.exception("Store call failed", extra={"procedure": procedure})
            raise StoreError(f"{procedure} failed") from exc

    def _affected_rows(self, procedure: str, sql: str, params: Sequence[Any]) -> int:
        rows = self._call(procedure, sql, params)
        affected = int(rows[0]["affected_rows"] or 0) if rows else 0
        log.info(
            f"{procedure} affected {affected} row(s)",
            extra={"procedure": procedure, "affected_rows": affected},
        )
        return affected

    def create(self, employee: Employee) -> int:
        rows = self._call(
            "sp_create_employee",
            SQL_CREATE,
            (
                employee.full_name,
                employee.position,
                employee.department,
                employee.hire_date,
                employee.salary,
            ),
        )
        if not rows or rows[0]["new_id"] is None:
            raise StoreError("sp_create_employee returned no id")
        new_id = int(rows[0]["new_id"])
        log.info("Employee created", extra={"employee_id": new_id})
        return new_id

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        rows = self._call("sp_get_employee_by_id", SQL_GET_BY_ID, (employee_id,))
        if not rows:
            return None
        return _row_to_employee(rows[0])

    def list_all(self) -> List[Employee]:
        rows = self._call("sp_list_employees", SQL_LIST, ())
        return [_row_to_employee(row) for row in rows]

    def update(self, employee: Employee) -> bool:
        affected = self._affected_rows(
            "sp_update_employee",
            SQL_UPDATE,
            (
                employee.id,
                employee.full_name,
                employee.position,
                employee.department,
                employee.hire_date,
                employee.salary,
            ),
        )
        return affected > 0

    def delete(self, employee_id: int) -> bool:
        return self._affected_rows("sp_delete_employee", SQL_DELETE, (employee_id,)) > 0


__all__ = ["PostgresEmployeeStore"]
