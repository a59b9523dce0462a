"""
In-memory record store.

Mirrors the PostgreSQL store's contract (generated ids, id ordering,
affected-row booleans) without a database. Used by the unit tests and by
`employee-records serve --in-memory` for local development.
"""

from __future__ import annotations

import itertools
import threading
from typing import Dict, List, Optional

from employee_records.domain.models import Employee
from employee_records.store.abstract import AbstractEmployeeStore


class InMemoryEmployeeStore(AbstractEmployeeStore):
    def __init__(self) -> None:
        self._rows: Dict[int, Employee] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create(self, employee: Employee) -> int:
        with self._lock:
            new_id = next(self._ids)
            self._rows[new_id] = employee.with_id(new_id)
            return new_id

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with self._lock:
            return self._rows.get(employee_id)

    def list_all(self) -> List[Employee]:
        with self._lock:
            return [self._rows[key] for key in sorted(self._rows)]

    def update(self, employee: Employee) -> bool:
        with self._lock:
            if employee.id not in self._rows:
                return False
            self._rows[employee.id] = employee
            return True

    def delete(self, employee_id: int) -> bool:
        with self._lock:
            return self._rows.pop(employee_id, None) is not None


__all__ = ["InMemoryEmployeeStore"]
