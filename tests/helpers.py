"""Shared test data and doubles for the Employee Records test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from employee_records.domain.models import Employee
from employee_records.store.memory import InMemoryEmployeeStore

# Five samples per source, fifteen in total.
SALARY_SOURCE_DATA: Dict[str, List[Any]] = {
    "employees_data1.json": [5000, 7200.5, 3100, 9100, 4400],
    "employees_data2.json": [
        {"full_name": "Jane Smith", "position": "Developer", "salary": 7500.00},
        {"full_name": "Luis Ortega", "salary": 9100},
        {"salary": "2800.00"},
        {"full_name": "Amara Okafor", "department": "Engineering", "salary": 11250},
        {"salary": 6000},
    ],
    "employees_data3.json": [8300, "12000.00", 2950.4, {"salary": 4400}, 6500],
}


def write_salary_sources(directory: Path, data: Dict[str, List[Any]]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, items in data.items():
        (directory / name).write_text(json.dumps(items), encoding="utf-8")
    return directory


class RecordingStore(InMemoryEmployeeStore):
    """In-memory store that remembers which operations reached it."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[str] = []

    def create(self, employee: Employee) -> int:
        self.calls.append("create")
        return super().create(employee)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        self.calls.append("get_by_id")
        return super().get_by_id(employee_id)

    def list_all(self) -> List[Employee]:
        self.calls.append("list_all")
        return super().list_all()

    def update(self, employee: Employee) -> bool:
        self.calls.append("update")
        return super().update(employee)

    def delete(self, employee_id: int) -> bool:
        self.calls.append("delete")
        return super().delete(employee_id)
