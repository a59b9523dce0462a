"""
Business service for employee records.

Owns the validation policy (nothing invalid ever reaches the store), turns
store outcomes into domain results and computes the highest-paid report by
merging the salary sources.

Usage:
    from employee_records.service import EmployeeService
    from employee_records.store import InMemoryEmployeeStore
    from employee_records.salary_sources import JsonSalarySource

    service = EmployeeService(InMemoryEmployeeStore(), JsonSalarySource())
    new_id = service.create(employee)
"""

from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from decimal import Decimal
from typing import List, Optional, Sequence

from employee_records.domain.errors import AggregationError, ValidationError
from employee_records.domain.models import Employee, SalarySample
from employee_records.salary_sources import SALARY_SOURCE_NAMES, SalarySource
from employee_records.store.abstract import EmployeeStore
from employee_records.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_TOP_N = 10
_TEXT_FIELDS = ("full_name", "position", "department")

# Matches the NUMERIC(15, 2) salary column.
_SALARY_CENTS = Decimal("0.01")
_SALARY_LIMIT = Decimal("1e13")


def _validate_id(employee_id: object) -> int:
    if isinstance(employee_id, bool) or not isinstance(employee_id, int) or employee_id <= 0:
        raise ValidationError("id must be a positive integer")
    return employee_id


def _validate_employee(employee: Employee) -> Employee:
    """Apply the field rules and return `employee` with its salary at two decimal places."""
    for field in _TEXT_FIELDS:
        value = getattr(employee, field)
        if value is None or not value.strip():
            raise ValidationError(f"{field} is required")
    if employee.hire_date is None:
        raise ValidationError("hire_date is required")
    salary = employee.salary
    if salary is None:
        raise ValidationError("salary is required")
    if not salary.is_finite():
        raise ValidationError("salary must be a finite amount")
    if salary < 0:
        raise ValidationError("salary must be >= 0")
    if salary >= _SALARY_LIMIT:
        raise ValidationError("salary must be below 10000000000000")
    cents = salary.quantize(_SALARY_CENTS)
    if cents != salary:
        raise ValidationError("salary must have at most 2 decimal places")
    return employee.model_copy(update={"salary": cents})


class EmployeeService:
    """
    Validates and orchestrates employee operations.

    Parameters
    ----------
    store : EmployeeStore
        Persistence backend; only ever called with validated input.
    salary_source : SalarySource
        Reader for the external salary resources.
    source_names : sequence of str
        The fixed set of resources merged by `top_n_by_salary`, in merge order.
    default_top_n : int
        Report size when the caller does not pass one.
    """

    def __init__(
        self,
        store: EmployeeStore,
        salary_source: SalarySource,
        source_names: Sequence[str] = SALARY_SOURCE_NAMES,
        default_top_n: int = DEFAULT_TOP_N,
    ) -> None:
        self._store = store
        self._salary_source = salary_source
        self._source_names = tuple(source_names)
        self._default_top_n = default_top_n

    def create(self, employee: Employee) -> int:
        employee = _validate_employee(employee)
        log.info("Creating employee", extra={"full_name": employee.full_name})
        return self._store.create(employee.with_id(None))

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._store.get_by_id(_validate_id(employee_id))

    def find_all(self) -> List[Employee]:
        return self._store.list_all()

    def update(self, employee: Employee) -> bool:
        """Return False when no row carries `employee.id`."""
        _validate_id(employee.id)
        employee = _validate_employee(employee)
        return self._store.update(employee)

    def delete(self, employee_id: int) -> bool:
        """Return False when no row carries `employee_id`."""
        return self._store.delete(_validate_id(employee_id))

    def top_n_by_salary(self, n: Optional[int] = None) -> List[SalarySample]:
        """
        Highest `n` salaries across all sources, descending.

        Equal salaries keep their source order, then their position within the
        source. Fails with `AggregationError` if any source cannot be read.
        """
        limit = self._default_top_n if n is None else n
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValidationError("n must be a positive integer")

        samples = self._read_all_sources()
        # sorted() is stable, including with reverse=True.
        ranked = sorted(samples, key=lambda sample: sample.salary, reverse=True)
        log.info(
            "Salary report computed",
            extra={"sources": len(self._source_names), "samples": len(samples), "n": limit},
        )
        return ranked[:limit]

    def _read_all_sources(self) -> List[SalarySample]:
        names = self._source_names
        executor = ThreadPoolExecutor(
            max_workers=max(len(names), 1), thread_name_prefix="salary-source"
        )
        try:
            futures: List[Future] = [
                executor.submit(self._salary_source.read, name) for name in names
            ]
            done, _pending = wait(futures, return_when=FIRST_EXCEPTION)
            for name, future in zip(names, futures):
                if future in done and future.exception() is not None:
                    self._raise_for_source(name, future.exception())
            merged: List[SalarySample] = []
            for future in futures:
                merged.extend(future.result())
            return merged
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    @staticmethod
    def _raise_for_source(name: str, exc: BaseException) -> None:
        log.error(
            f"Salary source '{name}' could not be read",
            extra={"source": name, "error": str(exc)},
        )
        if isinstance(exc, AggregationError):
            raise exc
        raise AggregationError(name, "unreadable") from exc


__all__ = ["EmployeeService", "DEFAULT_TOP_N"]
