"""
Record store interface for the Employee Records service.

Concrete stores (PostgreSQL, in-memory) implement the EmployeeStore protocol so
the service and router never depend on a specific backend. Stores map records
to and from their persistence representation and apply no business rules.
"""

from __future__ import annotations

import abc
from typing import List, Optional, Protocol, runtime_checkable

from employee_records.domain.models import Employee


@runtime_checkable
class EmployeeStore(Protocol):
    """
    Common interface all record stores must implement.

    Reads return ``None`` for a missing id and writes return ``False`` when no
    row was affected; only a failed remote call raises (``StoreError``).
    """

    def create(self, employee: Employee) -> int:
        """Persist a record without id and return the generated id."""
        ...

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        """Fetch one record, or ``None`` when the id does not exist."""
        ...

    def list_all(self) -> List[Employee]:
        """All records, ascending by id."""
        ...

    def update(self, employee: Employee) -> bool:
        """Replace the mutable fields of `employee.id`; ``False`` if no row matched."""
        ...

    def delete(self, employee_id: int) -> bool:
        """Hard-delete a record; ``False`` if no row matched."""
        ...


class AbstractEmployeeStore(abc.ABC):
    """
    Optional ABC helper for class-based implementations.
    """

    @abc.abstractmethod
    def create(self, employee: Employee) -> int:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def get_by_id(self, employee_id: int) -> Optional[Employee]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def list_all(self) -> List[Employee]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def update(self, employee: Employee) -> bool:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def delete(self, employee_id: int) -> bool:  # pragma: no cover
        raise NotImplementedError


__all__ = [
    "EmployeeStore",
    "AbstractEmployeeStore",
]
