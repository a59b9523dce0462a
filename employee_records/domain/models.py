"""
Domain models for the Employee Records service.

Defines the employee record aligned with `db/init.sql` and the salary sample
used by the highest-paid report. The models describe the data shape only;
content rules (blank text, negative salary, non-positive ids) belong to
`employee_records.service`.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Employee(BaseModel):
    """
    Representation of a single row in the `employees` table.
    """

    id: Optional[int] = Field(None, description="Primary key, assigned by the store.")
    full_name: str = Field(..., description="Employee full name.")
    position: str = Field(..., description="Role title.")
    department: str = Field(..., description="Owning department.")
    hire_date: date = Field(..., description="Calendar date of hire.")
    salary: Decimal = Field(..., description="Fixed-point salary amount.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    def with_id(self, employee_id: Optional[int]) -> "Employee":
        """Return a copy carrying `employee_id`; the original stays untouched."""
        return self.model_copy(update={"id": employee_id})

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready mapping (ISO dates, decimal strings)."""
        return self.model_dump(mode="json")


class SalarySample(BaseModel):
    """
    A salary figure read from an external source for the top-N report.

    Only `salary` is guaranteed; the employee-like fields are carried through
    when the source provides them.
    """

    salary: Decimal
    source: str
    full_name: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None

    model_config = {"frozen": True}

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


__all__ = ["Employee", "SalarySample"]
