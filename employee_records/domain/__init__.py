"""
Domain package for the Employee Records service.

Exports the record models and the error taxonomy shared by the store, the
service and the router. Keep this package focused on data definitions.
"""

from employee_records.domain.errors import (
    AggregationError,
    EmployeeRecordsError,
    MalformedRequest,
    StoreError,
    ValidationError,
)
from employee_records.domain.models import Employee, SalarySample

__all__ = [
    "Employee",
    "SalarySample",
    "EmployeeRecordsError",
    "ValidationError",
    "MalformedRequest",
    "StoreError",
    "AggregationError",
]
