"""
Error taxonomy for the Employee Records service.

"Not found" is deliberately absent: reads return ``None`` and writes return
``False`` when the target id does not exist.
"""

from __future__ import annotations


class EmployeeRecordsError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(EmployeeRecordsError):
    """Caller-supplied data violates a record invariant."""


class MalformedRequest(EmployeeRecordsError):
    """The request could not be parsed (bad id segment, bad JSON body)."""


class StoreError(EmployeeRecordsError):
    """A remote call against the record store failed."""


class AggregationError(EmployeeRecordsError):
    """A named salary source could not be read."""

    def __init__(self, source: str, reason: str = "unreadable") -> None:
        super().__init__(f"Salary source '{source}' {reason}")
        self.source = source
        self.reason = reason


__all__ = [
    "EmployeeRecordsError",
    "ValidationError",
    "MalformedRequest",
    "StoreError",
    "AggregationError",
]
