"""
Record store package for the Employee Records service.

Re-exports the store interface and the concrete implementations so downstream
code can import from `employee_records.store` directly.
"""

from employee_records.store.abstract import AbstractEmployeeStore, EmployeeStore
from employee_records.store.memory import InMemoryEmployeeStore
from employee_records.store.postgres import PostgresEmployeeStore

__all__ = [
    # Abstracts
    "AbstractEmployeeStore",
    "EmployeeStore",
    # Concrete stores
    "InMemoryEmployeeStore",
    "PostgresEmployeeStore",
]
