"""
Employee Records - CRUD service for employee records with a salary report.

This package provides:

- A PostgreSQL record store calling one stored function per operation
- A business service owning validation and the multi-source salary report
- A transport-agnostic router mapping HTTP-shaped requests to status codes
- Two transports on that router: a FastAPI listener and a serverless proxy
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from employee_records.api.router import ApiRequest, ApiResponse, Router
from employee_records.bootstrap import AppContainer, build_container
from employee_records.config import Settings, get_settings
from employee_records.domain import (
    AggregationError,
    Employee,
    MalformedRequest,
    SalarySample,
    StoreError,
    ValidationError,
)
from employee_records.service import EmployeeService
from employee_records.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Employee",
    "SalarySample",
    "ValidationError",
    "MalformedRequest",
    "StoreError",
    "AggregationError",
    # Layers
    "EmployeeService",
    "Router",
    "ApiRequest",
    "ApiResponse",
    "AppContainer",
    "build_container",
    # Logging
    "configure_logging",
    "get_logger",
]
