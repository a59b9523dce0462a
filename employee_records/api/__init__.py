"""
API package for the Employee Records service.

Exports the transport-agnostic router and the two transports built on it.
"""

from employee_records.api.http_app import create_http_app
from employee_records.api.lambda_proxy import LambdaProxy, handler
from employee_records.api.router import ApiRequest, ApiResponse, Router

__all__ = [
    "ApiRequest",
    "ApiResponse",
    "Router",
    "create_http_app",
    "LambdaProxy",
    "handler",
]
