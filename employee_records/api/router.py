"""
Transport-agnostic request router.

Maps an inbound ``(method, path, body)`` to a service call and an outbound
``(status, headers, body)``. Both transports (`http_app` and `lambda_proxy`)
translate their native request objects into `ApiRequest`, call
`Router.dispatch` and translate the `ApiResponse` back, so routing, payload
parsing and status mapping exist exactly once.

Routes:
    POST   /employees               create        201 {"id": n}
    GET    /employees               list          200 [...]
    GET    /employees/{id}          get           200 | 404
    PUT    /employees/{id}          update        204 | 404
    DELETE /employees/{id}          delete        204 | 404
    GET    /employees/salary/top    salary report 200 [...]
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from employee_records.domain.errors import (
    AggregationError,
    MalformedRequest,
    StoreError,
    ValidationError,
)
from employee_records.domain.models import Employee
from employee_records.service import EmployeeService
from employee_records.utils.logging import get_logger

log = get_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}

COLLECTION_PATH = "/employees"
TOP_SALARY_PATH = "/employees/salary/top"
_ITEM_PATH = re.compile(r"^/employees/(?P<employee_id>[^/]+)$")
# ASCII digits only; 19 digits is the width of the largest BIGINT.
_INTEGER = re.compile(r"^[+-]?[0-9]{1,19}$")
_MAX_ID = 2**63 - 1

_COLLECTION_METHODS = ("GET", "POST")
_ITEM_METHODS = ("GET", "PUT", "DELETE")
_TOP_SALARY_METHODS = ("GET",)


@dataclass(frozen=True)
class ApiRequest:
    """HTTP-shaped request, independent of the transport that delivered it."""

    method: str
    path: str
    body: Optional[Union[str, bytes]] = None
    query: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ApiResponse:
    """HTTP-shaped response; `body` is None for empty responses."""

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    @classmethod
    def from_payload(
        cls, status: int, payload: Any, headers: Optional[Mapping[str, str]] = None
    ) -> "ApiResponse":
        return cls(
            status=status,
            headers={**JSON_HEADERS, **(headers or {})},
            body=json.dumps(payload),
        )

    @classmethod
    def empty(cls, status: int) -> "ApiResponse":
        return cls(status=status)

    @classmethod
    def error(
        cls, status: int, message: str, headers: Optional[Mapping[str, str]] = None
    ) -> "ApiResponse":
        return cls.from_payload(status, {"error": message}, headers=headers)


def _normalize_path(path: str) -> str:
    path = path.split("?", 1)[0] or "/"
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def _parse_id(raw: str) -> int:
    if not _INTEGER.match(raw):
        raise MalformedRequest(f"Invalid employee id: {raw!r}")
    employee_id = int(raw)
    if employee_id > _MAX_ID:
        raise MalformedRequest(f"Invalid employee id: {raw!r}")
    return employee_id


def _describe_validation_error(exc: PydanticValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"{location}: {first.get('msg', 'invalid value')}"


def _parse_employee(body: Optional[Union[str, bytes]]) -> Employee:
    if body is None or not body.strip():
        raise MalformedRequest("Request body is required")
    try:
        payload = json.loads(body, parse_float=Decimal)
    except ValueError as exc:
        raise MalformedRequest("Request body is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise MalformedRequest("Request body must be a JSON object")
    # The id always comes from the store (create) or the path (update).
    payload.pop("id", None)
    try:
        return Employee.model_validate(payload)
    except PydanticValidationError as exc:
        raise MalformedRequest(_describe_validation_error(exc)) from exc


def _method_not_allowed(allowed: Sequence[str]) -> ApiResponse:
    return ApiResponse.error(405, "Method not allowed", headers={"Allow": ", ".join(allowed)})


def _internal_error() -> ApiResponse:
    return ApiResponse.error(500, "Internal server error")


class Router:
    """
    Dispatches `ApiRequest`s onto an `EmployeeService`.

    `dispatch` never raises: every error kind is mapped to a status code here
    and nowhere else.
    """

    def __init__(self, service: EmployeeService) -> None:
        self._service = service

    def dispatch(self, request: ApiRequest) -> ApiResponse:
        method = request.method.upper()
        path = _normalize_path(request.path)
        try:
            response = self._route(method, path, request)
        except (MalformedRequest, ValidationError) as exc:
            log.warning(
                f"Rejected request: {exc}",
                extra={"method": method, "path": path, "error_type": type(exc).__name__},
            )
            response = ApiResponse.error(400, str(exc))
        except AggregationError as exc:
            log.error(
                "Salary aggregation failed",
                extra={"method": method, "path": path, "source": exc.source},
            )
            response = _internal_error()
        except StoreError as exc:
            log.error(
                f"Store failure: {exc}",
                extra={"method": method, "path": path},
            )
            response = _internal_error()
        except Exception:  # noqa: BLE001 - every failure must become a response
            log.exception("Unhandled error", extra={"method": method, "path": path})
            response = _internal_error()

        log.info(
            f"{method} {path} -> {response.status}",
            extra={"method": method, "path": path, "status": response.status},
        )
        return response

    def _route(self, method: str, path: str, request: ApiRequest) -> ApiResponse:
        if path == TOP_SALARY_PATH:
            if method not in _TOP_SALARY_METHODS:
                return _method_not_allowed(_TOP_SALARY_METHODS)
            return self._top_salaries(request)

        if path == COLLECTION_PATH:
            if method == "GET":
                return self._list()
            if method == "POST":
                return self._create(request)
            return _method_not_allowed(_COLLECTION_METHODS)

        match = _ITEM_PATH.match(path)
        if match is None:
            return ApiResponse.error(404, "Not found")
        if method not in _ITEM_METHODS:
            return _method_not_allowed(_ITEM_METHODS)

        employee_id = _parse_id(match.group("employee_id"))
        if method == "GET":
            return self._get(employee_id)
        if method == "PUT":
            return self._update(employee_id, request)
        return self._delete(employee_id)

    def _list(self) -> ApiResponse:
        employees = self._service.find_all()
        return ApiResponse.from_payload(200, [employee.to_payload() for employee in employees])

    def _create(self, request: ApiRequest) -> ApiResponse:
        employee = _parse_employee(request.body)
        new_id = self._service.create(employee)
        return ApiResponse.from_payload(
            201, {"id": new_id}, headers={"Location": f"{COLLECTION_PATH}/{new_id}"}
        )

    def _get(self, employee_id: int) -> ApiResponse:
        employee = self._service.get_by_id(employee_id)
        if employee is None:
            return ApiResponse.error(404, "Employee not found")
        return ApiResponse.from_payload(200, employee.to_payload())

    def _update(self, employee_id: int, request: ApiRequest) -> ApiResponse:
        employee = _parse_employee(request.body).with_id(employee_id)
        if not self._service.update(employee):
            return ApiResponse.error(404, "Employee not found")
        return ApiResponse.empty(204)

    def _delete(self, employee_id: int) -> ApiResponse:
        if not self._service.delete(employee_id):
            return ApiResponse.error(404, "Employee not found")
        return ApiResponse.empty(204)

    def _top_salaries(self, request: ApiRequest) -> ApiResponse:
        raw_n = request.query.get("n")
        n: Optional[int] = None
        if raw_n is not None:
            if not _INTEGER.match(raw_n.strip()):
                raise MalformedRequest("n must be an integer")
            n = int(raw_n)
        samples = self._service.top_n_by_salary(n)
        return ApiResponse.from_payload(200, [sample.to_payload() for sample in samples])


__all__ = [
    "ApiRequest",
    "ApiResponse",
    "Router",
    "COLLECTION_PATH",
    "TOP_SALARY_PATH",
]
