"""Router tests: routing table, status mapping and error bodies."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from employee_records.api.router import ApiRequest, ApiResponse, Router
from employee_records.domain.errors import StoreError
from employee_records.domain.models import Employee
from employee_records.salary_sources import JsonSalarySource
from employee_records.service import EmployeeService
from employee_records.store.memory import InMemoryEmployeeStore
from tests.helpers import SALARY_SOURCE_DATA, write_salary_sources


def _call(router: Router, method: str, path: str, body: Any = None, **query: str) -> ApiResponse:
    raw = json.dumps(body) if isinstance(body, (dict, list)) else body
    return router.dispatch(ApiRequest(method=method, path=path, body=raw, query=query))


def _json(response: ApiResponse) -> Any:
    assert response.headers["Content-Type"] == "application/json"
    return json.loads(response.body)


class _FailingStore(InMemoryEmployeeStore):
    def __init__(self, exc: Exception) -> None:
        super().__init__()
        self._exc = exc

    def list_all(self) -> List[Employee]:
        raise self._exc

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise self._exc


class TestScenarios:
    def test_create_then_get_returns_same_fields(self, router, sample_payload):
        created = _call(router, "POST", "/employees", sample_payload)

        assert created.status == 201
        new_id = _json(created)["id"]
        assert new_id > 0
        assert created.headers["Location"] == f"/employees/{new_id}"

        fetched = _call(router, "GET", f"/employees/{new_id}")
        body = _json(fetched)
        assert fetched.status == 200
        assert body["id"] == new_id
        assert body["full_name"] == sample_payload["full_name"]
        assert body["position"] == sample_payload["position"]
        assert body["department"] == sample_payload["department"]
        assert body["hire_date"] == sample_payload["hire_date"]
        assert Decimal(body["salary"]) == Decimal("7500.00")

    def test_update_nonexistent_is_404(self, router, sample_payload):
        response = _call(router, "PUT", "/employees/999999", sample_payload)

        assert response.status == 404
        assert _json(response) == {"error": "Employee not found"}

    def test_delete_twice(self, router, sample_payload):
        new_id = _json(_call(router, "POST", "/employees", sample_payload))["id"]

        first = _call(router, "DELETE", f"/employees/{new_id}")
        second = _call(router, "DELETE", f"/employees/{new_id}")

        assert first.status == 204
        assert first.body is None
        assert second.status == 404

    def test_malformed_id_is_400_not_404(self, router, store):
        response = _call(router, "GET", "/employees/abc")

        assert response.status == 400
        assert "error" in _json(response)
        assert store.calls == []

    def test_top_salaries_returns_ten_non_increasing(self, router):
        response = _call(router, "GET", "/employees/salary/top")

        body = _json(response)
        salaries = [Decimal(entry["salary"]) for entry in body]
        assert response.status == 200
        assert len(body) == 10
        assert salaries == sorted(salaries, reverse=True)
        assert body[1] == {
            "salary": "11250",
            "source": "employees_data2.json",
            "full_name": "Amara Okafor",
            "department": "Engineering",
        }

    def test_top_salaries_with_missing_source_is_500(self, tmp_path: Path):
        data = dict(SALARY_SOURCE_DATA)
        data.pop("employees_data3.json")
        service = EmployeeService(
            InMemoryEmployeeStore(), JsonSalarySource(write_salary_sources(tmp_path, data))
        )

        response = _call(Router(service), "GET", "/employees/salary/top")

        assert response.status == 500
        assert _json(response) == {"error": "Internal server error"}


class TestRouting:
    def test_list_returns_records_in_id_order(self, router, sample_payload):
        for name in ("A", "B", "C"):
            _call(router, "POST", "/employees", {**sample_payload, "full_name": name})

        response = _call(router, "GET", "/employees")

        body = _json(response)
        assert response.status == 200
        assert [entry["id"] for entry in body] == [1, 2, 3]
        assert [entry["full_name"] for entry in body] == ["A", "B", "C"]

    def test_list_empty(self, router):
        response = _call(router, "GET", "/employees")
        assert response.status == 200
        assert _json(response) == []

    def test_update_existing_is_204(self, router, sample_payload):
        new_id = _json(_call(router, "POST", "/employees", sample_payload))["id"]

        response = _call(
            router, "PUT", f"/employees/{new_id}", {**sample_payload, "position": "Lead"}
        )

        assert response.status == 204
        assert response.body is None
        assert _json(_call(router, "GET", f"/employees/{new_id}"))["position"] == "Lead"

    def test_path_id_wins_over_body_id(self, router, sample_payload):
        new_id = _json(_call(router, "POST", "/employees", sample_payload))["id"]

        response = _call(router, "PUT", f"/employees/{new_id}", {**sample_payload, "id": 777})

        assert response.status == 204
        assert _call(router, "GET", "/employees/777").status == 404

    def test_create_ignores_body_id(self, router, sample_payload):
        response = _call(router, "POST", "/employees", {**sample_payload, "id": 42})
        assert _json(response)["id"] == 1

    def test_get_missing_is_404(self, router):
        response = _call(router, "GET", "/employees/5")
        assert response.status == 404
        assert _json(response) == {"error": "Employee not found"}

    @pytest.mark.parametrize("path", ["/", "/nothing", "/employees/1/extra", "/employeesx"])
    def test_unknown_route_is_404(self, router, path):
        response = _call(router, "GET", path)
        assert response.status == 404
        assert _json(response) == {"error": "Not found"}

    def test_trailing_slash_is_ignored(self, router):
        assert _call(router, "GET", "/employees/").status == 200
        assert _call(router, "GET", "/employees/salary/top/").status == 200

    def test_method_is_case_insensitive(self, router):
        assert _call(router, "get", "/employees").status == 200

    @pytest.mark.parametrize(
        "method,path,allowed",
        [
            ("PATCH", "/employees", "GET, POST"),
            ("DELETE", "/employees", "GET, POST"),
            ("POST", "/employees/1", "GET, PUT, DELETE"),
            ("PATCH", "/employees/abc", "GET, PUT, DELETE"),
            ("POST", "/employees/salary/top", "GET"),
        ],
    )
    def test_unsupported_method_on_known_path_is_405(self, router, method, path, allowed):
        response = _call(router, method, path)

        assert response.status == 405
        assert response.headers["Allow"] == allowed
        assert _json(response) == {"error": "Method not allowed"}

    def test_top_salaries_honours_n(self, router):
        response = _call(router, "GET", "/employees/salary/top", n="3")
        assert len(_json(response)) == 3

    @pytest.mark.parametrize("n", ["abc", "1.5"])
    def test_top_salaries_rejects_non_integer_n(self, router, n):
        assert _call(router, "GET", "/employees/salary/top", n=n).status == 400

    def test_top_salaries_rejects_zero_n(self, router):
        assert _call(router, "GET", "/employees/salary/top", n="0").status == 400


class TestBadInput:
    @pytest.mark.parametrize("bad_id", ["0", "-1"])
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_non_positive_id_is_400_and_store_untouched(
        self, router, store, sample_payload, method, bad_id
    ):
        body = sample_payload if method == "PUT" else None

        response = _call(router, method, f"/employees/{bad_id}", body)

        assert response.status == 400
        assert _json(response) == {"error": "id must be a positive integer"}
        assert store.calls == []

    def test_oversized_id_is_malformed(self, router, store):
        response = _call(router, "GET", f"/employees/{2**64}")
        assert response.status == 400
        assert store.calls == []

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_id_beyond_int_conversion_limit_is_400(self, router, store, sample_payload, method):
        body = sample_payload if method == "PUT" else None

        response = _call(router, method, "/employees/" + "9" * 5000, body)

        assert response.status == 400
        assert store.calls == []

    @pytest.mark.parametrize("raw_id", ["\u0663", "1\u0662", "\uff11"])
    def test_non_ascii_digits_are_not_ids(self, router, store, sample_payload, raw_id):
        _call(router, "POST", "/employees", sample_payload)
        store.calls.clear()

        response = _call(router, "GET", f"/employees/{raw_id}")

        assert response.status == 400
        assert store.calls == []

    def test_huge_n_is_400(self, router):
        response = _call(router, "GET", "/employees/salary/top", n="9" * 5000)

        assert response.status == 400
        assert _json(response) == {"error": "n must be an integer"}

    def test_non_ascii_n_is_400(self, router):
        assert _call(router, "GET", "/employees/salary/top", n="\u0663").status == 400

    def test_salary_with_three_decimals_is_400(self, router, store, sample_payload):
        response = _call(router, "POST", "/employees", {**sample_payload, "salary": 7500.005})

        assert response.status == 400
        assert _json(response) == {"error": "salary must have at most 2 decimal places"}
        assert store.calls == []

    def test_whole_salary_is_returned_with_cents(self, router, sample_payload):
        new_id = _json(_call(router, "POST", "/employees", {**sample_payload, "salary": 7500}))["id"]

        assert _json(_call(router, "GET", f"/employees/{new_id}"))["salary"] == "7500.00"

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("full_name", "   ", "full_name is required"),
            ("position", "", "position is required"),
            ("department", " ", "department is required"),
            ("salary", -1, "salary must be >= 0"),
        ],
    )
    def test_invalid_fields_are_400(self, router, store, sample_payload, field, value, message):
        response = _call(router, "POST", "/employees", {**sample_payload, field: value})

        assert response.status == 400
        assert _json(response) == {"error": message}
        assert store.calls == []

    @pytest.mark.parametrize(
        "body",
        [
            None,
            "",
            "{not json",
            "[1, 2]",
            json.dumps({"full_name": "Jane"}),
        ],
    )
    def test_malformed_body_is_400(self, router, store, body):
        response = _call(router, "POST", "/employees", body)

        assert response.status == 400
        assert "error" in _json(response)
        assert store.calls == []

    def test_missing_field_names_the_field(self, router, sample_payload):
        payload: Dict[str, Any] = dict(sample_payload)
        del payload["hire_date"]

        response = _call(router, "POST", "/employees", payload)

        assert response.status == 400
        assert _json(response)["error"].startswith("hire_date")

    def test_bad_date_is_400(self, router, sample_payload):
        response = _call(router, "POST", "/employees", {**sample_payload, "hire_date": "26/06/2025"})
        assert response.status == 400

    def test_salary_as_string_is_accepted(self, router, sample_payload):
        response = _call(router, "POST", "/employees", {**sample_payload, "salary": "1234.56"})
        assert response.status == 201

    def test_bytes_body_is_accepted(self, router, sample_payload):
        request = ApiRequest(
            method="POST", path="/employees", body=json.dumps(sample_payload).encode("utf-8")
        )
        assert router.dispatch(request).status == 201


class TestServerErrors:
    def test_store_error_is_500_without_details(self, salary_source):
        store = _FailingStore(StoreError("sp_list_employees failed"))
        router = Router(EmployeeService(store, salary_source))

        response = _call(router, "GET", "/employees")

        assert response.status == 500
        assert _json(response) == {"error": "Internal server error"}
        assert "sp_list_employees" not in response.body

    def test_unexpected_error_is_500(self, salary_source):
        store = _FailingStore(RuntimeError("connection string postgresql://secret"))
        router = Router(EmployeeService(store, salary_source))

        response = _call(router, "GET", "/employees/1")

        assert response.status == 500
        assert "secret" not in response.body
