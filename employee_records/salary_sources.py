"""
External salary sources for the highest-paid report.

Each source is a named JSON resource holding an array whose items are either a
bare salary (number or numeric string) or an object with a ``salary`` key and
optional ``full_name``/``position``/``department``. Sources are read from the
packaged `employee_records/resources/salaries/` directory unless a directory
override is configured.

A missing or unparseable source raises `AggregationError`; there is no partial
read.
"""

from __future__ import annotations

import json
from decimal import Decimal
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any, List, Optional, Protocol, Tuple, Union, runtime_checkable

from pydantic import ValidationError as PydanticValidationError

from employee_records.domain.errors import AggregationError
from employee_records.domain.models import SalarySample
from employee_records.utils.logging import get_logger

log = get_logger(__name__)

SALARY_SOURCE_NAMES: Tuple[str, ...] = (
    "employees_data1.json",
    "employees_data2.json",
    "employees_data3.json",
)

_PACKAGED_SOURCES = "employee_records.resources.salaries"
_OPTIONAL_FIELDS = ("full_name", "position", "department")


@runtime_checkable
class SalarySource(Protocol):
    """Reads the salary samples held by one named resource."""

    def read(self, name: str) -> List[SalarySample]:
        ...


def _to_sample(source: str, item: Any) -> SalarySample:
    if isinstance(item, bool):
        raise AggregationError(source, f"contains a non-numeric salary: {item!r}")
    if isinstance(item, dict):
        if "salary" not in item:
            raise AggregationError(source, "contains an entry without a salary")
        fields = {key: item[key] for key in _OPTIONAL_FIELDS if item.get(key) is not None}
        return SalarySample(salary=item["salary"], source=source, **fields)
    return SalarySample(salary=item, source=source)


class JsonSalarySource:
    """
    Salary source backed by JSON files under one root.

    Parameters
    ----------
    root : Path | Traversable | None
        Directory holding the named files. Defaults to the packaged resources.
    """

    def __init__(self, root: Optional[Union[Path, Traversable]] = None) -> None:
        self._root: Union[Path, Traversable] = (
            root if root is not None else resources.files(_PACKAGED_SOURCES)
        )

    @property
    def root(self) -> Union[Path, Traversable]:
        return self._root

    def read(self, name: str) -> List[SalarySample]:
        resource = self._root / name
        if not resource.is_file():
            raise AggregationError(name, "not found")
        try:
            raw = json.loads(resource.read_text(encoding="utf-8"), parse_float=Decimal)
        except (OSError, ValueError) as exc:
            raise AggregationError(name, "is not valid JSON") from exc
        if not isinstance(raw, list):
            raise AggregationError(name, "is not a JSON array")
        try:
            samples = [_to_sample(name, item) for item in raw]
        except PydanticValidationError as exc:
            raise AggregationError(name, "contains an unparseable salary") from exc
        log.debug("Salary source read", extra={"source": name, "samples": len(samples)})
        return samples


__all__ = ["SALARY_SOURCE_NAMES", "SalarySource", "JsonSalarySource"]
