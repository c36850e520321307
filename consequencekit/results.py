"""Consequence results and parameter values that may be uncertain."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Union

from .statistics import ContinuousDistribution


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if not f.name.startswith("_") and getattr(value, f.name) is not None
        }
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return value


@dataclass
class Result:
    """A row of named values describing one computed consequence."""

    headers: list[str]
    values: list[Any]

    def __post_init__(self) -> None:
        self.headers = list(self.headers)
        self.values = list(self.values)
        if len(self.headers) != len(self.values):
            raise ValueError("result needs one value per header")

    def fetch(self, name: str) -> Any:
        try:
            return self.values[self.headers.index(name)]
        except ValueError:
            raise KeyError(name) from None

    def to_dict(self) -> dict[str, Any]:
        return {h: _jsonable(v) for h, v in zip(self.headers, self.values)}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class ParameterValue:
    """A value that is either a plain number or a distribution."""

    value: Union[float, int, ContinuousDistribution]

    def sample_value(self, probability: float) -> float:
        if isinstance(self.value, (int, float)):
            return float(self.value)
        return self.value.inv_cdf(probability)

    def central_tendency(self) -> float:
        if isinstance(self.value, (int, float)):
            return float(self.value)
        return self.value.central_tendency()