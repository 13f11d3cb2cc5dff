"""Reduction of arbitrary Python values to bindable scalars."""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .params import ParameterType

Scalar = Union[str, int, float, bool, bytes, None]

_SCALAR_TYPES = (str, int, float, bool, bytes)


class Bindable(ABC):
    """Value that knows how it should be bound.

    ``raw_value`` is bound as-is. A non-None ``raw_type`` replaces the parameter
    type given at registration.
    """

    @abstractmethod
    def raw_value(self) -> Scalar:
        ...

    def raw_type(self) -> Optional[ParameterType]:
        return None


@dataclass(frozen=True)
class ColumnBinding:
    value: Scalar
    parameter_type: ParameterType = ParameterType.STRING
    insert_only: bool = False


def _is_missing(value: Any) -> bool:
    if value is None or value is pd.NaT or value is pd.NA:
        return True
    if isinstance(value, (float, np.floating)):
        return bool(np.isnan(value))
    return False


def _json_default(value: Any) -> Any:
    if isinstance(value, (np.ndarray, pd.Series)):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)


def normalize_value(value: Any) -> Scalar:
    """Reduce ``value`` to ``str | int | float | bool | bytes | None``."""
    if isinstance(value, Bindable):
        return value.raw_value()
    if _is_missing(value):
        return None
    # str/int mixin enums must not pass through as scalars
    if isinstance(value, Enum):
        return normalize_value(value.value)
    if isinstance(value, np.generic):
        return normalize_value(value.item())
    if isinstance(value, _SCALAR_TYPES):
        return value
    if isinstance(value, (np.ndarray, pd.Series)):
        return _to_json(value.tolist())
    if isinstance(value, (set, frozenset)):
        # mixed-type sets raise TypeError
        return _to_json(sorted(value))
    if isinstance(value, (dict, list, tuple)):
        return _to_json(value)
    return str(value)


def resolve_binding(
    value: Any,
    parameter_type: ParameterType = ParameterType.STRING,
    insert_only: bool = False,
) -> ColumnBinding:
    if isinstance(value, Bindable):
        parameter_type = value.raw_type() or parameter_type
    return ColumnBinding(normalize_value(value), ParameterType(parameter_type), insert_only)


def split_bindings(bindings: "dict[str, ColumnBinding]") -> Tuple[dict, dict]:
    """Return ``(values_by_name, types_by_name)`` for a column mapping."""
    values = {name: b.value for name, b in bindings.items()}
    types = {name: b.parameter_type for name, b in bindings.items()}
    return values, types
