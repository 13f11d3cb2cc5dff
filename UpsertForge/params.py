"""Bind parameter types."""
from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlalchemy.types import NullType, TypeEngine


class ParameterType(Enum):
    NULL = "null"
    INTEGER = "integer"
    STRING = "string"
    LARGE_OBJECT = "large_object"
    BOOLEAN = "boolean"
    BINARY = "binary"
    ASCII = "ascii"


_SQLALCHEMY_TYPES = {
    ParameterType.NULL: NullType,
    ParameterType.INTEGER: sa.Integer,
    ParameterType.STRING: sa.String,
    ParameterType.LARGE_OBJECT: sa.Text,
    ParameterType.BOOLEAN: sa.Boolean,
    ParameterType.BINARY: sa.LargeBinary,
    ParameterType.ASCII: sa.String,
}


def to_sqlalchemy_type(parameter_type: ParameterType) -> TypeEngine:
    """Resolve the SQLAlchemy type used to bind a parameter."""
    return _SQLALCHEMY_TYPES[ParameterType(parameter_type)]()
