"""Dialect-aware upsert builder on top of SQLAlchemy."""
from __future__ import annotations

from .params import ParameterType, to_sqlalchemy_type
from .values import Bindable, ColumnBinding, normalize_value, resolve_binding
from .dialects import DialectStrategy, get_dialect
from .connection import DatabaseConnection, ExecutionResult, SqlAlchemyConnection, as_connection
from .builder import UpsertBuilder, UpsertStatement, upsert
from .batch import upsert_rows
from .config import LogConfig, load_log_config
from .exceptions import (
    UpsertError,
    NoTableGiven,
    EmptyUpsert,
    FieldAlreadyInUse,
    FieldRegisteredAsIdentifier,
    IdentifierAlreadyInUse,
    IdentifierRegisteredAsField,
    UnsupportedDialect,
)

__all__ = [
    "ParameterType",
    "to_sqlalchemy_type",
    "Bindable",
    "ColumnBinding",
    "normalize_value",
    "resolve_binding",
    "DialectStrategy",
    "get_dialect",
    "DatabaseConnection",
    "ExecutionResult",
    "SqlAlchemyConnection",
    "as_connection",
    "UpsertBuilder",
    "UpsertStatement",
    "upsert",
    "upsert_rows",
    "LogConfig",
    "load_log_config",
    "UpsertError",
    "NoTableGiven",
    "EmptyUpsert",
    "FieldAlreadyInUse",
    "FieldRegisteredAsIdentifier",
    "IdentifierAlreadyInUse",
    "IdentifierRegisteredAsField",
    "UnsupportedDialect",
]
