"""Fluent upsert builder.

Usage:
    count = (
        upsert(engine)
        .for_table("foo_table")
        .with_identifier("bar", "baz")
        .with_field("count", 1, ParameterType.INTEGER)
        .execute()
    )

Columns are emitted fields first, then identifiers, each in registration
order. The builder is meant to be executed once and discarded.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from sqlalchemy.engine import Connection, Engine

from .connection import DatabaseConnection, as_connection
from .dialects import bind_names, get_dialect
from .exceptions import (
    EmptyUpsert,
    FieldAlreadyInUse,
    FieldRegisteredAsIdentifier,
    IdentifierAlreadyInUse,
    IdentifierRegisteredAsField,
    NoTableGiven,
)
from .logger import log_call, log_json, log_string
from .params import ParameterType
from .values import ColumnBinding, resolve_binding, split_bindings

logger = logging.getLogger(__name__)

ConnectionLike = Union[DatabaseConnection, Engine, Connection]


@dataclass(frozen=True)
class UpsertStatement:
    """Rendered statement plus its named parameters.

    Parameters are keyed by placeholder name, which equals the column name
    unless the column contains non-word characters.
    """
    sql: str
    parameters: Mapping[str, Any]
    types: Mapping[str, ParameterType]


class UpsertBuilder:
    def __init__(self, connection: ConnectionLike):
        self.connection = as_connection(connection)
        self.table: Optional[str] = None
        self.identifiers: Dict[str, ColumnBinding] = {}
        self.fields: Dict[str, ColumnBinding] = {}

    def __repr__(self) -> str:
        return (
            f"UpsertBuilder(table={self.table!r}, identifiers={list(self.identifiers)}, "
            f"fields={list(self.fields)})"
        )

    def for_table(self, table: str) -> "UpsertBuilder":
        self.table = table
        return self

    def with_identifier(
        self,
        column: str,
        value: Any,
        parameter_type: ParameterType = ParameterType.STRING,
    ) -> "UpsertBuilder":
        """Register a conflict-key column."""
        if column in self.fields:
            raise FieldRegisteredAsIdentifier(f'The identifier "{column}" has already been set as field!')
        if column in self.identifiers:
            raise IdentifierAlreadyInUse(f'The identifier "{column}" has already been set!')
        self.identifiers[column] = resolve_binding(value, parameter_type)
        return self

    def with_field(
        self,
        column: str,
        value: Any,
        parameter_type: ParameterType = ParameterType.STRING,
        insert_only: bool = False,
    ) -> "UpsertBuilder":
        """Register a data column; ``insert_only`` keeps it out of the update clause."""
        if column in self.fields:
            raise FieldAlreadyInUse(f'The field "{column}" has already been set!')
        if column in self.identifiers:
            raise IdentifierRegisteredAsField(f'The field "{column}" has already been set as identifier!')
        self.fields[column] = resolve_binding(value, parameter_type, insert_only)
        return self

    def build(self) -> UpsertStatement:
        if self.table is None:
            raise NoTableGiven("No table name has been set!")
        if not self.identifiers or not self.fields:
            raise EmptyUpsert("No columns have been specified for upsert!")

        all_columns = {**self.fields, **self.identifiers}
        updates = [name for name, b in self.fields.items() if not b.insert_only]

        sql = get_dialect(self.connection).build_upsert(
            self.table, list(all_columns), list(self.identifiers), updates
        )
        binds = bind_names(list(all_columns))
        parameters, types = split_bindings({binds[c]: b for c, b in all_columns.items()})
        return UpsertStatement(sql=sql, parameters=parameters, types=types)

    @log_call
    def execute(self) -> int:
        """Run the upsert; returns the driver's affected row count unchanged."""
        statement = self.build()
        log_string("upsert_sql", statement.sql)
        log_json("upsert_parameters", dict(statement.parameters))
        logger.debug("upsert into %s: %d columns", self.table, len(statement.parameters))

        result = self.connection.execute_query(statement.sql, statement.parameters, statement.types)
        return result.affected_row_count()


def upsert(connection: ConnectionLike) -> UpsertBuilder:
    """Start an upsert on ``connection``."""
    return UpsertBuilder(connection)
