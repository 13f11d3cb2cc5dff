"""Database connection contract and its SQLAlchemy adapter."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Union

import sqlalchemy as sa
from sqlalchemy.engine import Connection, Engine

from .params import ParameterType, to_sqlalchemy_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a single statement execution."""
    rowcount: int

    def affected_row_count(self) -> int:
        return self.rowcount


class DatabaseConnection(ABC):
    """What the upsert builder needs from a database client."""

    @abstractmethod
    def get_dialect(self) -> str:
        ...

    @abstractmethod
    def execute_query(
        self,
        sql: str,
        parameters: Mapping[str, Any],
        types: Optional[Mapping[str, ParameterType]] = None,
    ) -> ExecutionResult:
        ...


@contextmanager
def _ensure_connection(eng_or_conn: Union[Engine, Connection]) -> Iterator[Connection]:
    """Yield a Connection; do not manage transaction if caller passed Connection."""
    if isinstance(eng_or_conn, Connection):
        yield eng_or_conn
        return
    with eng_or_conn.begin() as conn:
        yield conn


class SqlAlchemyConnection(DatabaseConnection):
    """Runs statements on a SQLAlchemy Engine (one transaction per call) or Connection."""

    def __init__(self, bind: Union[Engine, Connection]):
        if not isinstance(bind, (Engine, Connection)):
            raise TypeError(f"Expected SQLAlchemy Engine or Connection, got {type(bind).__name__}")
        self.bind = bind

    def get_dialect(self) -> str:
        return self.bind.dialect.name

    def execute_query(
        self,
        sql: str,
        parameters: Mapping[str, Any],
        types: Optional[Mapping[str, ParameterType]] = None,
    ) -> ExecutionResult:
        types = types or {}
        binds = [
            sa.bindparam(name, value, type_=to_sqlalchemy_type(types.get(name, ParameterType.STRING)))
            for name, value in parameters.items()
        ]
        stmt = sa.text(sql).bindparams(*binds)
        logger.debug("executing %s with %d parameters", sql, len(binds))
        with _ensure_connection(self.bind) as conn:
            result = conn.execute(stmt)
            return ExecutionResult(rowcount=result.rowcount)


def as_connection(obj: Union[DatabaseConnection, Engine, Connection]) -> DatabaseConnection:
    """Wrap SQLAlchemy binds; pass DatabaseConnection implementations through."""
    if isinstance(obj, DatabaseConnection):
        return obj
    return SqlAlchemyConnection(obj)
