"""Shared fixtures for UpsertForge tests."""
import pytest
import sqlalchemy as sa

from UpsertForge import logger as upsert_logger
from UpsertForge.connection import DatabaseConnection, ExecutionResult


class RecordingConnection(DatabaseConnection):
    """Fake connection that records every statement it receives."""

    def __init__(self, dialect="sqlite", rowcount=0):
        self.dialect = dialect
        self.rowcount = rowcount
        self.calls = []

    def get_dialect(self):
        return self.dialect

    def execute_query(self, sql, parameters, types=None):
        self.calls.append((sql, dict(parameters), dict(types or {})))
        return ExecutionResult(rowcount=self.rowcount)


@pytest.fixture
def recording():
    return RecordingConnection()


@pytest.fixture
def engine():
    eng = sa.create_engine("sqlite:///:memory:")
    yield eng
    eng.dispose()


@pytest.fixture
def foo_table(engine):
    with engine.begin() as conn:
        conn.execute(sa.text("CREATE TABLE foo_table(bar TEXT PRIMARY KEY, count INT)"))
    return engine


@pytest.fixture(autouse=True)
def logging_disabled(monkeypatch):
    monkeypatch.setattr(upsert_logger, "ENABLE_LOGGING", False)
