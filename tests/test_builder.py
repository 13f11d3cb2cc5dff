"""Tests for UpsertBuilder registration rules, parameters and execution."""
import pytest

from UpsertForge import (
    EmptyUpsert,
    FieldAlreadyInUse,
    FieldRegisteredAsIdentifier,
    IdentifierAlreadyInUse,
    IdentifierRegisteredAsField,
    NoTableGiven,
    ParameterType,
    UnsupportedDialect,
    UpsertBuilder,
    UpsertError,
    upsert,
)

from conftest import RecordingConnection


class TestRegistration:
    def test_no_table_raises(self, recording):
        with pytest.raises(NoTableGiven):
            upsert(recording).execute()
        assert recording.calls == []

    def test_no_columns_raises(self, recording):
        with pytest.raises(EmptyUpsert):
            upsert(recording).for_table("foo_table").execute()

    def test_identifiers_only_raises(self, recording):
        with pytest.raises(EmptyUpsert):
            upsert(recording).for_table("foo_table").with_identifier("bar", 0).execute()

    def test_fields_only_raises(self, recording):
        with pytest.raises(EmptyUpsert):
            upsert(recording).for_table("foo_table").with_field("bar", 0).execute()

    def test_identifier_registered_twice(self, recording):
        builder = upsert(recording).for_table("foo_table").with_identifier("bar", 0)
        with pytest.raises(IdentifierAlreadyInUse):
            builder.with_identifier("bar", 0)

    def test_field_registered_twice(self, recording):
        builder = upsert(recording).for_table("foo_table").with_field("bar", 0)
        with pytest.raises(FieldAlreadyInUse):
            builder.with_field("bar", 0)

    def test_identifier_then_field(self, recording):
        builder = upsert(recording).with_identifier("bar", 0)
        with pytest.raises(IdentifierRegisteredAsField):
            builder.with_field("bar", 0)

    def test_field_then_identifier(self, recording):
        builder = upsert(recording).with_field("bar", 0)
        with pytest.raises(FieldRegisteredAsIdentifier) as exc:
            builder.with_identifier("bar", 0)
        assert isinstance(exc.value, FieldAlreadyInUse)

    def test_errors_carry_codes(self, recording):
        with pytest.raises(UpsertError) as exc:
            upsert(recording).execute()
        assert exc.value.code == 1603199471

    def test_for_table_last_write_wins(self, recording):
        builder = upsert(recording).for_table("a").for_table("b")
        assert builder.table == "b"


class TestExecution:
    def _full(self, connection):
        return (
            upsert(connection)
            .for_table("foo_table")
            .with_identifier("foo", 1, ParameterType.INTEGER)
            .with_identifier("bar", "2", ParameterType.STRING)
            .with_field("baz", True, ParameterType.BOOLEAN)
            .with_field("boo", 4, ParameterType.LARGE_OBJECT)
        )

    def test_parameters_are_built(self, recording):
        self._full(recording).execute()

        assert len(recording.calls) == 1
        _, params, _ = recording.calls[0]
        assert params == {"foo": 1, "bar": "2", "baz": True, "boo": 4}

    def test_parameter_types_are_built(self, recording):
        self._full(recording).execute()

        _, _, types = recording.calls[0]
        assert types == {
            "foo": ParameterType.INTEGER,
            "bar": ParameterType.STRING,
            "baz": ParameterType.BOOLEAN,
            "boo": ParameterType.LARGE_OBJECT,
        }

    def test_default_parameter_type_is_string(self, recording):
        upsert(recording).for_table("t").with_identifier("a", 1).with_field("b", 2).execute()
        _, _, types = recording.calls[0]
        assert types == {"a": ParameterType.STRING, "b": ParameterType.STRING}

    def test_rowcount_is_returned(self):
        connection = RecordingConnection(rowcount=35)
        assert self._full(connection).execute() == 35

    def test_columns_fields_first(self, recording):
        self._full(recording).execute()
        sql, params, _ = recording.calls[0]
        assert list(params) == ["baz", "boo", "foo", "bar"]
        assert sql.startswith("INSERT INTO foo_table (baz, boo, foo, bar) VALUES (:baz, :boo, :foo, :bar)")

    def test_insert_only_excluded_from_update(self, recording):
        (
            upsert(recording)
            .for_table("foo_table")
            .with_identifier("bar", "baz")
            .with_field("count", 1)
            .with_field("created", "2020-10-20", insert_only=True)
            .execute()
        )
        sql, params, _ = recording.calls[0]
        assert "created" in params
        assert sql.endswith("DO UPDATE SET count = :count")

    def test_unsupported_dialect_fails_before_execution(self):
        connection = RecordingConnection(dialect="oracle")
        builder = upsert(connection).for_table("t").with_identifier("a", 1).with_field("b", 2)
        with pytest.raises(UnsupportedDialect):
            builder.execute()
        assert connection.calls == []

    def test_build_returns_statement(self):
        connection = RecordingConnection(dialect="mysql")
        statement = (
            UpsertBuilder(connection)
            .for_table("foo_table")
            .with_identifier("bar", "baz")
            .with_field("count", 1)
            .build()
        )
        assert statement.sql == (
            "INSERT INTO foo_table (count, bar) VALUES (:count, :bar) "
            "ON DUPLICATE KEY UPDATE count = :count"
        )
        assert statement.parameters == {"count": 1, "bar": "baz"}
        assert connection.calls == []

    def test_values_are_normalized(self, recording):
        (
            upsert(recording)
            .for_table("t")
            .with_identifier("id", 7)
            .with_field("payload", {"a": [1, 2]})
            .execute()
        )
        _, params, _ = recording.calls[0]
        assert params["payload"] == '{"a":[1,2]}'


def test_parameters_keyed_by_placeholder_name(recording):
    statement = (
        upsert(recording)
        .for_table("t")
        .with_identifier("id", 1, ParameterType.INTEGER)
        .with_field("my col", "v")
        .build()
    )
    assert statement.parameters == {"my_col": "v", "id": 1}
    assert statement.types == {"my_col": ParameterType.STRING, "id": ParameterType.INTEGER}
    assert ":my_col" in statement.sql
