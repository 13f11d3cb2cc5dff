"""Row-by-row upsert of record collections and DataFrames."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd
from sqlalchemy.engine import Connection, Engine

from .builder import ConnectionLike, UpsertBuilder
from .connection import _ensure_connection
from .exceptions import EmptyUpsert
from .logger import log_call, log_dataframe
from .params import ParameterType

logger = logging.getLogger(__name__)

DataItem = Mapping[str, Any]
DataLike = Union[Sequence[DataItem], DataItem, pd.DataFrame]


def _normalize_data(data: DataLike) -> List[Dict[str, Any]]:
    """Normalize input data into list[dict] with pandas nulls turned into None."""
    if isinstance(data, pd.DataFrame):
        log_dataframe("upsert_rows input", data)
        records = data.astype(object).where(pd.notnull(data), None).to_dict(orient="records")
    elif isinstance(data, Mapping):
        records = [dict(data)]
    elif isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        records = [dict(row) for row in data]
    else:
        raise TypeError("Unsupported data type; expected dict, list[dict], or DataFrame")

    for r in records:
        for k, v in r.items():
            if hasattr(v, "to_pydatetime"):
                r[k] = v.to_pydatetime()
            elif v is pd.NaT or (isinstance(v, (float, np.floating)) and np.isnan(v)):
                r[k] = None
    return records


def _upsert_record(
    connection: ConnectionLike,
    table: str,
    record: Dict[str, Any],
    identifiers: Sequence[str],
    insert_only: Iterable[str],
    parameter_types: Mapping[str, ParameterType],
) -> int:
    missing = [c for c in identifiers if c not in record]
    if missing:
        raise ValueError(f"Identifier columns missing from record: {missing}")

    builder = UpsertBuilder(connection).for_table(table)
    for column, value in record.items():
        if column in identifiers:
            continue
        builder.with_field(
            column,
            value,
            parameter_types.get(column, ParameterType.STRING),
            insert_only=column in insert_only,
        )
    for column in identifiers:
        builder.with_identifier(column, record[column], parameter_types.get(column, ParameterType.STRING))
    return builder.execute()


@log_call
def upsert_rows(
    connection: ConnectionLike,
    table: str,
    data: DataLike,
    identifiers: Sequence[str],
    *,
    insert_only: Iterable[str] = (),
    parameter_types: Optional[Mapping[str, ParameterType]] = None,
) -> int:
    """
    Upsert every record of ``data`` into ``table``; returns the summed affected row count.

    Keys listed in ``identifiers`` form the conflict key, all other keys are
    fields. With an Engine, all records share one transaction.
    """
    identifiers = list(identifiers)
    if not identifiers:
        raise EmptyUpsert("No identifier columns have been specified for upsert!")

    rows = _normalize_data(data)
    if not rows:
        return 0

    insert_only = set(insert_only)
    parameter_types = dict(parameter_types or {})

    if isinstance(connection, (Engine, Connection)):
        with _ensure_connection(connection) as conn:
            total = sum(
                _upsert_record(conn, table, r, identifiers, insert_only, parameter_types) for r in rows
            )
    else:
        total = sum(
            _upsert_record(connection, table, r, identifiers, insert_only, parameter_types) for r in rows
        )

    logger.info("upserted %d records into %s (%d affected)", len(rows), table, total)
    return total
