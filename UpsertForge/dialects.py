"""Dialect strategy helpers."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from .exceptions import UnsupportedDialect

RESERVED_WORDS = {
    "postgresql": {
        "SELECT", "INSERT", "DELETE", "UPDATE", "WHERE", "FROM", "GROUP", "ORDER",
        "BY", "CREATE", "TABLE", "PRIMARY", "KEY", "FOREIGN", "CONSTRAINT",
        "REFERENCES", "USER", "DEFAULT", "UNIQUE", "CHECK", "COLUMN", "END",
    },
    "mysql": {
        "SELECT", "INSERT", "DELETE", "UPDATE", "WHERE", "FROM", "TABLE",
        "CREATE", "DROP", "ALTER", "PRIMARY", "KEY", "FOREIGN", "CONSTRAINT",
        "UNIQUE", "INDEX", "GROUP", "ORDER", "DEFAULT", "CHECK", "COLUMN",
    },
    "sqlite": {
        "SELECT", "INSERT", "DELETE", "UPDATE", "WHERE", "FROM", "TABLE",
        "CREATE", "DROP", "ALTER", "CONSTRAINT", "PRIMARY", "KEY", "FOREIGN",
        "UNIQUE", "CHECK", "DEFAULT", "GROUP", "ORDER",
    },
}

_FAMILIES = {
    "mysql": "mysql",
    "mariadb": "mysql",
    "postgresql": "postgresql",
    "postgres": "postgresql",
    "sqlite": "sqlite",
}

_PLAIN_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _normalize(name: str) -> str:
    return str(name).strip().lower()


def bind_names(columns: Sequence[str]) -> Dict[str, str]:
    """Map each column to a placeholder name made of word characters only.

    Plain names map to themselves; clashes after sanitizing get a numeric suffix.
    """
    names: Dict[str, str] = {c: c for c in columns if re.fullmatch(r"\w+", c)}
    taken = set(names)
    for column in columns:
        if column in names:
            continue
        base = re.sub(r"\W", "_", column) or "col"
        candidate, i = base, 0
        while candidate in taken:
            i += 1
            candidate = f"{base}_{i}"
        taken.add(candidate)
        names[column] = candidate
    return {c: names[c] for c in columns}


@dataclass(frozen=True)
class DialectStrategy:
    name: str

    @property
    def family(self) -> Optional[str]:
        return _FAMILIES.get(_normalize(self.name))

    @property
    def supported(self) -> bool:
        return self.family is not None

    def quote_identifier(self, name: str) -> str:
        family = self.family
        if _PLAIN_IDENTIFIER.fullmatch(name) and name.upper() not in RESERVED_WORDS.get(family, set()):
            return name
        if family == "mysql":
            return "`{}`".format(name.replace("`", "``"))
        return '"{}"'.format(name.replace('"', '""'))

    def quote_table(self, table: str) -> str:
        """Quote each part of a possibly schema-qualified table name."""
        return ".".join(self.quote_identifier(part) for part in table.split("."))

    def build_upsert(
        self,
        table: str,
        columns: Sequence[str],
        identifiers: Sequence[str],
        updates: Sequence[str],
    ) -> str:
        """Render a single-line upsert statement.

        Placeholders are named after the columns through ``bind_names``.
        """
        family = self.family
        if family is None:
            raise UnsupportedDialect(f"The database platform {self.name} is not supported!")

        q = self.quote_identifier
        binds = bind_names(columns)
        cols = ", ".join(q(c) for c in columns)
        values = ", ".join(f":{binds[c]}" for c in columns)
        assignments = ", ".join(f"{q(c)} = :{binds[c]}" for c in updates)
        head = f"INSERT INTO {self.quote_table(table)} ({cols}) VALUES ({values})"

        if family == "mysql":
            if not assignments:
                # insert-only upsert: keep the row, swallow the duplicate
                key = q(identifiers[0])
                assignments = f"{key} = {key}"
            return f"{head} ON DUPLICATE KEY UPDATE {assignments}"

        keys = ", ".join(q(c) for c in identifiers)
        conflict = "ON CONFLICT ({})" if family == "postgresql" else "ON CONFLICT({})"
        action = f"DO UPDATE SET {assignments}" if assignments else "DO NOTHING"
        return f"{head} {conflict.format(keys)} {action}"


def get_dialect(engine_or_name) -> DialectStrategy:
    """Strategy for an engine, connection, adapter or plain dialect name."""
    if hasattr(engine_or_name, "get_dialect"):
        name = engine_or_name.get_dialect()
    elif hasattr(engine_or_name, "dialect"):
        name = engine_or_name.dialect.name
    else:
        name = str(engine_or_name)
    return DialectStrategy(name=name)
