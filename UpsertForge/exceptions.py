"""Upsert error taxonomy.

All errors are raised for programmer misuse and are never retried. Failures
coming from the database driver are not wrapped and surface as-is.
"""
from __future__ import annotations


class UpsertError(Exception):
    """Base class; ``code`` is a stable numeric identifier for the error."""
    code: int = 0

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class NoTableGiven(UpsertError):
    code = 1603199471


class EmptyUpsert(UpsertError):
    code = 1603199389


class FieldAlreadyInUse(UpsertError):
    code = 1603196457


class FieldRegisteredAsIdentifier(FieldAlreadyInUse):
    code = 1603197692


class IdentifierAlreadyInUse(UpsertError):
    code = 1603197690


class IdentifierRegisteredAsField(IdentifierAlreadyInUse):
    code = 1603197691


class UnsupportedDialect(UpsertError, NotImplementedError):
    code = 1603199935
