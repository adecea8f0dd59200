"""
Exception types raised at the package boundaries.

Validation problems are never raised: they are collected into a
ValidationReport. Exceptions are reserved for the row source and the store,
and the session converts both into data before they reach the caller.
"""


class AddressImportError(Exception):
    """Base class for all address import errors."""


class RowSourceError(AddressImportError):
    """Input could not be turned into rows (wrong file type, unreadable, malformed)."""


class StoreError(AddressImportError):
    """A store operation (clear or insert) failed."""

    def __init__(self, message: str, *, table: str | None = None) -> None:
        super().__init__(message)
        self.table = table
