"""Exceptions raised by crafty operations.

A package that is simply absent from the catalog is not an error: lookups
return ``None`` or an empty list instead.
"""

from __future__ import annotations


class CraftyError(Exception):
    """Base class for every failure crafty reports to the user."""


class NetworkFailure(CraftyError):
    """The catalog fetch or an archive download could not complete."""


class ParseFailure(CraftyError):
    """The listing page did not contain the expected embedded catalog."""


class InvalidArchive(CraftyError):
    """A downloaded file is not a zstd archive."""


class SubprocessFailure(CraftyError):
    """The external installer or remover exited unsuccessfully."""

    def __init__(self, message: str, code: int = -1):
        super().__init__(message)
        self.code = code


class PersistenceFailure(CraftyError):
    """The ledger could not be written to disk."""


__all__ = (
    "CraftyError",
    "NetworkFailure",
    "ParseFailure",
    "InvalidArchive",
    "SubprocessFailure",
    "PersistenceFailure",
)
