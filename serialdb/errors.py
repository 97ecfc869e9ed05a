"""
serialdb/errors.py

Centralized exception types for serialdb.

This module defines:
- A common base exception that carries the underlying engine failure
- Phase-specific error types: connecting/closing vs. executing a statement
"""

from __future__ import annotations


class SerialDBError(Exception):
    """
    Base class for all serialdb errors.

    Every failure a Client reports, whether raised by open()/close() or set
    on a returned future, is an instance of this class.

    Args:
        message: Human readable explanation.
        cause: The underlying failure (usually a sqlite3.Error), if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        self.message = message
        self.cause = cause
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class ConnectionError(SerialDBError):  # noqa: A001
    """
    Raised when the database connection cannot be opened or closed.

    Examples:
      - Parent directory of the database file does not exist
      - Path points at a directory
    """


class ExecutionError(SerialDBError):
    """
    Raised (through the returned future) when a statement fails on the worker.

    Examples:
      - Malformed SQL
      - Constraint violation
      - Parameter count mismatch or unsupported parameter type
    """


class ClientClosedError(ExecutionError):
    """Raised (through the returned future) for work submitted after close()."""
