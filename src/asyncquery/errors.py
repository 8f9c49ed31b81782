"""Exception hierarchy for asyncquery.

Query failures are never wrapped: whatever the query's awaitable raised is
stored in ``QueryResult.error`` and handed to ``on_error`` as-is. The classes
here only report misuse of the controller itself.
"""

from __future__ import annotations


class AsyncQueryError(Exception):
    """Base exception for all asyncquery errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class VariablesError(AsyncQueryError, TypeError):
    """Variables were supplied to a query that cannot accept them, or were missing."""


class ControllerDisposedError(AsyncQueryError):
    """The controller was used after dispose()."""
