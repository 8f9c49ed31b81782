"""Result record and the immutable result surface.

ResultRecord is the one mutable cell a controller owns. Its transitions keep
the invariants callers rely on:

- loading implies data is None and error is None
- at most one of data / error is set
- previous_data only changes when a new attempt begins

QueryResult is the frozen snapshot handed out to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, TypeVar

TData = TypeVar("TData")

Refetch = Callable[..., Awaitable["QueryResult[Any]"]]


@dataclass(frozen=True)
class QueryResult(Generic[TData]):
    """What a caller sees: the record's fields plus a refetch reference."""

    loading: bool
    error: BaseException | None
    data: TData | None
    previous_data: TData | None
    refetch: Refetch | None = field(default=None, compare=False, repr=False)


@dataclass
class ResultRecord(Generic[TData]):
    loading: bool = False
    error: BaseException | None = None
    data: TData | None = None
    previous_data: TData | None = None

    @classmethod
    def initial(cls, skip: bool) -> ResultRecord[TData]:
        return cls(loading=not skip)

    def begin(self) -> None:
        """A new attempt started: shift data into previous_data and clear the rest."""
        self.previous_data = self.data
        self.data = None
        self.error = None
        self.loading = True

    def succeed(self, data: TData) -> None:
        self.data = data
        self.loading = False
        self.error = None

    def fail(self, error: BaseException) -> None:
        # previous_data is never touched by a failure.
        self.data = None
        self.loading = False
        self.error = error

    def skip(self) -> None:
        """Skip gating: stop showing loading, keep whatever data we had."""
        self.loading = False
        self.error = None

    def snapshot(self, refetch: Refetch | None = None) -> QueryResult[TData]:
        return QueryResult(
            loading=self.loading,
            error=self.error,
            data=self.data,
            previous_data=self.previous_data,
            refetch=refetch,
        )
