"""QueryController — race-safe sequencing of one async query.

Every fetch attempt captures the controller's generation counter when it
starts. When the attempt settles it may touch the result record, notify,
and fire a callback only if that captured value still equals the live
counter. Starting a newer attempt or disposing the controller bumps the
counter, so anything older becomes inert no matter when it settles.

Nothing is ever cancelled: a superseded awaitable keeps running and its
outcome is dropped on arrival.

Two entry points with different failure handling:
- initiate(): the automatic path. Failures land in the record and
  on_error, and go no further.
- refetch(): the manual path. Same bookkeeping, and the failure is also
  raised from the returned task so the caller can handle it locally.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from asyncquery.errors import ControllerDisposedError, VariablesError
from asyncquery.result import QueryResult, ResultRecord
from asyncquery.signature import UNSET, Query, merge_variables

logger = logging.getLogger("asyncquery.controller")

TData = TypeVar("TData")

Notify = Callable[[], None]


def _noop() -> None:
    pass


async def _raise(exc: Exception):
    raise exc


class QueryController(Generic[TData]):
    """Owns one result record and the fetch / refetch / dispose protocol."""

    def __init__(
        self,
        query: Query,
        *,
        skip: bool = False,
        notify: Notify | None = None,
        on_completed: Callable[[TData], None] | None = None,
        on_error: Callable[[BaseException], None] | None = None,
    ) -> None:
        self._query = query
        self._notify = notify or _noop
        self._on_completed = on_completed
        self._on_error = on_error
        self._record: ResultRecord[TData] = ResultRecord.initial(skip)
        self._generation = 0
        self._variables: Any = UNSET
        self._tasks: set[asyncio.Task] = set()
        self._disposed = False

    # --- Surface ---

    @property
    def result(self) -> QueryResult[TData]:
        """Snapshot of the record, carrying a refetch bound to this controller."""
        return self._record.snapshot(self.refetch)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def variables(self) -> Any:
        """Variables supplied by the latest cycle (UNSET until one did). refetch merges onto these."""
        return self._variables

    @property
    def disposed(self) -> bool:
        return self._disposed

    def register(
        self,
        on_completed: Callable[[TData], None] | None = None,
        on_error: Callable[[BaseException], None] | None = None,
    ) -> None:
        """Replace the callbacks. Settlements read whatever is registered when they land."""
        self._on_completed = on_completed
        self._on_error = on_error

    # --- Protocol ---

    def initiate(self, variables: Any = UNSET, skip: bool = False) -> asyncio.Task | None:
        """Automatic trigger: variables or skip changed since the last cycle.

        Returns the settlement task, or None when skipped. The task never
        raises a query failure.
        """
        self._check_alive()
        if skip:
            self._variables = variables
            self._record.skip()
            logger.debug("skip: holding at generation %d", self._generation)
            return None
        self._query.check(variables)
        self._variables = variables
        return self._start(variables, propagate=False)

    def refetch(self, overrides: Any = UNSET) -> asyncio.Task[QueryResult[TData]]:
        """Manual trigger, with an optional partial override of the cycle's variables.

        Notifies right away so observers see loading=True without waiting.
        The returned task resolves to a fresh QueryResult, or raises whatever
        the query raised.

        Usage:
            result = await controller.refetch({"page": 2})
        """
        self._check_alive()
        if overrides is not UNSET and not self._query.takes_variables:
            raise VariablesError(f"cannot refetch {self._query!r} with variables {overrides!r}")
        task = self._start(merge_variables(self._variables, overrides), propagate=True)
        self._notify()
        return task

    def dispose(self) -> None:
        """Stop observing. Any attempt still in flight becomes stale."""
        if self._disposed:
            return
        self._disposed = True
        self._generation += 1
        logger.debug("disposed at generation %d with %d attempts in flight",
                     self._generation, len(self._tasks))

    # --- Internals ---

    def _check_alive(self) -> None:
        if self._disposed:
            raise ControllerDisposedError("query controller has been disposed")

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _start(self, variables: Any, *, propagate: bool) -> asyncio.Task[QueryResult[TData]]:
        loop = asyncio.get_running_loop()
        self._query.check(variables)
        self._generation += 1
        generation = self._generation
        self._record.begin()
        try:
            pending = self._query.invoke(variables)
        except Exception as exc:
            # A query that raises before returning an awaitable is a failed attempt.
            pending = _raise(exc)
        logger.debug("attempt %d started with %r", generation, variables)
        task = loop.create_task(self._settle(generation, pending, propagate))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _settle(
        self, generation: int, pending: Awaitable[TData], propagate: bool
    ) -> QueryResult[TData]:
        try:
            data = await pending
        except Exception as exc:
            if not self._is_current(generation):
                logger.debug("attempt %d superseded, dropping failure %r", generation, exc)
                return self.result
            self._record.fail(exc)
            logger.debug("attempt %d failed: %r", generation, exc)
            self._notify()
            if self._on_error is not None:
                self._on_error(exc)
            if propagate:
                raise
            return self.result

        if not self._is_current(generation):
            logger.debug("attempt %d superseded, dropping result", generation)
            return self.result
        self._record.succeed(data)
        logger.debug("attempt %d completed", generation)
        self._notify()
        if self._on_completed is not None:
            self._on_completed(data)
        return self.result

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"generation={self._generation}"
        return f"QueryController({self._query!r}, {state})"
