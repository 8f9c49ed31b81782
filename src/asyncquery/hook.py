"""use_query() — drive a QueryController from per-cycle options.

A QueryHandle is the Python counterpart of calling a query hook on every
render: each update() call is one evaluation cycle of the caller, carrying
that cycle's options. The pieces:

- VariableMemo turns this cycle's variables into a stable reference.
- Two observables hold the stable variables and the skip flag.
- A reaction watches (variables, skip) by identity and calls initiate() when
  either changed. Callbacks are deliberately not among its inputs.
- The controller's notification boundary writes a fresh QueryResult into
  ``handle.observable``, so any reaction reading ``handle.result`` re-runs.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from asyncquery._tracking import transaction
from asyncquery.controller import QueryController
from asyncquery.memo import VariableMemo
from asyncquery.observable import Observable
from asyncquery.reaction import reaction
from asyncquery.result import QueryResult
from asyncquery.signature import UNSET, Query, as_query

logger = logging.getLogger("asyncquery.hook")

TData = TypeVar("TData")


@dataclass(frozen=True)
class QueryOptions:
    """Options for one cycle. Anything omitted falls back to these defaults."""

    variables: Any = UNSET
    skip: bool = False
    on_completed: Callable[[Any], None] | None = None
    on_error: Callable[[BaseException], None] | None = None


def _same_inputs(old: tuple[Any, bool], new: tuple[Any, bool]) -> bool:
    return old[0] is new[0] and old[1] == new[1]


class QueryHandle(Generic[TData]):
    """The caller's view of one query: current result, refetch, update, dispose."""

    def __init__(self, query: Query, options: QueryOptions) -> None:
        self._options = options
        self._memo = VariableMemo(options.variables)
        self._variables: Observable[Any] = Observable(self._memo.value, equals=operator.is_)
        self._skip = Observable(options.skip)
        self._controller: QueryController[TData] = QueryController(
            query,
            skip=options.skip,
            notify=self._publish,
            on_completed=options.on_completed,
            on_error=options.on_error,
        )
        self._observable: Observable[QueryResult[TData]] = Observable(
            self._controller.result, equals=operator.is_
        )
        self._reaction = reaction(
            self._inputs, self._on_inputs_changed, fire_immediately=True, equals=_same_inputs
        )

    @property
    def result(self) -> QueryResult[TData]:
        """Latest delivered result. Tracked when read inside a reaction."""
        return self._observable.get()

    @property
    def observable(self) -> Observable[QueryResult[TData]]:
        return self._observable

    @property
    def options(self) -> QueryOptions:
        return self._options

    @property
    def controller(self) -> QueryController[TData]:
        return self._controller

    def update(
        self,
        *,
        variables: Any = UNSET,
        skip: bool = False,
        on_completed: Callable[[TData], None] | None = None,
        on_error: Callable[[BaseException], None] | None = None,
    ) -> QueryResult[TData]:
        """Run one cycle with these options and return the result it delivers."""
        self._options = QueryOptions(variables, skip, on_completed, on_error)
        self._controller.register(on_completed, on_error)
        with transaction():
            self._variables.set(self._memo.stabilize(variables))
            self._skip.set(skip)
        return self.result

    def refetch(self, overrides: Any = UNSET):
        """Force a new attempt; see QueryController.refetch."""
        return self._controller.refetch(overrides)

    def dispose(self) -> None:
        self._reaction.dispose()
        self._controller.dispose()

    # --- Internals ---

    def _inputs(self) -> tuple[Any, bool]:
        return self._variables.get(), self._skip.get()

    def _on_inputs_changed(self, inputs: tuple[Any, bool]) -> None:
        variables, skip = inputs
        logger.debug("inputs changed: variables=%r skip=%s", variables, skip)
        self._controller.initiate(variables, skip)
        self._publish()

    def _publish(self) -> None:
        self._observable.set(self._controller.result)

    def __repr__(self) -> str:
        return f"QueryHandle({self._controller!r})"


def use_query(
    query: Callable[..., Any] | Query,
    *,
    variables: Any = UNSET,
    skip: bool = False,
    on_completed: Callable[[TData], None] | None = None,
    on_error: Callable[[BaseException], None] | None = None,
    takes_variables: bool | None = None,
) -> QueryHandle[TData]:
    """Register an async query and start it unless skipped.

    The query's arity is fixed here: pass a ZeroArgQuery / ParameterizedQuery,
    or set ``takes_variables``. Left as None, a bare callable is treated as
    parameterized exactly when ``variables`` was given.

    Must be called with an event loop running (unless ``skip`` is set).

    Usage:
        async def fetch_user(variables):
            return await api.get_user(variables["id"])

        handle = use_query(fetch_user, variables={"id": 1})
        handle.result.loading                       # True
        handle.update(variables={"id": 1})          # equal value: no new fetch
        handle.update(variables={"id": 2})          # new fetch, old one ignored
        result = await handle.refetch({"id": 3})
    """
    if takes_variables is None:
        takes_variables = variables is not UNSET
    options = QueryOptions(variables, skip, on_completed, on_error)
    return QueryHandle(as_query(query, takes_variables), options)
