"""Call signatures — zero-argument and parameterized queries.

The arity of a query is fixed when it is registered, never guessed per call.
Both variants expose invoke(variables); the zero-argument one only accepts
UNSET and calls fn() with no positional argument at all.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Generic, TypeVar

from asyncquery.errors import VariablesError

TData = TypeVar("TData")


class _Unset:
    """Marker for "no variables". Distinct from None, which is a legal variables value."""

    __slots__ = ()
    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def _ensure_awaitable(fn: Callable, result: object) -> Awaitable:
    if not inspect.isawaitable(result):
        name = getattr(fn, "__name__", repr(fn))
        raise TypeError(f"query {name} returned {type(result).__name__}, expected an awaitable")
    return result


class ZeroArgQuery(Generic[TData]):
    """A query called as fn()."""

    __slots__ = ("fn",)

    takes_variables = False

    def __init__(self, fn: Callable[[], Awaitable[TData]]) -> None:
        self.fn = fn

    def check(self, variables: Any) -> None:
        """Raise VariablesError unless variables fit this arity."""
        if variables is not UNSET:
            raise VariablesError(
                f"{self!r} takes no variables, got {variables!r}",
                hint="register the query with takes_variables=True",
            )

    def invoke(self, variables: Any = UNSET) -> Awaitable[TData]:
        self.check(variables)
        return _ensure_awaitable(self.fn, self.fn())

    def __repr__(self) -> str:
        return f"ZeroArgQuery({getattr(self.fn, '__name__', self.fn)!r})"


class ParameterizedQuery(Generic[TData]):
    """A query called as fn(variables)."""

    __slots__ = ("fn",)

    takes_variables = True

    def __init__(self, fn: Callable[[Any], Awaitable[TData]]) -> None:
        self.fn = fn

    def check(self, variables: Any) -> None:
        if variables is UNSET:
            raise VariablesError(f"{self!r} requires variables")

    def invoke(self, variables: Any = UNSET) -> Awaitable[TData]:
        self.check(variables)
        return _ensure_awaitable(self.fn, self.fn(variables))

    def __repr__(self) -> str:
        return f"ParameterizedQuery({getattr(self.fn, '__name__', self.fn)!r})"


Query = ZeroArgQuery | ParameterizedQuery


def as_query(fn: Callable | Query, takes_variables: bool) -> Query:
    """Wrap a bare callable in the variant matching its declared arity.

    Already-wrapped queries pass through untouched.
    """
    if isinstance(fn, (ZeroArgQuery, ParameterizedQuery)):
        return fn
    return ParameterizedQuery(fn) if takes_variables else ZeroArgQuery(fn)


def merge_variables(base: Any, overrides: Any) -> Any:
    """Shallow-merge refetch overrides onto the cycle's variables.

    Mapping onto mapping merges key-wise (override keys win). Anything else
    replaces the base wholesale; UNSET overrides keep the base as-is.
    """
    if overrides is UNSET:
        return base
    if isinstance(base, Mapping) and isinstance(overrides, Mapping):
        return {**base, **overrides}
    return overrides
