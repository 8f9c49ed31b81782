"""Dependency tracking and batching for the reactive runtime.

A contextvar holds the derivation currently being evaluated. Any
Observable.get() made while it is set registers that derivation as an
observer. Writes made inside a transaction collect their invalidated
derivations and flush them once, in first-scheduled order, when the
outermost transaction exits. A query cycle therefore reacts to all of its
option changes at once.
"""

from __future__ import annotations

import contextvars
import functools
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, ParamSpec, TypeVar

if TYPE_CHECKING:
    from asyncquery.reaction import Reaction

P = ParamSpec("P")
R = TypeVar("R")

current_derivation: contextvars.ContextVar[Reaction | None] = contextvars.ContextVar(
    "asyncquery_current_derivation", default=None
)

_batch_depth: int = 0

# dict as an ordered set: flush in the order derivations were invalidated.
_pending: dict[Reaction, None] = {}


def schedule(derivation: Reaction) -> None:
    """Run a derivation now, or queue it if a transaction is open."""
    if _batch_depth > 0:
        _pending[derivation] = None
    else:
        derivation._run()


def _flush_pending() -> None:
    while _pending:
        batch = list(_pending)
        _pending.clear()
        for derivation in batch:
            derivation._run()


@contextmanager
def transaction() -> Iterator[None]:
    """Batch observable writes; dependents run once when the outermost scope exits.

    Usage:
        with transaction():
            variables.set({"id": 2})
            skip.set(False)
            # the query reaction sees both changes together
    """
    global _batch_depth
    _batch_depth += 1
    try:
        yield
    finally:
        _batch_depth -= 1
        if _batch_depth == 0:
            _flush_pending()


def action(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator form of transaction()."""

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        with transaction():
            return fn(*args, **kwargs)

    return wrapper


@contextmanager
def untracked() -> Iterator[None]:
    """Read observables without subscribing the current derivation."""
    token = current_derivation.set(None)
    try:
        yield
    finally:
        current_derivation.reset(token)


def get_pending_count() -> int:
    """Number of derivations waiting for the current transaction to end."""
    return len(_pending)
