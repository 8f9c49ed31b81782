"""Variable memoization — stable identity for structurally equal values.

Callers typically build a fresh variables dict on every cycle. Comparing by
identity would then look like a change every time and start a new fetch on
each cycle. VariableMemo keeps the first of a run of equal values so the
trigger comparison can stay an identity check.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Generic, TypeVar

T = TypeVar("T")


def structurally_equal(a: object, b: object) -> bool:
    """Deep equality that never conflates types (1 vs True vs 1.0), at any depth.

    Mappings, lists and tuples are walked; anything else falls back to ==.
    """
    if a is b:
        return True
    if type(a) is not type(b):
        return False
    if isinstance(a, Mapping):
        return a.keys() == b.keys() and all(structurally_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(structurally_equal(x, y) for x, y in zip(a, b))
    return bool(a == b)


def memo_when_equal(previous: T, candidate: T) -> T:
    """Return ``previous`` if it equals ``candidate``, else adopt ``candidate``."""
    if structurally_equal(previous, candidate):
        return previous
    return candidate


class VariableMemo(Generic[T]):
    """Holds the stable variables reference across cycles."""

    __slots__ = ("_stable",)

    def __init__(self, initial: T) -> None:
        self._stable = initial

    @property
    def value(self) -> T:
        return self._stable

    def stabilize(self, candidate: T) -> T:
        """Feed this cycle's value in; get back the reference to use.

        Usage:
            memo = VariableMemo({"id": 1})
            first = memo.value
            memo.stabilize({"id": 1}) is first   # True — equal, old ref kept
            memo.stabilize({"id": 2}) is first   # False — adopted the new one
        """
        self._stable = memo_when_equal(self._stable, candidate)
        return self._stable

    def __repr__(self) -> str:
        return f"VariableMemo({self._stable!r})"
