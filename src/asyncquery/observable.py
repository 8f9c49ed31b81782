"""Observable — the runtime's state holder.

Reading inside a reaction subscribes it; writing a value the equality
check considers different schedules every subscriber. Each instance owns
its own value and observer set.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, TypeVar

from asyncquery._tracking import current_derivation, schedule

if TYPE_CHECKING:
    from asyncquery.reaction import Reaction

T = TypeVar("T")


def default_equals(old: object, new: object) -> bool:
    return old is new or old == new


class Observable(Generic[T]):
    """A single observable value with automatic dependency tracking."""

    __slots__ = ("_value", "_observers", "_equals")

    def __init__(self, value: T, *, equals: Callable[[T, T], bool] = default_equals) -> None:
        self._value = value
        self._observers: set[Reaction] = set()
        self._equals = equals

    def get(self) -> T:
        """Read the value. If inside a reaction, registers the dependency."""
        derivation = current_derivation.get()
        if derivation is not None:
            self._observers.add(derivation)
            derivation._dependencies.add(self)
        return self._value

    def peek(self) -> T:
        """Read the value without registering a dependency."""
        return self._value

    def set(self, value: T) -> None:
        if self._equals(self._value, value):
            return
        self._value = value
        for observer in list(self._observers):
            schedule(observer)

    def _remove_observer(self, observer: Reaction) -> None:
        self._observers.discard(observer)

    def __repr__(self) -> str:
        return f"Observable({self._value!r})"
