"""Reactions — the runtime's effect scheduler.

A reaction re-runs when an observable it read changes. Effects may return a
cleanup callable; it runs before the effect fires again and on dispose().

Two flavors:
- autorun(fn): runs fn immediately, re-runs when anything it read changes.
- reaction(data_fn, effect_fn): tracks data_fn, calls effect_fn with the new
  value only when the equality check says it changed.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from asyncquery._tracking import current_derivation, untracked

T = TypeVar("T")

Cleanup = Callable[[], None]


class Reaction:
    """A reactive side effect that re-runs when its dependencies change."""

    __slots__ = ("_fn", "_dependencies", "_disposed", "_cleanup")

    def __init__(self, fn: Callable[[], Any]) -> None:
        self._fn = fn
        self._dependencies: set = set()
        self._disposed = False
        self._cleanup: Cleanup | None = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _untrack_all(self) -> None:
        for dep in self._dependencies:
            dep._remove_observer(self)
        self._dependencies.clear()

    def _tracked(self, fn: Callable[[], T]) -> T:
        """Evaluate fn with this reaction as the current derivation."""
        self._untrack_all()
        token = current_derivation.set(self)
        try:
            return fn()
        finally:
            current_derivation.reset(token)

    def _run_cleanup(self) -> None:
        cleanup, self._cleanup = self._cleanup, None
        if cleanup is not None:
            with untracked():
                cleanup()

    def _keep_cleanup(self, returned: object) -> None:
        self._cleanup = returned if callable(returned) else None

    def _run(self) -> None:
        if self._disposed:
            return
        self._run_cleanup()
        self._keep_cleanup(self._tracked(self._fn))

    def dispose(self) -> None:
        """Stop reacting and run any outstanding cleanup."""
        if self._disposed:
            return
        self._disposed = True
        self._untrack_all()
        self._run_cleanup()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"{type(self).__name__}({getattr(self._fn, '__name__', self._fn)}, {state})"


class DataReaction(Reaction, Generic[T]):
    """reaction(data_fn, effect_fn): effect fires only when data_fn's value changes."""

    __slots__ = ("_effect_fn", "_equals", "_last_value", "_initialized")

    def __init__(
        self,
        data_fn: Callable[[], T],
        effect_fn: Callable[[T], Any],
        equals: Callable[[T, T], bool],
    ) -> None:
        super().__init__(data_fn)
        self._effect_fn = effect_fn
        self._equals = equals
        self._last_value: T | None = None
        self._initialized = False

    def _prime(self) -> None:
        """Establish dependencies and remember the value without firing."""
        self._last_value = self._tracked(self._fn)
        self._initialized = True

    def _run(self) -> None:
        if self._disposed:
            return
        new_value = self._tracked(self._fn)
        if self._initialized and self._equals(self._last_value, new_value):
            return
        self._run_cleanup()
        with untracked():
            returned = self._effect_fn(new_value)
        # Only a completed effect counts as having seen this value.
        self._last_value = new_value
        self._initialized = True
        self._keep_cleanup(returned)


def _same_value(old: object, new: object) -> bool:
    return old is new or old == new


def autorun(fn: Callable[[], Any]) -> Reaction:
    """Run fn immediately, then again whenever any observable it reads changes.

    Usage:
        counter = Observable(0)
        log = []
        r = autorun(lambda: log.append(counter.get()))   # log == [0]
        counter.set(1)                                   # log == [0, 1]
        r.dispose()
    """
    r = Reaction(fn)
    r._run()
    return r


def reaction(
    data_fn: Callable[[], T],
    effect_fn: Callable[[T], Any],
    *,
    fire_immediately: bool = False,
    equals: Callable[[T, T], bool] = _same_value,
) -> DataReaction[T]:
    """Track data_fn's observables; call effect_fn when its result changes.

    ``equals`` decides what counts as unchanged (default: identity or ==).
    effect_fn may return a cleanup callable.

    Usage:
        page = Observable(1)
        seen = []
        r = reaction(lambda: page.get(), seen.append)
        page.set(2)    # seen == [2]
        r.dispose()
    """
    r = DataReaction(data_fn, effect_fn, equals)
    if fire_immediately:
        r._run()
    else:
        r._prime()
    return r
