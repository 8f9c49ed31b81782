"""Tests for Observable."""

import operator

from asyncquery import Observable, autorun


class TestObservable:
    def test_get_set(self):
        o = Observable(42)
        assert o.get() == 42
        o.set(100)
        assert o.get() == 100

    def test_dedup(self):
        """Setting an equal value should not trigger observers."""
        o = Observable({"id": 1})
        log = []
        autorun(lambda: log.append(o.get()))
        o.set({"id": 1})
        assert log == [{"id": 1}]

    def test_identity_equality(self):
        """With operator.is_, an equal but distinct value still notifies."""
        o = Observable({"id": 1}, equals=operator.is_)
        log = []
        autorun(lambda: log.append(o.get()))
        o.set({"id": 1})
        assert len(log) == 2

    def test_notifies_observers(self):
        o = Observable("hello")
        log = []
        autorun(lambda: log.append(o.get()))
        o.set("world")
        assert log == ["hello", "world"]

    def test_peek_does_not_track(self):
        o = Observable(1)
        log = []
        autorun(lambda: log.append(o.peek()))
        o.set(2)
        assert log == [1]

    def test_instances_are_independent(self):
        a = Observable(1)
        b = Observable(1)
        log = []
        autorun(lambda: log.append(a.get()))
        b.set(2)
        assert log == [1]

    def test_repr(self):
        assert repr(Observable(5)) == "Observable(5)"
