"""Tests for asyncquery.textual — Textual integration layer."""

import threading

import pytest
from textual.css.query import NoMatches

from asyncquery import QueryResult, use_query
from asyncquery import textual as atx


class _MockApp:
    """Minimal mock matching the Textual App interface the bridge needs."""

    def __init__(self, *, is_running=True):
        self.is_running = is_running
        self._call_from_thread_log = []

    def call_from_thread(self, fn, *args):
        self._call_from_thread_log.append((fn, args))
        fn(*args)


async def _never():
    raise AssertionError("skipped queries are never invoked")


def _skipped_handle():
    return use_query(_never, skip=True)


def _deliver(handle, data):
    handle.observable.set(QueryResult(False, None, data, None))


class TestWatchQuery:
    def test_fires_immediately(self):
        app = _MockApp()
        handle = _skipped_handle()
        seen = []
        atx.watch_query(app, handle, seen.append)
        assert [r.loading for r in seen] == [False]

    def test_delivers_each_result(self):
        app = _MockApp()
        handle = _skipped_handle()
        seen = []
        atx.watch_query(app, handle, lambda r: seen.append(r.data), fire_immediately=False)
        _deliver(handle, "a")
        _deliver(handle, "a")
        assert seen == ["a", "a"]

    def test_skips_when_not_running(self):
        app = _MockApp(is_running=False)
        handle = _skipped_handle()
        seen = []
        atx.watch_query(app, handle, seen.append)
        _deliver(handle, "a")
        assert seen == []

    def test_resumes_when_running_again(self):
        app = _MockApp(is_running=False)
        handle = _skipped_handle()
        seen = []
        atx.watch_query(app, handle, lambda r: seen.append(r.data), fire_immediately=False)
        _deliver(handle, "a")
        app.is_running = True
        _deliver(handle, "b")
        assert seen == ["b"]

    def test_catches_nomatch(self):
        app = _MockApp()
        handle = _skipped_handle()

        def _raise_nomatch(result):
            raise NoMatches("StatusFooter")

        atx.watch_query(app, handle, _raise_nomatch)
        _deliver(handle, "a")

    def test_propagates_real_errors(self):
        app = _MockApp()
        handle = _skipped_handle()

        def _raise_value_error(result):
            raise ValueError("boom")

        atx.watch_query(app, handle, _raise_value_error, fire_immediately=False)
        with pytest.raises(ValueError, match="boom"):
            _deliver(handle, "a")

    def test_dispose_stops(self):
        app = _MockApp()
        handle = _skipped_handle()
        seen = []
        r = atx.watch_query(app, handle, lambda res: seen.append(res.data), fire_immediately=False)
        _deliver(handle, "a")
        r.dispose()
        _deliver(handle, "b")
        assert seen == ["a"]

    def test_thread_marshal(self):
        app = _MockApp()
        handle = _skipped_handle()
        seen = []
        atx.watch_query(app, handle, lambda r: seen.append(r.data), fire_immediately=False)

        t = threading.Thread(target=_deliver, args=(handle, "bg"))
        t.start()
        t.join()

        assert seen == ["bg"]
        assert len(app._call_from_thread_log) == 1

    @pytest.mark.asyncio
    async def test_settlement_reaches_app(self, fake_query, settle):
        app = _MockApp()
        handle = use_query(fake_query, variables="run1")
        seen = []
        atx.watch_query(app, handle, lambda r: seen.append((r.loading, r.data)))
        fake_query.resolve(0, "resolved")
        await settle()
        assert seen == [(True, None), (False, "resolved")]

