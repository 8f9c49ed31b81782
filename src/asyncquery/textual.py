"""Textual integration for asyncquery. Opt-in — requires textual.

Forwards every result a QueryHandle delivers into a Textual app: dropped
while the app is not running, NoMatches tolerated, and hopped onto the
app's thread when delivered from elsewhere.
"""

import logging
import operator
import threading

from textual.css.query import NoMatches

from asyncquery.reaction import reaction as _reaction

logger = logging.getLogger("asyncquery.textual")


def watch_query(app, handle, effect_fn, *, fire_immediately=True):
    """Call effect_fn(result) each time handle delivers a new QueryResult.

    Returns the reaction (dispose() to stop).

    Usage:
        def show(result):
            label = app.query_one("#status", Label)
            label.update("loading…" if result.loading else str(result.data))

        watcher = watch_query(app, handle, show)
    """
    _main = threading.get_ident()

    def _deliver(result):
        try:
            effect_fn(result)
        except NoMatches as exc:
            logger.debug("widget missing while delivering query result: %s", exc)

    def _guarded(result):
        if not app.is_running:
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_deliver, result)
        else:
            _deliver(result)

    return _reaction(
        lambda: handle.result, _guarded, fire_immediately=fire_immediately, equals=operator.is_
    )
