"""Textual integration for livecell. Opt-in — requires textual.

Widgets observe cells through observe() rather than Cell.subscribe(). The
returned Subscription is what the widget drops in on_unmount; until then each
delivery is

- moved onto the app thread with call_from_thread when the cell was set from
  a worker thread,
- dropped if the subscription was detached before it got there, or if the
  widget tree is paused or the app is not running,
- shielded from NoMatches raised by widget queries.

Pause state is owned by this module and keyed by id(app), so the app object
is never mutated and several apps can coexist in tests.
"""

import logging
import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

logger = logging.getLogger("livecell.textual")

_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Hold back cell deliveries to app while widgets are being replaced."""
    _paused_apps.add(id(app))
    try:
        yield
    finally:
        _paused_apps.discard(id(app))


def is_safe(app) -> bool:
    """True when app is running and not inside pause()."""
    return app.is_running and id(app) not in _paused_apps


def observe(app, cell, fn):
    """Subscribe fn to cell on behalf of a widget of app.

    Returns the Subscription; unsubscribe() it when the widget goes away.
    """
    app_thread = threading.get_ident()
    subscription = None

    def _deliver(value):
        # A marshaled delivery can land after the widget unsubscribed.
        if subscription is not None and not subscription.active:
            return
        if not is_safe(app):
            logger.debug("Dropped %r for %r: app not safe", value, cell)
            return
        try:
            fn(value)
        except NoMatches:
            logger.debug("Widget query failed while delivering %r", value, exc_info=True)

    def _on_changed(value):
        if threading.get_ident() == app_thread:
            _deliver(value)
        else:
            app.call_from_thread(_deliver, value)

    subscription = cell.subscribe(_on_changed)
    return subscription


def observe_non_null(app, cell, fn):
    """observe() that never hands None to fn."""

    def _non_null(value):
        if value is not None:
            fn(value)

    return observe(app, cell, _non_null)
