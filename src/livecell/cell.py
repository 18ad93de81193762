"""Observable cells — single-slot values that notify their subscribers.

A Cell holds at most one current value. "Never set" and "set to None" are
different states: get() returns None for both, is_set tells them apart.
Every set() notifies, synchronously, before it returns.

Thread safety: cells are owned by one thread. Call set_scheduler() once from
that thread; after that, post() from any other thread is marshaled back to it.
set() never marshals.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

if TYPE_CHECKING:
    from livecell.mediator import MediatorCell

T = TypeVar("T")
U = TypeVar("U")

logger = logging.getLogger("livecell.cell")

_UNSET = object()

# ─── Auto-marshal ────────────────────────────────────────────────────────────
_scheduler = None
_scheduler_thread = None


def set_scheduler(scheduler) -> None:
    """Set the global thread scheduler for cross-thread posts.

    Call once from the main/UI thread:
        livecell.set_scheduler(app.call_from_thread)

    After this, MutableCell.post() from a background thread is marshaled.
    Passing None removes the scheduler and makes post() synchronous again.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread() if scheduler is not None else None


def _on_owner_thread() -> bool:
    return _scheduler is None or threading.current_thread() == _scheduler_thread


class Subscription(Generic[T]):
    """Link between a cell and one observer. Detach with unsubscribe()."""

    __slots__ = ("_cell", "_observer", "_last_version", "_active")

    def __init__(self, cell: Cell[T], observer: Callable[[T | None], None]) -> None:
        self._cell = cell
        self._observer = observer
        self._last_version = -1
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Stop further notifications. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._cell._detach(self)

    def _dispatch(self) -> None:
        cell = self._cell
        # A nested set() may already have handed us a newer value.
        if not self._active or self._last_version >= cell._version:
            return
        self._last_version = cell._version
        self._observer(cell._value)

    def __repr__(self) -> str:
        state = "active" if self._active else "detached"
        return f"Subscription({self._cell!r}, {state})"


class Cell(Generic[T]):
    """Read side of an observable single value.

    Producers use MutableCell. Derived cells are MediatorCells built by the
    operators in livecell.operators and livecell.transformations.
    """

    def __init__(self, value: T = _UNSET) -> None:
        self._subscriptions: list[Subscription[T]] = []
        if value is _UNSET:
            self._value = None
            self._version = -1
        else:
            self._value = value
            self._version = 0

    def get(self) -> T | None:
        """Current value, or None if the cell was never set."""
        return self._value

    @property
    def is_set(self) -> bool:
        """True once a value (None included) has been published."""
        return self._version >= 0

    @property
    def version(self) -> int:
        """Number of publishes minus one; -1 while the cell is unset."""
        return self._version

    def subscribe(self, observer: Callable[[T | None], None]) -> Subscription[T]:
        """Attach observer. It receives the current value now if the cell is set.

        If that first delivery raises, the observer is detached again before
        the error propagates.
        """
        subscription = Subscription(self, observer)
        self._subscriptions.append(subscription)
        if self.is_set:
            try:
                subscription._dispatch()
            except Exception:
                subscription.unsubscribe()
                raise
        return subscription

    def has_observers(self) -> bool:
        return bool(self._subscriptions)

    def _set_value(self, value: T | None) -> None:
        self._value = value
        self._version += 1
        self._notify()

    def _notify(self) -> None:
        for subscription in list(self._subscriptions):
            subscription._dispatch()

    def _detach(self, subscription: Subscription[T]) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass  # already removed

    # --- Fluent operator forms ---

    def combine_with(self, other: Cell, third: Cell | None = None) -> MediatorCell[tuple]:
        from livecell import operators

        if third is None:
            return operators.combine2(self, other)
        return operators.combine3(self, other, third)

    def distinct_by(self, predicate: Callable[[T | None, T | None], bool]) -> MediatorCell[T]:
        from livecell import operators

        return operators.distinct_by(self, predicate)

    def distinct_until_changed(self) -> MediatorCell[T]:
        from livecell import transformations

        return transformations.distinct_until_changed(self)

    def map(self, fn: Callable[[T | None], U]) -> MediatorCell[U]:
        from livecell import transformations

        return transformations.map(self, fn)

    def map_not_null(self, transform: Callable[[T | None], U | None]) -> MediatorCell[U]:
        from livecell import operators

        return operators.map_not_null(self, transform)

    def switch_map(self, fn: Callable[[T | None], Cell[U] | None]) -> MediatorCell[U]:
        from livecell import transformations

        return transformations.switch_map(self, fn)

    def with_prev_value(self) -> MediatorCell[tuple[T | None, T | None]]:
        from livecell import operators

        return operators.with_prev_value(self)

    def observe_non_null(self, on_changed: Callable[[T], None]) -> Subscription[T]:
        from livecell import operators

        return operators.observe_non_null(self, on_changed)

    def __repr__(self) -> str:
        shown = repr(self._value) if self.is_set else "<unset>"
        return f"{type(self).__name__}({shown})"


class MutableCell(Cell[T]):
    """A cell whose value producers may replace."""

    def __init__(self, value: T = _UNSET) -> None:
        super().__init__(value)
        self._pending_lock = threading.Lock()
        self._pending = _UNSET

    def set(self, value: T | None) -> None:
        """Replace the value and notify every subscriber before returning."""
        self._set_value(value)

    def post(self, value: T | None) -> None:
        """set() that may be called from any thread.

        Off the scheduler thread the value is parked and a single set() of the
        newest parked value is marshaled; posts arriving before it runs are
        coalesced.
        """
        if _on_owner_thread():
            self.set(value)
            return
        with self._pending_lock:
            already_scheduled = self._pending is not _UNSET
            self._pending = value
        if already_scheduled:
            return
        logger.debug("Marshaling post to %s", _scheduler_thread.name)
        _scheduler(self._flush_pending)

    def _flush_pending(self) -> None:
        with self._pending_lock:
            value = self._pending
            self._pending = _UNSET
        if value is not _UNSET:
            self.set(value)
