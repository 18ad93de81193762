"""MediatorCell — a mutable cell that reacts to other cells.

Every derived cell in livecell is a MediatorCell. It owns one Subscription
per source; dispose() releases them all. Sources are subscribed eagerly, so
the mediator's value is always up to date on read.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from livecell.cell import Cell, MutableCell, Subscription

T = TypeVar("T")

logger = logging.getLogger("livecell.mediator")


class _Source:
    """A source cell together with the callback the mediator runs for it."""

    __slots__ = ("cell", "on_changed", "subscription")

    def __init__(self, cell: Cell, on_changed: Callable) -> None:
        self.cell = cell
        self.on_changed = on_changed
        self.subscription: Subscription | None = None


class MediatorCell(MutableCell[T]):
    """A cell fed by callbacks on one or more source cells."""

    def __init__(self) -> None:
        super().__init__()
        self._sources: dict[int, _Source] = {}
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def add_source(self, source: Cell, on_changed: Callable) -> None:
        """Run on_changed with every value source publishes.

        If source is already set, on_changed runs immediately. Adding the same
        source again with the same callback does nothing; with a different
        callback it raises ValueError. If on_changed raises on that immediate
        run, source is not added.
        """
        key = id(source)
        existing = self._sources.get(key)
        if existing is not None:
            if existing.on_changed != on_changed:
                raise ValueError(f"{source!r} was already added with a different callback")
            return
        entry = _Source(source, on_changed)
        self._sources[key] = entry
        try:
            entry.subscription = source.subscribe(on_changed)
        except Exception:
            if self._sources.get(key) is entry:
                del self._sources[key]
            raise

    def remove_source(self, source: Cell) -> None:
        """Stop listening to source. Unknown sources are ignored."""
        entry = self._sources.pop(id(source), None)
        if entry is not None and entry.subscription is not None:
            entry.subscription.unsubscribe()

    def dispose(self) -> None:
        """Detach from every source. The cell keeps its last value."""
        if self._disposed:
            return
        self._disposed = True
        logger.debug("Disposing %r (%d sources)", self, len(self._sources))
        for entry in list(self._sources.values()):
            if entry.subscription is not None:
                entry.subscription.unsubscribe()
        self._sources.clear()
