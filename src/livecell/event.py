"""SingleEvent — a cell for one-shot events such as navigation or toasts.

A plain cell re-delivers its current value to every new subscriber, so an
event set once would fire again each time a screen re-subscribes. A
SingleEvent only delivers values that were set() and not yet consumed, and
each set() is consumed by exactly one observer.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from livecell.cell import MutableCell, Subscription

T = TypeVar("T")


class SingleEvent(MutableCell[T]):
    """A cell whose values are delivered once, to one observer."""

    def __init__(self) -> None:
        super().__init__()
        self._unconsumed = False

    def subscribe(self, observer: Callable[[T | None], None]) -> Subscription[T]:
        def _consume(value: T | None) -> None:
            if self._unconsumed:
                self._unconsumed = False
                observer(value)

        return super().subscribe(_consume)

    def set(self, value: T | None) -> None:
        self._unconsumed = True
        super().set(value)

    def call(self) -> None:
        """Fire the event without a payload."""
        self.set(None)
