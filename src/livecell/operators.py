"""Combinators over cells.

Each function takes one or more cells and returns a new MediatorCell whose
value is driven by its sources' notifications:

- combine2 / combine3: tuples of source values, published only while every
  source holds a non-None value. A tuple that was published is kept when a
  source later goes back to None.
- distinct_by: republish only when a predicate says the value is new. The
  first value always goes through.
- map_not_null: publish transform(v) unless it is None.
- with_prev_value: publish (previous, current) on every notification.

observe_non_null is a subscription filter rather than a derived cell.
"""

from __future__ import annotations

from typing import Callable, TypeVar, overload

from livecell.cell import Cell, Subscription
from livecell.mediator import MediatorCell

T = TypeVar("T")
A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
K = TypeVar("K")


def observe_non_null(cell: Cell[T], on_changed: Callable[[T], None]) -> Subscription[T]:
    """Subscribe on_changed, dropping None notifications before they reach it."""

    def _observer(value: T | None) -> None:
        if value is not None:
            on_changed(value)

    return cell.subscribe(_observer)


class _CombineState:
    __slots__ = ("wiring",)

    def __init__(self) -> None:
        self.wiring = True


def _combine_all(sources: tuple[Cell, ...]) -> MediatorCell[tuple]:
    result: MediatorCell[tuple] = MediatorCell()
    state = _CombineState()

    def _recompute(_value=None) -> None:
        # Sources that are already set deliver while being wired; the single
        # initial computation below covers them.
        if state.wiring:
            return
        values = tuple(source.get() for source in sources)
        if all(value is not None for value in values):
            result.set(values)

    for source in sources:
        result.add_source(source, _recompute)
    state.wiring = False
    _recompute()
    return result


def combine2(a: Cell[A], b: Cell[B]) -> MediatorCell[tuple[A, B]]:
    """Cell of (a, b), published whenever both hold non-None values.

    Usage:
        a, b = MutableCell(), MutableCell()
        pair = combine2(a, b)
        a.set(True)       # pair.get() is None
        b.set(False)      # pair.get() == (True, False)
        b.set(None)       # pair.get() == (True, False), kept
    """
    return _combine_all((a, b))


def combine3(a: Cell[A], b: Cell[B], c: Cell[C]) -> MediatorCell[tuple[A, B, C]]:
    """Cell of (a, b, c), published whenever all three hold non-None values."""
    return _combine_all((a, b, c))


@overload
def combine(a: Cell[A], b: Cell[B]) -> MediatorCell[tuple[A, B]]: ...
@overload
def combine(a: Cell[A], b: Cell[B], c: Cell[C]) -> MediatorCell[tuple[A, B, C]]: ...


def combine(*cells):
    """combine2 or combine3, picked by the number of cells."""
    if len(cells) == 2:
        return combine2(*cells)
    if len(cells) == 3:
        return combine3(*cells)
    raise TypeError(f"combine() takes 2 or 3 cells, got {len(cells)}")


class _DistinctState:
    """Last value seen by a distinct_by cell."""

    __slots__ = ("initialized", "last_value")

    def __init__(self) -> None:
        self.initialized = False
        self.last_value = None


def distinct_by(source: Cell[T], predicate: Callable[[T | None, T | None], bool]) -> MediatorCell[T]:
    """Republish source values for which predicate(new, last) is true.

    The first value source delivers, None included, is always published.
    Published values are the source's own objects, never copies.

    Usage:
        items = MutableCell([])
        changed = distinct_by(items, lambda new, old: new != old)
    """
    result: MediatorCell[T] = MediatorCell()
    state = _DistinctState()

    def _on_changed(value: T | None) -> None:
        if not state.initialized:
            state.initialized = True
            state.last_value = value
            result.set(value)
        elif predicate(value, state.last_value):
            state.last_value = value
            result.set(value)

    result.add_source(source, _on_changed)
    return result


def map_not_null(source: Cell[T], transform: Callable[[T | None], K | None]) -> MediatorCell[K]:
    """Publish transform(value) for each source value, skipping None results.

    transform also receives None when the source is set to None.
    """
    result: MediatorCell[K] = MediatorCell()

    def _on_changed(value: T | None) -> None:
        mapped = transform(value)
        if mapped is not None:
            result.set(mapped)

    result.add_source(source, _on_changed)
    return result


class _PrevValueState:
    __slots__ = ("past_value",)

    def __init__(self) -> None:
        self.past_value = None


def create_prev_value_cell(source: Cell[T]) -> MediatorCell[tuple[T | None, T | None]]:
    """Cell of (previous, current) pairs, one per source notification.

    previous is None on the first emission. Nothing is filtered: repeated
    values and repeated Nones each produce a pair.
    """
    result: MediatorCell[tuple[T | None, T | None]] = MediatorCell()
    state = _PrevValueState()

    def _on_changed(value: T | None) -> None:
        # Updated before publishing so a re-entrant set() pairs with value.
        pair = (state.past_value, value)
        state.past_value = value
        result.set(pair)

    result.add_source(source, _on_changed)
    return result


def with_prev_value(source: Cell[T]) -> MediatorCell[tuple[T | None, T | None]]:
    return create_prev_value_cell(source)
