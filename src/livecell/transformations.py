"""Plain transformations — map, switch_map, distinct_until_changed.

Unlike map_not_null, these forward None. A cell that was never set never
calls the transform, but a cell explicitly set to None does, so transforms
on nullable cells must guard for None themselves:

    flag = MutableCell(None)
    inverse = map(flag, lambda v: not v)           # fine: not None is True
    length = map(flag, lambda v: len(v))           # raises TypeError
    length = map(flag, lambda v: len(v) if v is not None else None)
"""

from __future__ import annotations

from typing import Callable, TypeVar

from livecell.cell import Cell
from livecell.mediator import MediatorCell
from livecell.operators import distinct_by

T = TypeVar("T")
U = TypeVar("U")


def map(source: Cell[T], fn: Callable[[T | None], U]) -> MediatorCell[U]:
    """Publish fn(value) for every value source publishes, None included."""
    result: MediatorCell[U] = MediatorCell()
    result.add_source(source, lambda value: result.set(fn(value)))
    return result


class _SwitchState:
    __slots__ = ("inner",)

    def __init__(self) -> None:
        self.inner: Cell | None = None


def switch_map(source: Cell[T], fn: Callable[[T | None], Cell[U] | None]) -> MediatorCell[U]:
    """Mirror whichever cell fn picks for the latest source value.

    Switching detaches from the previously picked cell. Picking the same cell
    again keeps the current link; picking None detaches and keeps the last
    mirrored value.
    """
    result: MediatorCell[U] = MediatorCell()
    state = _SwitchState()

    def _on_changed(value: T | None) -> None:
        inner = fn(value)
        if inner is state.inner:
            return
        if state.inner is not None:
            result.remove_source(state.inner)
        state.inner = inner
        if inner is not None:
            result.add_source(inner, result.set)

    result.add_source(source, _on_changed)
    return result


def distinct_until_changed(source: Cell[T]) -> MediatorCell[T]:
    """Republish source values that differ from the last one published."""
    return distinct_by(source, lambda new, old: new != old)
