"""livecell: observable single-value cells and the combinators built on them."""

from importlib.metadata import version as _version

__version__ = _version("livecell")

from livecell.cell import Cell, MutableCell, Subscription, set_scheduler
from livecell.mediator import MediatorCell
from livecell.operators import (
    combine,
    combine2,
    combine3,
    create_prev_value_cell,
    distinct_by,
    map_not_null,
    observe_non_null,
    with_prev_value,
)
from livecell.transformations import distinct_until_changed, switch_map
from livecell.event import SingleEvent
# textual NOT auto-imported — opt-in only
# transformations.map is not re-exported; it would shadow the builtin

__all__ = [
    "Cell",
    "MutableCell",
    "MediatorCell",
    "Subscription",
    "set_scheduler",
    "combine",
    "combine2",
    "combine3",
    "create_prev_value_cell",
    "distinct_by",
    "distinct_until_changed",
    "map_not_null",
    "observe_non_null",
    "switch_map",
    "with_prev_value",
    "SingleEvent",
]
