"""
Break Time - forces the recess slot into one band across the week
"""

import logging

from ..config import BREAK_TIME_LABEL
from ..models.cell_key import CellKey
from ..models.grid import GridState
from ..models.layout import GridLayout
from ..models.merge import Absorbed, Span

log = logging.getLogger(__name__)


def apply_break_time(state: GridState, layout: GridLayout) -> GridState:
    """
    Merge the break slot across all days for every displayed class.

    The first day's cell becomes the parent holding the label; the other
    days are absorbed into it and carry no content. Subject equality is not
    consulted, and running it again gives the same state.
    """
    slot = layout.break_time_slot
    if not layout.displayed_classes or not layout.days:
        return state
    if slot is None or layout.time_slot_index(slot) is None:
        log.debug("Layout has no break slot; nothing to merge")
        return state

    new = state.copy()
    first_day = layout.days[0]
    for class_name in layout.displayed_classes:
        parent = CellKey(first_day, slot, class_name)
        new.content.set_content(parent, BREAK_TIME_LABEL)
        new.merges.set_merge(parent, Span(col_span=len(layout.days), row_span=1))

        for day in layout.days[1:]:
            key = CellKey(day, slot, class_name)
            new.merges.set_merge(key, Absorbed(parent))
            new.content.clear_content(key)

    log.info(f"Break time applied at {slot} for {len(layout.displayed_classes)} class(es)")
    return new
