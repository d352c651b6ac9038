"""
Merge Engine - folds equal neighbouring cells into spanning cells

Assigning a subject scans the cell's row (adjacent time slots, same day and
class) and column (adjacent displayed classes, same day and time slot) for
contiguous cells holding the same subject and merges them into one cell.
Clearing reverses it.

Every operation returns a new GridState; the state passed in is left
untouched so callers can swap the whole grid in one assignment.

Only one axis is merged per group. Horizontal wins when a single assign
could merge both ways.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from ..models.cell_key import CellKey
from ..models.grid import GridState, MergeStore
from ..models.layout import GridLayout
from ..models.merge import SINGLE, Absorbed, Span

log = logging.getLogger(__name__)

HORIZONTAL = "horizontal"      # along time slots
VERTICAL = "vertical"          # along displayed classes
ACROSS_DAYS = "across_days"    # break-time bands


# ============================================================================
# GEOMETRY
# ============================================================================

def _position(layout: GridLayout, key: CellKey, axis: str) -> Optional[int]:
    if axis == HORIZONTAL:
        return layout.time_slot_index(key.time_slot)
    if axis == VERTICAL:
        return layout.class_index(key.class_name)
    return layout.day_index(key.day)


def _step(layout: GridLayout, key: CellKey, axis: str, offset: int) -> Optional[CellKey]:
    """Neighbour of key along axis, or None at the grid edge"""
    pos = _position(layout, key, axis)
    if pos is None:
        return None
    target = pos + offset
    if axis == HORIZONTAL:
        if 0 <= target < len(layout.time_slots):
            return CellKey(key.day, layout.time_slots[target], key.class_name)
    elif axis == VERTICAL:
        if 0 <= target < len(layout.displayed_classes):
            return CellKey(key.day, key.time_slot, layout.displayed_classes[target])
    elif 0 <= target < len(layout.days):
        return CellKey(layout.days[target], key.time_slot, key.class_name)
    return None


def group_axis(parent: CellKey, member: CellKey) -> Optional[str]:
    """Axis along which member lies relative to parent"""
    if parent.same_row(member):
        return HORIZONTAL
    if parent.same_column(member):
        return VERTICAL
    if parent.time_slot == member.time_slot and parent.class_name == member.class_name:
        return ACROSS_DAYS
    return None


# ============================================================================
# GROUP QUERIES
# ============================================================================

def is_merge_parent(state: GridState, key: CellKey) -> bool:
    desc = state.merges.get_merge(key)
    return isinstance(desc, Span) and desc.is_merged


def group_members(state: GridState, parent: CellKey) -> List[CellKey]:
    return state.merges.members_of(parent)


def _group_of(state: GridState, key: CellKey) -> Optional[Tuple[CellKey, Optional[str]]]:
    """(parent, axis) of the merge group key belongs to, if any"""
    desc = state.merges.get_merge(key)
    if isinstance(desc, Absorbed):
        return desc.merged_into, group_axis(desc.merged_into, key)
    if isinstance(desc, Span) and desc.is_merged:
        members = state.merges.members_of(key)
        if members:
            return key, group_axis(key, members[0])
        return key, HORIZONTAL if desc.col_span > 1 else VERTICAL
    return None


def _joins_run(state: GridState, layout: GridLayout, key: CellKey,
               subject: str, axis: str) -> bool:
    if layout.is_locked(key.time_slot):
        return False
    if state.content.get_content(key) != subject:
        return False

    desc = state.merges.get_merge(key)
    if isinstance(desc, Absorbed):
        parent = desc.merged_into
        if not isinstance(state.merges.get_merge(parent), Span):
            log.debug(f"Dangling merge reference {key} -> {parent} breaks the run")
            return False
        return (
            group_axis(parent, key) == axis
            and state.content.get_content(parent) == subject
        )

    group = _group_of(state, key)
    return group is None or group[1] == axis


def _run(state: GridState, layout: GridLayout, key: CellKey,
         subject: str, axis: str) -> List[CellKey]:
    group = _group_of(state, key)
    if group is not None and group[1] != axis:
        return [key]

    run = [key]
    nxt = _step(layout, key, axis, 1)
    while nxt is not None and _joins_run(state, layout, nxt, subject, axis):
        run.append(nxt)
        nxt = _step(layout, nxt, axis, 1)

    prev = _step(layout, key, axis, -1)
    while prev is not None and _joins_run(state, layout, prev, subject, axis):
        run.insert(0, prev)
        prev = _step(layout, prev, axis, -1)
    return run


def horizontal_run(state: GridState, layout: GridLayout, key: CellKey,
                   subject: Optional[str] = None) -> List[CellKey]:
    """Maximal run of equal cells through key along the time slots"""
    subject = subject if subject is not None else state.content.get_content(key)
    if not subject:
        return [key]
    return _run(state, layout, key, subject, HORIZONTAL)


def vertical_run(state: GridState, layout: GridLayout, key: CellKey,
                 subject: Optional[str] = None) -> List[CellKey]:
    """Maximal run of equal cells through key along the displayed classes"""
    subject = subject if subject is not None else state.content.get_content(key)
    if not subject:
        return [key]
    return _run(state, layout, key, subject, VERTICAL)


# ============================================================================
# MUTATION HELPERS (operate on a private copy)
# ============================================================================

def _resize(merges: MergeStore, parent: CellKey) -> None:
    """Fit parent's span to the members still pointing at it"""
    if not isinstance(merges.get_merge(parent), Span):
        return
    members = merges.members_of(parent)
    if not members:
        merges.clear_merge(parent)
    elif group_axis(parent, members[0]) == VERTICAL:
        merges.set_merge(parent, Span(col_span=1, row_span=1 + len(members)))
    else:
        merges.set_merge(parent, Span(col_span=1 + len(members), row_span=1))


def _fold(merges: MergeStore, run: List[CellKey], axis: str) -> None:
    """Make run[0] the parent of the whole run"""
    parent = run[0]

    # a parent hidden from the layout can still own cells of the run
    for key in run:
        desc = merges.get_merge(key)
        if isinstance(desc, Absorbed) and desc.merged_into not in run:
            merges.clear_merge(key)
            _resize(merges, desc.merged_into)

    for member in merges.members_of(parent):
        if member not in run:
            merges.clear_merge(member)

    existing = merges.get_merge(parent)
    base = existing if isinstance(existing, Span) else SINGLE
    if axis == HORIZONTAL:
        merges.set_merge(parent, replace(base, col_span=len(run)))
    else:
        merges.set_merge(parent, replace(base, row_span=len(run)))

    for key in run[1:]:
        was_parent = isinstance(merges.get_merge(key), Span)
        merges.set_merge(key, Absorbed(parent))
        if was_parent:
            # members left outside the run would point at a non-parent
            for orphan in merges.members_of(key):
                merges.clear_merge(orphan)


def _regroup(merges: MergeStore, cells: List[CellKey], axis: Optional[str]) -> None:
    """Turn an ordered, contiguous list of cells into one group"""
    if not cells:
        return
    parent = cells[0]
    if len(cells) == 1:
        merges.clear_merge(parent)
        return
    if axis == VERTICAL:
        merges.set_merge(parent, Span(col_span=1, row_span=len(cells)))
    else:
        merges.set_merge(parent, Span(col_span=len(cells), row_span=1))
    for key in cells[1:]:
        merges.set_merge(key, Absorbed(parent))


def _release(state: GridState, layout: GridLayout, key: CellKey) -> None:
    """
    Take key out of its merge group, keeping its content.

    The cells before key stay with the current parent; the cells after it
    become a separate group led by the first of them.
    """
    group = _group_of(state, key)
    if group is None:
        state.merges.clear_merge(key)
        return

    parent, axis = group
    if not isinstance(state.merges.get_merge(parent), Span):
        state.merges.clear_merge(key)
        return

    def order(cell: CellKey):
        pos = _position(layout, cell, axis) if axis else None
        return (pos is None, pos if pos is not None else 0)

    cells = sorted([parent] + state.merges.members_of(parent), key=order)
    idx = cells.index(key)
    state.merges.clear_merge(key)
    _regroup(state.merges, cells[:idx], axis)
    _regroup(state.merges, cells[idx + 1:], axis)


# ============================================================================
# OPERATIONS
# ============================================================================

def assign(state: GridState, layout: GridLayout, key: CellKey, subject: str) -> GridState:
    """Assign subject to key and merge it with equal neighbours"""
    if not subject:
        return clear(state, layout, key)
    if layout.is_locked(key.time_slot):
        log.debug(f"Ignoring assign on locked slot {key}")
        return state

    new = state.copy()
    if key in new.merges and new.content.get_content(key) != subject:
        _release(new, layout, key)
    new.content.set_content(key, subject)

    row = _run(new, layout, key, subject, HORIZONTAL)
    col = _run(new, layout, key, subject, VERTICAL)

    if len(row) > 1:
        _fold(new.merges, row, HORIZONTAL)
        log.debug(f"Merged {len(row)} cells horizontally into {row[0]}")

    if len(col) > 1:
        group = _group_of(new, key)
        if group is None or group[1] == VERTICAL:
            _fold(new.merges, col, VERTICAL)
            log.debug(f"Merged {len(col)} cells vertically into {col[0]}")

    return new


def clear(state: GridState, layout: GridLayout, key: CellKey) -> GridState:
    """
    Clear key.

    - absorbed cell: removed, and its group is split around it
    - merge parent: the whole group is removed
    - standalone cell: removed (no-op when already empty)
    """
    if layout.is_locked(key.time_slot):
        log.debug(f"Ignoring clear on locked slot {key}")
        return state

    new = state.copy()
    desc = new.merges.get_merge(key)

    if isinstance(desc, Absorbed):
        _release(new, layout, key)
    elif is_merge_parent(new, key):
        for member in new.merges.members_of(key):
            new.merges.clear_merge(member)
            new.content.clear_content(member)

    new.merges.clear_merge(key)
    new.content.clear_content(key)
    return new
