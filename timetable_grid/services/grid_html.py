"""
Grid HTML - builds the timetable table with colspan/rowspan merged cells
"""

import html
from typing import Dict, List, Optional, Set

from ..config import COLORS, SPECIAL_PERIODS
from ..models.cell_key import CellKey
from ..models.grid import GridState
from ..models.layout import GridLayout
from ..models.merge import Absorbed, Span
from .merge_engine import ACROSS_DAYS, HORIZONTAL, VERTICAL, group_axis

SPECIAL_BY_SLOT = {p['time_slot']: p for p in SPECIAL_PERIODS}


def _covered_cells(state: GridState, layout: GridLayout, parent: CellKey,
                   span: Span) -> List[CellKey]:
    """Displayed cells actually absorbed into parent, walking from it"""
    if span.col_span > 1:
        start = layout.time_slot_index(parent.time_slot)
        line = layout.row_keys(parent.day, parent.class_name)[start + 1:start + span.col_span]
    elif span.row_span > 1:
        start = layout.class_index(parent.class_name)
        if start is None:
            return []
        line = layout.column_keys(parent.day, parent.time_slot)[start + 1:start + span.row_span]
    else:
        return []

    covered = []
    for key in line:
        if state.merges.get_merge(key) != Absorbed(parent):
            break
        covered.append(key)
    return covered


def _cell(key: CellKey, content: str, layout: GridLayout, kind: str,
          colspan: int = 1, rowspan: int = 1) -> Dict:
    special = SPECIAL_BY_SLOT.get(key.time_slot) if layout.is_locked(key.time_slot) else None
    return {
        'key': key,
        'content': content,
        'colspan': colspan,
        'rowspan': rowspan,
        'kind': kind,
        'special': special['name'] if special else None,
        'color': special['color'] if special else None,
    }


def build_grid_rows(state: GridState, layout: GridLayout) -> List[Dict]:
    """
    One row per (day, displayed class) with the cells to render.

    Absorbed cells are skipped when their parent's span covers them. Groups
    merged across days (break time) cannot span table rows of different
    days, so each day renders its own cell showing the parent's label.
    """
    rows = []
    covered: Set[CellKey] = set()

    for day in layout.days:
        for class_idx, class_name in enumerate(layout.displayed_classes):
            cells = []
            for key in layout.row_keys(day, class_name):
                if key in covered:
                    continue

                desc = state.merges.get_merge(key)
                content = state.get_cell_content(key)

                if isinstance(desc, Absorbed):
                    parent = desc.merged_into
                    if group_axis(parent, key) == ACROSS_DAYS:
                        label = state.get_cell_content(parent)
                        cells.append(_cell(key, label, layout, 'band'))
                        continue
                    # not covered by a rendered parent: draw it on its own
                    cells.append(_cell(key, content, layout, 'assigned' if content else 'empty'))
                    continue

                if isinstance(desc, Span) and desc.is_merged:
                    members = state.merges.members_of(key)
                    axis = group_axis(key, members[0]) if members else None
                    if axis == ACROSS_DAYS:
                        cells.append(_cell(key, content, layout, 'band'))
                        continue
                    if axis in (HORIZONTAL, VERTICAL):
                        spanned = _covered_cells(state, layout, key, desc)
                        covered.update(spanned)
                        colspan = 1 + len(spanned) if axis == HORIZONTAL else 1
                        rowspan = 1 + len(spanned) if axis == VERTICAL else 1
                        cells.append(_cell(key, content, layout, 'merged', colspan, rowspan))
                        continue

                cells.append(_cell(key, content, layout, 'assigned' if content else 'empty'))

            rows.append({
                'day': day,
                'class_name': class_name,
                'first_of_day': class_idx == 0,
                'cells': cells,
            })
    return rows


def render_grid_html(state: GridState, layout: GridLayout,
                     selected: Optional[CellKey] = None, title: str = "") -> str:
    """Render the grid as an HTML table"""
    border = f'2px solid {COLORS["border"]}'
    rows = build_grid_rows(state, layout)

    out = '<table style="width: 100%; border-collapse: collapse; font-size: 12px;">'
    if title:
        out += f'<caption style="font-weight: bold; padding: 6px;">{html.escape(title)}</caption>'

    out += '<tr>'
    out += f'<th rowspan="2" style="border: {border}; padding: 6px;">Day</th>'
    out += f'<th rowspan="2" style="border: {border}; padding: 6px;">Class</th>'
    out += f'<th colspan="{len(layout.time_slots)}" style="border: {border}; padding: 6px;">Time Slots</th>'
    out += '</tr><tr>'
    for slot in layout.time_slots:
        out += (f'<th style="background-color: {COLORS["header"]}; border: {border}; '
                f'padding: 4px; font-size: 11px;">{html.escape(slot)}</th>')
    out += '</tr>'

    for row in rows:
        out += '<tr>'
        if row['first_of_day']:
            out += (f'<td rowspan="{len(layout.displayed_classes)}" style="background-color: '
                    f'{COLORS["day"]}; border: {border}; padding: 6px; font-weight: bold;">'
                    f'{html.escape(row["day"])}</td>')
        out += f'<td style="border: {border}; padding: 6px;">{html.escape(row["class_name"])}</td>'

        for cell in row['cells']:
            text = cell['content'] or cell['special'] or ''
            if cell['key'] == selected:
                bg = COLORS['selected']
            elif cell['color']:
                bg = cell['color']
            elif cell['content']:
                bg = COLORS['assigned']
            else:
                bg = COLORS['empty']
            weight = 'bold' if cell['kind'] in ('merged', 'band') else 'normal'
            out += (f'<td colspan="{cell["colspan"]}" rowspan="{cell["rowspan"]}" '
                    f'title="{html.escape(cell["key"].label)}" '
                    f'style="background-color: {bg}; border: {border}; padding: 6px; '
                    f'text-align: center; font-weight: {weight};">{html.escape(text)}</td>')
        out += '</tr>'

    out += '</table>'
    return out
