# ============================================================================
# EXCEL EXPORT - Timetable grid with merged cells
# ============================================================================
# Features:
# - One worksheet laid out like the on-screen grid (Day | Class | slots...)
# - Merged subjects become merged Excel ranges (colspan / rowspan)
# - Special periods filled with their legend colour
# - Day column merged over the displayed classes
# ============================================================================

import logging
from io import BytesIO
from typing import Optional

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..config import COLORS, SCHOOL_NAME, TIMETABLE_TITLE
from ..models.grid import GridState
from ..models.layout import GridLayout
from .grid_html import build_grid_rows

log = logging.getLogger(__name__)

FIRST_SLOT_COLUMN = 3
THIN = Side(style='thin', color='000000')
BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)


def _fill(color: str) -> PatternFill:
    color = color.lstrip('#')
    return PatternFill(start_color=color, end_color=color, fill_type='solid')


class TimetableExcelExporter:
    """Write an edited grid to an .xlsx workbook"""

    def __init__(self, state: GridState, layout: GridLayout):
        self.state = state
        self.layout = layout

    def build_workbook(self, title: Optional[str] = None) -> openpyxl.Workbook:
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Timetable"

        last_column = FIRST_SLOT_COLUMN + len(self.layout.time_slots) - 1
        row = self._render_title(ws, title or f"{SCHOOL_NAME} - {TIMETABLE_TITLE}", last_column)
        row = self._render_headers(ws, row)
        self._render_body(ws, row)
        self._size_columns(ws, last_column)
        return wb

    def to_bytes(self, title: Optional[str] = None) -> bytes:
        """Workbook contents, ready for st.download_button"""
        output = BytesIO()
        self.build_workbook(title).save(output)
        return output.getvalue()

    def _render_title(self, ws, title: str, last_column: int) -> int:
        cell = ws.cell(row=1, column=1, value=title)
        cell.font = Font(bold=True, size=14)
        cell.alignment = Alignment(horizontal='center', vertical='center')
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=last_column)
        return 2

    def _render_headers(self, ws, row: int) -> int:
        headers = ["Day", "Class"] + list(self.layout.time_slots)
        for col, value in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.font = Font(bold=True, size=10)
            cell.fill = _fill(COLORS['header'])
            cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
            cell.border = BORDER
        return row + 1

    def _render_body(self, ws, start_row: int) -> None:
        classes_per_day = len(self.layout.displayed_classes)

        for offset, grid_row in enumerate(build_grid_rows(self.state, self.layout)):
            row = start_row + offset

            if grid_row['first_of_day']:
                cell = ws.cell(row=row, column=1, value=grid_row['day'])
                cell.font = Font(bold=True)
                cell.fill = _fill(COLORS['day'])
                cell.alignment = Alignment(horizontal='center', vertical='center')
                if classes_per_day > 1:
                    ws.merge_cells(start_row=row, start_column=1,
                                   end_row=row + classes_per_day - 1, end_column=1)

            ws.cell(row=row, column=2, value=grid_row['class_name']).border = BORDER

            for item in grid_row['cells']:
                col = FIRST_SLOT_COLUMN + self.layout.time_slot_index(item['key'].time_slot)
                text = item['content'] or item['special'] or None
                cell = ws.cell(row=row, column=col, value=text)
                cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
                cell.border = BORDER
                if item['color']:
                    cell.fill = _fill(item['color'])
                if item['kind'] in ('merged', 'band'):
                    cell.font = Font(bold=True)

                if item['colspan'] > 1 or item['rowspan'] > 1:
                    ws.merge_cells(start_row=row, start_column=col,
                                   end_row=row + item['rowspan'] - 1,
                                   end_column=col + item['colspan'] - 1)

        log.info(f"Exported {len(self.layout.days)} day(s) x {classes_per_day} class(es) to Excel")

    def _size_columns(self, ws, last_column: int) -> None:
        ws.column_dimensions['A'].width = 8
        ws.column_dimensions['B'].width = 14
        for col in range(FIRST_SLOT_COLUMN, last_column + 1):
            ws.column_dimensions[get_column_letter(col)].width = 16


def export_timetable_to_excel(state: GridState, layout: GridLayout,
                              title: Optional[str] = None) -> bytes:
    return TimetableExcelExporter(state, layout).to_bytes(title)
