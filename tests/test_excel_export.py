from io import BytesIO

import openpyxl

from timetable_grid.config import BREAK_TIME_LABEL, BREAK_TIME_SLOT
from timetable_grid.models import CellKey, GridLayout, GridState
from timetable_grid.services import (
    TimetableExcelExporter,
    apply_break_time,
    assign,
    export_timetable_to_excel,
)


def make_state(layout: GridLayout) -> GridState:
    state = GridState()
    for slot in ("T1", "T2"):
        state = assign(state, layout, CellKey("MON", slot, "P1"), "ENG")
    for class_name in ("P1", "P2"):
        state = assign(state, layout, CellKey("MON", "T3", class_name), "SCE")
    return state


def test_workbook_layout_and_merged_ranges() -> None:
    layout = GridLayout(days=("MON", "TUE"), time_slots=("T1", "T2", "T3"), displayed_classes=("P1", "P2"))
    ws = TimetableExcelExporter(make_state(layout), layout).build_workbook(title="Week 1").active

    assert ws["A1"].value == "Week 1"
    assert [ws.cell(row=2, column=c).value for c in range(1, 6)] == ["Day", "Class", "T1", "T2", "T3"]
    assert ws["A3"].value == "MON"
    assert ws["B4"].value == "P2"
    assert ws["C3"].value == "ENG"
    assert ws["E3"].value == "SCE"

    ranges = {str(r) for r in ws.merged_cells.ranges}
    assert "A1:E1" in ranges
    assert "C3:D3" in ranges      # ENG across T1, T2
    assert "E3:E4" in ranges      # SCE over P1, P2
    assert "A3:A4" in ranges      # MON over both classes
    assert "A5:A6" in ranges


def test_export_bytes_open_as_workbook() -> None:
    layout = GridLayout.default(["P.1"])
    state = apply_break_time(GridState(), layout)
    data = export_timetable_to_excel(state, layout)

    ws = openpyxl.load_workbook(BytesIO(data)).active
    col = 3 + layout.time_slot_index(BREAK_TIME_SLOT)
    for row in range(3, 3 + len(layout.days)):
        assert ws.cell(row=row, column=col).value == BREAK_TIME_LABEL
