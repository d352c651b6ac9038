from timetable_grid.config import BREAK_TIME_LABEL, BREAK_TIME_SLOT, DAYS
from timetable_grid.models import Absorbed, CellKey, GridLayout, GridState, Span
from timetable_grid.services import apply_break_time, assign, clear


def test_break_time_merges_across_all_days() -> None:
    layout = GridLayout.default(["P.1", "P.2"])
    state = apply_break_time(GridState(), layout)

    for class_name in ("P.1", "P.2"):
        parent = CellKey("MON", BREAK_TIME_SLOT, class_name)
        assert state.content.get_content(parent) == BREAK_TIME_LABEL
        assert state.merges.get_merge(parent) == Span(col_span=len(DAYS), row_span=1)
        for day in DAYS[1:]:
            key = CellKey(day, BREAK_TIME_SLOT, class_name)
            assert state.merges.get_merge(key) == Absorbed(parent)
            assert state.content.get_content(key) is None


def test_break_time_is_idempotent() -> None:
    layout = GridLayout.default(["P.1"])
    once = apply_break_time(GridState(), layout)
    twice = apply_break_time(once, layout)
    assert twice.content == once.content
    assert twice.merges == once.merges


def test_break_time_overrides_existing_content() -> None:
    layout = GridLayout(days=("MON", "TUE"), time_slots=("T1", "BRK"),
                        displayed_classes=("P1",), break_time_slot="BRK")
    state = GridState()
    state.content.set_content(CellKey("TUE", "BRK", "P1"), "ENG")

    state = apply_break_time(state, layout)
    assert state.content.get_content(CellKey("MON", "BRK", "P1")) == BREAK_TIME_LABEL
    assert state.content.get_content(CellKey("TUE", "BRK", "P1")) is None


def test_break_time_without_classes_is_noop() -> None:
    layout = GridLayout.default()
    state = GridState()
    assert apply_break_time(state, layout) is state


def test_break_time_without_break_slot_is_noop() -> None:
    layout = GridLayout(days=("MON",), time_slots=("T1",), displayed_classes=("P1",))
    state = GridState()
    assert apply_break_time(state, layout).is_empty()


def test_break_band_is_not_editable() -> None:
    layout = GridLayout.default(["P.1"])
    state = apply_break_time(GridState(), layout)
    key = CellKey("TUE", BREAK_TIME_SLOT, "P.1")

    assert assign(state, layout, key, "ENG") is state
    assert clear(state, layout, CellKey("MON", BREAK_TIME_SLOT, "P.1")) is state


def test_break_band_stops_horizontal_runs() -> None:
    layout = GridLayout.default(["P.1"])
    state = apply_break_time(GridState(), layout)
    state = assign(state, layout, CellKey("MON", "9:00am-10:30am", "P.1"), "ENG")
    state = assign(state, layout, CellKey("MON", "11:00am-12:00pm", "P.1"), "ENG")
    assert state.merges.get_merge(CellKey("MON", "9:00am-10:30am", "P.1")) is None
    assert state.merges.get_merge(CellKey("MON", "11:00am-12:00pm", "P.1")) is None


def test_break_time_logs_slot_and_class_count(caplog) -> None:
    layout = GridLayout.default(["P.1", "P.2"])
    with caplog.at_level("INFO", logger="timetable_grid.services.break_time"):
        apply_break_time(GridState(), layout)
    assert f"Break time applied at {BREAK_TIME_SLOT} for 2 class(es)" in caplog.text
