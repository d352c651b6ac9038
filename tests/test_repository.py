import pytest

from timetable_grid.config import SCHOOL_NAME, Messages, load_settings
from timetable_grid.database import check_connection, create_db_engine
from timetable_grid.models import CellKey, GridLayout, GridState, Span
from timetable_grid.services import TimetableRepository, assign, build_save_payload


@pytest.fixture
def repository(tmp_path) -> TimetableRepository:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'timetable.db'}")
    assert check_connection(engine)
    return TimetableRepository(engine)


def make_state(layout: GridLayout) -> GridState:
    state = assign(GridState(), layout, CellKey("MON", "8:00am-9:00am", "P.1"), "ENG")
    state = assign(state, layout, CellKey("MON", "9:00am-10:30am", "P.1"), "ENG")
    state = assign(state, layout, CellKey("TUE", "8:00am-9:00am", "P.2"), "MTC")
    return state


def test_payload_requires_data_then_section() -> None:
    layout = GridLayout.default(["P.1"])
    assert build_save_payload(GridState(), layout, None, []).error == Messages.NO_DATA

    state = make_state(layout)
    result = build_save_payload(state, layout, None, ["P.1", "P.2"])
    assert not result.ok
    assert result.error == Messages.NO_SECTION


def test_payload_skips_classes_outside_section_and_locked_slots() -> None:
    layout = GridLayout.default(["P.1", "P.2"])
    state = make_state(layout)
    state.content.set_content(CellKey("MON", "7:30am-8:00am", "P.1"), "MORNING TEA")
    state.content.set_content(CellKey("WED", "8:00am-9:00am", "P.5"), "SCE")

    result = build_save_payload(state, layout, "lowerPrimary", ["P.1", "P.2"])
    assert result.ok
    payload = result.payload
    assert [(e.day, e.time_slot, e.class_name, e.subject) for e in payload.entries] == [
        ("MON", "8:00am-9:00am", "P.1", "ENG"),
        ("MON", "9:00am-10:30am", "P.1", "ENG"),
        ("TUE", "8:00am-9:00am", "P.2", "MTC"),
    ]
    assert all(e.section == "lowerPrimary" for e in payload.entries)
    assert payload.classes == ["P.1", "P.2"]
    assert payload.name == f"{SCHOOL_NAME} | Section: Lower Primary | Classes: P.1, P.2"
    assert len(payload.special_periods) == 4


def test_payload_without_valid_entries() -> None:
    layout = GridLayout.default(["P.5"])
    state = assign(GridState(), layout, CellKey("MON", "8:00am-9:00am", "P.5"), "SCE")
    result = build_save_payload(state, layout, "lowerPrimary", ["P.1", "P.2"])
    assert result.error == Messages.NO_VALID_ENTRIES


def test_save_list_and_load_round_trip(repository) -> None:
    layout = GridLayout.default(["P.1", "P.2"])
    state = make_state(layout)
    payload = build_save_payload(state, layout, "lowerPrimary", ["P.1", "P.2"]).payload

    timetable_id = repository.save(payload)
    listing = repository.list_timetables()
    assert list(listing['id']) == [timetable_id]
    assert listing['entry_count'].iloc[0] == 3

    header = repository.load_header(timetable_id)
    assert header['section'] == "lowerPrimary"
    assert header['classes'] == ["P.1", "P.2"]

    entries = repository.load_entries(timetable_id)
    assert len(entries) == 3

    loaded = repository.load_state(timetable_id, layout)
    assert loaded.content == state.content
    assert loaded.merges == state.merges
    assert loaded.get_cell_spans(CellKey("MON", "8:00am-9:00am", "P.1")) == Span(2, 1)


def test_missing_timetable(repository) -> None:
    assert repository.load_header(42) is None
    assert repository.load_entries(42).empty
    assert repository.list_timetables().empty


def test_delete(repository) -> None:
    layout = GridLayout.default(["P.1", "P.2"])
    payload = build_save_payload(make_state(layout), layout, "lowerPrimary", ["P.1", "P.2"]).payload
    timetable_id = repository.save(payload)

    assert repository.delete(timetable_id)
    assert repository.load_header(timetable_id) is None
    assert repository.load_entries(timetable_id).empty
    assert not repository.delete(timetable_id)


def test_load_settings_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("TIMETABLE_DB_URL", "sqlite:///other.db")
    assert load_settings().db.url == "sqlite:///other.db"

    monkeypatch.delenv("TIMETABLE_DB_URL")
    assert load_settings().db.url == "sqlite:///timetable_grid.db"


def test_reload_keeps_merges_that_depend_on_assign_order(repository) -> None:
    layout = GridLayout.default(["P.1", "P.2"])
    state = GridState()
    for key in (CellKey("MON", "8:00am-9:00am", "P.2"),
                CellKey("MON", "9:00am-10:30am", "P.2"),
                CellKey("MON", "8:00am-9:00am", "P.1")):
        state = assign(state, layout, key, "ENG")
    assert state.merges.get_merge(CellKey("MON", "8:00am-9:00am", "P.2")) == Span(2, 1)

    payload = build_save_payload(state, layout, "lowerPrimary", ["P.1", "P.2"]).payload
    loaded = repository.load_state(repository.save(payload), layout)

    assert loaded.content == state.content
    assert loaded.merges == state.merges
    assert loaded.merges.get_merge(CellKey("MON", "8:00am-9:00am", "P.1")) is None


def test_saved_entries_carry_merge_descriptors(repository) -> None:
    layout = GridLayout.default(["P.1", "P.2"])
    payload = build_save_payload(make_state(layout), layout, "lowerPrimary", ["P.1", "P.2"]).payload
    assert [(e.col_span, e.row_span, e.merged_into) for e in payload.entries] == [
        (2, 1, None),
        (1, 1, "MON-8:00am-9:00am-P.1"),
        (1, 1, None),
    ]

    entries = repository.load_entries(repository.save(payload))
    assert list(entries['col_span']) == [2, 1, 1]
    assert entries['merged_into'].iloc[1] == "MON-8:00am-9:00am-P.1"
