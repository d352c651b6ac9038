"""
Timetable Repository - saves and reloads edited grids

A save stores one header row per timetable and one entry row per assigned
cell (merged cells included), skipping special periods. Each entry carries
its merge descriptor, so a reload restores the grid exactly as it was saved.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import pandas as pd
from sqlalchemy import text
from sqlalchemy.engine import Engine

from ..config import SCHOOL_NAME, SECTION_LABELS, SPECIAL_PERIODS, DatabaseConfig, Messages
from ..models.cell_key import CellKey, make_key
from ..models.grid import GridState
from ..models.layout import GridLayout
from ..models.merge import Absorbed, Span

log = logging.getLogger(__name__)

HEADERS = DatabaseConfig.HEADERS_TABLE
ENTRIES = DatabaseConfig.ENTRIES_TABLE


@dataclass
class TimetableEntry:
    day: str
    time_slot: str
    subject: str
    section: str
    class_name: str
    col_span: int = 1
    row_span: int = 1
    merged_into: Optional[str] = None


@dataclass
class SavePayload:
    name: str
    section: str
    classes: List[str]
    entries: List[TimetableEntry]
    special_periods: List[Dict] = field(default_factory=lambda: list(SPECIAL_PERIODS))


@dataclass
class PayloadResult:
    payload: Optional[SavePayload] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.payload is not None


def build_timetable_name(section: str, classes: Sequence[str]) -> str:
    label = SECTION_LABELS.get(section, section)
    return f"{SCHOOL_NAME} | Section: {label} | Classes: {', '.join(classes)}"


def _order(layout: GridLayout, key: CellKey):
    day = layout.day_index(key.day)
    slot = layout.time_slot_index(key.time_slot)
    return (
        day if day is not None else len(layout.days),
        slot if slot is not None else len(layout.time_slots),
        key.class_name,
    )


def build_save_payload(state: GridState, layout: GridLayout, section: Optional[str],
                       selectable_classes: Sequence[str]) -> PayloadResult:
    """Collect the entries worth saving, or explain why there are none"""
    if len(state.content) == 0:
        return PayloadResult(error=Messages.NO_DATA)
    if not section:
        return PayloadResult(error=Messages.NO_SECTION)

    allowed = set(selectable_classes)
    entries = []
    for key, subject in sorted(state.content.items(), key=lambda item: _order(layout, item[0])):
        if layout.is_locked(key.time_slot):
            continue
        if not subject:
            continue
        if key.class_name not in allowed:
            log.warning(f"Skipping {key.label}: class not in section {section}")
            continue
        desc = state.merges.get_merge(key)
        spans = state.get_cell_spans(key)
        entries.append(TimetableEntry(
            day=key.day,
            time_slot=key.time_slot,
            subject=subject,
            section=section,
            class_name=key.class_name,
            col_span=spans.col_span,
            row_span=spans.row_span,
            merged_into=desc.merged_into.label if isinstance(desc, Absorbed) else None,
        ))

    if not entries:
        return PayloadResult(error=Messages.NO_VALID_ENTRIES)

    classes = list(layout.displayed_classes)
    return PayloadResult(payload=SavePayload(
        name=build_timetable_name(section, classes),
        section=section,
        classes=classes,
        entries=entries,
    ))


class TimetableRepository:
    """Stores saved timetables in the application database"""

    def __init__(self, engine: Engine):
        self.engine = engine

    def ensure_tables(self) -> None:
        with self.engine.begin() as conn:
            conn.execute(text(f"""
                CREATE TABLE IF NOT EXISTS {HEADERS} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    section TEXT NOT NULL,
                    classes TEXT NOT NULL,
                    special_periods TEXT,
                    entry_count INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                )
            """))
            conn.execute(text(f"""
                CREATE TABLE IF NOT EXISTS {ENTRIES} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timetable_id INTEGER NOT NULL REFERENCES {HEADERS}(id) ON DELETE CASCADE,
                    day TEXT NOT NULL,
                    time_slot TEXT NOT NULL,
                    subject TEXT NOT NULL,
                    section TEXT NOT NULL,
                    class_name TEXT NOT NULL,
                    col_span INTEGER NOT NULL DEFAULT 1,
                    row_span INTEGER NOT NULL DEFAULT 1,
                    merged_into TEXT
                )
            """))

    def save(self, payload: SavePayload) -> int:
        """Insert a timetable with its entries and return its id"""
        self.ensure_tables()
        with self.engine.begin() as conn:
            result = conn.execute(text(f"""
                INSERT INTO {HEADERS} (name, section, classes, special_periods, entry_count, created_at)
                VALUES (:name, :section, :classes, :special, :count, :created)
            """), {
                'name': payload.name,
                'section': payload.section,
                'classes': json.dumps(payload.classes),
                'special': json.dumps(payload.special_periods),
                'count': len(payload.entries),
                'created': datetime.now().isoformat(timespec='seconds'),
            })
            timetable_id = result.lastrowid

            conn.execute(text(f"""
                INSERT INTO {ENTRIES} (timetable_id, day, time_slot, subject, section, class_name,
                                       col_span, row_span, merged_into)
                VALUES (:tid, :day, :time_slot, :subject, :section, :class_name,
                        :col_span, :row_span, :merged_into)
            """), [dict(asdict(entry), tid=timetable_id) for entry in payload.entries])

        log.info(f"Saved timetable {timetable_id} with {len(payload.entries)} entries")
        return timetable_id

    def list_timetables(self) -> pd.DataFrame:
        self.ensure_tables()
        with self.engine.connect() as conn:
            return pd.read_sql_query(text(f"""
                SELECT id, name, section, classes, entry_count, created_at
                FROM {HEADERS}
                ORDER BY id DESC
            """), conn)

    def load_entries(self, timetable_id: int) -> pd.DataFrame:
        self.ensure_tables()
        with self.engine.connect() as conn:
            return pd.read_sql_query(text(f"""
                SELECT day, time_slot, subject, section, class_name, col_span, row_span, merged_into
                FROM {ENTRIES}
                WHERE timetable_id = :tid
                ORDER BY id
            """), conn, params={'tid': timetable_id})

    def load_header(self, timetable_id: int) -> Optional[Dict]:
        self.ensure_tables()
        with self.engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT id, name, section, classes FROM {HEADERS} WHERE id = :tid"),
                {'tid': timetable_id}
            ).fetchone()
        if not row:
            return None
        header = dict(row._mapping)
        header['classes'] = json.loads(header['classes'])
        return header

    def load_state(self, timetable_id: int, layout: GridLayout) -> GridState:
        """Rebuild the grid from saved content and merge descriptors"""
        state = GridState()
        for row in self.load_entries(timetable_id).itertuples(index=False):
            key = make_key(row.day, row.time_slot, row.class_name)
            state.content.set_content(key, row.subject)

            if isinstance(row.merged_into, str) and row.merged_into:
                parent = layout.parse_key(row.merged_into)
                if parent is None:
                    log.warning(f"Unknown merge parent {row.merged_into!r} for {key}")
                    continue
                state.merges.set_merge(key, Absorbed(parent))
            elif row.col_span > 1 or row.row_span > 1:
                state.merges.set_merge(key, Span(col_span=int(row.col_span), row_span=int(row.row_span)))

        # parents that were not saved (locked slots, other sections)
        for key, desc in state.merges.items():
            if isinstance(desc, Absorbed) and not isinstance(state.merges.get_merge(desc.merged_into), Span):
                log.warning(f"Dropping merge reference {key} -> {desc.merged_into}")
                state.merges.clear_merge(key)
        return state

    def delete(self, timetable_id: int) -> bool:
        self.ensure_tables()
        with self.engine.begin() as conn:
            conn.execute(text(f"DELETE FROM {ENTRIES} WHERE timetable_id = :tid"), {'tid': timetable_id})
            result = conn.execute(text(f"DELETE FROM {HEADERS} WHERE id = :tid"), {'tid': timetable_id})
        return result.rowcount > 0
