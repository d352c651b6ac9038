"""
Editor Service - event handlers behind the timetable grid page
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..config import SECTIONS, Messages
from ..models.cell_key import CellKey, make_key
from ..models.grid import GridState
from ..models.layout import GridLayout
from ..models.merge import Span
from .break_time import apply_break_time
from .merge_engine import assign, clear
from .timetable_repository import TimetableRepository, build_save_payload

log = logging.getLogger(__name__)


class TimetableEditor:
    """
    Owns one editing session: layout, grid state, selection and the last
    status message. UI callbacks map one-to-one onto the on_* methods.
    """

    def __init__(self, layout: Optional[GridLayout] = None,
                 sections: Optional[Dict[str, Sequence[str]]] = None,
                 repository: Optional[TimetableRepository] = None):
        self.layout = layout or GridLayout.default()
        self.sections = {name: list(classes) for name, classes in (sections or SECTIONS).items()}
        self.repository = repository
        self.state = GridState()

        self.selected_section: Optional[str] = None
        self.selectable_classes: List[str] = []
        self.selected_cell: Optional[CellKey] = None
        self.show_subject_selector = False
        self.message = ""
        self.last_saved_id: Optional[int] = None

    @property
    def displayed_classes(self) -> List[str]:
        return list(self.layout.displayed_classes)

    # ------------------------------------------------------------------
    # Section & class selection
    # ------------------------------------------------------------------

    def on_section_changed(self, section: Optional[str]) -> None:
        """Grid content is kept; only the class selection resets"""
        self.selected_section = section or None
        self.selectable_classes = list(self.sections.get(section, [])) if section else []
        self.layout = self.layout.with_displayed_classes([])
        self._close_selector()

    def on_class_toggled(self, class_name: str) -> None:
        if class_name not in self.selectable_classes:
            log.debug(f"Class {class_name!r} is not in section {self.selected_section!r}")
            return
        classes = self.displayed_classes
        if class_name in classes:
            classes.remove(class_name)
        else:
            classes.append(class_name)
        self.layout = self.layout.with_displayed_classes(classes)

    # ------------------------------------------------------------------
    # Cell editing
    # ------------------------------------------------------------------

    def on_cell_click(self, day: str, time_slot: str, class_name: str) -> bool:
        """Select a cell and open the subject picker; False for locked cells"""
        if self.layout.is_locked(time_slot):
            log.debug(f"Cannot edit special period cell: {time_slot}")
            self.message = Messages.LOCKED_CELL
            return False
        self.selected_cell = make_key(day, time_slot, class_name)
        self.show_subject_selector = True
        return True

    def on_subject_chosen(self, subject: str) -> None:
        key = self.selected_cell
        if key is None:
            return
        self.state = assign(self.state, self.layout, key, subject)
        self._close_selector()
        self.message = f'Added "{subject}" to {key.class_name} on {key.day} at {key.time_slot}'
        log.info(self.message)

    def on_clear_requested(self, day: Optional[str] = None, time_slot: Optional[str] = None,
                           class_name: Optional[str] = None) -> None:
        if day is not None and time_slot is not None and class_name is not None:
            key = make_key(day, time_slot, class_name)
        else:
            key = self.selected_cell
        if key is None:
            return
        self.state = clear(self.state, self.layout, key)
        self._close_selector()
        self.message = f"Cell cleared for {key.class_name} on {key.day} at {key.time_slot}"
        log.info(self.message)

    def on_cancel(self) -> None:
        self._close_selector()

    def on_break_time_requested(self) -> None:
        self.state = apply_break_time(self.state, self.layout)

    def _close_selector(self) -> None:
        self.selected_cell = None
        self.show_subject_selector = False

    # ------------------------------------------------------------------
    # Save / load
    # ------------------------------------------------------------------

    def on_save_requested(self) -> str:
        """
        Confirm the save for the displayed classes. With a repository
        attached the entries are persisted too.
        """
        confirmation = (
            f"Timetable for classes: {', '.join(self.displayed_classes)} "
            f"has been successfully saved."
        )
        if self.repository is None:
            self.message = confirmation
            log.info(confirmation)
            return self.message

        result = build_save_payload(
            self.state, self.layout, self.selected_section, self.selectable_classes
        )
        if not result.ok:
            self.message = result.error
            return self.message

        self.last_saved_id = self.repository.save(result.payload)
        self.message = f"{confirmation} Saved {len(result.payload.entries)} entries."
        return self.message

    def load(self, timetable_id: int) -> None:
        """Replace the grid with a saved timetable"""
        if self.repository is None:
            return
        header = self.repository.load_header(timetable_id)
        if header is None:
            log.warning(f"Timetable {timetable_id} not found")
            return
        section = header['section']
        self.selected_section = section
        self.selectable_classes = list(self.sections.get(section, header['classes']))
        self.layout = self.layout.with_displayed_classes(header['classes'])
        self.state = self.repository.load_state(timetable_id, self.layout)
        self._close_selector()
        self.message = f"Loaded {header['name']}"

    # ------------------------------------------------------------------
    # Render queries
    # ------------------------------------------------------------------

    def should_render_cell(self, day: str, time_slot: str, class_name: str) -> bool:
        return self.state.should_render_cell(make_key(day, time_slot, class_name))

    def get_cell_spans(self, day: str, time_slot: str, class_name: str) -> Span:
        return self.state.get_cell_spans(make_key(day, time_slot, class_name))

    def get_cell_content(self, day: str, time_slot: str, class_name: str) -> str:
        return self.state.get_cell_content(make_key(day, time_slot, class_name))
