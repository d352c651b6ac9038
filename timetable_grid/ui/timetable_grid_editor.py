# ============================================================================
# TIMETABLE GRID EDITOR - Merged Cells
# ============================================================================
# Features:
# - Section / class selection in the sidebar
# - Grid rendered as one HTML table with colspan/rowspan merged cells
# - Equal neighbouring subjects merge automatically, clear splits them
# - Break time band across the week
# - Save to the application database and reload saved timetables
# ============================================================================

import logging
from datetime import datetime

import streamlit as st
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..config import SCHOOL_NAME, TIMETABLE_TITLE, Messages, UIConfig
from ..services.editor_service import TimetableEditor
from ..services.excel_export import export_timetable_to_excel
from ..services.grid_html import render_grid_html
from ..services.timetable_repository import TimetableRepository
from .components import UIComponents

log = logging.getLogger(__name__)

EDITOR_KEY = "tt_editor"


def get_editor(engine: Engine) -> TimetableEditor:
    """One editor per browser session"""
    if EDITOR_KEY not in st.session_state:
        st.session_state[EDITOR_KEY] = TimetableEditor(repository=TimetableRepository(engine))
    return st.session_state[EDITOR_KEY]


def render_cell_selector(editor: TimetableEditor) -> None:
    """Pick a cell by day / time slot / class"""
    layout = editor.layout
    c1, c2, c3, c4 = st.columns([2, 3, 2, 2])
    day = c1.selectbox("Day", layout.days, key="tt_pick_day")
    time_slot = c2.selectbox("Time Slot", layout.time_slots, key="tt_pick_slot")
    class_name = c3.selectbox("Class", layout.displayed_classes, key="tt_pick_class")

    c4.markdown("&nbsp;")
    if c4.button("✏️ Edit Cell", key="tt_pick", use_container_width=True):
        if not editor.on_cell_click(day, time_slot, class_name):
            st.warning(Messages.LOCKED_CELL)
        else:
            st.rerun()


def render_saved_timetables(editor: TimetableEditor) -> None:
    if editor.repository is None:
        return
    with st.expander("📂 Saved Timetables"):
        try:
            df = editor.repository.list_timetables()
        except SQLAlchemyError as e:
            log.exception("Could not list saved timetables")
            st.error(f"Could not load saved timetables: {e}")
            return

        if df.empty:
            st.info("No saved timetables yet.")
            return

        st.dataframe(df, use_container_width=True, hide_index=True)
        timetable_id = st.selectbox("Timetable", df['id'].tolist(), key="tt_load_id",
                                    format_func=lambda i: df.loc[df['id'] == i, 'name'].iloc[0])
        if st.button("📥 Load", key="tt_load"):
            editor.load(int(timetable_id))
            st.rerun()


def render_timetable_editor(engine: Engine) -> None:
    """Main rendering function for the timetable grid editor"""
    editor = get_editor(engine)

    UIComponents.render_section_filters(editor)

    st.markdown(f"### {SCHOOL_NAME}")
    st.markdown(f"**{TIMETABLE_TITLE}**")
    st.caption(
        f"Section: {editor.selected_section or '-'} | "
        f"Classes: {', '.join(editor.displayed_classes) or '-'}"
    )

    UIComponents.render_legend()

    if not editor.displayed_classes:
        st.info(Messages.NO_CLASSES)
    else:
        st.markdown(
            render_grid_html(editor.state, editor.layout, selected=editor.selected_cell),
            unsafe_allow_html=True,
        )
        st.markdown("---")
        render_cell_selector(editor)

        if editor.show_subject_selector:
            subject = UIComponents.render_subject_picker(editor)
            if subject:
                editor.on_subject_chosen(subject)
                st.rerun()

    st.markdown("---")
    c1, c2, c3 = st.columns(3)
    if c1.button("☕ Apply Break Time", key="tt_break", use_container_width=True,
                 disabled=not editor.displayed_classes):
        editor.on_break_time_requested()
        st.rerun()

    if editor.displayed_classes:
        c3.download_button(
            "📥 Export to Excel",
            export_timetable_to_excel(editor.state, editor.layout),
            f"timetable_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key="tt_export",
            use_container_width=True,
        )

    if c2.button("💾 Save Timetable", key="tt_save", use_container_width=True):
        try:
            editor.on_save_requested()
        except SQLAlchemyError as e:
            log.exception("Saving timetable failed")
            editor.message = f"{Messages.SAVE_FAILED} {e}"

    if editor.message:
        st.success(editor.message)

    if UIConfig.SHOW_ENTRIES_PREVIEW and editor.displayed_classes:
        with st.expander("📊 Grid Cells"):
            st.dataframe(editor.state.to_frame(editor.layout), use_container_width=True, hide_index=True)

    render_saved_timetables(editor)
