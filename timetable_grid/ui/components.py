"""
Reusable UI Components
"""

from typing import Optional

import streamlit as st

from ..config import SECTION_LABELS, SPECIAL_PERIODS, SUBJECTS, UIConfig
from ..services.editor_service import TimetableEditor


class UIComponents:
    """Reusable UI components"""

    @staticmethod
    def render_section_filters(editor: TimetableEditor) -> None:
        """Sidebar section selector and class checkboxes"""
        st.sidebar.header("🎯 Section & Classes")

        options = [""] + list(editor.sections.keys())
        current = editor.selected_section or ""
        section = st.sidebar.selectbox(
            "Select Section",
            options,
            index=options.index(current) if current in options else 0,
            format_func=lambda s: SECTION_LABELS.get(s, s) if s else "Select a section",
            key="tt_section",
        )
        if (section or None) != editor.selected_section:
            editor.on_section_changed(section)
            st.rerun()

        if not editor.selectable_classes:
            return

        st.sidebar.markdown("**Select Classes**")
        for class_name in editor.selectable_classes:
            checked = class_name in editor.displayed_classes
            value = st.sidebar.checkbox(class_name, value=checked, key=f"tt_cls_{class_name}")
            if value != checked:
                editor.on_class_toggled(class_name)
                st.rerun()

    @staticmethod
    def render_legend() -> None:
        if not UIConfig.SHOW_LEGEND:
            return
        cols = st.columns(len(SPECIAL_PERIODS))
        for col, period in zip(cols, SPECIAL_PERIODS):
            col.markdown(
                f'<div style="background: {period["color"]}; padding: 6px; border-radius: 4px; '
                f'font-size: 11px; text-align: center;">{period["name"]}<br/>{period["time_slot"]}</div>',
                unsafe_allow_html=True,
            )

    @staticmethod
    def render_subject_picker(editor: TimetableEditor) -> Optional[str]:
        """Subject buttons plus clear/cancel; returns the chosen subject"""
        key = editor.selected_cell
        if key is None:
            return None

        st.markdown(f"#### Select a Subject: {key.class_name}, {key.day}, {key.time_slot}")
        chosen = None
        cols = st.columns(UIConfig.SUBJECT_COLUMNS)
        for idx, subject in enumerate(SUBJECTS):
            if cols[idx % UIConfig.SUBJECT_COLUMNS].button(
                subject, key=f"subj_{idx}", use_container_width=True
            ):
                chosen = subject

        c1, c2 = st.columns(2)
        if c1.button("🧹 Clear/Unmerge Cell", key="tt_clear", use_container_width=True):
            editor.on_clear_requested()
            st.rerun()
        if c2.button("✖ Cancel", key="tt_cancel", use_container_width=True):
            editor.on_cancel()
            st.rerun()

        return chosen
