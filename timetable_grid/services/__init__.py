"""
Services Package - Timetable Grid Services
"""

from .break_time import apply_break_time
from .editor_service import TimetableEditor
from .excel_export import TimetableExcelExporter, export_timetable_to_excel
from .grid_html import build_grid_rows, render_grid_html
from .merge_engine import (
    assign,
    clear,
    group_members,
    horizontal_run,
    is_merge_parent,
    vertical_run,
)
from .timetable_repository import (
    PayloadResult,
    SavePayload,
    TimetableEntry,
    TimetableRepository,
    build_save_payload,
)

__all__ = [
    'assign',
    'clear',
    'horizontal_run',
    'vertical_run',
    'is_merge_parent',
    'group_members',
    'apply_break_time',
    'TimetableEditor',
    'TimetableExcelExporter',
    'export_timetable_to_excel',
    'build_grid_rows',
    'render_grid_html',
    'TimetableRepository',
    'TimetableEntry',
    'SavePayload',
    'PayloadResult',
    'build_save_payload',
]
