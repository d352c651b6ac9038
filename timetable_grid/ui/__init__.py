"""
UI Package
"""

from .components import UIComponents
from .timetable_grid_editor import render_timetable_editor

__all__ = ['UIComponents', 'render_timetable_editor']
