"""
Timetable Grid - school timetable editor with merged cells
"""

__version__ = "1.0.0"
