"""
Configuration Constants for the Timetable Grid Editor
"""

import os
from dataclasses import dataclass

# Days of the week
DAYS = ["MON", "TUE", "WED", "THUR", "FRI", "SAT", "SUN"]

# Fixed time slots spanning a school day
TIME_SLOTS = [
    "6:30am-7:30am", "7:30am-8:00am", "8:00am-9:00am",
    "9:00am-10:30am", "10:30am-11:00am", "11:00am-12:00pm",
    "12:00pm-1:00pm", "1:00pm-2:00pm", "2:00pm-3:00pm",
    "3:00pm-4:00pm", "4:00pm-5:00pm", "5:00pm-7:00pm",
]

# Break time
BREAK_TIME_SLOT = "10:30am-11:00am"
BREAK_TIME_LABEL = "BREAK TIME"

# Special periods are not editable and stop merge runs
SPECIAL_PERIODS = [
    {"time_slot": "7:30am-8:00am", "name": "MORNING TEA", "color": "#BFDBFE"},
    {"time_slot": "10:30am-11:00am", "name": "BREAK TIME", "color": "#FED7AA"},
    {"time_slot": "1:00pm-2:00pm", "name": "LUNCH TIME", "color": "#BBF7D0"},
    {"time_slot": "5:00pm-7:00pm", "name": "PRAYERS/PERSONAL ADMIN", "color": "#E9D5FF"},
]

# Sections and their classes
SECTIONS = {
    "nursery": ["Nursery A", "Nursery B"],
    "lowerPrimary": ["P.1", "P.2"],
    "middlePrimary": ["P.3.W", "P.3.E", "P.4.W", "P.4.E"],
    "upperPrimary": ["P.5", "P.6"],
}

SECTION_LABELS = {
    "nursery": "Nursery",
    "lowerPrimary": "Lower Primary",
    "middlePrimary": "Middle Primary",
    "upperPrimary": "Upper Primary",
}

# Subjects and activities offered in the picker
SUBJECTS = [
    "THEO", "NUM", "ENG", "LIT A", "LIT B", "MTC", "SCE", "SST", "READ", "RE",
    "SWIMMING", "SPORTS", "DEBATE QUIZ", "GAMES & SPORTS",
    "THEOLOGY AND MORNING WORK", "MORNING TEA", "BREAK", "PRAYERS & LUNCH",
    "GUIDANCE & COUNSELING", "PRAYERS / PERSONAL ADMIN & SUPPER",
]

SCHOOL_NAME = "RICH DAD JUNIOR SCHOOL - NAJJANANKUMBI"
TIMETABLE_TITLE = "TIME TABLE 2025"

# Colors
COLORS = {
    "assigned": "#EFF6FF",
    "empty": "#FFFFFF",
    "selected": "#FEF3C7",
    "header": "#D9D9D9",
    "day": "#93C47D",
    "border": "#000000",
}


# Layout configuration
class GridConfig:
    LOCK_SPECIAL_PERIODS = True
    KEY_SEPARATOR = "-"


# Database configuration
class DatabaseConfig:
    # repository DDL is SQLite-specific
    DEFAULT_URL = "sqlite:///timetable_grid.db"
    URL_ENV_VAR = "TIMETABLE_DB_URL"
    HEADERS_TABLE = "timetable_grid_headers"
    ENTRIES_TABLE = "timetable_grid_entries"


# UI Configuration
class UIConfig:
    SHOW_LEGEND = True
    SHOW_ENTRIES_PREVIEW = True
    SUBJECT_COLUMNS = 3


# Messages
class Messages:
    NO_SECTION = "Please select a section before saving."
    NO_DATA = "No timetable data to save. Please add at least one subject to the timetable."
    NO_VALID_ENTRIES = "No valid timetable entries created."
    SAVE_FAILED = "Failed to save timetable."
    LOCKED_CELL = "Special period cells cannot be edited."
    NO_CLASSES = "Select at least one class to build the timetable."


@dataclass
class DatabaseSettings:
    url: str


@dataclass
class Settings:
    db: DatabaseSettings


def load_settings() -> Settings:
    """Read runtime settings from the environment"""
    url = os.environ.get(DatabaseConfig.URL_ENV_VAR) or DatabaseConfig.DEFAULT_URL
    return Settings(db=DatabaseSettings(url=url))
