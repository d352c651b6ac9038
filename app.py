# app.py
"""
Timetable Grid Editor - Streamlit entry point

Run with:  streamlit run app.py
"""

import logging

import streamlit as st
from sqlalchemy.exc import SQLAlchemyError

from timetable_grid.database import check_connection, get_engine
from timetable_grid.ui import render_timetable_editor

# Configure logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)


def main():
    st.set_page_config(page_title="Timetable", page_icon="📅", layout="wide")
    st.title("📅 Class Timetable")

    engine = get_engine()
    if not check_connection(engine):
        st.error("Database connection failed. Check TIMETABLE_DB_URL.")
        st.stop()

    try:
        render_timetable_editor(engine)
    except SQLAlchemyError as e:
        log.exception("Timetable editor database error")
        st.error(f"⚠️ Database error: {e}")


if __name__ == "__main__":
    main()
