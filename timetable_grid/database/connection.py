"""
Database Connection Utilities
"""

import logging
from typing import Optional

import streamlit as st
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..config import load_settings

log = logging.getLogger(__name__)


def create_db_engine(url: Optional[str] = None) -> Engine:
    """Create an engine for url, or for the configured database"""
    url = url or load_settings().db.url
    return create_engine(url, pool_pre_ping=True)


def get_engine() -> Engine:
    """
    Get database engine.

    Uses Streamlit session state for caching.
    """
    if 'engine' not in st.session_state:
        st.session_state['engine'] = create_db_engine()
    return st.session_state['engine']


def check_connection(engine: Engine) -> bool:
    """Test database connection"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        log.warning(f"Database connection failed: {e}")
        return False
