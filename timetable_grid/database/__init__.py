"""
Database Package
"""

from .connection import check_connection, create_db_engine, get_engine

__all__ = ['get_engine', 'create_db_engine', 'check_connection']
