"""
Data Models Package
"""

from .cell_key import CellKey, make_key
from .grid import ContentStore, GridState, MergeStore
from .layout import GridLayout
from .merge import Absorbed, MergeDescriptor, Span

__all__ = [
    'CellKey',
    'make_key',
    'ContentStore',
    'MergeStore',
    'GridState',
    'GridLayout',
    'Span',
    'Absorbed',
    'MergeDescriptor',
]
