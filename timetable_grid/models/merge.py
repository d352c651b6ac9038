"""
Merge Models - span descriptors for merged timetable cells
"""

from dataclasses import dataclass
from typing import Union

from .cell_key import CellKey


@dataclass(frozen=True)
class Span:
    """A merge parent or an unmerged cell"""
    col_span: int = 1
    row_span: int = 1

    @property
    def is_merged(self) -> bool:
        return self.col_span > 1 or self.row_span > 1


@dataclass(frozen=True)
class Absorbed:
    """A cell folded into another cell's span"""
    merged_into: CellKey


MergeDescriptor = Union[Span, Absorbed]

SINGLE = Span(1, 1)
