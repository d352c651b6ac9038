"""
Grid State Models - content and merge stores for the timetable grid
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import pandas as pd

from .cell_key import CellKey
from .layout import GridLayout
from .merge import SINGLE, Absorbed, MergeDescriptor, Span


class ContentStore:
    """Subject label assigned to each cell"""

    def __init__(self, data: Optional[Dict[CellKey, str]] = None):
        self._data: Dict[CellKey, str] = dict(data or {})

    def set_content(self, key: CellKey, subject: str) -> None:
        self._data[key] = subject

    def get_content(self, key: CellKey) -> Optional[str]:
        return self._data.get(key)

    def clear_content(self, key: CellKey) -> None:
        self._data.pop(key, None)

    def copy(self) -> "ContentStore":
        return ContentStore(self._data)

    def items(self) -> Iterator[Tuple[CellKey, str]]:
        return iter(list(self._data.items()))

    def __contains__(self, key: CellKey) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other) -> bool:
        return isinstance(other, ContentStore) and self._data == other._data

    def __repr__(self) -> str:
        labels = {k.label: v for k, v in self._data.items()}
        return f"ContentStore({labels!r})"


class MergeStore:
    """Merge descriptor for each cell; absence means an ordinary 1x1 cell"""

    def __init__(self, data: Optional[Dict[CellKey, MergeDescriptor]] = None):
        self._data: Dict[CellKey, MergeDescriptor] = dict(data or {})

    def set_merge(self, key: CellKey, descriptor: MergeDescriptor) -> None:
        self._data[key] = descriptor

    def get_merge(self, key: CellKey) -> Optional[MergeDescriptor]:
        return self._data.get(key)

    def clear_merge(self, key: CellKey) -> None:
        self._data.pop(key, None)

    def members_of(self, parent: CellKey) -> List[CellKey]:
        """Keys currently absorbed into parent"""
        return [
            key for key, desc in self._data.items()
            if isinstance(desc, Absorbed) and desc.merged_into == parent
        ]

    def copy(self) -> "MergeStore":
        return MergeStore(self._data)

    def items(self) -> Iterator[Tuple[CellKey, MergeDescriptor]]:
        return iter(list(self._data.items()))

    def __contains__(self, key: CellKey) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other) -> bool:
        return isinstance(other, MergeStore) and self._data == other._data

    def __repr__(self) -> str:
        labels = {k.label: v for k, v in self._data.items()}
        return f"MergeStore({labels!r})"


@dataclass
class GridState:
    """The two coupled stores that make up an editing session"""
    content: ContentStore = field(default_factory=ContentStore)
    merges: MergeStore = field(default_factory=MergeStore)

    def copy(self) -> "GridState":
        return GridState(self.content.copy(), self.merges.copy())

    # ------------------------------------------------------------------
    # Render queries
    # ------------------------------------------------------------------

    def should_render_cell(self, key: CellKey) -> bool:
        """False iff the cell is absorbed into another cell"""
        return not isinstance(self.merges.get_merge(key), Absorbed)

    def get_cell_spans(self, key: CellKey) -> Span:
        desc = self.merges.get_merge(key)
        if isinstance(desc, Span):
            return desc
        return SINGLE

    def get_cell_content(self, key: CellKey) -> str:
        return self.content.get_content(key) or ""

    def is_empty(self) -> bool:
        return len(self.content) == 0 and len(self.merges) == 0

    def to_frame(self, layout: GridLayout) -> pd.DataFrame:
        """One row per rendered cell of the layout"""
        rows = []
        for key in layout.iter_keys():
            if not self.should_render_cell(key):
                continue
            spans = self.get_cell_spans(key)
            rows.append({
                'day': key.day,
                'class_name': key.class_name,
                'time_slot': key.time_slot,
                'subject': self.get_cell_content(key),
                'col_span': spans.col_span,
                'row_span': spans.row_span,
            })
        return pd.DataFrame(
            rows, columns=['day', 'class_name', 'time_slot', 'subject', 'col_span', 'row_span']
        )
