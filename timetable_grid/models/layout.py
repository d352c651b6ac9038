"""
Grid Layout Model - ordering of days, time slots and displayed classes
"""

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple

from ..config import BREAK_TIME_SLOT, DAYS, SPECIAL_PERIODS, TIME_SLOTS, GridConfig
from .cell_key import CellKey


def _index_of(values: Sequence[str], what: str) -> Dict[str, int]:
    index = {}
    for pos, value in enumerate(values):
        if value in index:
            raise ValueError(f"Duplicate {what} in layout: {value!r}")
        index[value] = pos
    return index


@dataclass(frozen=True)
class GridLayout:
    """
    Fixed days and time slots plus the user's displayed classes.

    Horizontal neighbours share (day, class) with consecutive time slots;
    vertical neighbours share (day, time slot) with consecutive displayed
    classes.
    """
    days: Tuple[str, ...]
    time_slots: Tuple[str, ...]
    displayed_classes: Tuple[str, ...] = ()
    locked_time_slots: FrozenSet[str] = frozenset()
    break_time_slot: Optional[str] = None

    _day_index: Dict[str, int] = field(init=False, repr=False, compare=False)
    _slot_index: Dict[str, int] = field(init=False, repr=False, compare=False)
    _class_index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "days", tuple(self.days))
        object.__setattr__(self, "time_slots", tuple(self.time_slots))
        object.__setattr__(self, "displayed_classes", tuple(self.displayed_classes))
        object.__setattr__(self, "locked_time_slots", frozenset(self.locked_time_slots))
        object.__setattr__(self, "_day_index", _index_of(self.days, "day"))
        object.__setattr__(self, "_slot_index", _index_of(self.time_slots, "time slot"))
        object.__setattr__(self, "_class_index", _index_of(self.displayed_classes, "class"))

    @classmethod
    def default(cls, displayed_classes: Sequence[str] = ()) -> "GridLayout":
        """The 7-day week with the fixed school-day time slots"""
        locked = set()
        if GridConfig.LOCK_SPECIAL_PERIODS:
            locked = {p["time_slot"] for p in SPECIAL_PERIODS}
        return cls(
            days=tuple(DAYS),
            time_slots=tuple(TIME_SLOTS),
            displayed_classes=tuple(displayed_classes),
            locked_time_slots=frozenset(locked),
            break_time_slot=BREAK_TIME_SLOT,
        )

    def with_displayed_classes(self, classes: Sequence[str]) -> "GridLayout":
        return replace(self, displayed_classes=tuple(classes))

    # ------------------------------------------------------------------
    # Index lookups
    # ------------------------------------------------------------------

    def day_index(self, day: str) -> Optional[int]:
        return self._day_index.get(day)

    def time_slot_index(self, time_slot: str) -> Optional[int]:
        return self._slot_index.get(time_slot)

    def class_index(self, class_name: str) -> Optional[int]:
        return self._class_index.get(class_name)

    def is_locked(self, time_slot: str) -> bool:
        """Special periods and the break slot are not editable"""
        return time_slot in self.locked_time_slots or (
            self.break_time_slot is not None and time_slot == self.break_time_slot
        )

    def contains(self, key: CellKey) -> bool:
        return (
            key.day in self._day_index
            and key.time_slot in self._slot_index
            and key.class_name in self._class_index
        )

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def iter_keys(self) -> Iterator[CellKey]:
        """All displayed keys in render order: day, class, time slot"""
        for day in self.days:
            for class_name in self.displayed_classes:
                for time_slot in self.time_slots:
                    yield CellKey(day, time_slot, class_name)

    def row_keys(self, day: str, class_name: str) -> List[CellKey]:
        return [CellKey(day, slot, class_name) for slot in self.time_slots]

    def column_keys(self, day: str, time_slot: str) -> List[CellKey]:
        return [CellKey(day, time_slot, name) for name in self.displayed_classes]

    def parse_key(self, label: str) -> Optional[CellKey]:
        """
        Parse a canonical label back into a CellKey.

        Time slots may contain the separator themselves, so the label is
        matched against the layout's known days and time slots.
        """
        sep = GridConfig.KEY_SEPARATOR
        for day in self.days:
            prefix = day + sep
            if not label.startswith(prefix):
                continue
            rest = label[len(prefix):]
            for slot in sorted(self.time_slots, key=len, reverse=True):
                if rest.startswith(slot + sep):
                    class_name = rest[len(slot) + len(sep):]
                    if class_name:
                        return CellKey(day, slot, class_name)
        return None
