"""
Cell Key Model - Identifies one grid position
"""

from dataclasses import dataclass

from ..config import GridConfig


@dataclass(frozen=True)
class CellKey:
    """A (day, time slot, class) grid position"""
    day: str
    time_slot: str
    class_name: str

    @property
    def label(self) -> str:
        """Canonical string form, e.g. MON-T1-P1"""
        return GridConfig.KEY_SEPARATOR.join([self.day, self.time_slot, self.class_name])

    def same_row(self, other: "CellKey") -> bool:
        """Same day and class (horizontal neighbours share a row)"""
        return self.day == other.day and self.class_name == other.class_name

    def same_column(self, other: "CellKey") -> bool:
        """Same day and time slot (vertical neighbours share a column)"""
        return self.day == other.day and self.time_slot == other.time_slot

    def __str__(self) -> str:
        return self.label


def make_key(day: str, time_slot: str, class_name: str) -> CellKey:
    return CellKey(day, time_slot, class_name)
