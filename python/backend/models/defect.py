"""Workshop-mode defect model."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum


class DefectType(StrEnum):
    SIMPLE = "simple"
    CRACK = "crack"
    SCREW = "screw"
    WIRE = "wire"
    PAINT = "paint"


class Tool(StrEnum):
    ROLLER = "roller"
    HAMMER = "hammer"
    WRENCH = "wrench"
    PLIERS = "pliers"
    BRUSH = "brush"


LEVEL_NAMES: dict[int, str] = {
    1: "Easy",
    2: "Cracks Cleaning",
    3: "Loose Screws",
    4: "Broken Wires",
    5: "Paint Leaks",
}


@dataclass(frozen=True)
class Defect:
    """A spot on the workshop board.  Progress values run 0-100."""

    id: str
    type: DefectType
    x: float
    y: float
    fixed: bool = False
    rotation: float = 0
    wheel_progress: float = 0
    circular_progress: float = 0
    hold_progress: float = 0
    paint_progress: float = 0
    connected: bool = False

    def evolve(self, **changes: object) -> Defect:
        return replace(self, **changes)


@dataclass(frozen=True)
class WorkshopState:
    level: int = 1
    defects: tuple[Defect, ...] = ()
    level_complete: bool = False

    @property
    def level_name(self) -> str:
        return LEVEL_NAMES.get(self.level, "Unknown")

    @property
    def fixed_count(self) -> int:
        return sum(1 for d in self.defects if d.fixed)

    def defect(self, defect_id: str) -> Defect | None:
        return next((d for d in self.defects if d.id == defect_id), None)
