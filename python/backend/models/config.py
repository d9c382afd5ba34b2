"""Engine configuration — one record covers both classic and full mode."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from backend.models.element import DefectKind, ElementType


class Mode(StrEnum):
    full = "full"
    classic = "classic"


@dataclass(frozen=True)
class ScoringConstants:
    per_fix: int = 100  # multiplied by level
    time_factor: float = 2.0  # per-repair bonus per second left
    combo_factor: float = 0.25
    combo_window_ms: int = 3000
    level_time_bonus: int = 8  # per second left on level clear
    level_combo_bonus: int = 50  # per max-combo step on level clear


@dataclass(frozen=True)
class GameConfig:
    combo_enabled: bool = True
    power_ups_enabled: bool = True
    achievements_enabled: bool = True

    base_time: int = 90
    per_level_time_decrement: int = 8
    min_time: int = 30
    hint_penalty: int = 8
    level_cap: int | None = None

    element_base: int = 4
    element_growth: float = 1.5

    element_types: tuple[ElementType, ...] = tuple(ElementType)
    defect_kinds: tuple[DefectKind, ...] = tuple(DefectKind)

    scoring: ScoringConstants = field(default_factory=ScoringConstants)

    # Delay before the next level starts by itself; None waits for start_level().
    auto_advance_ms: int | None = None

    def time_for_level(self, level: int) -> int:
        return max(self.min_time, self.base_time - (level - 1) * self.per_level_time_decrement)

    def clamp_level(self, level: int) -> int:
        level = max(1, level)
        if self.level_cap is not None:
            level = min(self.level_cap, level)
        return level


FULL_MODE = GameConfig()

CLASSIC_MODE = GameConfig(
    combo_enabled=False,
    power_ups_enabled=False,
    achievements_enabled=False,
    base_time=60,
    per_level_time_decrement=10,
    min_time=20,
    level_cap=3,
    element_base=3,
    element_growth=2,
    element_types=(
        ElementType.BUTTON,
        ElementType.INPUT,
        ElementType.CARD,
        ElementType.SLIDER,
        ElementType.LABEL,
    ),
    defect_kinds=(
        DefectKind.CLICK,
        DefectKind.ROTATE,
        DefectKind.TEXT,
        DefectKind.COLOR,
        DefectKind.BLUR,
        DefectKind.DISABLED,
        DefectKind.SLIDER,
        DefectKind.ORDER,
    ),
    scoring=ScoringConstants(
        per_fix=150,
        time_factor=3.0,
        level_time_bonus=10,
        level_combo_bonus=0,
    ),
)


def for_mode(mode: Mode) -> GameConfig:
    return {Mode.full: FULL_MODE, Mode.classic: CLASSIC_MODE}[mode]
