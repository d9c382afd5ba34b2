"""Points, combo chains and level bonuses."""

from __future__ import annotations

import math
from dataclasses import dataclass

from backend.models.config import ScoringConstants


@dataclass(frozen=True)
class RepairScore:
    points: int
    combo: int
    max_combo: int

    def describe(self) -> str:
        if self.combo > 1:
            return f"+{self.points} pts • combo x{self.combo}"
        return f"+{self.points} pts"


class ScoringEngine:
    def __init__(self, constants: ScoringConstants, combo_enabled: bool = True) -> None:
        self.constants = constants
        self.combo_enabled = combo_enabled

    # -- combo ----------------------------------------------------------------

    def next_combo(self, combo: int, last_fix_at: float | None, now: float) -> int:
        """Extend the chain if this repair lands inside the window, else restart it."""
        if not self.combo_enabled:
            return 0
        if (
            combo > 0
            and last_fix_at is not None
            and now - last_fix_at <= self.constants.combo_window_ms
        ):
            return combo + 1
        return 1

    # -- points ---------------------------------------------------------------

    def repair_points(
        self, diff: int, level: int, combo: int, time_left: int, doubled: bool = False
    ) -> int:
        base = self.constants.per_fix * level
        combo_bonus = math.floor(base * combo * self.constants.combo_factor) if combo > 1 else 0
        time_bonus = math.floor(time_left * self.constants.time_factor)
        total = diff * base + combo_bonus + time_bonus
        return total * 2 if doubled else total

    def score_repair(
        self,
        diff: int,
        *,
        level: int,
        combo: int,
        max_combo: int,
        last_fix_at: float | None,
        now: float,
        time_left: int,
        doubled: bool = False,
    ) -> RepairScore:
        combo = self.next_combo(combo, last_fix_at, now)
        points = self.repair_points(diff, level, combo, time_left, doubled)
        return RepairScore(points=points, combo=combo, max_combo=max(max_combo, combo))

    def level_bonus(self, time_left: int, max_combo: int) -> int:
        return (
            time_left * self.constants.level_time_bonus
            + max_combo * self.constants.level_combo_bonus
        )
