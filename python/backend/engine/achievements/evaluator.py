"""Milestone checks over cumulative session counters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from backend.engine.gamestate.state import GameState
from backend.models.rewards import Achievement

_PREDICATES: dict[str, Callable[[GameState], bool]] = {
    "first_fix": lambda s: s.total_fixed >= 1,
    "combo_master": lambda s: s.max_combo >= 5,
    "speed_demon": lambda s: s.level > 1 and s.time_left > 60,
    "perfectionist": lambda s: s.all_fixed and s.hints_used == 0,
    "veteran": lambda s: s.level >= 5,
    "high_scorer": lambda s: s.score >= 1000,
}


class AchievementEvaluator:
    """Stateless — all methods are static."""

    @staticmethod
    def evaluate(state: GameState) -> tuple[tuple[Achievement, ...], tuple[str, ...]]:
        """Return ``(achievements, newly_unlocked_ids)`` for *state*.

        Unlocked achievements are never locked again, and progress
        counters only move up.
        """
        updated: list[Achievement] = []
        unlocked: list[str] = []
        for ach in state.achievements:
            if ach.target is not None:
                progress = max(ach.progress or 0, min(state.score, ach.target))
                if progress != ach.progress:
                    ach = replace(ach, progress=progress)
            if not ach.unlocked:
                predicate = _PREDICATES.get(ach.id)
                if predicate is not None and predicate(state):
                    ach = replace(ach, unlocked=True)
                    unlocked.append(ach.id)
            updated.append(ach)
        return tuple(updated), tuple(unlocked)
