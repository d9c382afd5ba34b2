"""Points, combo chains and the achievement pass."""

from __future__ import annotations

from dataclasses import replace

from conftest import make_element

from backend.engine.achievements import AchievementEvaluator
from backend.engine.gamescoring import ScoringEngine
from backend.engine.gamestate import GameState
from backend.models.config import CLASSIC_MODE, FULL_MODE
from backend.models.element import DefectKind
from backend.models.rewards import default_achievements

FULL = ScoringEngine(FULL_MODE.scoring, combo_enabled=True)
CLASSIC = ScoringEngine(CLASSIC_MODE.scoring, combo_enabled=False)


# -- combo --------------------------------------------------------------------


def test_first_repair_starts_combo() -> None:
    assert FULL.next_combo(0, None, now=0) == 1


def test_repair_inside_window_extends_combo() -> None:
    assert FULL.next_combo(2, last_fix_at=1000, now=4000) == 3


def test_repair_outside_window_restarts_combo() -> None:
    assert FULL.next_combo(2, last_fix_at=1000, now=4001) == 1


def test_expired_combo_restarts_even_inside_window() -> None:
    assert FULL.next_combo(0, last_fix_at=1000, now=1500) == 1


def test_classic_has_no_combo() -> None:
    assert CLASSIC.next_combo(3, last_fix_at=0, now=10) == 0


# -- points -------------------------------------------------------------------


def test_single_repair_points() -> None:
    # 100 * level + floor(time_left * 2)
    assert FULL.repair_points(1, level=1, combo=1, time_left=90) == 280


def test_combo_bonus_applies_above_one() -> None:
    # 200 + floor(200 * 3 * 0.25) + 100
    assert FULL.repair_points(1, level=2, combo=3, time_left=50) == 450


def test_double_points() -> None:
    assert FULL.repair_points(1, level=2, combo=3, time_left=50, doubled=True) == 900


def test_multi_repair_diff() -> None:
    assert FULL.repair_points(3, level=1, combo=1, time_left=0) == 300


def test_time_bonus_is_floored() -> None:
    assert CLASSIC.repair_points(1, level=1, combo=0, time_left=7) == 150 + 21


def test_score_repair_tracks_max_combo() -> None:
    result = FULL.score_repair(
        1, level=1, combo=4, max_combo=6, last_fix_at=0, now=100, time_left=10
    )
    assert result.combo == 5
    assert result.max_combo == 6
    assert result.describe() == f"+{result.points} pts • combo x5"


def test_level_bonus() -> None:
    assert FULL.level_bonus(time_left=30, max_combo=4) == 30 * 8 + 4 * 50
    assert CLASSIC.level_bonus(time_left=30, max_combo=4) == 300


# -- achievements -------------------------------------------------------------


def _state(**changes: object) -> GameState:
    return replace(GameState(achievements=default_achievements()), **changes)


def _unlocked(state: GameState) -> set[str]:
    return {a.id for a in state.achievements if a.unlocked}


def test_nothing_unlocked_at_start() -> None:
    achievements, new = AchievementEvaluator.evaluate(_state(time_left=90))
    assert new == ()
    assert not any(a.unlocked for a in achievements)


def test_first_fix() -> None:
    _, new = AchievementEvaluator.evaluate(_state(total_fixed=1))
    assert new == ("first_fix",)


def test_combo_master_threshold() -> None:
    assert "combo_master" not in AchievementEvaluator.evaluate(_state(max_combo=4))[1]
    assert "combo_master" in AchievementEvaluator.evaluate(_state(max_combo=5))[1]


def test_speed_demon_needs_later_level() -> None:
    assert "speed_demon" not in AchievementEvaluator.evaluate(_state(level=1, time_left=80))[1]
    assert "speed_demon" not in AchievementEvaluator.evaluate(_state(level=2, time_left=60))[1]
    assert "speed_demon" in AchievementEvaluator.evaluate(_state(level=2, time_left=61))[1]


def test_perfectionist_requires_no_hints() -> None:
    fixed = make_element("a", {}).with_broken({}, now=0)
    assert "perfectionist" in AchievementEvaluator.evaluate(_state(elements=(fixed,)))[1]
    assert "perfectionist" not in AchievementEvaluator.evaluate(
        _state(elements=(fixed,), hints_used=1)
    )[1]
    assert "perfectionist" not in AchievementEvaluator.evaluate(_state(elements=()))[1]


def test_perfectionist_requires_every_element() -> None:
    fixed = make_element("a", {})
    broken = make_element("b", {DefectKind.CLICK: True})
    assert "perfectionist" not in AchievementEvaluator.evaluate(_state(elements=(fixed, broken)))[1]


def test_veteran() -> None:
    assert "veteran" in AchievementEvaluator.evaluate(_state(level=5))[1]


def test_high_scorer_progress_is_monotonic() -> None:
    state = _state(score=400)
    achievements, _ = AchievementEvaluator.evaluate(state)
    high = next(a for a in achievements if a.id == "high_scorer")
    assert high.progress == 400 and not high.unlocked

    achievements, _ = AchievementEvaluator.evaluate(replace(state, achievements=achievements, score=100))
    assert next(a for a in achievements if a.id == "high_scorer").progress == 400

    achievements, new = AchievementEvaluator.evaluate(replace(state, achievements=achievements, score=1500))
    high = next(a for a in achievements if a.id == "high_scorer")
    assert new == ("high_scorer",)
    assert high.progress == 1000


def test_unlocks_are_never_revoked() -> None:
    achievements, _ = AchievementEvaluator.evaluate(_state(level=5, total_fixed=1))
    after, new = AchievementEvaluator.evaluate(
        replace(_state(level=1), achievements=achievements)
    )
    assert new == ()
    assert _unlocked(replace(_state(), achievements=after)) == {"veteran", "first_fix"}
