"""Level lifecycle — routes intents through the engine and owns the timers."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Mapping
from typing import Any

from backend.engine.achievements import AchievementEvaluator
from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamescoring import ScoringEngine
from backend.engine.gamestate import GameState, Phase, StateStore
from backend.engine.gameverifier import OrderingChecker, RepairVerifier
from backend.engine.scheduler import ManualScheduler, Scheduler
from backend.models.config import FULL_MODE, GameConfig
from backend.models.element import Element
from backend.models.highscore import HighScoreManager
from backend.models.rewards import (
    AUTOFIX,
    DOUBLE,
    FREEZE,
    default_achievements,
    default_power_ups,
)

logger = logging.getLogger(__name__)

TICK_MS = 1000
TICK_KEY = "tick"
COMBO_KEY = "combo"
ADVANCE_KEY = "advance"


def _power_up_key(power_up_id: str) -> str:
    return f"power-up:{power_up_id}"


class GamePlay:
    """Orchestrates a play session.

    Every intent reads the current snapshot, builds a new one and
    publishes it.  Invalid intents (not running, unknown or already
    fixed element, unaffordable power-up) leave the state untouched.
    """

    def __init__(
        self,
        config: GameConfig = FULL_MODE,
        *,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        scores: HighScoreManager | None = None,
    ) -> None:
        self.config = config
        self.scheduler: Scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.scores = scores if scores is not None else HighScoreManager()
        self.generator = GameGenerator(config, rng)
        self.scoring = ScoringEngine(config.scoring, config.combo_enabled)

        self._store: StateStore[GameState] = StateStore(
            GameState(
                level=1,
                time_left=config.time_for_level(1),
                power_ups=default_power_ups() if config.power_ups_enabled else (),
                achievements=default_achievements() if config.achievements_enabled else (),
                best_score=self.scores.get_best(),
            )
        )

    # -- state access ---------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._store.current

    def subscribe(self, callback: Callable[[GameState], None]) -> Callable[[], None]:
        return self._store.subscribe(callback)

    def _publish(self, state: GameState) -> None:
        self._store.publish(state)

    # -- lifecycle ------------------------------------------------------------

    def start_level(self, level: int | None = None) -> None:
        """Generate and start *level* (default: the current level)."""
        self._cancel_timers()
        s = self.state
        level = self.config.clamp_level(s.level if level is None else level)
        elements = self.generator.generate(level)
        self._publish(
            s.evolve(
                level=level,
                time_left=self.config.time_for_level(level),
                running=True,
                phase=Phase.RUNNING,
                elements=elements,
                hints_used=0,
                combo=0,
                last_fix_at=None,
                power_ups=tuple(p.deactivated() for p in s.power_ups),
                message=f"Level {level} started.",
            )
        )
        logger.info("Level %d started with %d elements", level, len(elements))
        self.scheduler.call_every(TICK_KEY, TICK_MS, self._tick)

    def stop(self) -> None:
        """Pause the session.  Only a fresh :meth:`start_level` resumes it."""
        self._cancel_timers()
        s = self.state
        if not s.running:
            return
        self._publish(
            s.evolve(
                running=False,
                phase=Phase.IDLE,
                combo=0,
                power_ups=tuple(p.deactivated() for p in s.power_ups),
                message="Stopped.",
            )
        )
        logger.info("Stopped at level %d with score %d", s.level, s.score)

    def _tick(self) -> None:
        s = self.state
        if not s.running or s.is_active(FREEZE):
            return
        if s.time_left <= 1:
            self._expire_level()
            return
        self._publish(s.evolve(time_left=s.time_left - 1))

    def _expire_level(self) -> None:
        self._cancel_timers()
        s = self.state
        best = self._submit_best(s.score, s.best_score)
        self.scores.record_game(s.fixed_count, s.max_combo)
        self._publish(
            s.evolve(
                time_left=0,
                running=False,
                phase=Phase.TIME_EXPIRED,
                combo=0,
                power_ups=tuple(p.deactivated() for p in s.power_ups),
                best_score=best,
                message="Time is up.",
            )
        )
        logger.info("Time expired on level %d", s.level)

    def _complete_level(self) -> None:
        self._cancel_timers()
        s = self.state
        bonus = self.scoring.level_bonus(s.time_left, s.max_combo)
        score = s.score + bonus
        best = self._submit_best(score, s.best_score)
        self.scores.record_game(s.fixed_count, s.max_combo)
        nxt = s.evolve(
            score=score,
            level=self.config.clamp_level(s.level + 1),
            running=False,
            phase=Phase.LEVEL_COMPLETE,
            combo=0,
            power_ups=tuple(p.deactivated() for p in s.power_ups),
            best_score=best,
            message=f"Level cleared • +{bonus} bonus",
        )
        self._publish(self._evaluate(nxt))
        logger.info("Level %d cleared, bonus %d, score %d", s.level, bonus, score)

        if self.config.auto_advance_ms is not None:
            self.scheduler.call_later(ADVANCE_KEY, self.config.auto_advance_ms, self.start_level)

    # -- intents --------------------------------------------------------------

    def fix_attempt(
        self, element_id: str, patch: Mapping[str, Any] | None = None, **fields: Any
    ) -> None:
        """Apply a player interaction to one element."""
        s = self.state
        if not s.running:
            return
        el = s.element(element_id)
        if el is None or el.fixed:
            logger.debug("Ignoring fix attempt on %r", element_id)
            return
        now = self.scheduler.now()
        updated = RepairVerifier.verify(el, {**(patch or {}), **fields}, now)
        self._resolve(s, self._replace(s.elements, updated), now)

    def swap_order(self, source_id: str, target_id: str) -> None:
        """Drag *source_id* onto *target_id*, exchanging their positions."""
        s = self.state
        if not s.running or source_id == target_id:
            return
        src, tgt = s.element(source_id), s.element(target_id)
        if src is None or tgt is None or src.fixed:
            return
        now = self.scheduler.now()
        moved_src = RepairVerifier.verify(src, {"order_index": tgt.ui.order_index}, now)
        # A fixed target only changes place.
        moved_tgt = tgt.with_ui(tgt.ui.patched({"order_index": src.ui.order_index}))
        if not tgt.fixed:
            moved_tgt = RepairVerifier.verify(tgt, {"order_index": src.ui.order_index}, now)
        elements = self._replace(self._replace(s.elements, moved_src), moved_tgt)
        self._resolve(s, elements, now)

    def use_hint(self, element_id: str | None = None) -> None:
        s = self.state
        if not s.running:
            return
        target = s.element(element_id) if element_id else None
        if target is None:
            target = s.first_unfixed
        message = f"Hint: {target.hint}" if target else "Hint used. Time penalty applied."
        self.scheduler.cancel(COMBO_KEY)
        nxt = s.evolve(
            time_left=max(0, s.time_left - self.config.hint_penalty),
            hints_used=s.hints_used + 1,
            combo=0,
            message=message,
        )
        self._publish(self._evaluate(nxt))

    def use_power_up(self, power_up_id: str) -> None:
        s = self.state
        if not s.running or not self.config.power_ups_enabled:
            return
        p = s.power_up(power_up_id)
        if p is None or p.active or s.score < p.cost:
            logger.debug("Power-up %r not available", power_up_id)
            return

        nxt = s.evolve(
            score=s.score - p.cost,
            power_ups=tuple(x.activated() if x.id == p.id else x for x in s.power_ups),
            message=f"{p.name} activated!",
        )
        logger.info("Power-up %s activated for %d", p.id, p.cost)

        if p.id == AUTOFIX:
            target = nxt.first_unfixed
            if target is not None:
                now = self.scheduler.now()
                fixed = RepairVerifier.force_fix(target, now)
                self._resolve(nxt, self._replace(nxt.elements, fixed), now)
                return
        elif p.duration_ms is not None:
            self.scheduler.call_later(
                _power_up_key(p.id), p.duration_ms, lambda: self._expire_power_up(p.id)
            )
        self._publish(self._evaluate(nxt))

    # -- helpers --------------------------------------------------------------

    def _resolve(self, s: GameState, elements: tuple[Element, ...], now: float) -> None:
        """Run the order check, score new repairs, evaluate achievements, publish."""
        elements = OrderingChecker.check(elements, now)
        nxt = s.evolve(elements=elements)
        diff = nxt.fixed_count - s.fixed_count
        if diff > 0:
            nxt = self._score(nxt, diff, now)
        nxt = self._evaluate(nxt)
        self._publish(nxt)
        if nxt.all_fixed:
            self._complete_level()

    def _score(self, s: GameState, diff: int, now: float) -> GameState:
        result = self.scoring.score_repair(
            diff,
            level=s.level,
            combo=s.combo,
            max_combo=s.max_combo,
            last_fix_at=s.last_fix_at,
            now=now,
            time_left=s.time_left,
            doubled=s.is_active(DOUBLE),
        )
        if self.config.combo_enabled:
            self.scheduler.call_later(
                COMBO_KEY, self.config.scoring.combo_window_ms, self._expire_combo
            )
        return s.evolve(
            score=s.score + result.points,
            combo=result.combo,
            max_combo=result.max_combo,
            total_fixed=s.total_fixed + diff,
            last_fix_at=now,
            message=result.describe(),
        )

    def _expire_combo(self) -> None:
        s = self.state
        if s.combo:
            self._publish(s.evolve(combo=0))

    def _expire_power_up(self, power_up_id: str) -> None:
        s = self.state
        p = s.power_up(power_up_id)
        if p is None or not p.active:
            return
        self._publish(
            s.evolve(
                power_ups=tuple(x.deactivated() if x.id == p.id else x for x in s.power_ups),
                message=f"{p.name} wore off.",
            )
        )

    def _evaluate(self, s: GameState) -> GameState:
        if not self.config.achievements_enabled:
            return s
        achievements, unlocked = AchievementEvaluator.evaluate(s)
        for ach_id in unlocked:
            logger.info("Achievement unlocked: %s", ach_id)
        return s.evolve(achievements=achievements, unlocked_now=unlocked)

    def _submit_best(self, score: int, best: int) -> int:
        if score > best:
            self.scores.submit_score(score)
            return score
        return best

    def _cancel_timers(self) -> None:
        for key in (TICK_KEY, COMBO_KEY, ADVANCE_KEY):
            self.scheduler.cancel(key)
        for p in self.state.power_ups:
            self.scheduler.cancel(_power_up_key(p.id))

    @staticmethod
    def _replace(elements: tuple[Element, ...], updated: Element) -> tuple[Element, ...]:
        return tuple(updated if el.id == updated.id else el for el in elements)
