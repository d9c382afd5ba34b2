"""Workshop mode — tap, hold, paint and turn defects back into shape.

Each defect type has its own repair gesture.  Gestures that take time
(holding a crack, painting) run as keyed scheduler tasks that read the
current state when they fire.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from backend.engine.gamestate import StateStore
from backend.engine.scheduler import ManualScheduler, Scheduler
from backend.engine.workshop.generator import WorkshopGenerator
from backend.models.defect import Defect, DefectType, Tool, WorkshopState

logger = logging.getLogger(__name__)

MAX_LEVEL = 5
TRACK_MS = 50
HOLD_MS = 500
PAINT_STEP = 2
WHEEL_STEP = 2
WHEEL_ROTATION = 0.5  # degrees per unit of wheel delta
TURN_FACTOR = 30  # progress per radian
TURN_THRESHOLD = 0.05  # radians
AUTO_ADVANCE_MS = 2000
ADVANCE_KEY = "advance"

_TOOLS: dict[DefectType, Tool] = {
    DefectType.SIMPLE: Tool.HAMMER,
    DefectType.CRACK: Tool.HAMMER,
    DefectType.SCREW: Tool.WRENCH,
    DefectType.WIRE: Tool.PLIERS,
    DefectType.PAINT: Tool.BRUSH,
}


class Workshop:
    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        auto_advance_ms: int | None = AUTO_ADVANCE_MS,
    ) -> None:
        self.scheduler: Scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.generator = WorkshopGenerator(rng)
        self.auto_advance_ms = auto_advance_ms
        self._store: StateStore[WorkshopState] = StateStore(WorkshopState())
        self._keys: set[str] = set()

    @property
    def state(self) -> WorkshopState:
        return self._store.current

    def subscribe(self, callback: Callable[[WorkshopState], None]) -> Callable[[], None]:
        return self._store.subscribe(callback)

    # -- levels ---------------------------------------------------------------

    def start_level(self, level: int = 1) -> None:
        for key in self._keys:
            self.scheduler.cancel(key)
        self._keys.clear()
        level = max(1, min(MAX_LEVEL, level))
        self._store.publish(WorkshopState(level=level, defects=self.generator.generate(level)))
        logger.info("Workshop level %d started", level)

    def next_level(self) -> None:
        if self.state.level < MAX_LEVEL:
            self.start_level(self.state.level + 1)

    def tool_for(self, defect_id: str) -> Tool | None:
        d = self.state.defect(defect_id)
        if d is None:
            return None
        if self.state.level == 1:
            return Tool.ROLLER
        return _TOOLS[d.type]

    # -- gestures -------------------------------------------------------------

    def hit(self, defect_id: str) -> None:
        """Strike a defect; fixes it only when its own gesture is complete."""
        d = self._open(defect_id)
        if d is not None and self._ready(d):
            self._fix(d.id)

    def press(self, defect_id: str) -> None:
        d = self._open(defect_id, DefectType.CRACK)
        if d is None:
            return
        self._update(d.evolve(hold_progress=0))
        self._every(f"hold:{d.id}", lambda: self._hold_step(d.id))

    def release(self, defect_id: str) -> None:
        self._cancel(f"hold:{defect_id}")
        d = self._open(defect_id, DefectType.CRACK)
        if d is not None and d.hold_progress:
            self._update(d.evolve(hold_progress=0))

    def paint_start(self, defect_id: str) -> None:
        d = self._open(defect_id)
        if d is None or not self._paintable(d):
            return
        self._every(f"paint:{d.id}", lambda: self._paint_step(d.id))

    def paint_stop(self, defect_id: str) -> None:
        self._cancel(f"paint:{defect_id}")

    def wheel(self, defect_id: str, delta_y: float) -> None:
        d = self._open(defect_id, DefectType.SCREW)
        if d is None:
            return
        d = d.evolve(
            rotation=(d.rotation + abs(delta_y) * WHEEL_ROTATION) % 360,
            wheel_progress=min(100, d.wheel_progress + WHEEL_STEP),
        )
        self._update(d)
        if d.wheel_progress >= 100:
            self._fix(d.id)

    def turn(self, defect_id: str, angle_delta: float) -> None:
        """Circle the tool around a screw by *angle_delta* radians."""
        d = self._open(defect_id, DefectType.SCREW)
        if d is None or abs(angle_delta) <= TURN_THRESHOLD:
            return
        d = d.evolve(circular_progress=min(100, d.circular_progress + abs(angle_delta) * TURN_FACTOR))
        self._update(d)
        if d.circular_progress >= 100:
            self._fix(d.id)

    def connect_wires(self, first_id: str, second_id: str) -> None:
        if first_id == second_id:
            return
        a = self._open(first_id, DefectType.WIRE)
        b = self._open(second_id, DefectType.WIRE)
        if a is None or b is None or a.connected or b.connected:
            return
        self._update(a.evolve(connected=True), b.evolve(connected=True))

    # -- timed steps ----------------------------------------------------------

    def _hold_step(self, defect_id: str) -> None:
        d = self._open(defect_id, DefectType.CRACK)
        if d is None:
            self._cancel(f"hold:{defect_id}")
            return
        progress = min(100, d.hold_progress + TRACK_MS / HOLD_MS * 100)
        self._update(d.evolve(hold_progress=progress))
        if progress >= 100:
            self._cancel(f"hold:{defect_id}")
            self._fix(defect_id)

    def _paint_step(self, defect_id: str) -> None:
        d = self._open(defect_id)
        if d is None:
            self._cancel(f"paint:{defect_id}")
            return
        progress = min(100, d.paint_progress + PAINT_STEP)
        self._update(d.evolve(paint_progress=progress))
        if progress >= 100:
            self._cancel(f"paint:{defect_id}")
            self._fix(defect_id)

    # -- helpers --------------------------------------------------------------

    def _open(self, defect_id: str, defect_type: DefectType | None = None) -> Defect | None:
        """Return the defect if it is unfixed (and of *defect_type*, if given)."""
        d = self.state.defect(defect_id)
        if d is None or d.fixed:
            return None
        if defect_type is not None and d.type is not defect_type:
            return None
        return d

    def _paintable(self, d: Defect) -> bool:
        return d.type is DefectType.PAINT or (
            d.type is DefectType.SIMPLE and self.state.level == 1
        )

    def _ready(self, d: Defect) -> bool:
        if d.type is DefectType.SIMPLE:
            return self.state.level > 1 or d.paint_progress >= 100
        if d.type is DefectType.CRACK:
            return d.hold_progress >= 100
        if d.type is DefectType.SCREW:
            return d.wheel_progress >= 100 or d.circular_progress >= 100
        if d.type is DefectType.WIRE:
            return d.connected
        return d.paint_progress >= 100

    def _update(self, *changed: Defect) -> None:
        by_id = {d.id: d for d in changed}
        s = self.state
        defects = tuple(by_id.get(d.id, d) for d in s.defects)
        self._store.publish(
            WorkshopState(level=s.level, defects=defects, level_complete=s.level_complete)
        )

    def _fix(self, defect_id: str) -> None:
        d = self._open(defect_id)
        if d is None:
            return
        self._update(d.evolve(fixed=True))
        s = self.state
        if all(x.fixed for x in s.defects):
            self._store.publish(WorkshopState(level=s.level, defects=s.defects, level_complete=True))
            logger.info("Workshop level %d complete", s.level)
            if self.auto_advance_ms is not None and s.level < MAX_LEVEL:
                self._later(ADVANCE_KEY, self.auto_advance_ms, self.next_level)

    def _every(self, key: str, callback: Callable[[], None]) -> None:
        self._keys.add(key)
        self.scheduler.call_every(key, TRACK_MS, callback)

    def _later(self, key: str, delay_ms: int, callback: Callable[[], None]) -> None:
        self._keys.add(key)
        self.scheduler.call_later(key, delay_ms, callback)

    def _cancel(self, key: str) -> None:
        self._keys.discard(key)
        self.scheduler.cancel(key)
