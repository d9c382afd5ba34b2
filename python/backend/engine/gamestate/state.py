"""Immutable game-state snapshots and the container that publishes them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Generic, TypeVar

from backend.models.element import Element
from backend.models.rewards import Achievement, PowerUp


T = TypeVar("T")


class Phase(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    LEVEL_COMPLETE = "level_complete"
    TIME_EXPIRED = "time_expired"


@dataclass(frozen=True)
class GameState:
    """One snapshot of a session.  Never mutated; use :meth:`evolve`."""

    score: int = 0
    level: int = 1
    time_left: int = 0
    running: bool = False
    phase: Phase = Phase.IDLE
    elements: tuple[Element, ...] = ()
    combo: int = 0
    max_combo: int = 0
    hints_used: int = 0
    total_fixed: int = 0
    power_ups: tuple[PowerUp, ...] = ()
    achievements: tuple[Achievement, ...] = ()
    message: str | None = None
    last_fix_at: float | None = None
    unlocked_now: tuple[str, ...] = ()
    best_score: int = 0

    def evolve(self, **changes: object) -> GameState:
        # The one-shot notification only survives on the snapshot that set it.
        changes.setdefault("unlocked_now", ())
        return replace(self, **changes)

    # -- queries --------------------------------------------------------------

    def element(self, element_id: str) -> Element | None:
        for el in self.elements:
            if el.id == element_id:
                return el
        return None

    def power_up(self, power_up_id: str) -> PowerUp | None:
        for p in self.power_ups:
            if p.id == power_up_id:
                return p
        return None

    def is_active(self, power_up_id: str) -> bool:
        p = self.power_up(power_up_id)
        return p is not None and p.active

    @property
    def fixed_count(self) -> int:
        return sum(1 for el in self.elements if el.fixed)

    @property
    def all_fixed(self) -> bool:
        return bool(self.elements) and all(el.fixed for el in self.elements)

    @property
    def first_unfixed(self) -> Element | None:
        return next((el for el in self.elements if not el.fixed), None)


class StateStore(Generic[T]):
    """Single-owner holder of the current snapshot.

    Subscribers receive the current snapshot on subscription and every
    snapshot published after it, synchronously.
    """

    def __init__(self, initial: T) -> None:
        self._current = initial
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def current(self) -> T:
        return self._current

    def publish(self, state: T) -> None:
        self._current = state
        for callback in list(self._subscribers):
            callback(state)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        self._subscribers.append(callback)
        callback(self._current)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
