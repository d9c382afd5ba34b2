"""Power-ups and achievements."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class PowerUp:
    """A score-purchasable modifier.

    ``duration_ms`` is ``None`` for single-use power-ups, which apply
    their effect on activation and never stay active.
    """

    id: str
    name: str
    cost: int
    duration_ms: int | None = None
    active: bool = False

    def activated(self) -> PowerUp:
        return replace(self, active=self.duration_ms is not None)

    def deactivated(self) -> PowerUp:
        return replace(self, active=False)


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    unlocked: bool = False
    progress: int | None = None
    target: int | None = None


AUTOFIX = "autofix"
FREEZE = "freeze"
DOUBLE = "double"


def default_power_ups() -> tuple[PowerUp, ...]:
    return (
        PowerUp(id=AUTOFIX, name="Auto-Fix", cost=500),
        PowerUp(id=FREEZE, name="Time Freeze", cost=300, duration_ms=10_000),
        PowerUp(id=DOUBLE, name="Double Points", cost=400, duration_ms=15_000),
    )


def default_achievements() -> tuple[Achievement, ...]:
    return (
        Achievement("first_fix", "First Fix", "Repair your first element."),
        Achievement("combo_master", "Combo Master", "Reach a 5x combo."),
        Achievement("speed_demon", "Speed Demon", "Clear a level with more than 60s left."),
        Achievement("perfectionist", "Perfectionist", "Clear a level without hints."),
        Achievement("veteran", "Veteran", "Reach level 5."),
        Achievement(
            "high_scorer", "High Scorer", "Score 1000 points.", progress=0, target=1000
        ),
    )
