"""Shared fixtures: a virtual clock, seeded randomness and game factories."""

from __future__ import annotations

import random
from dataclasses import replace

import pytest

from backend.engine.gameplay import GamePlay
from backend.engine.gamestate import GameState
from backend.engine.scheduler import ManualScheduler
from backend.models.config import FULL_MODE, GameConfig
from backend.models.element import DefectKind, Element, ElementType, UIState
from backend.models.highscore import HighScoreManager, MemoryStore

# Every element gets exactly one click defect on level 1.
CLICK_ONLY = replace(FULL_MODE, defect_kinds=(DefectKind.CLICK,))


def make_element(
    element_id: str,
    broken: dict[DefectKind, object],
    *,
    order_index: int = 0,
    **ui: object,
) -> Element:
    return Element(
        id=element_id,
        type=ElementType.CARD,
        difficulty=1,
        hint=f"hint for {element_id}",
        ui=UIState(order_index=order_index).patched(ui),
        broken_props=broken,
    )


def load_elements(game: GamePlay, *elements: Element, **changes: object) -> GameState:
    """Swap the generated level for hand-built elements."""
    game._store.publish(game.state.evolve(elements=tuple(elements), **changes))
    return game.state


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def scores() -> HighScoreManager:
    return HighScoreManager(MemoryStore())


@pytest.fixture
def make_game(scheduler: ManualScheduler, scores: HighScoreManager):
    def factory(config: GameConfig = CLICK_ONLY, seed: int = 1) -> GamePlay:
        return GamePlay(config, rng=random.Random(seed), scheduler=scheduler, scores=scores)

    return factory
