"""Generates randomized levels of broken UI elements."""

from __future__ import annotations

import math
import random
from collections.abc import Mapping
from typing import Any

from backend.models.config import FULL_MODE, GameConfig
from backend.models.element import DefectKind, Element, ElementType, UIState

ROTATION_TARGETS = (90, 180, 270)
WORDS = ("fix", "hello", "angular", "dev", "web")
PALETTE = ("#FF6B6B", "#4ECDC4", "#45B7D1", "#FFA07A", "#98D8C8")
OPTIONS = ("Small", "Medium", "Large", "X-Large")
NEUTRAL_COLOR = "#808080"

_HINTS: dict[DefectKind, str] = {
    DefectKind.ROTATE: "Double-click to rotate this element.",
    DefectKind.CLICK: "Click the tile to activate.",
    DefectKind.TEXT: 'Type "{target}" in the input.',
    DefectKind.COLOR: "Pick the correct color from palette.",
    DefectKind.BLUR: "Click to remove blur effect.",
    DefectKind.DISABLED: "Click to enable this control.",
    DefectKind.SLIDER: "Drag slider to the correct position.",
    DefectKind.ORDER: "Drag tiles to reorder them correctly.",
    DefectKind.CHECKBOX: "Tick the checkbox.",
    DefectKind.TOGGLE: "Switch the toggle on.",
    DefectKind.DROPDOWN: 'Select "{target}" from the dropdown.',
    DefectKind.OPACITY: "Bring the element back to full opacity.",
    DefectKind.SCALE: "Resize the element back to normal.",
}
DEFAULT_HINT = "Interact with this element to fix it."


class GameGenerator:
    """Builds the element set for a level from an injectable random source."""

    def __init__(
        self, config: GameConfig = FULL_MODE, rng: random.Random | None = None
    ) -> None:
        self.config = config
        self.rng = rng if rng is not None else random.Random()

    # -- public API -----------------------------------------------------------

    def element_count(self, level: int) -> int:
        return self.config.element_base + math.floor(level * self.config.element_growth)

    def generate(self, level: int) -> tuple[Element, ...]:
        """Return a shuffled, freshly broken element set for *level*."""
        count = self.element_count(level)
        elements = [self._make_element(i, level, count) for i in range(count)]

        # Fisher-Yates, so display order is independent of any order target.
        for i in range(len(elements) - 1, 0, -1):
            j = math.floor(self.rng.random() * (i + 1))
            elements[i], elements[j] = elements[j], elements[i]

        return tuple(
            el.with_ui(el.ui.patched({"order_index": idx}))
            for idx, el in enumerate(elements)
        )

    @staticmethod
    def build_hint(broken_props: Mapping[DefectKind, Any]) -> str:
        for kind in DefectKind:
            if kind in broken_props:
                return _HINTS[kind].format(target=broken_props[kind])
        return DEFAULT_HINT

    # -- helpers --------------------------------------------------------------

    def _pick(self, seq: tuple) -> Any:
        return seq[math.floor(self.rng.random() * len(seq))]

    def _pick_kinds(self, level: int) -> list[DefectKind]:
        n = 1 + math.floor(self.rng.random() * min(2, math.ceil(level / 2)))
        pool = list(self.config.defect_kinds)
        picks: list[DefectKind] = []
        while len(picks) < n and pool:
            picks.append(pool.pop(math.floor(self.rng.random() * len(pool))))
        return picks

    def _make_element(self, index: int, level: int, count: int) -> Element:
        el_type: ElementType = self._pick(self.config.element_types)
        difficulty = 1 + math.floor(self.rng.random() * min(3, level))

        broken: dict[DefectKind, Any] = {}
        ui: dict[str, Any] = {}
        for kind in self._pick_kinds(level):
            target, start = self._break(kind, count)
            broken[kind] = target
            ui.update(start)

        return Element(
            id=f"el-{index}",
            type=el_type,
            difficulty=difficulty,
            hint=self.build_hint(broken),
            ui=UIState().patched(ui),
            broken_props=broken,
        )

    def _break(self, kind: DefectKind, count: int) -> tuple[Any, dict[str, Any]]:
        """Return ``(target, broken starting ui)`` for one defect kind."""
        if kind is DefectKind.CLICK:
            return True, {"clicked": False}
        if kind is DefectKind.ROTATE:
            need = self._pick(ROTATION_TARGETS)
            return need, {"rotation": (need + 180) % 360}
        if kind is DefectKind.TEXT:
            return self._pick(WORDS), {"text": ""}
        if kind is DefectKind.COLOR:
            return self._pick(PALETTE), {"color": NEUTRAL_COLOR}
        if kind is DefectKind.BLUR:
            return True, {"blurred": True}
        if kind is DefectKind.DISABLED:
            return True, {"disabled": True}
        if kind is DefectKind.SLIDER:
            return 30 + math.floor(self.rng.random() * 40), {"slider_value": 0}
        if kind is DefectKind.ORDER:
            return math.floor(self.rng.random() * count), {}
        if kind is DefectKind.CHECKBOX:
            return True, {"checked": False}
        if kind is DefectKind.TOGGLE:
            return True, {"toggle_state": False}
        if kind is DefectKind.DROPDOWN:
            return self._pick(OPTIONS), {"selected_option": None}
        if kind is DefectKind.OPACITY:
            return 1.0, {"opacity": 0.3}
        if kind is DefectKind.SCALE:
            return 1.0, {"scale": 0.5}
        raise ValueError(f"Unknown defect kind: {kind}")
