"""Generates workshop boards: ten defects scattered over the viewport."""

from __future__ import annotations

import random

from backend.models.defect import Defect, DefectType

DEFECTS_PER_LEVEL = 10

VIEWPORT = (1400, 800)
HEADER_HEIGHT = 150
MARGIN = 80
DEFECT_SIZE = 100
MIN_AREA = (400, 300)

# Cumulative thresholds per level; the last type takes the remainder.
_MIXES: dict[int, list[tuple[float, DefectType]]] = {
    3: [(0.3, DefectType.SIMPLE), (0.6, DefectType.CRACK), (1.0, DefectType.SCREW)],
    4: [
        (0.3, DefectType.SIMPLE),
        (0.5, DefectType.CRACK),
        (0.7, DefectType.SCREW),
        (1.0, DefectType.WIRE),
    ],
    5: [
        (0.2, DefectType.SIMPLE),
        (0.35, DefectType.CRACK),
        (0.5, DefectType.SCREW),
        (0.7, DefectType.WIRE),
        (1.0, DefectType.PAINT),
    ],
}


class WorkshopGenerator:
    def __init__(
        self,
        rng: random.Random | None = None,
        viewport: tuple[int, int] = VIEWPORT,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.viewport = viewport

    def generate(self, level: int) -> tuple[Defect, ...]:
        types = [self._pick_type(level, i) for i in range(DEFECTS_PER_LEVEL)]

        # Wires are fixed in pairs; an odd one out becomes a plain defect.
        wires = [i for i, t in enumerate(types) if t is DefectType.WIRE]
        if len(wires) % 2 == 1:
            types[wires[-1]] = DefectType.SIMPLE

        defects = []
        for i, defect_type in enumerate(types):
            x, y = self._position()
            defects.append(Defect(id=f"defect-{i}", type=defect_type, x=x, y=y))
        return tuple(defects)

    def _pick_type(self, level: int, index: int) -> DefectType:
        if level <= 1:
            return DefectType.SIMPLE
        if level == 2:
            return DefectType.SIMPLE if index < DEFECTS_PER_LEVEL // 2 else DefectType.CRACK
        roll = self.rng.random()
        for threshold, defect_type in _MIXES[min(level, 5)]:
            if roll < threshold:
                return defect_type
        return _MIXES[min(level, 5)][-1][1]

    def _position(self) -> tuple[float, float]:
        width, height = self.viewport
        board_height = height - HEADER_HEIGHT
        max_x = width - MARGIN - DEFECT_SIZE
        max_y = board_height - MARGIN - DEFECT_SIZE
        available_w = max(MIN_AREA[0], max_x - MARGIN)
        available_h = max(MIN_AREA[1], max_y - MARGIN)
        return (
            MARGIN + self.rng.random() * available_w,
            MARGIN + self.rng.random() * available_h,
        )
