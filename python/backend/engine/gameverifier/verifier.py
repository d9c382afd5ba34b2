"""Per-defect repair verification with tolerance bands."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

from backend.models.element import DefectKind, Element, UIState

ROTATION_TOLERANCE = 15  # degrees
SLIDER_TOLERANCE = 2
UNIT_TOLERANCE = 0.1  # opacity / scale
_EPS = 1e-9


def angular_distance(a: float, b: float) -> float:
    """Shortest distance between two angles in degrees, wrapping at 360."""
    diff = abs(a % 360 - b % 360)
    return min(diff, 360 - diff)


def normalize_color(color: str | None) -> str:
    return re.sub(r"\s", "", color or "").lower()


def _near(value: float | None, target: float, tolerance: float) -> bool:
    if value is None:
        return False
    return abs(value - target) <= tolerance + _EPS


_CHECKS: dict[DefectKind, Callable[[UIState, Any], bool]] = {
    DefectKind.CLICK: lambda ui, _: ui.clicked is True,
    DefectKind.ROTATE: lambda ui, t: angular_distance(ui.rotation or 0, t) <= ROTATION_TOLERANCE,
    DefectKind.TEXT: lambda ui, t: (ui.text or "").strip().lower() == str(t).strip().lower(),
    DefectKind.COLOR: lambda ui, t: normalize_color(ui.color) == normalize_color(t),
    DefectKind.BLUR: lambda ui, _: ui.blurred is False,
    DefectKind.DISABLED: lambda ui, _: ui.disabled is False,
    DefectKind.SLIDER: lambda ui, t: _near(ui.slider_value, t, SLIDER_TOLERANCE),
    DefectKind.CHECKBOX: lambda ui, _: ui.checked is True,
    DefectKind.TOGGLE: lambda ui, _: ui.toggle_state is True,
    DefectKind.DROPDOWN: lambda ui, t: ui.selected_option == t,
    DefectKind.OPACITY: lambda ui, _: _near(ui.opacity, 1.0, UNIT_TOLERANCE),
    DefectKind.SCALE: lambda ui, _: _near(ui.scale, 1.0, UNIT_TOLERANCE),
}

# Ui values that satisfy each kind, used when a repair is forced.
_SOLUTIONS: dict[DefectKind, Callable[[Any], dict[str, Any]]] = {
    DefectKind.CLICK: lambda _: {"clicked": True},
    DefectKind.ROTATE: lambda t: {"rotation": t},
    DefectKind.TEXT: lambda t: {"text": t},
    DefectKind.COLOR: lambda t: {"color": t},
    DefectKind.BLUR: lambda _: {"blurred": False},
    DefectKind.DISABLED: lambda _: {"disabled": False},
    DefectKind.SLIDER: lambda t: {"slider_value": t},
    DefectKind.CHECKBOX: lambda _: {"checked": True},
    DefectKind.TOGGLE: lambda _: {"toggle_state": True},
    DefectKind.DROPDOWN: lambda t: {"selected_option": t},
    DefectKind.OPACITY: lambda _: {"opacity": 1.0},
    DefectKind.SCALE: lambda _: {"scale": 1.0},
}


class RepairVerifier:
    """Stateless — all methods are static."""

    @staticmethod
    def is_satisfied(kind: DefectKind, ui: UIState, target: Any) -> bool:
        """Order targets are never satisfied here; see ``OrderingChecker``."""
        check = _CHECKS.get(kind)
        return check is not None and check(ui, target)

    @staticmethod
    def verify(element: Element, patch: Mapping[str, Any], now: float | None = None) -> Element:
        """Apply *patch* to *element* and drop every dimension it now satisfies.

        A fixed element is returned unchanged.
        """
        if element.fixed:
            return element

        ui = element.ui.patched(patch)
        remaining = {
            kind: target
            for kind, target in element.broken_props.items()
            if not RepairVerifier.is_satisfied(kind, ui, target)
        }
        return element.with_ui(ui).with_broken(remaining, now)

    @staticmethod
    def solution(element: Element) -> dict[str, Any]:
        """Return a ui patch satisfying every non-order defect of *element*."""
        patch: dict[str, Any] = {}
        for kind, target in element.broken_props.items():
            if kind in _SOLUTIONS:
                patch.update(_SOLUTIONS[kind](target))
        return patch

    @staticmethod
    def force_fix(element: Element, now: float | None = None) -> Element:
        """Repair every dimension of *element*, order included."""
        if element.fixed:
            return element
        ui = element.ui.patched(RepairVerifier.solution(element))
        return element.with_ui(ui).with_broken({}, now)
