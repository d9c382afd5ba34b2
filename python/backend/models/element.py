"""Element model — one broken widget on the game board."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from enum import StrEnum
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)


class ElementType(StrEnum):
    BUTTON = "button"
    INPUT = "input"
    CARD = "card"
    SLIDER = "slider"
    LABEL = "label"
    CHECKBOX = "checkbox"
    TOGGLE = "toggle"
    DROPDOWN = "dropdown"
    IMAGE = "image"


class DefectKind(StrEnum):
    """One dimension along which an element can be broken.

    Declaration order is the hint priority: when several kinds coexist
    the first one listed here decides the hint text.
    """

    ROTATE = "rotate"
    CLICK = "click"
    TEXT = "text"
    COLOR = "color"
    BLUR = "blur"
    DISABLED = "disabled"
    SLIDER = "slider"
    ORDER = "order"
    CHECKBOX = "checkbox"
    TOGGLE = "toggle"
    DROPDOWN = "dropdown"
    OPACITY = "opacity"
    SCALE = "scale"


@dataclass(frozen=True)
class UIState:
    """Observable visual/interactive attributes of an element."""

    rotation: float = 0
    text: str = ""
    color: str = "#808080"
    blurred: bool = False
    disabled: bool = False
    order_index: int = 0
    clicked: bool = False
    slider_value: float = 0
    checked: bool = False
    toggle_state: bool = False
    selected_option: str | None = None
    opacity: float = 1.0
    scale: float = 1.0

    def patched(self, patch: Mapping[str, Any]) -> UIState:
        """Return a copy with *patch* applied; unknown keys are ignored."""
        known = _UI_FIELDS.intersection(patch)
        unknown = set(patch) - known
        if unknown:
            logger.debug("Ignoring unknown UI fields: %s", sorted(unknown))
        if not known:
            return self
        return replace(self, **{k: patch[k] for k in known})


_UI_FIELDS = frozenset(f.name for f in fields(UIState))


@dataclass(frozen=True)
class Element:
    """A widget instance in a level.

    ``broken_props`` maps every still-broken defect kind to its target
    value.  A kind that is absent is satisfied; the element is fixed
    exactly when the mapping is empty.
    """

    id: str
    type: ElementType
    difficulty: int
    hint: str
    ui: UIState = field(default_factory=UIState)
    broken_props: Mapping[DefectKind, Any] = field(default_factory=dict)
    fixed: bool = False
    fixed_at: float | None = None

    def __post_init__(self) -> None:
        # Freeze the mapping so snapshots cannot be edited in place.
        if not isinstance(self.broken_props, MappingProxyType):
            object.__setattr__(
                self, "broken_props", MappingProxyType(dict(self.broken_props))
            )

    # -- queries --------------------------------------------------------------

    def is_broken(self, kind: DefectKind) -> bool:
        return kind in self.broken_props

    def target(self, kind: DefectKind) -> Any:
        return self.broken_props.get(kind)

    @property
    def defects(self) -> list[DefectKind]:
        """Broken kinds in hint-priority order."""
        return [k for k in DefectKind if k in self.broken_props]

    # -- copy-on-write helpers ------------------------------------------------

    def with_ui(self, ui: UIState) -> Element:
        return replace(self, ui=ui)

    def with_broken(
        self, broken_props: Mapping[DefectKind, Any], now: float | None
    ) -> Element:
        """Return a copy carrying *broken_props* with ``fixed`` recomputed."""
        fixed = not broken_props
        fixed_at = self.fixed_at
        if fixed and not self.fixed:
            fixed_at = now
        return replace(
            self,
            broken_props=MappingProxyType(dict(broken_props)),
            fixed=fixed,
            fixed_at=fixed_at,
        )
