"""Cross-element check for the drag-to-reorder puzzle."""

from __future__ import annotations

from collections.abc import Sequence

from backend.models.element import DefectKind, Element


class OrderingChecker:
    """Stateless — all methods are static."""

    @staticmethod
    def required_positions(elements: Sequence[Element]) -> dict[int, str]:
        """Map each required display position to the id that must occupy it.

        On a collision the element listed last wins the position.
        """
        return {
            int(el.broken_props[DefectKind.ORDER]): el.id
            for el in elements
            if el.is_broken(DefectKind.ORDER)
        }

    @staticmethod
    def is_satisfied(elements: Sequence[Element]) -> bool:
        required = OrderingChecker.required_positions(elements)
        ordered = sorted(elements, key=lambda el: el.ui.order_index)
        for position, element_id in required.items():
            if position >= len(ordered) or ordered[position].id != element_id:
                return False
        return True

    @staticmethod
    def check(elements: Sequence[Element], now: float | None = None) -> tuple[Element, ...]:
        """Clear every order target at once if the whole group is in place.

        All or nothing: when any required position is wrong the
        elements come back unchanged.
        """
        elements = tuple(elements)
        if not any(el.is_broken(DefectKind.ORDER) for el in elements):
            return elements
        if not OrderingChecker.is_satisfied(elements):
            return elements

        out: list[Element] = []
        for el in elements:
            if el.is_broken(DefectKind.ORDER):
                rest = {k: v for k, v in el.broken_props.items() if k is not DefectKind.ORDER}
                el = el.with_broken(rest, now)
            out.append(el)
        return tuple(out)
