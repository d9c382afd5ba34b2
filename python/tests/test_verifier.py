"""Repair verifier tolerances and the all-or-nothing order puzzle."""

from __future__ import annotations

import pytest
from conftest import make_element

from backend.engine.gameverifier import OrderingChecker, RepairVerifier
from backend.engine.gameverifier.verifier import angular_distance, normalize_color
from backend.models.element import DefectKind

# -- helpers ------------------------------------------------------------------


def _attempt(kind: DefectKind, target: object, **patch: object) -> bool:
    """Return True if *patch* repairs a single-defect element."""
    el = make_element("x", {kind: target})
    return RepairVerifier.verify(el, patch, now=0).fixed


# -- tolerance boundaries -----------------------------------------------------


@pytest.mark.parametrize(
    ("rotation", "fixed"),
    [(90, True), (105, True), (75, True), (106, False), (74, False), (450, True), (270, False)],
)
def test_rotation_tolerance(rotation: float, fixed: bool) -> None:
    assert _attempt(DefectKind.ROTATE, 90, rotation=rotation) is fixed


def test_rotation_wraps_at_zero() -> None:
    assert angular_distance(355, 5) == 10
    assert angular_distance(-90, 270) == 0
    assert _attempt(DefectKind.ROTATE, 270, rotation=-90)


@pytest.mark.parametrize(
    ("value", "fixed"),
    [(50, True), (48, True), (52, True), (47, False), (53, False), (51.5, True)],
)
def test_slider_tolerance(value: float, fixed: bool) -> None:
    assert _attempt(DefectKind.SLIDER, 50, slider_value=value) is fixed


@pytest.mark.parametrize(
    ("value", "fixed"),
    [(1.0, True), (0.9, True), (1.1, True), (0.85, False), (0.3, False)],
)
def test_opacity_and_scale_tolerance(value: float, fixed: bool) -> None:
    assert _attempt(DefectKind.OPACITY, 1.0, opacity=value) is fixed
    assert _attempt(DefectKind.SCALE, 1.0, scale=value) is fixed


def test_text_is_trimmed_and_case_insensitive() -> None:
    assert _attempt(DefectKind.TEXT, "hello", text="  HeLLo ")
    assert not _attempt(DefectKind.TEXT, "hello", text="hell o")


def test_color_is_normalized() -> None:
    assert normalize_color(" #FF 6B6B ") == "#ff6b6b"
    assert _attempt(DefectKind.COLOR, "#FF6B6B", color="#ff6b6b ")
    assert not _attempt(DefectKind.COLOR, "#FF6B6B", color="#808080")


def test_dropdown_is_exact() -> None:
    assert _attempt(DefectKind.DROPDOWN, "Large", selected_option="Large")
    assert not _attempt(DefectKind.DROPDOWN, "Large", selected_option="large")


@pytest.mark.parametrize(
    ("kind", "patch"),
    [
        (DefectKind.CLICK, {"clicked": True}),
        (DefectKind.BLUR, {"blurred": False}),
        (DefectKind.DISABLED, {"disabled": False}),
        (DefectKind.CHECKBOX, {"checked": True}),
        (DefectKind.TOGGLE, {"toggle_state": True}),
    ],
)
def test_boolean_defects(kind: DefectKind, patch: dict) -> None:
    assert _attempt(kind, True, **patch)


def test_blur_not_cleared_while_blurred() -> None:
    assert not _attempt(DefectKind.BLUR, True, blurred=True)


# -- element updates ----------------------------------------------------------


def test_partial_repair_prunes_only_satisfied_kinds() -> None:
    el = make_element("x", {DefectKind.CLICK: True, DefectKind.TEXT: "dev"})
    out = RepairVerifier.verify(el, {"clicked": True}, now=5)
    assert dict(out.broken_props) == {DefectKind.TEXT: "dev"}
    assert not out.fixed
    assert out.fixed_at is None
    assert out.ui.clicked


def test_full_repair_sets_fixed_at() -> None:
    el = make_element("x", {DefectKind.CLICK: True})
    out = RepairVerifier.verify(el, {"clicked": True}, now=1234)
    assert out.fixed
    assert out.fixed_at == 1234
    assert not out.broken_props


def test_fixed_element_ignores_payloads() -> None:
    el = RepairVerifier.verify(make_element("x", {DefectKind.CLICK: True}), {"clicked": True})
    assert RepairVerifier.verify(el, {"clicked": False, "rotation": 45}) is el


def test_order_is_not_resolved_by_verifier() -> None:
    el = make_element("x", {DefectKind.ORDER: 0}, order_index=0)
    out = RepairVerifier.verify(el, {"order_index": 0})
    assert out.is_broken(DefectKind.ORDER)
    assert not out.fixed


def test_unknown_fields_are_ignored() -> None:
    el = make_element("x", {DefectKind.CLICK: True})
    out = RepairVerifier.verify(el, {"sparkles": True})
    assert out.ui == el.ui
    assert not out.fixed


def test_force_fix_satisfies_everything() -> None:
    el = make_element(
        "x",
        {DefectKind.ROTATE: 180, DefectKind.TEXT: "web", DefectKind.ORDER: 2},
        rotation=0,
    )
    out = RepairVerifier.force_fix(el, now=10)
    assert out.fixed
    assert out.ui.rotation == 180
    assert out.ui.text == "web"


# -- order puzzle -------------------------------------------------------------


def _abc(b_index: int, c_index: int):
    return (
        make_element("A", {DefectKind.ORDER: 0}, order_index=0),
        make_element("B", {DefectKind.ORDER: 1}, order_index=b_index),
        make_element("C", {DefectKind.ORDER: 2}, order_index=c_index),
    )


def test_order_wrong_marks_nothing() -> None:
    elements = _abc(b_index=2, c_index=1)
    out = OrderingChecker.check(elements, now=0)
    assert not any(el.fixed for el in out)
    assert all(el.is_broken(DefectKind.ORDER) for el in out)


def test_order_right_fixes_all_at_once() -> None:
    out = OrderingChecker.check(_abc(b_index=1, c_index=2), now=7)
    assert all(el.fixed for el in out)
    assert {el.fixed_at for el in out} == {7}


def test_order_uses_full_sequence_positions() -> None:
    elements = (
        make_element("free", {DefectKind.CLICK: True}, order_index=0),
        make_element("A", {DefectKind.ORDER: 1}, order_index=1),
    )
    out = OrderingChecker.check(elements)
    assert out[1].fixed
    assert not out[0].fixed


def test_order_clears_only_order_entry() -> None:
    elements = (make_element("A", {DefectKind.ORDER: 0, DefectKind.CLICK: True}, order_index=0),)
    (out,) = OrderingChecker.check(elements)
    assert dict(out.broken_props) == {DefectKind.CLICK: True}
    assert not out.fixed


def test_order_position_past_end_never_matches() -> None:
    elements = (make_element("A", {DefectKind.ORDER: 3}, order_index=0),)
    assert OrderingChecker.check(elements)[0].is_broken(DefectKind.ORDER)


def test_no_order_targets_is_a_no_op() -> None:
    elements = (make_element("A", {DefectKind.CLICK: True}),)
    assert OrderingChecker.check(elements) == elements
