"""Level generator — counts, defects, broken starting values, shuffling."""

from __future__ import annotations

import random

import pytest

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamegenerator.generator import DEFAULT_HINT
from backend.engine.gameverifier import RepairVerifier
from backend.models.config import CLASSIC_MODE, FULL_MODE
from backend.models.element import DefectKind


def _generate(level: int, seed: int = 42, config=FULL_MODE):
    return GameGenerator(config, random.Random(seed)).generate(level)


# -- counts -------------------------------------------------------------------


@pytest.mark.parametrize(
    ("level", "expected"),
    [(1, 5), (2, 7), (3, 8), (4, 10), (10, 19)],
)
def test_element_count_full_mode(level: int, expected: int) -> None:
    assert GameGenerator(FULL_MODE).element_count(level) == expected
    assert len(_generate(level)) == expected


def test_element_count_never_decreases() -> None:
    gen = GameGenerator(FULL_MODE)
    counts = [gen.element_count(level) for level in range(1, 30)]
    assert counts == sorted(counts)


def test_classic_count() -> None:
    assert GameGenerator(CLASSIC_MODE).element_count(1) == 5
    assert GameGenerator(CLASSIC_MODE).element_count(3) == 9


# -- determinism --------------------------------------------------------------


def test_same_seed_same_level() -> None:
    assert _generate(3, seed=7) == _generate(3, seed=7)


def test_different_seeds_differ() -> None:
    levels = {tuple(el.type for el in _generate(4, seed=s)) for s in range(5)}
    assert len(levels) > 1


# -- element contents ---------------------------------------------------------


@pytest.mark.parametrize("seed", range(20))
def test_level_one_elements_have_one_defect(seed: int) -> None:
    for el in _generate(1, seed=seed):
        assert len(el.broken_props) == 1
        assert el.difficulty == 1
        assert not el.fixed


@pytest.mark.parametrize("level", [2, 3, 5, 8])
def test_defect_subset_and_difficulty_bounds(level: int) -> None:
    for seed in range(10):
        for el in _generate(level, seed=seed):
            assert 1 <= len(el.broken_props) <= 2
            assert 1 <= el.difficulty <= min(3, level)


@pytest.mark.parametrize("seed", range(20))
def test_starting_ui_is_broken(seed: int) -> None:
    for el in _generate(5, seed=seed):
        for kind, target in el.broken_props.items():
            if kind is DefectKind.ORDER:
                assert 0 <= target < len(_generate(5, seed=seed))
                continue
            assert not RepairVerifier.is_satisfied(kind, el.ui, target), (el.id, kind)


def test_rotation_starts_half_a_turn_off() -> None:
    for seed in range(30):
        for el in _generate(6, seed=seed):
            if el.is_broken(DefectKind.ROTATE):
                target = el.target(DefectKind.ROTATE)
                assert target in (90, 180, 270)
                assert el.ui.rotation == (target + 180) % 360


def test_ids_are_unique() -> None:
    elements = _generate(6)
    assert len({el.id for el in elements}) == len(elements)


def test_order_index_matches_display_position() -> None:
    for seed in range(10):
        elements = _generate(4, seed=seed)
        assert [el.ui.order_index for el in elements] == list(range(len(elements)))


def test_shuffle_moves_elements() -> None:
    ids = [el.id for el in _generate(6, seed=3)]
    assert ids != sorted(ids, key=lambda i: int(i.split("-")[1]))


def test_classic_uses_classic_catalogues() -> None:
    for seed in range(10):
        for el in _generate(3, seed=seed, config=CLASSIC_MODE):
            assert el.type in CLASSIC_MODE.element_types
            assert set(el.broken_props) <= set(CLASSIC_MODE.defect_kinds)


# -- hints --------------------------------------------------------------------


def test_hint_priority_rotate_wins() -> None:
    hint = GameGenerator.build_hint({DefectKind.CLICK: True, DefectKind.ROTATE: 90})
    assert hint == "Double-click to rotate this element."


def test_hint_click_before_text() -> None:
    hint = GameGenerator.build_hint({DefectKind.TEXT: "dev", DefectKind.CLICK: True})
    assert hint == "Click the tile to activate."


def test_hint_names_text_target() -> None:
    assert GameGenerator.build_hint({DefectKind.TEXT: "hello"}) == 'Type "hello" in the input.'


def test_hint_order_before_checkbox() -> None:
    hint = GameGenerator.build_hint({DefectKind.CHECKBOX: True, DefectKind.ORDER: 0})
    assert hint == "Drag tiles to reorder them correctly."


def test_hint_fallback() -> None:
    assert GameGenerator.build_hint({}) == DEFAULT_HINT


def test_generated_hint_matches_defects() -> None:
    for el in _generate(4, seed=11):
        assert el.hint == GameGenerator.build_hint(el.broken_props)
