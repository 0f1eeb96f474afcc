"""Tests for chord formulas and degree naming."""

from typing import Optional

import pytest
from hypothesis import given
from hypothesis import strategies as st

from edofret.chords import (
    CHORD_LABELS,
    CHORD_TYPES,
    MICROTONAL_CHORD_TYPES,
    STANDARD_CHORD_TYPES,
    ChordType,
    build_chord_pcs_from_pc,
    chord_degrees,
    chord_types_for_divisions,
    coerce_chord_type,
    degree_for_step,
    get_chord_formula,
    parse_chord_name,
)
from tests.edofret.hypo import configure_hypo

configure_hypo()


def test_catalog_shape() -> None:
    assert len(CHORD_TYPES) == 21
    assert set(MICROTONAL_CHORD_TYPES) <= set(CHORD_TYPES)
    assert len(STANDARD_CHORD_TYPES) == 15
    assert set(CHORD_LABELS) == set(CHORD_TYPES)
    assert CHORD_LABELS[ChordType("neut")] == "Neutral (1 n3 5)"
    for chord_type in CHORD_TYPES:
        for divisions in (12, 24):
            formula = get_chord_formula(chord_type, divisions)
            assert formula is not None
            assert formula.steps[0] == 0
            assert len(formula.steps) == len(formula.degrees)


def test_build_chord_pcs() -> None:
    assert build_chord_pcs_from_pc(0, "maj", 12) == frozenset({0, 4, 7})
    assert build_chord_pcs_from_pc(10, "min", 12) == frozenset({1, 5, 10})
    assert build_chord_pcs_from_pc(23, "maj", 24) == frozenset({7, 13, 23})
    assert build_chord_pcs_from_pc(0, "neut", 24) == frozenset({0, 7, 14})
    assert build_chord_pcs_from_pc(-2, "maj", 12) == frozenset({10, 2, 5})


def test_build_chord_pcs_missing() -> None:
    # Only 12 and 24 divisions have authored shapes
    assert build_chord_pcs_from_pc(0, "maj", 19) == frozenset()
    assert build_chord_pcs_from_pc(0, "maj", 31) == frozenset()
    assert build_chord_pcs_from_pc(0, "nope", 12) == frozenset()


@given(
    st.integers(min_value=-100, max_value=100),
    st.sampled_from(list(CHORD_TYPES)),
    st.sampled_from([12, 24]),
)
def test_chord_contains_root(root: int, chord_type: str, divisions: int) -> None:
    pcs = build_chord_pcs_from_pc(root, chord_type, divisions)
    assert root % divisions in pcs
    assert all(0 <= pc < divisions for pc in pcs)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("maj", "maj"),
        ("major", "maj"),
        ("M", "maj"),
        ("m", "min"),
        ("MINOR", "min"),
        ("MAJ7", "maj7"),
        ("half-diminished", "m7b5"),
        ("Neutral", "neut"),
        ("sus4↑", "sus4↑"),
        ("sus4up", "sus4↑"),
        ("xyz", None),
    ],
)
def test_parse_chord_name(name: str, expected: Optional[str]) -> None:
    assert parse_chord_name(name) == expected


def test_chord_types_for_divisions() -> None:
    assert chord_types_for_divisions(24) == CHORD_TYPES
    offered_12 = chord_types_for_divisions(12)
    assert offered_12 == STANDARD_CHORD_TYPES
    assert not set(offered_12) & set(MICROTONAL_CHORD_TYPES)
    assert chord_types_for_divisions(19) == ()


def test_coerce_chord_type() -> None:
    assert coerce_chord_type("neut", 12) == "maj"
    assert coerce_chord_type("min↓3", 19) == "maj"
    assert coerce_chord_type("neut", 24) == "neut"
    assert coerce_chord_type("min", 19) == "min"


def test_chord_degrees() -> None:
    assert chord_degrees("neut", 24) == ("1", "n3", "5")
    assert chord_degrees("m7", 12) == ("1", "b3", "5", "b7")
    assert chord_degrees("maj", 19) == ()


@pytest.mark.parametrize(
    "step, divisions, expected",
    [
        (0, 12, "1"),
        (4, 12, "3"),
        (7, 12, "5"),
        (-1, 12, "7"),
        (14, 24, "5"),
        (1, 24, "b2"),
        (9, 19, "b5"),
        (11, 19, "5"),
        (31, 31, "1"),
    ],
)
def test_degree_for_step(step: int, divisions: int, expected: str) -> None:
    assert degree_for_step(step, divisions) == expected
