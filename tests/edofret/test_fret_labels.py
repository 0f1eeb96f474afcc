import pytest
from hypothesis import given
from hypothesis import strategies as st

from edofret.fret_labels import (
    MicroLabelStyle,
    SemitoneInfo,
    build_fret_label,
    fraction_glyph,
    is_octave_fret,
    is_standard_fret,
    per_semitone_info,
    sample_labels,
    semitone_boundaries,
)
from edofret.pitch import Accidental
from tests.edofret.hypo import configure_hypo

configure_hypo()

LETTERS = MicroLabelStyle.Letters
ACCIDENTALS = MicroLabelStyle.Accidentals
FRACTIONS = MicroLabelStyle.Fractions


@pytest.mark.parametrize(
    "fret, divisions, style, accidental, expected",
    [
        # 12-TET ignores the micro style
        (0, 12, LETTERS, Accidental.Sharp, "0"),
        (5, 12, FRACTIONS, Accidental.Flat, "5"),
        # 24-TET
        (1, 24, LETTERS, Accidental.Sharp, "0a"),
        (2, 24, LETTERS, Accidental.Sharp, "1"),
        (3, 24, LETTERS, Accidental.Sharp, "1a"),
        (24, 24, LETTERS, Accidental.Sharp, "12"),
        (1, 24, ACCIDENTALS, Accidental.Sharp, "0s"),
        (1, 24, ACCIDENTALS, Accidental.Flat, "1b"),
        (3, 24, ACCIDENTALS, Accidental.Flat, "2b"),
        (1, 24, FRACTIONS, Accidental.Sharp, "0½"),
        (3, 24, FRACTIONS, Accidental.Sharp, "1½"),
        (2, 24, FRACTIONS, Accidental.Sharp, "1"),
        # 36-TET
        (1, 36, LETTERS, Accidental.Sharp, "0a"),
        (2, 36, LETTERS, Accidental.Sharp, "0aa"),
        (1, 36, FRACTIONS, Accidental.Sharp, "0⅓"),
        (2, 36, FRACTIONS, Accidental.Sharp, "0⅔"),
        (1, 36, ACCIDENTALS, Accidental.Sharp, "0s"),
        (1, 36, ACCIDENTALS, Accidental.Flat, "1bb"),
        # 19-TET
        (1, 19, LETTERS, Accidental.Sharp, "0a"),
        (2, 19, LETTERS, Accidental.Sharp, "1"),
        (19, 19, LETTERS, Accidental.Sharp, "12"),
        (20, 19, LETTERS, Accidental.Sharp, "12a"),
        (1, 19, FRACTIONS, Accidental.Sharp, "0+¹²⁄₁₉"),
        (2, 19, FRACTIONS, Accidental.Sharp, "1+⁵⁄₁₉"),
        (19, 19, FRACTIONS, Accidental.Sharp, "12"),
        # Accidentals fall back to fractions when N is not a multiple of 12
        (1, 19, ACCIDENTALS, Accidental.Flat, "0+¹²⁄₁₉"),
    ],
)
def test_build_fret_label(
    fret: int,
    divisions: int,
    style: MicroLabelStyle,
    accidental: Accidental,
    expected: str,
) -> None:
    assert build_fret_label(fret, divisions, style, accidental) == expected


@pytest.mark.parametrize(
    "fret, divisions",
    [
        (-1, 24),
        (1.5, 24),
        (float("nan"), 24),
        (float("inf"), 24),
        (3, 0),
        (3, -12),
        (3, float("nan")),
    ],
)
def test_build_fret_label_bad_input(fret: float, divisions: float) -> None:
    assert build_fret_label(fret, divisions) == ""  # type: ignore[arg-type]


def test_build_fret_label_lenient_input() -> None:
    assert build_fret_label(2.0, 24) == "1"  # type: ignore[arg-type]
    assert build_fret_label(1, 24, "bogus") == "0a"  # type: ignore[arg-type]


@given(
    st.integers(min_value=0, max_value=500),
    st.integers(min_value=1, max_value=72),
    st.sampled_from(list(MicroLabelStyle)),
    st.sampled_from(list(Accidental)),
)
def test_labels_are_total(
    fret: int, divisions: int, style: MicroLabelStyle, accidental: Accidental
) -> None:
    assert build_fret_label(fret, divisions, style, accidental) != ""


@given(
    st.integers(min_value=0, max_value=500),
    st.integers(min_value=1, max_value=72),
    st.sampled_from(list(MicroLabelStyle)),
)
def test_standard_frets_read_as_semitones(
    fret: int, divisions: int, style: MicroLabelStyle
) -> None:
    if is_standard_fret(fret, divisions):
        expected = str(fret * 12 // divisions)
        assert build_fret_label(fret, divisions, style) == expected


def test_fraction_glyph() -> None:
    assert fraction_glyph(1, 2) == "½"
    assert fraction_glyph(3, 4) == "¾"
    assert fraction_glyph(12, 19) == "¹²⁄₁₉"


def test_per_semitone_info() -> None:
    assert per_semitone_info(1, 19) == SemitoneInfo(base_semi=0, num=12, den=19)
    assert per_semitone_info(3, 24) == SemitoneInfo(base_semi=1, num=12, den=24)
    assert per_semitone_info(24, 24) == SemitoneInfo(base_semi=12, num=0, den=24)


def test_semitone_boundaries() -> None:
    assert semitone_boundaries(12) == list(range(13))
    assert semitone_boundaries(24) == list(range(0, 25, 2))
    bounds = semitone_boundaries(19)
    assert bounds[0] == 0
    assert bounds[1] == 2
    assert bounds[12] == 19
    assert bounds == sorted(bounds)


def test_sample_labels() -> None:
    assert sample_labels(0, 4, 24) == ["0", "0a", "1", "1a"]
    assert sample_labels(11, 2, 12) == ["11", "12"]
    assert sample_labels(0, 0, 24) == []


def test_fret_classification() -> None:
    assert is_standard_fret(0, 19)
    assert is_standard_fret(2, 24)
    assert not is_standard_fret(1, 24)
    assert is_standard_fret(19, 19)
    assert not is_standard_fret(2, 19)
    assert is_octave_fret(24, 24)
    assert is_octave_fret(0, 31)
    assert not is_octave_fret(12, 24)


@pytest.mark.parametrize("divisions", range(1, 12))
def test_coarse_grids_letters_match_fractions(divisions: int) -> None:
    for fret in range(2 * divisions + 1):
        if is_standard_fret(fret, divisions):
            letters = build_fret_label(fret, divisions, LETTERS)
            assert letters == build_fret_label(fret, divisions, FRACTIONS)


@pytest.mark.parametrize(
    "fret, divisions, expected",
    [
        (0, 1, "0"),
        (1, 6, "2"),
        (2, 6, "4"),
        (1, 4, "3"),
        (7, 6, "14"),
        (1, 7, "2"),
    ],
)
def test_coarse_grid_letters(fret: int, divisions: int, expected: str) -> None:
    assert build_fret_label(fret, divisions, LETTERS) == expected
