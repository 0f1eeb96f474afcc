"""Chord formulas per temperament and chord-degree naming.

Chord shapes are authored explicitly for every supported number of divisions
rather than scaled from 12-TET: several qualities (neutral thirds, raised
fourths) only exist as distinct shapes in the finer temperament. Asking for a
chord in a temperament without an authored formula yields an empty set, which
callers render as "no chord".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, NewType, Optional, Tuple, cast

from edofret.common import round_half_away, wrap

ChordType = NewType("ChordType", str)


@dataclass(frozen=True)
class ChordFormula:
    """A chord shape in one temperament."""

    label: str
    steps: Tuple[int, ...]
    """Steps from the root in system divisions; always starts with 0."""
    degrees: Tuple[str, ...]
    """Degree names aligned with ``steps``."""


def _formula(label: str, steps: List[int], degrees: List[str]) -> ChordFormula:
    assert len(steps) == len(degrees) and steps[0] == 0
    return ChordFormula(label=label, steps=tuple(steps), degrees=tuple(degrees))


# 24-only ideas keep a 12-TET fallback shape (closest conventional sound)
_CHORD_FORMULAS = cast(
    Dict[ChordType, Dict[int, ChordFormula]],
    {
        # Standard library
        "maj": {
            12: _formula("Major (1 3 5)", [0, 4, 7], ["1", "3", "5"]),
            24: _formula("Major (1 3 5)", [0, 8, 14], ["1", "3", "5"]),
        },
        "min": {
            12: _formula("Minor (1 ♭3 5)", [0, 3, 7], ["1", "b3", "5"]),
            24: _formula("Minor (1 ♭3 5)", [0, 6, 14], ["1", "b3", "5"]),
        },
        "dim": {
            12: _formula("Diminished (1 ♭3 ♭5)", [0, 3, 6], ["1", "b3", "b5"]),
            24: _formula("Diminished (1 ♭3 ♭5)", [0, 6, 12], ["1", "b3", "b5"]),
        },
        "aug": {
            12: _formula("Augmented (1 3 #5)", [0, 4, 8], ["1", "3", "#5"]),
            24: _formula("Augmented (1 3 #5)", [0, 8, 16], ["1", "3", "#5"]),
        },
        "sus2": {
            12: _formula("Sus2 (1 2 5)", [0, 2, 7], ["1", "2", "5"]),
            24: _formula("Sus2 (1 2 5)", [0, 4, 14], ["1", "2", "5"]),
        },
        "sus4": {
            12: _formula("Sus4 (1 4 5)", [0, 5, 7], ["1", "4", "5"]),
            24: _formula("Sus4 (1 4 5)", [0, 10, 14], ["1", "4", "5"]),
        },
        "6": {
            12: _formula("6 (1 3 5 6)", [0, 4, 7, 9], ["1", "3", "5", "6"]),
            24: _formula("6 (1 3 5 6)", [0, 8, 14, 18], ["1", "3", "5", "6"]),
        },
        "m6": {
            12: _formula("m6 (1 ♭3 5 6)", [0, 3, 7, 9], ["1", "b3", "5", "6"]),
            24: _formula("m6 (1 ♭3 5 6)", [0, 6, 14, 18], ["1", "b3", "5", "6"]),
        },
        "7": {
            12: _formula("7 (1 3 5 ♭7)", [0, 4, 7, 10], ["1", "3", "5", "b7"]),
            24: _formula("7 (1 3 5 ♭7)", [0, 8, 14, 20], ["1", "3", "5", "b7"]),
        },
        "maj7": {
            12: _formula("Maj7 (1 3 5 7)", [0, 4, 7, 11], ["1", "3", "5", "7"]),
            24: _formula("Maj7 (1 3 5 7)", [0, 8, 14, 22], ["1", "3", "5", "7"]),
        },
        "m7": {
            12: _formula("m7 (1 ♭3 5 ♭7)", [0, 3, 7, 10], ["1", "b3", "5", "b7"]),
            24: _formula("m7 (1 ♭3 5 ♭7)", [0, 6, 14, 20], ["1", "b3", "5", "b7"]),
        },
        "m7b5": {
            12: _formula("m7♭5 (1 ♭3 ♭5 ♭7)", [0, 3, 6, 10], ["1", "b3", "b5", "b7"]),
            24: _formula(
                "m7♭5 (1 ♭3 ♭5 ♭7)", [0, 6, 12, 20], ["1", "b3", "b5", "b7"]
            ),
        },
        "dim7": {
            12: _formula("Dim7 (1 ♭3 ♭5 6)", [0, 3, 6, 9], ["1", "b3", "b5", "6"]),
            24: _formula("Dim7 (1 ♭3 ♭5 6)", [0, 6, 12, 18], ["1", "b3", "b5", "6"]),
        },
        "add9": {
            12: _formula("Add9 (1 3 5 9)", [0, 4, 7, 14], ["1", "3", "5", "9"]),
            24: _formula("Add9 (1 3 5 9)", [0, 8, 14, 28], ["1", "3", "5", "9"]),
        },
        # Microtonal extensions
        "neut": {
            12: _formula("Neutral (1 3 5)", [0, 4, 7], ["1", "3", "5"]),
            24: _formula("Neutral (1 n3 5)", [0, 7, 14], ["1", "n3", "5"]),
        },
        "neut7": {
            12: _formula("Neutral7 (1 3 5 ♭7)", [0, 4, 7, 10], ["1", "3", "5", "b7"]),
            24: _formula(
                "Neutral7 (1 n3 5 ♭7)", [0, 7, 14, 20], ["1", "n3", "5", "b7"]
            ),
        },
        "sus2↓": {
            12: _formula("Sus2 (1 2 5)", [0, 2, 7], ["1", "2", "5"]),
            24: _formula("Sus2↓ (1 2↓ 5)", [0, 3, 14], ["1", "2↓", "5"]),
        },
        "sus4↑": {
            12: _formula("Sus4 (1 4 5)", [0, 5, 7], ["1", "4", "5"]),
            24: _formula("Sus4↑ (1 4↑ 5)", [0, 11, 14], ["1", "4↑", "5"]),
        },
        "maj↑3": {
            12: _formula("Major (1 3 5)", [0, 4, 7], ["1", "3", "5"]),
            24: _formula("Maj↑3 (1 3↑ 5)", [0, 9, 14], ["1", "3↑", "5"]),
        },
        "min↓3": {
            12: _formula("Minor (1 ♭3 5)", [0, 3, 7], ["1", "b3", "5"]),
            24: _formula("Min↓3 (1 ♭3↓ 5)", [0, 5, 14], ["1", "b3↓", "5"]),
        },
        "quartal": {
            12: _formula("Quartal (1 4 7♭)", [0, 5, 10], ["1", "4", "b7"]),
            24: _formula("Quartal (1 4 7♭)", [0, 10, 20], ["1", "4", "b7"]),
        },
    },
)

MICROTONAL_CHORD_TYPES: Tuple[ChordType, ...] = tuple(
    ChordType(t) for t in ("neut", "neut7", "sus2↓", "sus4↑", "maj↑3", "min↓3")
)
"""Chord types whose point is a quarter-tone shape (only offered in 24-TET)."""

CHORD_TYPES: Tuple[ChordType, ...] = tuple(_CHORD_FORMULAS.keys())

STANDARD_CHORD_TYPES: Tuple[ChordType, ...] = tuple(
    t for t in CHORD_TYPES if t not in MICROTONAL_CHORD_TYPES
)

CHORD_LABELS: Dict[ChordType, str] = {
    t: formulas[24].label for t, formulas in _CHORD_FORMULAS.items()
}
"""Display labels; the 24-EDO names read fine in 12-TET too."""

DEFAULT_CHORD_TYPE = ChordType("maj")

MICROTONAL_DIVISIONS = 24
"""The temperament the microtonal chord types are authored for."""

_CHORD_ALIASES = cast(
    Dict[str, ChordType],
    {
        "major": "maj",
        "M": "maj",
        "minor": "min",
        "m": "min",
        "diminished": "dim",
        "augmented": "aug",
        "plus": "aug",
        "six": "6",
        "minor6": "m6",
        "min6": "m6",
        "dom7": "7",
        "seven": "7",
        "major7": "maj7",
        "M7": "maj7",
        "minor7": "m7",
        "min7": "m7",
        "min7f5": "m7b5",
        "m7f5": "m7b5",
        "half-diminished": "m7b5",
        "diminished7": "dim7",
        "neutral": "neut",
        "neutral7": "neut7",
        "sus2down": "sus2↓",
        "sus4up": "sus4↑",
        "majup3": "maj↑3",
        "mindown3": "min↓3",
    },
)


def parse_chord_name(name: str) -> Optional[ChordType]:
    """Parse a chord name or alias into a chord type.

    Exact matches win, then a case-insensitive match.
    """
    if name in _CHORD_FORMULAS:
        return ChordType(name)
    if name in _CHORD_ALIASES:
        return _CHORD_ALIASES[name]
    lowered = name.lower()
    for cand in CHORD_TYPES:
        if cand.lower() == lowered:
            return cand
    for alias, chord_type in _CHORD_ALIASES.items():
        if alias.lower() == lowered:
            return chord_type
    return None


def get_chord_formula(chord_type: str, divisions: int) -> Optional[ChordFormula]:
    """The authored formula for (type, N), if there is one."""
    formulas = _CHORD_FORMULAS.get(ChordType(chord_type))
    if formulas is None:
        return None
    return formulas.get(divisions)


def build_chord_pcs_from_pc(
    root_pc: int, chord_type: str, divisions: int
) -> FrozenSet[int]:
    """Pitch classes of a chord rooted at ``root_pc``.

    Args:
        root_pc: Root pitch class (any integer; wrapped into ``[0, N)``).
        chord_type: A key of the chord catalog.
        divisions: Steps per octave N.

    Returns:
        The chord's pitch classes, or an empty set when the chord type is
        unknown or has no authored formula for this N.
    """
    formula = get_chord_formula(chord_type, divisions)
    if formula is None:
        logging.debug("no %s chord authored for %s divisions", chord_type, divisions)
        return frozenset()
    return frozenset(wrap(root_pc + s, divisions) for s in formula.steps)


def chord_degrees(chord_type: str, divisions: int) -> Tuple[str, ...]:
    formula = get_chord_formula(chord_type, divisions)
    return formula.degrees if formula is not None else ()


def chord_types_for_divisions(divisions: int) -> Tuple[ChordType, ...]:
    """Chord types to offer for a temperament."""
    if divisions == MICROTONAL_DIVISIONS:
        return CHORD_TYPES
    return tuple(
        t for t in STANDARD_CHORD_TYPES if get_chord_formula(t, divisions) is not None
    )


def coerce_chord_type(chord_type: str, divisions: int) -> ChordType:
    """Keep a chord selection valid after a temperament change.

    Microtonal types outside 24-EDO fall back to the major triad; everything
    else is kept as is (and may simply produce no chord).
    """
    if divisions != MICROTONAL_DIVISIONS and chord_type in MICROTONAL_CHORD_TYPES:
        return DEFAULT_CHORD_TYPE
    return ChordType(chord_type)


DEGREE_NAMES_12: Tuple[str, ...] = (
    "1", "b2", "2", "b3", "3", "4", "b5", "5", "#5", "6", "b7", "7",
)  # fmt: skip
"""Degree names by semitone distance above the root."""


def degree_for_step(step: int, divisions: int) -> str:
    """Name the degree of a step above the root.

    For N = 12 this is a direct lookup. Any other N first maps the step to the
    nearest 12-TET semitone with ``round(step / N * 12)`` (ties away from
    zero), which is a lossy approximation: distinct micro steps can share a
    degree name.
    """
    if divisions == 12:
        return DEGREE_NAMES_12[wrap(step, 12)]
    mapped = round_half_away(step / divisions * 12)
    return DEGREE_NAMES_12[wrap(mapped, 12)]
