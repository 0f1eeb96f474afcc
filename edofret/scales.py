"""Scale catalogs and scale membership for N-EDO systems.

12-TET and 24-TET carry authored catalogs. Every other system derives its
scales by projecting the 12-TET catalog onto its own step grid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from edofret.common import clamp, semitone_to_step, wrap
from edofret.pitch import TuningSystem


@dataclass(frozen=True)
class ScaleDef:
    """A named scale pattern in one tuning system."""

    label: str
    """Display name, unique within a system."""
    system_id: str
    """Identifier of the system the pattern is written in."""
    pcs: Tuple[int, ...]
    """Pitch classes relative to the root, ascending, starting at 0."""


def _scale(label: str, system_id: str, pcs: Sequence[int]) -> ScaleDef:
    return ScaleDef(label=label, system_id=system_id, pcs=tuple(pcs))


def chromatic(divisions: int) -> Tuple[int, ...]:
    """Every pitch class of an N-EDO system."""
    return tuple(range(divisions))


SCALES_12: List[ScaleDef] = [
    _scale("Major (Ionian)", "12-TET", [0, 2, 4, 5, 7, 9, 11]),
    _scale("Natural Minor (Aeolian)", "12-TET", [0, 2, 3, 5, 7, 8, 10]),
    _scale("Harmonic Minor", "12-TET", [0, 2, 3, 5, 7, 8, 11]),
    # Church modes
    _scale("Dorian", "12-TET", [0, 2, 3, 5, 7, 9, 10]),
    _scale("Phrygian", "12-TET", [0, 1, 3, 5, 7, 8, 10]),
    _scale("Lydian", "12-TET", [0, 2, 4, 6, 7, 9, 11]),
    _scale("Mixolydian", "12-TET", [0, 2, 4, 5, 7, 9, 10]),
    _scale("Locrian", "12-TET", [0, 1, 3, 5, 6, 8, 10]),
    # Melodic / harmonic variants
    _scale("Melodic Minor (asc.)", "12-TET", [0, 2, 3, 5, 7, 9, 11]),
    _scale("Harmonic Major", "12-TET", [0, 2, 4, 5, 7, 8, 11]),
    _scale("Double Harmonic Major", "12-TET", [0, 1, 4, 5, 7, 8, 11]),
    _scale("Hungarian Minor", "12-TET", [0, 2, 3, 6, 7, 8, 11]),
    _scale("Phrygian Dominant", "12-TET", [0, 1, 4, 5, 7, 8, 10]),
    # Pentatonics and blues
    _scale("Major Pentatonic", "12-TET", [0, 2, 4, 7, 9]),
    _scale("Minor Pentatonic", "12-TET", [0, 3, 5, 7, 10]),
    _scale("Blues (Hexatonic)", "12-TET", [0, 3, 5, 6, 7, 10]),
    # Symmetric
    _scale("Whole Tone (Hexatonic)", "12-TET", [0, 2, 4, 6, 8, 10]),
    _scale("Diminished (H-W Octatonic)", "12-TET", [0, 1, 3, 4, 6, 7, 9, 10]),
    _scale("Diminished (W-H Octatonic)", "12-TET", [0, 2, 3, 5, 6, 8, 9, 11]),
    _scale("Chromatic (12)", "12-TET", chromatic(12)),
    # Bebop
    _scale("Bebop Dominant (8)", "12-TET", [0, 2, 4, 5, 7, 9, 10, 11]),
    _scale("Bebop Major (8)", "12-TET", [0, 2, 4, 5, 7, 8, 9, 11]),
]
"""Authored 12-TET scales, in menu order."""

SCALES_24: List[ScaleDef] = [
    # 12-TET patterns on the doubled grid
    _scale("24TET Major (Ionian)", "24-TET", [0, 4, 8, 10, 14, 18, 22]),
    _scale("24TET Natural Minor (Aeolian)", "24-TET", [0, 4, 6, 10, 14, 16, 20]),
    _scale("24TET Harmonic Minor", "24-TET", [0, 4, 6, 10, 14, 16, 22]),
    _scale("24TET Dorian (doubled)", "24-TET", [0, 4, 6, 10, 14, 18, 20]),
    _scale("24TET Phrygian (doubled)", "24-TET", [0, 2, 6, 10, 14, 16, 20]),
    _scale("24TET Lydian (doubled)", "24-TET", [0, 4, 8, 12, 14, 18, 22]),
    _scale("24TET Mixolydian (doubled)", "24-TET", [0, 4, 8, 10, 14, 18, 20]),
    _scale("24TET Locrian (doubled)", "24-TET", [0, 2, 6, 10, 12, 16, 20]),
    _scale("24TET Melodic Minor (asc., doubled)", "24-TET", [0, 4, 6, 10, 14, 18, 22]),
    _scale("24TET Harmonic Major (doubled)", "24-TET", [0, 4, 8, 10, 14, 16, 22]),
    _scale(
        "24TET Double Harmonic Major (doubled)", "24-TET", [0, 2, 8, 10, 14, 16, 22]
    ),
    _scale("24TET Hungarian Minor (doubled)", "24-TET", [0, 4, 6, 12, 14, 16, 22]),
    _scale("24TET Phrygian Dominant (doubled)", "24-TET", [0, 2, 8, 10, 14, 16, 20]),
    _scale("24TET Major Pentatonic (doubled)", "24-TET", [0, 4, 8, 14, 18]),
    _scale("24TET Minor Pentatonic (doubled)", "24-TET", [0, 6, 10, 14, 20]),
    _scale("24TET Blues (Hexatonic, doubled)", "24-TET", [0, 6, 10, 12, 14, 20]),
    _scale("24TET Whole Tone (doubled)", "24-TET", [0, 4, 8, 12, 16, 20]),
    _scale("24TET Diminished (H-W, doubled)", "24-TET", [0, 2, 6, 8, 12, 14, 18, 20]),
    _scale(
        "24TET Diminished (W-H, doubled)", "24-TET", [0, 4, 6, 10, 12, 16, 18, 22]
    ),
    _scale("24TET Chromatic (24)", "24-TET", chromatic(24)),
    # Quarter-tone native; neutral steps are ~150 cents
    _scale("24TET Neutral Heptatonic", "24-TET", [0, 4, 7, 12, 16, 19, 22]),
    _scale("24TET Major w/ Neutral 3rd", "24-TET", [0, 4, 7, 10, 14, 18, 22]),
    _scale("24TET Minor w/ Neutral 6th", "24-TET", [0, 4, 6, 10, 14, 17, 20]),
    # Augmented second plus minor third in the lower tetrachord
    _scale("24TET Hijaz-ish", "24-TET", [0, 3, 10, 12, 16, 18, 22]),
    _scale("24TET Neutral Pentatonic", "24-TET", [0, 4, 9, 14, 19]),
]
"""Authored 24-TET scales: doubled 12-TET patterns plus quarter-tone ones."""

AUTHORED_SCALES: Dict[str, List[ScaleDef]] = {
    "12-TET": SCALES_12,
    "24-TET": SCALES_24,
}


def project_from_12tet(pattern: Sequence[int], divisions: int) -> Tuple[int, ...]:
    """Project a 12-TET pattern onto the nearest N-EDO steps.

    Each semitone is rounded onto the N-step grid and clamped into the octave,
    then duplicates are removed and the result sorted. Coarse grids (N < 12)
    can collapse neighbouring degrees into one step.

    Args:
        pattern: 12-TET pitch classes relative to the root.
        divisions: Steps per octave N.

    Returns:
        A strictly ascending tuple of steps in ``[0, N)``.
    """
    projected = [
        int(clamp(semitone_to_step(p, divisions), 0, divisions - 1)) for p in pattern
    ]
    return tuple(sorted(set(projected)))


def _project_scale(scale: ScaleDef, sys: TuningSystem) -> ScaleDef:
    if scale.pcs == chromatic(12):
        return _scale(f"Chromatic ({sys.divisions})", sys.id, chromatic(sys.divisions))
    return _scale(scale.label, sys.id, project_from_12tet(scale.pcs, sys.divisions))


def scales_for_system(sys: TuningSystem) -> List[ScaleDef]:
    """Scales offered for a system, in menu order."""
    authored = AUTHORED_SCALES.get(sys.id)
    if authored is not None:
        return list(authored)
    logging.debug("projecting 12-TET scales into %s", sys.id)
    return [_project_scale(s, sys) for s in SCALES_12]


def find_scale(label: str, sys: TuningSystem) -> Optional[ScaleDef]:
    for scale in scales_for_system(sys):
        if scale.label == label:
            return scale
    return None


def resolve_intervals(label: Optional[str], sys: TuningSystem) -> Tuple[int, ...]:
    """Intervals of the named scale, or of the system's first scale.

    A scale selection that stops being valid (for example after switching
    systems) therefore always resolves to something playable.
    """
    scales = scales_for_system(sys)
    if label is not None:
        for scale in scales:
            if scale.label == label:
                return scale.pcs
    return scales[0].pcs if scales else ()


def pick_random_scale(
    names: Sequence[str], scales: Sequence[ScaleDef], rng: Optional[Random] = None
) -> Optional[Tuple[str, str]]:
    """Pick a random root name and scale label.

    Returns:
        ``(root, scale_label)``, or None when either list is empty.
    """
    if not names or not scales:
        return None
    r = rng if rng is not None else Random()
    root = names[r.randrange(len(names))]
    scale = scales[r.randrange(len(scales))]
    return root, scale.label


class RootedScale:
    """Scale membership for a pattern placed on a root pitch class."""

    def __init__(self, root: int, intervals: Sequence[int], divisions: int) -> None:
        self._divisions = divisions
        self._root = wrap(root, divisions)
        self._intervals: Tuple[int, ...] = tuple(intervals)
        self._members: FrozenSet[int] = frozenset(
            wrap(v + self._root, divisions) for v in self._intervals
        )

    @property
    def root(self) -> int:
        return self._root

    @property
    def intervals(self) -> Tuple[int, ...]:
        return self._intervals

    @property
    def divisions(self) -> int:
        return self._divisions

    @property
    def scale_set(self) -> FrozenSet[int]:
        return self._members

    def is_root(self, pc: int) -> bool:
        return wrap(pc, self._divisions) == self._root

    def is_member(self, pc: int) -> bool:
        return wrap(pc, self._divisions) in self._members

    def degree_for_pc(self, pc: int) -> Optional[int]:
        """1-based position of ``pc`` in the scale, or None outside it."""
        rel = wrap(pc - self._root, self._divisions)
        try:
            return self._intervals.index(rel) + 1
        except ValueError:
            return None
