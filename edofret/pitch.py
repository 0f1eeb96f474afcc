"""Pitch space for equal divisions of the octave.

This module converts between frequencies, MIDI note numbers, N-EDO steps and
pitch classes for a tuning system of N divisions, and names pitch classes.
Step 0 is the reference pitch of the system (A4 = 440 Hz, MIDI 69 by default).

Only 12-TET and 24-TET carry authored note-name tables. Every other N uses
the numeric fallback ``N<pc>``; there is no generic spelling algorithm.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum, unique
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from edofret.common import is_finite_number, round_half_away, semitone_to_step, wrap

DEFAULT_REF_FREQ = 440.0
"""Reference frequency of step 0 (A4)."""

DEFAULT_REF_MIDI = 69
"""MIDI note number of the reference pitch (A4)."""

CENTS_PER_OCTAVE = 1200

NAME_LOOKUP_CACHE_SIZE = 32
"""Systems whose spelling lookups are kept in memory."""


@unique
class Accidental(Enum):
    """Spelling preference for pitch classes between naturals."""

    Sharp = "sharp"
    Flat = "flat"


NAMES_12_SHARP: Tuple[str, ...] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)  # fmt: skip

NAMES_12_FLAT: Tuple[str, ...] = (
    "C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B",
)  # fmt: skip

# Quarter tones spelled upward from the lower semitone
NAMES_24_SHARP: Tuple[str, ...] = (
    "C", "C↑", "C#", "C#↑",
    "D", "D↑", "D#", "D#↑",
    "E", "E↑", "F", "F↑",
    "F#", "F#↑", "G", "G↑",
    "G#", "G#↑", "A", "A↑",
    "A#", "A#↑", "B", "B↑",
)  # fmt: skip

# Quarter tones spelled downward from the upper semitone
NAMES_24_FLAT: Tuple[str, ...] = (
    "C", "Db↓", "Db", "D↓",
    "D", "Eb↓", "Eb", "E↓",
    "E", "F↓", "F", "Gb↓",
    "Gb", "G↓", "G", "Ab↓",
    "Ab", "A↓", "A", "Bb↓",
    "Bb", "B↓", "B", "C↓",
)  # fmt: skip

NAME_TABLES: Dict[int, Dict[Accidental, Tuple[str, ...]]] = {
    12: {Accidental.Sharp: NAMES_12_SHARP, Accidental.Flat: NAMES_12_FLAT},
    24: {Accidental.Sharp: NAMES_24_SHARP, Accidental.Flat: NAMES_24_FLAT},
}
"""Authored spelling tables, keyed by divisions then accidental preference."""


def name_fallback(pc: int) -> str:
    """Numeric placeholder name for systems without a spelling table."""
    return f"N{pc}"


@dataclass(frozen=True)
class TuningSystem:
    """An equal division of the octave into ``divisions`` steps."""

    id: str
    """Identifier such as ``"12-TET"``."""
    divisions: int
    """Number of steps per octave (N >= 1)."""
    ref_freq: float = DEFAULT_REF_FREQ
    """Frequency of step 0 in Hz."""
    ref_midi: int = DEFAULT_REF_MIDI
    """MIDI note number of step 0."""

    def __post_init__(self) -> None:
        if isinstance(self.divisions, bool) or not isinstance(self.divisions, int):
            raise ValueError(f"divisions must be an int: {self.divisions!r}")
        if self.divisions < 1:
            raise ValueError(f"divisions must be >= 1: {self.divisions}")
        if not is_finite_number(self.ref_freq) or self.ref_freq <= 0:
            raise ValueError(f"ref_freq must be positive: {self.ref_freq!r}")

    @property
    def has_name_table(self) -> bool:
        return self.divisions in NAME_TABLES

    def name_for_pc(self, pc: int, accidental: Accidental = Accidental.Sharp) -> str:
        """Name a pitch class; defined for every integer ``pc``.

        Args:
            pc: Pitch class, wrapped into ``[0, N)`` before lookup.
            accidental: Sharp- or flat-oriented spelling.

        Returns:
            The table spelling for N = 12 or 24, otherwise ``N<pc>``.
        """
        norm = wrap(pc, self.divisions)
        tables = NAME_TABLES.get(self.divisions)
        if tables is None:
            return name_fallback(norm)
        return tables[accidental][norm]


def make_system(divisions: int, ref_freq: float = DEFAULT_REF_FREQ) -> TuningSystem:
    """Build an ad-hoc ``N-TET`` system referenced to A4."""
    return TuningSystem(id=f"{divisions}-TET", divisions=divisions, ref_freq=ref_freq)


TUNINGS: Dict[str, TuningSystem] = {
    sys.id: sys for sys in (make_system(n) for n in (12, 19, 24, 31))
}
"""The fixed catalog of tuning systems offered by the application."""

_SYSTEM_ID_RE = re.compile(r"^\s*(\d+)\s*-?\s*(?:TET|EDO)\s*$", re.IGNORECASE)


def parse_system_id(system_id: str) -> Optional[int]:
    """Extract N from identifiers like ``"19-TET"`` or ``"31edo"``."""
    m = _SYSTEM_ID_RE.match(system_id)
    if m is None:
        return None
    divisions = int(m.group(1))
    return divisions if divisions >= 1 else None


def get_system(system_id: str) -> Optional[TuningSystem]:
    """Look up a catalog system, building one for well-formed unknown ids."""
    sys = TUNINGS.get(system_id)
    if sys is not None:
        return sys
    divisions = parse_system_id(system_id)
    if divisions is None:
        return None
    logging.debug("system %s is not in the catalog, using fallback names", system_id)
    return make_system(divisions)


def _require_positive_freq(f: float) -> None:
    if not is_finite_number(f) or f <= 0:
        raise ValueError(f"frequency must be a positive finite number: {f!r}")


def freq_to_step(f: float, sys: TuningSystem) -> int:
    """Nearest step to a frequency: ``round(N * log2(f / ref_freq))``."""
    _require_positive_freq(f)
    return round_half_away(sys.divisions * math.log2(f / sys.ref_freq))


def step_to_freq(step: int, sys: TuningSystem) -> float:
    """Frequency of a step: ``ref_freq * 2 ** (step / N)``.

    ``step_to_freq(freq_to_step(f))`` is the nearest-step projection of ``f``,
    not ``f`` itself, unless ``f`` already lies on the N-EDO grid.
    """
    return sys.ref_freq * 2 ** (step / sys.divisions)


def midi_to_step(midi: int, sys: TuningSystem) -> int:
    """Nearest step to a 12-TET MIDI note: ``round((midi - ref_midi) * N / 12)``."""
    return round_half_away((midi - sys.ref_midi) * sys.divisions / 12)


def step_to_midi(step: int, sys: TuningSystem) -> int:
    """Approximate inverse of :func:`midi_to_step`.

    The round trip ``step_to_midi(midi_to_step(m)) == m`` holds when the step
    grid is at least as fine as the semitone grid (checked for N = 12, 19 and
    24 over MIDI 60..72). For N < 12 several MIDI notes share a step and the
    round trip is lossy; callers must not assume exactness for arbitrary N.
    """
    return round_half_away(step * 12 / sys.divisions + sys.ref_midi)


def step_to_pc(step: int, sys: TuningSystem) -> int:
    """Pitch class of a step, always in ``[0, N)``."""
    return wrap(step, sys.divisions)


@dataclass(frozen=True)
class CentsReading:
    """Deviation of a frequency from the nearest step of a system."""

    cents: float
    """Signed deviation in cents (positive means sharp of the step)."""
    nearest_step: int
    """The step the frequency is closest to."""


def cents_from_nearest(f: float, sys: TuningSystem) -> CentsReading:
    """Measure how far ``f`` lies from the nearest N-EDO step.

    Args:
        f: A positive frequency in Hz.
        sys: The tuning system.

    Returns:
        The nearest step and the signed deviation from it in cents, where one
        step spans ``1200 / N`` cents. Used for deviation reporting only; note
        identity comes from the step.
    """
    _require_positive_freq(f)
    raw = sys.divisions * math.log2(f / sys.ref_freq)
    nearest = round_half_away(raw)
    cents = (raw - nearest) * CENTS_PER_OCTAVE / sys.divisions
    return CentsReading(cents=cents, nearest_step=nearest)


def system_note_names(
    sys: TuningSystem, accidental: Accidental = Accidental.Sharp
) -> List[str]:
    """All N pitch-class names of a system in ascending order."""
    return [sys.name_for_pc(pc, accidental) for pc in range(sys.divisions)]


@lru_cache(maxsize=NAME_LOOKUP_CACHE_SIZE)
def _build_name_lookup(sys: TuningSystem) -> Dict[str, int]:
    lookup: Dict[str, int] = {}
    for pc in range(sys.divisions):
        lookup[name_fallback(pc)] = pc
        for accidental in Accidental:
            lookup[sys.name_for_pc(pc, accidental)] = pc
    return lookup


def pc_for_name(name: str, sys: TuningSystem) -> Optional[int]:
    """Pitch class of a spelling in either accidental orientation.

    Fallback names (``N<pc>``) are accepted for every system.

    Returns:
        The pitch class, or None when the spelling is unknown to the system.
    """
    return _build_name_lookup(sys).get(name.strip())


def respell(name: str, sys: TuningSystem, accidental: Accidental) -> str:
    """Re-spell a note name for another accidental preference.

    Unknown names are returned unchanged.
    """
    pc = pc_for_name(name, sys)
    if pc is None:
        return name
    return sys.name_for_pc(pc, accidental)


def project_pc_from_12tet(pc12: int, divisions: int) -> int:
    """Nearest N-EDO pitch class to a 12-TET pitch class."""
    return wrap(semitone_to_step(pc12, divisions), divisions)
