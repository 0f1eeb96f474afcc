"""Fret-number text for arbitrary divisions of the octave.

A fret index in an N-EDO neck is labelled relative to the 12-TET semitone it
sits in, so that players can read a 24-TET or 19-TET board against the frets
they know. Three notations are supported:

- Letters: ``1a`` is one micro-step above fret 1 (``1aa`` two steps, ...).
- Accidentals: ``1s`` counts sharps up from fret 1, ``2b`` flats down from 2.
- Fractions: ``1½`` or ``0+¹²⁄₁₉`` give the exact fraction of a semitone.

Every function here is total: bad inputs produce an empty label.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum, unique
from fractions import Fraction
from typing import Any, Dict, List, Optional, Tuple

from edofret.common import (
    MatchException,
    is_finite_number,
    round_half_away,
    semitone_to_step,
)
from edofret.pitch import Accidental


@unique
class MicroLabelStyle(Enum):
    """Notation for frets that fall between 12-TET semitones."""

    Letters = "letters"
    Accidentals = "accidentals"
    Fractions = "fractions"


FRACTION_SLASH = "⁄"

_VULGAR_FRACTIONS: Dict[Tuple[int, int], str] = {
    (1, 2): "½",
    (1, 3): "⅓",
    (2, 3): "⅔",
    (1, 4): "¼",
    (3, 4): "¾",
    (1, 5): "⅕",
    (2, 5): "⅖",
    (3, 5): "⅗",
    (4, 5): "⅘",
    (1, 6): "⅙",
    (5, 6): "⅚",
    (1, 7): "⅐",
    (1, 8): "⅛",
    (3, 8): "⅜",
    (5, 8): "⅝",
    (7, 8): "⅞",
    (1, 9): "⅑",
    (1, 10): "⅒",
}
"""Fractions that Unicode encodes as a single glyph."""

_SUPERSCRIPT = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")
_SUBSCRIPT = str.maketrans("0123456789", "₀₁₂₃₄₅₆₇₈₉")


def fraction_glyph(num: int, den: int) -> str:
    """Render a reduced fraction as one glyph or as ``ⁿ⁄ₘ``."""
    glyph = _VULGAR_FRACTIONS.get((num, den))
    if glyph is not None:
        return glyph
    sup = str(num).translate(_SUPERSCRIPT)
    sub = str(den).translate(_SUBSCRIPT)
    return f"{sup}{FRACTION_SLASH}{sub}"


@dataclass(frozen=True)
class SemitoneInfo:
    """A fret expressed as a 12-TET semitone plus a fraction of the next one."""

    base_semi: int
    """The enclosing 12-TET semitone, ``floor(f * 12 / N)``."""
    num: int
    """Numerator of the offset past ``base_semi``, over ``den``."""
    den: int
    """Always the system's divisions N (unreduced)."""


def per_semitone_info(fret: int, divisions: int) -> SemitoneInfo:
    pos12 = Fraction(fret * 12, divisions)
    base_semi = math.floor(pos12)
    num = round_half_away((pos12 - base_semi) * divisions)
    return SemitoneInfo(base_semi=base_semi, num=num, den=divisions)


def format_fraction_label(info: SemitoneInfo) -> str:
    if info.num == 0:
        return str(info.base_semi)
    if info.num == info.den:
        return str(info.base_semi + 1)
    frac = Fraction(info.num, info.den)
    glyph = fraction_glyph(frac.numerator, frac.denominator)
    if len(glyph) == 1:
        return f"{info.base_semi}{glyph}"
    # Multi-character fractions get a "+" so they do not read as part of the base
    return f"{info.base_semi}+{glyph}"


def semitone_boundaries(divisions: int) -> List[int]:
    """Rounded fret index of each semitone 0..12 in one octave."""
    return [semitone_to_step(n, divisions) for n in range(13)]


def _label_letters(fret: int, divisions: int) -> str:
    if divisions % 12 == 0:
        k = divisions // 12
        base_semi, sub = divmod(fret, k)
        if sub == 0:
            return str(base_semi)
        return f"{base_semi}{'a' * sub}"

    # Irregular N: one micro mark inside each rounded semitone bucket
    octave, rem = divmod(fret, divisions)
    if (rem * 12) % divisions == 0:
        # Coarse grids (N < 12) repeat boundaries; exact semitones win
        return str(12 * octave + rem * 12 // divisions)
    bounds = semitone_boundaries(divisions)
    n = bisect_right(bounds, rem) - 1
    if bounds[n] == rem:
        return str(12 * octave + n)
    return f"{12 * octave + n}a"


def _label_accidentals(fret: int, divisions: int, accidental: Accidental) -> str:
    if divisions % 12 != 0:
        return format_fraction_label(per_semitone_info(fret, divisions))
    k = divisions // 12
    base_semi, sub = divmod(fret, k)
    if sub == 0:
        return str(base_semi)
    if accidental == Accidental.Flat:
        return f"{base_semi + 1}{'b' * (k - sub)}"
    elif accidental == Accidental.Sharp:
        return f"{base_semi}{'s' * sub}"
    else:
        raise MatchException(accidental)


def _coerce_style(style: Any) -> MicroLabelStyle:
    if isinstance(style, MicroLabelStyle):
        return style
    try:
        return MicroLabelStyle(style)
    except ValueError:
        return MicroLabelStyle.Letters


def _as_fret_index(value: Any) -> Optional[int]:
    if not is_finite_number(value) or value < 0:
        return None
    if isinstance(value, int):
        return value
    if value != int(value):
        return None
    return int(value)


def build_fret_label(
    fret: int,
    divisions: int,
    style: MicroLabelStyle = MicroLabelStyle.Letters,
    accidental: Accidental = Accidental.Sharp,
) -> str:
    """Label a fret index of an N-EDO neck.

    Args:
        fret: Fret index (0 is the nut).
        divisions: Steps per octave N.
        style: Notation for micro frets; ignored when N is 12. Unknown
            styles fall back to Letters.
        accidental: Direction of the Accidentals notation; ignored otherwise.

    Returns:
        The label, or ``""`` for non-finite, negative or fractional frets and
        for non-finite or non-positive divisions.
    """
    f = _as_fret_index(fret)
    n = _as_fret_index(divisions)
    if f is None or n is None or n == 0:
        return ""
    if n == 12:
        return str(f)

    style = _coerce_style(style)
    if accidental != Accidental.Flat:
        accidental = Accidental.Sharp
    if style == MicroLabelStyle.Fractions:
        return format_fraction_label(per_semitone_info(f, n))
    elif style == MicroLabelStyle.Accidentals:
        return _label_accidentals(f, n, accidental)
    elif style == MicroLabelStyle.Letters:
        return _label_letters(f, n)
    else:
        raise MatchException(style)


def sample_labels(
    start: int,
    count: int,
    divisions: int,
    style: MicroLabelStyle = MicroLabelStyle.Letters,
    accidental: Accidental = Accidental.Sharp,
) -> List[str]:
    """Labels for ``count`` consecutive frets starting at ``start``."""
    return [
        build_fret_label(start + i, divisions, style, accidental) for i in range(count)
    ]


def is_standard_fret(fret: int, divisions: int) -> bool:
    """True when the fret coincides with a 12-TET semitone."""
    return (fret * 12) % divisions == 0


def is_octave_fret(fret: int, divisions: int) -> bool:
    return fret % divisions == 0
