"""Common numeric helpers shared across the edofret engine."""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Any, Union

Number = Union[int, float, Fraction]


class MatchException(Exception):
    """Exception raised when an exhaustive match over an enum fails."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Failed to match value: {value}")


def is_finite_number(value: Any) -> bool:
    """True for ints, floats and fractions that are finite (bools excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, Fraction)):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    return False


def round_half_away(value: Number) -> int:
    """Round to the nearest integer, with ties going away from zero.

    This is the one rounding rule of the engine. The builtin ``round`` rounds
    ties to even (``round(0.5) == 0``), which would make boundary frets depend
    on the parity of the neighbouring semitone.

    Args:
        value: A finite number.

    Returns:
        The rounded integer. ``2.5 -> 3``, ``-2.5 -> -3``, ``0.5 -> 1``.
    """
    if isinstance(value, Fraction):
        magnitude = math.floor(abs(value) + Fraction(1, 2))
    else:
        magnitude = math.floor(abs(value) + 0.5)
    return magnitude if value >= 0 else -magnitude


def wrap(value: int, modulus: int) -> int:
    """Normalize an integer into ``[0, modulus)``."""
    return ((value % modulus) + modulus) % modulus


def clamp(value: Number, lo: Number, hi: Number) -> Number:
    """Clamp ``value`` into ``[lo, hi]``; non-finite values collapse to ``lo``."""
    if not is_finite_number(lo) or not is_finite_number(hi):
        raise ValueError("clamp bounds must be finite numbers")
    safe = value if is_finite_number(value) else lo
    return max(lo, min(hi, safe))


def semitone_to_step(semitone: Number, divisions: int) -> int:
    """Convert a 12-TET semitone offset to the nearest N-EDO step.

    Fret-label boundaries, inlay positions and scale projection all go through
    this function so they can never disagree about where a semitone lands.
    """
    return round_half_away(Fraction(semitone) * divisions / 12)
