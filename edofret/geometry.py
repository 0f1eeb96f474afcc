"""Fret and string coordinates for drawing an N-EDO neck.

Two position models live here and are deliberately kept apart:

- :func:`fret_distance_from_nut` is the physical rule generalized to N
  divisions, for callers that want true fret spacing.
- :func:`compute_layout` is what the board is drawn with. It spaces wires at a
  constant width chosen from the fret count so that every cell stays legible,
  which the physical rule does not allow on dense microtonal necks.

Nothing here looks at pitches: the layout is a function of fret count, string
count, dot size and per-string metadata only.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from edofret.common import clamp, is_finite_number, round_half_away, semitone_to_step

NUT_WIDTH = 16
STRING_GAP = 56
PAD_RIGHT = 12

FRET_WIDTH_MIN = 28
FRET_WIDTH_MAX = 72
FRET_WIDTH_BUDGET = 1344
"""Board length the constant fret width is derived from (24 frets of 56px)."""

DEFAULT_DOT_SIZE = 14

FRETS_MIN = 12
FRETS_MAX = 30
FRETS_FACTORY = 24

INLAY_SINGLE_SEMITONES: Tuple[int, ...] = (3, 5, 7, 9, 15, 17, 19, 21)
"""Single-dot semitones within two octaves; repeated every octave."""


def _valid_divisions(divisions: Any) -> bool:
    return is_finite_number(divisions) and divisions > 0


def fret_distance_from_nut(scale_length: float, k: int, divisions: int) -> float:
    """Physical distance of fret ``k`` from the nut.

    The classic ``L - L / 2 ** (k / 12)`` rule with 12 replaced by N. Returns
    0.0 when any input is non-finite or N is not positive.
    """
    if not _valid_divisions(divisions):
        return 0.0
    if not is_finite_number(scale_length) or not is_finite_number(k):
        return 0.0
    return scale_length - scale_length / 2 ** (k / divisions)


def build_fret_distances(
    scale_length: float, count: int, divisions: int
) -> List[float]:
    """Physical wire positions for frets ``1..count``; empty for a bad N."""
    if not _valid_divisions(divisions):
        return []
    return [
        fret_distance_from_nut(scale_length, k, divisions)
        for k in range(1, _as_count(count) + 1)
    ]


def fret_width_for(frets: int) -> float:
    """Constant drawing width of one fret cell for a board of ``frets`` frets."""
    if not is_finite_number(frets) or frets <= 0:
        return FRET_WIDTH_MAX
    return clamp(FRET_WIDTH_BUDGET / frets, FRET_WIDTH_MIN, FRET_WIDTH_MAX)


@dataclass(frozen=True)
class StringMeta:
    """Per-string overrides, such as a banjo drone or a capo."""

    index: int
    """String index, 0 being the top string as drawn."""
    start_fret: int = 0
    """First fret the string sounds from; frets below it are not drawn."""
    grey_before: bool = True
    """Draw a muted segment from the nut to the start fret."""


def _as_count(value: Any, default: int = 0) -> int:
    if not is_finite_number(value) or value < 0:
        return default
    return int(math.floor(value))


def _meta_field(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _normalize_one(position: int, raw: Any) -> Optional[StringMeta]:
    if isinstance(raw, StringMeta):
        return raw
    if not isinstance(raw, Mapping):
        logging.warning("ignoring string meta entry %d: %r", position, raw)
        return None
    index = _meta_field(raw, "index")
    start = _meta_field(raw, "start_fret", "startFret")
    grey = _meta_field(raw, "grey_before", "greyBefore")
    return StringMeta(
        index=_as_count(index, position),
        start_fret=_as_count(start, 0),
        grey_before=grey if isinstance(grey, bool) else True,
    )


def normalize_string_meta(raw: Optional[Iterable[Any]]) -> Tuple[StringMeta, ...]:
    """Normalize loosely-typed string metadata.

    Entries may be :class:`StringMeta` instances or mappings using either
    snake_case or camelCase keys (``startFret``, ``greyBefore``). Missing or
    invalid values take the defaults (start fret 0, grey before), a missing
    index defaults to the entry's position, and non-mapping entries are
    dropped with a warning.
    """
    if raw is None:
        return ()
    out: List[StringMeta] = []
    for position, entry in enumerate(raw):
        meta = _normalize_one(position, entry)
        if meta is not None:
            out.append(meta)
    return tuple(out)


def apply_capo(
    strings: int, meta: Sequence[StringMeta], capo: int
) -> Tuple[StringMeta, ...]:
    """Effective string metadata with a capo at fret ``capo``.

    Every string starts at the later of its own start fret and the capo, with
    the region behind it greyed out. A capo of 0 leaves the metadata as is.
    """
    strings = _as_count(strings)
    capo = _as_count(capo)
    if capo == 0 or strings <= 0:
        return tuple(meta)
    by_index: Dict[int, StringMeta] = {}
    for m in meta:
        by_index.setdefault(m.index, m)
    out: List[StringMeta] = []
    for i in range(strings):
        base = by_index.get(i)
        base_start = base.start_fret if base is not None else 0
        start = max(base_start, capo)
        out.append(StringMeta(index=i, start_fret=start, grey_before=True))
    return tuple(out)


@dataclass(frozen=True)
class FretboardLayout:
    """Pixel metrics of a drawn board and coordinate helpers over them.

    Wires sit ``fret_width`` apart starting right after the nut. Fret ``f``
    (for ``f >= 1``) is the cell between wires ``f - 1`` and ``f``; fret 0 is
    the open position to the left of the nut.
    """

    frets: int
    strings: int
    dot_size: float
    fret_width: float
    nut_width: float
    string_gap: float
    pad_top: float
    pad_bottom: float
    pad_left: float
    pad_right: float
    fretnum_top_gap: float
    """Distance of micro fret numbers above the top string."""
    fretnum_bottom_gap: float
    """Distance of standard fret numbers below the bottom string."""
    draw_scale_length: float
    """Board length from the nut to the drawn end, past the last wire."""
    string_meta: Tuple[StringMeta, ...] = ()

    @property
    def width(self) -> float:
        return self.pad_left + self.nut_width + self.draw_scale_length + self.pad_right

    @property
    def height(self) -> float:
        rows = max(0, self.strings - 1)
        return self.pad_top + self.pad_bottom + self.string_gap * rows

    @property
    def board_end_x(self) -> float:
        return self.pad_left + self.nut_width + self.draw_scale_length

    @property
    def fret_xs(self) -> List[float]:
        """Wire offsets from the nut for frets ``1..frets``."""
        return [self.fret_width * k for k in range(1, self.frets + 1)]

    def meta_for(self, str_index: int) -> Optional[StringMeta]:
        for m in self.string_meta:
            if m.index == str_index:
                return m
        return None

    def wire_x(self, fret: int) -> float:
        return self.pad_left + self.nut_width + fret * self.fret_width

    def between_frets_x(self, fret: int) -> float:
        """Centre of the cell behind wire ``fret``; the nut centre for fret 0."""
        if fret == 0:
            return self.pad_left + self.nut_width / 2
        return self.pad_left + self.nut_width + (fret - 0.5) * self.fret_width

    def note_center_x(self, fret: int) -> float:
        if fret == 0:
            return self.pad_left - self.dot_size * 1.5
        return self.between_frets_x(fret)

    def y_for_string(self, str_index: int) -> float:
        return self.pad_top + str_index * self.string_gap

    def start_fret_for(self, str_index: int) -> int:
        meta = self.meta_for(str_index)
        if meta is None:
            return 0
        return int(clamp(meta.start_fret, 0, self.frets))

    def string_start_x(self, str_index: int) -> float:
        """Where the sounding part of a string begins."""
        start = self.start_fret_for(str_index)
        return self.pad_left if start == 0 else self.wire_x(start)

    def open_x_for_string(self, str_index: int) -> float:
        """Open-note position: beside the nut, or in the start-fret cell."""
        start = self.start_fret_for(str_index)
        return self.note_center_x(start)

    def note_x(self, fret: int, str_index: int) -> float:
        if fret == 0:
            return self.open_x_for_string(str_index)
        return self.note_center_x(fret)

    def grey_stub_for(self, str_index: int) -> Optional[Tuple[float, float]]:
        """Muted segment ``(x1, x2)`` from the nut to the start fret, if drawn."""
        meta = self.meta_for(str_index)
        start = self.start_fret_for(str_index)
        if meta is None or not meta.grey_before or start == 0:
            return None
        return self.pad_left, self.string_start_x(str_index)

    def is_playable(self, fret: int, str_index: int) -> bool:
        """Whether fret ``fret`` exists on a string (the open cell always does)."""
        start = self.start_fret_for(str_index)
        return start == 0 or fret == 0 or fret > start

    def fret_number_y(self, standard: bool) -> float:
        """Baseline of fret numbers: below the board, or above it for micro frets."""
        if standard:
            return self.height - self.pad_bottom + self.fretnum_bottom_gap
        return self.pad_top - self.fretnum_top_gap


def compute_layout(
    frets: int,
    strings: int,
    dot_size: float = DEFAULT_DOT_SIZE,
    string_meta: Optional[Iterable[Any]] = None,
) -> FretboardLayout:
    """Derive the drawing layout of a board.

    Args:
        frets: Number of drawn frets; invalid counts give a zero-fret board.
        strings: Number of strings; invalid counts give a zero-string board.
        dot_size: Note dot radius, which sizes the margins around the board.
        string_meta: Raw per-string metadata, see :func:`normalize_string_meta`.

    Returns:
        The layout. Never raises for bad numeric input.
    """
    frets = _as_count(frets)
    strings = _as_count(strings)
    if not is_finite_number(dot_size) or dot_size <= 0:
        dot_size = DEFAULT_DOT_SIZE

    fretnum_top_gap = max(18, dot_size * 0.9 + 6)
    fretnum_bottom_gap = max(28, dot_size * 1.1 + 8)
    fret_width = fret_width_for(frets) if frets > 0 else 0

    # Extra room past the last wire so the board does not look cut off
    last_gap = max(8, fret_width)
    draw_scale_length = frets * fret_width + last_gap * 1.1

    return FretboardLayout(
        frets=frets,
        strings=strings,
        dot_size=dot_size,
        fret_width=fret_width,
        nut_width=NUT_WIDTH,
        string_gap=STRING_GAP,
        pad_top=max(28, fretnum_top_gap + 12),
        pad_bottom=max(36, fretnum_bottom_gap + 12),
        pad_left=24 + dot_size * 3,
        pad_right=PAD_RIGHT,
        fretnum_top_gap=fretnum_top_gap,
        fretnum_bottom_gap=fretnum_bottom_gap,
        draw_scale_length=draw_scale_length,
        string_meta=normalize_string_meta(string_meta),
    )


@dataclass(frozen=True)
class Inlays:
    """Fret indices carrying position markers."""

    singles: Tuple[int, ...]
    doubles: Tuple[int, ...]


def compute_inlays(frets: int, divisions: int) -> Inlays:
    """Marker frets for an N-EDO board, placed at the familiar 12-TET spots.

    Semitones are converted with the same rounding the fret labels use, so a
    marker always sits on the fret whose label is the marked semitone.
    """
    frets = _as_count(frets)
    if not _valid_divisions(divisions) or frets == 0:
        return Inlays(singles=(), doubles=())
    max_semi = (frets * 12) // divisions

    single_semis = [
        base + 12 * k
        for k in range(max_semi // 12 + 1)
        for base in INLAY_SINGLE_SEMITONES
        if base + 12 * k <= max_semi
    ]
    double_semis = list(range(12, max_semi + 1, 12))

    def to_frets(semis: List[int]) -> Tuple[int, ...]:
        steps = dict.fromkeys(semitone_to_step(s, divisions) for s in semis)
        return tuple(f for f in steps if 1 <= f <= frets)

    return Inlays(singles=to_frets(single_semis), doubles=to_frets(double_semis))


def make_display_x(lefty: bool, width: float) -> Callable[[float], float]:
    """Horizontal mirror for left-handed boards."""
    if lefty:
        return lambda x: width - x
    return lambda x: x


def draw_frets(base_frets: int, divisions: int) -> int:
    """Frets to draw so an N-EDO board spans as many semitones as ``base_frets``."""
    n = divisions if is_finite_number(divisions) and divisions > 0 else 12
    return max(1, round_half_away(_as_count(base_frets) * n / 12))


def reselect_frets(base_frets: int, prev_divisions: int, divisions: int) -> int:
    """Fret selection that keeps the drawn wire count across a temperament change."""
    if not is_finite_number(prev_divisions) or not is_finite_number(divisions):
        return base_frets
    if prev_divisions == divisions or prev_divisions <= 0 or divisions <= 0:
        return base_frets
    scaled = round_half_away(_as_count(base_frets) * prev_divisions / divisions)
    return int(clamp(scaled, FRETS_MIN, FRETS_MAX))


def factory_frets(divisions: int) -> int:
    """Default fret selection for a temperament."""
    if not is_finite_number(divisions) or divisions <= 0:
        return FRETS_FACTORY
    if divisions == 12:
        return FRETS_FACTORY
    if divisions == 24:
        return FRETS_MIN
    scaled = round_half_away(FRETS_FACTORY * 12 / divisions)
    return int(clamp(scaled, FRETS_MIN, FRETS_MAX))
