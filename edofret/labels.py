"""Text shown on note dots, chosen by display mode."""

from __future__ import annotations

import math
from enum import Enum, unique
from typing import Sequence, Tuple

from edofret.common import MatchException, round_half_away, wrap
from edofret.fret_labels import MicroLabelStyle, build_fret_label
from edofret.pitch import Accidental, TuningSystem
from edofret.scales import RootedScale


@unique
class LabelMode(Enum):
    """What a note dot is labelled with."""

    Names = "names"
    Degrees = "degrees"
    Intervals = "intervals"
    Steps = "steps"
    Fret = "fret"
    Off = "off"


INTERVAL_NAMES_12: Tuple[str, ...] = (
    "P1", "m2", "M2", "m3", "M3", "P4", "TT", "P5", "m6", "M6", "m7", "M7",
)  # fmt: skip
"""Interval names by semitone distance above the root."""

MINUS_SIGN = "−"

_OFFSET_EPS = 1e-9


def interval_name(
    steps: int, divisions: int, accidental: Accidental = Accidental.Sharp
) -> str:
    """Name the interval ``steps`` N-EDO steps above the root.

    12-TET intervals get their usual names. Other systems anchor to a 12-TET
    interval and mark each remaining step with ``+`` or ``−``: sharp spelling
    anchors to the semitone below (so offsets read upward), flat spelling to
    the semitone above. In 24-TET one step up reads ``P1+`` with sharps and
    ``m2−`` with flats.

    Args:
        steps: Steps above the root; wrapped into the octave.
        divisions: Steps per octave N.
        accidental: Anchor direction.

    Returns:
        The interval name with its offset marks.
    """
    d = wrap(steps, divisions)
    if divisions == 12:
        return INTERVAL_NAMES_12[d]

    exact_semis = d * 12 / divisions
    if accidental == Accidental.Flat:
        base_semis = math.ceil(exact_semis)
    elif accidental == Accidental.Sharp:
        base_semis = math.floor(exact_semis)
    else:
        raise MatchException(accidental)
    name = INTERVAL_NAMES_12[wrap(base_semis, 12)]

    offset_steps = d - base_semis * divisions / 12
    offset = 0 if abs(offset_steps) < _OFFSET_EPS else round_half_away(offset_steps)
    if offset == 0:
        return name
    sign = "+" if offset > 0 else MINUS_SIGN
    return name + sign * abs(offset)


class Labeler:
    """Produces dot labels for one board configuration.

    The root and scale are pitch classes of ``system``; the micro style and
    accidental only matter for the modes that spell fret numbers or intervals.
    """

    def __init__(
        self,
        mode: LabelMode,
        system: TuningSystem,
        root: int,
        intervals: Sequence[int],
        accidental: Accidental = Accidental.Sharp,
        micro_style: MicroLabelStyle = MicroLabelStyle.Letters,
    ) -> None:
        self._mode = mode
        self._system = system
        self._scale = RootedScale(root, intervals, system.divisions)
        self._accidental = accidental
        self._micro_style = micro_style

    @property
    def mode(self) -> LabelMode:
        return self._mode

    @property
    def scale(self) -> RootedScale:
        return self._scale

    def steps_above_root(self, pc: int) -> int:
        return wrap(pc - self._scale.root, self._system.divisions)

    def label_for(self, pc: int, fret: int) -> str:
        """Label for a dot sounding ``pc`` at global fret ``fret``.

        Returns:
            The label text; ``""`` when nothing should be drawn (mode Off, or
            a degree asked for outside the scale).
        """
        if self._mode == LabelMode.Off:
            return ""
        elif self._mode == LabelMode.Names:
            return self._system.name_for_pc(pc, self._accidental)
        elif self._mode == LabelMode.Degrees:
            degree = self._scale.degree_for_pc(pc)
            return "" if degree is None else str(degree)
        elif self._mode == LabelMode.Intervals:
            return interval_name(
                self.steps_above_root(pc), self._system.divisions, self._accidental
            )
        elif self._mode == LabelMode.Steps:
            return str(self.steps_above_root(pc))
        elif self._mode == LabelMode.Fret:
            return build_fret_label(
                fret, self._system.divisions, self._micro_style, self._accidental
            )
        else:
            raise MatchException(self._mode)
