"""Board composition: which notes appear where, and how they are labelled.

This module joins the pitch, scale, chord, label and geometry layers into the
per-cell data a renderer needs. It draws nothing itself.

Strings are indexed from 0 at the top of the drawing (the highest string).
Fret 0 is the open cell. A string with a start fret (a banjo drone or a capo)
has its open cell at the start fret, skips frets ``1..start_fret``, and sounds
``f - start_fret`` steps above its open note at fret ``f``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto, unique
from typing import FrozenSet, List, Optional, Tuple

from edofret.common import wrap
from edofret.config import Config
from edofret.fret_labels import build_fret_label, is_octave_fret, is_standard_fret
from edofret.geometry import (
    FretboardLayout,
    Inlays,
    compute_inlays,
    compute_layout,
    make_display_x,
)
from edofret.labels import Labeler
from edofret.pitch import TuningSystem, pc_for_name
from edofret.scales import RootedScale


@dataclass(frozen=True)
class StringPos:
    """A position on the board as a string and a global fret index."""

    str_index: int
    """The string number (0-based index into the tuning, highest string first)."""
    fret: int
    """The fret index counted from the nut, 0 being the open cell."""


@unique
class FretKind(Enum):
    """Classification of a fret wire."""

    Octave = auto()  # Whole octaves of the system (including the nut)
    Standard = auto()  # Coincides with a 12-TET semitone
    Micro = auto()  # Falls between 12-TET semitones


def fret_kind(fret: int, divisions: int) -> FretKind:
    if is_octave_fret(fret, divisions):
        return FretKind.Octave
    elif is_standard_fret(fret, divisions):
        return FretKind.Standard
    else:
        return FretKind.Micro


@dataclass(frozen=True)
class NoteCell:
    """A visible note dot."""

    pos: StringPos
    pc: int
    """Pitch class sounding at this position."""
    x: float
    """Horizontal position, already mirrored for left-handed boards."""
    y: float
    label: str
    """Text on the dot; may be empty while the dot itself is drawn."""
    is_open: bool
    is_root: bool
    in_scale: bool
    in_chord: bool
    is_chord_root: bool
    is_micro: bool
    """The fret does not coincide with a 12-TET semitone."""
    degree: Optional[int]
    """1-based scale degree, or None outside the scale."""


@dataclass(frozen=True)
class FretNumber:
    """A fret number printed beside the board."""

    fret: int
    text: str
    x: float
    y: float
    standard: bool
    """Standard numbers go below the board, micro numbers above it."""


@dataclass(frozen=True)
class BoardConfig:
    """The part of the configuration the board composition depends on."""

    system: TuningSystem
    frets: int
    """Drawn fret count."""
    tuning: Tuple[str, ...]
    layout: FretboardLayout
    scale: RootedScale
    labeler: Labeler
    chord_pcs: Optional[FrozenSet[int]]
    chord_root_pc: int
    hide_non_chord: bool
    show_open: bool
    open_only_in_scale: bool
    show_fret_nums: bool
    lefty: bool

    @classmethod
    def extract(cls, root_config: Config) -> BoardConfig:
        """Extract the board configuration from the main config.

        Args:
            root_config: The main application configuration.

        Returns:
            A BoardConfig with the layout and labeler resolved.
        """
        system = root_config.system
        display = root_config.display
        frets = root_config.draw_frets
        intervals = root_config.intervals
        root_pc = root_config.root_pc
        labeler = Labeler(
            mode=display.label_mode,
            system=system,
            root=root_pc,
            intervals=intervals,
            accidental=display.accidental,
            micro_style=display.micro_style,
        )
        return cls(
            system=system,
            frets=frets,
            tuning=root_config.tuning,
            layout=compute_layout(
                frets,
                len(root_config.tuning),
                display.dot_size,
                root_config.effective_string_meta,
            ),
            scale=labeler.scale,
            labeler=labeler,
            chord_pcs=root_config.chord_pcs,
            chord_root_pc=root_config.chord_root_pc,
            hide_non_chord=root_config.hide_non_chord,
            show_open=display.show_open,
            open_only_in_scale=display.open_only_in_scale,
            show_fret_nums=display.show_fret_nums,
            lefty=display.lefty,
        )


def resolve_open_pcs(tuning: Tuple[str, ...], system: TuningSystem) -> List[int]:
    """Pitch class of every open string; unknown names resolve to 0."""
    pcs: List[int] = []
    for str_index, name in enumerate(tuning):
        pc = pc_for_name(name, system)
        if pc is None:
            logging.warning(
                "unknown note %r on string %d for %s, using pitch class 0",
                name,
                str_index,
                system.id,
            )
            pc = 0
        pcs.append(pc)
    return pcs


def _is_visible(
    board: BoardConfig, is_open: bool, in_scale: bool, in_chord: bool
) -> bool:
    if board.hide_non_chord and board.chord_pcs is not None:
        return (board.show_open if is_open else True) and in_chord
    if is_open:
        return board.show_open and (not board.open_only_in_scale or in_scale)
    return in_scale


def build_note_cells(config: Config) -> List[NoteCell]:
    """All visible note dots of a board, string by string.

    Returns:
        The cells in string-major, fret-ascending order. Empty when the
        selected scale has no intervals.
    """
    board = BoardConfig.extract(config)
    if not board.scale.intervals:
        return []
    layout = board.layout
    divisions = board.system.divisions
    display_x = make_display_x(board.lefty, layout.width)
    chord_pcs = board.chord_pcs if board.chord_pcs is not None else frozenset()

    cells: List[NoteCell] = []
    for str_index, open_pc in enumerate(resolve_open_pcs(board.tuning, board.system)):
        start = layout.start_fret_for(str_index)
        for fret in range(board.frets + 1):
            if not layout.is_playable(fret, str_index):
                continue
            is_open = fret == 0
            step = 0 if is_open else fret - start
            pc = wrap(open_pc + step, divisions)
            in_scale = board.scale.is_member(pc)
            in_chord = pc in chord_pcs
            if not _is_visible(board, is_open, in_scale, in_chord):
                continue
            # The open cell of a shortened string sits at its start fret
            label_fret = start if is_open else fret
            cells.append(
                NoteCell(
                    pos=StringPos(str_index=str_index, fret=fret),
                    pc=pc,
                    x=display_x(layout.note_x(fret, str_index)),
                    y=layout.y_for_string(str_index),
                    label=board.labeler.label_for(pc, label_fret),
                    is_open=is_open,
                    is_root=board.scale.is_root(pc),
                    in_scale=in_scale,
                    in_chord=in_chord,
                    is_chord_root=in_chord and pc == board.chord_root_pc,
                    is_micro=not is_standard_fret(fret, divisions),
                    degree=board.scale.degree_for_pc(pc),
                )
            )
    return cells


def build_fret_numbers(config: Config) -> List[FretNumber]:
    """Fret numbers for every wire, or none when they are switched off."""
    board = BoardConfig.extract(config)
    if not board.show_fret_nums:
        return []
    layout = board.layout
    divisions = board.system.divisions
    display = config.display
    display_x = make_display_x(board.lefty, layout.width)
    numbers: List[FretNumber] = []
    for fret in range(board.frets + 1):
        standard = is_standard_fret(fret, divisions)
        numbers.append(
            FretNumber(
                fret=fret,
                text=build_fret_label(
                    fret, divisions, display.micro_style, display.accidental
                ),
                x=display_x(layout.between_frets_x(fret)),
                y=layout.fret_number_y(standard),
                standard=standard,
            )
        )
    return numbers


def fret_line_kinds(config: Config) -> List[FretKind]:
    """Kind of each drawn wire, the nut included."""
    divisions = config.divisions
    return [fret_kind(f, divisions) for f in range(config.draw_frets + 1)]


def board_inlays(config: Config) -> Inlays:
    return compute_inlays(config.draw_frets, config.divisions)
