from typing import Dict

import pytest

from edofret.config import Config, init_config
from edofret.fretboard import (
    BoardConfig,
    FretKind,
    NoteCell,
    StringPos,
    board_inlays,
    build_fret_numbers,
    build_note_cells,
    fret_kind,
    fret_line_kinds,
    resolve_open_pcs,
)
from edofret.geometry import Inlays
from edofret.labels import LabelMode
from edofret.pitch import TUNINGS

BANJO = "Banjo — 5-string (g D G B D)"


def cells_by_pos(config: Config) -> Dict[StringPos, NoteCell]:
    return {cell.pos: cell for cell in build_note_cells(config)}


def test_board_config_extract() -> None:
    board = BoardConfig.extract(init_config("24-TET"))
    assert board.frets == 24
    assert board.layout.frets == 24
    assert board.layout.strings == 6
    assert board.scale.intervals == (0, 4, 8, 10, 14, 18, 22)
    assert board.labeler.mode == LabelMode.Names
    assert board.chord_pcs is None


def test_resolve_open_pcs() -> None:
    assert resolve_open_pcs(("E", "H", "Bb"), TUNINGS["12-TET"]) == [4, 0, 10]


def test_default_board() -> None:
    cells = cells_by_pos(init_config())
    # Every open string of standard tuning is in C major: 7 notes per octave,
    # two octaves, plus the open note
    assert len(cells) == 6 * 15
    open_e = cells[StringPos(0, 0)]
    assert open_e.label == "E"
    assert open_e.is_open
    assert open_e.in_scale
    assert open_e.degree == 3
    assert not open_e.is_root
    assert open_e.x == pytest.approx(45)
    assert open_e.y == pytest.approx(30.6)
    assert cells[StringPos(0, 1)].label == "F"
    assert StringPos(0, 2) not in cells
    c_cell = cells[StringPos(1, 1)]
    assert c_cell.label == "C"
    assert c_cell.is_root
    assert c_cell.degree == 1
    assert not c_cell.is_micro


def test_string_major_order() -> None:
    cells = build_note_cells(init_config())
    keys = [(c.pos.str_index, c.pos.fret) for c in cells]
    assert keys == sorted(keys)


def test_banjo_drone_string() -> None:
    config = init_config(strings=5).with_preset(BANJO)
    cells = cells_by_pos(config)
    drone_open = cells[StringPos(4, 0)]
    assert drone_open.label == "G"
    layout = BoardConfig.extract(config).layout
    assert drone_open.x == pytest.approx(layout.note_center_x(5))
    for fret in range(1, 6):
        assert StringPos(4, fret) not in cells
    # Fret 7 sounds two steps above the open G
    assert cells[StringPos(4, 7)].label == "A"
    assert cells[StringPos(3, 2)].label == "E"


def test_banjo_fret_labels() -> None:
    config = (
        init_config(strings=5)
        .with_preset(BANJO)
        .with_display(label_mode=LabelMode.Fret)
    )
    cells = cells_by_pos(config)
    assert cells[StringPos(4, 0)].label == "5"
    assert cells[StringPos(4, 7)].label == "7"


def test_capo_board() -> None:
    cells = cells_by_pos(init_config().with_capo(2))
    assert StringPos(0, 1) not in cells
    assert StringPos(0, 2) not in cells
    # The open cell now sounds the capo'd open string's pitch
    assert cells[StringPos(0, 0)].label == "E"
    assert cells[StringPos(0, 3)].label == "F"


def test_chord_only() -> None:
    config = init_config().with_chord(
        chord_root="C", chord_type="maj", hide_non_chord=True
    )
    cells = build_note_cells(config)
    assert cells
    assert {c.pc for c in cells} == {0, 4, 7}
    assert all(c.in_chord for c in cells)
    assert all(c.is_chord_root == (c.pc == 0) for c in cells)


def test_chord_highlight_keeps_scale() -> None:
    config = init_config().with_chord(chord_root="A", chord_type="min")
    cells = build_note_cells(config)
    assert len(cells) == 6 * 15
    assert {c.pc for c in cells if c.in_chord} == {9, 0, 4}
    assert {c.pc for c in cells if c.is_chord_root} == {9}


def test_open_visibility() -> None:
    tuning = ("F#", "B", "G", "D")
    shown = cells_by_pos(init_config().with_tuning(tuning))
    assert StringPos(0, 0) in shown
    assert not shown[StringPos(0, 0)].in_scale

    only_in_scale = init_config().with_tuning(tuning)
    only_in_scale = only_in_scale.with_display(open_only_in_scale=True)
    cells = cells_by_pos(only_in_scale)
    assert StringPos(0, 0) not in cells
    assert StringPos(1, 0) in cells

    hidden = cells_by_pos(init_config().with_display(show_open=False))
    assert not any(c.is_open for c in hidden.values())


def test_unknown_tuning_name() -> None:
    cells = cells_by_pos(init_config().with_tuning(("H", "B", "G", "D")))
    assert cells[StringPos(0, 0)].label == "C"


def test_label_modes() -> None:
    off = build_note_cells(init_config().with_display(label_mode=LabelMode.Off))
    assert off
    assert all(c.label == "" for c in off)
    degrees = cells_by_pos(init_config().with_display(label_mode=LabelMode.Degrees))
    assert degrees[StringPos(1, 1)].label == "1"


def test_lefty_mirror() -> None:
    config = init_config()
    width = BoardConfig.extract(config).layout.width
    lefty = cells_by_pos(config.with_display(lefty=True))
    assert lefty[StringPos(0, 0)].x == pytest.approx(width - 45)


def test_micro_board() -> None:
    config = init_config("24-TET").with_scale("24TET Chromatic (24)")
    cells = cells_by_pos(config)
    assert len(cells) == 6 * 25
    assert cells[StringPos(0, 1)].is_micro
    assert cells[StringPos(0, 1)].label == "E↑"
    assert not cells[StringPos(0, 2)].is_micro


def test_fret_numbers() -> None:
    numbers = build_fret_numbers(init_config())
    assert [n.text for n in numbers] == [str(f) for f in range(25)]
    assert all(n.standard for n in numbers)

    micro = build_fret_numbers(init_config("24-TET"))
    assert len(micro) == 25
    assert micro[1].text == "0a"
    assert not micro[1].standard
    assert micro[1].y < micro[2].y
    assert micro[2].text == "1"

    assert build_fret_numbers(init_config().with_display(show_fret_nums=False)) == []


def test_fret_kinds() -> None:
    assert fret_kind(0, 19) == FretKind.Octave
    assert fret_kind(2, 24) == FretKind.Standard
    assert fret_kind(1, 24) == FretKind.Micro
    kinds = fret_line_kinds(init_config("24-TET"))
    assert len(kinds) == 25
    assert kinds[:3] == [FretKind.Octave, FretKind.Micro, FretKind.Standard]
    assert kinds[24] == FretKind.Octave


def test_board_inlays() -> None:
    assert board_inlays(init_config()) == Inlays(
        singles=(3, 5, 7, 9, 15, 17, 19, 21), doubles=(12, 24)
    )
    assert board_inlays(init_config("24-TET")) == Inlays(
        singles=(6, 10, 14, 18), doubles=(24,)
    )
