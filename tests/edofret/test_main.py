import sys
from typing import List

import pytest

from edofret.chords import CHORD_TYPES, STANDARD_CHORD_TYPES
from edofret.config import FACTORY_PRESET, Config, init_config
from edofret.labels import LabelMode
from edofret.main import build_config, list_catalog, main, make_parser, render_board
from edofret.pitch import Accidental
from edofret.scales import SCALES_12

BANJO = "Banjo — 5-string (g D G B D)"


def parse(argv: List[str]) -> Config:
    return build_config(make_parser().parse_args(argv))


def test_build_config_defaults() -> None:
    assert parse([]) == init_config()


def test_build_config_options() -> None:
    config = parse(
        [
            "--system",
            "24-TET",
            "--root",
            "D",
            "--chord",
            "minor",
            "--chord-root",
            "A",
            "--labels",
            "degrees",
            "--accidental",
            "flat",
            "--capo",
            "2",
        ]
    )
    assert config.system_id == "24-TET"
    assert config.root == "D"
    assert config.show_chord
    assert config.chord_type == "min"
    assert config.chord_root == "A"
    assert config.display.label_mode == LabelMode.Degrees
    assert config.display.accidental == Accidental.Flat
    assert config.capo == 2


def test_build_config_tuning() -> None:
    config = parse(["--tuning", "D, A, D, G, A, D"])
    assert config.tuning == ("D", "A", "D", "G", "A", "D")
    assert config.strings == 6


def test_build_config_preset() -> None:
    config = parse(["--strings", "5", "--preset", BANJO])
    assert config.string_meta[0].start_fret == 5


@pytest.mark.parametrize(
    "argv",
    [
        ["--chord", "nope"],
        ["--tuning", " , "],
        ["--preset", "Nope"],
        ["--scale", "Nope"],
        ["--system", "guitar"],
    ],
)
def test_build_config_errors(argv: List[str]) -> None:
    with pytest.raises(ValueError):
        parse(argv)


def test_list_catalog() -> None:
    config = init_config()
    assert list_catalog(config, "scales") == [s.label for s in SCALES_12]
    assert list_catalog(config, "chords") == list(STANDARD_CHORD_TYPES)
    assert list_catalog(init_config("24-TET"), "chords") == list(CHORD_TYPES)
    assert list_catalog(init_config("19-TET"), "chords") == []
    assert list_catalog(config, "presets")[0] == FACTORY_PRESET
    with pytest.raises(ValueError):
        list_catalog(config, "tunings")


def test_render_board() -> None:
    lines = render_board(init_config())
    # Six strings, the fret numbers and the inlay row
    assert len(lines) == 8
    assert lines[0].startswith("E ")
    assert "F" in lines[0]
    assert "**" in lines[-1]
    assert "24" in lines[-2]


def test_render_micro_board() -> None:
    lines = render_board(init_config("24-TET"))
    # Micro fret numbers get their own row above the strings
    assert len(lines) == 9
    assert "0a" in lines[0]


def test_render_banjo() -> None:
    config = init_config(strings=5).with_preset(BANJO)
    lines = render_board(config)
    assert "·" in lines[4]
    assert "·" not in lines[3]


def test_render_lefty() -> None:
    config = init_config()
    right = render_board(config)
    left = render_board(config.with_display(lefty=True))
    assert len(left) == len(right)
    assert left[0] != right[0]


def test_main_lists(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(sys, "argv", ["edofret", "--list", "scales"])
    main()
    out = capsys.readouterr().out.splitlines()
    assert out == [s.label for s in SCALES_12]


def test_main_draws(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(sys, "argv", ["edofret", "--system", "19-TET"])
    main()
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 9


def test_main_rejects_bad_args(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["edofret", "--chord", "nope"])
    with pytest.raises(SystemExit):
        main()
