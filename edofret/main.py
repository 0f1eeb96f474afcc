"""Command-line entry point for edofret.

Prints a text diagram of a board: one row per string, one column per fret,
with the configured note labels, fret numbers and inlay markers.
"""

import logging
from argparse import ArgumentParser, Namespace
from random import Random
from typing import Dict, List, Optional

from edofret.chords import CHORD_TYPES, chord_types_for_divisions, parse_chord_name
from edofret.config import STR_FACTORY, Config, init_config, preset_map
from edofret.fret_labels import MicroLabelStyle
from edofret.fretboard import (
    FretKind,
    StringPos,
    board_inlays,
    build_fret_numbers,
    build_note_cells,
    fret_line_kinds,
)
from edofret.labels import LabelMode
from edofret.pitch import TUNINGS, Accidental
from edofret.scales import scales_for_system

MIN_COLUMN_WIDTH = 3


def make_parser() -> ArgumentParser:
    """Create the command-line argument parser.

    Returns:
        An ArgumentParser configured with all the board options.
    """
    parser = ArgumentParser(prog="edofret", description="Draw an N-EDO fretboard.")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument(
        "--system",
        default="12-TET",
        help=f"tuning system id (catalog: {', '.join(TUNINGS)}; any N-TET works)",
    )
    parser.add_argument("--strings", type=int, default=STR_FACTORY)
    parser.add_argument("--frets", type=int, help="selected fret count (12..30)")
    parser.add_argument(
        "--tuning", help="open-string names, highest string first, comma separated"
    )
    parser.add_argument("--preset", help="named tuning preset")
    parser.add_argument("--root", help="scale root note name")
    parser.add_argument("--scale", help="scale label")
    parser.add_argument("--chord", help="chord type to highlight")
    parser.add_argument("--chord-root", help="chord root note name")
    parser.add_argument(
        "--chord-only", action="store_true", help="only show chord tones"
    )
    parser.add_argument(
        "--labels",
        choices=[m.value for m in LabelMode],
        default=LabelMode.Names.value,
    )
    parser.add_argument(
        "--micro-style",
        choices=[s.value for s in MicroLabelStyle],
        default=MicroLabelStyle.Letters.value,
    )
    parser.add_argument(
        "--accidental",
        choices=[a.value for a in Accidental],
        default=Accidental.Sharp.value,
    )
    parser.add_argument("--capo", type=int, default=0)
    parser.add_argument("--lefty", action="store_true")
    parser.add_argument("--hide-open", action="store_true")
    parser.add_argument("--open-only-in-scale", action="store_true")
    parser.add_argument(
        "--random-scale", action="store_true", help="pick a random root and scale"
    )
    parser.add_argument("--seed", type=int, help="seed for --random-scale")
    parser.add_argument(
        "--list",
        choices=["scales", "chords", "presets"],
        help="list catalog entries for the system and exit",
    )
    return parser


def configure_logging(log_level: str) -> None:
    """Configure the logging system with the specified log level.

    Args:
        log_level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING').
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s",
        level=log_level,
    )


def build_config(args: Namespace) -> Config:
    """Turn parsed arguments into a board configuration.

    Raises:
        ValueError: For unknown systems, presets, scales or chords.
    """
    config = init_config(args.system, args.strings, args.frets)
    config = config.with_display(
        label_mode=LabelMode(args.labels),
        micro_style=MicroLabelStyle(args.micro_style),
        show_open=not args.hide_open,
        open_only_in_scale=args.open_only_in_scale,
        lefty=args.lefty,
    )
    config = config.with_accidental(Accidental(args.accidental))
    if args.preset is not None:
        config = config.with_preset(args.preset)
    if args.tuning is not None:
        names = [n.strip() for n in args.tuning.split(",") if n.strip()]
        if not names:
            raise ValueError("tuning needs at least one note")
        config = config.with_tuning(names)
    if args.root is not None:
        config = config.with_root(args.root)
    if args.scale is not None:
        config = config.with_scale(args.scale)
    if args.random_scale:
        config = config.with_random_scale(Random(args.seed))
    if args.chord is not None or args.chord_root is not None:
        chord_type: Optional[str] = None
        if args.chord is not None:
            chord_type = parse_chord_name(args.chord)
            if chord_type is None:
                raise ValueError(f"Unknown chord type: {args.chord}")
        config = config.with_chord(
            chord_root=args.chord_root,
            chord_type=chord_type,
            hide_non_chord=args.chord_only,
        )
    if args.capo:
        config = config.with_capo(args.capo)
    return config


def list_catalog(config: Config, what: str) -> List[str]:
    if what == "scales":
        return [s.label for s in scales_for_system(config.system)]
    elif what == "chords":
        offered = set(chord_types_for_divisions(config.divisions))
        return [t for t in CHORD_TYPES if t in offered]
    elif what == "presets":
        return list(preset_map(config.system, config.strings))
    else:
        raise ValueError(f"Nothing to list for {what}")


def render_board(config: Config) -> List[str]:
    """Render a board as lines of text.

    Columns run from the open cell to the last drawn fret (reversed for
    left-handed boards). Micro fret numbers sit above the strings, standard
    ones below, followed by a row of inlay markers.
    """
    frets = config.draw_frets
    cells = build_note_cells(config)
    numbers = build_fret_numbers(config)
    kinds = fret_line_kinds(config)
    inlays = board_inlays(config)

    by_pos: Dict[StringPos, str] = {c.pos: c.label or "o" for c in cells}
    texts = list(by_pos.values()) + [n.text for n in numbers]
    width = max([MIN_COLUMN_WIDTH] + [len(t) + 1 for t in texts])
    name_width = max([len(n) for n in config.tuning] + [1])
    meta = config.effective_string_meta
    starts = {m.index: m.start_fret for m in meta}

    columns = list(range(frets + 1))
    if config.display.lefty:
        columns.reverse()

    def row(prefix: str, values: Dict[int, str]) -> str:
        parts = [values.get(f, "").center(width) for f in columns]
        return f"{prefix:>{name_width}} " + "".join(parts)

    lines: List[str] = []
    if numbers:
        micro = {n.fret: n.text for n in numbers if not n.standard}
        if micro:
            lines.append(row("", micro))
    for str_index, name in enumerate(config.tuning):
        start = starts.get(str_index, 0)
        values: Dict[int, str] = {}
        for f in columns:
            label = by_pos.get(StringPos(str_index, f))
            if label is not None:
                values[f] = label
            elif 0 < f <= start:
                values[f] = "·" * (width - 1)
            else:
                rule = "‖" if kinds[f] == FretKind.Octave else "-"
                values[f] = rule * (width - 1)
        lines.append(row(name, values))
    if numbers:
        standard = {n.fret: n.text for n in numbers if n.standard}
        lines.append(row("", standard))
    marks = {f: "*" for f in inlays.singles}
    marks.update({f: "**" for f in inlays.doubles})
    if marks:
        lines.append(row("", marks))
    return lines


def main() -> None:
    """Main entry point for the edofret command.

    Parses command-line arguments, configures logging, builds the board
    configuration and prints either a catalog listing or the board diagram.
    """
    parser = make_parser()
    args = parser.parse_args()
    configure_logging(args.log_level)
    try:
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))
    logging.info(
        "drawing %s with %d strings and %d frets",
        config.system_id,
        config.strings,
        config.draw_frets,
    )
    if args.list is not None:
        for entry in list_catalog(config, args.list):
            print(entry)
        return
    for line in render_board(config):
        print(line)


if __name__ == "__main__":
    main()
