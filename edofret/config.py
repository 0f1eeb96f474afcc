"""Configuration for the edofret board.

This module holds the static instrument catalogs (factory tunings, named
presets, per-preset string metadata) and the immutable :class:`Config` that
describes one board: temperament, instrument, scale and chord selection, and
display options. Every change produces a new Config through one of the
``with_*`` helpers, which also keep dependent settings consistent (a new
temperament re-resolves the scale, the chord type and the note spellings).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from random import Random
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from edofret.chords import (
    DEFAULT_CHORD_TYPE,
    build_chord_pcs_from_pc,
    coerce_chord_type,
)
from edofret.fret_labels import MicroLabelStyle
from edofret.geometry import (
    DEFAULT_DOT_SIZE,
    FRETS_FACTORY,
    FRETS_MAX,
    FRETS_MIN,
    StringMeta,
    apply_capo,
    draw_frets as scaled_draw_frets,
    factory_frets,
    reselect_frets,
)
from edofret.labels import LabelMode
from edofret.pitch import (
    TUNINGS,
    Accidental,
    TuningSystem,
    get_system,
    pc_for_name,
    project_pc_from_12tet,
    system_note_names,
)
from edofret.scales import (
    find_scale,
    pick_random_scale,
    resolve_intervals,
    scales_for_system,
)

Tuning = Tuple[str, ...]
"""Open-string note names, ordered from the highest string to the lowest."""

STR_MIN = 4
STR_MAX = 8
STR_FACTORY = 6

SYSTEM_DEFAULT = "12-TET"
ROOT_DEFAULT = "C"
CAPO_DEFAULT = 0

FACTORY_PRESET = "Factory default"
"""Preset name of the factory tuning for the current system and string count."""

_COMMON_PRESETS: Dict[int, Dict[str, Tuning]] = {
    4: {
        "Bass 4 Standard (EADG)": ("G", "D", "A", "E"),
        "Bass 4 Drop D (DADG)": ("G", "D", "A", "D"),
        "Bass 4 D Standard (DGCF)": ("F", "C", "G", "D"),
        "Bass 4 C Standard (C F Bb Eb)": ("Eb", "Bb", "F", "C"),
        "Bass 4 BEAD (no G)": ("D", "A", "E", "B"),
        "Bass 4 Drop C (CGCF)": ("F", "C", "G", "C"),
        "Bass 4 Drop B (BF#BE)": ("E", "B", "F#", "B"),
        "Mandolin / Violin (GDAE)": ("E", "A", "D", "G"),
        "Mandolin — GDAD (modal D)": ("D", "A", "D", "G"),
        "Mandolin — ADAD": ("D", "A", "D", "A"),
        "Mandolin — AEAE (cross-tune)": ("E", "A", "E", "A"),
        "Mandolin — GDGD (cross-tune)": ("D", "G", "D", "G"),
        "Mandolin — ADAE (old-time)": ("E", "A", "D", "A"),
        "Tenor Banjo (CGDA)": ("A", "D", "G", "C"),
        "Ukulele (GCEA, re-entrant)": ("A", "E", "C", "G"),
        "Baritone Uke (DGBE)": ("E", "B", "G", "D"),
    },
    5: {
        "Bass 5 Standard (BEADG)": ("G", "D", "A", "E", "B"),
        "Bass 5 High C (EADGC)": ("C", "G", "D", "A", "E"),
        "Bass 5 Drop A (AEADG)": ("G", "D", "A", "E", "A"),
        "Bass 5 Low F# (F#BEAD)": ("D", "A", "E", "B", "F#"),
        "Banjo — 5-string (g D G B D)": ("D", "B", "G", "D", "G"),
    },
    6: {
        "Standard (EADGBE)": ("E", "B", "G", "D", "A", "E"),
        "Half-Step Down (Eb Ab Db Gb Bb Eb)": ("Eb", "Bb", "Gb", "Db", "Ab", "Eb"),
        "Drop D": ("E", "B", "G", "D", "A", "D"),
        "Drop C# / Db (Db Ab Db Gb Bb Eb)": ("Eb", "Bb", "Gb", "Db", "Ab", "Db"),
        "Drop C (CGCFAD)": ("D", "A", "F", "C", "G", "C"),
        "Drop B (BF#BEG#C#)": ("C#", "G#", "E", "B", "F#", "B"),
        "C Standard (C F Bb Eb G C)": ("C", "G", "Eb", "Bb", "F", "C"),
        "D Standard (DGCFAD)": ("D", "A", "F", "C", "G", "D"),
        "Baritone B Standard (BEADF#B)": ("B", "F#", "D", "A", "E", "B"),
        "Baritone A Standard (ADGCFAD)": ("A", "D", "G", "C", "F", "A"),
        "Baritone C Standard (CFBbEbGC)": ("C", "G", "Eb", "Bb", "F", "C"),
        "Baritone Drop A (AEADF#B)": ("B", "F#", "D", "A", "E", "A"),
        "Baritone Drop B (BF#BEG#C#)": ("C#", "G#", "E", "B", "F#", "B"),
        "Open G (DGDGBD)": ("D", "B", "G", "D", "G", "D"),
        "Open D (DADF#AD)": ("D", "A", "F#", "D", "A", "D"),
        "Open Dm (DADFAD)": ("D", "A", "F", "D", "A", "D"),
        "Open C (CGCGCE)": ("E", "C", "G", "C", "G", "C"),
        "Open E (EBEG#BE)": ("E", "B", "G#", "E", "B", "E"),
        "Open A (EAEAC#E)": ("E", "C#", "A", "E", "A", "E"),
        "Open B (F#BF#BD#F#)": ("F#", "D#", "B", "F#", "B", "F#"),
        "Open F (FACFAD)": ("D", "A", "F", "C", "A", "F"),
        "Double Drop D (DADGBD)": ("D", "B", "G", "D", "A", "D"),
        "All Fourths (EADGCF)": ("F", "C", "G", "D", "A", "E"),
        "Nashville High-Strung (EADGBE)": ("E", "B", "G", "D", "A", "E"),
        "DADGAD": ("D", "A", "G", "D", "A", "D"),
        "Bass 6 Standard (BEADGC)": ("C", "G", "D", "A", "E", "B"),
        "Bass 6 Low F# (F#BEADG)": ("G", "D", "A", "E", "B", "F#"),
    },
    7: {
        "Standard 7 (BEADGBE)": ("E", "B", "G", "D", "A", "E", "B"),
        "Drop A (AEADGBE)": ("E", "B", "G", "D", "A", "E", "A"),
        "Drop G (GDGCFAD)": ("D", "A", "F", "C", "G", "D", "G"),
        "All Fourths 7 (EADGCF Bb)": ("Bb", "F", "C", "G", "D", "A", "E"),
    },
    8: {
        "Standard 8 (F#BEADGBE)": ("E", "B", "G", "D", "A", "E", "B", "F#"),
        "Drop E (EBEADGBE)": ("E", "B", "G", "D", "A", "E", "B", "E"),
        "Drop D (DADGCFAD)": ("D", "A", "F", "C", "G", "D", "A", "D"),
        "All Fourths 8 (EADGCF Bb Eb)": ("Eb", "Bb", "F", "C", "G", "D", "A", "E"),
    },
}
"""Presets shared by every system with a spelling table."""

_SYSTEM_OVERRIDES: Dict[str, Dict[int, Dict[str, Tuning]]] = {
    "24-TET": {
        4: {
            "Mandolin +Q on A (A↑)": ("E", "A↑", "D", "G"),
            "Bass 4 +Q G (G↑)": ("G↑", "D", "A", "E"),
        },
        5: {"Bass 5 +Q D (D↑)": ("G", "D↑", "A", "E", "B")},
        6: {
            "Std +Q G string (G↑)": ("E", "B", "G↑", "D", "A", "E"),
            "Std +Q B string (B↑)": ("E", "B↑", "G", "D", "A", "E"),
            "Std −Q B string (B↓)": ("E", "B↓", "G", "D", "A", "E"),
            "Open D (quarter-bright 3rd, F#↑)": ("D", "A", "F#↑", "D", "A", "D"),
            "King Gizzard (C#F#C#F#BE)": ("E", "B", "F#", "C#", "F#", "C#"),
            "Bass 6 +Q G (G↑)": ("C", "G↑", "D", "A", "E", "B"),
        },
        7: {"Std +Q middle (G↑)": ("E", "B", "G↑", "D", "A", "E", "B")},
        8: {"Std +Q B string (B↑)": ("E", "B↑", "G", "D", "A", "E", "B", "F#")},
    },
}
"""Quarter-tone presets only meaningful in their own system."""

DEFAULT_PRESET_NAMES: Dict[int, str] = {
    4: "Bass 4 Standard (EADG)",
    5: "Bass 5 Standard (BEADG)",
    6: "Standard (EADGBE)",
    7: "Standard 7 (BEADGBE)",
    8: "Standard 8 (F#BEADGBE)",
}
"""The preset each string count starts from."""


def _build_preset_tunings(
    system_ids: Sequence[str],
) -> Dict[str, Dict[int, Dict[str, Tuning]]]:
    presets: Dict[str, Dict[int, Dict[str, Tuning]]] = {}
    for system_id in system_ids:
        overrides = _SYSTEM_OVERRIDES.get(system_id, {})
        by_count: Dict[int, Dict[str, Tuning]] = {}
        for count in range(STR_MIN, STR_MAX + 1):
            group = dict(_COMMON_PRESETS.get(count, {}))
            group.update(overrides.get(count, {}))
            if group:
                by_count[count] = group
        presets[system_id] = by_count
    return presets


def _build_default_tunings(
    presets: Dict[str, Dict[int, Dict[str, Tuning]]],
) -> Dict[str, Dict[int, Tuning]]:
    defaults: Dict[str, Dict[int, Tuning]] = {}
    for system_id, by_count in presets.items():
        picks: Dict[int, Tuning] = {}
        for count, name in DEFAULT_PRESET_NAMES.items():
            tuning = by_count.get(count, {}).get(name)
            if tuning is None:
                raise ValueError(
                    f'Default preset "{name}" not found for {system_id} {count}-string'
                )
            picks[count] = tuning
        defaults[system_id] = picks
    return defaults


PRESET_TUNINGS = _build_preset_tunings(["12-TET", "24-TET"])
"""Named presets by system id, then string count."""

DEFAULT_TUNINGS = _build_default_tunings(PRESET_TUNINGS)
"""Factory tuning by system id, then string count."""

PRESET_TUNING_META: Dict[str, Dict[int, Dict[str, Tuple[StringMeta, ...]]]] = {
    "12-TET": {
        5: {
            "Banjo — 5-string (g D G B D)": (
                StringMeta(index=4, start_fret=5, grey_before=True),
            ),
        },
    },
}
"""String metadata attached to particular presets (the banjo drone string)."""


def project_tuning(tuning: Sequence[str], system: TuningSystem) -> Tuning:
    """Carry 12-TET open-string names over to another system.

    Names unknown to 12-TET map to pitch class 0.
    """
    ref = TUNINGS[SYSTEM_DEFAULT]
    out: List[str] = []
    for name in tuning:
        pc12 = pc_for_name(name, ref)
        pc = project_pc_from_12tet(pc12 if pc12 is not None else 0, system.divisions)
        out.append(system.name_for_pc(pc))
    return tuple(out)


def default_tuning_for(system: TuningSystem, strings: int) -> Tuning:
    """Factory tuning of a system for a string count (empty if unsupported)."""
    authored = DEFAULT_TUNINGS.get(system.id)
    if authored is not None:
        return authored.get(strings, ())
    base = DEFAULT_TUNINGS[SYSTEM_DEFAULT].get(strings)
    return project_tuning(base, system) if base is not None else ()


def preset_map(system: TuningSystem, strings: int) -> Dict[str, Tuning]:
    """All presets offered for a system and string count, factory first."""
    presets: Dict[str, Tuning] = {FACTORY_PRESET: default_tuning_for(system, strings)}
    authored = PRESET_TUNINGS.get(system.id)
    if authored is not None:
        named = authored.get(strings, {})
    else:
        named = {
            name: project_tuning(tuning, system)
            for name, tuning in PRESET_TUNINGS[SYSTEM_DEFAULT].get(strings, {}).items()
        }
    for name, tuning in named.items():
        presets.setdefault(name, tuning)
    return presets


def preset_meta(system_id: str, strings: int, name: str) -> Tuple[StringMeta, ...]:
    return PRESET_TUNING_META.get(system_id, {}).get(strings, {}).get(name, ())


@dataclass(frozen=True)
class DisplayConfig:
    """How the board is drawn and labelled."""

    label_mode: LabelMode = LabelMode.Names
    """Text shown on note dots."""
    micro_style: MicroLabelStyle = MicroLabelStyle.Letters
    """Notation for fret numbers between 12-TET semitones."""
    accidental: Accidental = Accidental.Sharp
    """Spelling preference for names, intervals and fret accidentals."""
    show_open: bool = True
    """Draw the open-string notes."""
    open_only_in_scale: bool = False
    """Only draw open notes that belong to the scale."""
    show_fret_nums: bool = True
    dot_size: float = DEFAULT_DOT_SIZE
    lefty: bool = False
    """Mirror the board for left-handed players."""


DISPLAY_DEFAULTS = DisplayConfig()


def _valid_name(name: str, system: TuningSystem, accidental: Accidental) -> str:
    """Spell a note name in a system, falling back to pitch class 0."""
    pc = pc_for_name(name, system)
    return system.name_for_pc(pc if pc is not None else 0, accidental)


def _clamp_count(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, int(value)))


@dataclass(frozen=True)
class Config:
    """Complete board state.

    Note names (root, chord root, tuning) are stored as spellings of the
    current system; :meth:`with_accidental` and :meth:`with_system` re-spell
    them.
    """

    system_id: str
    strings: int
    frets: int
    """Selected fret count (the instrument range); see :attr:`draw_frets`."""
    tuning: Tuning
    root: str
    scale: str
    preset: str = FACTORY_PRESET
    string_meta: Tuple[StringMeta, ...] = ()
    """Per-string metadata of the preset, before the capo is applied."""
    capo: int = CAPO_DEFAULT
    show_chord: bool = False
    chord_root: str = ROOT_DEFAULT
    chord_type: str = DEFAULT_CHORD_TYPE
    hide_non_chord: bool = False
    """Only draw chord tones while a chord is shown."""
    frets_touched: bool = False
    """Whether the fret count was chosen explicitly (kept across systems)."""
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @property
    def system(self) -> TuningSystem:
        system = get_system(self.system_id)
        if system is None:
            raise ValueError(f"Unknown tuning system: {self.system_id}")
        return system

    @property
    def divisions(self) -> int:
        return self.system.divisions

    @property
    def draw_frets(self) -> int:
        """Frets actually drawn, scaled so the board spans the selected range."""
        return scaled_draw_frets(self.frets, self.divisions)

    @property
    def root_pc(self) -> int:
        pc = pc_for_name(self.root, self.system)
        return pc if pc is not None else 0

    @property
    def chord_root_pc(self) -> int:
        pc = pc_for_name(self.chord_root, self.system)
        return pc if pc is not None else 0

    @property
    def intervals(self) -> Tuple[int, ...]:
        return resolve_intervals(self.scale, self.system)

    @property
    def chord_pcs(self) -> Optional[FrozenSet[int]]:
        """Chord pitch classes, or None when no chord is shown."""
        if not self.show_chord:
            return None
        return build_chord_pcs_from_pc(
            self.chord_root_pc, self.chord_type, self.divisions
        )

    @property
    def effective_string_meta(self) -> Tuple[StringMeta, ...]:
        return apply_capo(self.strings, self.string_meta, self.capo)

    @property
    def note_names(self) -> List[str]:
        return system_note_names(self.system, self.display.accidental)

    def with_system(self, system_id: str) -> Config:
        """Switch temperament.

        The tuning resets to the new system's factory tuning, the fret count is
        rescaled unless it was set explicitly, and the scale, chord type and
        note names are re-resolved so they remain valid.
        """
        system = get_system(system_id)
        if system is None:
            raise ValueError(f"Unknown tuning system: {system_id}")
        old_divisions = self.divisions
        accidental = self.display.accidental
        frets = (
            self.frets
            if self.frets_touched
            else reselect_frets(self.frets, old_divisions, system.divisions)
        )
        scale = self.scale
        if find_scale(scale, system) is None:
            scales = scales_for_system(system)
            scale = scales[0].label if scales else ""
        return replace(
            self,
            system_id=system.id,
            frets=frets,
            tuning=default_tuning_for(system, self.strings),
            preset=FACTORY_PRESET,
            string_meta=(),
            root=_valid_name(self.root, system, accidental),
            scale=scale,
            chord_root=_valid_name(self.chord_root, system, accidental),
            chord_type=coerce_chord_type(self.chord_type, system.divisions),
        )

    def with_strings(self, strings: int) -> Config:
        """Change the string count, keeping a customized tuning where possible.

        A factory tuning is swapped for the factory tuning of the new count. A
        custom tuning is truncated, or extended with the new count's factory
        strings.
        """
        strings = _clamp_count(strings, STR_MIN, STR_MAX)
        system = self.system
        target = default_tuning_for(system, strings)
        if self.tuning == default_tuning_for(system, len(self.tuning)):
            tuning = target
        elif strings <= len(self.tuning):
            tuning = self.tuning[:strings]
        else:
            tuning = self.tuning + target[len(self.tuning) : strings]
        return replace(
            self,
            strings=strings,
            tuning=tuning,
            string_meta=tuple(m for m in self.string_meta if m.index < strings),
        )

    def with_frets(self, frets: int) -> Config:
        return replace(
            self,
            frets=_clamp_count(frets, FRETS_MIN, FRETS_MAX),
            frets_touched=True,
        )

    def with_tuning(
        self,
        tuning: Sequence[str],
        string_meta: Sequence[StringMeta] = (),
        preset: str = "",
    ) -> Config:
        return replace(
            self,
            tuning=tuple(tuning),
            strings=len(tuning),
            string_meta=tuple(string_meta),
            preset=preset,
        )

    def with_preset(self, name: str) -> Config:
        """Load a named preset (and its string metadata) for the current strings."""
        presets = preset_map(self.system, self.strings)
        if name not in presets:
            raise ValueError(f"Unknown preset for {self.system_id}: {name}")
        return replace(
            self,
            tuning=presets[name],
            string_meta=preset_meta(self.system_id, self.strings, name),
            preset=name,
        )

    def with_root(self, root: str) -> Config:
        return replace(
            self, root=_valid_name(root, self.system, self.display.accidental)
        )

    def with_scale(self, scale: str) -> Config:
        if find_scale(scale, self.system) is None:
            raise ValueError(f"Unknown scale for {self.system_id}: {scale}")
        return replace(self, scale=scale)

    def with_chord(
        self,
        chord_root: Optional[str] = None,
        chord_type: Optional[str] = None,
        show: bool = True,
        hide_non_chord: Optional[bool] = None,
    ) -> Config:
        system = self.system
        root = self.chord_root if chord_root is None else chord_root
        ctype = self.chord_type if chord_type is None else chord_type
        return replace(
            self,
            chord_root=_valid_name(root, system, self.display.accidental),
            chord_type=coerce_chord_type(ctype, system.divisions),
            show_chord=show,
            hide_non_chord=(
                self.hide_non_chord if hide_non_chord is None else hide_non_chord
            ),
        )

    def with_capo(self, capo: int) -> Config:
        return replace(self, capo=max(0, int(capo)))

    def toggle_capo_at(self, fret: int) -> Config:
        """Place the capo at ``fret``, or remove it if it is already there."""
        return self.with_capo(CAPO_DEFAULT if self.capo == fret else fret)

    def with_accidental(self, accidental: Accidental) -> Config:
        """Change spelling preference and re-spell every stored note name."""
        system = self.system
        return replace(
            self,
            display=replace(self.display, accidental=accidental),
            root=_valid_name(self.root, system, accidental),
            chord_root=_valid_name(self.chord_root, system, accidental),
            tuning=tuple(_valid_name(n, system, accidental) for n in self.tuning),
        )

    def with_display(self, **changes: object) -> Config:
        return replace(self, display=replace(self.display, **changes))

    def with_random_scale(self, rng: Optional[Random] = None) -> Config:
        """Pick a random root and scale of the current system."""
        scales = scales_for_system(self.system)
        picked = pick_random_scale(self.note_names, scales, rng)
        if picked is None:
            return self
        root, scale = picked
        return replace(self, root=root, scale=scale)


def init_config(
    system_id: str = SYSTEM_DEFAULT,
    strings: int = STR_FACTORY,
    frets: Optional[int] = None,
) -> Config:
    """Initialize a factory configuration.

    Args:
        system_id: Tuning system id such as ``"12-TET"`` or ``"19-TET"``.
        strings: String count, clamped into the supported range.
        frets: Selected fret count; defaults to the system's factory count.

    Returns:
        A Config with the factory tuning, root C (or pitch class 0), the
        system's first scale and default display settings.
    """
    system = get_system(system_id)
    if system is None:
        raise ValueError(f"Unknown tuning system: {system_id}")
    strings = _clamp_count(strings, STR_MIN, STR_MAX)
    scales = scales_for_system(system)
    fret_count = (
        factory_frets(system.divisions)
        if frets is None
        else _clamp_count(frets, FRETS_MIN, FRETS_MAX)
    )
    return Config(
        system_id=system.id,
        strings=strings,
        frets=fret_count,
        tuning=default_tuning_for(system, strings),
        root=_valid_name(ROOT_DEFAULT, system, DISPLAY_DEFAULTS.accidental),
        scale=scales[0].label if scales else "",
        chord_root=_valid_name(ROOT_DEFAULT, system, DISPLAY_DEFAULTS.accidental),
        frets_touched=frets is not None,
    )


__all__ = [
    "CAPO_DEFAULT",
    "Config",
    "DEFAULT_PRESET_NAMES",
    "DEFAULT_TUNINGS",
    "DISPLAY_DEFAULTS",
    "DisplayConfig",
    "FACTORY_PRESET",
    "FRETS_FACTORY",
    "FRETS_MAX",
    "FRETS_MIN",
    "PRESET_TUNINGS",
    "PRESET_TUNING_META",
    "ROOT_DEFAULT",
    "STR_FACTORY",
    "STR_MAX",
    "STR_MIN",
    "SYSTEM_DEFAULT",
    "Tuning",
    "default_tuning_for",
    "init_config",
    "preset_map",
    "preset_meta",
    "project_tuning",
]
