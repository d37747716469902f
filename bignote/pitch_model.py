"""PitchModel: Maps MIDI note numbers to staff lines, accidentals and names."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from bignote.errors import InvalidPitch

# ── MIDI constants ──────────────────────────────────────────────────────────
MIDI_MIN = 0
MIDI_MAX = 127
SEMITONES_PER_OCTAVE = 12
STEPS_PER_BLOCK = 24   # chromatic table covers two octaves
LINES_PER_BLOCK = 7    # staff-line units spanned by one 24-semitone block
OCTAVE_OFFSET = 2      # MIDI 60 is labelled "C3"

# Letter of the natural each semitone is spelled from (index 0 = C).
# A black key repeats the letter below it; a flat spelling reads index + 1.
NOTE_LETTERS: list[str] = ["C", "C", "D", "D", "E", "F", "F", "G", "G", "A", "A", "B"]


class Alteration(Enum):
    """Accidental used to spell a pitch on the staff."""

    NATURAL = "natural"
    SHARP = "sharp"
    FLAT = "flat"

    @property
    def symbol(self) -> str:
        """Suffix used in display names: '', '#' or 'b'."""
        return _ALTERATION_SYMBOLS[self]


_ALTERATION_SYMBOLS: dict[Alteration, str] = {
    Alteration.NATURAL: "",
    Alteration.SHARP: "#",
    Alteration.FLAT: "b",
}


@dataclass(frozen=True)
class ChromaticStep:
    """
    One semitone slot of the two-octave chromatic table.

    Attributes:
        natural_line: Staff line of the natural this step is spelled from.
                      Each diatonic step adds 0.5 (line, then space).
        is_black_key: True when the step needs an accidental.
    """

    natural_line: float
    is_black_key: bool

    def from_alteration(self, preference: Alteration) -> tuple[float, Alteration]:
        """
        Resolve this step against an alteration preference.

        White keys ignore the preference. A sharp sits on the line of the
        natural below it; a flat borrows the line of the natural above it.
        """
        if not self.is_black_key:
            return self.natural_line, Alteration.NATURAL
        if preference is Alteration.FLAT:
            return self.natural_line + 0.5, Alteration.FLAT
        return self.natural_line, Alteration.SHARP


CHROMATIC_STEPS: tuple[ChromaticStep, ...] = (
    ChromaticStep(0.0, False),  # C
    ChromaticStep(0.0, True),   # C#
    ChromaticStep(0.5, False),  # D
    ChromaticStep(0.5, True),   # D#
    ChromaticStep(1.0, False),  # E
    ChromaticStep(1.5, False),  # F
    ChromaticStep(1.5, True),   # F#
    ChromaticStep(2.0, False),  # G
    ChromaticStep(2.0, True),   # G#
    ChromaticStep(2.5, False),  # A
    ChromaticStep(2.5, True),   # A#
    ChromaticStep(3.0, False),  # B
    ChromaticStep(3.5, False),  # C
    ChromaticStep(3.5, True),   # C#
    ChromaticStep(4.0, False),  # D
    ChromaticStep(4.0, True),   # D#
    ChromaticStep(4.5, False),  # E
    ChromaticStep(5.0, False),  # F
    ChromaticStep(5.0, True),   # F#
    ChromaticStep(5.5, False),  # G
    ChromaticStep(5.5, True),   # G#
    ChromaticStep(6.0, False),  # A
    ChromaticStep(6.0, True),   # A#
    ChromaticStep(6.5, False),  # B
)


@dataclass(frozen=True)
class ResolvedPitch:
    """
    Staff spelling of a MIDI note under one alteration preference.

    Attributes:
        line:         Fractional staff line (0.0 = C of MIDI block 0).
        alteration:   Accidental actually used; may differ from the preference.
        display_name: Letter + accidental + octave, e.g. 'F#3' or 'Gb3'.
    """

    line: float
    alteration: Alteration
    display_name: str


def _check_midi_number(midi_number: int) -> int:
    if isinstance(midi_number, bool) or not isinstance(midi_number, int):
        raise InvalidPitch(f"MIDI note number must be an integer, got {midi_number!r}.")
    if not MIDI_MIN <= midi_number <= MIDI_MAX:
        raise InvalidPitch(
            f"MIDI note number {midi_number} is outside {MIDI_MIN}..{MIDI_MAX}."
        )
    return midi_number


def resolve(midi_number: int, preferred_alteration: Alteration | None = None) -> ResolvedPitch:
    """
    Resolve a MIDI note number to its staff line, accidental and display name.

    Args:
        midi_number:          0..127.
        preferred_alteration: SHARP or FLAT; ``None`` and NATURAL mean SHARP.

    Returns:
        ResolvedPitch for the note.

    Raises:
        InvalidPitch: If ``midi_number`` is not an integer in 0..127.
    """
    _check_midi_number(midi_number)
    preference = Alteration.FLAT if preferred_alteration is Alteration.FLAT else Alteration.SHARP

    octave_block, index = divmod(midi_number, STEPS_PER_BLOCK)
    line, alteration = CHROMATIC_STEPS[index].from_alteration(preference)
    line += octave_block * LINES_PER_BLOCK

    pitch_class = midi_number % SEMITONES_PER_OCTAVE
    if alteration is Alteration.FLAT:
        pitch_class += 1
    octave = midi_number // SEMITONES_PER_OCTAVE - OCTAVE_OFFSET
    display_name = f"{NOTE_LETTERS[pitch_class]}{alteration.symbol}{octave}"

    return ResolvedPitch(line=line, alteration=alteration, display_name=display_name)


_NAME_PATTERN = re.compile(r"^([A-Ga-g])([#b]?)(-?\d+)$")

# Semitone offset of each natural letter within an octave.
_LETTER_SEMITONES: dict[str, int] = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}


def parse_display_name(name: str) -> int:
    """
    Map a display name such as 'C3', 'F#3' or 'Gb3' back to its MIDI number.

    Octaves follow the same numbering as ``resolve`` (MIDI 60 = 'C3').

    Raises:
        InvalidPitch: If the name is malformed or lies outside 0..127.
    """
    match = _NAME_PATTERN.match(name.strip())
    if not match:
        raise InvalidPitch(f"Cannot parse note name '{name}'.")

    letter, symbol, octave_text = match.groups()
    semitone = _LETTER_SEMITONES[letter.upper()]
    if symbol == "#":
        semitone += 1
    elif symbol == "b":
        semitone -= 1

    midi_number = (int(octave_text) + OCTAVE_OFFSET) * SEMITONES_PER_OCTAVE + semitone
    return _check_midi_number(midi_number)


@dataclass(frozen=True)
class Pitch:
    """A single MIDI note, validated on construction."""

    midi_number: int

    def __post_init__(self) -> None:
        _check_midi_number(self.midi_number)

    @classmethod
    def from_name(cls, name: str) -> "Pitch":
        return cls(parse_display_name(name))

    def resolve(self, preferred_alteration: Alteration | None = None) -> ResolvedPitch:
        return resolve(self.midi_number, preferred_alteration)
