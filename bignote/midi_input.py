"""MIDI input: decodes note messages and tracks the currently sounding note."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Union

from bignote.compositor import Staff
from bignote.pitch_model import Pitch

logger = logging.getLogger(__name__)

# Status nibbles of channel voice messages
STATUS_NOTE_OFF = 0x80
STATUS_NOTE_ON = 0x90


@dataclass(frozen=True)
class NoteOn:
    midi_number: int
    velocity: int = 64


@dataclass(frozen=True)
class NoteOff:
    midi_number: int


NoteEvent = Union[NoteOn, NoteOff]


def decode_message(packet: bytes | bytearray | list[int]) -> NoteEvent | None:
    """
    Decode one raw MIDI packet into a note event.

    A note-on with velocity 0 is a note-off, as running-status devices send
    it. Every other message type, and packets too short to hold a note
    message, decode to ``None``.
    """
    data = bytes(packet)
    if len(data) < 3:
        return None

    status = data[0] & 0xF0
    note = data[1] & 0x7F
    velocity = data[2] & 0x7F

    if status == STATUS_NOTE_ON and velocity > 0:
        return NoteOn(note, velocity)
    if status in (STATUS_NOTE_ON, STATUS_NOTE_OFF):
        return NoteOff(note)
    return None


class NoteTracker:
    """
    Reduces a note event stream to the single note currently sounding.

    Polyphony is not modelled: the most recent note-on wins, and a note-off
    only clears the display when it releases that note.
    """

    def __init__(self) -> None:
        self.current: Pitch | None = None

    def apply(self, event: NoteEvent) -> bool:
        """Apply one event; return True when ``current`` changed."""
        previous = self.current
        if isinstance(event, NoteOn):
            self.current = Pitch(event.midi_number)
        elif self.current is not None and self.current.midi_number == event.midi_number:
            self.current = None
        return self.current != previous

    def feed(self, staff: Staff, event: NoteEvent) -> bool:
        """Apply ``event`` and push the resulting note into ``staff``."""
        changed = self.apply(event)
        if changed:
            staff.set_note(self.current)
        return changed


def score_to_events(score: Any) -> list[tuple[float, NoteEvent]]:
    """
    Flatten a music21 score into time-ordered note-on/note-off events.

    Times are in quarter notes. Chords contribute their highest pitch.
    Unpitched percussion carries no pitches and is skipped. Note-offs sort
    before note-ons that share a timestamp.
    """
    events: list[tuple[float, int, NoteEvent]] = []
    for element in score.flatten().notes:
        pitches = tuple(element.pitches)
        if not pitches:
            continue
        midi_number = max(int(p.midi) for p in pitches)

        start = float(Fraction(element.offset))
        end = start + float(Fraction(element.duration.quarterLength))
        events.append((start, 1, NoteOn(midi_number)))
        events.append((end, 0, NoteOff(midi_number)))

    events.sort(key=lambda item: (item[0], item[1]))
    return [(time, event) for time, _order, event in events]


def read_note_events(midi_path: str) -> list[tuple[float, NoteEvent]]:
    """
    Read a Standard MIDI File and return its note events.

    Raises:
        ValueError: If music21 cannot parse the file.
    """
    from music21 import converter

    try:
        score = converter.parse(midi_path, format="midi")
    except Exception as exc:
        raise ValueError(f"music21 could not parse '{midi_path}': {exc}") from exc

    events = score_to_events(score)
    logger.debug("Read %d note events from %s", len(events), midi_path)
    return events
