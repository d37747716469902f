"""Compositor: turns the current note into a laid-out, ordered staff scene."""

from __future__ import annotations

import logging
import math
from enum import Enum

from bignote.glyphs import Glyph, GlyphKind, GlyphSet
from bignote.pitch_model import Alteration, Pitch
from bignote.scene_models import DrawCommand, DrawGlyph, FillBackground, LayoutResult, StrokeLine
from bignote.staff_geometry import (
    STAFF_LINES,
    ClefKind,
    LineSegment,
    Rect,
    StaffConfig,
    line_height,
    line_rect,
    staff_index,
    staff_lines_rect,
    stroke_width,
)

logger = logging.getLogger(__name__)

CLEF_HEIGHT_LINES = 6.0
NOTE_HEAD_HEIGHT_LINES = 1.0
ACCIDENTAL_HEIGHT_LINES = 1.5
LEDGER_WIDTH_FRACTION = 1.0 / 7.0

# Visual alignment of accidentals against the note head, tuned by eye:
# the accidental is lifted by line_height / coefficient.
ACCIDENTAL_UP_COEFFICIENTS: dict[Alteration, float] = {
    Alteration.SHARP: 4.0,
    Alteration.FLAT: 1.5,
}


class StaffState(Enum):
    EMPTY = "empty"
    NOTE_ACTIVE = "note_active"


def ledger_indices(diff: float) -> list[int]:
    """
    Visual line indices that need a ledger line for a note at ``diff``.

    Below the staff: every integer in [diff, 0). Above it: every integer in
    [5, diff]. Notes on or between the five staff lines need none.
    """
    if diff < 0:
        return list(range(math.ceil(diff), 0))
    if diff > STAFF_LINES - 1:
        return list(range(STAFF_LINES, math.floor(diff) + 1))
    return []


def _glyph_box(glyph: Glyph, x: float, y: float, height: float) -> Rect:
    return Rect.from_origin_size(x, y, height * glyph.aspect_ratio, height)


def compute_layout(
    container: Rect,
    config: StaffConfig,
    glyphs: dict[GlyphKind, Glyph],
    note: Pitch | None,
) -> LayoutResult:
    """
    Place every staff element inside ``container``.

    Pure function of its arguments: equal inputs give equal results.

    Raises:
        ValueError: If the container has a negative width or height.
    """
    if container.width < 0 or container.height < 0:
        raise ValueError(f"Container has a negative size: {container}.")

    lh = line_height(container.height, config)
    staff = staff_lines_rect(container, config)
    staff_lines = tuple(line_rect(container, config, index) for index in range(STAFF_LINES))

    clef = _glyph_box(
        glyphs[GlyphKind.TREBLE_CLEF], staff.x0, staff.y0 - lh, lh * CLEF_HEIGHT_LINES
    )

    if note is None:
        return LayoutResult(
            container=container,
            staff_rect=staff,
            line_height=lh,
            stroke_width=stroke_width(container.height),
            staff_lines=staff_lines,
            clef=clef,
        )

    resolved = note.resolve(config.alteration_preference)
    diff = staff_index(resolved.line)

    head_glyph = glyphs[GlyphKind.NOTE_HEAD]
    head_height = lh * NOTE_HEAD_HEIGHT_LINES
    head_width = head_height * head_glyph.aspect_ratio
    note_head = _glyph_box(
        head_glyph,
        staff.center_x - head_width / 2.0,
        staff.y1 - (lh * diff + lh * 0.5),
        head_height,
    )

    accidental: Rect | None = None
    accidental_kind = GlyphKind.for_alteration(resolved.alteration)
    if accidental_kind is not None:
        acc_glyph = glyphs[accidental_kind]
        acc_height = lh * ACCIDENTAL_HEIGHT_LINES
        acc_width = acc_height * acc_glyph.aspect_ratio
        up = ACCIDENTAL_UP_COEFFICIENTS[resolved.alteration]
        accidental = _glyph_box(
            acc_glyph,
            note_head.x0 - acc_width * 2,
            note_head.y0 - lh / up,
            acc_height,
        )

    ledger_width = staff.width * LEDGER_WIDTH_FRACTION
    ledger_lines: tuple[LineSegment, ...] = tuple(
        line_rect(container, config, index, width=ledger_width, center_x=note_head.center_x)
        for index in ledger_indices(diff)
    )

    return LayoutResult(
        container=container,
        staff_rect=staff,
        line_height=lh,
        stroke_width=stroke_width(container.height),
        staff_lines=staff_lines,
        clef=clef,
        note_head=note_head,
        accidental=accidental,
        alteration=resolved.alteration,
        ledger_lines=ledger_lines,
    )


class Staff:
    """
    A treble staff showing at most one note.

    The staff is either EMPTY (staff lines and clef only) or NOTE_ACTIVE.
    ``set_note`` switches between the two synchronously; every ``layout``
    call recomputes the scene from the current note, and ``paint`` turns a
    layout into draw commands in a fixed order:

        1. background fill
        2. the five staff lines
        3. clef
        4. note head        (NOTE_ACTIVE only)
        5. ledger lines     (NOTE_ACTIVE, outside the staff only)
        6. accidental       (NOTE_ACTIVE, sharp or flat only)

    Usage:

        staff = Staff(StaffConfig(alteration_preference=Alteration.FLAT))
        staff.set_note(66)
        commands = staff.render(Rect(0, 0, 400, 300))
    """

    def __init__(self, config: StaffConfig | None = None, glyphs: GlyphSet | None = None) -> None:
        """
        Args:
            config: Staff settings; defaults to an 11-line treble staff with
                    sharp spelling.
            glyphs: Glyph source; defaults to the packaged SVG assets.
        """
        self.config = config if config is not None else StaffConfig()
        glyph_set = glyphs if glyphs is not None else GlyphSet()

        if self.config.clef_kind is not ClefKind.TREBLE:
            logger.debug(
                "Clef '%s' is drawn with the treble clef glyph.", self.config.clef_kind.value
            )

        self._glyphs: dict[GlyphKind, Glyph] = {
            kind: glyph_set.get(kind)
            for kind in (GlyphKind.TREBLE_CLEF, GlyphKind.NOTE_HEAD, GlyphKind.SHARP, GlyphKind.FLAT)
        }
        self.note: Pitch | None = None
        self.last_layout: LayoutResult | None = None

    @property
    def state(self) -> StaffState:
        return StaffState.EMPTY if self.note is None else StaffState.NOTE_ACTIVE

    def glyph(self, kind: GlyphKind) -> Glyph:
        return self._glyphs[kind]

    def set_note(self, note: Pitch | int | None) -> None:
        """
        Replace the current note; ``None`` clears it.

        Raises:
            InvalidPitch: If ``note`` is an int outside 0..127. The current
                          note is left unchanged.
        """
        if note is None or isinstance(note, Pitch):
            self.note = note
        else:
            self.note = Pitch(note)

    def layout(self, container: Rect) -> LayoutResult:
        """
        Lay out the current note inside ``container``.

        On failure the previous ``last_layout`` is kept and the error raised.
        """
        result = compute_layout(container, self.config, self._glyphs, self.note)
        self.last_layout = result
        return result

    def paint(self, layout: LayoutResult) -> list[DrawCommand]:
        """Return the draw commands for ``layout`` in paint order."""
        commands: list[DrawCommand] = [FillBackground(layout.container)]

        commands.extend(StrokeLine(segment, layout.stroke_width) for segment in layout.staff_lines)
        commands.append(DrawGlyph(self._glyphs[GlyphKind.TREBLE_CLEF], layout.clef))

        if layout.note_head is not None:
            commands.append(DrawGlyph(self._glyphs[GlyphKind.NOTE_HEAD], layout.note_head))
            commands.extend(
                StrokeLine(segment, layout.stroke_width) for segment in layout.ledger_lines
            )

        accidental_kind = GlyphKind.for_alteration(layout.alteration)
        if layout.accidental is not None and accidental_kind is not None:
            commands.append(DrawGlyph(self._glyphs[accidental_kind], layout.accidental))

        return commands

    def render(self, container: Rect) -> list[DrawCommand]:
        """Layout and paint in one pass."""
        return self.paint(self.layout(container))
