"""Unit tests for staff layout and paint ordering."""

import logging

import pytest

from bignote.compositor import Staff, StaffState, ledger_indices
from bignote.errors import InvalidPitch
from bignote.glyphs import Glyph, GlyphKind, GlyphSet
from bignote.pitch_model import Alteration, Pitch
from bignote.scene_models import DrawGlyph, FillBackground, StrokeLine
from bignote.staff_geometry import ClefKind, Rect, StaffConfig

CONTAINER = Rect(0, 0, 400, 300)  # line height 30, staff spans y 90..210


def _glyphs() -> GlyphSet:
    return GlyphSet.from_glyphs(
        {
            GlyphKind.TREBLE_CLEF: Glyph(GlyphKind.TREBLE_CLEF, "<path d='M0 0'/>", (0, 0, 40, 100)),
            GlyphKind.NOTE_HEAD: Glyph(GlyphKind.NOTE_HEAD, "<path d='M0 0'/>", (0, 0, 15, 10)),
            GlyphKind.SHARP: Glyph(GlyphKind.SHARP, "<path d='M0 0'/>", (0, 0, 10, 20)),
            GlyphKind.FLAT: Glyph(GlyphKind.FLAT, "<path d='M0 0'/>", (0, 0, 10, 20)),
        }
    )


def _staff(preference: Alteration = Alteration.SHARP) -> Staff:
    return Staff(StaffConfig(alteration_preference=preference), glyphs=_glyphs())


def test_new_staff_is_empty() -> None:
    staff = _staff()
    assert staff.state is StaffState.EMPTY
    assert staff.note is None


def test_set_note_switches_state() -> None:
    staff = _staff()
    staff.set_note(60)
    assert staff.state is StaffState.NOTE_ACTIVE
    assert staff.note == Pitch(60)
    staff.set_note(None)
    assert staff.state is StaffState.EMPTY


def test_set_note_invalid_keeps_previous_note() -> None:
    staff = _staff()
    staff.set_note(Pitch(64))
    with pytest.raises(InvalidPitch):
        staff.set_note(128)
    assert staff.note == Pitch(64)


def test_clef_box() -> None:
    result = _staff().layout(CONTAINER)
    assert result.clef == Rect(0, 60, 72, 240)


def test_empty_layout_has_no_note_elements() -> None:
    result = _staff().layout(CONTAINER)
    assert result.note_head is None
    assert result.accidental is None
    assert result.ledger_lines == ()
    assert len(result.staff_lines) == 5


def test_note_on_bottom_line() -> None:
    staff = _staff()
    staff.set_note(64)
    result = staff.layout(CONTAINER)
    assert result.note_head == Rect(177.5, 195, 222.5, 225)
    assert result.note_head.center_y == 210
    assert result.accidental is None
    assert result.alteration is Alteration.NATURAL


def test_sharp_accidental_box() -> None:
    staff = _staff()
    staff.set_note(66)
    result = staff.layout(CONTAINER)
    assert result.note_head == Rect(177.5, 180, 222.5, 210)
    assert result.accidental == Rect(132.5, 172.5, 155, 217.5)
    assert result.alteration is Alteration.SHARP


def test_flat_accidental_box() -> None:
    staff = _staff(Alteration.FLAT)
    staff.set_note(66)
    result = staff.layout(CONTAINER)
    assert result.note_head == Rect(177.5, 165, 222.5, 195)
    assert result.accidental == Rect(132.5, 145, 155, 190)
    assert result.alteration is Alteration.FLAT


@pytest.mark.parametrize(
    ("diff", "expected"),
    [
        (0.0, []),
        (4.0, []),
        (2.5, []),
        (-0.5, []),
        (4.5, []),
        (-1.0, [-1]),
        (-1.5, [-1]),
        (-3.0, [-3, -2, -1]),
        (5.0, [5]),
        (6.5, [5, 6]),
        (7.0, [5, 6, 7]),
    ],
)
def test_ledger_indices(diff: float, expected: list[int]) -> None:
    assert ledger_indices(diff) == expected


@pytest.mark.parametrize("diff", [-4.0, -2.0, -1.0])
def test_ledger_count_below_staff_is_abs_diff(diff: float) -> None:
    assert len(ledger_indices(diff)) == abs(diff)


def test_ledger_lines_below_staff() -> None:
    staff = _staff()
    staff.set_note(57)  # A, two lines below the staff
    result = staff.layout(CONTAINER)
    assert [line.y for line in result.ledger_lines] == [270, 240]
    for line in result.ledger_lines:
        assert line.width == pytest.approx(400 / 7)
        assert (line.x0 + line.x1) / 2 == pytest.approx(result.note_head.center_x)


def test_ledger_lines_above_staff() -> None:
    staff = _staff()
    staff.set_note(84)
    result = staff.layout(CONTAINER)
    assert [line.y for line in result.ledger_lines] == [60, 30]


def test_no_ledger_lines_inside_staff() -> None:
    staff = _staff()
    for midi_number in (64, 65, 67, 69, 71, 72, 74, 76, 77, 79):
        staff.set_note(midi_number)
        assert staff.layout(CONTAINER).ledger_lines == ()


def test_layout_is_idempotent() -> None:
    staff = _staff(Alteration.FLAT)
    staff.set_note(61)
    assert staff.layout(CONTAINER) == staff.layout(CONTAINER)


def test_negative_container_keeps_last_layout() -> None:
    staff = _staff()
    first = staff.layout(CONTAINER)
    with pytest.raises(ValueError):
        staff.layout(Rect(0, 0, 400, -10))
    assert staff.last_layout is first


def test_paint_order_empty_staff() -> None:
    staff = _staff()
    commands = staff.paint(staff.layout(CONTAINER))
    assert isinstance(commands[0], FillBackground)
    assert all(isinstance(c, StrokeLine) for c in commands[1:6])
    assert isinstance(commands[6], DrawGlyph)
    assert commands[6].glyph.kind is GlyphKind.TREBLE_CLEF
    assert len(commands) == 7


def test_paint_order_full_composition() -> None:
    staff = _staff(Alteration.FLAT)
    staff.set_note(56)  # Ab, two ledger lines below
    commands = staff.render(CONTAINER)
    kinds = [
        c.glyph.kind if isinstance(c, DrawGlyph) else type(c).__name__ for c in commands
    ]
    assert kinds == [
        "FillBackground",
        "StrokeLine",
        "StrokeLine",
        "StrokeLine",
        "StrokeLine",
        "StrokeLine",
        GlyphKind.TREBLE_CLEF,
        GlyphKind.NOTE_HEAD,
        "StrokeLine",
        "StrokeLine",
        GlyphKind.FLAT,
    ]


def test_staff_lines_use_stroke_width() -> None:
    staff = _staff()
    commands = staff.render(Rect(0, 0, 800, 1000))
    widths = {c.stroke_width for c in commands if isinstance(c, StrokeLine)}
    assert widths == {5.0}


def test_bass_clef_falls_back_to_treble() -> None:
    staff = Staff(StaffConfig(clef_kind=ClefKind.BASS), glyphs=_glyphs())
    commands = staff.render(CONTAINER)
    clefs = [c for c in commands if isinstance(c, DrawGlyph)]
    assert clefs[0].glyph.kind is GlyphKind.TREBLE_CLEF


def test_missing_assets_degrade_to_blank_glyphs(tmp_path, caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="bignote.glyphs"):
        staff = Staff(glyphs=GlyphSet(tmp_path))
    staff.set_note(66)
    result = staff.layout(CONTAINER)
    assert staff.glyph(GlyphKind.NOTE_HEAD).is_blank
    assert result.note_head is not None
    assert result.accidental is not None
    assert "Using an empty glyph" in caplog.text


def test_default_staff_loads_packaged_glyphs() -> None:
    staff = Staff()
    for kind in (GlyphKind.TREBLE_CLEF, GlyphKind.NOTE_HEAD, GlyphKind.SHARP, GlyphKind.FLAT):
        assert not staff.glyph(kind).is_blank
