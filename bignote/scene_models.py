"""Data models for layout results and draw commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from bignote.glyphs import Glyph
from bignote.pitch_model import Alteration
from bignote.staff_geometry import LineSegment, Rect

BACKGROUND_COLOR = "#ffffff"
INK_COLOR = "#000000"


@dataclass(frozen=True)
class LayoutResult:
    """Rectangles for every element of one frame, in container coordinates."""

    container: Rect
    staff_rect: Rect
    line_height: float
    stroke_width: float
    staff_lines: tuple[LineSegment, ...]
    clef: Rect
    note_head: Rect | None = None
    accidental: Rect | None = None
    alteration: Alteration = Alteration.NATURAL
    ledger_lines: tuple[LineSegment, ...] = ()


@dataclass(frozen=True)
class FillBackground:
    """Paint the whole rectangle with a solid color."""

    rect: Rect
    color: str = BACKGROUND_COLOR


@dataclass(frozen=True)
class StrokeLine:
    """Stroke a horizontal line segment."""

    segment: LineSegment
    stroke_width: float
    color: str = INK_COLOR


@dataclass(frozen=True)
class DrawGlyph:
    """Draw a glyph scaled into a box."""

    glyph: Glyph
    rect: Rect


DrawCommand = Union[FillBackground, StrokeLine, DrawGlyph]
