"""StaffGeometry: pure layout math for a five-line staff inside a container."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from bignote.errors import DegenerateConfig
from bignote.pitch_model import Alteration, resolve

STAFF_LINES = 5
DEFAULT_MAX_VISIBLE_LINES = 11
MIN_STROKE_WIDTH = 2.0
STROKE_DIVISOR = 200.0

# Bottom line of the treble staff. Its PitchModel line is visual index 0.
REFERENCE_MIDI = 64


class ClefKind(Enum):
    """Clef drawn at the start of the staff."""

    TREBLE = "treble"
    BASS = "bass"
    AUTO = "auto"


@dataclass(frozen=True)
class StaffConfig:
    """
    Session-wide staff settings, fixed at construction.

    Attributes:
        max_visible_lines:     Odd line-slot count (>= 5); the slots beyond
                               the five staff lines are split evenly between
                               ledger space above and below.
        clef_kind:             Only TREBLE is drawn; BASS and AUTO fall back
                               to the treble clef.
        alteration_preference: SHARP or FLAT spelling for black keys.
    """

    max_visible_lines: int = DEFAULT_MAX_VISIBLE_LINES
    clef_kind: ClefKind = ClefKind.TREBLE
    alteration_preference: Alteration = Alteration.SHARP

    def __post_init__(self) -> None:
        lines = self.max_visible_lines
        if isinstance(lines, bool) or not isinstance(lines, int):
            raise DegenerateConfig(f"max_visible_lines must be an integer, got {lines!r}.")
        if lines < STAFF_LINES or lines % 2 == 0:
            raise DegenerateConfig(
                f"max_visible_lines must be odd and at least {STAFF_LINES}, got {lines}."
            )
        if self.alteration_preference is Alteration.NATURAL:
            raise DegenerateConfig("alteration_preference must be SHARP or FLAT.")


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; y grows downward."""

    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_origin_size(cls, x: float, y: float, width: float, height: float) -> "Rect":
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def center_x(self) -> float:
        return (self.x0 + self.x1) / 2.0

    @property
    def center_y(self) -> float:
        return (self.y0 + self.y1) / 2.0


@dataclass(frozen=True)
class LineSegment:
    """Horizontal line from (x0, y) to (x1, y)."""

    x0: float
    x1: float
    y: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0


def line_height(height: float, config: StaffConfig) -> float:
    """Distance between two adjacent staff lines."""
    return height / (config.max_visible_lines - 1)


def stroke_width(height: float) -> float:
    """Pen width for staff and ledger lines; never thinner than 2 px."""
    return max(MIN_STROKE_WIDTH, height / STROKE_DIVISOR)


def staff_lines_rect(container: Rect, config: StaffConfig) -> Rect:
    """
    Sub-rectangle spanning the five staff lines edge to edge.

    The container is inset equally top and bottom by the ledger slots, so the
    result is always ``4 * line_height`` tall.
    """
    inset = line_height(container.height, config) * (config.max_visible_lines - STAFF_LINES) / 2
    return Rect(container.x0, container.y0 + inset, container.x1, container.y1 - inset)


def line_rect(
    container: Rect,
    config: StaffConfig,
    line_index: float,
    width: float | None = None,
    center_x: float | None = None,
) -> LineSegment:
    """
    Horizontal segment for a visual line index.

    Index 0 is the bottom staff line and grows upward; fractional values fall
    on spaces, negative values and values above 4 on ledger positions.
    """
    staff = staff_lines_rect(container, config)
    lh = line_height(container.height, config)
    y = staff.y1 - lh * line_index
    seg_width = staff.width if width is None else width
    cx = staff.center_x if center_x is None else center_x
    return LineSegment(cx - seg_width / 2.0, cx + seg_width / 2.0, y)


@lru_cache(maxsize=None)
def reference_line() -> float:
    """PitchModel line of the bottom treble staff line."""
    return resolve(REFERENCE_MIDI, Alteration.FLAT).line


def staff_index(line: float) -> float:
    """Convert a PitchModel line into a visual line index."""
    return line - reference_line()
